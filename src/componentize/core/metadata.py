"""Component name and prop discovery in generated code"""

import re

from componentize.core.models import ComponentMetadata


FUNCTION_NAME_RE = re.compile(r'function\s+(\w+)\s*\(')
FUNCTION_PROPS_RE = re.compile(r'function\s+\w+\s*\(\s*\{\s*([^}]*)\s*\}\s*\)')
ARROW_PROPS_RE = re.compile(r'const\s+\w+\s*=\s*\(\s*\{\s*([^}]*)\s*\}\s*\)\s*=>')


def _split_props(destructured: str) -> list[str]:
    """'title, items: Item[], // note' -> ['title', 'items']"""
    props = []
    for part in destructured.split(","):
        name = part.strip().split(":")[0].strip()
        if name and not name.startswith("//"):
            props.append(name)
    return props


def parse_component_metadata(code: str) -> ComponentMetadata:
    """Return the first declared function name and its destructured props."""
    name_match = FUNCTION_NAME_RE.search(code)
    props: list[str] = []

    if m := FUNCTION_PROPS_RE.search(code):
        props = _split_props(m.group(1))
    if not props and (m := ARROW_PROPS_RE.search(code)):
        props = _split_props(m.group(1))

    return ComponentMetadata(
        name=name_match.group(1) if name_match else "Component",
        props=props,
    )
