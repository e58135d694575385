"""Text-transform passes applied around transpilation of generated component code.

Order matters and is fixed by ``PreviewPipeline``:

    normalize_void_tags -> strip_export_trailer -> [transpile]
    -> strip_imports -> rewrite_default_export

``find_component_name`` is the fallback used when no default export reached
the preview slot; it always reads the original, untransformed source.
"""

import re


PREVIEW_SLOT = "__previewComponent"

VOID_TAG_RE = re.compile(r'<(br|hr)\s*>', re.IGNORECASE)
EXPORT_TRAILER_RE = re.compile(r'^\s*export\s+default\s+\w+\s*;\s*$', re.MULTILINE)
IMPORT_RE = re.compile(r'^import\s+.*?;?\s*$', re.MULTILINE)
DEFAULT_EXPORT_RE = re.compile(r'export\s+default\s+')
FUNCTION_NAME_RE = re.compile(r'function\s+(\w+)\s*\(')


def normalize_void_tags(source: str) -> str:
    """'<br>' / '<HR >' -> '<br />' / '<hr />' so the markup is valid JSX."""
    return VOID_TAG_RE.sub(lambda m: f"<{m.group(1).lower()} />", source)


def strip_export_trailer(source: str) -> str:
    """Drop standalone 'export default Name;' lines."""
    return EXPORT_TRAILER_RE.sub("", source)


def strip_imports(script: str) -> str:
    """Drop import declarations; the surface provides React globally."""
    return IMPORT_RE.sub("", script)


def rewrite_default_export(script: str, slot: str = PREVIEW_SLOT) -> str:
    """'export default X' -> 'window.<slot> = X' so a plain script can publish the component."""
    return DEFAULT_EXPORT_RE.sub(f"window.{slot} = ", script)


def find_component_name(source: str) -> str | None:
    """Name of the first named function declaration, if any."""
    match = FUNCTION_NAME_RE.search(source)
    return match.group(1) if match else None
