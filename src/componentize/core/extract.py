"""Code extraction from raw model output"""

import re


FENCE_RE = re.compile(r'```(?:tsx?|jsx?|javascript)?\s*([\s\S]*?)```')


def extract_code(raw: str) -> str:
    """Return the trimmed interior of the first fenced block, else the trimmed input.

    Only the first fence is honored. An empty fence falls back to the trimmed
    input, so the result is empty only when the input is blank. Idempotent.
    """
    text = raw.strip()
    match = FENCE_RE.search(text)
    if match:
        inner = match.group(1).strip()
        if inner:
            return inner
    return text
