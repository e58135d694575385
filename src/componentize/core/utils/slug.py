"""Slug and identifier helpers for sections"""

import re


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def section_id(index: int, label: str) -> str:
    """Run-scoped section id from candidate position and label, e.g. 'section-3-pricing'."""
    return f"section-{index}-{slugify(label)}"
