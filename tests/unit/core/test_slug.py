"""Unit tests for core/utils/slug.py"""

import pytest

from componentize.core.utils.slug import section_id, slugify


@pytest.mark.parametrize("text,expected", [
    ("Hello World", "hello-world"),
    ("Call to Action", "call-to-action"),
    ("  leading and trailing  ", "leading-and-trailing"),
    ("Special! Ch@rs#", "special-chrs"),
    ("", ""),
])
def test_slugify_basic(text, expected):
    assert slugify(text) == expected


def test_section_id_combines_index_and_label():
    assert section_id(3, "Pricing") == "section-3-pricing"
    assert section_id(0, "Our Story") == "section-0-our-story"
