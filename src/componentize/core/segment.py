"""Page segmentation: split arbitrary HTML into labeled, independently convertible sections.

Three tiers are tried in order, each only when the previous one produced nothing:

1. semantic block elements (section, header, main, article, aside, footer)
2. heading-delimited runs of siblings (h1-h3)
3. a single whole-document section

The first tier caps the result at ``max_sections``, drops candidates whose
serialized markup is shorter than ``min_length``, and skips candidates whose
(tag, heading prefix) signature was already seen in the run. Duplicates are
skipped before serialization, and first headings come from a single walk, so
deeply nested pages stay linear.
"""

from bs4 import BeautifulSoup, Tag

from componentize.core.models import Section
from componentize.core.utils.slug import section_id
from componentize.logger import get_logger


logger = get_logger(__name__)

MAX_SECTIONS = 20
MIN_SECTION_HTML_LENGTH = 100
LABEL_MAX_LENGTH = 40
DEDUPE_HEADING_PREFIX = 20

SECTION_TAGS = ["section", "header", "main", "article", "aside", "footer"]
HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
SPLIT_HEADING_TAGS = ["h1", "h2", "h3"]

FULL_PAGE_ID = "section-0-full"
FULL_PAGE_LABEL = "Full page"

# Checked in insertion order; first keyword found wins.
LABEL_KEYWORDS: dict[str, str] = {
    "hero":        "Hero",
    "header":      "Header",
    "nav":         "Navigation",
    "main":        "Main",
    "footer":      "Footer",
    "pricing":     "Pricing",
    "testimonial": "Testimonials",
    "feature":     "Features",
    "cta":         "Call to Action",
    "about":       "About",
    "contact":     "Contact",
    "blog":        "Blog",
    "team":        "Team",
    "faq":         "FAQ",
}


def infer_label(tag_name: str, heading_text: str) -> str:
    """Map tag name + heading text to a semantic label, else the truncated heading or '<Tag> Section'."""
    haystack = f"{tag_name} {heading_text}".lower()
    for keyword, label in LABEL_KEYWORDS.items():
        if keyword in haystack:
            return label
    heading = heading_text.strip()[:LABEL_MAX_LENGTH]
    return heading or f"{tag_name.capitalize()} Section"


def _dedupe_key(tag_name: str, heading_text: str) -> tuple[str, str]:
    return tag_name, heading_text[:DEDUPE_HEADING_PREFIX]


def _heading_level(el: Tag) -> int:
    return int(el.name[1])


def _candidates(soup: BeautifulSoup) -> list[list]:
    """[element, first heading text] for every semantic block element, in document order.

    One iterative pre-order walk. Open candidates still missing a heading wait
    on a stack; the next heading inside them answers all of them at once.
    """
    candidates: list[list] = []
    waiting: list[list] = []
    stack: list[tuple[Tag, bool]] = [(soup, False)]

    while stack:
        node, leaving = stack.pop()
        if leaving:
            if waiting and waiting[-1][0] is node:
                waiting.pop()
            continue

        if node.name in SECTION_TAGS:
            entry = [node, ""]
            candidates.append(entry)
            waiting.append(entry)
            stack.append((node, True))
        elif node.name in HEADING_TAGS and waiting:
            text = node.get_text().strip()
            for entry in waiting:
                entry[1] = text
            waiting.clear()

        children = [c for c in node.children if isinstance(c, Tag)]
        stack.extend((c, False) for c in reversed(children))

    return candidates


def _semantic_sections(soup: BeautifulSoup, max_sections: int, min_length: int) -> list[Section]:
    """Tier 1: one section per semantic block element, in document order."""
    sections: list[Section] = []
    seen: set[tuple[str, str]] = set()

    for index, (el, heading) in enumerate(_candidates(soup)):
        if len(sections) >= max_sections:
            break

        tag_name = el.name.lower()
        key = _dedupe_key(tag_name, heading)
        if key in seen:
            logger.debug("Skipping duplicate <%s> candidate %d (%r)", tag_name, index, heading)
            continue

        outer_html = str(el)
        if len(outer_html) < min_length:
            continue
        seen.add(key)

        label = infer_label(tag_name, heading)
        sections.append(Section(id=section_id(index, label), label=label, html=outer_html))

    return sections


def _heading_block(heading: Tag) -> list[Tag]:
    """The heading plus following sibling elements up to the next heading of equal or higher weight."""
    level = _heading_level(heading)
    block = [heading]
    for sibling in heading.next_siblings:
        if not isinstance(sibling, Tag):
            continue
        if sibling.name in SPLIT_HEADING_TAGS and _heading_level(sibling) <= level:
            break
        block.append(sibling)
    return block


def _heading_sections(soup: BeautifulSoup, max_sections: int, min_length: int) -> list[Section]:
    """Tier 2: synthetic <div> sections spanning each h1-h3 and its trailing siblings."""
    sections: list[Section] = []

    for index, heading in enumerate(soup.find_all(SPLIT_HEADING_TAGS)):
        if len(sections) >= max_sections:
            break

        label = heading.get_text().strip()[:LABEL_MAX_LENGTH] or f"Section {index + 1}"
        block_html = "<div>" + "".join(str(el) for el in _heading_block(heading)) + "</div>"
        if len(block_html) < min_length:
            continue

        sections.append(Section(id=section_id(index, label), label=label, html=block_html))

    return sections


def _full_page_section(soup: BeautifulSoup, html: str) -> Section:
    """Tier 3: the body's inner markup, or the raw input when there is no body."""
    body = soup.body.decode_contents().strip() if soup.body else ""
    return Section(id=FULL_PAGE_ID, label=FULL_PAGE_LABEL, html=body or html)


def segment(
    html: str,
    max_sections: int = MAX_SECTIONS,
    min_length: int = MIN_SECTION_HTML_LENGTH,
    ) -> list[Section]:
    """Split an HTML document into ordered sections; never empty, never raises for str input."""
    if not html.strip():
        return [Section(id=FULL_PAGE_ID, label=FULL_PAGE_LABEL, html=html)]

    soup = BeautifulSoup(html, "html.parser")

    sections = _semantic_sections(soup, max_sections, min_length)
    if sections:
        logger.debug("Segmented %d semantic section(s)", len(sections))
        return sections

    sections = _heading_sections(soup, max_sections, min_length)
    if sections:
        logger.debug("No semantic blocks; split into %d heading section(s)", len(sections))
        return sections

    logger.debug("No semantic blocks or headings; returning full page")
    return [_full_page_section(soup, html)]
