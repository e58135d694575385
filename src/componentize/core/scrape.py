"""Upstream page acquisition: URL validation and HTML fetch"""

from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup

from componentize.core.models import ScrapedPage
from componentize.logger import get_logger


logger = get_logger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; componentize/0.1)"
MAX_HTML_LENGTH = 1_200_000
MAX_STYLE_LENGTH = 100_000
FETCH_TIMEOUT = 15.0

PRIVATE_HOSTS = {"localhost", "127.0.0.1"}
PRIVATE_PREFIXES = ("192.168.", "10.")


def validate_url(url: str) -> None:
    """Raise ValueError unless url is a public http(s) URL."""
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise ValueError("Please enter a valid URL.") from e

    if parsed.scheme not in ("http", "https"):
        raise ValueError("Only http and https URLs are allowed.")
    hostname = (parsed.hostname or "").lower()
    if not hostname:
        raise ValueError("Please enter a valid URL.")
    if hostname in PRIVATE_HOSTS or hostname.startswith(PRIVATE_PREFIXES) or hostname.endswith(".local"):
        raise ValueError("Local and private URLs are not allowed.")


def _absolute(base: str, ref: str) -> str | None:
    try:
        return urljoin(base, ref)
    except ValueError:
        return None


def parse_page(html: str, base_url: str) -> ScrapedPage:
    """Collect stylesheets, inline styles, absolute image URLs, and a title from fetched markup."""
    soup = BeautifulSoup(html, "html.parser")

    styles: list[str] = []
    for link in soup.find_all("link", rel="stylesheet"):
        if (href := link.get("href")) and (absolute := _absolute(base_url, href)):
            styles.append(absolute)
    for style in soup.find_all("style"):
        text = style.decode_contents().strip()
        if text and len(text) < MAX_STYLE_LENGTH:
            styles.append(f"/* inline */\n{text}")

    images: list[str] = []
    for img in soup.find_all("img", src=True):
        absolute = _absolute(base_url, img["src"])
        if absolute and absolute.startswith("http"):
            images.append(absolute)

    title = soup.title.get_text().strip() if soup.title else ""
    if not title and (h1 := soup.find("h1")):
        title = h1.get_text().strip()

    return ScrapedPage(html=html, styles=styles, images=images, title=title or "Untitled")


def scrape_url(
    url: str,
    timeout: float = FETCH_TIMEOUT,
    max_length: int = MAX_HTML_LENGTH,
    ) -> ScrapedPage:
    """Fetch url and return its markup plus referenced assets. Best for static/SSR pages."""
    validate_url(url)
    try:
        response = requests.get(
            url, timeout=timeout, headers={"User-Agent": USER_AGENT}, allow_redirects=True,
        )
    except requests.RequestException as e:
        logger.warning("Fetch of %s failed: %s", url, e)
        raise RuntimeError(f"Failed to fetch: {e}") from e

    if not response.ok:
        raise RuntimeError(f"Failed to fetch: {response.status_code} {response.reason}")

    html = response.text
    if len(html) > max_length:
        raise ValueError(f"Page too large ({len(html) / 1000:.0f}KB). Try a simpler page.")

    logger.info("Fetched %s (%d chars)", response.url, len(html))
    return parse_page(html, response.url)
