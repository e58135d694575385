"""Playwright-backed ComponentRuntime: a headless Chromium page is the isolated rendering surface"""

from contextlib import contextmanager
from typing import Iterator

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page, sync_playwright

from componentize.logger import get_logger
from componentize.preview.runtime import ComponentError, ComponentRuntime, LibrariesNotLoaded


logger = get_logger(__name__)

LIBRARY_URLS = (
    "https://unpkg.com/react@18/umd/react.development.js",
    "https://unpkg.com/react-dom@18/umd/react-dom.development.js",
    "https://unpkg.com/@babel/standalone/babel.min.js",
)

PREVIEW_DOCUMENT = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Component preview</title></head>
<body><div id="preview-root"></div></body>
</html>"""

# async=false keeps injected scripts executing in insertion order without blocking the page.
LOAD_SCRIPTS_JS = """urls => {
  for (const src of urls) {
    const script = document.createElement('script');
    script.src = src;
    script.crossOrigin = 'anonymous';
    script.async = false;
    document.body.appendChild(script);
  }
}"""

LIBRARIES_READY_JS = "() => Boolean(window.React && window.ReactDOM && window.Babel)"
TRANSPILE_JS = "src => Babel.transform(src, { presets: ['react'] }).code"
EXECUTE_JS = "script => { (0, eval)(script); }"
RESET_SLOT_JS = "slot => { delete window[slot]; }"
ASSIGN_SLOT_JS = """([slot, name]) => {
  if (window[slot]) return;
  try { window[slot] = (0, eval)(name); } catch (e) {}
}"""
SLOT_IS_CALLABLE_JS = "slot => typeof window[slot] === 'function'"
CLEAR_MOUNT_JS = "() => { document.getElementById('preview-root').innerHTML = ''; }"
MOUNT_JS = """slot => {
  const root = document.getElementById('preview-root');
  const container = document.createElement('div');
  container.style.padding = '1rem';
  root.appendChild(container);
  const reactRoot = ReactDOM.createRoot(container);
  ReactDOM.flushSync(() => reactRoot.render(React.createElement(window[slot])));
  return container.innerHTML;
}"""


def _js_message(error: PlaywrightError) -> str:
    """First line of a page error, without Playwright's stack trace."""
    lines = (error.message or "").strip().splitlines()
    return lines[0] if lines else "Unknown error"


class BrowserRuntime(ComponentRuntime):
    """Drives a Playwright page. Construct with an open page; call start_loading() once."""

    def __init__(self, page: Page, library_urls: tuple[str, ...] = LIBRARY_URLS):
        self.page = page
        self.library_urls = library_urls

    def start_loading(self) -> None:
        self.page.set_content(PREVIEW_DOCUMENT)
        self.page.evaluate(LOAD_SCRIPTS_JS, list(self.library_urls))
        logger.debug("Injected %d preview library script(s)", len(self.library_urls))

    def libraries_ready(self) -> bool:
        return bool(self.page.evaluate(LIBRARIES_READY_JS))

    def _call(self, script: str, arg=None):
        try:
            return self.page.evaluate(script, arg)
        except PlaywrightError as e:
            raise ComponentError(_js_message(e)) from e

    def transpile(self, source: str) -> str:
        if not self.libraries_ready():
            raise LibrariesNotLoaded("Transpiler not loaded")
        return self._call(TRANSPILE_JS, source)

    def execute(self, script: str) -> None:
        self._call(EXECUTE_JS, script)

    def reset_slot(self, slot: str) -> None:
        self._call(RESET_SLOT_JS, slot)

    def assign_slot(self, slot: str, identifier: str) -> None:
        self._call(ASSIGN_SLOT_JS, [slot, identifier])

    def slot_is_callable(self, slot: str) -> bool:
        return bool(self._call(SLOT_IS_CALLABLE_JS, slot))

    def clear_mount(self) -> None:
        self._call(CLEAR_MOUNT_JS)

    def mount(self, slot: str) -> str:
        return self._call(MOUNT_JS, slot)


@contextmanager
def open_browser_runtime(headless: bool = True) -> Iterator[BrowserRuntime]:
    """Launch Chromium, yield a BrowserRuntime on a fresh page, and close the browser on exit."""
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=headless)
        try:
            page = browser.new_page()
            yield BrowserRuntime(page)
        finally:
            browser.close()
