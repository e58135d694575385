"""Unit tests for preview/browser.py, driven through a stub Playwright page"""

import pytest
from playwright.sync_api import Error as PlaywrightError

from componentize.preview.browser import (
    ASSIGN_SLOT_JS,
    EXECUTE_JS,
    LIBRARIES_READY_JS,
    LIBRARY_URLS,
    LOAD_SCRIPTS_JS,
    MOUNT_JS,
    PREVIEW_DOCUMENT,
    SLOT_IS_CALLABLE_JS,
    TRANSPILE_JS,
    BrowserRuntime,
    _js_message,
)
from componentize.preview.pipeline import PreviewPipeline, RenderStatus
from componentize.preview.runtime import ComponentError, LibrariesNotLoaded
from componentize.preview.transforms import PREVIEW_SLOT


class StubPage:
    """Records evaluate calls; answers per script from `results`, raises per script from `errors`."""

    def __init__(self, results: dict = None, errors: dict = None):
        self.results = {LIBRARIES_READY_JS: True, **(results or {})}
        self.errors = errors or {}
        self.calls: list[tuple[str, object]] = []
        self.content = None

    def set_content(self, html: str) -> None:
        self.content = html

    def evaluate(self, expression: str, arg=None):
        self.calls.append((expression, arg))
        if expression in self.errors:
            raise PlaywrightError(self.errors[expression])
        result = self.results.get(expression)
        return result(arg) if callable(result) else result

    def args_for(self, expression: str) -> list:
        return [arg for script, arg in self.calls if script == expression]


@pytest.fixture(name="page")
def page_fixture():
    return StubPage()


# --- error messages ---

def test_js_message_keeps_first_line():
    error = PlaywrightError("SyntaxError: Unexpected token '<'\n    at eval (<anonymous>)\n    at x")
    assert _js_message(error) == "SyntaxError: Unexpected token '<'"


def test_js_message_default():
    assert _js_message(PlaywrightError("")) == "Unknown error"


# --- loading ---

def test_start_loading_sets_document_and_injects_libraries(page):
    BrowserRuntime(page).start_loading()
    assert page.content == PREVIEW_DOCUMENT
    assert page.args_for(LOAD_SCRIPTS_JS) == [list(LIBRARY_URLS)]


def test_libraries_ready_reflects_page(page):
    page.results[LIBRARIES_READY_JS] = None
    assert BrowserRuntime(page).libraries_ready() is False


# --- calls ---

def test_transpile_requires_libraries(page):
    page.results[LIBRARIES_READY_JS] = False
    with pytest.raises(LibrariesNotLoaded):
        BrowserRuntime(page).transpile("const a = 1;")
    assert page.args_for(TRANSPILE_JS) == []


def test_transpile_passes_source(page):
    page.results[TRANSPILE_JS] = lambda src: f"/*compiled*/{src}"
    assert BrowserRuntime(page).transpile("const a = 1;") == "/*compiled*/const a = 1;"
    assert page.args_for(TRANSPILE_JS) == ["const a = 1;"]


def test_page_errors_become_component_errors(page):
    page.errors[EXECUTE_JS] = "ReferenceError: foo is not defined\n    at eval"
    with pytest.raises(ComponentError, match="^ReferenceError: foo is not defined$") as info:
        BrowserRuntime(page).execute("foo()")
    assert isinstance(info.value.__cause__, PlaywrightError)


def test_assign_slot_passes_slot_and_identifier(page):
    BrowserRuntime(page).assign_slot(PREVIEW_SLOT, "Card")
    assert page.args_for(ASSIGN_SLOT_JS) == [[PREVIEW_SLOT, "Card"]]


def test_mount_returns_markup(page):
    page.results[MOUNT_JS] = "<div>Hi</div>"
    assert BrowserRuntime(page).mount(PREVIEW_SLOT) == "<div>Hi</div>"
    assert page.args_for(MOUNT_JS) == [PREVIEW_SLOT]


# --- through the pipeline ---

def test_pipeline_renders_through_browser_runtime(page):
    page.results[TRANSPILE_JS] = lambda src: src
    page.results[SLOT_IS_CALLABLE_JS] = True
    page.results[MOUNT_JS] = "<div>Hi</div>"
    result = PreviewPipeline(BrowserRuntime(page)).render(
        "export default function Hello() { return <div>Hi</div>; }"
    )
    assert result.status is RenderStatus.rendered
    assert result.markup == "<div>Hi</div>"
    assert page.args_for(EXECUTE_JS) == [f"window.{PREVIEW_SLOT} = function Hello() {{ return <div>Hi</div>; }}"]


def test_pipeline_reports_transpile_failure(page):
    page.errors[TRANSPILE_JS] = "Error: unknown: Unterminated JSX contents. (1:40)\nstack"
    result = PreviewPipeline(BrowserRuntime(page)).render("export default function A() { return <div>; }")
    assert result.status is RenderStatus.errored
    assert result.error == "Preview error: Error: unknown: Unterminated JSX contents. (1:40)"
