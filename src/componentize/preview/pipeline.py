"""Preview transform pipeline: generated source -> transpiled script -> mounted component"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from componentize.logger import get_logger
from componentize.preview.runtime import ComponentRuntime, LibrariesNotLoaded
from componentize.preview.transforms import (
    PREVIEW_SLOT,
    find_component_name,
    normalize_void_tags,
    rewrite_default_export,
    strip_export_trailer,
    strip_imports,
)


logger = get_logger(__name__)

NO_EXPORT_MESSAGE = "Generated code did not export a component."


class RenderStatus(str, Enum):
    rendered = "rendered"
    errored = "errored"
    unavailable = "unavailable"     # libraries missing; the code itself was not tried


class RenderResult(BaseModel):
    status: RenderStatus
    markup: Optional[str] = None
    error: Optional[str] = None


def prepare_source(code: str) -> str:
    """Pre-transpile passes: void-tag normalization, then export-trailer removal."""
    return strip_export_trailer(normalize_void_tags(code))


def finalize_script(transpiled: str, slot: str = PREVIEW_SLOT) -> str:
    """Post-transpile passes: import removal, then default-export rewrite onto the slot."""
    return rewrite_default_export(strip_imports(transpiled), slot)


class PreviewPipeline:
    """Runs one payload through a ComponentRuntime. Never raises for bad code."""

    def __init__(self, runtime: ComponentRuntime, slot: str = PREVIEW_SLOT):
        self.runtime = runtime
        self.slot = slot

    def render(self, code: str) -> RenderResult:
        if not self.runtime.libraries_ready():
            return RenderResult(status=RenderStatus.unavailable)

        try:
            self.runtime.clear_mount()
            self.runtime.reset_slot(self.slot)

            script = finalize_script(self.runtime.transpile(prepare_source(code)), self.slot)
            self.runtime.execute(script)

            if not self.runtime.slot_is_callable(self.slot) and (name := find_component_name(code)):
                self.runtime.assign_slot(self.slot, name)
            if not self.runtime.slot_is_callable(self.slot):
                return RenderResult(status=RenderStatus.errored, error=NO_EXPORT_MESSAGE)

            markup = self.runtime.mount(self.slot)
        except LibrariesNotLoaded:
            return RenderResult(status=RenderStatus.unavailable)
        except Exception as e:
            logger.info("Preview render failed: %s", e)
            return RenderResult(status=RenderStatus.errored, error=f"Preview error: {str(e) or type(e).__name__}")

        return RenderResult(status=RenderStatus.rendered, markup=markup)
