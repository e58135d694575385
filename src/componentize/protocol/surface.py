"""Isolated preview surface: readiness handshake, payload handling, and render state.

States and allowed transitions::

    uninitialized -> libraries_loading -> ready -> rendering -> rendered | errored
    rendering -> rendering        (newer payload, or a library retry in flight)
    rendered | errored -> rendering
    libraries_loading -> errored  (payload gave up waiting for libraries)
    errored -> ready              (libraries arrived after such a failure)

A payload is never executed before the runtime reports its libraries ready;
until then it waits on the RetryPolicy schedule. Only the latest payload's
outcome is kept: retries scheduled for an older payload are skipped.
Failures stay inside the surface and are shown through ``view``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from componentize.logger import get_logger
from componentize.preview.pipeline import PreviewPipeline, RenderResult, RenderStatus
from componentize.preview.retry import RetryPolicy
from componentize.preview.runtime import ComponentRuntime
from componentize.protocol.channel import Endpoint, MessageEvent
from componentize.protocol.loop import EventLoop
from componentize.protocol.messages import MessageType, PreviewMessage


logger = get_logger(__name__)

NO_CODE_MESSAGE = "No code received."
LIBRARIES_MISSING_MESSAGE = "Libraries not loaded. Try refreshing the page."


class SurfaceState(str, Enum):
    uninitialized = "uninitialized"
    libraries_loading = "libraries_loading"
    ready = "ready"
    rendering = "rendering"
    rendered = "rendered"
    errored = "errored"


TRANSITIONS: dict[SurfaceState, set[SurfaceState]] = {
    SurfaceState.uninitialized:     {SurfaceState.libraries_loading},
    SurfaceState.libraries_loading: {SurfaceState.ready, SurfaceState.errored},
    SurfaceState.ready:             {SurfaceState.rendering},
    SurfaceState.rendering:         {SurfaceState.rendering, SurfaceState.rendered, SurfaceState.errored},
    SurfaceState.rendered:          {SurfaceState.rendering},
    SurfaceState.errored:           {SurfaceState.rendering, SurfaceState.ready},
}


@dataclass
class PreviewView:
    """What the surface currently shows: an inline alert or the mounted output."""
    error: Optional[str] = None
    markup: Optional[str] = None
    root_visible: bool = True

    @property
    def visible_markup(self) -> Optional[str]:
        return self.markup if self.root_visible else None

    def show(self, markup: str) -> None:
        self.error = None
        self.markup = markup
        self.root_visible = True

    def show_error(self, message: str) -> None:
        self.error = message
        self.root_visible = False


class PreviewSurface:

    def __init__(
        self,
        endpoint: Endpoint,
        runtime: ComponentRuntime,
        loop: EventLoop,
        retry: RetryPolicy = None,
        poll_ms: int = 50,
        ready_timeout_ms: int = 30000,
        ):
        self.endpoint = endpoint
        self.runtime = runtime
        self.loop = loop
        self.retry = retry or RetryPolicy()
        self.poll_ms = poll_ms
        self.ready_timeout_ms = ready_timeout_ms
        self.pipeline = PreviewPipeline(runtime)

        self.state = SurfaceState.uninitialized
        self.history: list[SurfaceState] = [self.state]
        self.view = PreviewView()
        self._load_listeners: list[Callable[[], None]] = []
        self._load_id = 0
        self._generation = 0
        self._announced = False
        self._loading_since = 0.0

    def _transition(self, new: SurfaceState) -> None:
        if new not in TRANSITIONS[self.state]:
            raise ValueError(f"Invalid surface transition {self.state.value} -> {new.value}")
        logger.debug("Surface %s: %s -> %s", self.endpoint.name, self.state.value, new.value)
        self.state = new
        self.history.append(new)

    # --- lifecycle ---

    def on_load(self, callback: Callable[[], None]) -> None:
        """Register a callback fired (asynchronously) each time the surface document loads."""
        self._load_listeners.append(callback)

    def load(self) -> None:
        """Start listening, begin library acquisition, and poll for readiness."""
        self._transition(SurfaceState.libraries_loading)
        self._load_id += 1
        load_id = self._load_id
        self._loading_since = self.loop.now_ms()

        self.endpoint.listen(self._on_message)
        self.runtime.start_loading()
        self.loop.call_soon(lambda: self._poll_ready(load_id))
        for callback in self._load_listeners:
            self.loop.call_soon(callback)

    def reload(self) -> None:
        """Discard all surface state, as a document reload does, and load again."""
        self.endpoint.close()
        self.state = SurfaceState.uninitialized
        self.history.append(self.state)
        self.view = PreviewView()
        self._generation += 1
        self._announced = False
        self.load()

    def _poll_ready(self, load_id: int) -> None:
        if load_id != self._load_id:
            return
        if self.runtime.libraries_ready():
            self._announce_ready()
            return
        if self.loop.now_ms() - self._loading_since >= self.ready_timeout_ms:
            logger.warning("Preview libraries still missing after %d ms; giving up", self.ready_timeout_ms)
            return
        self.loop.call_later(self.poll_ms, lambda: self._poll_ready(load_id))

    def _announce_ready(self) -> None:
        if self._announced:
            return
        self._announced = True
        if self.state in (SurfaceState.libraries_loading, SurfaceState.errored):
            self._transition(SurfaceState.ready)
        self.endpoint.post(PreviewMessage.ready())

    # --- payloads ---

    def _on_message(self, event: MessageEvent) -> None:
        if event.data.type is not MessageType.code:
            return
        self._generation += 1
        code = event.data.code
        if not code:
            self._fail(NO_CODE_MESSAGE)
            return
        self._attempt(code, self._generation, 1)

    def _attempt(self, code: str, generation: int, attempt: int) -> None:
        if generation != self._generation:
            logger.debug("Payload %d superseded; dropping attempt %d", generation, attempt)
            return

        result: Optional[RenderResult] = None
        if self.runtime.libraries_ready():
            self._announce_ready()
            self._transition(SurfaceState.rendering)
            result = self.pipeline.render(code)

        if result is None or result.status is RenderStatus.unavailable:
            self._retry_or_fail(code, generation, attempt)
            return
        self._apply(result)

    def _retry_or_fail(self, code: str, generation: int, attempt: int) -> None:
        if self.retry.should_retry(attempt):
            delay = self.retry.delay_for(attempt)
            logger.info("Preview libraries not ready; retrying in %d ms (attempt %d)", delay, attempt + 1)
            self.loop.call_later(delay, lambda: self._attempt(code, generation, attempt + 1))
            return
        logger.warning("Preview libraries unavailable after %d attempt(s)", attempt)
        self._fail(LIBRARIES_MISSING_MESSAGE)

    def _fail(self, message: str) -> None:
        if self.state in (SurfaceState.ready, SurfaceState.rendered, SurfaceState.errored):
            self._transition(SurfaceState.rendering)
        self._transition(SurfaceState.errored)
        self.view.show_error(message)

    def _apply(self, result: RenderResult) -> None:
        if result.status is RenderStatus.rendered:
            self._transition(SurfaceState.rendered)
            self.view.show(result.markup)
        else:
            # The pipeline cleared the mount point before failing.
            self._transition(SurfaceState.errored)
            self.view.markup = None
            self.view.show_error(result.error)
