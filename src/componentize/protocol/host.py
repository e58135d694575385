"""Host side of the preview protocol: keeps the latest code and (re)sends it to its surface"""

from typing import Optional

from componentize.logger import get_logger
from componentize.protocol.channel import Endpoint, MessageEvent
from componentize.protocol.loop import EventLoop
from componentize.protocol.messages import MessageType, PreviewMessage


logger = get_logger(__name__)

# A surface load may race the surface's own readiness polling, so one send is not enough.
LOAD_RESEND_DELAYS_MS = (0, 200, 600)


class PreviewHost:

    def __init__(
        self,
        endpoint: Endpoint,
        loop: EventLoop,
        resend_delays_ms: tuple[int, ...] = LOAD_RESEND_DELAYS_MS,
        ):
        self.endpoint = endpoint
        self.loop = loop
        self.resend_delays_ms = resend_delays_ms
        self.latest_code: Optional[str] = None
        self.ready_signals = 0
        endpoint.listen(self._on_message)

    @property
    def sends(self) -> int:
        return sum(1 for m in self.endpoint.sent if m.type is MessageType.code)

    def set_code(self, code: str) -> None:
        """Replace the latest code (never queued) and send it."""
        self.latest_code = code
        self.send()

    def send(self) -> None:
        if self.latest_code is None:
            return
        self.endpoint.post(PreviewMessage.code_payload(self.latest_code))

    def on_surface_loaded(self) -> None:
        """Surface document finished loading: send now and again on the resend schedule."""
        for delay in self.resend_delays_ms:
            if delay <= 0:
                self.send()
            else:
                self.loop.call_later(delay, self.send)

    def _on_message(self, event: MessageEvent) -> None:
        if event.data.type is not MessageType.ready:
            return
        if event.source is not self.endpoint.peer:
            logger.debug("Ignoring READY from foreign endpoint %r", event.source)
            return
        self.ready_signals += 1
        self.send()
