"""Ordered message channel between two endpoints on one EventLoop.

Messages cross as encoded JSON (no shared objects). Delivery is asynchronous
and FIFO per channel. An endpoint with no listener drops what it receives,
like a document whose message handler is not installed yet.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from componentize.logger import get_logger
from componentize.protocol.loop import EventLoop
from componentize.protocol.messages import PreviewMessage


logger = get_logger(__name__)


@dataclass(frozen=True)
class MessageEvent:
    data: PreviewMessage
    source: "Endpoint"


class Endpoint:

    def __init__(self, name: str, loop: EventLoop):
        self.name = name
        self._loop = loop
        self._peer: Optional["Endpoint"] = None
        self._handler: Optional[Callable[[MessageEvent], None]] = None
        self.sent: list[PreviewMessage] = []

    def __repr__(self) -> str:
        return f"Endpoint({self.name!r})"

    @property
    def peer(self) -> Optional["Endpoint"]:
        return self._peer

    @property
    def listening(self) -> bool:
        return self._handler is not None

    def listen(self, handler: Callable[[MessageEvent], None]) -> None:
        self._handler = handler

    def close(self) -> None:
        self._handler = None

    def post(self, message: PreviewMessage) -> None:
        if self._peer is None:
            raise ValueError(f"{self!r} is not connected")
        wire = message.encode()
        peer = self._peer
        self.sent.append(message)
        self._loop.call_soon(lambda: peer._deliver(wire, self))

    def _deliver(self, wire: str, source: "Endpoint") -> None:
        if self._handler is None:
            logger.debug("%r not listening; dropped message from %r", self, source)
            return
        self._handler(MessageEvent(data=PreviewMessage.decode(wire), source=source))


def open_channel(loop: EventLoop, host_name: str = "host", surface_name: str = "surface") -> tuple[Endpoint, Endpoint]:
    """Return connected (host_endpoint, surface_endpoint)."""
    host, surface = Endpoint(host_name, loop), Endpoint(surface_name, loop)
    host._peer, surface._peer = surface, host
    return host, surface
