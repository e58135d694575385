"""One complete preview run: host + channel + surface over a single loop"""

from typing import Optional

from pydantic import BaseModel

from componentize.config import Settings
from componentize.preview.retry import RetryPolicy
from componentize.preview.runtime import ComponentRuntime
from componentize.protocol.channel import open_channel
from componentize.protocol.host import PreviewHost
from componentize.protocol.loop import EventLoop
from componentize.protocol.surface import PreviewSurface, SurfaceState


class PreviewOutcome(BaseModel):
    state: SurfaceState
    error: Optional[str] = None
    markup: Optional[str] = None
    sends: int = 0
    ready_signals: int = 0


def build_session(
    runtime: ComponentRuntime,
    settings: Settings,
    loop: EventLoop,
    ) -> tuple[PreviewHost, PreviewSurface]:
    """Connect a host and a surface; the host resends its code whenever the surface loads."""
    host_end, surface_end = open_channel(loop)
    surface = PreviewSurface(
        surface_end, runtime, loop,
        retry=RetryPolicy.from_settings(settings),
        poll_ms=settings.ready_poll_ms,
        ready_timeout_ms=settings.ready_timeout_ms,
    )
    host = PreviewHost(host_end, loop)
    surface.on_load(host.on_surface_loaded)
    return host, surface


def run_preview(
    code: str,
    runtime: ComponentRuntime,
    settings: Settings = None,
    loop: EventLoop = None,
    ) -> PreviewOutcome:
    """Send code before the surface is listening, load the surface, and settle.

    The first send is dropped on purpose: rendering relies on the load-time
    resends and the READY handshake, as it does when a preview frame mounts.
    """
    settings = settings or Settings()
    loop = loop or EventLoop()
    host, surface = build_session(runtime, settings, loop)

    host.set_code(code)
    loop.run_until_idle()
    surface.load()
    loop.run_until_idle()

    return PreviewOutcome(
        state=surface.state,
        error=surface.view.error,
        markup=surface.view.visible_markup,
        sends=host.sends,
        ready_signals=host.ready_signals,
    )
