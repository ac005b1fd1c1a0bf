"""
Render Batcher Module

Coalesces render requests so that any number of requests within one tick
produce a single render callback.

Key Features:
- Pending flag; repeated requests before the deferred call are no-ops
- Injectable scheduler (defaults to the running asyncio loop's call_soon)
- Manual flush() for hosts without an event loop and for tests
- cancel() and destroy() for teardown
"""

import asyncio
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

RenderCallback = Callable[[], None]
Scheduler = Callable[[Callable[[], None]], Any]


def asyncio_scheduler() -> Optional[Scheduler]:
    """call_soon of the running event loop, or None when no loop is running."""
    try:
        return asyncio.get_running_loop().call_soon
    except RuntimeError:
        return None


class RenderBatcher:
    """
    At most one render per tick.

    Args:
        scheduler: Callable that arranges for its argument to run later and
            returns an optional handle with cancel(). When omitted the running
            asyncio loop is used; with no loop the request waits for flush().
    """

    def __init__(self, scheduler: Optional[Scheduler] = None):
        self._scheduler = scheduler
        self._on_render: Optional[RenderCallback] = None
        self._pending = False
        self._handle: Any = None
        self._destroyed = False
        self.requests = 0
        self.renders = 0

    @property
    def is_pending(self) -> bool:
        return self._pending

    def set_on_render(self, callback: Optional[RenderCallback]) -> None:
        self._on_render = callback

    def request_render(self) -> None:
        if self._destroyed:
            return
        self.requests += 1
        if self._pending:
            return
        self._pending = True
        scheduler = self._scheduler or asyncio_scheduler()
        if scheduler is not None:
            self._handle = scheduler(self._fire)

    def flush(self) -> bool:
        """Run a pending render now. Returns True if one ran."""
        if not self._pending:
            return False
        self._cancel_handle()
        self._fire()
        return True

    def _fire(self) -> None:
        if not self._pending or self._destroyed:
            return
        self._pending = False
        self._handle = None
        if self._on_render is not None:
            self.renders += 1
            self._on_render()

    def _cancel_handle(self) -> None:
        cancel = getattr(self._handle, 'cancel', None)
        if callable(cancel):
            cancel()
        self._handle = None

    def cancel(self) -> None:
        """Drop a pending render without running it."""
        self._cancel_handle()
        self._pending = False

    def destroy(self) -> None:
        self.cancel()
        self._on_render = None
        self._destroyed = True
        logger.debug(f"Render batcher destroyed after {self.renders} renders "
                     f"for {self.requests} requests")
