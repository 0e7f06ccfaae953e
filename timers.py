"""Single-shot cancellable timers for the cooperative event loops we run on.

Both classes expose the same two methods:

    handle = timer.schedule(delay_ms, callback)
    timer.cancel(handle)
"""

import asyncio
from typing import Any, Callable


class TkTimer:
    """Timer backed by a tkinter widget's ``after`` queue."""

    __slots__ = ("_widget",)

    def __init__(self, widget) -> None:
        self._widget = widget

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> str:
        return self._widget.after(delay_ms, callback)

    def cancel(self, handle: str) -> None:
        self._widget.after_cancel(handle)


class AsyncioTimer:
    """Timer backed by an asyncio event loop."""

    __slots__ = ("_loop",)

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay_ms / 1000, callback)

    def cancel(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()
