"""Observable set of blocked calendar dates."""

import logging
from datetime import date
from typing import Callable, Iterable, Iterator

from calendar_logic import date_range, to_calendar_date

logger = logging.getLogger(__name__)

Listener = Callable[["BlockedDateSet"], None]


class BlockedDateSet:
    """Dates marked unavailable by the user.

    Every mutation that changes the contents notifies subscribed listeners
    once, with the set itself. A failing listener does not stop the
    others; the first exception is re-raised to the caller of the
    mutation once all have run, and the change itself is kept.
    """

    __slots__ = ("_dates", "_listeners")

    def __init__(self, dates: Iterable = ()) -> None:
        self._dates: set[date] = {to_calendar_date(d) for d in dates}
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _notify(self) -> None:
        logger.debug("blocked dates changed (%d blocked)", len(self._dates))
        first_error: Exception | None = None
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as exc:
                if first_error is None:
                    first_error = exc
                else:
                    logger.error("Listener %r failed: %s", listener, exc)
        if first_error is not None:
            raise first_error

    def _apply(self, new: set[date]) -> bool:
        if new == self._dates:
            return False
        self._dates = new
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    def __contains__(self, value) -> bool:
        return to_calendar_date(value) in self._dates

    def __iter__(self) -> Iterator[date]:
        return iter(sorted(self._dates))

    def __len__(self) -> int:
        return len(self._dates)

    def __repr__(self) -> str:
        return f"BlockedDateSet({sorted(self._dates)!r})"

    def snapshot(self) -> frozenset[date]:
        """Immutable copy of the current contents."""
        return frozenset(self._dates)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def block(self, value) -> bool:
        return self._apply(self._dates | {to_calendar_date(value)})

    def unblock(self, value) -> bool:
        return self._apply(self._dates - {to_calendar_date(value)})

    def toggle(self, value) -> bool:
        """Flip one date; return True if it is blocked afterwards."""
        d = to_calendar_date(value)
        if d in self._dates:
            self._apply(self._dates - {d})
            return False
        self._apply(self._dates | {d})
        return True

    def block_range(self, start, end) -> bool:
        return self._apply(self._dates | set(date_range(start, end)))

    def unblock_range(self, start, end) -> bool:
        return self._apply(self._dates - set(date_range(start, end)))

    def clear(self) -> bool:
        return self._apply(set())

    def replace(self, dates: Iterable) -> bool:
        return self._apply({to_calendar_date(d) for d in dates})
