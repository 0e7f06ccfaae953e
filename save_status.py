"""Save-in-flight / save-confirmed feedback for the blocked-date set."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from blocked_dates import BlockedDateSet

logger = logging.getLogger(__name__)

SAVING_INDICATOR_MS = 300


class PersistenceFailure(RuntimeError):
    """The persistence write for a blocked-date mutation failed."""


@dataclass
class SaveStatus:
    is_saving: bool = False
    last_saved: datetime | None = None
    error: BaseException | None = None


def format_relative(delta: timedelta) -> str:
    """Human-readable 'time ago' text for a non-negative duration."""
    seconds = max(0, int(delta.total_seconds()))
    if seconds < 5:
        return "just now"
    for size, unit in ((86400, "day"), (3600, "hour"), (60, "minute"), (1, "second")):
        if seconds >= size:
            n = seconds // size
            return f"{n} {unit}{'' if n == 1 else 's'} ago"
    return "just now"


def _elapsed(start: datetime, end: datetime) -> timedelta:
    # Same-zone aware datetimes subtract as wall time; compare in UTC instead
    if start.tzinfo is not None and end.tzinfo is not None:
        return end.astimezone(timezone.utc) - start.astimezone(timezone.utc)
    return end - start


class SaveStatusTracker:
    """Writes the blocked-date set on every change and tracks save state.

    ``is_saving`` turns on with each mutation and is cleared
    ``delay_ms`` after the most recent successful write. A newer
    mutation cancels the clear scheduled by an older one.
    """

    def __init__(
        self,
        dates: BlockedDateSet,
        write: Callable[[frozenset], None],
        timer,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        delay_ms: int = SAVING_INDICATOR_MS,
    ) -> None:
        self.status = SaveStatus()
        self._dates = dates
        self._write = write
        self._timer = timer
        self._clock = clock
        self._delay_ms = delay_ms
        self._pending = None
        self._generation = 0
        dates.subscribe(self._on_change)

    @property
    def is_saving(self) -> bool:
        return self.status.is_saving

    @property
    def last_saved(self) -> datetime | None:
        return self.status.last_saved

    def close(self) -> None:
        """Stop observing the set; a pending clear is applied immediately."""
        self._dates.unsubscribe(self._on_change)
        if self._pending is not None:
            self._cancel_pending()
            self.status.is_saving = False

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._timer.cancel(self._pending)
            self._pending = None

    def _on_change(self, dates: BlockedDateSet) -> None:
        self._cancel_pending()
        self._generation += 1
        generation = self._generation
        self.status.is_saving = True

        snapshot = dates.snapshot()
        try:
            self._write(snapshot)
        except Exception as exc:
            self.status.error = exc
            logger.error("Saving %d blocked dates failed: %s", len(snapshot), exc)
            raise PersistenceFailure(f"could not save blocked dates: {exc}") from exc

        self.status.error = None
        self.status.last_saved = self._clock()
        logger.debug("Saved %d blocked dates", len(snapshot))
        self._pending = self._timer.schedule(
            self._delay_ms, lambda: self._finish(generation))

    def _finish(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._pending = None
        self.status.is_saving = False

    def time_since_last_save(self, now: datetime | None = None) -> str | None:
        """Relative time since the last successful save, or None."""
        if self.status.last_saved is None:
            return None
        now = now if now is not None else self._clock()
        return format_relative(_elapsed(self.status.last_saved, now))

    def describe(self, now: datetime | None = None) -> str:
        """One-line status text for tooltips and titles."""
        if self.status.error is not None:
            return "Save failed"
        if self.status.is_saving:
            return "Saving…"
        ago = self.time_since_last_save(now)
        if ago is None:
            return "Not saved yet"
        return f"Saved {ago}"
