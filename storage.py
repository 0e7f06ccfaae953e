"""JSON file persistence for the blocked-date set."""

import json
import logging
import os
import tempfile
from datetime import date, datetime, timezone
from typing import Iterable

from calendar_logic import InvalidDateError, date_key, parse_date_key

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = os.path.join(os.path.expanduser("~"), ".availability-calendar-blocked.json")

SCHEMA_VERSION = 1


class BackupFormatError(ValueError):
    """Raised when backup text is not a valid blocked-dates export."""


def _payload(dates: Iterable[date]) -> dict:
    return {
        "version": SCHEMA_VERSION,
        "blockedDates": sorted(date_key(d) for d in dates),
        "lastSync": datetime.now(timezone.utc).isoformat(timespec="seconds"),
    }


def save_blocked_dates(dates: Iterable[date], path: str = DEFAULT_DATA_PATH) -> None:
    """Replace the stored set with *dates* (atomic write)."""
    payload = _payload(dates)
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=".blocked-", suffix=".json", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
            f.write("\n")
        os.replace(tmp_name, path)
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)


def load_blocked_dates(path: str = DEFAULT_DATA_PATH) -> set[date]:
    """Load the stored set; missing or unreadable files give an empty set."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return set()
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable blocked-dates file %s: %s", path, exc)
        return set()

    keys = stored.get("blockedDates") if isinstance(stored, dict) else None
    if not isinstance(keys, list):
        logger.warning("Ignoring blocked-dates file %s: no blockedDates list", path)
        return set()

    result: set[date] = set()
    for key in keys:
        try:
            result.add(parse_date_key(key))
        except InvalidDateError:
            logger.warning("Skipping malformed blocked date %r in %s", key, path)
    return result


def clear_storage(path: str = DEFAULT_DATA_PATH) -> None:
    """Remove the stored set."""
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


def export_data(dates: Iterable[date]) -> str:
    """Backup text for *dates*, in the same format as the data file."""
    return json.dumps(_payload(dates), indent=2) + "\n"


def import_data(text: str) -> set[date]:
    """Parse backup text produced by export_data.

    Unlike load_blocked_dates nothing is skipped: any problem raises
    BackupFormatError so a bad backup never half-replaces the set.
    """
    try:
        stored = json.loads(text)
    except (TypeError, json.JSONDecodeError) as exc:
        raise BackupFormatError(f"backup is not valid JSON: {exc}") from exc
    if not isinstance(stored, dict):
        raise BackupFormatError("backup must be a JSON object")
    version = stored.get("version")
    if type(version) is not int or version != SCHEMA_VERSION:
        raise BackupFormatError(f"unsupported backup version: {version!r}")
    keys = stored.get("blockedDates")
    if not isinstance(keys, list):
        raise BackupFormatError("backup has no blockedDates list")
    try:
        return {parse_date_key(key) for key in keys}
    except InvalidDateError as exc:
        raise BackupFormatError(str(exc)) from exc
