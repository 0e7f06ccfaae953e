"""Entry point — glues pystray (daemon thread) with tkinter (main thread)."""

import logging
import os
import threading
import tkinter as tk
from datetime import date
from functools import partial

from blocked_dates import BlockedDateSet
from calendar_logic import build_grid
from icon_gen import create_icon_image
from ics_export import available_dates, generate_ics, write_ics
from save_status import PersistenceFailure, SaveStatusTracker
from settings import load_settings
from storage import (
    DEFAULT_DATA_PATH,
    BackupFormatError,
    export_data,
    import_data,
    load_blocked_dates,
    save_blocked_dates,
)
from timers import TkTimer
from tray_icon import create_tray

logger = logging.getLogger("availability")

REFRESH_MS = 1000
DEFAULT_EXPORT_PATH = os.path.join(os.path.expanduser("~"), "availability.ics")
DEFAULT_BACKUP_PATH = os.path.join(os.path.expanduser("~"), "availability-backup.json")


def _icon_state(tracker: SaveStatusTracker) -> str | None:
    if tracker.status.error is not None:
        return "failed"
    if tracker.is_saving:
        return "saving"
    if tracker.last_saved is not None:
        return "saved"
    return None


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings["log_level"],
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )

    data_path = settings["data_path"] or DEFAULT_DATA_PATH
    blocked = BlockedDateSet(load_blocked_dates(data_path))
    logger.info("Loaded %d blocked dates from %s", len(blocked), data_path)

    # Hidden root: only its event loop is used (timers + marshalled callbacks)
    root = tk.Tk()
    root.withdraw()
    tracker = SaveStatusTracker(blocked, partial(save_blocked_dates, path=data_path),
                                TkTimer(root))

    def mutate(action) -> None:
        try:
            action(date.today())
        except PersistenceFailure as exc:
            logger.error("%s", exc)
            tray.notify(str(exc), "Availability calendar")
        refresh()

    def export() -> None:
        today = date.today()
        grid_end = build_grid(today)[-1].date
        path = settings["export_path"] or DEFAULT_EXPORT_PATH
        try:
            content = generate_ics(available_dates(blocked, today, grid_end),
                                   settings["name"] or "Instructor", settings["email"] or None)
            write_ics(content, path)
        except (OSError, ValueError) as exc:
            logger.error("Export to %s failed: %s", path, exc)
            tray.notify(f"Export failed: {exc}", "Availability calendar")
            return
        logger.info("Exported availability to %s", path)

    def backup() -> None:
        path = settings["backup_path"] or DEFAULT_BACKUP_PATH
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(export_data(blocked))
        except OSError as exc:
            logger.error("Backup to %s failed: %s", path, exc)
            tray.notify(f"Backup failed: {exc}", "Availability calendar")
            return
        logger.info("Backed up %d blocked dates to %s", len(blocked), path)

    def restore() -> None:
        path = settings["backup_path"] or DEFAULT_BACKUP_PATH
        try:
            with open(path, "r", encoding="utf-8") as f:
                dates = import_data(f.read())
        except (OSError, BackupFormatError) as exc:
            logger.error("Restore from %s failed: %s", path, exc)
            tray.notify(f"Restore failed: {exc}", "Availability calendar")
            return
        mutate(lambda _today: blocked.replace(dates))
        logger.info("Restored %d blocked dates from %s", len(dates), path)

    shown = {}

    def refresh() -> None:
        tray.title = f"Availability – {tracker.describe()}"
        key = (_icon_state(tracker), date.today())
        if shown.get("icon") != key:
            shown["icon"] = key
            tray.icon = create_icon_image(key[0], key[1])

    def tick() -> None:
        refresh()
        root.after(REFRESH_MS, tick)

    # Callbacks marshalled onto the tkinter main thread
    def on_exit() -> None:
        def _quit() -> None:
            tracker.close()
            tray.stop()
            root.destroy()
        root.after(0, _quit)

    tray = create_tray(
        create_icon_image(_icon_state(tracker)),
        f"Availability – {tracker.describe()}",
        on_block_today=lambda: root.after(0, mutate, blocked.block),
        on_unblock_today=lambda: root.after(0, mutate, blocked.unblock),
        on_exit=on_exit,
        on_export=lambda: root.after(0, export),
        on_backup=lambda: root.after(0, backup),
        on_restore=lambda: root.after(0, restore),
    )

    # Run pystray in a daemon thread so it doesn't block tkinter
    tray_thread = threading.Thread(target=tray.run, daemon=True)
    tray_thread.start()

    root.after(REFRESH_MS, tick)
    root.mainloop()


if __name__ == "__main__":
    main()
