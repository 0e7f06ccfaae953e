"""System-tray icon setup via pystray."""

from typing import Callable

import pystray
from PIL import Image
from pystray import MenuItem, Menu


def create_tray(
    icon_image: Image.Image,
    title: str,
    on_block_today: Callable[[], None],
    on_unblock_today: Callable[[], None],
    on_exit: Callable[[], None],
    on_export: Callable[[], None] | None = None,
    on_backup: Callable[[], None] | None = None,
    on_restore: Callable[[], None] | None = None,
) -> pystray.Icon:
    """Build and return a pystray Icon (not yet started)."""
    items: list[MenuItem | Menu] = [
        MenuItem("Block today", lambda _icon, _item: on_block_today(), default=True),
        MenuItem("Unblock today", lambda _icon, _item: on_unblock_today()),
    ]
    if on_export is not None:
        items.append(MenuItem("Export availability (.ics)",
                              lambda _icon, _item: on_export()))
    if on_backup is not None:
        items.append(MenuItem("Back up blocked dates", lambda _icon, _item: on_backup()))
    if on_restore is not None:
        items.append(MenuItem("Restore from backup", lambda _icon, _item: on_restore()))
    items.append(Menu.SEPARATOR)
    items.append(MenuItem("Exit", lambda _icon, _item: on_exit()))
    return pystray.Icon("availability-calendar", icon_image, title, Menu(*items))
