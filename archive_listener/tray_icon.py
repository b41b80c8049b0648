"""System Tray Icon - pystray controller for the listener"""

import logging
from typing import Callable, Optional
import pystray
from pystray import MenuItem as item

from .icon import create_icon_image

logger = logging.getLogger(__name__)

TRAY_TITLE = "Design Projects Archives"
TRAY_TOOLTIP = "Design Projects archives listener"


class TrayIcon:
    """System tray icon manager"""

    def __init__(
        self,
        on_quit: Optional[Callable] = None,
        tooltip: str = TRAY_TOOLTIP
    ):
        self.on_quit = on_quit
        self.tooltip = tooltip

        self._icon: Optional[pystray.Icon] = None

    def _create_menu(self) -> pystray.Menu:
        """Create the tray icon menu"""
        return pystray.Menu(
            item(TRAY_TITLE, None, enabled=False),
            pystray.Menu.SEPARATOR,
            item("Close", self._on_quit)
        )

    def _on_quit(self, icon, item):
        """Handle close menu click"""
        if self.on_quit:
            self.on_quit()
        self.stop()

    def run(self):
        """Show the tray icon and block until it is stopped"""
        if self._icon is not None:
            return

        self._icon = pystray.Icon(
            "ArchiveListener",
            create_icon_image(),
            self.tooltip,
            menu=self._create_menu()
        )
        self._icon.run()
        logger.info("Finished quitting")

    def stop(self):
        """Stop the tray icon"""
        if self._icon:
            self._icon.stop()
            self._icon = None
