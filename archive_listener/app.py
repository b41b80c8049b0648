"""Main Application - HTTP listener with a tray icon for lifecycle control"""

import logging
import os
import sys
import threading
from pathlib import Path
from typing import Optional
import uvicorn

from .server import create_app, start_listener
from .settings import Config
from .tray_icon import TrayIcon

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ListenerApp:
    """Main application class"""

    def __init__(self, base_dir: str):
        self.base_dir = Path(base_dir)

        # Load configuration
        self.config_path = self.base_dir / "config.json"
        self.config = Config(str(self.config_path))
        if not self.config_path.exists():
            self.config.save()

        logging.basicConfig(level=self.config.log_level, format=LOG_FORMAT)

        # Initialize components
        self._init_components()

    def _init_components(self):
        """Initialize all components"""
        server_config = self.config.server_config()
        self.web_app = create_app(server_config)

        # log_config=None keeps uvicorn on the root logging setup
        self.server = uvicorn.Server(uvicorn.Config(
            self.web_app,
            host=server_config.host,
            port=server_config.port,
            log_config=None,
            log_level=self.config.log_level.lower()
        ))
        self._server_thread: Optional[threading.Thread] = None

        # Tray Icon
        self.tray_icon = TrayIcon(on_quit=self._quit)

    def _quit(self):
        """Stop the HTTP listener"""
        logger.info("Closing listener")
        self.server.should_exit = True
        if self._server_thread:
            self._server_thread.join(timeout=5)
            self._server_thread = None

    def run(self):
        """Run the application"""
        # Start HTTP listener
        self._server_thread = start_listener(self.server)
        if self._server_thread is None:
            logger.error(
                "HTTP listener did not start on %s:%d, is the port in use?",
                self.config.host, self.config.port
            )
            return 1
        logger.info("Listening on %s:%d", self.config.host, self.config.port)

        # Tray icon owns the main thread until Close
        self.tray_icon.run()
        logger.info("Goodbye")
        return 0


def main():
    """Entry point"""
    # Get base directory
    if getattr(sys, 'frozen', False):
        base_dir = os.path.dirname(sys.executable)
    else:
        base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    app = ListenerApp(base_dir)
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
