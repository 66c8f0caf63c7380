"""
Run with: python -m cascadebg.app.main
"""
from __future__ import annotations

import logging
import sys

from PySide6.QtCore import QSettings

from cascadebg.app.application import create_app
from cascadebg.config import CascadeConfig
from cascadebg.logging_config import setup_logging
from cascadebg.view.main_window import MainWindow


def main() -> int:
    """Main entry point for the application."""
    # Use logging.DEBUG to see grid recomputations
    setup_logging(level=logging.INFO)

    app = create_app()

    config = CascadeConfig.from_settings(QSettings())

    win = MainWindow(config)
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
