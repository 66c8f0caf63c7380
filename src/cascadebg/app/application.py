from __future__ import annotations

import os
import sys

from PySide6.QtCore import QCoreApplication, QSettings
from PySide6.QtWidgets import QApplication

ORG_ID = "cascadebg"
APP_ID = "cascade"
ORG_DOMAIN = "cascadebg.local"

VISIBLE_APP_NAME = "Cascade"


def create_app(argv: list[str] | None = None) -> QApplication:
    """Create and configure the QApplication instance (reuses a running one)."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setOrganizationDomain(ORG_DOMAIN)
    QCoreApplication.setApplicationName(APP_ID)
    # Overrides are read from an INI file, e.g. ~/.config/cascadebg/cascade.ini
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv if argv is None else argv)

    visible_name = QCoreApplication.translate("App", VISIBLE_APP_NAME)
    app.setApplicationDisplayName(visible_name)

    return app
