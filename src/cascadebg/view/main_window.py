"""
Main Application Window
=======================
A minimal host page: the cascade runs as a background layer behind the
foreground content.

Why is this file needed?
------------------------
1. Layout: It stacks the CascadeBackground under the foreground widgets.
2. Lifecycle: It owns the surface registry and tears the background down when
   the window closes, so no frame is scheduled after the view is gone.
"""
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QLabel, QMainWindow, QStackedLayout, QToolBar, QWidget

from cascadebg.app.application import VISIBLE_APP_NAME
from cascadebg.config import CascadeConfig
from cascadebg.surface import SurfaceRegistry
from cascadebg.view.cascade_widget import CascadeBackground


class MainWindow(QMainWindow):
    def __init__(self, config: Optional[CascadeConfig] = None, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1200, 800)

        self.registry = SurfaceRegistry()

        # --- MAIN CONTAINER ---
        main_widget = QWidget()
        self.setCentralWidget(main_widget)

        # All layers visible at once, the current one on top
        layers = QStackedLayout(main_widget)
        layers.setStackingMode(QStackedLayout.StackingMode.StackAll)
        layers.setContentsMargins(0, 0, 0, 0)

        # --- BACKGROUND: the cascade ---
        self.background = CascadeBackground(self.registry, config=config)
        layers.addWidget(self.background)

        # --- FOREGROUND ---
        self.title_label = QLabel(VISIBLE_APP_NAME)
        self.title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.title_label.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.title_label.setStyleSheet("color: #e5e7eb; font-size: 48px; font-weight: bold;")
        layers.addWidget(self.title_label)
        layers.setCurrentWidget(self.title_label)

        # --- ACTIONS ---
        toolbar = QToolBar()
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self.act_pause = QAction("Pause", self)
        self.act_pause.setCheckable(True)
        self.act_pause.toggled.connect(self.on_pause_toggled)
        toolbar.addAction(self.act_pause)

    def on_pause_toggled(self, checked: bool) -> None:
        self.background.set_paused(checked)
        self.act_pause.setText("Resume" if checked else "Pause")

    def closeEvent(self, event) -> None:
        self.background.teardown()
        super().closeEvent(event)
