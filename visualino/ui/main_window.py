"""Main window: Blockly editor, toolchain log and the File/Sketch actions."""

from __future__ import annotations

import logging

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QMainWindow, QMessageBox, QSplitter

from visualino.controllers.document_controller import DocumentController
from visualino.controllers.toolchain_controller import ToolchainController
from visualino.process.process_runner import ProcessRunner, RunnerState
from visualino.settings_models import Configuration
from visualino.ui.dialogs.file_dialog_bridge import FileDialogPrompter
from visualino.ui.widgets.blockly_view import BlocklyView
from visualino.ui.widgets.log_panel import LogPanel

_logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    APP_NAME = "Visualino"

    def __init__(self, config: Configuration, parent=None):
        super().__init__(parent)
        self.config = config
        self.setWindowTitle(self.APP_NAME)
        self.resize(1200, 800)

        self.blockly_view = BlocklyView(self)
        self.log_panel = LogPanel(self)
        self.runner = ProcessRunner(self)

        splitter = QSplitter(Qt.Vertical, self)
        splitter.addWidget(self.blockly_view)
        splitter.addWidget(self.log_panel)
        splitter.setChildrenCollapsible(False)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 0)
        splitter.setSizes([620, 180])
        self.setCentralWidget(splitter)

        bridge = self.blockly_view.bridge
        self.documents = DocumentController(bridge, FileDialogPrompter(self), self)
        self.toolchain = ToolchainController(config, bridge, self.runner, self.log_panel, self)

        self._build_actions()
        self._build_menus()
        self.runner.stateChanged.connect(self._update_toolchain_actions)
        self._update_toolchain_actions(self.runner.state.value)

        self.statusBar()
        self.blockly_view.load_index(config.asset_index_path)

    # Notifier

    def show_error(self, title: str, message: str) -> None:
        QMessageBox.warning(self, title, message)

    def show_status(self, message: str, timeout_ms: int = 0) -> None:
        self.statusBar().showMessage(message, int(timeout_ms))

    def _build_actions(self) -> None:
        self.act_new = QAction("New", self)
        self.act_new.setShortcut(QKeySequence.New)
        self.act_new.triggered.connect(self.documents.action_new)

        self.act_open = QAction("Open...", self)
        self.act_open.setShortcut(QKeySequence.Open)
        self.act_open.triggered.connect(lambda _checked=False: self.documents.action_open())

        self.act_save = QAction("Save", self)
        self.act_save.setShortcut(QKeySequence.Save)
        self.act_save.triggered.connect(self.documents.action_save)

        self.act_verify = QAction("Verify", self)
        self.act_verify.setShortcut("Ctrl+R")
        self.act_verify.triggered.connect(self.toolchain.verify)

        self.act_upload = QAction("Upload", self)
        self.act_upload.setShortcut("Ctrl+U")
        self.act_upload.triggered.connect(self.toolchain.upload)

        self.act_stop = QAction("Stop", self)
        self.act_stop.triggered.connect(self._stop_clicked)

        self.act_quit = QAction("Quit", self)
        self.act_quit.setShortcut(QKeySequence.Quit)
        self.act_quit.triggered.connect(self.close)

    def _build_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        file_menu.addAction(self.act_new)
        file_menu.addAction(self.act_open)
        file_menu.addAction(self.act_save)
        file_menu.addSeparator()
        file_menu.addAction(self.act_quit)

        sketch_menu = self.menuBar().addMenu("&Sketch")
        sketch_menu.addAction(self.act_verify)
        sketch_menu.addAction(self.act_upload)
        sketch_menu.addAction(self.act_stop)

        toolbar = self.addToolBar("Main")
        toolbar.setObjectName("MainToolbar")
        toolbar.setMovable(False)
        for action in (self.act_new, self.act_open, self.act_save):
            toolbar.addAction(action)
        toolbar.addSeparator()
        for action in (self.act_verify, self.act_upload, self.act_stop):
            toolbar.addAction(action)

    def _update_toolchain_actions(self, state: str) -> None:
        idle = state == RunnerState.IDLE.value
        self.act_verify.setEnabled(idle)
        self.act_upload.setEnabled(idle)
        self.act_stop.setEnabled(not idle)

    def _stop_clicked(self) -> None:
        if self.toolchain.cancel():
            self.show_status("Stop signal sent to the toolchain.", 2000)
        else:
            self.show_status("No toolchain process is running.", 1200)

    def closeEvent(self, event):
        if not self.runner.is_idle():
            _logger.info("Closing while the toolchain runs; killing it.")
            self.runner.shutdown()
        super().closeEvent(event)
