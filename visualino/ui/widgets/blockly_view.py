# blockly_view.py
from __future__ import annotations

import logging

from PySide6.QtCore import QFile, QIODevice, Qt, QUrl
from PySide6.QtGui import QDesktopServices
from PySide6.QtWebChannel import QWebChannel
from PySide6.QtWebEngineCore import QWebEnginePage, QWebEngineScript, QWebEngineSettings
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import QVBoxLayout, QWidget

from visualino.bridge.blockly_bridge import CHANNEL_OBJECT_NAME, BlocklyBridge, page_script_source

_logger = logging.getLogger(__name__)

_QWEBCHANNEL_JS = ":/qtwebchannel/qwebchannel.js"


# ---- Open external links in system browser ----
class _BlocklyPage(QWebEnginePage):
    def acceptNavigationRequest(self, url, nav_type, is_main_frame):
        if nav_type == QWebEnginePage.NavigationType.NavigationTypeLinkClicked:
            if url.scheme() in ("http", "https"):
                QDesktopServices.openUrl(url)
            return False
        return super().acceptNavigationRequest(url, nav_type, is_main_frame)

    def javaScriptConsoleMessage(self, level, message, line_number, source_id):
        _logger.debug("js %s:%s: %s", source_id, line_number, message)


def _read_qwebchannel_js() -> str:
    handle = QFile(_QWEBCHANNEL_JS)
    if not handle.open(QIODevice.OpenModeFlag.ReadOnly):
        _logger.error("Could not read %s; the editor bridge will not connect.", _QWEBCHANNEL_JS)
        return ""
    try:
        return bytes(handle.readAll()).decode("utf-8")
    finally:
        handle.close()


class BlocklyView(QWidget):
    """
    Hosts the Blockly page in a QWebEngineView and exposes it through a
    BlocklyBridge registered on a QWebChannel. The page side of the bridge is
    injected as a user script, so the editor assets need no changes.
    """

    def __init__(self, parent=None, *, bridge: BlocklyBridge | None = None):
        super().__init__(parent)
        self.bridge = bridge or BlocklyBridge(self)

        self.web_view = QWebEngineView(self)
        self.web_view.setPage(_BlocklyPage(self.web_view))
        self.web_view.setContextMenuPolicy(Qt.NoContextMenu)

        s = self.web_view.settings()
        s.setAttribute(QWebEngineSettings.LocalContentCanAccessFileUrls, True)
        s.setAttribute(QWebEngineSettings.JavascriptEnabled, True)
        s.setAttribute(QWebEngineSettings.ShowScrollBars, False)

        # web channel
        self.channel = QWebChannel(self.web_view.page())
        self.channel.registerObject(CHANNEL_OBJECT_NAME, self.bridge)
        self.web_view.page().setWebChannel(self.channel)
        self._install_bridge_script()

        self.web_view.loadStarted.connect(self._on_load_started)
        self.web_view.loadFinished.connect(self._on_load_finished)

        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(self.web_view, 1)

    def load_index(self, index_path: str) -> None:
        _logger.info("Loading editor from %s", index_path)
        self.web_view.load(QUrl.fromLocalFile(index_path))

    def _install_bridge_script(self) -> None:
        script = QWebEngineScript()
        script.setName("visualino-bridge")
        script.setSourceCode(_read_qwebchannel_js() + "\n" + page_script_source())
        script.setInjectionPoint(QWebEngineScript.InjectionPoint.DocumentReady)
        script.setWorldId(QWebEngineScript.ScriptWorldId.MainWorld)
        script.setRunsOnSubFrames(False)
        self.web_view.page().scripts().insert(script)

    def _on_load_started(self) -> None:
        self.bridge.reset()

    def _on_load_finished(self, ok: bool) -> None:
        if not ok:
            _logger.error("Editor page failed to load: %s", self.web_view.url().toString())
