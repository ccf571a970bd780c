"""Request/response channel to the Blockly page over QWebChannel."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from visualino.errors import BridgeError

from .workspace_bridge import ErrorCallback, ResultCallback

_logger = logging.getLogger(__name__)

CHANNEL_OBJECT_NAME = "workspaceBridge"


def page_script_source() -> str:
    return Path(__file__).with_name("bridge.js").read_text(encoding="utf-8")


@dataclass
class _PendingRequest:
    method: str
    on_result: ResultCallback | None
    on_error: ErrorCallback | None
    message: tuple[int, str, str]
    timer: QTimer | None = None
    posted: bool = False


class BlocklyBridge(QObject):
    """Correlates editor requests with page responses by request id.

    Requests made before the page reports ready are queued and posted once it
    does. A posted request that gets no answer within the timeout fails with
    BridgeError, as does every posted request when the page is reset. Queued
    requests survive a reset and go to the next page that reports ready.
    """

    requestPosted = Signal(int, str, str)  # request id, method, JSON args

    DEFAULT_TIMEOUT_MS = 5000

    def __init__(self, parent: QObject | None = None, *, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> None:
        super().__init__(parent)
        self._timeout_ms = max(0, int(timeout_ms))
        self._next_request_id = 1
        self._pending: dict[int, _PendingRequest] = {}
        self._queued: list[int] = []
        self._ready = False

    def is_ready(self) -> bool:
        return self._ready

    def pending_count(self) -> int:
        return len(self._pending)

    # WorkspaceBridge

    def generate_code(self, on_result: ResultCallback, on_error: ErrorCallback | None = None) -> None:
        self.request("generateCode", on_result=on_result, on_error=on_error)

    def serialize_workspace(self, on_result: ResultCallback, on_error: ErrorCallback | None = None) -> None:
        self.request("serializeWorkspace", on_result=on_result, on_error=on_error)

    def load_workspace(
        self,
        xml: str,
        on_result: ResultCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.request("loadWorkspace", [str(xml or "")], on_result=on_result, on_error=on_error)

    def clear_workspace(
        self,
        on_result: ResultCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.request("clearWorkspace", on_result=on_result, on_error=on_error)

    def request(
        self,
        method: str,
        args: list[Any] | None = None,
        *,
        on_result: ResultCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> int:
        request_id = self._next_request_id
        self._next_request_id += 1
        method = str(method or "")
        pending = _PendingRequest(
            method=method,
            on_result=on_result,
            on_error=on_error,
            message=(request_id, method, json.dumps(list(args or []))),
        )
        self._pending[request_id] = pending
        if self._ready:
            self._post(request_id, pending)
        else:
            self._queued.append(request_id)
        return request_id

    def reset(self, reason: str = "Editor page was reloaded.") -> None:
        """Forget the page: not ready, and every posted request fails.

        Requests still waiting in the queue were never seen by the old page
        and stay queued for the next one.
        """
        self._ready = False
        posted = [(rid, item) for rid, item in self._pending.items() if item.posted]
        for request_id, item in posted:
            del self._pending[request_id]
        for request_id, item in posted:
            self._fail(request_id, item, BridgeError(reason, method=item.method))

    # Page side

    @Slot()
    def pageReady(self) -> None:
        _logger.debug("Editor page connected to bridge")
        self._ready = True
        queued = list(self._queued)
        self._queued.clear()
        for request_id in queued:
            item = self._pending.get(request_id)
            if item is not None:
                self._post(request_id, item)

    @Slot(int, bool, str)
    def respond(self, request_id: int, ok: bool, payload: str) -> None:
        item = self._pending.pop(int(request_id), None)
        if item is None:
            _logger.debug("Dropping response for unknown request %s", request_id)
            return
        if item.timer is not None:
            item.timer.stop()
            item.timer.deleteLater()
        if not ok:
            self._fail(
                request_id,
                item,
                BridgeError(f"Editor call {item.method} failed: {payload}", method=item.method),
            )
            return
        if item.on_result is not None:
            item.on_result(str(payload or ""))

    def _post(self, request_id: int, item: _PendingRequest) -> None:
        # The answer deadline runs from the moment the page can see the request.
        if self._timeout_ms > 0:
            timer = QTimer(self)
            timer.setSingleShot(True)
            timer.timeout.connect(lambda rid=request_id: self._on_request_timeout(rid))
            timer.start(self._timeout_ms)
            item.timer = timer
        item.posted = True
        self.requestPosted.emit(*item.message)

    def _on_request_timeout(self, request_id: int) -> None:
        item = self._pending.pop(request_id, None)
        if item is None:
            return
        self._fail(
            request_id,
            item,
            BridgeError(f"Editor did not answer {item.method} in time.", method=item.method),
        )

    def _fail(self, request_id: int, item: _PendingRequest, error: BridgeError) -> None:
        if item.timer is not None:
            item.timer.stop()
            item.timer.deleteLater()
            item.timer = None
        _logger.warning("Bridge request %d failed: %s", request_id, error)
        if item.on_error is not None:
            item.on_error(error)
