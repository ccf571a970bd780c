"""Controller for the current workspace document: new, open and save."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from visualino.bridge.workspace_bridge import WorkspaceBridge
from visualino.errors import BridgeError, IoError
from visualino.services import file_io
from visualino.services.escaping import escape_characters

from .notifier import Notifier

_logger = logging.getLogger(__name__)

SAVE_CONFIRMATION_MS = 2000


class PathPrompter(Protocol):
    """Asks the user for a file path; returns None when cancelled."""

    def open_path(self) -> str | None:
        ...

    def save_path(self) -> str | None:
        ...


@dataclass(slots=True)
class DocumentIdentity:
    path: str | None = None

    @property
    def is_bound(self) -> bool:
        return bool(self.path)

    def bind(self, path: str) -> None:
        self.path = str(path)

    def clear(self) -> None:
        self.path = None


class DocumentController:
    def __init__(self, bridge: WorkspaceBridge, prompter: PathPrompter, notifier: Notifier) -> None:
        self.bridge = bridge
        self.prompter = prompter
        self.notifier = notifier
        self.identity = DocumentIdentity()

    @property
    def current_path(self) -> str | None:
        return self.identity.path

    def action_new(self) -> None:
        self.identity.clear()
        self.bridge.clear_workspace(on_error=lambda exc: self._report_bridge_error("New", exc))

    def action_open(self, path: str | None = None) -> bool:
        chosen = str(path or "").strip() or str(self.prompter.open_path() or "").strip()
        if not chosen:
            return False
        try:
            content = file_io.read_document(chosen)
        except IoError as exc:
            _logger.warning("Open failed for %s", chosen, exc_info=True)
            self.notifier.show_error("Open File", str(exc))
            return False

        self.bridge.load_workspace(
            escape_characters(content),
            on_result=lambda _res, p=chosen: self._on_loaded(p),
            on_error=lambda exc: self._report_bridge_error("Open File", exc),
        )
        return True

    def action_save(self) -> None:
        self.bridge.serialize_workspace(
            on_result=self._on_serialized,
            on_error=lambda exc: self._report_bridge_error("Save File", exc),
        )

    def _on_loaded(self, path: str) -> None:
        self.identity.bind(path)
        _logger.info("Opened %s", path)

    def _on_serialized(self, xml: str) -> None:
        target = self.identity.path
        if not target:
            target = str(self.prompter.save_path() or "").strip()
            if not target:
                return
        try:
            file_io.write_document(target, xml)
        except IoError as exc:
            _logger.warning("Save failed for %s", target, exc_info=True)
            self.notifier.show_error("Save File", str(exc))
            return
        if not self.identity.is_bound:
            self.identity.bind(target)
        _logger.info("Saved %s", target)
        self.notifier.show_status("Done saving.", SAVE_CONFIRMATION_MS)

    def _report_bridge_error(self, title: str, exc: BridgeError) -> None:
        self.notifier.show_error(title, str(exc))
