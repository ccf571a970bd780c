from __future__ import annotations

import os
from typing import Any

from PySide6.QtWidgets import QFileDialog

FILE_FILTER = "Files (*.*)"


def get_open_file_name(
    *,
    parent: Any | None,
    caption: str,
    directory: str = "",
    file_filter: str = FILE_FILTER,
) -> tuple[str, str]:
    path, selected_filter = QFileDialog.getOpenFileName(parent, caption, directory, file_filter)
    return str(path or ""), str(selected_filter or "")


def get_save_file_name(
    *,
    parent: Any | None,
    caption: str,
    directory: str = "",
    file_filter: str = FILE_FILTER,
) -> tuple[str, str]:
    path, selected_filter = QFileDialog.getSaveFileName(parent, caption, directory, file_filter)
    return str(path or ""), str(selected_filter or "")


class FileDialogPrompter:
    """Native file dialogs for DocumentController; remembers the last folder."""

    def __init__(self, parent: Any | None = None, *, directory: str = "") -> None:
        self.parent = parent
        self.directory = str(directory or "")

    def open_path(self) -> str | None:
        path, _ = get_open_file_name(parent=self.parent, caption="Open File", directory=self.directory)
        return self._remember(path)

    def save_path(self) -> str | None:
        path, _ = get_save_file_name(parent=self.parent, caption="Save File", directory=self.directory)
        return self._remember(path)

    def _remember(self, path: str) -> str | None:
        if not path:
            return None
        self.directory = os.path.dirname(path)
        return path
