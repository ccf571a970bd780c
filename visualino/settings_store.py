from __future__ import annotations

import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

from PySide6.QtCore import QSettings

from visualino.errors import ConfigError

_logger = logging.getLogger(__name__)


def merge_defaults(data: Mapping[str, Any], defaults: Mapping[str, Any]) -> dict[str, Any]:
    """Merge defaults into data without overwriting explicitly provided values."""
    merged = dict(data)
    for key, default_value in defaults.items():
        if key not in merged:
            merged[key] = deepcopy(default_value)
    return merged


def _coerce_text(value: Any) -> str:
    # IniFormat splits unquoted values on commas.
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    if value is None:
        return ""
    return str(value)


class IniSettingsStore:
    """Read-only INI key/value store with `group/key` lookups and defaults."""

    def __init__(self, path: str | Path | None, defaults: Mapping[str, Any] | None = None) -> None:
        self.path = Path(path) if path else None
        self.defaults: dict[str, Any] = deepcopy(dict(defaults or {}))
        self.data: dict[str, Any] = {}

    def load(self) -> dict[str, Any]:
        loaded: dict[str, Any] = {}
        try:
            loaded = self._read_file()
        except ConfigError as exc:
            # Keep the app usable on an unreadable settings file.
            _logger.warning("%s Falling back to defaults.", exc)
        self.data = merge_defaults(loaded, self.defaults)
        return self.data

    def _read_file(self) -> dict[str, Any]:
        if self.path is None or not self.path.exists():
            return {}
        if not self.path.is_file() or not os.access(self.path, os.R_OK):
            raise ConfigError(f"Settings file '{self.path}' is not readable.")

        settings = QSettings(str(self.path), QSettings.Format.IniFormat)
        status = settings.status()
        if status != QSettings.Status.NoError:
            raise ConfigError(f"Could not parse settings file '{self.path}' ({status.name}).")

        loaded: dict[str, Any] = {}
        for key in settings.allKeys():
            text = _coerce_text(settings.value(key)).strip()
            if text:
                loaded[str(key)] = text
        return loaded

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)
