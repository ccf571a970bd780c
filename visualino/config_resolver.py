"""Resolve the toolchain and editor paths from the platform-scoped settings file."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from PySide6.QtCore import QStandardPaths

from visualino.settings_models import (
    CONFIG_FILENAME,
    Configuration,
    SettingsPlatform,
    ToolchainSettings,
    default_toolchain_settings,
)
from visualino.settings_store import IniSettingsStore

_logger = logging.getLogger(__name__)

APP_DIR_ENV = "VISUALINO_APP_DIR"
CONFIG_FILE_ENV = "VISUALINO_CONFIG"


def platform_key(platform: str | None = None) -> SettingsPlatform:
    name = str(platform or sys.platform).lower()
    if name.startswith(("win", "cygwin", "msys")):
        return "windows"
    if name.startswith("darwin"):
        return "mac"
    return "linux"


def default_app_dir() -> Path:
    override = os.environ.get(APP_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


def normalize_path(path: str, app_dir: str | Path) -> str:
    """Join a relative path to the application directory; keep absolute paths."""
    text = str(path or "")
    if not text or os.path.isabs(text):
        return text
    return os.path.join(os.path.abspath(str(app_dir)), text)


def locate_config_file(app_dir: str | Path) -> Path:
    override = os.environ.get(CONFIG_FILE_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    located = QStandardPaths.locate(
        QStandardPaths.StandardLocation.AppDataLocation,
        CONFIG_FILENAME,
        QStandardPaths.LocateOption.LocateFile,
    )
    if located:
        return Path(located)
    # Not installed system-wide; look next to the application.
    return Path(app_dir) / CONFIG_FILENAME


class ConfigResolver:
    def __init__(
        self,
        *,
        app_dir: str | Path | None = None,
        config_file: str | Path | None = None,
        platform: str | None = None,
    ) -> None:
        self.app_dir = Path(app_dir) if app_dir is not None else default_app_dir()
        self._config_file = Path(config_file) if config_file is not None else None
        self.platform: SettingsPlatform = platform_key(platform)

    def config_file(self) -> Path:
        if self._config_file is not None:
            return self._config_file
        return locate_config_file(self.app_dir)

    def resolve(self) -> Configuration:
        config_file = self.config_file()
        defaults = default_toolchain_settings()
        store = IniSettingsStore(
            config_file,
            defaults={f"{self.platform}/{key}": value for key, value in defaults.items()},
        )
        store.load()
        if not config_file.exists():
            _logger.info("No settings file at %s; using built-in defaults.", config_file)

        values: ToolchainSettings = {
            key: normalize_path(store.get(f"{self.platform}/{key}", default), self.app_dir)
            for key, default in defaults.items()
        }  # type: ignore[assignment]
        config = Configuration.from_settings(values, platform=self.platform, config_file=str(config_file))
        _logger.debug("Resolved configuration: %s", config)
        return config
