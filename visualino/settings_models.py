from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypedDict

SettingsPlatform = Literal["linux", "windows", "mac"]

CONFIG_FILENAME = "config.ini"


class ToolchainSettings(TypedDict):
    arduino_ide_path: str
    tmp_dir_name: str
    tmp_file_name: str
    html_index: str


def default_toolchain_settings() -> ToolchainSettings:
    return {
        "arduino_ide_path": "/usr/bin/arduino",
        "tmp_dir_name": "/tmp/visualino/",
        "tmp_file_name": "/tmp/visualino/visualino.ino",
        "html_index": "/usr/share/visualino/html/index.html",
    }


@dataclass(frozen=True, slots=True)
class Configuration:
    toolchain_path: str
    temp_dir: str
    temp_file: str
    asset_index_path: str
    platform: SettingsPlatform = "linux"
    config_file: str = ""

    @classmethod
    def from_settings(
        cls,
        values: ToolchainSettings,
        *,
        platform: SettingsPlatform = "linux",
        config_file: str = "",
    ) -> "Configuration":
        return cls(
            toolchain_path=values["arduino_ide_path"],
            temp_dir=values["tmp_dir_name"],
            temp_file=values["tmp_file_name"],
            asset_index_path=values["html_index"],
            platform=platform,
            config_file=config_file,
        )
