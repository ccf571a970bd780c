from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ToolchainAction(Enum):
    VERIFY = "verify"
    UPLOAD = "upload"

    @property
    def label(self) -> str:
        return self.value.capitalize()


_ACTION_FLAGS: dict[ToolchainAction, str] = {
    ToolchainAction.VERIFY: "--verify",
    ToolchainAction.UPLOAD: "--upload",
}


def flag_for(action: ToolchainAction) -> str:
    return _ACTION_FLAGS[action]


@dataclass(slots=True)
class ProcessInvocation:
    program: str
    args: list[str] = field(default_factory=list)
    action: ToolchainAction | None = None
    target_file: str = ""

    def command_line(self) -> str:
        return " ".join([self.program, *self.args])
