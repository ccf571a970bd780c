from __future__ import annotations

from pathlib import Path

import pytest
from PySide6.QtCore import QObject, Signal

from visualino.errors import AlreadyRunningError, BridgeError
from visualino.settings_models import Configuration


class FakeBridge:
    """WorkspaceBridge double that answers immediately, or later when deferred."""

    def __init__(self) -> None:
        self.code = ""
        self.xml = "<xml></xml>"
        self.error: BridgeError | None = None
        self.deferred = False
        self.calls: list[tuple[str, tuple]] = []
        self._waiting: list = []

    def generate_code(self, on_result, on_error=None):
        self.calls.append(("generate_code", ()))
        self._answer(self.code, on_result, on_error)

    def serialize_workspace(self, on_result, on_error=None):
        self.calls.append(("serialize_workspace", ()))
        self._answer(self.xml, on_result, on_error)

    def load_workspace(self, xml, on_result=None, on_error=None):
        self.calls.append(("load_workspace", (xml,)))
        self._answer("", on_result, on_error)

    def clear_workspace(self, on_result=None, on_error=None):
        self.calls.append(("clear_workspace", ()))
        self._answer("", on_result, on_error)

    def methods(self) -> list[str]:
        return [name for name, _args in self.calls]

    def flush(self) -> None:
        waiting, self._waiting = self._waiting, []
        for answer in waiting:
            answer()

    def _answer(self, value, on_result, on_error) -> None:
        def answer():
            if self.error is not None:
                if on_error is not None:
                    on_error(self.error)
                return
            if on_result is not None:
                on_result(value)

        if self.deferred:
            self._waiting.append(answer)
        else:
            answer()


class FakeRunner(QObject):
    """ProcessRunner double that records starts and snapshots the sketch file."""

    started = Signal()
    outputReceived = Signal(object)
    finished = Signal(int)
    spawnFailed = Signal(str)
    timedOut = Signal()
    stateChanged = Signal(str)

    def __init__(self, watch_file: str = "") -> None:
        super().__init__()
        self.watch_file = watch_file
        self.idle = True
        self.starts: list[dict] = []
        self.cancelled = 0

    def is_idle(self) -> bool:
        return self.idle

    def start(self, program, args=None, *, timeout_ms=0, invocation=None):
        if not self.idle:
            raise AlreadyRunningError("busy")
        content = None
        if self.watch_file and Path(self.watch_file).exists():
            content = Path(self.watch_file).read_bytes()
        self.starts.append(
            {
                "program": program,
                "args": list(args or []),
                "timeout_ms": timeout_ms,
                "invocation": invocation,
                "file_content": content,
            }
        )
        self.idle = False
        return invocation

    def cancel(self) -> bool:
        self.cancelled += 1
        return not self.idle


class RecordingLog:
    def __init__(self) -> None:
        self.lines: list[str] = []

    def append(self, text: str) -> None:
        self.lines.append(text)


class RecordingNotifier:
    def __init__(self) -> None:
        self.errors: list[tuple[str, str]] = []
        self.statuses: list[tuple[str, int]] = []

    def show_error(self, title: str, message: str) -> None:
        self.errors.append((title, message))

    def show_status(self, message: str, timeout_ms: int = 0) -> None:
        self.statuses.append((message, timeout_ms))


class ScriptedPrompter:
    def __init__(self, open_result: str | None = None, save_result: str | None = None) -> None:
        self.open_result = open_result
        self.save_result = save_result
        self.open_prompts = 0
        self.save_prompts = 0

    def open_path(self) -> str | None:
        self.open_prompts += 1
        return self.open_result

    def save_path(self) -> str | None:
        self.save_prompts += 1
        return self.save_result


@pytest.fixture
def fake_bridge() -> FakeBridge:
    return FakeBridge()


@pytest.fixture
def log_sink() -> RecordingLog:
    return RecordingLog()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def toolchain_config(tmp_path) -> Configuration:
    temp_dir = tmp_path / "build"
    return Configuration(
        toolchain_path="/usr/bin/arduino",
        temp_dir=str(temp_dir),
        temp_file=str(temp_dir / "visualino.ino"),
        asset_index_path=str(tmp_path / "html" / "index.html"),
    )


@pytest.fixture
def fake_runner(qapp, toolchain_config) -> FakeRunner:
    return FakeRunner(watch_file=toolchain_config.temp_file)
