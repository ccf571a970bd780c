"""Single external process owner over QProcess with merged output channels."""

from __future__ import annotations

import logging
from enum import Enum

from PySide6.QtCore import QObject, QProcess, QTimer, Signal

from visualino.errors import AlreadyRunningError, SpawnFailedError

from .invocation import ProcessInvocation

_logger = logging.getLogger(__name__)


class RunnerState(str, Enum):
    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"


class ProcessRunner(QObject):
    """Runs one process at a time and narrates its lifecycle through signals.

    A successful run emits started, then outputReceived zero or more times,
    then exactly one finished. A process that cannot be spawned emits
    spawnFailed instead and neither started nor finished. A cancel issued
    before the process has started is held until started, so a cancelled run
    still emits started before finished.
    """

    started = Signal()
    outputReceived = Signal(object)  # bytes
    finished = Signal(int)  # exit code, -1 after a crash or kill
    spawnFailed = Signal(str)
    timedOut = Signal()
    stateChanged = Signal(str)

    KILL_GRACE_MS = 2000

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._proc = QProcess(self)
        self._proc.setProcessChannelMode(QProcess.ProcessChannelMode.MergedChannels)
        self._proc.started.connect(self._on_process_started)
        self._proc.readyReadStandardOutput.connect(self._on_output_ready)
        self._proc.finished.connect(self._on_process_finished)
        self._proc.errorOccurred.connect(self._on_process_error)

        self._state = RunnerState.IDLE
        self._invocation: ProcessInvocation | None = None
        self._timeout_ms = 0
        self._cancel_requested = False

        self._timeout_timer = QTimer(self)
        self._timeout_timer.setSingleShot(True)
        self._timeout_timer.timeout.connect(self._on_timeout)
        self._kill_timer = QTimer(self)
        self._kill_timer.setSingleShot(True)
        self._kill_timer.timeout.connect(self._force_kill)

    @property
    def state(self) -> RunnerState:
        return self._state

    @property
    def invocation(self) -> ProcessInvocation | None:
        return self._invocation

    def is_idle(self) -> bool:
        return self._state == RunnerState.IDLE

    def start(
        self,
        program: str,
        args: list[str] | None = None,
        *,
        timeout_ms: int = 0,
        invocation: ProcessInvocation | None = None,
    ) -> ProcessInvocation:
        if self._state != RunnerState.IDLE:
            current = self._invocation.command_line() if self._invocation else "process"
            raise AlreadyRunningError(f"Another toolchain process is still running: {current}")

        clean_program = str(program or "").strip()
        if not clean_program:
            raise SpawnFailedError("No toolchain program is configured.")
        clean_args = [str(item) for item in (args or [])]

        if invocation is None:
            invocation = ProcessInvocation(program=clean_program, args=clean_args)
        self._invocation = invocation
        self._timeout_ms = max(0, int(timeout_ms or 0))
        self._cancel_requested = False

        _logger.info("Starting %s", invocation.command_line())
        self._set_state(RunnerState.STARTING)
        self._proc.setProgram(clean_program)
        self._proc.setArguments(clean_args)
        self._proc.start()
        return invocation

    def cancel(self) -> bool:
        """Terminate the running process, escalating to kill after a grace period."""
        if self._state == RunnerState.IDLE:
            return False
        _logger.info("Cancelling %s", self._invocation.command_line() if self._invocation else "process")
        if self._state == RunnerState.STARTING:
            self._cancel_requested = True
            return True
        self._proc.terminate()
        self._kill_timer.start(self.KILL_GRACE_MS)
        return True

    def shutdown(self, wait_ms: int = 3000) -> None:
        if self._state == RunnerState.IDLE:
            return
        self._proc.kill()
        self._proc.waitForFinished(max(0, int(wait_ms)))

    def _set_state(self, state: RunnerState) -> None:
        if state == self._state:
            return
        self._state = state
        self.stateChanged.emit(state.value)

    def _stop_timers(self) -> None:
        self._timeout_timer.stop()
        self._kill_timer.stop()

    def _force_kill(self) -> None:
        if self._proc.state() == QProcess.ProcessState.NotRunning:
            return
        self._proc.kill()

    def _on_timeout(self) -> None:
        _logger.warning("Process timed out after %d ms", self._timeout_ms)
        self.timedOut.emit()
        self.cancel()

    def _on_process_started(self) -> None:
        self._set_state(RunnerState.RUNNING)
        if self._timeout_ms > 0:
            self._timeout_timer.start(self._timeout_ms)
        self.started.emit()
        if self._cancel_requested:
            self._cancel_requested = False
            self.cancel()

    def _on_output_ready(self) -> None:
        raw = bytes(self._proc.readAllStandardOutput())
        if raw:
            self.outputReceived.emit(raw)

    def _on_process_finished(self, exit_code: int, exit_status: QProcess.ExitStatus) -> None:
        self._on_output_ready()
        self._stop_timers()
        self._cancel_requested = False
        if self._state == RunnerState.IDLE:
            return
        code = int(exit_code) if exit_status == QProcess.ExitStatus.NormalExit else -1
        _logger.info("Process finished with exit code %d", code)
        self._invocation = None
        self._set_state(RunnerState.IDLE)
        self.finished.emit(code)

    def _on_process_error(self, error: QProcess.ProcessError) -> None:
        if error != QProcess.ProcessError.FailedToStart:
            _logger.warning("Process error: %s", self._proc.errorString())
            return
        if self._state == RunnerState.IDLE:
            return
        message = self._proc.errorString()
        _logger.error("Couldn't start %s: %s", self._proc.program(), message)
        self._stop_timers()
        self._cancel_requested = False
        self._invocation = None
        self._set_state(RunnerState.IDLE)
        self.spawnFailed.emit(message)
