"""Controller for verify/upload runs of the generated sketch."""

from __future__ import annotations

import codecs
import logging
from typing import Protocol

from visualino.bridge.workspace_bridge import WorkspaceBridge
from visualino.errors import AlreadyRunningError, BridgeError, ProcessError, WriteFailedError
from visualino.process.invocation import ProcessInvocation, ToolchainAction, flag_for
from visualino.process.process_runner import ProcessRunner
from visualino.services import file_io
from visualino.settings_models import Configuration

from .notifier import Notifier

_logger = logging.getLogger(__name__)


class LogSink(Protocol):
    def append(self, text: str) -> None:
        ...


class ToolchainController:
    def __init__(
        self,
        config: Configuration,
        bridge: WorkspaceBridge,
        runner: ProcessRunner,
        log_sink: LogSink,
        notifier: Notifier,
        *,
        timeout_ms: int = 0,
    ) -> None:
        self.config = config
        self.bridge = bridge
        self.runner = runner
        self.log_sink = log_sink
        self.notifier = notifier
        self.timeout_ms = max(0, int(timeout_ms))
        self._awaiting_code: ToolchainAction | None = None
        self._decoder = self._new_decoder()

        self.runner.started.connect(self._on_process_started)
        self.runner.outputReceived.connect(self._on_process_output)
        self.runner.finished.connect(self._on_process_finished)
        self.runner.spawnFailed.connect(self._on_spawn_failed)
        self.runner.timedOut.connect(self._on_timed_out)

    def is_busy(self) -> bool:
        return self._awaiting_code is not None or not self.runner.is_idle()

    def verify(self) -> bool:
        return self.execute(ToolchainAction.VERIFY)

    def upload(self) -> bool:
        return self.execute(ToolchainAction.UPLOAD)

    def cancel(self) -> bool:
        return self.runner.cancel()

    def execute(self, action: ToolchainAction) -> bool:
        """Write the generated sketch to the temp file and run the toolchain on it.

        Returns False when the request was rejected or the temp file could not
        be prepared. The process itself starts once the editor has returned the
        generated code.
        """
        title = action.label
        try:
            if self.is_busy():
                raise AlreadyRunningError("A verify or upload is already in progress.")
            file_io.ensure_directory(self.config.temp_dir)
            file_io.recreate_file(self.config.temp_file)
        except (ProcessError, WriteFailedError) as exc:
            _logger.warning("%s rejected: %s", title, exc)
            self.notifier.show_error(title, str(exc))
            return False

        self._awaiting_code = action
        self.bridge.generate_code(
            on_result=lambda code, a=action: self._on_code_generated(a, code),
            on_error=lambda exc, a=action: self._on_code_failed(a, exc),
        )
        return True

    def _on_code_generated(self, action: ToolchainAction, code: str) -> None:
        self._awaiting_code = None
        target = self.config.temp_file
        try:
            file_io.write_local_text(target, code)
            invocation = ProcessInvocation(
                program=self.config.toolchain_path,
                args=[flag_for(action), target],
                action=action,
                target_file=target,
            )
            self.runner.start(
                invocation.program,
                invocation.args,
                timeout_ms=self.timeout_ms,
                invocation=invocation,
            )
        except (ProcessError, WriteFailedError) as exc:
            _logger.error("%s failed: %s", action.label, exc)
            self.log_sink.append(str(exc))
            self.notifier.show_error(action.label, str(exc))

    def _on_code_failed(self, action: ToolchainAction, exc: BridgeError) -> None:
        self._awaiting_code = None
        message = f"Couldn't get the generated code: {exc}"
        self.notifier.show_error(action.label, message)

    @staticmethod
    def _new_decoder() -> codecs.IncrementalDecoder:
        return codecs.getincrementaldecoder(file_io.local_encoding())(errors="replace")

    def _on_process_started(self) -> None:
        self._decoder = self._new_decoder()
        self.log_sink.append("Running...")

    def _on_process_output(self, raw: bytes) -> None:
        # A multibyte character may straddle two reads.
        text = self._decoder.decode(bytes(raw))
        if text:
            self.log_sink.append(text)

    def _on_process_finished(self, exit_code: int) -> None:
        tail = self._decoder.decode(b"", final=True)
        if tail:
            self.log_sink.append(tail)
        _logger.debug("Toolchain exit code: %d", exit_code)
        self.log_sink.append("Finished.")

    def _on_spawn_failed(self, message: str) -> None:
        text = f"Couldn't start {self.config.toolchain_path}: {message}"
        self.log_sink.append(text)
        self.notifier.show_error("Toolchain", text)

    def _on_timed_out(self) -> None:
        self.log_sink.append("Timed out, stopping the toolchain.")
