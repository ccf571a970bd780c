from __future__ import annotations


class VisualinoError(RuntimeError):
    """Base class for failures reported at a user action boundary."""


class ConfigError(VisualinoError):
    """Raised when the settings file cannot be read. Never fatal."""


class IoError(VisualinoError):
    def __init__(self, message: str, *, path: str = "") -> None:
        super().__init__(message)
        self.path = str(path or "")


class OpenFailedError(IoError):
    """Raised when a workspace file cannot be opened for reading."""


class WriteFailedError(IoError):
    """Raised when a file cannot be opened for writing."""


class ProcessError(VisualinoError):
    pass


class AlreadyRunningError(ProcessError):
    """Raised when a toolchain invocation is requested while one is live."""


class SpawnFailedError(ProcessError):
    """Raised when no toolchain program is configured to start."""


class BridgeError(VisualinoError):
    """Raised when the embedded editor does not answer a bridge request."""

    def __init__(self, message: str, *, method: str = "") -> None:
        super().__init__(message)
        self.method = str(method or "")
