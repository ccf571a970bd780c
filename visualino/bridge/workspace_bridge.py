from __future__ import annotations

from typing import Callable, Protocol

from visualino.errors import BridgeError

ResultCallback = Callable[[str], None]
ErrorCallback = Callable[[BridgeError], None]


class WorkspaceBridge(Protocol):
    """Calls into the embedded block editor. Results arrive through callbacks."""

    def generate_code(self, on_result: ResultCallback, on_error: ErrorCallback | None = None) -> None:
        ...

    def serialize_workspace(self, on_result: ResultCallback, on_error: ErrorCallback | None = None) -> None:
        ...

    def load_workspace(
        self,
        xml: str,
        on_result: ResultCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        ...

    def clear_workspace(
        self,
        on_result: ResultCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        ...
