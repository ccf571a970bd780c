from __future__ import annotations

from typing import Protocol


class Notifier(Protocol):
    """User-facing feedback at the action boundary."""

    def show_error(self, title: str, message: str) -> None:
        ...

    def show_status(self, message: str, timeout_ms: int = 0) -> None:
        ...
