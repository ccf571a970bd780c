from .document_controller import DocumentController, DocumentIdentity, PathPrompter
from .notifier import Notifier
from .toolchain_controller import LogSink, ToolchainController

__all__ = [
    "DocumentController",
    "DocumentIdentity",
    "LogSink",
    "Notifier",
    "PathPrompter",
    "ToolchainController",
]
