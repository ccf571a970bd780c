from .blockly_view import BlocklyView
from .log_panel import LogPanel

__all__ = ["BlocklyView", "LogPanel"]
