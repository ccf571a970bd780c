from .blockly_bridge import BlocklyBridge
from .workspace_bridge import ErrorCallback, ResultCallback, WorkspaceBridge

__all__ = ["BlocklyBridge", "ErrorCallback", "ResultCallback", "WorkspaceBridge"]
