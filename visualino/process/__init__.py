from .invocation import ProcessInvocation, ToolchainAction, flag_for
from .process_runner import ProcessRunner, RunnerState

__all__ = ["ProcessInvocation", "ProcessRunner", "RunnerState", "ToolchainAction", "flag_for"]
