import signal
from typing import Optional


class BenchmarkError(RuntimeError):
    """Base class for errors that abort one benchmark configuration"""


class ToolchainNotFoundError(BenchmarkError):
    """The requested compiler toolchain could not be located on this host"""


class CompilationFailedError(BenchmarkError):
    """A timed compile failed, so the configuration has no valid measurement"""

    def __init__(self, message: str, exit_code: Optional[int] = None):
        if exit_code is not None:
            message = f"{message} ({describe_exit_code(exit_code)})"
        super().__init__(message)
        self.exit_code = exit_code


def describe_exit_code(exit_code: int) -> str:
    """Describe a process exit code, decoding signals on POSIX"""
    if exit_code == 0:
        return "success"
    if exit_code > 0:
        return f"exit code {exit_code}"

    # Negative exit codes indicate signals
    signal_num = abs(exit_code)
    if signal_num == signal.SIGSEGV:
        return "segmentation fault"
    if signal_num == signal.SIGABRT:
        return "aborted (likely assertion failure)"
    if signal_num == getattr(signal, "SIGKILL", None):
        return "killed"
    if signal_num == signal.SIGTERM:
        return "terminated"
    return f"terminated by signal {signal_num}"
