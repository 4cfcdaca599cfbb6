import os
import signal
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

LineCallback = Callable[[str], None]


@dataclass
class ProcessResult:
    """Exit code and output lines of a finished process"""

    exit_code: int
    lines: List[str] = field(default_factory=list)


class ProcessRunner(ABC):
    """Strategy for running the timing driver process"""

    @abstractmethod
    def run(
            self,
            command: List[str],
            cwd: Path,
            env: Optional[Dict[str, str]] = None,
            on_line: Optional[LineCallback] = None,
    ) -> ProcessResult:
        """Run ``command`` to completion, passing each output line to ``on_line``"""
        pass


class SubprocessRunner(ProcessRunner):
    """Runs commands with :mod:`subprocess`, streaming merged stdout/stderr"""

    def run(
            self,
            command: List[str],
            cwd: Path,
            env: Optional[Dict[str, str]] = None,
            on_line: Optional[LineCallback] = None,
    ) -> ProcessResult:
        lines = []
        process = subprocess.Popen(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            cwd=cwd,
            env=env,
            # New process group so the compiler goes down with the driver
            start_new_session=os.name == "posix",
        )
        try:
            for raw_line in process.stdout:
                line = raw_line.rstrip("\r\n")
                lines.append(line)
                if on_line is not None:
                    on_line(line)
            exit_code = process.wait()
        except BaseException:
            self._terminate_process_group(process)
            raise
        finally:
            process.stdout.close()

        return ProcessResult(exit_code=exit_code, lines=lines)

    def _terminate_process_group(self, process: subprocess.Popen):
        """Safely terminate a process and its children"""
        if process.poll() is not None:
            return
        try:
            if os.name == "posix":
                os.killpg(os.getpgid(process.pid), signal.SIGTERM)
            else:
                process.terminate()

            # Wait a bit for graceful shutdown
            try:
                process.wait(timeout=2)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
        except (ProcessLookupError, OSError):
            # Process already terminated
            pass
