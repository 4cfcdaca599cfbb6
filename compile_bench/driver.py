import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import click

from .config import RunConfiguration
from .errors import CompilationFailedError
from .parser import RUN_MARKER_PREFIX, TimingParser
from .process import ProcessRunner, SubprocessRunner
from .scenarios import generate_code
from .stats import BenchmarkStatistics, calculate_statistics
from .toolchain import ToolchainRegistry

TIMELOOP_SCRIPT = Path(__file__).with_name("timeloop.py")
FAILURE_PREFIXES = ("Compile failed", "Output file")


@dataclass(frozen=True)
class BenchmarkResult:
    """Timings and statistics of one completed configuration"""

    config: RunConfiguration
    samples: Tuple[float, ...]
    statistics: BenchmarkStatistics
    csv_file: str

    @property
    def average(self) -> float:
        return self.statistics.mean

    @property
    def median(self) -> float:
        return self.statistics.median

    @property
    def std_dev(self) -> float:
        return self.statistics.std_dev

    @property
    def min(self) -> float:
        return self.statistics.min_value

    @property
    def max(self) -> float:
        return self.statistics.max_value


class RunDriver:
    """Measures one configuration: R isolated, timed compiles of a generated file"""

    def __init__(
            self,
            process_runner: ProcessRunner = None,
            registry: ToolchainRegistry = None,
            log_dir: Optional[Path] = None,
            quiet: bool = False,
    ):
        self.process_runner = process_runner or SubprocessRunner()
        self.registry = registry or ToolchainRegistry()
        self.log_dir = log_dir
        self.quiet = quiet

    def build_command(self, config: RunConfiguration, toolchain) -> List[str]:
        """Command line of the timing driver process for ``config``"""
        artifact = toolchain.get_artifact_name()
        compile_cmd = toolchain.compile_command(config.source_name, artifact, config.optimize)
        return [
            sys.executable,
            "-u",
            str(TIMELOOP_SCRIPT),
            "--runs",
            str(config.runs),
            "--artifact",
            artifact,
            "--",
            *compile_cmd,
        ]

    def run(self, config: RunConfiguration) -> BenchmarkResult:
        """Run every repetition of ``config``; any failed repetition raises"""
        parser = TimingParser()

        def on_line(line: str) -> None:
            timing = parser.feed(line)
            if self.quiet:
                return
            if line.strip().startswith(RUN_MARKER_PREFIX):
                click.echo(f"   {line.strip()}")
            elif timing is not None:
                run, seconds = timing
                click.echo(f"   Run {run} timing: {seconds:.3f}s")

        # The working directory is removed on every exit path
        with tempfile.TemporaryDirectory(prefix="CompileTest_") as tmp:
            workdir = Path(tmp)
            source = workdir / config.source_name
            source.write_text(generate_code(config.scenario, config.n), encoding="utf-8")

            toolchain = self.registry.create(config.compiler)
            env = toolchain.locate()
            command = self.build_command(config, toolchain)

            process = self.process_runner.run(command, cwd=workdir, env=env, on_line=on_line)

        self._write_log(config, process.lines)

        if process.exit_code != 0:
            reason = next(
                (line.strip() for line in reversed(process.lines)
                 if line.strip().startswith(FAILURE_PREFIXES)),
                "timing loop failed",
            )
            raise CompilationFailedError(
                f"{config.describe()}: {reason} on run {parser.run_index}/{config.runs}",
                exit_code=process.exit_code,
            )

        samples = parser.samples()
        missing = parser.missing_runs(config.runs)
        if missing or parser.run_index != config.runs:
            raise CompilationFailedError(
                f"{config.describe()}: expected {config.runs} timings, "
                f"got {len(samples)} (missing runs: {missing})"
            )

        return BenchmarkResult(
            config=config,
            samples=tuple(samples),
            statistics=calculate_statistics(samples),
            csv_file=config.csv_file_name(),
        )

    def _write_log(self, config: RunConfiguration, lines: List[str]) -> None:
        """Keep the raw driver output for debugging failed compiles"""
        if self.log_dir is None:
            return
        self.log_dir.mkdir(parents=True, exist_ok=True)
        log_path = self.log_dir / (Path(config.csv_file_name()).stem + ".log")
        log_path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
