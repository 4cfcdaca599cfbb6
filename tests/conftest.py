"""Shared pytest fixtures for compile-bench tests.

Provides a fake process runner that replays canned driver output, canned
driver output itself, a fake toolchain, and factories for configurations and
BenchmarkResult objects.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable

# Headless chart rendering
os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

from compile_bench.config import RunConfiguration
from compile_bench.driver import BenchmarkResult
from compile_bench.process import ProcessResult, ProcessRunner
from compile_bench.scenarios import Scenario
from compile_bench.stats import calculate_statistics
from compile_bench.toolchain import Toolchain, ToolchainRegistry


def _timing_output(*seconds: float, noise: bool = True) -> list[str]:
    """Driver output for successful runs with the given timings."""
    lines = []
    for run, value in enumerate(seconds, start=1):
        lines.append(f"Run {run}:")
        if noise:
            lines.append("test.c")
        lines.append(f"{value:.9f}")
    return lines


class FakeProcessRunner(ProcessRunner):
    """Replays one canned ProcessResult per call and records what it was asked to run."""

    def __init__(self, *results: ProcessResult):
        self.results = list(results)
        self.calls: list[dict[str, Any]] = []

    def run(self, command, cwd, env=None, on_line=None) -> ProcessResult:
        self.calls.append(
            {
                "command": list(command),
                "cwd": Path(cwd),
                "env": env,
                "files": {p.name: p.read_text() for p in Path(cwd).iterdir()},
            }
        )
        result = self.results.pop(0)
        if on_line is not None:
            for line in result.lines:
                on_line(line)
        return result


class FakeToolchain(Toolchain):
    compiler_exe = "fakecc"

    def locate(self):
        return {"FAKE_TOOLCHAIN": "1"}

    def compile_command(self, source, artifact, optimize):
        return [self.compiler_exe, "-O2" if optimize else "-O0", source, "-o", artifact]

    def get_artifact_name(self):
        return "test.o"


@pytest.fixture()
def timing_output() -> Callable[..., list[str]]:
    """Builds driver output for successful runs: ``timing_output(0.1, 0.2)``."""
    return _timing_output


@pytest.fixture()
def fake_runner() -> Callable[..., FakeProcessRunner]:
    """Factory for a FakeProcessRunner replaying the given results in order."""

    def _factory(*results: ProcessResult) -> FakeProcessRunner:
        return FakeProcessRunner(*results)

    return _factory


@pytest.fixture()
def registry() -> ToolchainRegistry:
    registry = ToolchainRegistry()
    registry.register("fake", FakeToolchain)
    return registry


@pytest.fixture()
def make_config() -> Callable[..., RunConfiguration]:
    """Factory for RunConfiguration with the fake compiler by default."""

    def _factory(
        *,
        scenario: Scenario = Scenario.FUNCS,
        n: int = 10,
        compiler: str = "fake",
        optimize: bool = False,
        cpp: bool = False,
        runs: int = 3,
    ) -> RunConfiguration:
        return RunConfiguration(
            scenario=scenario,
            n=n,
            compiler=compiler,
            optimize=optimize,
            cpp=cpp,
            runs=runs,
        )

    return _factory


@pytest.fixture()
def make_result(make_config) -> Callable[..., BenchmarkResult]:
    """Factory for BenchmarkResult built from explicit samples."""

    def _factory(*, samples: tuple[float, ...] = (0.1, 0.2, 0.3), **config_kwargs) -> BenchmarkResult:
        config = make_config(runs=len(samples), **config_kwargs)
        return BenchmarkResult(
            config=config,
            samples=tuple(samples),
            statistics=calculate_statistics(samples),
            csv_file=config.csv_file_name(),
        )

    return _factory
