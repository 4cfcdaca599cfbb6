"""
Batch orchestration.

Cells run strictly one after another; concurrent compilers would compete for
CPU and disk and skew the comparison. A failing cell is reported and skipped,
the rest of the batch still runs.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import click

from .config import BatchOptions, RunConfiguration
from .driver import BenchmarkResult, RunDriver
from .report import format_summary_line, write_timings_csv
from .scenarios import Scenario


@dataclass(frozen=True)
class Variation:
    """Language and optimization combination used in all-variations mode"""

    cpp: bool
    optimize: bool
    name: str


VARIATIONS = (
    Variation(cpp=False, optimize=False, name="C Od"),
    Variation(cpp=False, optimize=True, name="C O2"),
    Variation(cpp=True, optimize=False, name="C++ Od"),
    Variation(cpp=True, optimize=True, name="C++ O2"),
)


def variations_for(scenario: Scenario) -> Tuple[Variation, ...]:
    """C variations are skipped for scenarios that need C++ syntax"""
    if scenario.requires_cpp:
        return tuple(v for v in VARIATIONS if v.cpp)
    return VARIATIONS


class BatchRunner:
    """Runs single configurations and whole batches, writing one CSV per cell"""

    def __init__(self, driver: RunDriver, output_dir: Path, quiet: bool = False):
        self.driver = driver
        self.output_dir = output_dir
        self.quiet = quiet
        self.failures: List[Tuple[str, str]] = []

    def run_single(self, config: RunConfiguration) -> BenchmarkResult:
        """Measure one configuration and save its timings; errors propagate"""
        if not self.quiet:
            click.echo(f"🔬 {config.describe()} ({config.runs} runs)")

        result = self.driver.run(config)
        write_timings_csv(result, self.output_dir)

        if not self.quiet:
            click.echo(f"   {format_summary_line(result)}")
            click.echo(f"   Timings saved to {result.csv_file}")
        return result

    def run_all_scenarios(self, options: BatchOptions) -> List[BenchmarkResult]:
        """Every scenario for every size, with the shared settings"""
        click.echo(
            f"Running all scenarios with n values: [{', '.join(map(str, options.sizes))}], "
            f"compiler={options.compiler}, runs={options.runs}"
        )
        click.echo("=" * 80)

        results = []
        for n in options.sizes:
            self._echo_size_header(n)
            for scenario in Scenario:
                label = f"{scenario.value} (n={n})"
                click.echo(f"Running scenario: {label}")
                result = self._run_cell(label, lambda: options.cell(n, scenario=scenario))
                if result is not None:
                    results.append(result)
                click.echo()

        return results

    def run_all_variations(self, options: BatchOptions) -> List[BenchmarkResult]:
        """Every language/optimization variation of one scenario for every size"""
        variations = variations_for(options.scenario)
        click.echo(f"Running scenario '{options.scenario.value}' with all variations")
        click.echo(
            f"N values: [{', '.join(map(str, options.sizes))}], "
            f"compiler={options.compiler}, runs={options.runs}"
        )
        click.echo("=" * 80)

        results = []
        for n in options.sizes:
            self._echo_size_header(n)
            for variation in variations:
                label = f"{variation.name} variation (n={n})"
                click.echo(f"Running {label}")
                result = self._run_cell(
                    label,
                    lambda: options.cell(n, optimize=variation.optimize, cpp=variation.cpp),
                )
                if result is not None:
                    results.append(result)
                click.echo()

        return results

    def _run_cell(
            self, label: str, build_config: Callable[[], RunConfiguration]
    ) -> Optional[BenchmarkResult]:
        try:
            return self.run_single(build_config())
        except Exception as e:
            # Log the failure but continue with the other cells
            self.failures.append((label, str(e)))
            click.secho(f"  ❌ Error: {e}", fg="red")
            return None

    def _echo_size_header(self, n: int) -> None:
        click.echo(f"\nTesting with N = {n}")
        click.echo("-" * 40)
