"""CSV reports and the console summary table."""

from pathlib import Path
from typing import List, Sequence

import click
import pandas as pd
from tabulate import tabulate

from .config import COMPARISON_REPORT_NAME
from .driver import BenchmarkResult

CSV_FLOAT_FORMAT = "%.6f"
COMPARISON_COLUMNS = [
    "Scenario",
    "Compiler",
    "Optimization",
    "Mode",
    "N",
    "AverageSeconds",
    "MedianSeconds",
    "StdDevSeconds",
    "MinSeconds",
    "MaxSeconds",
    "CsvFile",
]


def variations_report_name(compiler: str, scenario_slug: str) -> str:
    return f"{compiler}_{scenario_slug}.csv"


def create_timings_dataframe(result: BenchmarkResult) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Run":     range(1, len(result.samples) + 1),
            "Seconds": list(result.samples),
        }
    )


def write_timings_csv(result: BenchmarkResult, output_dir: Path) -> Path:
    """Write ``Run,Seconds`` rows for one configuration"""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / result.csv_file
    create_timings_dataframe(result).to_csv(
        path, index=False, float_format=CSV_FLOAT_FORMAT, lineterminator="\n"
    )
    return path


def sort_results(results: Sequence[BenchmarkResult]) -> List[BenchmarkResult]:
    """Report order: N, then scenario name, then compiler; ties keep run order"""
    return sorted(
        results, key=lambda r: (r.config.n, r.config.scenario.value, r.config.compiler)
    )


def create_comparison_dataframe(results: Sequence[BenchmarkResult]) -> pd.DataFrame:
    rows = []
    for result in sort_results(results):
        config = result.config
        rows.append(
            {
                "Scenario":       config.scenario.value,
                "Compiler":       config.compiler,
                "Optimization":   config.optimization_token,
                "Mode":           config.mode_token,
                "N":              config.n,
                "AverageSeconds": result.average,
                "MedianSeconds":  result.median,
                "StdDevSeconds":  result.std_dev,
                "MinSeconds":     result.min,
                "MaxSeconds":     result.max,
                "CsvFile":        result.csv_file,
            }
        )

    return pd.DataFrame(rows, columns=COMPARISON_COLUMNS)


def write_comparison_report(
        results: Sequence[BenchmarkResult],
        output_dir: Path,
        file_name: str = COMPARISON_REPORT_NAME,
) -> Path:
    """Write the combined comparison CSV of a batch"""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / file_name
    create_comparison_dataframe(results).to_csv(
        path, index=False, float_format=CSV_FLOAT_FORMAT, lineterminator="\n"
    )
    return path


def format_summary_line(result: BenchmarkResult) -> str:
    return (
        f"Average: {result.average:.3f}s, Median: {result.median:.3f}s, "
        f"StdDev: {result.std_dev:.3f}s, Min: {result.min:.3f}s, Max: {result.max:.3f}s"
    )


def summary_table(results: List[BenchmarkResult]) -> str:
    """Grid table of every result, in report order, with confidence intervals"""
    if not results:
        return ""

    rows = []
    for result in sort_results(results):
        config, stats = result.config, result.statistics
        rows.append(
            [
                config.scenario.value,
                config.compiler,
                config.optimization_token,
                config.mode_token,
                config.n,
                stats.mean,
                stats.median,
                stats.std_dev,
                f"({stats.confidence_interval[0]:.4f}, {stats.confidence_interval[1]:.4f})",
                f"{stats.coefficient_variation:.1f}%",
            ]
        )

    headers = ["Scenario", "Compiler", "Opt", "Mode", "N", "Mean (s)", "Median (s)",
               "StdDev (s)", "95% CI", "CV"]
    return tabulate(rows, headers=headers, tablefmt="grid", floatfmt=".4f")


def print_summary(results: List[BenchmarkResult]) -> None:
    table = summary_table(results)
    if table:
        click.secho("\n📈 Summary:", fg="cyan", bold=True)
        click.echo(table)
