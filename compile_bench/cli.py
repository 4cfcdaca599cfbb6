import sys
from pathlib import Path

import click

from . import __version__
from .batch import BatchRunner
from .config import (
    COMPARISON_REPORT_NAME,
    DEFAULT_COMPILER,
    DEFAULT_N,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_RUNS,
    DEFAULT_SCENARIO,
    LOG_DIR_NAME,
    BatchOptions,
)
from .driver import RunDriver
from .errors import BenchmarkError
from .plots import plot_scaling
from .report import print_summary, variations_report_name, write_comparison_report
from .scenarios import Scenario, generate_code
from .toolchain import ToolchainRegistry


class SizeListParamType(click.ParamType):
    """A positive integer or a comma-separated list of them"""

    name = "N[,N...]"

    def convert(self, value, param, ctx):
        if isinstance(value, list):
            return value

        sizes = []
        for part in str(value).split(","):
            try:
                size = int(part.strip())
            except ValueError:
                self.fail(f"{part.strip()!r} is not a valid integer", param, ctx)
            if size <= 0:
                self.fail(f"sizes must be positive, got {size}", param, ctx)
            sizes.append(size)
        return sizes


SIZE_LIST = SizeListParamType()


@click.command(context_settings={"token_normalize_func": lambda token: token.lower()})
@click.option(
    "-n",
    "sizes",
    default=str(DEFAULT_N),
    type=SIZE_LIST,
    help="Size, or comma-separated sizes, to test",
)
@click.option(
    "--n-values",
    default=None,
    type=SIZE_LIST,
    help="Comma-separated sizes to test (overrides -n)",
)
@click.option(
    "--scenario",
    default=DEFAULT_SCENARIO.value,
    type=click.Choice([s.value for s in Scenario], case_sensitive=False),
    help="Code shape to generate",
)
@click.option(
    "--compiler",
    default=DEFAULT_COMPILER,
    type=click.Choice(ToolchainRegistry().get_available_compilers(), case_sensitive=False),
    help="Compiler toolchain to measure",
)
@click.option(
    "--runs",
    default=DEFAULT_RUNS,
    type=click.IntRange(min=1),
    help="Timed compiles per configuration",
)
@click.option("--o2", is_flag=True, help="Optimized build (single configuration)")
@click.option("--cpp", is_flag=True, help="Compile as C++ (single configuration)")
@click.option("--genonly", is_flag=True, help="Only write the generated source to the current directory")
@click.option("--quiet", is_flag=True, help="Suppress progress output")
@click.option("--all-scenarios", is_flag=True, help="Run every scenario for every size")
@click.option(
    "--all-variations",
    is_flag=True,
    help="Run C/C++ x Od/O2 variations of the scenario for every size",
)
@click.option(
    "--output",
    "-o",
    default=str(DEFAULT_OUTPUT_DIR),
    type=click.Path(file_okay=False, path_type=Path),
    help="Report directory (default: output)",
)
@click.option("--plot", is_flag=True, help="Also chart mean compile time against N (batch modes)")
@click.version_option(version=__version__, prog_name="compile-bench")
def main(
        sizes,
        n_values,
        scenario,
        compiler,
        runs,
        o2,
        cpp,
        genonly,
        quiet,
        all_scenarios,
        all_variations,
        output,
        plot,
):
    """
    Compiler performance harness.

    Generates C/C++ stress sources and measures how long a compiler takes to
    build them, repeated and summarized per configuration.

    Examples:

      # 30 timed compiles of 4000 chained functions with gcc
      compile-bench -n 4000 --scenario Funcs --compiler gcc --runs 30

      # C and C++, Od and O2, for a range of sizes
      compile-bench -n 1000,2000,4000 --scenario FreeFunc --all-variations

      # Every scenario, with a scaling chart
      compile-bench --n-values 500,1000 --all-scenarios --plot

      # Just write test.cpp
      compile-bench -n 10 --scenario CppOverload --genonly
    """
    if all_scenarios and all_variations:
        raise click.UsageError("--all-scenarios and --all-variations cannot be combined")

    options = BatchOptions(
        sizes=n_values or sizes,
        scenario=Scenario(scenario),
        compiler=compiler,
        runs=runs,
        optimize=o2,
        cpp=cpp,
        quiet=quiet,
    )

    if genonly:
        config = options.cell(options.sizes[0])
        path = Path.cwd() / config.source_name
        path.write_text(generate_code(config.scenario, config.n), encoding="utf-8")
        if not options.quiet:
            click.echo(f"📝 Wrote {path.name} ({config.scenario.value}, n={config.n})")
        return

    output.mkdir(parents=True, exist_ok=True)
    driver = RunDriver(log_dir=output / LOG_DIR_NAME, quiet=options.quiet)
    runner = BatchRunner(driver, output, quiet=options.quiet)

    try:
        if not (all_scenarios or all_variations):
            for n in options.sizes:
                runner.run_single(options.cell(n))
            return

        if all_scenarios:
            results = runner.run_all_scenarios(options)
            report_name = COMPARISON_REPORT_NAME
            title = f"All scenarios ({options.compiler})"
        else:
            results = runner.run_all_variations(options)
            report_name = variations_report_name(options.compiler, options.scenario.slug)
            title = f"{options.scenario.value} variations ({options.compiler})"

        report_path = write_comparison_report(results, output, report_name)
        click.echo(f"Comparison report saved to {report_path}")

        if not options.quiet:
            print_summary(results)

        if plot:
            chart_path = output / (Path(report_name).stem + ".png")
            if plot_scaling(results, chart_path, title):
                click.echo(f"Chart saved to {chart_path}")
            else:
                click.secho("⚠️  No successful results to plot", fg="yellow")

        if runner.failures:
            click.secho(
                f"\n⚠️  Failed configurations ({len(runner.failures)}):",
                fg="yellow",
                bold=True,
            )
            for label, error in runner.failures:
                click.echo(f"   {label}: {error}")

    except KeyboardInterrupt:
        click.secho("\n⚠️  Benchmark interrupted by user", fg="yellow")
        sys.exit(1)
    except (BenchmarkError, OSError) as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)
