"""
Timing driver process.

Runs one compile command a fixed number of times inside the current directory
and reports every run on stdout:

    Run 1:
    <anything the compiler prints>
    0.412345678

Before each run the build artifact is deleted so a stale object file can
neither hide a failed compile nor let the compiler skip work. Only the
compiler invocation itself sits between the two clock reads. The first failed
run (non-zero exit code or no artifact) ends the loop with a non-zero status.

The run driver launches this file by path, so it must not import anything
from its own package.
"""

import subprocess
import sys
import time
from pathlib import Path
from typing import Callable, List

import click


def run_loop(
        command: List[str],
        runs: int,
        artifact: Path,
        echo: Callable[[str], None] = click.echo,
) -> int:
    """Time ``runs`` invocations of ``command``; return the process exit status"""
    for run in range(1, runs + 1):
        if artifact.exists():
            artifact.unlink()

        echo(f"Run {run}:")
        try:
            start = time.perf_counter()
            completed = subprocess.run(command, stderr=subprocess.STDOUT)
            elapsed = time.perf_counter() - start
        except OSError as e:
            echo(f"Compile failed: {e}")
            return 1

        echo(f"{elapsed:.9f}")

        if completed.returncode != 0:
            echo(f"Compile failed with error {completed.returncode}")
            return completed.returncode if completed.returncode > 0 else 1

        if not artifact.exists():
            echo(f"Output file {artifact.name} not found!")
            return 1

    return 0


@click.command(context_settings={"ignore_unknown_options": True})
@click.option("--runs", required=True, type=click.IntRange(min=1), help="Number of timed runs")
@click.option(
    "--artifact",
    required=True,
    type=click.Path(path_type=Path),
    help="File the compiler must produce on every run",
)
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
def main(runs, artifact, command):
    """Time COMMAND RUNS times, deleting ARTIFACT before each run."""
    sys.exit(run_loop(list(command), runs, artifact))


if __name__ == "__main__":
    main()
