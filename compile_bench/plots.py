from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
import seaborn as sns

from .driver import BenchmarkResult
from .report import create_comparison_dataframe


def _setup_plot_style():
    """Configure matplotlib/seaborn for publication-quality plots"""
    plt.style.use("seaborn-v0_8")
    sns.set_palette("husl")
    plt.rcParams.update(
        {
            "figure.dpi":      150,
            "savefig.bbox":    "tight",
            "font.size":       10,
            "axes.labelsize":  10,
            "xtick.labelsize": 9,
            "ytick.labelsize": 9,
        }
    )


def plot_scaling(results: Sequence[BenchmarkResult], output_path: Path, title: str) -> bool:
    """Plot mean compile time against N, one line per scenario/variation.

    Returns False when there is nothing to plot.
    """
    df = create_comparison_dataframe(results)
    if df.empty:
        return False

    df["Series"] = df["Scenario"] + " " + df["Mode"] + " " + df["Optimization"]

    _setup_plot_style()
    fig, ax = plt.subplots(figsize=(10, 6))
    sns.lineplot(data=df, x="N", y="AverageSeconds", hue="Series", marker="o", ax=ax)
    ax.errorbar(
        df["N"], df["AverageSeconds"], yerr=df["StdDevSeconds"],
        fmt="none", ecolor="gray", alpha=0.5,
    )
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.set_xlabel("N (units of work)")
    ax.set_ylabel("Mean compile time (seconds)")
    ax.grid(True, alpha=0.3)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, bbox_inches="tight")
    plt.close(fig)
    return True
