from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
import scipy.stats as stats

DEFAULT_CONFIDENCE = 0.95


@dataclass(frozen=True)
class BenchmarkStatistics:
    """Statistical summary of the timing samples of one configuration"""

    mean: float
    median: float
    std_dev: float
    min_value: float
    max_value: float
    sample_size: int
    confidence_interval: Tuple[float, float]
    coefficient_variation: float


def calculate_statistics(
        samples: Sequence[float], confidence_level: float = DEFAULT_CONFIDENCE
) -> BenchmarkStatistics:
    """Summarize timing samples without touching the caller's sequence.

    Everything is computed from a sorted copy, so the result does not depend
    on the order the samples were recorded in. The standard deviation is the
    Bessel-corrected sample deviation and is 0 for a single sample.
    """
    values = np.sort(np.asarray(samples, dtype=float))

    if len(values) == 0:
        raise ValueError("Cannot summarize an empty sample sequence")

    mean = float(np.mean(values))
    median = float(np.median(values))
    std_dev = float(np.std(values, ddof=1)) if len(values) > 1 else 0.0

    if len(values) >= 2:
        if len(values) >= 30:
            # Use normal distribution for large samples
            critical = stats.norm.ppf(1 - (1 - confidence_level) / 2)
        else:
            critical = stats.t.ppf(1 - (1 - confidence_level) / 2, len(values) - 1)
        ci_margin = float(critical) * (std_dev / np.sqrt(len(values)))
        confidence_interval = (mean - ci_margin, mean + ci_margin)
    else:
        confidence_interval = (mean, mean)

    return BenchmarkStatistics(
        mean=mean,
        median=median,
        std_dev=std_dev,
        min_value=float(values[0]),
        max_value=float(values[-1]),
        sample_size=len(values),
        confidence_interval=confidence_interval,
        coefficient_variation=(std_dev / mean * 100) if mean != 0 else 0.0,
    )
