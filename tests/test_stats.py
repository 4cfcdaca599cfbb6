"""Tests for compile_bench/stats.py."""

from __future__ import annotations

import itertools

import pytest

from compile_bench.stats import calculate_statistics


def test_known_sample() -> None:
    stats = calculate_statistics([1.0, 2.0, 3.0, 4.0])
    assert stats.mean == pytest.approx(2.5)
    assert stats.median == pytest.approx(2.5)
    assert stats.min_value == 1.0
    assert stats.max_value == 4.0
    assert stats.std_dev == pytest.approx(1.290994, abs=1e-6)
    assert stats.sample_size == 4


def test_odd_length_median_is_middle_value() -> None:
    assert calculate_statistics([5.0, 1.0, 3.0]).median == 3.0


def test_single_sample_has_zero_deviation() -> None:
    stats = calculate_statistics([0.42])
    assert stats.std_dev == 0.0
    assert stats.mean == stats.median == stats.min_value == stats.max_value == 0.42
    assert stats.confidence_interval == (0.42, 0.42)


def test_permutation_invariance() -> None:
    samples = [0.31, 0.12, 0.57, 0.12, 0.9]
    reference = calculate_statistics(samples)
    for permutation in itertools.permutations(samples):
        assert calculate_statistics(list(permutation)) == reference


def test_input_is_not_mutated() -> None:
    samples = [3.0, 1.0, 2.0]
    calculate_statistics(samples)
    assert samples == [3.0, 1.0, 2.0]


def test_empty_input_raises() -> None:
    with pytest.raises(ValueError):
        calculate_statistics([])


def test_confidence_interval_brackets_mean() -> None:
    stats = calculate_statistics([1.0, 2.0, 3.0, 4.0])
    low, high = stats.confidence_interval
    assert low < stats.mean < high
    assert stats.mean - low == pytest.approx(high - stats.mean)


def test_large_sample_uses_normal_interval() -> None:
    samples = [1.0, 2.0] * 20
    stats = calculate_statistics(samples)
    margin = stats.confidence_interval[1] - stats.mean
    # z(0.975) = 1.959964
    assert margin == pytest.approx(1.959964 * stats.std_dev / len(samples) ** 0.5, rel=1e-5)


def test_coefficient_of_variation() -> None:
    stats = calculate_statistics([1.0, 2.0, 3.0, 4.0])
    assert stats.coefficient_variation == pytest.approx(stats.std_dev / 2.5 * 100)
    assert calculate_statistics([0.0, 0.0]).coefficient_variation == 0.0
