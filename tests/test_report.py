"""Tests for compile_bench/report.py: CSV reports and the summary table."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from compile_bench.report import (
    COMPARISON_COLUMNS,
    create_comparison_dataframe,
    summary_table,
    variations_report_name,
    write_comparison_report,
    write_timings_csv,
)
from compile_bench.scenarios import Scenario


def test_timings_csv_layout(make_result, tmp_path: Path) -> None:
    result = make_result(samples=(0.1234567, 0.2, 1.5))

    path = write_timings_csv(result, tmp_path / "output")

    assert path == tmp_path / "output" / result.csv_file
    assert path.read_text().splitlines() == [
        "Run,Seconds",
        "1,0.123457",
        "2,0.200000",
        "3,1.500000",
    ]


def test_timings_csv_overwrites_previous_file(make_result, tmp_path: Path) -> None:
    write_timings_csv(make_result(samples=(0.1, 0.2, 0.3)), tmp_path)
    path = write_timings_csv(make_result(samples=(0.4, 0.5, 0.6)), tmp_path)

    df = pd.read_csv(path)
    assert list(df["Seconds"]) == [0.4, 0.5, 0.6]
    assert len(list(tmp_path.glob("*.csv"))) == 1


def test_comparison_header(make_result, tmp_path: Path) -> None:
    path = write_comparison_report([make_result()], tmp_path)

    assert path.name == "comparison_report.csv"
    assert path.read_text().splitlines()[0] == (
        "Scenario,Compiler,Optimization,Mode,N,AverageSeconds,MedianSeconds,"
        "StdDevSeconds,MinSeconds,MaxSeconds,CsvFile"
    )
    assert COMPARISON_COLUMNS == path.read_text().splitlines()[0].split(",")


def test_comparison_row_values(make_result, tmp_path: Path) -> None:
    result = make_result(samples=(0.1, 0.2, 0.6), n=50, optimize=True, cpp=True)

    path = write_comparison_report([result], tmp_path, "custom.csv")

    row = path.read_text().splitlines()[1]
    assert row == (
        f"Funcs,fake,O2,cpp,50,0.300000,0.200000,0.264575,0.100000,0.600000,{result.csv_file}"
    )


def test_comparison_rows_are_sorted(make_result) -> None:
    shuffled = [
        make_result(n=200, scenario=Scenario.FUNCS),
        make_result(n=100, scenario=Scenario.NO_OVERLOAD),
        make_result(n=100, scenario=Scenario.EMPTY, compiler="gcc"),
        make_result(n=100, scenario=Scenario.EMPTY, compiler="clang"),
        make_result(n=100, scenario=Scenario.CPP_MEMBER),
    ]

    df = create_comparison_dataframe(shuffled)

    assert list(zip(df["N"], df["Scenario"], df["Compiler"])) == [
        (100, "CppMember", "fake"),
        (100, "Empty", "clang"),
        (100, "Empty", "gcc"),
        (100, "NoOverload", "fake"),
        (200, "Funcs", "fake"),
    ]


def test_equal_keys_keep_production_order(make_result) -> None:
    od = make_result(optimize=False)
    o2 = make_result(optimize=True)

    df = create_comparison_dataframe([od, o2])

    assert list(df["Optimization"]) == ["Od", "O2"]
    assert list(df["Mode"]) == ["c", "c"]


def test_empty_comparison_report_has_only_header(tmp_path: Path) -> None:
    path = write_comparison_report([], tmp_path)
    assert path.read_text().splitlines() == [",".join(COMPARISON_COLUMNS)]


def test_variations_report_name() -> None:
    assert variations_report_name("gcc", Scenario.FREE_FUNC.slug) == "gcc_freefunc.csv"


def _table_rows(table: str) -> list[list[str]]:
    return [
        [cell.strip() for cell in line.strip("|").split("|")]
        for line in table.splitlines()
        if line.startswith("| Funcs")
    ]


def test_summary_table_rows_in_report_order(make_result) -> None:
    table = summary_table([make_result(n=20), make_result(n=10)])

    assert "95% CI" in table
    assert [row[4] for row in _table_rows(table)] == ["10", "20"]
    assert summary_table([]) == ""


def test_summary_table_keeps_four_decimals(make_result) -> None:
    table = summary_table([make_result(samples=(0.1, 0.2, 0.3))])

    (row,) = _table_rows(table)
    assert row[:8] == ["Funcs", "fake", "Od", "c", "10", "0.2000", "0.2000", "0.1000"]
    assert row[9] == "50.0%"
