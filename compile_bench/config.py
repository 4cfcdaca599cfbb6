"""Defaults and the pydantic models describing benchmark cells and batches."""

import os
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator, model_validator

from .scenarios import Scenario, source_file_name

# Constants
DEFAULT_N = 1000
DEFAULT_RUNS = 5
DEFAULT_SCENARIO = Scenario.FUNCS
DEFAULT_COMPILER = "msvc" if os.name == "nt" else "gcc"
DEFAULT_OUTPUT_DIR = Path("output")
COMPARISON_REPORT_NAME = "comparison_report.csv"
LOG_DIR_NAME = "logs"


class RunConfiguration(BaseModel):
    """One fully specified benchmark cell"""

    model_config = ConfigDict(frozen=True)

    scenario: Scenario
    n: int
    compiler: str = DEFAULT_COMPILER
    optimize: bool = False
    cpp: bool = False
    runs: int = Field(default=DEFAULT_RUNS, ge=1)

    @model_validator(mode="before")
    @classmethod
    def force_cpp_for_cpp_scenarios(cls, data: Any) -> Any:
        if isinstance(data, dict) and "scenario" in data:
            scenario = data["scenario"]
            if not isinstance(scenario, Scenario):
                scenario = Scenario(scenario)
            if scenario.requires_cpp:
                data = {**data, "cpp": True}
        return data

    @field_validator("compiler")
    @classmethod
    def normalize_compiler(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Compiler tag must not be empty")
        return v.strip().lower()

    @model_validator(mode="after")
    def validate_size(self) -> "RunConfiguration":
        if self.scenario is not Scenario.EMPTY and self.n <= 0:
            raise ValueError(f"n must be positive for {self.scenario.value}, got {self.n}")
        return self

    @property
    def optimization_token(self) -> str:
        return "O2" if self.optimize else "Od"

    @property
    def mode_token(self) -> str:
        return "cpp" if self.cpp else "c"

    @property
    def source_name(self) -> str:
        return source_file_name(self.cpp)

    def csv_file_name(self) -> str:
        """Per-configuration timings file; identical settings overwrite the same file"""
        return (
            f"timings_n{self.n}_compiler-{self.compiler}_{self.optimization_token.lower()}"
            f"_{self.mode_token}_scenario-{self.scenario.slug}.csv"
        )

    def describe(self) -> str:
        """Short human label, e.g. ``Funcs n=1000 gcc O2 c``"""
        return (
            f"{self.scenario.value} n={self.n} {self.compiler} "
            f"{self.optimization_token} {self.mode_token}"
        )


class BatchOptions(BaseModel):
    """Settings shared by every cell of a run or batch"""

    sizes: List[PositiveInt] = Field(default_factory=lambda: [DEFAULT_N], min_length=1)
    scenario: Scenario = DEFAULT_SCENARIO
    compiler: str = DEFAULT_COMPILER
    runs: int = Field(default=DEFAULT_RUNS, ge=1)
    optimize: bool = False
    cpp: bool = False
    quiet: bool = False

    @field_validator("compiler")
    @classmethod
    def normalize_compiler(cls, v: str) -> str:
        return v.strip().lower()

    def cell(
            self,
            n: int,
            scenario: Optional[Scenario] = None,
            optimize: Optional[bool] = None,
            cpp: Optional[bool] = None,
    ) -> RunConfiguration:
        """Build the configuration for one cell, overriding the shared settings"""
        return RunConfiguration(
            scenario=scenario if scenario is not None else self.scenario,
            n=n,
            compiler=self.compiler,
            optimize=self.optimize if optimize is None else optimize,
            cpp=self.cpp if cpp is None else cpp,
            runs=self.runs,
        )
