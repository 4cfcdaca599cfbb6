"""
Parser for the output of the timing driver process.

The stream interleaves run markers (``Run 3:``), elapsed seconds printed as a
plain decimal number, and whatever the compiler itself prints. Only markers
and numbers matter; everything else is skipped.
"""

import re
from typing import Dict, Iterable, List, Optional, Tuple

RUN_MARKER_PREFIX = "Run "
# Plain decimal notation only: no sign, no inf/nan, no digit separators
_NUMBER_RE = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def parse_seconds(text: str) -> Optional[float]:
    """Parse a timing value, independent of the host locale"""
    text = text.strip()
    if not _NUMBER_RE.match(text):
        return None
    return float(text)


class TimingParser:
    """Incrementally map timing values onto run indices"""

    def __init__(self):
        self.run_index = 0
        self._timings: Dict[int, float] = {}

    def feed(self, line: str) -> Optional[Tuple[int, float]]:
        """Consume one line; return ``(run, seconds)`` when it carried a timing"""
        line = line.strip()
        if line.startswith(RUN_MARKER_PREFIX):
            self.run_index += 1
            return None

        if self.run_index == 0:
            return None

        seconds = parse_seconds(line)
        if seconds is None:
            return None

        # A later number in the same run replaces an earlier one
        self._timings[self.run_index] = seconds
        return self.run_index, seconds

    def samples(self) -> List[float]:
        """Timings in run order"""
        return [self._timings[run] for run in sorted(self._timings)]

    def missing_runs(self, expected_runs: int) -> List[int]:
        return [run for run in range(1, expected_runs + 1) if run not in self._timings]


def parse_timings(lines: Iterable[str]) -> List[float]:
    parser = TimingParser()
    for line in lines:
        parser.feed(line)
    return parser.samples()
