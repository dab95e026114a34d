"""Parsing of scheduler statistics from /proc/schedstat and /proc/<pid>/schedstat."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field

_CPU_LINE = re.compile(
    r"cpu(\d+) (\d+) (\d+) (\d+) (\d+) (\d+) (\d+) (\d+) (\d+) (\d+)", re.ASCII
)
_PROC_LINE = re.compile(r"(\d+) (\d+) (\d+)", re.ASCII)
_UINT64_LIMIT = 1 << 64


@dataclass
class SchedstatCPU:
    """Values from one "cpu<N>" line of /proc/schedstat."""

    cpu_num: str
    running_nanoseconds: int = 0
    waiting_nanoseconds: int = 0
    run_timeslices: int = 0


@dataclass
class Schedstat:
    """Scheduler statistics for all CPUs."""

    cpus: list[SchedstatCPU] = field(default_factory=list)


@dataclass
class ProcSchedstat:
    """Values from /proc/<pid>/schedstat."""

    running_nanoseconds: int = 0
    waiting_nanoseconds: int = 0
    run_timeslices: int = 0


def _uint64(text: str) -> int:
    value = int(text)
    if value >= _UINT64_LIMIT:
        raise ValueError(f"value out of range: {text!r}")
    return value


def parse_schedstat(text: str) -> Schedstat:
    """Parse /proc/schedstat; cpu lines with out-of-range values are skipped."""
    stats = Schedstat()
    for line in text.split("\n"):
        match = _CPU_LINE.search(line)
        if match is None:
            continue
        try:
            running, waiting, slices = (_uint64(match.group(i)) for i in (8, 9, 10))
        except ValueError:
            continue
        stats.cpus.append(SchedstatCPU(match.group(1), running, waiting, slices))
    return stats


def read_schedstat(path: str | os.PathLike[str]) -> Schedstat:
    """Read and parse a file in /proc/schedstat format."""
    with open(path, encoding="utf-8", errors="surrogateescape") as handle:
        return parse_schedstat(handle.read())


def parse_proc_schedstat(contents: str) -> ProcSchedstat:
    """Parse the contents of /proc/<pid>/schedstat."""
    match = _PROC_LINE.search(contents)
    if match is None:
        raise ValueError("could not parse schedstat")
    return ProcSchedstat(*(_uint64(match.group(i)) for i in (1, 2, 3)))