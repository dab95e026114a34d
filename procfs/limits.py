"""Parsing of the per-process soft resource limits in /proc/<pid>/limits."""

from __future__ import annotations

import re
from dataclasses import dataclass

UNLIMITED = (1 << 64) - 1

_LIMITS_FIELDS = 4
_LIMITS_MATCH = re.compile(
    r"(Max \w+\s{0,1}?\w*\s{0,1}\w*)\s{2,}(\w+)\s+(\w+)", re.ASCII
)
_UINT = re.compile(r"[0-9]+")


@dataclass
class ProcLimits:
    """Soft limits of a process; ``UNLIMITED`` stands for no limit."""

    cpu_time: int = 0
    file_size: int = 0
    data_size: int = 0
    stack_size: int = 0
    core_file_size: int = 0
    resident_set: int = 0
    processes: int = 0
    open_files: int = 0
    locked_memory: int = 0
    address_space: int = 0
    file_locks: int = 0
    pending_signals: int = 0
    msgqueue_size: int = 0
    nice_priority: int = 0
    realtime_priority: int = 0
    realtime_timeout: int = 0


_LIMIT_NAMES = {
    "Max cpu time": "cpu_time",
    "Max file size": "file_size",
    "Max data size": "data_size",
    "Max stack size": "stack_size",
    "Max core file size": "core_file_size",
    "Max resident set": "resident_set",
    "Max processes": "processes",
    "Max open files": "open_files",
    "Max locked memory": "locked_memory",
    "Max address space": "address_space",
    "Max file locks": "file_locks",
    "Max pending signals": "pending_signals",
    "Max msgqueue size": "msgqueue_size",
    "Max nice priority": "nice_priority",
    "Max realtime priority": "realtime_priority",
    "Max realtime timeout": "realtime_timeout",
}


def parse_limit_value(value: str) -> int:
    """Parse a limit value; ``unlimited`` maps to ``UNLIMITED``."""
    if value == "unlimited":
        return UNLIMITED
    if not _UINT.fullmatch(value) or int(value) > UNLIMITED:
        raise ValueError(f"couldn't parse value {value!r}")
    return int(value)


def parse_limits(text: str, name: str) -> ProcLimits:
    """Parse the contents of a limits file; ``name`` is used in error messages."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    limits = ProcLimits()
    for raw in lines[1:]:
        line = raw.removesuffix("\r")
        match = _LIMITS_MATCH.search(line)
        if match is None or len(match.groups()) + 1 != _LIMITS_FIELDS:
            raise ValueError(f"couldn't parse {name!r} line {line!r}")
        attribute = _LIMIT_NAMES.get(match.group(1))
        if attribute is not None:
            setattr(limits, attribute, parse_limit_value(match.group(2)))
    return limits