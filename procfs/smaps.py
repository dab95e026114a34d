"""Summed memory information from /proc/<pid>/smaps_rollup or /proc/<pid>/smaps."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

# Matches the header line that precedes each mapped zone in smaps.
_HEADER_LINE = re.compile(r"[a-f0-9]")
_UINT = re.compile(r"[0-9]+")
_UINT64_MASK = (1 << 64) - 1

_KEYS = {
    "Rss": "rss",
    "Pss": "pss",
    "Shared_Clean": "shared_clean",
    "Shared_Dirty": "shared_dirty",
    "Private_Clean": "private_clean",
    "Private_Dirty": "private_dirty",
    "Referenced": "referenced",
    "Anonymous": "anonymous",
    "Swap": "swap",
    "SwapPss": "swap_pss",
}


@dataclass
class ProcSMapsRollup:
    """Summed memory figures of a process, in bytes."""

    rss: int = 0
    pss: int = 0
    shared_clean: int = 0
    shared_dirty: int = 0
    private_clean: int = 0
    private_dirty: int = 0
    referenced: int = 0
    anonymous: int = 0
    swap: int = 0
    swap_pss: int = 0

    def add_line(self, line: str) -> None:
        """Add the value of one ``Key: <n> kB`` line to the matching total."""
        parts = line.split(":", 1)
        if len(parts) != 2:
            raise ValueError(f"invalid smaps line, missing colon: {line!r}")
        key, value = parts
        if key == "VmFlags":
            return
        value = value.strip().rstrip(" kB")
        if not _UINT.fullmatch(value) or int(value) > _UINT64_MASK:
            raise ValueError(f"invalid smaps value {value!r}")
        attribute = _KEYS.get(key)
        if attribute is not None:
            total = getattr(self, attribute) + int(value) * 1024
            setattr(self, attribute, total & _UINT64_MASK)


def parse_smaps_rollup(text: str) -> ProcSMapsRollup:
    """Parse the contents of smaps_rollup; the first line is a header."""
    rollup = ProcSMapsRollup()
    for line in text.split("\n")[1:]:
        if line:
            rollup.add_line(line)
    return rollup


def parse_smaps(lines: Iterable[str]) -> ProcSMapsRollup:
    """Sum the per-mapping figures of an smaps file given as lines."""
    rollup = ProcSMapsRollup()
    for raw in lines:
        line = raw.removesuffix("\n").removesuffix("\r")
        if _HEADER_LINE.match(line):
            continue
        rollup.add_line(line)
    return rollup