"""Parsing of /proc/swaps."""

from __future__ import annotations

import re
from dataclasses import dataclass

_INT = re.compile(r"[+-]?[0-9]+")


@dataclass
class Swap:
    """One configured swap device."""

    filename: str
    type: str
    size: int
    used: int
    priority: int


def _parse_int(text: str, what: str) -> int:
    if not _INT.fullmatch(text):
        raise ValueError(f"invalid swap {what}: {text}")
    return int(text)


def parse_swap_string(line: str) -> Swap:
    """Parse a single /proc/swaps entry line."""
    fields = line.split()
    if len(fields) < 5:
        raise ValueError(f"too few fields in swap string: {line}")
    return Swap(
        filename=fields[0],
        type=fields[1],
        size=_parse_int(fields[2], "size"),
        used=_parse_int(fields[3], "used"),
        priority=_parse_int(fields[4], "priority"),
    )


def parse_swaps(text: str) -> list[Swap]:
    """Parse the full contents of /proc/swaps, skipping its header line."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [parse_swap_string(line.removesuffix("\r")) for line in lines[1:]]