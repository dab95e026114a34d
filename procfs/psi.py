"""Parsing of pressure stall information from /proc/pressure/<resource>."""

from __future__ import annotations

import re
from dataclasses import dataclass

_FLOAT = r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
_LINE = re.compile(
    rf"(some|full) +avg10=({_FLOAT}) +avg60=({_FLOAT}) +avg300=({_FLOAT}) +total=([0-9]+)"
)


@dataclass
class PSILine:
    """Averages (percent over 10, 60 and 300 seconds) and total stall time in microseconds."""

    avg10: float = 0.0
    avg60: float = 0.0
    avg300: float = 0.0
    total: int = 0


@dataclass
class PSIStats:
    """Share of time in which some, or all non-idle, tasks were stalled."""

    some: PSILine | None = None
    full: PSILine | None = None


def _parse_line(line: str) -> PSILine:
    match = _LINE.match(line)
    if match is None:
        raise ValueError(f"malformed pressure line: {line!r}")
    total = int(match.group(5))
    if total >= 1 << 64:
        raise ValueError(f"pressure total out of range: {line!r}")
    return PSILine(
        avg10=float(match.group(2)),
        avg60=float(match.group(3)),
        avg300=float(match.group(4)),
        total=total,
    )


def parse_psi_stats(text: str) -> PSIStats:
    """Parse a pressure file; lines of unknown kinds are ignored."""
    stats = PSIStats()
    for raw in text.split("\n"):
        line = raw.removesuffix("\r")
        prefix = line.split(" ")[0]
        if prefix == "some":
            stats.some = _parse_line(line)
        elif prefix == "full":
            stats.full = _parse_line(line)
    return stats