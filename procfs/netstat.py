"""Parsing of the per-CPU counter files under /proc/net/stat/."""

from __future__ import annotations

import glob
import os
import re
from dataclasses import dataclass, field

_HEX = re.compile(r"[0-9a-fA-F]+")


@dataclass
class NetStat:
    """Counters from one file: column name to one value per CPU."""

    filename: str
    stats: dict[str, list[int]] = field(default_factory=dict)


def _lines(text: str) -> list[str]:
    parts = text.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    return [p[:-1] if p.endswith("\r") else p for p in parts]


def _parse_hex_uint64(text: str) -> int:
    if not _HEX.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    value = int(text, 16)
    if value >= 1 << 64:
        raise ValueError(f"value out of range: {text!r}")
    return value


def parse_net_stat(filename: str, text: str) -> NetStat:
    """Parse one /proc/net/stat file: a header line followed by hex counters per CPU."""
    lines = _lines(text)
    result = NetStat(filename=filename)
    if not lines:
        return result
    headers = lines[0].split()
    for line in lines[1:]:
        for index, counter in enumerate(line.split()):
            if index >= len(headers):
                raise ValueError(
                    f"{filename}: counter {counter!r} has no matching header column"
                )
            result.stats.setdefault(headers[index], []).append(_parse_hex_uint64(counter))
    return result


def read_net_stats(directory: str | os.PathLike[str]) -> list[NetStat]:
    """Read every file in a /proc/net/stat directory, in name order."""
    stats = []
    for path in sorted(glob.glob(os.path.join(os.fspath(directory), "*"))):
        name = os.path.basename(path)
        if os.path.isdir(path):
            stats.append(NetStat(filename=name))
            continue
        with open(path, encoding="utf-8", errors="surrogateescape") as handle:
            stats.append(parse_net_stat(name, handle.read()))
    return stats