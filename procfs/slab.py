"""Parsing of /proc/slabinfo (format version 2.1)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_SLAB_SPACE = re.compile(r"\s+")
_SLAB_VERSION = re.compile(r"slabinfo -")
_SLAB_HEADER = re.compile(r"# name")
_INT = re.compile(r"[+-]?[0-9]+")


@dataclass
class Slab:
    """One kernel slab pool."""

    name: str
    obj_active: int = 0
    obj_num: int = 0
    obj_size: int = 0
    obj_per_slab: int = 0
    pages_per_slab: int = 0
    limit: int = 0
    batch: int = 0
    shared_factor: int = 0
    slab_active: int = 0
    slab_num: int = 0
    shared_avail: int = 0


@dataclass
class SlabInfo:
    """All slab pools listed in /proc/slabinfo."""

    slabs: list[Slab] = field(default_factory=list)


def _parse_int64(text: str) -> int:
    if not _INT.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    value = int(text)
    if not -(1 << 63) <= value < 1 << 63:
        raise ValueError(f"value out of range: {text!r}")
    return value


def _should_parse(line: str) -> bool:
    return not (_SLAB_VERSION.search(line) or _SLAB_HEADER.search(line))


def parse_slab_entry(line: str) -> Slab:
    """Parse one slab line of a version 2.1 slabinfo file."""
    tokens = _SLAB_SPACE.sub(" ", line).split(" ")
    if len(tokens) != 16:
        raise ValueError(f"unable to parse: {line!r}")
    return Slab(
        name=tokens[0],
        obj_active=_parse_int64(tokens[1]),
        obj_num=_parse_int64(tokens[2]),
        obj_size=_parse_int64(tokens[3]),
        obj_per_slab=_parse_int64(tokens[4]),
        pages_per_slab=_parse_int64(tokens[5]),
        limit=_parse_int64(tokens[8]),
        batch=_parse_int64(tokens[9]),
        shared_factor=_parse_int64(tokens[10]),
        slab_active=_parse_int64(tokens[13]),
        slab_num=_parse_int64(tokens[14]),
        shared_avail=_parse_int64(tokens[15]),
    )


def parse_slab_info(text: str) -> SlabInfo:
    """Parse the full contents of a version 2.1 slabinfo file."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    info = SlabInfo()
    for raw in lines:
        line = raw.removesuffix("\r")
        if _should_parse(line):
            info.slabs.append(parse_slab_entry(line))
    return info