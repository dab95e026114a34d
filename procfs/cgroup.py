"""Parsing of /proc/<pid>/cgroup and /proc/cgroups."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_INT = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_LIMIT = 1 << 63


@dataclass
class Cgroup:
    """Placement of a process inside one control-group hierarchy.

    ``hierarchy_id`` is 0 for the unified (v2) hierarchy. ``controllers`` may be
    empty for v2, where all active controllers share one hierarchy. ``path`` is
    relative to the mount point of this hierarchy's cgroupfs.
    """

    hierarchy_id: int
    controllers: list[str] = field(default_factory=list)
    path: str = ""


@dataclass
class CgroupSummary:
    """One controller line of /proc/cgroups."""

    subsys_name: str
    hierarchy: int = 0
    cgroups: int = 0
    enabled: int = 0


def _parse_int(text: str) -> int:
    if not _INT.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    value = int(text)
    if not _INT64_MIN <= value < _INT64_LIMIT:
        raise ValueError(f"value out of range: {text!r}")
    return value


def _lines(text: str) -> list[str]:
    parts = text.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    return [p.removesuffix("\r") for p in parts]


def parse_cgroup_string(line: str) -> Cgroup:
    """Parse one ``hierarchyID:controller1,controller2:path`` line."""
    fields = line.split(":", 2)
    if len(fields) < 3:
        raise ValueError(
            f"at least 3 fields required, found {len(fields)} fields in cgroup string: {line}"
        )
    try:
        hierarchy_id = _parse_int(fields[0])
    except ValueError as exc:
        raise ValueError("failed to parse hierarchy ID") from exc
    controllers = fields[1].split(",") if fields[1] else []
    return Cgroup(hierarchy_id=hierarchy_id, controllers=controllers, path=fields[2])


def parse_cgroups(text: str) -> list[Cgroup]:
    """Parse the full contents of /proc/<pid>/cgroup."""
    return [parse_cgroup_string(line) for line in _lines(text)]


def parse_cgroup_summary_string(line: str) -> CgroupSummary:
    """Parse one ``subsys_name hierarchy num_cgroups enabled`` line."""
    fields = line.split()
    if len(fields) < 4:
        raise ValueError(
            f"at least 4 fields required, found {len(fields)} fields "
            f"in cgroup info string: {line}"
        )
    checks = (
        (fields[1], "failed to parse hierarchy ID"),
        (fields[2], "failed to parse Cgroup Num"),
        (fields[3], "failed to parse Enabled"),
    )
    values = []
    for token, message in checks:
        try:
            values.append(_parse_int(token))
        except ValueError as exc:
            raise ValueError(message) from exc
    hierarchy, cgroups, enabled = values
    return CgroupSummary(
        subsys_name=fields[0], hierarchy=hierarchy, cgroups=cgroups, enabled=enabled
    )


def parse_cgroup_summaries(text: str) -> list[CgroupSummary]:
    """Parse the full contents of /proc/cgroups, skipping comment lines."""
    return [
        parse_cgroup_summary_string(line)
        for line in _lines(text)
        if not line.startswith("#")
    ]