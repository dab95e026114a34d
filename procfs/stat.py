"""Parsing of the kernel/system statistics file /proc/stat."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field

# Clock ticks per second as exposed to user space; fixed at 100 on all
# supported platforms.
USER_HZ = 100

_UINT = re.compile(r"[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_INT = re.compile(r"[+-]?[0-9]+")


@dataclass
class CPUStat:
    """Time in seconds a CPU spent in each state."""

    user: float = 0.0
    nice: float = 0.0
    system: float = 0.0
    idle: float = 0.0
    iowait: float = 0.0
    irq: float = 0.0
    softirq: float = 0.0
    steal: float = 0.0
    guest: float = 0.0
    guest_nice: float = 0.0


@dataclass
class SoftIRQStat:
    """Per-kind softirq counters from the softirq line."""

    hi: int = 0
    timer: int = 0
    net_tx: int = 0
    net_rx: int = 0
    block: int = 0
    block_io_poll: int = 0
    tasklet: int = 0
    sched: int = 0
    hrtimer: int = 0
    rcu: int = 0


@dataclass
class Stat:
    """Kernel and system statistics."""

    boot_time: int = 0
    cpu_total: CPUStat = field(default_factory=CPUStat)
    cpu: list[CPUStat] = field(default_factory=list)
    irq_total: int = 0
    irq: list[int] = field(default_factory=list)
    context_switches: int = 0
    process_created: int = 0
    processes_running: int = 0
    processes_blocked: int = 0
    softirq_total: int = 0
    softirq: SoftIRQStat = field(default_factory=SoftIRQStat)


_CPU_FIELDS = (
    "user", "nice", "system", "idle", "iowait",
    "irq", "softirq", "steal", "guest", "guest_nice",
)
_SOFTIRQ_FIELDS = (
    "hi", "timer", "net_tx", "net_rx", "block",
    "block_io_poll", "tasklet", "sched", "hrtimer", "rcu",
)


def _parse_uint64(text: str) -> int:
    if not _UINT.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    value = int(text)
    if value >= 1 << 64:
        raise ValueError(f"value out of range: {text!r}")
    return value


def _parse_float(text: str) -> float:
    if not _FLOAT.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    return float(text)


def parse_cpu_stat(line: str) -> tuple[CPUStat, int | None]:
    """Parse a cpu line; returns the stat and the CPU id, or None for the total line.

    Trailing columns missing on older kernels are left at zero.
    """
    tokens = line.split()
    if not tokens:
        raise ValueError(f"couldn't parse {line!r} (cpu): 0 elements parsed")
    name = tokens[0]
    values = {}
    for key, token in zip(_CPU_FIELDS, tokens[1:]):
        try:
            values[key] = _parse_float(token) / USER_HZ
        except ValueError as exc:
            raise ValueError(f"couldn't parse {line!r} (cpu): {exc}") from exc
    stat = CPUStat(**values)

    if name == "cpu":
        return stat, None
    suffix = name[3:]
    if not _INT.fullmatch(suffix):
        raise ValueError(f"couldn't parse {line!r} (cpu/cpuid): invalid syntax")
    cpu_id = int(suffix)
    if not -(1 << 63) <= cpu_id < 1 << 63:
        raise ValueError(f"couldn't parse {line!r} (cpu/cpuid): value out of range")
    return stat, cpu_id


def parse_softirq_stat(line: str) -> tuple[SoftIRQStat, int]:
    """Parse the softirq line; returns the per-kind counters and the total."""
    tokens = line.split()
    needed = 2 + len(_SOFTIRQ_FIELDS)
    if len(tokens) < needed:
        raise ValueError(f"couldn't parse {line!r} (softirq): unexpected end of line")
    try:
        total = _parse_uint64(tokens[1])
        values = {
            key: _parse_uint64(token)
            for key, token in zip(_SOFTIRQ_FIELDS, tokens[2:needed])
        }
    except ValueError as exc:
        raise ValueError(f"couldn't parse {line!r} (softirq): {exc}") from exc
    return SoftIRQStat(**values), total


def _lines(text: str) -> list[str]:
    parts = text.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    return [p.removesuffix("\r") for p in parts]


def _scalar(value: str, key: str) -> int:
    try:
        return _parse_uint64(value)
    except ValueError as exc:
        raise ValueError(f"couldn't parse {value!r} ({key}): {exc}") from exc


_SCALAR_KEYS = {
    "btime": "boot_time",
    "ctxt": "context_switches",
    "processes": "process_created",
    "procs_running": "processes_running",
    "procs_blocked": "processes_blocked",
}


def parse_stat(text: str) -> Stat:
    """Parse the full contents of /proc/stat."""
    stat = Stat()
    for line in _lines(text):
        parts = line.split()
        if len(parts) < 2:
            continue
        key = parts[0]
        if key in _SCALAR_KEYS:
            setattr(stat, _SCALAR_KEYS[key], _scalar(parts[1], key))
        elif key == "intr":
            stat.irq_total = _scalar(parts[1], "intr")
            irqs = []
            for index, count in enumerate(parts[2:]):
                try:
                    irqs.append(_parse_uint64(count))
                except ValueError as exc:
                    raise ValueError(
                        f"couldn't parse {count!r} (intr{index}): {exc}"
                    ) from exc
            stat.irq = irqs
        elif key == "softirq":
            stat.softirq, stat.softirq_total = parse_softirq_stat(line)
        elif key.startswith("cpu"):
            cpu_stat, cpu_id = parse_cpu_stat(line)
            if cpu_id is None:
                stat.cpu_total = cpu_stat
            else:
                while len(stat.cpu) <= cpu_id:
                    stat.cpu.append(CPUStat())
                stat.cpu[cpu_id] = cpu_stat
    return stat


def read_stat(path: str | os.PathLike[str]) -> Stat:
    """Read and parse a file in /proc/stat format."""
    with open(path, encoding="utf-8", errors="surrogateescape") as handle:
        return parse_stat(handle.read())