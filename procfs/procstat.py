"""Parsing of per-process status information from /proc/<pid>/stat."""

from __future__ import annotations

import mmap
import os
import re
from dataclasses import dataclass, field
from typing import Iterator

from procfs.stat import USER_HZ, read_stat

_INT = re.compile(r"[+-]?[0-9]+")
_UINT = re.compile(r"\+?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_LIMIT = 1 << 63
_UINT64_LIMIT = 1 << 64


@dataclass
class ProcStat:
    """Status information about a process, read from /proc/<pid>/stat.

    Times are in clock ticks unless noted otherwise.
    """

    pid: int
    comm: str = ""
    state: str = ""
    ppid: int = 0
    pgrp: int = 0
    session: int = 0
    tty: int = 0
    tpgid: int = 0
    flags: int = 0
    min_flt: int = 0
    cmin_flt: int = 0
    maj_flt: int = 0
    cmaj_flt: int = 0
    utime: int = 0
    stime: int = 0
    cutime: int = 0
    cstime: int = 0
    priority: int = 0
    nice: int = 0
    num_threads: int = 0
    starttime: int = 0
    vsize: int = 0
    rss: int = 0
    rss_limit: int = 0
    rt_priority: int = 0
    policy: int = 0
    delay_acct_blkio_ticks: int = 0
    proc_root: str = field(default="/proc", repr=False, compare=False)

    def virtual_memory(self) -> int:
        """Virtual memory size in bytes."""
        return self.vsize

    def resident_memory(self) -> int:
        """Resident memory size in bytes."""
        return self.rss * mmap.PAGESIZE

    def start_time(self) -> float:
        """Unix timestamp, in seconds, at which the process started."""
        stat = read_stat(os.path.join(self.proc_root, "stat"))
        return float(stat.boot_time) + float(self.starttime) / USER_HZ

    def cpu_time(self) -> float:
        """Total user and system CPU time in seconds."""
        return float(self.utime + self.stime) / USER_HZ


class _Tokens:
    def __init__(self, text: str) -> None:
        self._iter: Iterator[str] = iter(text.split())

    def _next(self) -> str:
        try:
            return next(self._iter)
        except StopIteration:
            raise ValueError("unexpected EOF") from None

    def string(self) -> str:
        return self._next()

    def int64(self) -> int:
        token = self._next()
        if not _INT.fullmatch(token):
            raise ValueError(f"expected integer, got {token!r}")
        value = int(token)
        if not _INT64_MIN <= value < _INT64_LIMIT:
            raise ValueError(f"integer overflow on token {token!r}")
        return value

    def uint64(self) -> int:
        token = self._next()
        if not _UINT.fullmatch(token):
            raise ValueError(f"expected unsigned integer, got {token!r}")
        value = int(token)
        if value >= _UINT64_LIMIT:
            raise ValueError(f"unsigned integer overflow on token {token!r}")
        return value

    def skip_uint64(self, count: int) -> None:
        for _ in range(count):
            self.uint64()

    def skip_int64(self, count: int) -> None:
        for _ in range(count):
            self.int64()


def parse_proc_stat(pid: int, data: bytes | str, proc_root: str | os.PathLike[str] = "/proc") -> ProcStat:
    """Parse the contents of /proc/<pid>/stat.

    The command name is taken between the first "(" and the last ")", so it may
    itself hold parentheses and spaces.
    """
    text = data.decode("utf-8", errors="surrogateescape") if isinstance(data, bytes) else data
    left = text.find("(")
    right = text.rfind(")")
    if left < 0 or right < 0:
        raise ValueError(f"unexpected format, couldn't extract comm {text!r}")

    stat = ProcStat(pid=pid, comm=text[left + 1:right], proc_root=os.fspath(proc_root))
    tokens = _Tokens(text[right + 2:])

    stat.state = tokens.string()
    stat.ppid = tokens.int64()
    stat.pgrp = tokens.int64()
    stat.session = tokens.int64()
    stat.tty = tokens.int64()
    stat.tpgid = tokens.int64()
    stat.flags = tokens.uint64()
    stat.min_flt = tokens.uint64()
    stat.cmin_flt = tokens.uint64()
    stat.maj_flt = tokens.uint64()
    stat.cmaj_flt = tokens.uint64()
    stat.utime = tokens.uint64()
    stat.stime = tokens.uint64()
    stat.cutime = tokens.int64()
    stat.cstime = tokens.int64()
    stat.priority = tokens.int64()
    stat.nice = tokens.int64()
    stat.num_threads = tokens.int64()
    tokens.skip_int64(1)
    stat.starttime = tokens.uint64()
    stat.vsize = tokens.uint64()
    stat.rss = tokens.int64()
    stat.rss_limit = tokens.uint64()
    tokens.skip_uint64(12)
    tokens.skip_int64(2)
    stat.rt_priority = tokens.uint64()
    stat.policy = tokens.uint64()
    stat.delay_acct_blkio_ticks = tokens.uint64()
    return stat