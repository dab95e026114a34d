"""Entry point to a mounted proc filesystem."""

from __future__ import annotations

import os
import re

from procfs.cgroup import CgroupSummary, parse_cgroup_summaries
from procfs.netstat import NetStat, read_net_stats
from procfs.netunix import NetUNIX, read_net_unix
from procfs.proc import Proc
from procfs.psi import PSIStats, parse_psi_stats
from procfs.schedstat import Schedstat, read_schedstat
from procfs.slab import SlabInfo, parse_slab_info
from procfs.stat import Stat, read_stat
from procfs.swaps import Swap, parse_swaps

DEFAULT_MOUNT_POINT = "/proc"

_INT = re.compile(r"[+-]?[0-9]+")


def _read_text(path: str) -> str:
    with open(path, "rb") as handle:
        return handle.read().decode("utf-8", errors="surrogateescape")


def _parse_pid(text: str) -> int | None:
    if not _INT.fullmatch(text):
        return None
    value = int(text)
    if not -(1 << 63) <= value < 1 << 63:
        return None
    return value


class FS:
    """A proc filesystem mounted at ``root``."""

    def __init__(self, mount_point: str | os.PathLike[str] = DEFAULT_MOUNT_POINT) -> None:
        mount = os.fspath(mount_point)
        if not mount.strip():
            mount = DEFAULT_MOUNT_POINT
        if not os.path.exists(mount):
            raise FileNotFoundError(f"could not read {mount!r}: no such file or directory")
        if not os.path.isdir(mount):
            raise NotADirectoryError(f"mount point {mount!r} is not a directory")
        self.root = mount

    def __repr__(self) -> str:
        return f"FS({self.root!r})"

    def path(self, *args: str) -> str:
        """Path of a file below the mount point."""
        return os.path.join(self.root, *args)

    def proc(self, pid: int) -> Proc:
        """The process with the given pid; raises if it does not exist."""
        os.stat(self.path(str(pid)))
        return Proc(pid, self.root)

    def self_proc(self) -> Proc:
        """The process the ``self`` link points to."""
        target = os.readlink(self.path("self"))
        text = target.replace(self.root, "")
        pid = _parse_pid(text)
        if pid is None:
            raise ValueError(f"invalid pid in self link {target!r}")
        return self.proc(pid)

    def all_procs(self) -> list[Proc]:
        """All processes currently listed under the mount point."""
        procs = []
        for name in os.listdir(self.root):
            pid = _parse_pid(name)
            if pid is not None:
                procs.append(Proc(pid, self.root))
        return procs

    def net_unix(self) -> NetUNIX:
        """UNIX domain sockets from net/unix."""
        return read_net_unix(self.path("net", "unix"))

    def net_stat(self) -> list[NetStat]:
        """Per-CPU counters of every file under net/stat."""
        return read_net_stats(self.path("net", "stat"))

    def cgroup_summaries(self) -> list[CgroupSummary]:
        """Controllers listed in the cgroups file."""
        return parse_cgroup_summaries(_read_text(self.path("cgroups")))

    def psi_stats_for_resource(self, resource: str) -> PSIStats:
        """Pressure stall information for a resource such as cpu, memory or io."""
        try:
            text = _read_text(self.path("pressure", resource))
        except OSError as exc:
            raise OSError(
                exc.errno, f"psi_stats: unavailable for {resource!r}: {exc.strerror}", exc.filename
            ) from exc
        return parse_psi_stats(text)

    def schedstat(self) -> Schedstat:
        """Scheduler statistics for all CPUs."""
        return read_schedstat(self.path("schedstat"))

    def slab_info(self) -> SlabInfo:
        """Kernel slab pools from slabinfo."""
        return parse_slab_info(_read_text(self.path("slabinfo")))

    def stat(self) -> Stat:
        """Kernel and system statistics."""
        return read_stat(self.path("stat"))

    def swaps(self) -> list[Swap]:
        """Configured swap devices."""
        return parse_swaps(_read_text(self.path("swaps")))


def self_proc() -> Proc:
    """The current process, read via the default mount point."""
    return FS(DEFAULT_MOUNT_POINT).self_proc()


def new_proc(pid: int) -> Proc:
    """The process with the given pid under the default mount point."""
    return FS(DEFAULT_MOUNT_POINT).proc(pid)


def all_procs() -> list[Proc]:
    """All processes under the default mount point."""
    return FS(DEFAULT_MOUNT_POINT).all_procs()