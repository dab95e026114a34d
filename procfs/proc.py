"""Access to the per-process files below /proc/<pid>."""

from __future__ import annotations

import itertools
import os
import re
from dataclasses import dataclass, field

from procfs.cgroup import Cgroup, parse_cgroups
from procfs.fdinfo import ProcFDInfo, ProcFDInfos, parse_fdinfo
from procfs.limits import ProcLimits, parse_limits
from procfs.maps import ProcMap, parse_proc_map
from procfs.procstat import ProcStat, parse_proc_stat
from procfs.schedstat import ProcSchedstat, parse_proc_schedstat
from procfs.smaps import ProcSMapsRollup, parse_smaps, parse_smaps_rollup
from procfs.status import ProcStatus, parse_status

DEFAULT_MOUNT_POINT = "/proc"

_INT = re.compile(r"[+-]?[0-9]+")
_UINT = re.compile(r"[0-9]+")
_IO_LINE = re.compile(r"([a-z_]+): *([+-]?[0-9]+)")
_IO_KEYS = (
    "rchar",
    "wchar",
    "syscr",
    "syscw",
    "read_bytes",
    "write_bytes",
    "cancelled_write_bytes",
)


@dataclass
class ProcIO:
    """I/O counters of a process from /proc/<pid>/io."""

    rchar: int = 0
    wchar: int = 0
    syscr: int = 0
    syscw: int = 0
    read_bytes: int = 0
    write_bytes: int = 0
    cancelled_write_bytes: int = 0


@dataclass(frozen=True)
class Namespace:
    """One namespace of a process; equal inodes mean the same namespace."""

    type: str
    inode: int


def parse_io(text: str) -> ProcIO:
    """Parse the contents of /proc/<pid>/io."""
    lines = text.split("\n")[: len(_IO_KEYS)]
    values = []
    for key, line in itertools.zip_longest(_IO_KEYS, lines, fillvalue=""):
        match = _IO_LINE.fullmatch(line.rstrip(" \r"))
        if match is None or match.group(1) != key:
            raise ValueError(f"couldn't parse io line {line!r}, expected {key!r}")
        values.append(int(match.group(2)))
    *unsigned, cancelled = values
    for key, value in zip(_IO_KEYS, unsigned):
        if not 0 <= value < 1 << 64:
            raise ValueError(f"io value out of range for {key}: {value}")
    if not -(1 << 63) <= cancelled < 1 << 63:
        raise ValueError(f"io value out of range for cancelled_write_bytes: {cancelled}")
    return ProcIO(*values)


def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as handle:
        return handle.read()


def _read_text(path: str) -> str:
    return _read_bytes(path).decode("utf-8", errors="surrogateescape")


def _readlink_or_empty(path: str) -> str:
    try:
        return os.readlink(path)
    except FileNotFoundError:
        return ""


@dataclass(frozen=True, order=True)
class Proc:
    """A process found below a proc mount point."""

    pid: int
    root: str = field(default=DEFAULT_MOUNT_POINT)

    def path(self, *args: str) -> str:
        """Path of a file inside this process's directory."""
        return os.path.join(self.root, str(self.pid), *args)

    def cmdline(self) -> list[str]:
        """Command line arguments of the process."""
        data = _read_bytes(self.path("cmdline"))
        if not data:
            return []
        text = data.rstrip(b"\x00").decode("utf-8", errors="surrogateescape")
        return text.split("\x00")

    def wchan(self) -> str:
        """Wait channel of the process, or "" when it is not waiting."""
        value = _read_text(self.path("wchan"))
        return "" if value in ("", "0") else value

    def comm(self) -> str:
        """Command name of the process."""
        return _read_text(self.path("comm")).strip()

    def executable(self) -> str:
        """Absolute path of the executable, or "" when unavailable."""
        return _readlink_or_empty(self.path("exe"))

    def cwd(self) -> str:
        """Current working directory, or "" when unavailable."""
        return _readlink_or_empty(self.path("cwd"))

    def root_dir(self) -> str:
        """Root directory as set by chroot, or "" when unavailable."""
        return _readlink_or_empty(self.path("root"))

    def _fd_names(self) -> list[str]:
        return os.listdir(self.path("fd"))

    def file_descriptors(self) -> list[int]:
        """Numbers of the currently open file descriptors."""
        fds = []
        for name in self._fd_names():
            if not _INT.fullmatch(name) or not -(1 << 31) <= int(name) < 1 << 31:
                raise ValueError(f"could not parse fd {name!r}")
            fds.append(int(name))
        return fds

    def file_descriptor_targets(self) -> list[str]:
        """Link targets of all file descriptors; "" where a target cannot be read."""
        targets = []
        for name in self._fd_names():
            try:
                targets.append(os.readlink(self.path("fd", name)))
            except OSError:
                targets.append("")
        return targets

    def file_descriptors_len(self) -> int:
        """Number of currently open file descriptors."""
        return len(self._fd_names())

    def file_descriptors_info(self) -> ProcFDInfos:
        """fdinfo of every open descriptor; descriptors that cannot be read are skipped."""
        infos = ProcFDInfos()
        for name in self._fd_names():
            try:
                infos.append(self.fd_info(name))
            except (OSError, ValueError):
                continue
        return infos

    def fd_info(self, fd: str) -> ProcFDInfo:
        """fdinfo of one file descriptor."""
        return parse_fdinfo(fd, _read_text(self.path("fdinfo", fd)))

    def schedstat(self) -> ProcSchedstat:
        """Task scheduling information."""
        return parse_proc_schedstat(_read_text(self.path("schedstat")))

    def cgroups(self) -> list[Cgroup]:
        """Placement of the process in every control-group hierarchy."""
        return parse_cgroups(_read_text(self.path("cgroup")))

    def environ(self) -> list[str]:
        """Environment of the process as ``NAME=value`` strings."""
        parts = _read_text(self.path("environ")).split("\x00")
        return parts[:-1]

    def io(self) -> ProcIO:
        """I/O counters of the process."""
        return parse_io(_read_text(self.path("io")))

    def limits(self) -> ProcLimits:
        """Current soft resource limits."""
        path = self.path("limits")
        return parse_limits(_read_text(path), path)

    def proc_maps(self) -> list[ProcMap]:
        """Memory mappings of the process."""
        with open(self.path("maps"), encoding="utf-8", errors="surrogateescape") as handle:
            return [parse_proc_map(line.rstrip("\n")) for line in handle]

    def namespaces(self) -> dict[str, Namespace]:
        """Namespaces the process belongs to, keyed by entry name."""
        try:
            names = os.listdir(self.path("ns"))
        except NotADirectoryError as exc:
            raise OSError(f"failed to read contents of ns dir: {exc}") from exc
        result = {}
        for name in names:
            target = os.readlink(self.path("ns", name))
            parts = target.split(":", 1)
            if len(parts) != 2:
                raise ValueError(f"failed to parse namespace type and inode from {target!r}")
            inode_text = parts[1].strip("[]")
            if not _UINT.fullmatch(inode_text) or int(inode_text) >= 1 << 32:
                raise ValueError(f"failed to parse inode from {parts[1]!r}")
            result[name] = Namespace(parts[0], int(inode_text))
        return result

    def smaps_rollup(self) -> ProcSMapsRollup:
        """Summed memory figures; computed from smaps when smaps_rollup is missing."""
        try:
            text = _read_text(self.path("smaps_rollup"))
        except FileNotFoundError:
            with open(self.path("smaps"), encoding="utf-8", errors="surrogateescape") as handle:
                return parse_smaps(handle)
        return parse_smaps_rollup(text)

    def stat(self) -> ProcStat:
        """Status information from /proc/<pid>/stat."""
        return parse_proc_stat(self.pid, _read_bytes(self.path("stat")), self.root)

    def status(self) -> ProcStatus:
        """Status information from /proc/<pid>/status."""
        return parse_status(self.pid, _read_text(self.path("status")))