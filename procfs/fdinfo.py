"""Parsing of per file descriptor information from /proc/<pid>/fdinfo/<fd>."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_POS = re.compile(r"pos:\s+(\d+)", re.ASCII)
_FLAGS = re.compile(r"flags:\s+(\d+)", re.ASCII)
_MNT_ID = re.compile(r"mnt_id:\s+(\d+)", re.ASCII)
_INOTIFY = re.compile(r"inotify")
_INOTIFY_PARTS = re.compile(
    r"inotify\s+wd:([0-9a-f]+)\s+ino:([0-9a-f]+)\s+sdev:([0-9a-f]+)(?:\s+mask:([0-9a-f]+))?",
    re.ASCII,
)


@dataclass
class InotifyInfo:
    """One inotify watch line of an fdinfo file."""

    wd: str
    ino: str
    sdev: str
    mask: str = ""


@dataclass
class ProcFDInfo:
    """Information about one file descriptor."""

    fd: str
    pos: str = ""
    flags: str = ""
    mnt_id: str = ""
    inotify_infos: list[InotifyInfo] = field(default_factory=list)


class ProcFDInfos(list):
    """A list of ProcFDInfo entries."""

    def inotify_watch_len(self) -> int:
        """Total number of inotify watches across all entries."""
        return sum(len(info.inotify_infos) for info in self)


def parse_inotify_info(line: str) -> InotifyInfo:
    """Parse an inotify line (kernel 3.8 and later)."""
    match = _INOTIFY_PARTS.match(line)
    if match is None:
        raise ValueError(f"invalid inode entry: {line!r}")
    return InotifyInfo(
        wd=match.group(1),
        ino=match.group(2),
        sdev=match.group(3),
        mask=match.group(4) or "",
    )


def parse_fdinfo(fd: str, text: str) -> ProcFDInfo:
    """Parse the contents of the fdinfo file for descriptor ``fd``."""
    info = ProcFDInfo(fd=fd)
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for raw in lines:
        line = raw.removesuffix("\r")
        if match := _POS.fullmatch(line):
            info.pos = match.group(1)
        elif match := _FLAGS.fullmatch(line):
            info.flags = match.group(1)
        elif match := _MNT_ID.fullmatch(line):
            info.mnt_id = match.group(1)
        elif _INOTIFY.match(line):
            info.inotify_infos.append(parse_inotify_info(line))
    return info