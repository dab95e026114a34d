"""Parsing of per-process status information from /proc/<pid>/status."""

from __future__ import annotations

import re
from dataclasses import dataclass

_UINT = re.compile(r"[0-9]+")
_UINT64_MASK = (1 << 64) - 1


@dataclass
class ProcStatus:
    """Status of a process; memory sizes are in bytes."""

    pid: int
    name: str = ""
    tgid: int = 0
    vm_peak: int = 0
    vm_size: int = 0
    vm_lck: int = 0
    vm_pin: int = 0
    vm_hwm: int = 0
    vm_rss: int = 0
    rss_anon: int = 0
    rss_file: int = 0
    rss_shmem: int = 0
    vm_data: int = 0
    vm_stk: int = 0
    vm_exe: int = 0
    vm_lib: int = 0
    vm_pte: int = 0
    vm_pmd: int = 0
    vm_swap: int = 0
    hugetlb_pages: int = 0
    voluntary_ctxt_switches: int = 0
    nonvoluntary_ctxt_switches: int = 0
    uids: tuple[str, str, str, str] = ("", "", "", "")
    gids: tuple[str, str, str, str] = ("", "", "", "")

    def total_ctxt_switches(self) -> int:
        """Sum of voluntary and involuntary context switches."""
        return self.voluntary_ctxt_switches + self.nonvoluntary_ctxt_switches


_BYTE_FIELDS = {
    "VmPeak": "vm_peak",
    "VmSize": "vm_size",
    "VmLck": "vm_lck",
    "VmPin": "vm_pin",
    "VmHWM": "vm_hwm",
    "VmRSS": "vm_rss",
    "RssAnon": "rss_anon",
    "RssFile": "rss_file",
    "RssShmem": "rss_shmem",
    "VmData": "vm_data",
    "VmStk": "vm_stk",
    "VmExe": "vm_exe",
    "VmLib": "vm_lib",
    "VmPTE": "vm_pte",
    "VmPMD": "vm_pmd",
    "VmSwap": "vm_swap",
    "HugetlbPages": "hugetlb_pages",
}

_COUNT_FIELDS = {
    "voluntary_ctxt_switches": "voluntary_ctxt_switches",
    "nonvoluntary_ctxt_switches": "nonvoluntary_ctxt_switches",
}


def _lenient_uint(text: str) -> int:
    # Non-numeric values read as 0; oversized ones saturate at the 64-bit maximum.
    if not _UINT.fullmatch(text):
        return 0
    return min(int(text), _UINT64_MASK)


def _four(value: str) -> tuple[str, str, str, str]:
    parts = value.split("\t")[:4]
    parts += [""] * (4 - len(parts))
    return tuple(parts)  # type: ignore[return-value]


def _int64(value: int) -> int:
    value &= _UINT64_MASK
    return value - (1 << 64) if value >= 1 << 63 else value


def parse_status(pid: int, text: str) -> ProcStatus:
    """Parse the contents of /proc/<pid>/status."""
    status = ProcStatus(pid=pid)
    for line in text.split("\n"):
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip()
        value = value.strip().strip(" kB")
        number = _lenient_uint(value)

        if key == "Tgid":
            status.tgid = _int64(number)
        elif key == "Name":
            status.name = value
        elif key == "Uid":
            status.uids = _four(value)
        elif key == "Gid":
            status.gids = _four(value)
        elif key in _BYTE_FIELDS:
            setattr(status, _BYTE_FIELDS[key], (number * 1024) & _UINT64_MASK)
        elif key in _COUNT_FIELDS:
            setattr(status, _COUNT_FIELDS[key], number)
    return status