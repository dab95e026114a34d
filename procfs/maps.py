"""Parsing of the memory mappings listed in /proc/<pid>/maps."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_HEX = re.compile(r"[0-9a-fA-F]+")
_SIGNED_HEX = re.compile(r"[+-]?[0-9a-fA-F]+")
_DEC = re.compile(r"[0-9]+")
_UINT64_LIMIT = 1 << 64
_INT64_LIMIT = 1 << 63
_UINT32_MASK = 0xFFFFFFFF


@dataclass
class ProcMapPermissions:
    """Permission flags of one mapping."""

    read: bool = False
    write: bool = False
    execute: bool = False
    shared: bool = False
    private: bool = False


@dataclass
class ProcMap:
    """One memory mapping of a process."""

    start_addr: int
    end_addr: int
    perms: ProcMapPermissions = field(default_factory=ProcMapPermissions)
    offset: int = 0
    dev: int = 0
    inode: int = 0
    pathname: str = ""


def _hex_uint64(text: str) -> int:
    if not _HEX.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    value = int(text, 16)
    if value >= _UINT64_LIMIT:
        raise ValueError(f"value out of range: {text!r}")
    return value


def _hex_int64(text: str) -> int:
    if not _SIGNED_HEX.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    value = int(text, 16)
    if not -_INT64_LIMIT <= value < _INT64_LIMIT:
        raise ValueError(f"value out of range: {text!r}")
    return value


def _dec_uint64(text: str) -> int:
    if not _DEC.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    value = int(text)
    if value >= _UINT64_LIMIT:
        raise ValueError(f"value out of range: {text!r}")
    return value


def mkdev(major: int, minor: int) -> int:
    """Combine a major and minor device number into a Linux dev_t value."""
    major &= _UINT32_MASK
    minor &= _UINT32_MASK
    dev = (major & 0x00000FFF) << 8
    dev |= (major & 0xFFFFF000) << 32
    dev |= minor & 0x000000FF
    dev |= (minor & 0xFFFFFF00) << 12
    return dev


def parse_device(token: str) -> int:
    """Parse a ``major:minor`` hex device token into a dev_t value."""
    parts = token.split(":")
    if len(parts) < 2:
        raise ValueError("unexpected number of fields")
    major = _hex_uint64(parts[0])
    minor = _hex_uint64(parts[1])
    return mkdev(major & _UINT32_MASK, minor & _UINT32_MASK)


def parse_address(token: str) -> int:
    """Parse a hexadecimal address."""
    return _hex_uint64(token)


def parse_addresses(token: str) -> tuple[int, int]:
    """Parse a ``start-end`` address range."""
    parts = token.split("-")
    if len(parts) < 2:
        raise ValueError("invalid address")
    return parse_address(parts[0]), parse_address(parts[1])


def parse_permissions(token: str) -> ProcMapPermissions:
    """Parse a permissions token such as ``r-xp``."""
    if len(token) < 4:
        raise ValueError("invalid permissions token")
    return ProcMapPermissions(
        read="r" in token,
        write="w" in token,
        execute="x" in token,
        shared="s" in token,
        private="p" in token,
    )


def parse_proc_map(line: str) -> ProcMap:
    """Parse one line of a maps file."""
    fields = line.split()
    if len(fields) < 5:
        raise ValueError("truncated procmap entry")
    start, end = parse_addresses(fields[0])
    return ProcMap(
        start_addr=start,
        end_addr=end,
        perms=parse_permissions(fields[1]),
        offset=_hex_int64(fields[2]),
        dev=parse_device(fields[3]),
        inode=_dec_uint64(fields[4]),
        pathname=" ".join(fields[5:]),
    )