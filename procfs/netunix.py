"""Parsing of the UNIX domain socket table found in /proc/net/unix."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Iterable

_HEX = re.compile(r"[0-9a-fA-F]+")
_SIGNED_HEX = re.compile(r"[+-]?[0-9a-fA-F]+")
_DEC = re.compile(r"[0-9]+")
_UINT64_MASK = (1 << 64) - 1


def _parse_unsigned(text: str, base: int, bits: int) -> int:
    pattern = _HEX if base == 16 else _DEC
    if not pattern.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    value = int(text, base)
    if value >= 1 << bits:
        raise ValueError(f"value out of range: {text!r}")
    return value


def _parse_signed_hex(text: str, bits: int) -> int:
    if not _SIGNED_HEX.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    value = int(text, 16)
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise ValueError(f"value out of range: {text!r}")
    return value


class NetUNIXType(int):
    """Socket type field of a /proc/net/unix entry."""

    __slots__ = ()

    STREAM: NetUNIXType
    DGRAM: NetUNIXType
    SEQPACKET: NetUNIXType

    def __str__(self) -> str:
        return _TYPE_NAMES.get(int(self), "unknown")

    def __repr__(self) -> str:
        return f"NetUNIXType({int(self)})"


class NetUNIXFlags(int):
    """Flags field of a /proc/net/unix entry."""

    __slots__ = ()

    DEFAULT: NetUNIXFlags
    LISTEN: NetUNIXFlags

    def __str__(self) -> str:
        return "listen" if int(self) == _FLAG_LISTEN else "default"

    def __repr__(self) -> str:
        return f"NetUNIXFlags({int(self)})"


class NetUNIXState(int):
    """Connection state field of a /proc/net/unix entry."""

    __slots__ = ()

    UNCONNECTED: NetUNIXState
    CONNECTING: NetUNIXState
    CONNECTED: NetUNIXState
    DISCONNECTED: NetUNIXState

    def __str__(self) -> str:
        return _STATE_NAMES.get(int(self), "unknown")

    def __repr__(self) -> str:
        return f"NetUNIXState({int(self)})"


_FLAG_LISTEN = 1 << 16
_TYPE_NAMES = {1: "stream", 2: "dgram", 5: "seqpacket"}
_STATE_NAMES = {1: "unconnected", 2: "connecting", 3: "connected", 4: "disconnected"}

NetUNIXType.STREAM = NetUNIXType(1)
NetUNIXType.DGRAM = NetUNIXType(2)
NetUNIXType.SEQPACKET = NetUNIXType(5)
NetUNIXFlags.DEFAULT = NetUNIXFlags(0)
NetUNIXFlags.LISTEN = NetUNIXFlags(_FLAG_LISTEN)
NetUNIXState.UNCONNECTED = NetUNIXState(1)
NetUNIXState.CONNECTING = NetUNIXState(2)
NetUNIXState.CONNECTED = NetUNIXState(3)
NetUNIXState.DISCONNECTED = NetUNIXState(4)


@dataclass
class NetUNIXLine:
    """One socket line of /proc/net/unix."""

    kernel_ptr: str = ""
    ref_count: int = 0
    protocol: int = 0
    flags: NetUNIXFlags = NetUNIXFlags(0)
    socket_type: NetUNIXType = NetUNIXType(0)
    state: NetUNIXState = NetUNIXState(0)
    inode: int = 0
    path: str = ""


@dataclass
class NetUNIX:
    """All rows read from /proc/net/unix."""

    rows: list[NetUNIXLine] = field(default_factory=list)


def _strip_line(raw: str) -> str:
    line = raw[:-1] if raw.endswith("\n") else raw
    return line[:-1] if line.endswith("\r") else line


def _parse_field(kind: str, text: str, parser):
    try:
        return parser(text)
    except ValueError as exc:
        raise ValueError(f"failed to parse {kind} {text!r}: {exc}") from exc


def _parse_line(line: str, has_inode: bool, min_fields: int) -> NetUNIXLine:
    fields = line.split()
    count = len(fields)
    if count < min_fields:
        raise ValueError(f"expected at least {min_fields} fields but got {count}")

    kernel_ptr = fields[0].removesuffix(":")
    ref_count = _parse_field("ref count", fields[1], lambda s: _parse_unsigned(s, 16, 32))
    flags = _parse_field("flags", fields[3], lambda s: _parse_unsigned(s, 16, 32))
    socket_type = _parse_field("type", fields[4], lambda s: _parse_unsigned(s, 16, 16))
    state = _parse_field("state", fields[5], lambda s: _parse_signed_hex(s, 8))
    inode = 0
    if has_inode:
        inode = _parse_field("inode", fields[6], lambda s: _parse_unsigned(s, 10, 64))

    path = ""
    if count > min_fields:
        path = fields[7 if has_inode else 6]

    return NetUNIXLine(
        kernel_ptr=kernel_ptr,
        ref_count=ref_count,
        flags=NetUNIXFlags(flags),
        socket_type=NetUNIXType(socket_type),
        state=NetUNIXState(state & _UINT64_MASK),
        inode=inode,
        path=path,
    )


def parse_net_unix(stream: Iterable[str]) -> NetUNIX:
    """Parse /proc/net/unix data given as an iterable of text lines."""
    lines = iter(stream)
    header = _strip_line(next(lines, ""))
    # The Inode column is missing on some kernels; handle both layouts.
    has_inode = "Inode" in header
    min_fields = 7 if has_inode else 6

    table = NetUNIX()
    for raw in lines:
        line = _strip_line(raw)
        try:
            table.rows.append(_parse_line(line, has_inode, min_fields))
        except ValueError as exc:
            raise ValueError(f"failed to parse /proc/net/unix data {line!r}: {exc}") from exc
    return table


def read_net_unix(path: str | os.PathLike[str]) -> NetUNIX:
    """Read and parse a file in /proc/net/unix format."""
    with open(path, encoding="utf-8", errors="surrogateescape") as handle:
        return parse_net_unix(handle)