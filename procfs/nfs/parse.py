"""Reading of NFS client and server RPC statistics from /proc/net/rpc."""

from __future__ import annotations

import os
import re
from typing import Iterable

from procfs.nfs.stats import (
    ClientRPCStats,
    ServerRPCStats,
    parse_client_rpc,
    parse_client_v4_stats,
    parse_file_handles,
    parse_input_output,
    parse_network,
    parse_read_ahead_cache,
    parse_reply_cache,
    parse_server_rpc,
    parse_server_v4_stats,
    parse_threads,
    parse_v2_stats,
    parse_v3_stats,
    parse_v4_ops,
)

DEFAULT_MOUNT_POINT = "/proc"

_UINT = re.compile(r"[0-9]+")

_CLIENT_LINES = {
    "net": ("network", parse_network),
    "rpc": ("client_rpc", parse_client_rpc),
    "proc2": ("v2_stats", parse_v2_stats),
    "proc3": ("v3_stats", parse_v3_stats),
    "proc4": ("client_v4_stats", parse_client_v4_stats),
}

_SERVER_LINES = {
    "rc": ("reply_cache", parse_reply_cache),
    "fh": ("file_handles", parse_file_handles),
    "io": ("input_output", parse_input_output),
    "th": ("threads", parse_threads),
    "ra": ("read_ahead_cache", parse_read_ahead_cache),
    "net": ("network", parse_network),
    "rpc": ("server_rpc", parse_server_rpc),
    "proc2": ("v2_stats", parse_v2_stats),
    "proc3": ("v3_stats", parse_v3_stats),
    "proc4": ("server_v4_stats", parse_server_v4_stats),
    "proc4ops": ("v4_ops", parse_v4_ops),
}


def parse_uint64s(tokens: Iterable[str]) -> list[int]:
    """Parse decimal unsigned 64-bit integers."""
    result = []
    for token in tokens:
        if not _UINT.fullmatch(token) or int(token) >= 1 << 64:
            raise ValueError(f"invalid unsigned integer {token!r}")
        result.append(int(token))
    return result


def _clean(raw: str) -> str:
    return raw.removesuffix("\n").removesuffix("\r")


def parse_client_rpc_stats(stream: Iterable[str]) -> ClientRPCStats:
    """Parse data in /proc/net/rpc/nfs format given as text lines."""
    stats = ClientRPCStats()
    for raw in stream:
        line = _clean(raw)
        parts = line.split()
        if len(parts) < 2:
            raise ValueError(f"invalid NFS metric line {line!r}")
        try:
            values = parse_uint64s(parts[1:])
        except ValueError as exc:
            raise ValueError(f"error parsing NFS metric line: {exc}") from exc
        entry = _CLIENT_LINES.get(parts[0])
        if entry is None:
            raise ValueError(f"unknown NFS metric line {parts[0]!r}")
        attribute, parser = entry
        try:
            setattr(stats, attribute, parser(values))
        except ValueError as exc:
            raise ValueError(f"errors parsing NFS metric line: {exc}") from exc
    return stats


def parse_server_rpc_stats(stream: Iterable[str]) -> ServerRPCStats:
    """Parse data in /proc/net/rpc/nfsd format given as text lines."""
    stats = ServerRPCStats()
    for raw in stream:
        line = _clean(raw)
        parts = line.split()
        if len(parts) < 2:
            raise ValueError(f"invalid NFSd metric line {line!r}")
        label = parts[0]
        if label == "th":
            # Only the thread count and full count are integers; the rest are floats.
            if len(parts) < 3:
                raise ValueError(f"invalid NFSd th metric line {line!r}")
            tokens = parts[1:3]
        else:
            tokens = parts[1:]
        try:
            values = parse_uint64s(tokens)
        except ValueError as exc:
            raise ValueError(f"error parsing NFSd metric line: {exc}") from exc
        entry = _SERVER_LINES.get(label)
        if entry is None:
            raise ValueError(f"unknown NFSd metric line {label!r}")
        attribute, parser = entry
        try:
            setattr(stats, attribute, parser(values))
        except ValueError as exc:
            raise ValueError(f"errors parsing NFSd metric line: {exc}") from exc
    return stats


class FS:
    """A mounted proc filesystem from which NFS statistics are read."""

    def __init__(self, mount_point: str | os.PathLike[str] = DEFAULT_MOUNT_POINT) -> None:
        mount = os.fspath(mount_point)
        if not mount.strip():
            mount = DEFAULT_MOUNT_POINT
        if not os.path.exists(mount):
            raise FileNotFoundError(f"could not read {mount!r}: no such file or directory")
        if not os.path.isdir(mount):
            raise NotADirectoryError(f"mount point {mount!r} is not a directory")
        self.mount_point = mount

    def _path(self, *parts: str) -> str:
        return os.path.join(self.mount_point, *parts)

    def client_rpc_stats(self) -> ClientRPCStats:
        """Read NFS client RPC statistics from net/rpc/nfs."""
        with open(self._path("net", "rpc", "nfs"), encoding="utf-8") as handle:
            return parse_client_rpc_stats(handle)

    def server_rpc_stats(self) -> ServerRPCStats:
        """Read NFS daemon RPC statistics from net/rpc/nfsd."""
        with open(self._path("net", "rpc", "nfsd"), encoding="utf-8") as handle:
            return parse_server_rpc_stats(handle)


def new_default_fs() -> FS:
    """Open the proc filesystem at its default mount point."""
    return FS(DEFAULT_MOUNT_POINT)