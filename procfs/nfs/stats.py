"""Record types for NFS client and server RPC statistics and their line parsers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence


@dataclass
class ReplyCache:
    """The "rc" line."""

    hits: int = 0
    misses: int = 0
    no_cache: int = 0


@dataclass
class FileHandles:
    """The "fh" line."""

    stale: int = 0
    total_lookups: int = 0
    anon_lookups: int = 0
    dir_no_cache: int = 0
    no_dir_no_cache: int = 0


@dataclass
class InputOutput:
    """The "io" line."""

    read: int = 0
    write: int = 0


@dataclass
class Threads:
    """The "th" line."""

    threads: int = 0
    full_cnt: int = 0


@dataclass
class ReadAheadCache:
    """The "ra" line."""

    cache_size: int = 0
    cache_histogram: list[int] = field(default_factory=list)
    not_found: int = 0


@dataclass
class Network:
    """The "net" line."""

    net_count: int = 0
    udp_count: int = 0
    tcp_count: int = 0
    tcp_connect: int = 0


@dataclass
class ClientRPC:
    """The client "rpc" line."""

    rpc_count: int = 0
    retransmissions: int = 0
    auth_refreshes: int = 0


@dataclass
class ServerRPC:
    """The server "rpc" line."""

    rpc_count: int = 0
    bad_cnt: int = 0
    bad_fmt: int = 0
    bad_auth: int = 0
    badc_int: int = 0


@dataclass
class V2Stats:
    """The "proc2" line."""

    null: int = 0
    get_attr: int = 0
    set_attr: int = 0
    root: int = 0
    lookup: int = 0
    read_link: int = 0
    read: int = 0
    wr_cache: int = 0
    write: int = 0
    create: int = 0
    remove: int = 0
    rename: int = 0
    link: int = 0
    sym_link: int = 0
    mk_dir: int = 0
    rm_dir: int = 0
    read_dir: int = 0
    fs_stat: int = 0


@dataclass
class V3Stats:
    """The "proc3" line."""

    null: int = 0
    get_attr: int = 0
    set_attr: int = 0
    lookup: int = 0
    access: int = 0
    read_link: int = 0
    read: int = 0
    write: int = 0
    create: int = 0
    mk_dir: int = 0
    sym_link: int = 0
    mk_nod: int = 0
    remove: int = 0
    rm_dir: int = 0
    rename: int = 0
    link: int = 0
    read_dir: int = 0
    read_dir_plus: int = 0
    fs_stat: int = 0
    fs_info: int = 0
    path_conf: int = 0
    commit: int = 0


@dataclass
class ClientV4Stats:
    """The client "proc4" line."""

    null: int = 0
    read: int = 0
    write: int = 0
    commit: int = 0
    open: int = 0
    open_confirm: int = 0
    open_noattr: int = 0
    open_downgrade: int = 0
    close: int = 0
    setattr: int = 0
    fs_info: int = 0
    renew: int = 0
    set_client_id: int = 0
    set_client_id_confirm: int = 0
    lock: int = 0
    lockt: int = 0
    locku: int = 0
    access: int = 0
    getattr: int = 0
    lookup: int = 0
    lookup_root: int = 0
    remove: int = 0
    rename: int = 0
    link: int = 0
    symlink: int = 0
    create: int = 0
    pathconf: int = 0
    stat_fs: int = 0
    read_link: int = 0
    read_dir: int = 0
    server_caps: int = 0
    deleg_return: int = 0
    get_acl: int = 0
    set_acl: int = 0
    fs_locations: int = 0
    release_lockowner: int = 0
    secinfo: int = 0
    fsid_present: int = 0
    exchange_id: int = 0
    create_session: int = 0
    destroy_session: int = 0
    sequence: int = 0
    get_lease_time: int = 0
    reclaim_complete: int = 0
    layout_get: int = 0
    get_device_info: int = 0
    layout_commit: int = 0
    layout_return: int = 0
    secinfo_no_name: int = 0
    test_state_id: int = 0
    free_state_id: int = 0
    get_device_list: int = 0
    bind_conn_to_session: int = 0
    destroy_client_id: int = 0
    seek: int = 0
    allocate: int = 0
    de_allocate: int = 0
    layout_stats: int = 0
    clone: int = 0


@dataclass
class ServerV4Stats:
    """The server "proc4" line."""

    null: int = 0
    compound: int = 0


@dataclass
class V4Ops:
    """The "proc4ops" line: counts of NFSv4 operations."""

    op0_unused: int = 0
    op1_unused: int = 0
    op2_future: int = 0
    access: int = 0
    close: int = 0
    commit: int = 0
    create: int = 0
    deleg_purge: int = 0
    deleg_return: int = 0
    get_attr: int = 0
    get_fh: int = 0
    link: int = 0
    lock: int = 0
    lockt: int = 0
    locku: int = 0
    lookup: int = 0
    lookup_root: int = 0
    nverify: int = 0
    open: int = 0
    open_attr: int = 0
    open_confirm: int = 0
    open_dgrd: int = 0
    put_fh: int = 0
    put_pub_fh: int = 0
    put_root_fh: int = 0
    read: int = 0
    read_dir: int = 0
    read_link: int = 0
    remove: int = 0
    rename: int = 0
    renew: int = 0
    restore_fh: int = 0
    save_fh: int = 0
    sec_info: int = 0
    set_attr: int = 0
    verify: int = 0
    write: int = 0
    rel_lock_owner: int = 0


@dataclass
class ClientRPCStats:
    """All statistics from /proc/net/rpc/nfs."""

    network: Network = field(default_factory=Network)
    client_rpc: ClientRPC = field(default_factory=ClientRPC)
    v2_stats: V2Stats = field(default_factory=V2Stats)
    v3_stats: V3Stats = field(default_factory=V3Stats)
    client_v4_stats: ClientV4Stats = field(default_factory=ClientV4Stats)


@dataclass
class ServerRPCStats:
    """All statistics from /proc/net/rpc/nfsd."""

    reply_cache: ReplyCache = field(default_factory=ReplyCache)
    file_handles: FileHandles = field(default_factory=FileHandles)
    input_output: InputOutput = field(default_factory=InputOutput)
    threads: Threads = field(default_factory=Threads)
    read_ahead_cache: ReadAheadCache = field(default_factory=ReadAheadCache)
    network: Network = field(default_factory=Network)
    server_rpc: ServerRPC = field(default_factory=ServerRPC)
    v2_stats: V2Stats = field(default_factory=V2Stats)
    v3_stats: V3Stats = field(default_factory=V3Stats)
    server_v4_stats: ServerV4Stats = field(default_factory=ServerV4Stats)
    v4_ops: V4Ops = field(default_factory=V4Ops)


def _invalid(name: str, values: Sequence[int]) -> ValueError:
    return ValueError(f"invalid {name} line {list(values)!r}")


def _require_length(name: str, values: Sequence[int], count: int) -> list[int]:
    if len(values) != count:
        raise _invalid(name, values)
    return list(values)


def _counted(name: str, values: Sequence[int]) -> list[int]:
    """Check that the leading count matches the number of values and return the values."""
    if not values or len(values) - 1 != values[0]:
        raise _invalid(name, values)
    return list(values[1:])


def parse_reply_cache(values: Sequence[int]) -> ReplyCache:
    """Build the "rc" record from its three values."""
    return ReplyCache(*_require_length("ReplyCache", values, 3))


def parse_file_handles(values: Sequence[int]) -> FileHandles:
    """Build the "fh" record from its five values."""
    return FileHandles(*_require_length("FileHandles", values, 5))


def parse_input_output(values: Sequence[int]) -> InputOutput:
    """Build the "io" record from its two values."""
    return InputOutput(*_require_length("InputOutput", values, 2))


def parse_threads(values: Sequence[int]) -> Threads:
    """Build the "th" record from its two values."""
    return Threads(*_require_length("Threads", values, 2))


def parse_read_ahead_cache(values: Sequence[int]) -> ReadAheadCache:
    """Build the "ra" record: size, a ten-bucket histogram and the not-found count."""
    v = _require_length("ReadAheadCache", values, 12)
    return ReadAheadCache(cache_size=v[0], cache_histogram=v[1:11], not_found=v[11])


def parse_network(values: Sequence[int]) -> Network:
    """Build the "net" record from its four values."""
    return Network(*_require_length("Network", values, 4))


def parse_server_rpc(values: Sequence[int]) -> ServerRPC:
    """Build the server "rpc" record from its five values."""
    return ServerRPC(*_require_length("RPC", values, 5))


def parse_client_rpc(values: Sequence[int]) -> ClientRPC:
    """Build the client "rpc" record from its three values."""
    return ClientRPC(*_require_length("RPC", values, 3))


def parse_v2_stats(values: Sequence[int]) -> V2Stats:
    """Build the "proc2" record; the first value is the count that follows."""
    v = _counted("V2Stats", values)
    if len(v) < 18:
        raise _invalid("V2Stats", values)
    return V2Stats(*v[:18])


def parse_v3_stats(values: Sequence[int]) -> V3Stats:
    """Build the "proc3" record; the first value is the count that follows."""
    v = _counted("V3Stats", values)
    if len(v) < 22:
        raise _invalid("V3Stats", values)
    return V3Stats(*v[:22])


def parse_client_v4_stats(values: Sequence[int]) -> ClientV4Stats:
    """Build the client "proc4" record.

    Older kernels emit fewer than 59 values; the missing ones are zero.
    """
    v = _counted("ClientV4Stats", values)
    v += [0] * (59 - len(v))
    return ClientV4Stats(*v[:59])


def parse_server_v4_stats(values: Sequence[int]) -> ServerV4Stats:
    """Build the server "proc4" record, which holds exactly two counts."""
    v = _counted("V4Stats", values)
    if len(v) != 2:
        raise _invalid("V4Stats", values)
    return ServerV4Stats(*v)


def parse_v4_ops(values: Sequence[int]) -> V4Ops:
    """Build the "proc4ops" record; at least 39 operations must be present."""
    v = _counted("V4Ops", values)
    if len(v) < 39:
        raise _invalid("V4Ops", values)
    return V4Ops(*v[:38])