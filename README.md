# procfs

Read and parse the Linux `/proc` pseudo-filesystem from Python. It needs
nothing outside the standard library.

## What it reads

System-wide, through `procfs.fs.FS`:

| Method | File |
| --- | --- |
| `stat()` | `stat`: CPU times (in seconds), interrupts, context switches, softirqs |
| `schedstat()` | `schedstat`: running and waiting nanoseconds and timeslices per CPU |
| `psi_stats_for_resource(resource)` | `pressure/<resource>`: pressure stall information |
| `slab_info()` | `slabinfo` (format 2.1) |
| `swaps()` | `swaps` |
| `cgroup_summaries()` | `cgroups` |
| `net_unix()` | `net/unix`: UNIX domain sockets, with or without the Inode column |
| `net_stat()` | every file in `net/stat/`: hex counters per CPU |
| `proc(pid)`, `self_proc()`, `all_procs()` | process directories |

For each process, through `procfs.proc.Proc`: `cmdline()`, `comm()`,
`wchan()`, `executable()`, `cwd()`, `root_dir()`, `file_descriptors()`,
`file_descriptor_targets()`, `file_descriptors_len()`,
`file_descriptors_info()`, `fd_info(fd)`, `stat()`, `status()`, `io()`,
`limits()`, `proc_maps()`, `smaps_rollup()`, `schedstat()`, `cgroups()`,
`environ()` and `namespaces()`.

NFS client and server counters from `net/rpc/nfs` and `net/rpc/nfsd` are read
through `procfs.nfs.parse.FS`.

## Installation

```
pip install .
```

## Usage

```python
from procfs.fs import FS, self_proc

fs = FS()                       # mounted at /proc
stat = fs.stat()
print(stat.boot_time, stat.cpu_total.user)

for swap in fs.swaps():
    print(swap.filename, swap.size, swap.used)

me = self_proc()
print(me.cmdline(), me.comm())
print(me.stat().cpu_time(), me.status().vm_rss)
print(me.limits().open_files)
```

A filesystem mounted somewhere else, such as a container's `/proc` or a
directory of fixtures, is passed to `FS`. An empty mount point means `/proc`;
one that does not exist raises `FileNotFoundError`.

```python
fs = FS("/host/proc")
proc = fs.proc(1)               # raises OSError if the process directory is missing
print(proc.namespaces())
```

`Proc.stat()` returns a `ProcStat` with helpers `virtual_memory()`,
`resident_memory()` (pages times the system page size), `cpu_time()` and
`start_time()`, which reads the boot time from the same mount point. Clock
ticks are taken to be 100 per second. `ProcStatus.total_ctxt_switches()` sums
voluntary and involuntary switches. `limits()` reports `unlimited` as
`procfs.limits.UNLIMITED`, the largest 64-bit unsigned value.

`smaps_rollup()` reads `smaps_rollup`, and when that file is missing it sums
the figures in `smaps` itself. `file_descriptors_info()` returns a
`ProcFDInfos` list whose `inotify_watch_len()` counts inotify watches across
all descriptors.

### NFS statistics

```python
from procfs.nfs.parse import FS as NFSFS, parse_server_rpc_stats

stats = NFSFS().server_rpc_stats()
print(stats.reply_cache.hits, stats.v4_ops.read)

with open("nfsd.txt") as handle:
    stats = parse_server_rpc_stats(handle)
```

`parse_client_rpc_stats` does the same for client data. Older kernels that
list fewer NFSv4 client operations leave the missing counters at zero; an
unknown line label raises `ValueError`.

### Parsing text directly

Each file format also has a parser that works on text, with no filesystem
involved, for example `procfs.swaps.parse_swaps`, `procfs.stat.parse_stat`,
`procfs.status.parse_status`, `procfs.procstat.parse_proc_stat`,
`procfs.psi.parse_psi_stats` and `procfs.maps.parse_proc_map`:

```python
from procfs.swaps import parse_swaps

swaps = parse_swaps(
    "Filename  Type  Size  Used  Priority\n"
    "/dev/dm-2 partition 131068 176 -2\n"
)
```

Malformed data raises `ValueError`; an unreadable file raises the usual
`OSError`. A few parsers are lenient by design: unknown lines in pressure
files are ignored, `cpu` lines of `schedstat` with out-of-range values are
skipped, and non-numeric values in `status` read as zero.

## What it does not do

The package is a library only; it installs no command. It does not read
`mountinfo`, `mountstats`, `meminfo` or other `/proc` files not listed above,
and it never writes to `/proc`.

## Running the tests

```
pip install .[test]
pytest
```