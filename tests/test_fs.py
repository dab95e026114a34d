import os
from unittest import mock

import pytest

import procfs.fs as fs_module
from procfs.fs import FS, all_procs, new_proc, self_proc


@pytest.fixture
def root(tmp_path):
    base = tmp_path / "proc"
    for pid in ("584", "26231"):
        (base / pid).mkdir(parents=True)
    os.symlink("26231", base / "self")
    (base / "net" / "stat").mkdir(parents=True)
    (base / "net" / "unix").write_text(
        "Num       RefCount Protocol Flags    Type St Inode Path\n"
        "0000000000000000: 00000002 00000000 00010000 0001 01 3442596 "
        "/var/run/postgresql/.s.PGSQL.5432\n"
    )
    (base / "net" / "stat" / "arp_cache").write_text(
        "entries  allocs destroys\n"
        "00000014  00000001 00000002\n"
        "00000014  0000000d 0000000e\n"
    )
    (base / "cgroups").write_text(
        "#subsys_name\thierarchy\tnum_cgroups\tenabled\ncpuset\t7\t148\t1\n"
    )
    (base / "pressure").mkdir()
    (base / "pressure" / "cpu").write_text("some avg10=0.10 avg60=2.00 avg300=3.85 total=15\n")
    (base / "schedstat").write_text(
        "version 15\ntimestamp 15819019232\n"
        "cpu0 498494191 0 3533438552 2553969831 3853684107 2465731542 "
        "2045936778163039 343796 4767485306\n"
        "domain0 00000000,00000003 212499247 210112015 1861015 1860405436 536440 369895 32599\n"
        "cpu1 1 2 3 4 5 6 7 8 9\n"
    )
    (base / "slabinfo").write_text(
        "slabinfo - version: 2.1\n"
        "# name            <active_objs> <num_objs> <objsize> <objperslab> <pagesperslab>"
        " : tunables <limit> <batchcount> <sharedfactor> : slabdata <active_slabs>"
        " <num_slabs> <sharedavail>\n"
        "pid_3 375 532 576 28 4 : tunables 0 0 0 : slabdata 19 19 0\n"
    )
    (base / "stat").write_text(
        "cpu  301854 612 111922 8979004 3552 2 3944 0 0 0\n"
        "btime 1418183276\nctxt 38014093\n"
    )
    (base / "swaps").write_text(
        "Filename\t\t\t\tType\t\tSize\tUsed\tPriority\n"
        "/dev/dm-2 partition 131068 176 -2\n"
    )
    return str(base)


def test_missing_mount_point(tmp_path):
    with pytest.raises(FileNotFoundError):
        FS(str(tmp_path / "missing"))


def test_mount_point_not_directory(tmp_path):
    regular = tmp_path / "file"
    regular.write_text("x")
    with pytest.raises(NotADirectoryError):
        FS(str(regular))


def test_blank_mount_point_uses_default(root):
    with mock.patch.object(fs_module, "DEFAULT_MOUNT_POINT", root):
        assert FS("  ").root == root


def test_path(root):
    assert FS(root).path("net", "unix") == os.path.join(root, "net", "unix")


def test_proc(root):
    proc = FS(root).proc(26231)
    assert proc.pid == 26231
    assert proc.root == root


def test_proc_missing(root):
    with pytest.raises(FileNotFoundError):
        FS(root).proc(999999)


def test_self_proc(root):
    fs = FS(root)
    assert fs.self_proc() == fs.proc(26231)


def test_all_procs(root):
    assert sorted(p.pid for p in FS(root).all_procs()) == [584, 26231]


def test_module_functions_use_default_mount(root):
    with mock.patch.object(fs_module, "DEFAULT_MOUNT_POINT", root):
        assert self_proc().pid == 26231
        assert new_proc(584).pid == 584
        assert sorted(p.pid for p in all_procs()) == [584, 26231]


def test_net_unix(root):
    rows = FS(root).net_unix().rows
    assert len(rows) == 1
    assert rows[0].ref_count == 2
    assert rows[0].flags == 1 << 16
    assert rows[0].inode == 3442596
    assert rows[0].path == "/var/run/postgresql/.s.PGSQL.5432"


def test_net_stat(root):
    stats = FS(root).net_stat()
    assert [s.filename for s in stats] == ["arp_cache"]
    assert stats[0].stats == {"entries": [20, 20], "allocs": [1, 13], "destroys": [2, 14]}


def test_cgroup_summaries(root):
    summaries = FS(root).cgroup_summaries()
    assert [(s.subsys_name, s.hierarchy, s.cgroups, s.enabled) for s in summaries] == [
        ("cpuset", 7, 148, 1)
    ]


def test_psi_stats(root):
    stats = FS(root).psi_stats_for_resource("cpu")
    assert stats.full is None
    assert stats.some.avg10 == 0.1
    assert stats.some.avg60 == 2.0
    assert stats.some.avg300 == 3.85
    assert stats.some.total == 15


def test_psi_stats_missing_resource(root):
    with pytest.raises(FileNotFoundError, match="psi_stats"):
        FS(root).psi_stats_for_resource("fake")


def test_schedstat(root):
    cpus = FS(root).schedstat().cpus
    assert [c.cpu_num for c in cpus] == ["0", "1"]
    assert cpus[0].running_nanoseconds == 2045936778163039
    assert cpus[0].waiting_nanoseconds == 343796
    assert cpus[0].run_timeslices == 4767485306


def test_slab_info(root):
    slabs = FS(root).slab_info().slabs
    assert len(slabs) == 1
    slab = slabs[0]
    assert slab.name == "pid_3"
    assert (slab.obj_active, slab.obj_num, slab.obj_size) == (375, 532, 576)
    assert (slab.obj_per_slab, slab.pages_per_slab) == (28, 4)
    assert (slab.slab_active, slab.slab_num, slab.shared_avail) == (19, 19, 0)


def test_stat(root):
    stat = FS(root).stat()
    assert stat.boot_time == 1418183276
    assert stat.context_switches == 38014093
    assert stat.cpu_total.user == 301854 / 100


def test_swaps(root):
    swaps = FS(root).swaps()
    assert len(swaps) == 1
    swap = swaps[0]
    assert swap.filename == "/dev/dm-2"
    assert swap.type == "partition"
    assert (swap.size, swap.used, swap.priority) == (131068, 176, -2)