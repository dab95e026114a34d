import os

import pytest

from procfs.cgroup import Cgroup
from procfs.fdinfo import InotifyInfo, ProcFDInfo
from procfs.limits import UNLIMITED
from procfs.proc import Namespace, Proc, ProcIO, parse_io

ENVIRON = [
    "PATH=/opt/app/bin:/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin",
    "HOSTNAME=testhost",
    "TERM=xterm",
    "APP_VERSION=1.12.5",
    "APP_HOME=/opt/app",
    "HOME=/root",
]

IO_TEXT = (
    "rchar: 750339\nwchar: 818609\nsyscr: 7405\nsyscw: 5245\n"
    "read_bytes: 1024\nwrite_bytes: 2048\ncancelled_write_bytes: -1024\n"
)

LIMITS_TEXT = (
    "Limit                     Soft Limit           Hard Limit           Units     \n"
    "Max cpu time              unlimited            unlimited            seconds   \n"
    "Max open files            2048                 4096                 files     \n"
    "Max address space         8589934592           unlimited            bytes     \n"
    "Max msgqueue size         819200               819200               bytes     \n"
    "Max nice priority         0                    0                    \n"
)

STAT_TEXT = (
    "26231 (vim) R 5392 7446 5392 34835 7446 4218880 32533 309516 26 82 1677 44 "
    "0 0 20 0 1 0 82375 56274944 1981 18446744073709551615 4194304 6294284 "
    "140736914091744 140736914087944 139965136429984 0 0 12288 1870679807 0 0 0 "
    "17 0 0 0 31 0 0 0 0 0 0 0 0 0 0\n"
)

STATUS_TEXT = (
    "Name:\tprometheus\nTgid:\t26231\nVmRSS:\t    6716 kB\n"
    "Uid:\t1000\t1000\t1000\t0\nGid:\t1001\t1001\t1001\t0\n"
    "voluntary_ctxt_switches:\t4742839\nnonvoluntary_ctxt_switches:\t1727500\n"
)

SMAPS_VALUES = (
    "Rss:               29948 kB\nPss:               29944 kB\n"
    "Shared_Clean:          4 kB\nShared_Dirty:          0 kB\n"
    "Private_Clean:     15548 kB\nPrivate_Dirty:     14396 kB\n"
    "Referenced:        24752 kB\nAnonymous:         20756 kB\n"
    "Swap:               1940 kB\nSwapPss:            1940 kB\n"
)

INOTIFY_LINES = (
    "inotify wd:3 ino:1 sdev:34 mask:fce ignored_mask:0 fhandle-bytes:c fhandle-type:81\n"
    "inotify wd:2 ino:1300016 sdev:fd00002 mask:fce ignored_mask:0 fhandle-bytes:8 fhandle-type:1\n"
    "inotify wd:1 ino:2e0001 sdev:fd00000 mask:fce ignored_mask:0 fhandle-bytes:8 fhandle-type:1\n"
)


@pytest.fixture
def root(tmp_path):
    base = tmp_path / "proc"
    p1, p2, p3 = (base / str(pid) for pid in (26231, 26232, 26233))
    for directory in (p1, p2, p3):
        directory.mkdir(parents=True)
    (base / "stat").write_text("btime 1418183276\n")

    (p1 / "cmdline").write_bytes(b"vim\x00test.go\x00+10\x00")
    (p2 / "cmdline").write_bytes(b"")
    (p3 / "cmdline").write_bytes(b"com.example.uiautomator\x00\x00\x00\x00\x00\x00")
    (p1 / "wchan").write_text("poll_schedule_timeout")
    (p2 / "wchan").write_text("0")
    (p1 / "comm").write_text("vim\n")
    (p2 / "comm").write_text("ata_sff\n")
    os.symlink("/usr/bin/vim", p1 / "exe")
    os.symlink("/usr/bin", p1 / "cwd")
    os.symlink("/does/not/exist", p2 / "cwd")
    os.symlink("/", p1 / "root")
    os.symlink("/does/not/exist", p2 / "root")

    (p1 / "fd").mkdir()
    (p1 / "fdinfo").mkdir()
    targets = {"0": "abc", "1": "def", "2": "ghi", "3": "uvw", "10": "xyz"}
    mnt_ids = {"0": "13", "1": "13", "2": "9", "3": "9", "10": "9"}
    for fd, target in targets.items():
        os.symlink(f"../../symlinktargets/{target}", p1 / "fd" / fd)
        flags = "02004000" if fd == "0" else "02004002"
        text = f"pos:\t0\nflags:\t{flags}\nmnt_id:\t{mnt_ids[fd]}\n"
        if fd == "0":
            text += INOTIFY_LINES
        (p1 / "fdinfo" / fd).write_text(text)

    (p3 / "fd").mkdir()
    os.symlink("/dev/null", p3 / "fd" / "abc")

    (p1 / "environ").write_bytes(("\x00".join(ENVIRON) + "\x00").encode())
    (p1 / "io").write_text(IO_TEXT)

    (p1 / "ns").mkdir()
    os.symlink("mnt:[4026531840]", p1 / "ns" / "mnt")
    os.symlink("net:[4026531993]", p1 / "ns" / "net")
    (p3 / "ns").mkdir()
    os.symlink("nocolon", p3 / "ns" / "bogus")

    (p1 / "schedstat").write_text("411605849 93680043 79\n")
    (p3 / "schedstat").write_text("1 2\n")
    (p1 / "limits").write_text(LIMITS_TEXT)
    (p1 / "stat").write_text(STAT_TEXT)
    (p1 / "status").write_text(STATUS_TEXT)
    (p1 / "cgroup").write_text("0::/user.slice\n")
    (p1 / "maps").write_text(
        "00400000-0040b000 r-xp 00000000 fd:01 135 /bin/cat\n"
        "7f00-7f10 rw-p 00000000 00:00 0\n"
    )
    (p1 / "smaps_rollup").write_text(
        "00400000-ffffffffff601000 ---p 00000000 00:00 0    [rollup]\n" + SMAPS_VALUES
    )
    (p2 / "smaps").write_text(
        "00400000-0040b000 r-xp 00000000 fd:01 135 /bin/cat\n"
        + SMAPS_VALUES
        + "VmFlags: rd ex mr mw me dw\n"
    )
    return str(base)


@pytest.mark.parametrize(
    "pid, want",
    [(26231, ["vim", "test.go", "+10"]), (26232, []), (26233, ["com.example.uiautomator"])],
)
def test_cmdline(root, pid, want):
    assert Proc(pid, root).cmdline() == want


@pytest.mark.parametrize("pid, want", [(26231, "poll_schedule_timeout"), (26232, "")])
def test_wchan(root, pid, want):
    assert Proc(pid, root).wchan() == want


@pytest.mark.parametrize("pid, want", [(26231, "vim"), (26232, "ata_sff")])
def test_comm(root, pid, want):
    assert Proc(pid, root).comm() == want


@pytest.mark.parametrize("pid, want", [(26231, "/usr/bin/vim"), (26232, "")])
def test_executable(root, pid, want):
    assert Proc(pid, root).executable() == want


@pytest.mark.parametrize(
    "pid, want", [(26231, "/usr/bin"), (26232, "/does/not/exist"), (26233, "")]
)
def test_cwd(root, pid, want):
    assert Proc(pid, root).cwd() == want


@pytest.mark.parametrize("pid, want", [(26231, "/"), (26232, "/does/not/exist"), (26233, "")])
def test_root_dir(root, pid, want):
    assert Proc(pid, root).root_dir() == want


def test_path(root):
    assert Proc(26231, root).path("fd", "3") == os.path.join(root, "26231", "fd", "3")


def test_file_descriptors(root):
    assert sorted(Proc(26231, root).file_descriptors()) == [0, 1, 2, 3, 10]


def test_file_descriptors_bad_name(root):
    with pytest.raises(ValueError, match="could not parse fd"):
        Proc(26233, root).file_descriptors()


def test_file_descriptor_targets(root):
    assert sorted(Proc(26231, root).file_descriptor_targets()) == [
        "../../symlinktargets/abc",
        "../../symlinktargets/def",
        "../../symlinktargets/ghi",
        "../../symlinktargets/uvw",
        "../../symlinktargets/xyz",
    ]


def test_file_descriptors_len(root):
    assert Proc(26231, root).file_descriptors_len() == 5


def test_file_descriptors_missing_dir(root):
    with pytest.raises(FileNotFoundError):
        Proc(26232, root).file_descriptors_len()


def test_file_descriptors_info(root):
    infos = sorted(Proc(26231, root).file_descriptors_info(), key=lambda info: info.fd)
    assert infos == [
        ProcFDInfo(
            fd="0",
            pos="0",
            flags="02004000",
            mnt_id="13",
            inotify_infos=[
                InotifyInfo(wd="3", ino="1", sdev="34", mask="fce"),
                InotifyInfo(wd="2", ino="1300016", sdev="fd00002", mask="fce"),
                InotifyInfo(wd="1", ino="2e0001", sdev="fd00000", mask="fce"),
            ],
        ),
        ProcFDInfo(fd="1", pos="0", flags="02004002", mnt_id="13"),
        ProcFDInfo(fd="10", pos="0", flags="02004002", mnt_id="9"),
        ProcFDInfo(fd="2", pos="0", flags="02004002", mnt_id="9"),
        ProcFDInfo(fd="3", pos="0", flags="02004002", mnt_id="9"),
    ]


def test_inotify_watch_len(root):
    assert Proc(26231, root).file_descriptors_info().inotify_watch_len() == 3


def test_file_descriptors_info_skips_unreadable(root):
    os.remove(os.path.join(root, "26231", "fdinfo", "3"))
    infos = Proc(26231, root).file_descriptors_info()
    assert sorted(info.fd for info in infos) == ["0", "1", "10", "2"]


def test_fd_info_missing(root):
    with pytest.raises(FileNotFoundError):
        Proc(26231, root).fd_info("99")


def test_environ(root):
    assert Proc(26231, root).environ() == ENVIRON


def test_io(root):
    assert Proc(26231, root).io() == ProcIO(
        rchar=750339,
        wchar=818609,
        syscr=7405,
        syscw=5245,
        read_bytes=1024,
        write_bytes=2048,
        cancelled_write_bytes=-1024,
    )


def test_parse_io_truncated():
    with pytest.raises(ValueError):
        parse_io("rchar: 1\nwchar: 2\n")


def test_parse_io_negative_unsigned():
    with pytest.raises(ValueError):
        parse_io(IO_TEXT.replace("rchar: 750339", "rchar: -1"))


def test_namespaces(root):
    assert Proc(26231, root).namespaces() == {
        "mnt": Namespace("mnt", 4026531840),
        "net": Namespace("net", 4026531993),
    }


def test_namespaces_bad_link(root):
    with pytest.raises(ValueError, match="failed to parse namespace"):
        Proc(26233, root).namespaces()


def test_schedstat(root):
    stats = Proc(26231, root).schedstat()
    assert stats.running_nanoseconds == 411605849
    assert stats.waiting_nanoseconds == 93680043
    assert stats.run_timeslices == 79


def test_schedstat_errors(root):
    with pytest.raises(FileNotFoundError):
        Proc(26232, root).schedstat()
    with pytest.raises(ValueError):
        Proc(26233, root).schedstat()


def test_limits(root):
    limits = Proc(26231, root).limits()
    assert limits.cpu_time == UNLIMITED == 18446744073709551615
    assert limits.open_files == 2048
    assert limits.msgqueue_size == 819200
    assert limits.nice_priority == 0
    assert limits.address_space == 8589934592


def test_stat(root):
    stat = Proc(26231, root).stat()
    assert stat.pid == 26231
    assert stat.comm == "vim"
    assert stat.utime == 1677
    assert stat.stime == 44
    assert stat.starttime == 82375
    assert stat.vsize == 56274944
    assert stat.rss == 1981
    assert stat.rss_limit == 18446744073709551615
    assert stat.delay_acct_blkio_ticks == 31
    assert stat.cpu_time() == 17.21
    assert stat.start_time() == 1418184099.75


def test_status(root):
    status = Proc(26231, root).status()
    assert status.pid == 26231
    assert status.name == "prometheus"
    assert status.tgid == 26231
    assert status.vm_rss == 6716 * 1024
    assert status.uids == ("1000", "1000", "1000", "0")
    assert status.gids == ("1001", "1001", "1001", "0")
    assert status.total_ctxt_switches() == 4742839 + 1727500


def test_cgroups(root):
    assert Proc(26231, root).cgroups() == [Cgroup(0, [], "/user.slice")]


def test_proc_maps(root):
    maps = Proc(26231, root).proc_maps()
    assert [m.pathname for m in maps] == ["/bin/cat", ""]
    assert maps[0].start_addr == 0x00400000
    assert maps[0].inode == 135


def test_smaps_rollup(root):
    rollup = Proc(26231, root).smaps_rollup()
    assert rollup.rss == 29948 * 1024
    assert rollup.pss == 29944 * 1024
    assert rollup.shared_clean == 4 * 1024
    assert rollup.shared_dirty == 0
    assert rollup.private_clean == 15548 * 1024
    assert rollup.private_dirty == 14396 * 1024
    assert rollup.referenced == 24752 * 1024
    assert rollup.anonymous == 20756 * 1024
    assert rollup.swap == 1940 * 1024
    assert rollup.swap_pss == 1940 * 1024


def test_smaps_rollup_falls_back_to_smaps(root):
    assert Proc(26232, root).smaps_rollup() == Proc(26231, root).smaps_rollup()


def test_procs_sort_by_pid(root):
    procs = sorted([Proc(26231, root), Proc(584, root)])
    assert [p.pid for p in procs] == [584, 26231]