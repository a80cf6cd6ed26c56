import os
import sys
import time
import shutil
import psutil
import pytest
from types import SimpleNamespace

from msp_launcher.supervisor import backend as backend_module
from msp_launcher.supervisor.backend import PsutilBackend
from msp_launcher.supervisor.reaper import kill_tracked_processes
from msp_launcher.supervisor.scheduler import TrackedProcess


def test_memory_usage_comes_from_psutil(monkeypatch):
    monkeypatch.setattr(backend_module.psutil, "virtual_memory", lambda: SimpleNamespace(percent=63.5))
    assert PsutilBackend().current_memory_usage_percent() == 63.5


def test_memory_query_failure_is_fatal(monkeypatch):
    def broken():
        raise OSError("no /proc")

    monkeypatch.setattr(backend_module.psutil, "virtual_memory", broken)
    with pytest.raises(RuntimeError):
        PsutilBackend().current_memory_usage_percent()


def test_find_processes_by_name_ignores_extension_and_case(monkeypatch):
    procs = [
        SimpleNamespace(pid=1, info={"name": "MSP-Challenge.exe"}),
        SimpleNamespace(pid=2, info={"name": "msp-challenge.x86_64"}),
        SimpleNamespace(pid=3, info={"name": "MSP-Challenge"}),
        SimpleNamespace(pid=4, info={"name": "explorer.exe"}),
        SimpleNamespace(pid=5, info={"name": None}),
    ]
    monkeypatch.setattr(backend_module.psutil, "process_iter", lambda attrs=None: iter(procs))
    found = PsutilBackend().find_processes_by_name("MSP-Challenge")
    assert [p.pid for p in found] == [1, 2, 3]


@pytest.mark.skipif(sys.platform == "win32" or shutil.which("sleep") is None, reason="needs a POSIX sleep binary")
def test_spawn_and_terminate_real_process(tmp_path):
    backend = PsutilBackend()
    handle = backend.spawn_process(shutil.which("sleep"), "30", tmp_path)
    try:
        assert backend.pid_of(handle) == handle.pid
        assert os.path.samefile(handle.cwd(), tmp_path)
        assert handle.cmdline()[1:] == ["30"]
    finally:
        backend.terminate(handle)
    handle.wait(timeout=5)
    with pytest.raises(psutil.NoSuchProcess):
        backend.terminate(handle)


@pytest.mark.skipif(sys.platform == "win32" or shutil.which("true") is None, reason="needs a POSIX true binary")
def test_client_that_already_exited_is_reported_as_failure(tmp_path):
    backend = PsutilBackend()
    handle = backend.spawn_process(shutil.which("true"), "", tmp_path)
    deadline = time.monotonic() + 5
    while time.monotonic() < deadline:
        try:
            if handle.status() == psutil.STATUS_ZOMBIE:
                break
        except psutil.NoSuchProcess:
            break
        time.sleep(0.01)

    report = kill_tracked_processes([TrackedProcess(1, handle.pid, handle)], backend)
    assert report.killed == []
    assert [pid for pid, _ in report.failed] == [handle.pid]
