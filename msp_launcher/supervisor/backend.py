import sys
import psutil
import logging
import subprocess
from pathlib import Path
from abc import ABC, abstractmethod
from typing import Any, Dict, List

log = logging.getLogger(__name__)


class ProcessBackend(ABC):
    """
    The platform operations the launcher needs. Scheduling and reaping only talk to
    this interface, so a different platform (or a test double) can be swapped in.
    A handle is whatever object the backend returns from spawn_process.
    """

    @abstractmethod
    def spawn_process(self, executable: Path, arguments: str, cwd: Path) -> Any:
        """Starts the executable and returns a handle for it."""

    @abstractmethod
    def terminate(self, handle: Any) -> None:
        """Forcefully stops the process. Raises if the process cannot be killed."""

    @abstractmethod
    def current_memory_usage_percent(self) -> float:
        """Returns the used share of physical memory, 0-100."""

    @abstractmethod
    def find_processes_by_name(self, name: str) -> List[Any]:
        """Returns handles for every running process whose executable name (without extension) is `name`."""

    @abstractmethod
    def pid_of(self, handle: Any) -> int:
        """Returns the operating system process id behind a handle."""


def _get_popen_creation_flags() -> Dict[str, Any]:
    """Returns platform-specific keyword arguments for subprocess.Popen."""
    if sys.platform == "win32":
        return {"creationflags": subprocess.DETACHED_PROCESS | subprocess.CREATE_NO_WINDOW}
    return {"start_new_session": True}


class PsutilBackend(ProcessBackend):
    """ProcessBackend built on subprocess and psutil. Handles are psutil.Process objects."""

    def spawn_process(self, executable: Path, arguments: str, cwd: Path) -> psutil.Process:
        # The argument string is split on whitespace only; quoted tokens are not kept together.
        args = [str(executable), *arguments.split()]
        log.debug(f"Spawning {args} in '{cwd}'")
        p = subprocess.Popen(
            args,
            cwd=str(cwd),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            **_get_popen_creation_flags(),
        )
        return psutil.Process(p.pid)

    def terminate(self, handle: psutil.Process) -> None:
        # An exited client stays a zombie until reaped; killing it would wrongly succeed.
        if handle.status() == psutil.STATUS_ZOMBIE:
            raise psutil.NoSuchProcess(handle.pid)
        handle.kill()

    def current_memory_usage_percent(self) -> float:
        try:
            return float(psutil.virtual_memory().percent)
        except (psutil.Error, OSError) as e:
            raise RuntimeError(f"Unable to get memory status: {e}") from e

    def find_processes_by_name(self, name: str) -> List[psutil.Process]:
        wanted = name.lower()
        matches: List[psutil.Process] = []
        for proc in psutil.process_iter(attrs=["name"]):
            try:
                proc_name = proc.info.get("name")
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
            if proc_name and Path(proc_name).stem.lower() == wanted:
                matches.append(proc)
        return matches

    def pid_of(self, handle: psutil.Process) -> int:
        return handle.pid
