import logging
from typing import TYPE_CHECKING, Any, Iterable, List, NamedTuple, Tuple

from msp_launcher import settings

if TYPE_CHECKING:
    from .backend import ProcessBackend
    from .scheduler import TrackedProcess

log = logging.getLogger(__name__)


class KillReport(NamedTuple):
    killed: List[int]
    failed: List[Tuple[int, str]]


def _kill(backend: "ProcessBackend", handle: Any, pid: int, report: KillReport) -> None:
    """Kills one process, recording the outcome instead of raising."""
    try:
        backend.terminate(handle)
    except Exception as e:
        reason = str(e) or type(e).__name__
        log.warning(f"Failed to kill process with ID {pid}: {reason}")
        report.failed.append((pid, reason))
        return
    log.info(f"Killed process with ID {pid}")
    report.killed.append(pid)


def kill_tracked_processes(tracked: Iterable["TrackedProcess"], backend: "ProcessBackend") -> KillReport:
    """
    Kills every launched client in launch order. A failure on one client never stops
    the others from being killed.

    :param tracked: The clients recorded by the scheduler.
    :param backend: Platform operations used to kill.
    :return: The pids killed and the pids that could not be killed, with the reason.
    """
    report = KillReport([], [])
    for proc in tracked:
        _kill(backend, proc.handle, proc.pid, report)
    log.info(f"Killed {len(report.killed)} client(s), {len(report.failed)} failure(s).")
    return report


def kill_existing_clients(backend: "ProcessBackend", name: str = settings.CLIENT_PROCESS_NAME) -> KillReport:
    """
    Kills every client process already running on the machine, whoever started it.

    :param backend: Platform operations used to find and kill processes.
    :param name: Executable name without extension.
    """
    report = KillReport([], [])
    for handle in backend.find_processes_by_name(name):
        _kill(backend, handle, backend.pid_of(handle), report)
    if not report.killed and not report.failed:
        log.info(f"No running {name} processes found.")
    return report
