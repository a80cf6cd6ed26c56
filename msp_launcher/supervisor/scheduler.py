import time
import logging
from typing import TYPE_CHECKING, Any, Callable, List, NamedTuple

if TYPE_CHECKING:
    from msp_launcher.config import LaunchConfiguration
    from .backend import ProcessBackend

log = logging.getLogger(__name__)


class TrackedProcess(NamedTuple):
    """A launched client. index is the 1-based launch order."""
    index: int
    pid: int
    handle: Any


def estimate_memory_usage(current_percent: float, iteration: int, penalty_percent: float) -> float:
    """
    Estimates memory usage after launching the client of the given 0-based iteration.
    The penalty grows with the iteration number, not with the clients actually running.
    """
    return current_percent + (iteration + 1) * penalty_percent


def is_group_boundary(launched: int, group_size: int, total: int) -> bool:
    """True when the `launched`-th client closes a group and more clients are still to come."""
    return launched % group_size == 0 and launched < total


def launch_clients(
    config: "LaunchConfiguration",
    backend: "ProcessBackend",
    sleep: Callable[[float], None] = time.sleep,
) -> List[TrackedProcess]:
    """
    Starts up to config.num_clients clients, stopping early when the memory estimate
    goes over the limit. Spawn errors are not caught.

    :param config: The launch configuration.
    :param backend: Platform operations used to spawn and to query memory.
    :param sleep: Blocking delay, in seconds.
    :return: The started clients in launch order.
    """
    tracked: List[TrackedProcess] = []
    executable = config.executable_path
    arguments = config.forwarded_arguments

    for i in range(config.num_clients):
        estimate = estimate_memory_usage(
            backend.current_memory_usage_percent(), i, config.memory_penalty_per_client_percentage
        )
        log.info(f"Estimated memory usage: {estimate:.2f}%")
        if estimate > config.memory_limit_percentage:
            log.warning(
                "Memory usage exceeded limit. Stopping the launch of new clients. "
                f"Current number of clients: {len(tracked)}"
            )
            break

        handle = backend.spawn_process(executable, arguments, config.client_folder)
        pid = backend.pid_of(handle)
        tracked.append(TrackedProcess(i + 1, pid, handle))
        log.info(
            f"# {i + 1}. Started process with ID {pid}. "
            f"Current memory usage: {backend.current_memory_usage_percent():.2f}%"
        )

        sleep(config.delay_between_clients_sec)
        if is_group_boundary(i + 1, config.client_group_size, config.num_clients):
            log.debug(f"Group of {config.client_group_size} complete. Waiting {config.delay_between_client_groups_sec}s.")
            sleep(config.delay_between_client_groups_sec)

    return tracked
