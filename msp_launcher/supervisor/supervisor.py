import time
import logging
from enum import Enum
from typing import Callable, List, Optional

from msp_launcher import settings
from msp_launcher.config import LaunchConfiguration
from .backend import ProcessBackend, PsutilBackend
from .keypress import wait_for_keypress
from .monitor import StatusTicker
from .reaper import KillReport, kill_existing_clients, kill_tracked_processes
from .scheduler import TrackedProcess, launch_clients

log = logging.getLogger(__name__)


class LauncherState(Enum):
    RESOLVING_CONFIG = "resolving_config"
    LAUNCHING = "launching"
    MONITORING = "monitoring"
    KILLING = "killing"
    EXITED = "exited"


class ClientSupervisor:
    """
    Owns the launched clients for one run: launches them, shows the live memory
    readout, and kills them all when the operator presses a key.
    A supervisor is single-use; run() cannot be called twice.
    """

    def __init__(
        self,
        backend: Optional[ProcessBackend] = None,
        sleep: Callable[[float], None] = time.sleep,
        wait_for_key: Callable[[], None] = wait_for_keypress,
        status_interval: float = settings.STATUS_REFRESH_INTERVAL,
    ) -> None:
        self.backend = backend or PsutilBackend()
        self.sleep = sleep
        self.wait_for_key = wait_for_key
        self.tracked: List[TrackedProcess] = []
        self.status_ticker = StatusTicker(self.backend, status_interval)
        self.state = LauncherState.RESOLVING_CONFIG

    def _set_state(self, state: LauncherState) -> None:
        log.debug(f"State: {self.state.value} -> {state.value}")
        self.state = state

    def kill_existing_clients(self) -> KillReport:
        """Kills client processes left over from earlier runs."""
        log.info(f"Killing all running {settings.CLIENT_PROCESS_NAME} processes...")
        return kill_existing_clients(self.backend)

    def launch_all(self, config: LaunchConfiguration) -> List[TrackedProcess]:
        self._set_state(LauncherState.LAUNCHING)
        log.info(f"Launching up to {config.num_clients} client(s) from '{config.client_folder}'...")
        self.tracked = launch_clients(config, self.backend, self.sleep)
        log.info(f"{len(self.tracked)} of {config.num_clients} client(s) started.")
        return self.tracked

    def monitor(self) -> None:
        """Shows the memory readout and blocks until a key is pressed."""
        self._set_state(LauncherState.MONITORING)
        self.status_ticker.start()
        self.wait_for_key()

    def stop_all(self) -> KillReport:
        self._set_state(LauncherState.KILLING)
        self.status_ticker.stop()
        report = kill_tracked_processes(self.tracked, self.backend)
        self._set_state(LauncherState.EXITED)
        return report

    def run(self, config: LaunchConfiguration) -> KillReport:
        """
        Runs the launch, monitor and kill phases in order.

        :param config: The resolved launch configuration.
        :return: The outcome of the kill phase.
        """
        if self.state is not LauncherState.RESOLVING_CONFIG:
            raise RuntimeError(f"Supervisor already used (state: {self.state.value}).")
        self.launch_all(config)
        self.monitor()
        return self.stop_all()
