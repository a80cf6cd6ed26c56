import psutil
import pytest
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from msp_launcher import settings
from msp_launcher.config import LaunchConfiguration
from msp_launcher.supervisor.backend import ProcessBackend


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeHandle:
    def __init__(self, pid: int, name: str = settings.CLIENT_PROCESS_NAME) -> None:
        self.pid = pid
        self.name = name

    def __repr__(self) -> str:
        return f"FakeHandle({self.pid})"


class FakeBackend(ProcessBackend):
    """
    Records spawns and kills. Memory usage is `memory(spawn_count)`.
    Handles whose pid is in `dead` (or that were already killed) fail to terminate.
    """

    def __init__(
        self,
        memory: Callable[[int], float] = lambda spawned: 10.0,
        clock: Optional[FakeClock] = None,
        first_pid: int = 1000,
    ) -> None:
        self.memory = memory
        self.clock = clock
        self.next_pid = first_pid
        self.spawned: List[Tuple[Path, str, Path]] = []
        self.spawn_times: List[float] = []
        self.terminate_calls: List[int] = []
        self.killed: List[int] = []
        self.dead: set = set()
        self.denied: set = set()
        self.existing: List[FakeHandle] = []
        self.memory_queries = 0

    def spawn_process(self, executable: Path, arguments: str, cwd: Path) -> Any:
        self.spawned.append((executable, arguments, cwd))
        if self.clock is not None:
            self.spawn_times.append(self.clock.now)
        handle = FakeHandle(self.next_pid)
        self.next_pid += 1
        return handle

    def terminate(self, handle: FakeHandle) -> None:
        self.terminate_calls.append(handle.pid)
        if handle.pid in self.denied:
            raise psutil.AccessDenied(handle.pid)
        if handle.pid in self.dead or handle.pid in self.killed:
            raise psutil.NoSuchProcess(handle.pid)
        self.killed.append(handle.pid)

    def current_memory_usage_percent(self) -> float:
        self.memory_queries += 1
        return self.memory(len(self.spawned))

    def find_processes_by_name(self, name: str) -> List[FakeHandle]:
        return [h for h in self.existing if h.name.lower() == name.lower()]

    def pid_of(self, handle: FakeHandle) -> int:
        return handle.pid


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend(clock: FakeClock) -> FakeBackend:
    return FakeBackend(clock=clock)


@pytest.fixture
def client_folder(tmp_path: Path) -> Path:
    """A folder that contains a (fake) client executable."""
    folder = tmp_path / "MSP-Challenge"
    folder.mkdir()
    (folder / settings.client_executable_name()).write_text("")
    return folder


@pytest.fixture
def env_file(tmp_path: Path) -> Path:
    path = tmp_path / ".env.local"
    path.write_text("")
    return path


@pytest.fixture(autouse=True)
def clean_folder_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so the variable is removed again after the test, even when
    # load_dotenv sets it behind monkeypatch's back.
    monkeypatch.setenv(settings.CLIENT_FOLDER_ENV_KEY, "")
    monkeypatch.delenv(settings.CLIENT_FOLDER_ENV_KEY)


def make_config(folder: Path, **overrides: Any) -> LaunchConfiguration:
    return LaunchConfiguration(client_folder=folder, **overrides)
