import os
import logging
import argparse
from pathlib import Path
from typing import Callable, NamedTuple, Optional, Sequence, Tuple

from msp_launcher import settings
from .env_file import load_env_file, update_env_file

log = logging.getLogger(__name__)

FOLDER_PROMPT = "Please enter the path to the MSP-Challenge folder: "


class LaunchConfiguration(NamedTuple):
    """Resolved launch settings. Built once at startup and never changed."""
    client_folder: Path
    num_clients: int = 1
    client_group_size: int = 5
    delay_between_clients_sec: int = 4
    delay_between_client_groups_sec: int = 20
    memory_limit_percentage: int = 80
    memory_penalty_per_client_percentage: float = 0.4
    kill_all_client_processes_at_start: bool = False
    client_arguments: Tuple[str, ...] = ()

    @property
    def executable_path(self) -> Path:
        return self.client_folder / settings.client_executable_name()

    @property
    def forwarded_arguments(self) -> str:
        """The pass-through tokens joined with single spaces, without any quoting."""
        return " ".join(self.client_arguments)


def is_valid_folder_path(folder_path: Optional[str]) -> bool:
    """Checks that the folder exists and contains the client executable."""
    if not folder_path:
        return False
    folder = Path(folder_path)
    if not folder.is_dir():
        return False
    return (folder / settings.client_executable_name()).is_file()


def resolve_client_folder(
    cli_value: Optional[str],
    env_path: Path = settings.ENV_FILE_PATH,
    prompt: Callable[[str], str] = input,
) -> Path:
    """
    Finds a valid client folder and caches it in the settings file.

    The explicit option wins over the environment (which already holds the settings
    file values). While the candidate is missing or invalid the user is asked for a
    new one, without a retry limit.

    :param cli_value: Value of --msp-client-folder-path, if given.
    :param env_path: The settings file the valid path is written back to.
    :param prompt: Reads one line of user input.
    :return: The validated folder.
    :raises RuntimeError: If standard input is closed before a valid path is entered.
    """
    folder_path = cli_value or os.environ.get(settings.CLIENT_FOLDER_ENV_KEY)
    while not is_valid_folder_path(folder_path):
        if folder_path:
            log.warning(f"'{folder_path}' is not a folder containing {settings.client_executable_name()}.")
        try:
            folder_path = prompt(FOLDER_PROMPT).strip().strip('"')
        except EOFError:
            raise RuntimeError("Input closed before a valid MSP-Challenge folder path was entered.") from None

    update_env_file(env_path, settings.CLIENT_FOLDER_ENV_KEY, folder_path)
    log.info(f"{settings.CLIENT_FOLDER_ENV_KEY}: {folder_path}")
    return Path(folder_path)


def build_configuration(
    options: argparse.Namespace,
    passthrough: Sequence[str],
    env_path: Path = settings.ENV_FILE_PATH,
    prompt: Callable[[str], str] = input,
) -> LaunchConfiguration:
    """
    Loads the settings file, resolves the client folder and freezes everything into a
    LaunchConfiguration.

    :param options: Parsed launcher options.
    :param passthrough: Arguments forwarded to every client.
    :param env_path: The settings file.
    :param prompt: Reads one line of user input.
    :raises ValueError: If the client group size is not positive.
    """
    if options.client_group_size <= 0:
        raise ValueError(f"--client-group-size must be a positive number, got {options.client_group_size}.")

    load_env_file(env_path)
    client_folder = resolve_client_folder(options.msp_client_folder_path, env_path, prompt)

    return LaunchConfiguration(
        client_folder=client_folder,
        num_clients=options.num_clients,
        client_group_size=options.client_group_size,
        delay_between_clients_sec=options.delay_between_clients_sec,
        delay_between_client_groups_sec=options.delay_between_client_groups_sec,
        memory_limit_percentage=options.memory_limit_percentage,
        memory_penalty_per_client_percentage=options.memory_penalty_per_client_percentage,
        kill_all_client_processes_at_start=options.kill_all_client_processes_at_start,
        client_arguments=tuple(passthrough),
    )
