import logging
from pathlib import Path
from dotenv import load_dotenv, set_key

log = logging.getLogger(__name__)


def load_env_file(env_path: Path) -> bool:
    """
    Loads the key=value settings file into the process environment.
    Values from the file override values inherited from the parent environment.

    :param env_path: Path to the settings file.
    :return: True if the file existed and was loaded.
    """
    if not env_path.exists():
        log.debug(f"Settings file '{env_path}' not found. Nothing loaded.")
        return False
    load_dotenv(env_path, override=True)
    log.debug(f"Loaded settings from '{env_path}'.")
    return True


def update_env_file(env_path: Path, key: str, value: str) -> None:
    """
    Writes KEY=value into the settings file, replacing the existing line for the key
    or appending a new one. Every other line is kept verbatim.

    :param env_path: Path to the settings file. It must already exist.
    :param key: The variable name.
    :param value: The new value, written without quotes.
    :raises FileNotFoundError: If the settings file does not exist.
    """
    if not env_path.is_file():
        raise FileNotFoundError(f"Settings file '{env_path}' does not exist. Create an empty one to enable caching.")
    set_key(env_path, key, value, quote_mode="never")
    log.debug(f"Updated '{key}' in '{env_path}'.")
