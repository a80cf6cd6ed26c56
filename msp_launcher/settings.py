"""
This module contains the configuration constants for the client launcher.
It defines file paths, the client executable names and the runtime intervals
used by the supervisor. A few values can be overridden through the environment.
"""

import os
import sys
import pathlib

#* --- Core Paths ---
BASE_DIR = pathlib.Path.cwd()

# The key=value file that caches the last valid client folder between runs.
# It must exist before the launcher tries to update it.
ENV_FILE_PATH = pathlib.Path(os.getenv("MSP_LAUNCHER_ENV_FILE", str(BASE_DIR / ".env.local")))
CLIENT_FOLDER_ENV_KEY = "MSP_CLIENT_FOLDER_PATH"

# Optional rotating log file. Console-only logging when unset.
LOG_FILE_PATH = os.getenv("MSP_LAUNCHER_LOG_FILE") or None
LOG_FILE_MAX_BYTES = 2_000_000
LOG_FILE_BACKUP_COUNT = 3

#* --- Client Executable ---
CLIENT_PROCESS_NAME = "MSP-Challenge"
CLIENT_EXECUTABLE_NAMES = {
    "win32": "MSP-Challenge.exe",
    "linux": "MSP-Challenge.x86_64",
}


def client_executable_name(platform: str = sys.platform) -> str:
    """Returns the platform-specific file name of the client executable."""
    return CLIENT_EXECUTABLE_NAMES.get(platform, CLIENT_PROCESS_NAME)


#* --- Supervisor Settings ---
PROCESS_TITLE = "MSP Client Launcher"
STATUS_REFRESH_INTERVAL = float(os.getenv("MSP_LAUNCHER_STATUS_INTERVAL", "1.0"))  # seconds
STATUS_TICKER_JOIN_TIMEOUT = 2.0  # seconds

#* --- Banner ---
BANNER_LINES = (
    "MSP-Challenge Client Launcher",
    "-------------------------------",
    "This program can launch multiple MSP-Challenge clients keeping the memory usage under a certain limit.",
    "It will pass any unknown arguments to the MSP-Challenge client, so you can pass client command line arguments, e.g.:",
    "  msp-client-launcher --num-clients=20 Team=Admin User=marin Password=test "
    "ServerAddress=http://localhost ConfigFileName=North_Sea_basic AutoLogin=1",
    "-------------------------------",
)
