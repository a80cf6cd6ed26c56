"""
The configuration package.
Turns the command line, the settings file and, when needed, interactive input
into a single immutable LaunchConfiguration.
"""
from .options import OPTION_TABLE, parse_options, split_arguments
from .resolver import LaunchConfiguration, build_configuration, is_valid_folder_path, resolve_client_folder

__all__ = [
    "OPTION_TABLE", "parse_options", "split_arguments",
    "LaunchConfiguration", "build_configuration", "is_valid_folder_path", "resolve_client_folder",
]
