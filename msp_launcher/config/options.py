import logging
import argparse
from typing import Any, List, NamedTuple, Optional, Sequence, Tuple

log = logging.getLogger(__name__)


class OptionSpec(NamedTuple):
    """A single launcher option. Everything the parser knows comes from these records."""
    flag: str
    dest: str
    value_type: Optional[type]
    default: Any
    help: str

    @property
    def is_switch(self) -> bool:
        return self.value_type is bool


#* --- Recognized Options ---
OPTION_TABLE: Tuple[OptionSpec, ...] = (
    OptionSpec("--msp-client-folder-path", "msp_client_folder_path", str, None,
               "Specifies the path to the MSP-Challenge client folder. It should contain the MSP-Challenge executable."),
    OptionSpec("--num-clients", "num_clients", int, 1,
               "Specifies the number of clients to launch. Default is 1. Number is limited by the system memory, "
               "see --memory-limit-percentage and --memory-penalty-per-client-percentage."),
    OptionSpec("--client-group-size", "client_group_size", int, 5,
               "Specifies the number of clients in each group. Default is 5."),
    OptionSpec("--delay-between-clients-sec", "delay_between_clients_sec", int, 4,
               "Specifies the delay between clients in seconds. Default is 4."),
    OptionSpec("--delay-between-client-groups-sec", "delay_between_client_groups_sec", int, 20,
               "Specifies the delay between client groups in seconds. Default is 20."),
    OptionSpec("--memory-limit-percentage", "memory_limit_percentage", int, 80,
               "Specifies the memory limit as a percentage of total system memory. Default is 80%%."),
    OptionSpec("--memory-penalty-per-client-percentage", "memory_penalty_per_client_percentage", float, 0.4,
               "Specifies the memory penalty per client as a percentage of total system memory. Default is 0.4%%."),
    OptionSpec("--kill-all-client-processes-at-start", "kill_all_client_processes_at_start", bool, False,
               "Kills all running MSP-Challenge client processes before launching. Default is false."),
    OptionSpec("--verbose", "verbose", bool, False,
               "Shows DEBUG level log output in the console. Not forwarded to the clients."),
)

HELP_FLAGS = ("-h", "--help")


def _normalize(token: str) -> str:
    """Lower-cases the option part of a token and treats '_' as '-'. The value after '=' is kept as is."""
    name, sep, value = token.partition("=")
    return name.lower().replace("_", "-") + sep + value


def _match_option(normalized: str) -> Tuple[Optional[OptionSpec], bool]:
    """
    Finds the option a normalized token belongs to.

    :return: (option, exact). exact is False when the token only starts with an option name,
             e.g. '--num-clientsX'.
    """
    prefix_match = None
    for option in OPTION_TABLE:
        if normalized == option.flag or normalized.startswith(option.flag + "="):
            return option, True
        if prefix_match is None and normalized.startswith(option.flag):
            prefix_match = option
    return prefix_match, False


def split_arguments(argv: Sequence[str]) -> Tuple[List[str], List[str]]:
    """
    Splits the raw argument vector into launcher tokens and client pass-through tokens.

    Launcher tokens are returned in canonical form ('--num-clients=3'), ready for argparse.
    A value given as a separate token ('--num-clients 3') is parsed for its option and, not
    being an option name itself, is also forwarded. Every token that does not match an
    option name is forwarded untouched, in its original order.

    :param argv: The arguments without the program name.
    :return: (launcher_tokens, passthrough_tokens)
    """
    launcher_tokens: List[str] = []
    passthrough: List[str] = []
    tokens = list(argv)
    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        if token in HELP_FLAGS:
            launcher_tokens.append(token)
            continue

        normalized = _normalize(token)
        option, exact = _match_option(normalized)
        if option is None:
            passthrough.append(token)
            continue
        if not exact:
            log.warning(f"Ignoring argument '{token}': it looks like '{option.flag}' but is not a valid form of it.")
            continue

        launcher_tokens.append(normalized)
        if normalized == option.flag and not option.is_switch and i < len(tokens):
            launcher_tokens.append(tokens[i])

    return launcher_tokens, passthrough


def build_parser(prog: str = "msp-client-launcher") -> argparse.ArgumentParser:
    """Builds the argparse parser from OPTION_TABLE."""
    parser = argparse.ArgumentParser(
        prog=prog,
        allow_abbrev=False,
        description="Launches multiple MSP-Challenge clients while keeping the memory usage under a limit.",
        epilog="Any unrecognized argument is passed to every MSP-Challenge client, e.g. Team=Admin AutoLogin=1",
    )
    for option in OPTION_TABLE:
        if option.is_switch:
            parser.add_argument(option.flag, dest=option.dest, action="store_true", default=option.default,
                                help=option.help)
        else:
            parser.add_argument(option.flag, dest=option.dest, type=option.value_type, default=option.default,
                                help=option.help)
    return parser


def parse_options(argv: Sequence[str]) -> Tuple[argparse.Namespace, List[str]]:
    """
    Parses the launcher options and collects the client pass-through arguments.

    :param argv: The arguments without the program name.
    :return: (options namespace, passthrough tokens)
    """
    launcher_tokens, passthrough = split_arguments(argv)
    options = build_parser().parse_args(launcher_tokens)
    log.debug(f"Parsed options: {vars(options)}, pass-through: {passthrough}")
    return options, passthrough
