import sys
import logging
import setproctitle
from typing import List, Optional

from msp_launcher import settings
from msp_launcher.log import setup_logging
from msp_launcher.config import build_configuration, parse_options
from msp_launcher.supervisor import ClientSupervisor

log = logging.getLogger(__name__)


def print_banner() -> None:
    for line in settings.BANNER_LINES:
        print(line)


def main(argv: Optional[List[str]] = None) -> int:
    """
    The main entry point of the launcher.

    :param argv: Command line arguments without the program name. Defaults to sys.argv[1:].
    :return: The process exit code.
    """
    argv = sys.argv[1:] if argv is None else argv

    # Console logging first, so option parsing can already report problems.
    setup_logging(logging.INFO)
    print_banner()

    options, passthrough = parse_options(argv)
    if options.verbose:
        setup_logging(logging.DEBUG)
    setproctitle.setproctitle(settings.PROCESS_TITLE)

    supervisor = ClientSupervisor()
    try:
        if options.kill_all_client_processes_at_start:
            supervisor.kill_existing_clients()
        config = build_configuration(options, passthrough)
        supervisor.run(config)
    except KeyboardInterrupt:
        print()
        log.warning("Interrupted. Launched clients are left running.")
        return 130
    except Exception as e:
        log.critical(f"Launcher failed: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
