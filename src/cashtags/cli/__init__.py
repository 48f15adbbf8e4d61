"""
Command-line interface for the cashtag tracker.

Available commands:
- run: Execute one reconciliation cycle
- schedule: Run cycles periodically
- show: Print the persisted record store
"""

import logging
import sys

from src.utils.logging import configure_from_env

from ..errors import ConfigurationError
from .commands import cmd_run, cmd_schedule, cmd_show, load_config
from .parser import create_parser

logger = logging.getLogger(__name__)

COMMANDS = {
    'run': cmd_run,
    'schedule': cmd_schedule,
    'show': cmd_show,
}


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the cashtag-tracker CLI"""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_from_env(
        level=args.log_level,
        log_file=args.log_file,
        json_format=args.log_json,
    )

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        sys.exit(1)

    try:
        exit_code = command(args)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(2)

    sys.exit(exit_code)


__all__ = [
    'main',
    'cmd_run',
    'cmd_schedule',
    'cmd_show',
    'create_parser',
    'load_config',
]


if __name__ == '__main__':
    main()
