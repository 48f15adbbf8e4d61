"""
Command-line argument parser configuration.

This module sets up the argument parser for the cashtag-tracker CLI,
defining all commands and their options.
"""

import argparse


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="cashtag-tracker",
        description="Collect cashtags and contract addresses from an extraction agent "
                    "into a deduplicated JSON store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run a single reconciliation cycle
  cashtag-tracker run

  # Run now and then every 15 minutes (default)
  cashtag-tracker schedule

  # Run on a cron schedule and expose Prometheus metrics
  cashtag-tracker schedule --cron "*/15 * * * *" --metrics-port 9091

  # Print the current store
  cashtag-tracker show --format console

  # Export the store as CSV
  cashtag-tracker show --format csv --output cashtags.csv

Settings not given on the command line are read from CASHTAG_* and LOG_*
environment variables.
        """
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=None,
        help='Logging level (default: LOG_LEVEL or INFO)'
    )
    parser.add_argument(
        '--log-json',
        action='store_true',
        default=None,
        help='Emit logs as JSON lines'
    )
    parser.add_argument('--log-file', help='Also log to this file (rotated)')
    parser.add_argument('--store', help='Path of the JSON record store')
    parser.add_argument('--timezone', help='IANA timezone for record timestamps')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ========== Run command ==========
    run_parser = subparsers.add_parser('run', help='Run one reconciliation cycle')
    _add_agent_options(run_parser)

    # ========== Schedule command ==========
    schedule_parser = subparsers.add_parser(
        'schedule', help='Run a cycle now and then periodically'
    )
    _add_agent_options(schedule_parser)
    schedule_parser.add_argument(
        '--interval',
        type=int,
        help='Interval in seconds (default: CASHTAG_INTERVAL_SECONDS or 900)'
    )
    schedule_parser.add_argument(
        '--cron',
        help='Cron expression, overrides --interval (e.g. "*/15 * * * *")'
    )
    schedule_parser.add_argument(
        '--no-initial-run',
        action='store_true',
        help='Wait for the first scheduled tick instead of running immediately'
    )
    schedule_parser.add_argument(
        '--metrics-port',
        type=int,
        help='Expose Prometheus metrics on this port'
    )
    schedule_parser.add_argument(
        '--otlp-endpoint',
        help='Export traces to this OTLP collector (e.g. localhost:4317)'
    )

    # ========== Show command ==========
    show_parser = subparsers.add_parser('show', help='Print the persisted record store')
    show_parser.add_argument(
        '--format',
        choices=['console', 'json', 'csv'],
        default='console',
        help='Output format (default: console)'
    )
    show_parser.add_argument(
        '--output',
        help='Write to this file instead of stdout (json and csv only)'
    )

    return parser


def _add_agent_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--agent-url', help='Base URL of the extraction agent')
    parser.add_argument(
        '--agent-timeout',
        type=float,
        help='Abandon the agent call after this many seconds'
    )
    parser.add_argument('--task-file', help='File containing the extraction task prompt')
