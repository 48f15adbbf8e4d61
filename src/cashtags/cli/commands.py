"""
CLI command implementations.

This module contains the implementation of the three CLI commands:
- run: One reconciliation cycle
- schedule: Periodic reconciliation cycles
- show: Print the persisted record store
"""

import argparse
import logging
from pathlib import Path

from prometheus_client import CollectorRegistry

from src.utils.metrics import MetricsPublisher
from src.utils.tracing import initialize_tracing, instrument_httpx, shutdown_tracing

from .. import __version__
from ..agent import AgentClient
from ..clock import CycleClock
from ..config import TrackerConfig, read_task_file
from ..cycle import ReconciliationCycle
from ..metrics import CycleMetrics
from ..scheduler import CycleScheduler
from ..store import JsonRecordStore, StoreStatus
from .output import format_store_console, format_store_csv, format_store_json

logger = logging.getLogger(__name__)

CYCLE_JOB_ID = "cashtag_reconciliation"


def load_config(args: argparse.Namespace) -> TrackerConfig:
    """
    Build configuration from the environment and CLI overrides

    Args:
        args: Parsed command-line arguments

    Returns:
        Validated TrackerConfig

    Raises:
        ConfigurationError: If a setting is invalid
    """
    config = TrackerConfig.from_env()

    if args.store is not None:
        config.store_path = Path(args.store)
    if args.timezone is not None:
        config.timezone = args.timezone

    if getattr(args, 'agent_url', None) is not None:
        config.agent.url = args.agent_url
    if getattr(args, 'agent_timeout', None) is not None:
        config.agent.timeout_seconds = args.agent_timeout
    if getattr(args, 'task_file', None) is not None:
        config.agent.task = read_task_file(args.task_file)

    if getattr(args, 'interval', None) is not None:
        config.interval_seconds = args.interval
    if getattr(args, 'cron', None) is not None:
        config.cron = args.cron
    if getattr(args, 'metrics_port', None) is not None:
        config.metrics_port = args.metrics_port

    config.validate()
    return config


def build_cycle(
    config: TrackerConfig,
    registry: CollectorRegistry | None = None,
) -> ReconciliationCycle:
    """
    Wire a ReconciliationCycle from configuration

    Args:
        config: Tracker configuration
        registry: Prometheus registry for cycle metrics (default: global)

    Returns:
        ReconciliationCycle ready to run
    """
    return ReconciliationCycle(
        source=AgentClient(config.agent),
        store=JsonRecordStore(config.store_path),
        clock=CycleClock(config.timezone),
        metrics=CycleMetrics(registry=registry),
    )


def cmd_run(args: argparse.Namespace) -> int:
    """
    Run a single reconciliation cycle

    Args:
        args: Parsed command-line arguments

    Returns:
        Process exit code: 1 if the cycle failed, else 0
    """
    config = load_config(args)
    logger.info(f"Running one reconciliation cycle against {config.store_path}")

    result = build_cycle(config).run()

    if result.failed:
        logger.error(f"Reconciliation cycle failed: {result.error}")
        return 1

    logger.info(f"Added {result.added} record(s), store now holds {result.store_size}")
    return 0


def cmd_schedule(args: argparse.Namespace) -> int:
    """
    Run reconciliation cycles periodically until interrupted

    Args:
        args: Parsed command-line arguments

    Returns:
        Process exit code
    """
    config = load_config(args)

    publisher = None
    if config.metrics_port is not None:
        publisher = MetricsPublisher(port=config.metrics_port)
        publisher.start(version=__version__)

    if args.otlp_endpoint:
        initialize_tracing(otlp_endpoint=args.otlp_endpoint)
        instrument_httpx()

    cycle = build_cycle(config)
    scheduler = CycleScheduler()
    run_immediately = not args.no_initial_run

    if config.cron:
        scheduler.add_cron_job(cycle.run, config.cron, CYCLE_JOB_ID, run_immediately)
    else:
        scheduler.add_interval_job(
            cycle.run, config.interval_seconds, CYCLE_JOB_ID, run_immediately
        )

    try:
        scheduler.start()
    finally:
        shutdown_tracing()
        if publisher is not None:
            publisher.stop()

    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """
    Print the persisted record store

    Args:
        args: Parsed command-line arguments

    Returns:
        Process exit code: 1 if the store could not be read, else 0
    """
    config = load_config(args)
    existing = JsonRecordStore(config.store_path).read()

    if existing.status == StoreStatus.CORRUPT:
        logger.error(f"Record store {config.store_path} is unreadable: {existing.error}")
        return 1

    if args.format == 'json':
        text = format_store_json(existing.records)
    elif args.format == 'csv':
        text = format_store_csv(existing.records)
    else:
        text = format_store_console(existing.records)

    if args.output and args.format != 'console':
        Path(args.output).write_text(text, encoding="utf-8")
        logger.info(f"Wrote {len(existing.records)} record(s) to {args.output}")
    else:
        print(text)

    return 0
