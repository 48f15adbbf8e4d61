"""
APScheduler-based cycle scheduler.

This module provides the CycleScheduler class for running reconciliation
cycles at a fixed interval or on a cron schedule. Jobs allow a single
running instance and coalesce missed runs, so a slow cycle causes the next
tick to be skipped rather than overlapped.
"""

import logging
from datetime import datetime
from typing import Any, Callable

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)


def parse_cron_expression(cron_expression: str) -> CronTrigger:
    """
    Build a CronTrigger from a 5-field cron expression

    Args:
        cron_expression: "minute hour day month day_of_week",
            e.g. "*/15 * * * *" for every 15 minutes

    Returns:
        CronTrigger for the expression

    Raises:
        ValueError: If the expression does not have 5 fields or a field
            is invalid
    """
    parts = cron_expression.split()

    if len(parts) != 5:
        raise ValueError(
            "Cron expression must have 5 parts: minute hour day month day_of_week"
        )

    minute, hour, day, month, day_of_week = parts

    return CronTrigger(
        minute=minute,
        hour=hour,
        day=day,
        month=month,
        day_of_week=day_of_week,
    )


class CycleScheduler:
    """
    Scheduler for periodic reconciliation cycles
    """

    def __init__(self):
        self.scheduler = BlockingScheduler()
        self.jobs = []

    def _add_job(
        self,
        job_func: Callable,
        trigger: Any,
        job_id: str,
        run_immediately: bool,
    ) -> None:
        options = {}
        if run_immediately:
            options["next_run_time"] = datetime.now(trigger.timezone)

        job = self.scheduler.add_job(
            job_func,
            trigger=trigger,
            id=job_id,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
            **options,
        )
        self.jobs.append(job)

    def add_interval_job(
        self,
        job_func: Callable,
        interval_seconds: int,
        job_id: str,
        run_immediately: bool = True,
    ) -> None:
        """
        Add a job that runs at fixed intervals

        Args:
            job_func: Function to execute
            interval_seconds: Interval in seconds
            job_id: Unique identifier for the job
            run_immediately: Also run once as soon as the scheduler starts
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")

        self._add_job(job_func, IntervalTrigger(seconds=interval_seconds), job_id, run_immediately)
        logger.info(f"Added interval job '{job_id}' with {interval_seconds}s interval")

    def add_cron_job(
        self,
        job_func: Callable,
        cron_expression: str,
        job_id: str,
        run_immediately: bool = True,
    ) -> None:
        """
        Add a job that runs on a cron schedule

        Args:
            job_func: Function to execute
            cron_expression: 5-field cron expression
            job_id: Unique identifier for the job
            run_immediately: Also run once as soon as the scheduler starts

        Raises:
            ValueError: If the cron expression is invalid
        """
        trigger = parse_cron_expression(cron_expression)
        self._add_job(job_func, trigger, job_id, run_immediately)
        logger.info(f"Added cron job '{job_id}' with schedule '{cron_expression}'")

    def remove_job(self, job_id: str) -> None:
        """
        Remove a scheduled job

        Args:
            job_id: Unique identifier of the job to remove
        """
        self.scheduler.remove_job(job_id)
        self.jobs = [job for job in self.jobs if job.id != job_id]
        logger.info(f"Removed job '{job_id}'")

    def start(self) -> None:
        """
        Start the scheduler

        Blocks the current thread and runs scheduled jobs until
        interrupted.
        """
        logger.info(f"Starting cycle scheduler with {len(self.jobs)} job(s)")

        try:
            self.scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            logger.info("Scheduler stopped by user")
            self.stop()

    def stop(self) -> None:
        """Stop the scheduler, waiting for a running cycle to finish"""
        if self.scheduler.running:
            self.scheduler.shutdown()
        logger.info("Scheduler stopped")

    def list_jobs(self) -> list[dict[str, Any]]:
        """
        List all scheduled jobs

        Returns:
            List of job information dictionaries
        """
        jobs = []
        for job in self.scheduler.get_jobs():
            # pending jobs have no next_run_time until the scheduler starts
            next_run_time = getattr(job, "next_run_time", None)
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run_time": next_run_time.isoformat() if next_run_time else None,
                "trigger": str(job.trigger),
            })
        return jobs
