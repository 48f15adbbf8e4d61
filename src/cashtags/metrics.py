"""
Metrics for reconciliation cycles.

Tracks cycle outcomes, durations and record counts so a stalled agent or
a store that stops growing shows up on dashboards.
"""

import logging
import time
from typing import Optional

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    CollectorRegistry,
    REGISTRY,
)

from src.utils.metrics import get_or_create_metric

logger = logging.getLogger(__name__)


class CycleMetrics:
    """
    Prometheus metrics for reconciliation cycles
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        """
        Initialize cycle metrics

        Metrics already registered (e.g. by an earlier CycleMetrics on the
        same registry) are reused, so every instance reports into one set.

        Args:
            registry: Custom Prometheus registry (default: global REGISTRY)
        """
        self.registry = registry or REGISTRY

        self.cycles_total = self._metric(
            Counter,
            "cashtag_cycles",
            "Total number of reconciliation cycles",
            ["status"],
        )

        self.cycle_duration_seconds = self._metric(
            Histogram,
            "cashtag_cycle_duration_seconds",
            "Duration of reconciliation cycles in seconds",
            buckets=(1, 5, 15, 30, 60, 120, 300, 600, 900),
        )

        self.records_fetched_total = self._metric(
            Counter,
            "cashtag_records_fetched",
            "Candidate records returned by the agent",
        )

        self.records_filtered_total = self._metric(
            Counter,
            "cashtag_records_filtered",
            "Candidate records dropped as empty",
        )

        self.records_added_total = self._metric(
            Counter,
            "cashtag_records_added",
            "Records newly added to the store",
        )

        self.store_size = self._metric(
            Gauge,
            "cashtag_store_size",
            "Number of records in the store after the last cycle",
        )

        self.last_success_timestamp = self._metric(
            Gauge,
            "cashtag_last_success_timestamp",
            "Unix time of the last cycle that persisted its result",
        )

    def _metric(self, metric_class, name, documentation, *args, **kwargs):
        return get_or_create_metric(
            lambda: metric_class(name, documentation, *args, registry=self.registry, **kwargs),
            name,
            self.registry,
        )

    def record_cycle(
        self,
        status: str,
        duration: float,
        fetched: int = 0,
        accepted: int = 0,
        added: int = 0,
        store_size: Optional[int] = None,
    ) -> None:
        """
        Record a completed (or abandoned) cycle

        Args:
            status: Cycle status label
            duration: Duration in seconds
            fetched: Candidate records returned by the agent
            accepted: Candidates left after filtering
            added: Records newly added to the store
            store_size: Store size after the cycle, if known
        """
        self.cycles_total.labels(status=status).inc()
        self.cycle_duration_seconds.observe(duration)
        self.records_fetched_total.inc(fetched)
        self.records_filtered_total.inc(fetched - accepted)
        self.records_added_total.inc(added)

        if store_size is not None:
            self.store_size.set(store_size)

        if status == "ok":
            self.last_success_timestamp.set(time.time())

        logger.debug(
            f"Recorded cycle metrics: status={status}, duration={duration:.2f}s, "
            f"fetched={fetched}, added={added}"
        )
