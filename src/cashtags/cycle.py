"""
One reconciliation cycle: fetch -> filter -> read -> merge -> write.

The cycle owns the store value for its duration and threads it through
the pure engine. At most one cycle runs at a time per ReconciliationCycle
instance; a call that arrives while another is in flight is skipped.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Protocol

from src.utils.logging import ContextLogger
from src.utils.tracing import add_span_event, trace_operation

from .agent import FetchResult
from .engine import Clock, filter_invalid, reconcile
from .errors import StoreWriteError
from .metrics import CycleMetrics
from .records import Record
from .store import JsonRecordStore, StoreStatus

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_FETCH_FAILED = "fetch_failed"
STATUS_SKIPPED = "skipped"
STATUS_WRITE_FAILED = "write_failed"
STATUS_ERROR = "error"

FAILED_STATUSES = frozenset({STATUS_WRITE_FAILED, STATUS_ERROR})


class RecordSource(Protocol):
    def fetch(self) -> FetchResult: ...


@dataclass
class CycleResult:
    """Summary of one reconciliation cycle."""

    status: str
    fetched: int = 0
    accepted: int = 0
    added: int = 0
    store_size: int | None = None
    duration_seconds: float = 0.0
    error: str | None = None
    store_status: StoreStatus | None = None
    added_records: list[Record] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.status in FAILED_STATUSES


class ReconciliationCycle:
    """
    Runs reconciliation cycles against one store

    run() never raises: every failure is logged and reported in the
    returned CycleResult so the scheduler keeps going.
    """

    def __init__(
        self,
        source: RecordSource,
        store: JsonRecordStore,
        clock: Clock,
        metrics: CycleMetrics | None = None,
    ):
        """
        Initialize the cycle runner

        Args:
            source: Record source, normally an AgentClient
            store: Persistence for the record store
            clock: Timestamp source for newly observed records
            metrics: Cycle metrics (optional)
        """
        self.source = source
        self.store = store
        self.clock = clock
        self.metrics = metrics
        self._lock = threading.Lock()
        self._cycles = 0

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    def run(self) -> CycleResult:
        """
        Execute one cycle unless another is already running

        Returns:
            CycleResult describing what happened
        """
        if not self._lock.acquire(blocking=False):
            logger.warning("Previous reconciliation cycle still running, skipping this one")
            result = CycleResult(status=STATUS_SKIPPED)
            self._record(result)
            return result

        try:
            self._cycles += 1
            return self._run_locked(self._cycles)
        finally:
            self._lock.release()

    def _run_locked(self, cycle_number: int) -> CycleResult:
        log = ContextLogger(__name__, cycle=cycle_number, store=str(self.store.path))
        started = time.monotonic()

        try:
            with trace_operation("reconciliation_cycle", cycle=cycle_number, store=self.store.path):
                result = self._execute(log)
        except Exception as e:
            log.error(f"Reconciliation cycle failed unexpectedly: {e}", exc_info=True)
            result = CycleResult(status=STATUS_ERROR, error=str(e))

        result.duration_seconds = time.monotonic() - started
        self._record(result)

        log.info(
            f"Cycle finished: status={result.status}, fetched={result.fetched}, "
            f"added={result.added}, store_size={result.store_size}, "
            f"duration={result.duration_seconds:.2f}s"
        )
        return result

    def _execute(self, log: ContextLogger) -> CycleResult:
        fetch = self.source.fetch()
        if fetch.ok:
            status = STATUS_OK
        else:
            log.warning(f"Fetch failed, continuing with an empty batch: {fetch.error}")
            status = STATUS_FETCH_FAILED

        batch = filter_invalid(fetch.records)
        add_span_event("batch_filtered", fetched=len(fetch.records), accepted=len(batch))

        existing = self.store.read()
        if existing.status == StoreStatus.CORRUPT:
            log.warning(
                f"Record store could not be read ({existing.error}); "
                f"merging against an empty store this cycle"
            )

        merged = reconcile(existing.records, batch, now=self.clock)

        result = CycleResult(
            status=status,
            fetched=len(fetch.records),
            accepted=len(batch),
            added=len(merged.added),
            store_size=len(merged.records),
            error=fetch.error,
            store_status=existing.status,
            added_records=merged.added,
        )

        if not merged.added:
            log.info("No new records this cycle, store left unchanged")
            return result

        for record in merged.added:
            log.info(f"New record: {record.cashtag} {record.contract_address}")

        try:
            self.store.write(merged.records)
        except StoreWriteError as e:
            log.error(f"Merged store was not persisted: {e}")
            result.status = STATUS_WRITE_FAILED
            result.error = str(e)
            result.store_size = len(existing.records)

        return result

    def _record(self, result: CycleResult) -> None:
        if self.metrics is None:
            return
        self.metrics.record_cycle(
            status=result.status,
            duration=result.duration_seconds,
            fetched=result.fetched,
            accepted=result.accepted,
            added=result.added if result.status != STATUS_WRITE_FAILED else 0,
            store_size=result.store_size,
        )
