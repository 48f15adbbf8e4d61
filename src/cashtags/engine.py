"""
Reconciliation engine for cashtag records.

Pure functions over two record collections: the persisted store and a
newly fetched batch. The engine performs no I/O and holds no state; the
caller reads the store, passes it in, and persists the returned value.

Invariants:
- One entry per (cashtag, contract_address) key
- A persisted record's timestamp never changes
- Records with neither a cashtag nor a contract address are never kept
- Records are never removed from the store
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from .clock import CycleClock
from .records import Record, RecordKey

logger = logging.getLogger(__name__)

Clock = Callable[[], str]


@dataclass
class MergeResult:
    """Merged store plus the records that were new in this merge."""

    records: list[Record]
    added: list[Record] = field(default_factory=list)


def filter_invalid(records: Sequence[Record]) -> list[Record]:
    """
    Drop noise records from a batch

    Args:
        records: Candidate records, possibly containing noise and duplicates

    Returns:
        The same records, in order, without those whose cashtag and
        contract address are both None
    """
    kept = [record for record in records if not record.is_noise]

    dropped = len(records) - len(kept)
    if dropped:
        logger.debug(f"Filtered {dropped} empty record(s) from batch of {len(records)}")

    return kept


def reconcile(
    existing: Sequence[Record],
    incoming: Sequence[Record],
    now: Clock | None = None,
) -> MergeResult:
    """
    Merge a new batch into the existing store

    Existing records are kept verbatim, in order. Incoming records whose key
    is not yet known are appended with the cycle timestamp; known keys,
    including repeats within the batch, are ignored.

    Args:
        existing: Records currently in the store
        incoming: Filtered records from the latest batch
        now: Timestamp source, called at most once per merge

    Returns:
        MergeResult with the full next store and the newly added records
    """
    now = now or CycleClock()

    lookup: dict[RecordKey, Record] = {}
    for record in filter_invalid(existing):
        # first occurrence wins if the store already holds a duplicate
        lookup.setdefault(record.key, record)

    added = []
    timestamp = None
    for record in filter_invalid(incoming):
        if record.key in lookup:
            continue

        if timestamp is None:
            timestamp = now()

        new_record = record.with_timestamp(timestamp)
        lookup[record.key] = new_record
        added.append(new_record)

    return MergeResult(records=list(lookup.values()), added=added)


def merge(
    existing: Sequence[Record],
    incoming: Sequence[Record],
    now: Clock | None = None,
) -> list[Record]:
    """
    Merge a new batch into the existing store

    Args:
        existing: Records currently in the store
        incoming: Filtered records from the latest batch
        now: Timestamp source for newly observed records

    Returns:
        The next store: existing records first, then new ones in the order
        they were first seen
    """
    return reconcile(existing, incoming, now).records
