"""
JSON file persistence for the record store.

This module provides the JsonRecordStore class. The store is a single
pretty-printed JSON array; writes go to a temporary file in the same
directory and are moved into place with os.replace, so readers only ever
see a fully written store.
"""

import json
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Sequence

from prometheus_client import Counter

from src.utils.metrics import get_or_create_metric

from ..errors import MalformedRecordError, StoreWriteError
from ..records import Record

logger = logging.getLogger(__name__)


STORE_OPERATIONS = get_or_create_metric(
    lambda: Counter(
        "cashtag_store_operations_total",
        "Record store file operations",
        ["operation", "status"],  # read/write, ok/missing/corrupt/failed
    ),
    "cashtag_store_operations",
)


class StoreStatus(str, Enum):
    LOADED = "loaded"
    MISSING = "missing"
    CORRUPT = "corrupt"


@dataclass
class StoreReadResult:
    """Outcome of reading the store file."""

    status: StoreStatus
    records: list[Record] = field(default_factory=list)
    error: str | None = None
    quarantined_to: Path | None = None


class JsonRecordStore:
    """
    Record store backed by a JSON file

    The store is single-writer: callers must serialize read-modify-write
    cycles against the same path.
    """

    def __init__(self, path: str | Path = "./cashtag_results.json"):
        """
        Initialize the store

        Args:
            path: Path of the JSON store file
        """
        self.path = Path(path)

    def read(self) -> StoreReadResult:
        """
        Load the current store

        A missing file is an empty store. An unreadable or invalid file is
        also treated as empty, but it is copied aside first so the next write
        does not destroy it.

        Returns:
            StoreReadResult with the records and how they were obtained
        """
        if not self.path.exists():
            logger.info(f"No record store at {self.path}, starting empty")
            STORE_OPERATIONS.labels(operation="read", status="missing").inc()
            return StoreReadResult(status=StoreStatus.MISSING)

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)

            if not isinstance(data, list):
                raise MalformedRecordError(
                    f"store root must be a JSON array, got {type(data).__name__}"
                )

        except (OSError, UnicodeDecodeError, json.JSONDecodeError, MalformedRecordError) as e:
            quarantined = self._quarantine()
            logger.warning(
                f"Failed to read record store {self.path}: {e}. "
                f"Treating store as empty for this cycle"
                + (f"; unreadable copy kept at {quarantined}" if quarantined else "")
            )
            STORE_OPERATIONS.labels(operation="read", status="corrupt").inc()
            return StoreReadResult(
                status=StoreStatus.CORRUPT,
                error=str(e),
                quarantined_to=quarantined,
            )

        records = []
        for index, item in enumerate(data):
            try:
                records.append(Record.from_dict(item))
            except MalformedRecordError as e:
                logger.warning(f"Skipping malformed store entry #{index}: {e}")

        logger.debug(f"Loaded {len(records)} record(s) from {self.path}")
        STORE_OPERATIONS.labels(operation="read", status="ok").inc()
        return StoreReadResult(status=StoreStatus.LOADED, records=records)

    def write(self, records: Sequence[Record]) -> None:
        """
        Atomically replace the store with the given records

        Args:
            records: Complete next state of the store

        Raises:
            StoreWriteError: If the store could not be written; the previous
                file is left untouched
        """
        payload = json.dumps(
            [record.to_dict() for record in records],
            indent=2,
            ensure_ascii=False,
        )

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)

            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                f.write(payload)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())

            os.replace(tmp_name, self.path)
            tmp_name = None

        except OSError as e:
            STORE_OPERATIONS.labels(operation="write", status="failed").inc()
            logger.error(f"Failed to write record store {self.path}: {e}")
            raise StoreWriteError(f"Failed to write record store {self.path}: {e}") from e

        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        STORE_OPERATIONS.labels(operation="write", status="ok").inc()
        logger.info(f"Saved {len(records)} record(s) to {self.path}")

    def _quarantine(self) -> Path | None:
        """Copy an unreadable store file aside, returning the copy's path."""
        stamp = datetime.now().strftime("%Y%m%dT%H%M%S")
        target = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")

        try:
            shutil.copy2(self.path, target)
        except OSError as e:
            logger.error(f"Could not keep a copy of unreadable store {self.path}: {e}")
            return None

        return target
