"""
Record type for observed cashtag / contract address pairs.

A Record's identity is the (cashtag, contract_address) pair. The
timestamp is assigned once, the first time the pair is merged into the
store, and never participates in identity.
"""

import logging
from dataclasses import dataclass
from typing import Any

from jsonschema import Draft7Validator

from .errors import MalformedRecordError

logger = logging.getLogger(__name__)

UNKNOWN_CASHTAG = "unknown_cashtag"

# Persisted field order
FIELDS = ("cashtag", "contract_address", "timestamp")

CANDIDATE_SCHEMA = {
    "type": "object",
    "required": ["cashtag", "contract_address"],
    "properties": {
        "cashtag": {"type": ["string", "null"]},
        "contract_address": {"type": ["string", "null"]},
        "timestamp": {"type": ["string", "null"]},
    },
}

_validator = Draft7Validator(CANDIDATE_SCHEMA)

RecordKey = tuple[str | None, str | None]


@dataclass(frozen=True)
class Record:
    """
    A single cashtag / contract address observation

    Attributes:
        cashtag: Token tag (e.g. "$TOKEN"), UNKNOWN_CASHTAG, or None
        contract_address: On-chain contract address or None
        timestamp: First-observation time, None until merged into a store
    """

    cashtag: str | None
    contract_address: str | None
    timestamp: str | None = None

    @property
    def key(self) -> RecordKey:
        """Identity key used for deduplication."""
        return (self.cashtag, self.contract_address)

    @property
    def is_noise(self) -> bool:
        """True when neither a cashtag nor a contract address was found."""
        return self.cashtag is None and self.contract_address is None

    def with_timestamp(self, timestamp: str) -> "Record":
        return Record(self.cashtag, self.contract_address, timestamp)

    def to_dict(self) -> dict[str, str | None]:
        """Serialize in persisted field order."""
        return {
            "cashtag": self.cashtag,
            "contract_address": self.contract_address,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Record":
        """
        Build a Record from a decoded JSON object

        Args:
            data: Decoded JSON value

        Returns:
            Record with the given fields (timestamp may be None)

        Raises:
            MalformedRecordError: If data does not have the record shape
        """
        errors = sorted(_validator.iter_errors(data), key=lambda e: list(e.path))
        if errors:
            raise MalformedRecordError(errors[0].message)

        return cls(
            cashtag=data["cashtag"],
            contract_address=data["contract_address"],
            timestamp=data.get("timestamp"),
        )


def parse_candidates(items: Any) -> list[Record]:
    """
    Convert a decoded agent payload into candidate Records.

    Entries without the record shape are dropped with a warning. Any
    timestamp carried by a candidate is discarded: only the merge assigns
    timestamps.

    Args:
        items: Decoded JSON payload, expected to be a list of objects

    Returns:
        List of Records in payload order

    Raises:
        MalformedRecordError: If the payload itself is not a list
    """
    if not isinstance(items, list):
        raise MalformedRecordError(
            f"Expected a JSON array of records, got {type(items).__name__}"
        )

    records = []
    for index, item in enumerate(items):
        try:
            record = Record.from_dict(item)
        except MalformedRecordError as e:
            logger.warning(f"Skipping malformed candidate #{index}: {e}")
            continue
        records.append(Record(record.cashtag, record.contract_address))

    return records

