"""
Persistence for the record store

Provides the JSON file store with atomic replace-on-write.
"""

from .json_store import JsonRecordStore, StoreReadResult, StoreStatus

__all__ = [
    'JsonRecordStore',
    'StoreReadResult',
    'StoreStatus',
]
