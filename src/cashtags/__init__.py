"""
Cashtag tracker

Periodically pulls cashtag / contract address pairs from an extraction
agent and reconciles them into a deduplicated, timestamp-annotated store.

Components:
- records: Record type and candidate parsing
- engine: batch filtering and merge (pure)
- store: JSON persistence with atomic replace
- agent: extraction agent HTTP client
- cycle: one fetch -> filter -> merge -> persist cycle
- scheduler: periodic cycle scheduling

Usage:
    from src.cashtags.engine import filter_invalid, merge
    from src.cashtags.cycle import ReconciliationCycle
"""

__version__ = "1.0.0"
__all__ = ["records", "engine", "store", "agent", "cycle", "scheduler"]
