"""
Cycle scheduler module

Runs reconciliation cycles periodically using APScheduler.
"""

from .scheduler import CycleScheduler, parse_cron_expression

__all__ = [
    'CycleScheduler',
    'parse_cron_expression',
]
