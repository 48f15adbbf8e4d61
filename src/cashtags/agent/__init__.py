"""
Extraction agent client

Fetches candidate records from the browser-automation agent and reports
the outcome as a FetchResult instead of raising.
"""

from .client import AgentClient, AgentSettings, FetchResult, parse_agent_output
from .task import DEFAULT_TASK

__all__ = [
    'AgentClient',
    'AgentSettings',
    'FetchResult',
    'parse_agent_output',
    'DEFAULT_TASK',
]
