"""
Client for the extraction agent.

The agent is a Gradio app. Each fetch connects with gradio_client, submits
the task to the configured endpoint with named inputs, and waits for the
outputs. Inputs that are not set are filled with the endpoint's own
defaults, so the call does not depend on the app's parameter order.

The final result text is one of the outputs and is expected to hold a
JSON array of records.
"""

import json
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any

import httpx
from gradio_client import Client
from gradio_client.exceptions import AppError

from src.utils.tracing import add_span_attributes, trace_operation

from ..errors import MalformedRecordError
from ..records import Record, parse_candidates
from .task import DEFAULT_TASK

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)

# Endpoint inputs sent by name, matching the agent app's parameter names
AGENT_INPUTS = (
    "agent_type",
    "llm_provider",
    "llm_model_name",
    "llm_temperature",
    "use_own_browser",
    "keep_browser_open",
    "headless",
    "disable_security",
    "enable_recording",
    "task",
    "add_infos",
    "max_steps",
    "max_actions_per_step",
    "tool_calling_method",
)


@dataclass
class FetchResult:
    """
    Outcome of one agent fetch

    Either the fetch succeeded with a (possibly empty) list of candidate
    records, or it failed and the cycle proceeds with no new records.
    """

    ok: bool
    records: list[Record] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def succeeded(cls, records: list[Record]) -> "FetchResult":
        return cls(ok=True, records=list(records))

    @classmethod
    def failed(cls, error: str) -> "FetchResult":
        return cls(ok=False, error=error)


@dataclass
class AgentSettings:
    """
    Connection and task parameters for the agent

    The fields named in AGENT_INPUTS are sent as keyword inputs to the
    endpoint; see AgentSettings.inputs().
    """

    url: str = "http://127.0.0.1:7788"
    api_name: str = "/run_with_stream"
    timeout_seconds: float = 600.0
    result_index: int = 1

    agent_type: str = "custom"
    llm_provider: str = "gemini"
    llm_model_name: str = "gemini-2.0-flash-exp"
    llm_temperature: float = 1.0
    use_own_browser: bool = True
    keep_browser_open: bool = True
    headless: bool = False
    disable_security: bool = True
    enable_recording: bool = True
    task: str = DEFAULT_TASK
    add_infos: str = ""
    max_steps: int = 100
    max_actions_per_step: int = 10
    tool_calling_method: str = "auto"

    @property
    def endpoint(self) -> str:
        """API name in the form gradio_client expects ("/name")."""
        return "/" + self.api_name.lstrip("/")

    def inputs(self) -> dict[str, Any]:
        """Named inputs for the agent endpoint."""
        return {name: getattr(self, name) for name in AGENT_INPUTS}


def parse_agent_output(text: Any) -> list[Record]:
    """
    Parse the agent's final result text into candidate records

    Args:
        text: Result text, optionally wrapped in a Markdown code fence

    Returns:
        Candidate records in output order

    Raises:
        MalformedRecordError: If the text is not a JSON array
    """
    if not isinstance(text, str):
        raise MalformedRecordError(
            f"Agent result must be text, got {type(text).__name__}"
        )

    match = _CODE_FENCE.match(text)
    if match:
        text = match.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedRecordError(f"Agent result is not valid JSON: {e}") from e

    return parse_candidates(data)


class AgentClient:
    """
    Client for the extraction agent

    fetch() never raises for upstream problems: network errors, timeouts,
    agent-side errors and unparseable output all become FetchResult.failed.
    """

    def __init__(self, settings: AgentSettings | None = None):
        """
        Initialize agent client

        Args:
            settings: Agent connection and task parameters
        """
        self.settings = settings or AgentSettings()
        self.base_url = self.settings.url.rstrip("/")

        logger.info(f"Initialized agent client for {self.base_url}{self.settings.endpoint}")

    def fetch(self) -> FetchResult:
        """
        Run the extraction task and return its candidate records

        Returns:
            FetchResult.succeeded with candidates, or FetchResult.failed
        """
        with trace_operation("agent_fetch", agent_url=self.base_url):
            logger.info("Starting agent extraction job...")
            started = time.monotonic()

            try:
                outputs = self._call(deadline=started + self.settings.timeout_seconds)
                records = self._extract_records(outputs)
            except TimeoutError:
                error = f"Agent call exceeded timeout of {self.settings.timeout_seconds:.0f}s"
                logger.error(error)
                add_span_attributes(fetch_ok=False)
                return FetchResult.failed(error)
            except (httpx.HTTPError, AppError, ValueError, OSError) as e:
                # MalformedRecordError is a ValueError
                logger.error(f"Error while calling agent: {e}")
                add_span_attributes(fetch_ok=False)
                return FetchResult.failed(str(e))

            elapsed = time.monotonic() - started
            logger.info(f"Agent returned {len(records)} candidate record(s) in {elapsed:.1f}s")
            add_span_attributes(fetch_ok=True, candidates=len(records))
            return FetchResult.succeeded(records)

    def _call(self, deadline: float) -> Any:
        """Submit the task and wait for its outputs until the deadline."""
        client = Client(self.base_url, verbose=False)

        job = client.submit(api_name=self.settings.endpoint, **self.settings.inputs())
        logger.debug(f"Agent accepted task on {self.settings.endpoint}")

        remaining = deadline - time.monotonic()
        try:
            if remaining <= 0:
                raise TimeoutError
            return job.result(timeout=remaining)
        except TimeoutError:
            job.cancel()
            raise

    def _extract_records(self, outputs: Any) -> list[Record]:
        if not isinstance(outputs, (list, tuple)):
            raise MalformedRecordError(
                f"Agent outputs must be a sequence, got {type(outputs).__name__}"
            )

        index = self.settings.result_index
        if index >= len(outputs):
            raise MalformedRecordError(
                f"Agent returned {len(outputs)} output(s), no result at index {index}"
            )

        return parse_agent_output(outputs[index])
