"""
Environment-driven configuration for the cashtag tracker.

Every setting has a default that matches a local agent on port 7788 and a
store in the working directory; CLI flags override environment values.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .agent import AgentSettings
from .clock import DEFAULT_TIMEZONE
from .errors import ConfigurationError
from .scheduler import parse_cron_expression

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 15 * 60


def _get_number(name: str, default: float, cast: type = int) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default

    try:
        number = cast(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None

    if number <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value!r}")
    return number


def read_task_file(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read agent task file {path}: {e}") from e


@dataclass
class TrackerConfig:
    """
    Settings for one tracker process

    Attributes:
        agent: Extraction agent connection and task parameters
        store_path: Path of the JSON record store
        timezone: IANA zone used for record timestamps
        interval_seconds: Cycle interval for the scheduler
        cron: Cron expression, used instead of interval_seconds when set
        metrics_port: Port for the Prometheus endpoint, None to disable
    """

    agent: AgentSettings = field(default_factory=AgentSettings)
    store_path: Path = Path("./cashtag_results.json")
    timezone: str = DEFAULT_TIMEZONE
    interval_seconds: int = DEFAULT_INTERVAL_SECONDS
    cron: str | None = None
    metrics_port: int | None = None

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """
        Check values that would only fail later at runtime

        Raises:
            ConfigurationError: If a value is invalid
        """
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown timezone {self.timezone!r}") from e

        if self.interval_seconds <= 0:
            raise ConfigurationError("interval_seconds must be positive")

        if self.agent.timeout_seconds <= 0:
            raise ConfigurationError("agent timeout must be positive")

        if self.cron is not None:
            try:
                parse_cron_expression(self.cron)
            except ValueError as e:
                raise ConfigurationError(f"Invalid cron expression {self.cron!r}: {e}") from e

        if self.metrics_port is not None and not 0 < self.metrics_port < 65536:
            raise ConfigurationError(f"metrics port must be 1-65535, got {self.metrics_port}")

    @classmethod
    def from_env(cls) -> "TrackerConfig":
        """
        Build configuration from CASHTAG_* environment variables

        Returns:
            TrackerConfig

        Raises:
            ConfigurationError: If a variable has an invalid value
        """
        agent = AgentSettings(
            url=os.getenv("CASHTAG_AGENT_URL", AgentSettings.url),
            api_name=os.getenv("CASHTAG_AGENT_API_NAME", AgentSettings.api_name),
            timeout_seconds=_get_number(
                "CASHTAG_AGENT_TIMEOUT", AgentSettings.timeout_seconds, float
            ),
            llm_provider=os.getenv("CASHTAG_AGENT_LLM_PROVIDER", AgentSettings.llm_provider),
            llm_model_name=os.getenv("CASHTAG_AGENT_LLM_MODEL", AgentSettings.llm_model_name),
            add_infos=os.getenv("CASHTAG_AGENT_EXTRA_INFO", ""),
        )

        task_file = os.getenv("CASHTAG_AGENT_TASK_FILE")
        if task_file:
            agent.task = read_task_file(task_file)

        metrics_port = os.getenv("CASHTAG_METRICS_PORT")

        return cls(
            agent=agent,
            store_path=Path(os.getenv("CASHTAG_STORE_PATH", "./cashtag_results.json")),
            timezone=os.getenv("CASHTAG_TIMEZONE", DEFAULT_TIMEZONE),
            interval_seconds=_get_number("CASHTAG_INTERVAL_SECONDS", DEFAULT_INTERVAL_SECONDS),
            cron=os.getenv("CASHTAG_CRON") or None,
            metrics_port=int(_get_number("CASHTAG_METRICS_PORT", 0)) if metrics_port else None,
        )
