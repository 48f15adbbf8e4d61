"""
Prometheus endpoint for the scheduled tracker.

MetricsPublisher serves a registry on /metrics from a background thread
for as long as the scheduler runs, and labels it with the tracker version.
"""

import errno
import logging
from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Info, start_http_server

from .registry import get_or_create_metric

logger = logging.getLogger(__name__)

BUILD_INFO_NAME = "cashtag_tracker_build"


class MetricsPublisher:
    """
    Serves a Prometheus registry over HTTP on /metrics
    """

    def __init__(
        self,
        port: int = 9091,
        addr: str = "0.0.0.0",
        registry: Optional[CollectorRegistry] = None,
    ):
        """
        Initialize metrics publisher

        Args:
            port: Port to listen on (default: 9091)
            addr: Address to bind (default: all interfaces)
            registry: Registry to serve (default: global REGISTRY)
        """
        self.port = port
        self.addr = addr
        self.registry = registry or REGISTRY
        self._server = None

    @property
    def started(self) -> bool:
        return self._server is not None

    def start(self, version: Optional[str] = None) -> None:
        """
        Start serving metrics

        Args:
            version: Tracker version, published as cashtag_tracker_build_info

        Raises:
            RuntimeError: If the port is already taken
        """
        if self.started:
            logger.warning(f"Metrics server already running on port {self.port}")
            return

        if version:
            self._publish_build_info(version)

        try:
            self._server, _ = start_http_server(self.port, addr=self.addr, registry=self.registry)
        except OSError as e:
            if e.errno == errno.EADDRINUSE:
                raise RuntimeError(
                    f"Metrics port {self.port} is already in use; "
                    f"pick another with --metrics-port"
                ) from e
            raise

        logger.info(f"Serving metrics on http://{self.addr}:{self.port}/metrics")

    def stop(self) -> None:
        """Stop serving metrics; a no-op if not started."""
        if not self.started:
            return

        self._server.shutdown()
        self._server.server_close()
        self._server = None
        logger.info("Metrics server stopped")

    def _publish_build_info(self, version: str) -> None:
        build_info = get_or_create_metric(
            lambda: Info(BUILD_INFO_NAME, "Cashtag tracker build", registry=self.registry),
            BUILD_INFO_NAME,
            self.registry,
        )
        build_info.info({"version": version})
