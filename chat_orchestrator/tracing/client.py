"""
Process-wide Langfuse client.

The client is built from a ``LangfuseConfig`` and stays inert (``client`` is
None) when credentials are missing, the constructor fails, or the auth check
is rejected. Chat requests never see tracing errors.
"""

import logging
from typing import Any, Optional

from langfuse import Langfuse

from ..models import LangfuseConfig

logger = logging.getLogger(__name__)


class TracingClient:
    """Holds the Langfuse SDK client and the reason it is missing, if any."""

    def __init__(self, langfuse_config: Optional[LangfuseConfig] = None):
        self.config = langfuse_config or LangfuseConfig()
        self.client: Optional[Langfuse] = None
        self.error: Optional[str] = None

        if not self.config.enabled:
            self.error = "Langfuse credentials not configured"
            logger.debug(f"Tracing disabled: {self.error}")
            return

        self.client, self.error = self._connect()
        if self.client is None:
            logger.warning(f"Tracing disabled: {self.error}")
        else:
            logger.info(f"Langfuse tracing enabled (host: {self.config.host or 'default'})")

    def _connect(self) -> tuple[Optional[Langfuse], Optional[str]]:
        options: dict[str, Any] = {
            "public_key": self.config.public_key,
            "secret_key": self.config.secret_key,
            "debug": self.config.debug,
        }
        if self.config.host:
            options["host"] = self.config.host

        try:
            langfuse = Langfuse(**options)
            authenticated = langfuse.auth_check()
        except Exception as e:
            return None, f"Failed to initialize Langfuse client: {e}"
        if not authenticated:
            return None, "Langfuse auth_check() failed - check host and credentials"
        return langfuse, None

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def status_lines(self) -> list[str]:
        """Human-readable status for the startup banner."""
        if self.enabled:
            return ["Status: ENABLED", f"Host: {self.config.host or 'default'}"]
        return ["Status: DISABLED", f"Reason: {self.error}"]

    def _send(self, operation: str) -> None:
        if self.client is None:
            return
        try:
            getattr(self.client, operation)()
        except Exception as e:
            logger.warning(f"Langfuse {operation}() failed: {e}")

    def flush(self) -> None:
        self._send("flush")

    def shutdown(self) -> None:
        self._send("shutdown")


_tracing_client: Optional[TracingClient] = None


def init_tracing_client(langfuse_config: Optional[LangfuseConfig] = None) -> TracingClient:
    """Replace the global tracing client."""
    global _tracing_client
    _tracing_client = TracingClient(langfuse_config)
    return _tracing_client


def get_tracing_client() -> Optional[TracingClient]:
    return _tracing_client


def shutdown_tracing() -> None:
    """Flush and drop the global tracing client."""
    global _tracing_client
    if _tracing_client:
        _tracing_client.shutdown()
        _tracing_client = None
