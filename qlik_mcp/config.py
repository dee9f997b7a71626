"""Process-wide configuration for the qlik-mcp server.

Values are read once from the environment at startup and frozen. Retrieval
limits are passed explicitly into the retry/paging components; tools may
override max_rows/page_size per call without touching this object.

Environment Variables:
    QLIK_API_KEY           API key sent as a bearer token      (required)
    QLIK_BASE_URL          Tenant host or URL                  (required)
    QLIK_APP_ID            Default application identifier      (required)
    MAX_ROWS_PER_REQUEST   Rows per hypercube page             (default: 1000)
    MAX_TOTAL_ROWS         Row budget per chart                (default: 10000)
    REQUEST_DELAY_MS       Pause between page requests         (default: 100)
    MAX_RETRIES            Retries per remote call             (default: 3)
    RETRY_DELAY_MS         First retry backoff delay           (default: 1000)
    RETRIEVAL_TIMEOUT_MS   Deadline for a paged fetch, 0 = off (default: 0)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from qlik_mcp.exceptions import ConfigurationError
from qlik_mcp.logger import Logger, session_logger

REQUIRED_VARIABLES = ("QLIK_API_KEY", "QLIK_BASE_URL", "QLIK_APP_ID")


@dataclass(frozen=True)
class RetrievalSettings:
    """Limits and pacing for chart data retrieval."""

    max_rows_per_request: int = 1000
    max_total_rows: int = 10000
    request_delay_ms: int = 100
    max_retries: int = 3
    retry_delay_ms: int = 1000
    retrieval_timeout_ms: int = 0


@dataclass(frozen=True)
class ServerConfig:
    base_url: str
    api_key: str
    default_app_id: str
    retrieval: RetrievalSettings = field(default_factory=RetrievalSettings)

    @property
    def host(self) -> str:
        """Tenant host name without scheme or trailing slash."""
        host = self.base_url.strip()
        for scheme in ("https://", "http://", "wss://", "ws://"):
            if host.lower().startswith(scheme):
                host = host[len(scheme):]
                break
        return host.rstrip("/")

    @property
    def rest_base_url(self) -> str:
        return f"https://{self.host}"

    def engine_url(self, app_id: str) -> str:
        return f"wss://{self.host}/app/{app_id}"


def _parse_int_env(
    environ: Mapping[str, str],
    name: str,
    default: int,
    minimum: int,
    logger: Logger,
) -> int:
    """Parse an integer from the environment, falling back to the default on bad input."""
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default

    try:
        value = int(raw)
        if value < minimum:
            raise ValueError(f"must be >= {minimum}")
        return value
    except ValueError:
        logger.warning(
            "config.invalid_env",
            variable=name,
            provided_value=raw,
            default_value=default,
        )
        return default


def load_retrieval_settings(
    environ: Optional[Mapping[str, str]] = None, logger: Optional[Logger] = None
) -> RetrievalSettings:
    environ = os.environ if environ is None else environ
    logger = logger or session_logger
    defaults = RetrievalSettings()
    return RetrievalSettings(
        max_rows_per_request=_parse_int_env(
            environ, "MAX_ROWS_PER_REQUEST", defaults.max_rows_per_request, 1, logger
        ),
        max_total_rows=_parse_int_env(environ, "MAX_TOTAL_ROWS", defaults.max_total_rows, 0, logger),
        request_delay_ms=_parse_int_env(
            environ, "REQUEST_DELAY_MS", defaults.request_delay_ms, 0, logger
        ),
        max_retries=_parse_int_env(environ, "MAX_RETRIES", defaults.max_retries, 0, logger),
        retry_delay_ms=_parse_int_env(environ, "RETRY_DELAY_MS", defaults.retry_delay_ms, 0, logger),
        retrieval_timeout_ms=_parse_int_env(
            environ, "RETRIEVAL_TIMEOUT_MS", defaults.retrieval_timeout_ms, 0, logger
        ),
    )


def load_config(
    environ: Optional[Mapping[str, str]] = None, logger: Optional[Logger] = None
) -> ServerConfig:
    """Build the server configuration from environment variables.

    Raises:
        ConfigurationError: If the endpoint, credential or default app is missing
    """
    environ = os.environ if environ is None else environ
    missing = [name for name in REQUIRED_VARIABLES if not environ.get(name, "").strip()]
    if missing:
        raise ConfigurationError(
            f"Please set {', '.join(REQUIRED_VARIABLES)} environment variables "
            f"(missing: {', '.join(missing)})",
            details={"missing": missing},
        )

    return ServerConfig(
        base_url=environ["QLIK_BASE_URL"].strip(),
        api_key=environ["QLIK_API_KEY"].strip(),
        default_app_id=environ["QLIK_APP_ID"].strip(),
        retrieval=load_retrieval_settings(environ, logger),
    )
