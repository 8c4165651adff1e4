"""
Service Logging Configuration using Logfire

Used by the HTTP backend and the CLI.

Features:
- Logfire console/cloud output with the stdlib logging bridge
- Named loggers with structured keyword data
- Spans with duration tracking for requests
"""

import os
import time
from contextlib import contextmanager
from logging import DEBUG, Logger, basicConfig, getLogger
from typing import Optional

import logfire

# ═══════════════════════════════════════════════════════════════
# Configuration
# ═══════════════════════════════════════════════════════════════
DEBUG_MODE = os.getenv("DEBUG_MODE", "false").lower() == "true"
SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "bottlematch")
SEND_TO_LOGFIRE = os.getenv("SEND_TO_LOGFIRE", "if-token-present")

EMOJI = {
    "start": "🚀",
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "debug": "🔍",
    "http": "🌐",
}

_configured = False


def setup_logging(service_name: Optional[str] = None, level: str = "INFO") -> "logfire":
    """
    Configure Logfire and route stdlib logging through it.

    Args:
        service_name: Optional service name override (e.g., "bottlematch-backend")
        level: Minimum level name for console output

    Returns:
        Configured logfire module
    """
    global _configured

    if _configured:
        return logfire

    final_service_name = service_name or SERVICE_NAME
    level_name = "DEBUG" if DEBUG_MODE else level.upper()

    logfire.configure(
        service_name=final_service_name,
        send_to_logfire=SEND_TO_LOGFIRE,
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents" if DEBUG_MODE else "simple",
            include_timestamps=True,
            verbose=DEBUG_MODE,
            min_log_level=level_name.lower(),
        ),
    )

    basicConfig(
        level=level_name,
        handlers=[logfire.LogfireLoggingHandler()],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    _configured = True
    logfire.info(f"{EMOJI['start']} Logging configured for {final_service_name}")
    return logfire


# ═══════════════════════════════════════════════════════════════
# Logger Factory
# ═══════════════════════════════════════════════════════════════
class ServiceLogger:
    """Named logger with structured data and spans."""

    def __init__(self, name: str):
        self.name = name
        self._logger: Logger = getLogger(name)
        if DEBUG_MODE:
            self._logger.setLevel(DEBUG)

    def _format(self, icon: str, message: str, data: dict) -> str:
        text = f"{EMOJI[icon]} [{self.name}] {message}"
        if data:
            details = ", ".join(f"{k}={v}" for k, v in data.items())
            text = f"{text} ({details})"
        return text

    def info(self, message: str, **kwargs):
        self._logger.info(self._format("info", message, kwargs))

    def debug(self, message: str, **kwargs):
        self._logger.debug(self._format("debug", message, kwargs))

    def warning(self, message: str, **kwargs):
        self._logger.warning(self._format("warning", message, kwargs))

    def error(self, message: str, error: Optional[Exception] = None, **kwargs):
        """Log error with optional exception details."""
        if error:
            kwargs["error_type"] = type(error).__name__
            kwargs["error_message"] = str(error)
        self._logger.error(self._format("error", message, kwargs))

    def success(self, message: str, **kwargs):
        self._logger.info(self._format("success", message, kwargs))

    @contextmanager
    def span(self, operation: str, **attributes):
        """Create a span for tracking an operation."""
        with logfire.span(f"{self.name}.{operation}", **attributes) as span:
            yield span

    @contextmanager
    def request_span(self, endpoint: str, **attributes):
        """Span for one HTTP request, logging duration and failures."""
        start_time = time.time()
        self.debug(f"Request '{endpoint}' started", **attributes)

        try:
            with logfire.span(f"http.{endpoint}", **attributes) as span:
                yield span
                duration = time.time() - start_time
                self.success(
                    f"Request '{endpoint}' completed",
                    duration_ms=round(duration * 1000, 2),
                )
        except Exception as e:
            duration = time.time() - start_time
            self.error(
                f"Request '{endpoint}' failed",
                error=e,
                duration_ms=round(duration * 1000, 2),
            )
            raise


def get_logger(name: str) -> ServiceLogger:
    """Get a ServiceLogger for the given name."""
    return ServiceLogger(name)

