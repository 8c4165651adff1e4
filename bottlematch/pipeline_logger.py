"""
Pipeline Logger

Stage-by-stage logging for comparison runs.

Each run gets a trace_id that follows it through:
1. Normalize → 2. Index → 3. Match → 4. Savings

Optionally forwards records to Logfire when USE_LOGFIRE=true and
LOGFIRE_TOKEN are set in the environment.
"""

import json
import logging
import os
import re
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

# ============================================================================
# Environment
# ============================================================================

def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _slugify(value: str) -> str:
    cleaned = re.sub(r"[^a-zA-Z0-9._-]+", "-", value.strip())
    return cleaned or "bottlematch"


PIPELINE_SERVICE_NAME = _slugify(
    os.environ.get("PIPELINE_SERVICE_NAME")
    or os.environ.get("LOGFIRE_SERVICE_NAME", "bottlematch")
)
DEBUG_LOG = _env_bool("DEBUG_LOG", _env_bool("DEBUG_MODE", False))
PIPELINE_LOG_LEVEL = os.environ.get(
    "PIPELINE_LOG_LEVEL",
    "DEBUG" if DEBUG_LOG else "INFO",
).upper()
PIPELINE_LOG_TO_FILE = _env_bool("PIPELINE_LOG_TO_FILE", False)
PIPELINE_LOG_MAX_BYTES = _env_int("PIPELINE_LOG_MAX_BYTES", 5_000_000)
PIPELINE_LOG_BACKUP_COUNT = _env_int("PIPELINE_LOG_BACKUP_COUNT", 3)
PIPELINE_LOG_DIR = Path(
    os.environ.get("PIPELINE_LOG_DIR", str(Path(__file__).parent.parent / "logs"))
)
PIPELINE_LOG_FILE = PIPELINE_LOG_DIR / os.environ.get(
    "PIPELINE_LOG_FILE_NAME",
    f"pipeline-{PIPELINE_SERVICE_NAME}.log",
)
USE_LOGFIRE = _env_bool("USE_LOGFIRE", False)
_logfire_configured = False

if USE_LOGFIRE:
    try:
        import logfire

        _logfire_token = os.environ.get("LOGFIRE_TOKEN", "")
        if not _logfire_token:
            raise ValueError("LOGFIRE_TOKEN environment variable is not set")

        logfire.configure(
            token=_logfire_token,
            service_name=PIPELINE_SERVICE_NAME,
            environment=os.environ.get("LOGFIRE_ENVIRONMENT", "production"),
            console=False,
        )
        _logfire_configured = True
    except Exception as e:
        print(f"Logfire disabled for pipeline logger: {e}", file=sys.stderr)
        USE_LOGFIRE = False

# ============================================================================
# Logger Setup
# ============================================================================

class PipelineFormatter(logging.Formatter):
    """Formats records as `time │ trace │ icon STAGE │ message`."""

    ICONS = {
        'COMPARE': '🍾',
        'NORMALIZE': '🔤',
        'INDEX': '📚',
        'MATCH': '🔍',
        'SAVINGS': '💰',
        'API': '🌐',
        'ERROR': '❌',
    }

    def format(self, record):
        stage = getattr(record, 'stage', 'COMPARE')
        icon = self.ICONS.get(stage, '📋')

        timestamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S.%f')[:-3]
        trace_id = getattr(record, 'trace_id', '--------')[:8]

        return f"{timestamp} │ {trace_id} │ {icon} {stage:10} │ {record.getMessage()}"


def setup_pipeline_logger() -> logging.Logger:
    """Create the dedicated `pipeline` logger once."""
    logger = logging.getLogger("pipeline")
    if logger.handlers:
        return logger

    level = getattr(logging, PIPELINE_LOG_LEVEL, logging.INFO)
    logger.setLevel(level)
    logger.propagate = False

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(PipelineFormatter())
    logger.addHandler(console_handler)

    if PIPELINE_LOG_TO_FILE:
        PIPELINE_LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            PIPELINE_LOG_FILE,
            maxBytes=PIPELINE_LOG_MAX_BYTES,
            backupCount=PIPELINE_LOG_BACKUP_COUNT,
            encoding="utf-8",
            delay=True,
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(PipelineFormatter())
        logger.addHandler(file_handler)

    if USE_LOGFIRE and _logfire_configured:
        logfire_handler = logfire.LogfireLoggingHandler()
        logfire_handler.setLevel(logging.INFO)
        logger.addHandler(logfire_handler)

    return logger


pipeline_logger = setup_pipeline_logger()


# ============================================================================
# Trace Context
# ============================================================================

class TraceContext:
    """Context for one comparison run."""

    def __init__(self, product_name: str, current_price: Optional[float] = None):
        self.trace_id = str(uuid.uuid4())
        self.product_name = product_name
        self.current_price = current_price
        self.start_time = time.time()
        self.stages: list[dict] = []

    def elapsed_ms(self) -> int:
        return int((time.time() - self.start_time) * 1000)

    def stage_timings(self) -> dict[str, int]:
        return {s["stage"]: s.get("elapsed_ms", 0) for s in self.stages}

    def to_dict(self) -> dict:
        return {
            "trace_id": self.trace_id,
            "product_name": self.product_name,
            "current_price": self.current_price,
            "total_ms": self.elapsed_ms(),
            "stages": self.stages,
        }


# Context-local so concurrent requests keep separate traces
_current_trace: ContextVar[Optional[TraceContext]] = ContextVar(
    "pipeline_current_trace",
    default=None,
)


def get_current_trace() -> Optional[TraceContext]:
    return _current_trace.get()


def set_current_trace(trace: Optional[TraceContext]):
    return _current_trace.set(trace)


def reset_current_trace(token):
    _current_trace.reset(token)


# ============================================================================
# Logging Functions
# ============================================================================

def log_pipeline(
    stage: str,
    message: str,
    data: Optional[dict] = None,
    level: int = logging.INFO,
    trace_id: Optional[str] = None,
    exc_info: Any = None,
):
    """
    Log a pipeline event.

    Args:
        stage: Pipeline stage (COMPARE, NORMALIZE, INDEX, MATCH, SAVINGS, API)
        message: Log message
        data: Optional structured data
        level: Log level
        trace_id: Optional trace ID (uses current trace if not provided)
    """
    trace = get_current_trace()
    tid = trace_id or (trace.trace_id if trace else "no-trace")

    # Outside debug mode keep only comparison requests, latency summaries and errors
    if not DEBUG_LOG:
        is_request = stage == "COMPARE" and message.startswith("COMPARE_REQUEST")
        is_latency_summary = message.startswith("LATENCY_SUMMARY")
        if level < logging.ERROR and not is_request and not is_latency_summary:
            return

    extra = {
        'stage': stage,
        'trace_id': tid,
    }

    if data:
        truncated_data = _truncate_data(data)
        message = f"{message} | {json.dumps(truncated_data, ensure_ascii=False, default=str)}"

    pipeline_logger.log(level, message, extra=extra, exc_info=exc_info)


def _truncate_data(data: dict, max_len: int = 100) -> dict:
    """Truncate long values and redact credentials."""
    redacted_keys = {"token", "api_key", "authorization", "password", "secret"}
    result = {}
    for k, v in data.items():
        if str(k).lower() in redacted_keys:
            result[k] = "***REDACTED***"
        elif isinstance(v, str) and len(v) > max_len:
            result[k] = v[:max_len] + "..."
        elif isinstance(v, (list, tuple)) and len(v) > 5:
            result[k] = f"[{len(v)} items]"
        elif isinstance(v, dict):
            result[k] = _truncate_data(v, max_len)
        else:
            result[k] = v
    return result


def log_comparison_request(product_name: str, current_price: Optional[float], catalog_size: int):
    log_pipeline(
        "COMPARE",
        "COMPARE_REQUEST",
        {"product": product_name, "price": current_price, "catalog": catalog_size},
    )


# ============================================================================
# Context Managers
# ============================================================================

@contextmanager
def trace_comparison(product_name: str, current_price: Optional[float] = None):
    """
    Trace one comparison run.

    Usage:
        with trace_comparison("Blue Bottle Rum 700ml", 49.99) as trace:
            ...
    """
    trace = TraceContext(product_name, current_price)
    token = set_current_trace(trace)

    log_pipeline("COMPARE", "═══ NEW COMPARISON ═══", {"product": product_name})
    try:
        yield trace
    finally:
        log_pipeline(
            "COMPARE",
            f"═══ COMPARISON COMPLETE ({trace.elapsed_ms()}ms) ═══",
            {"total_stages": len(trace.stages)},
        )
        reset_current_trace(token)


@contextmanager
def trace_stage(stage: str, description: str = ""):
    """
    Trace one stage of the current run.

    Usage:
        with trace_stage("MATCH", "Filtering catalog"):
            ...
    """
    trace = get_current_trace()
    start_time = time.time()

    log_pipeline(stage, f"▶ START: {description}")

    stage_data = {
        "stage": stage,
        "description": description,
        "start_time": datetime.now().isoformat(),
    }

    try:
        yield
        elapsed = int((time.time() - start_time) * 1000)
        stage_data["elapsed_ms"] = elapsed
        stage_data["success"] = True
        log_pipeline(stage, f"✓ END: {description} ({elapsed}ms)")

    except Exception as e:
        elapsed = int((time.time() - start_time) * 1000)
        stage_data["elapsed_ms"] = elapsed
        stage_data["success"] = False
        stage_data["error"] = str(e)
        log_pipeline(stage, f"✗ FAILED: {description} - {e}", level=logging.ERROR, exc_info=e)
        raise

    finally:
        if trace:
            trace.stages.append(stage_data)


# ============================================================================
# Stage Helpers
# ============================================================================

def log_normalize(message: str, data: Optional[dict] = None):
    log_pipeline("NORMALIZE", message, data)


def log_index(message: str, data: Optional[dict] = None):
    log_pipeline("INDEX", message, data)


def log_match(message: str, data: Optional[dict] = None):
    log_pipeline("MATCH", message, data)


def log_savings(message: str, data: Optional[dict] = None):
    log_pipeline("SAVINGS", message, data)


def log_error(stage: str, message: str, error: Optional[Exception] = None):
    """Log an error."""
    data = (
        {"error": str(error), "error_type": error.__class__.__name__}
        if error
        else None
    )
    log_pipeline(stage, f"❌ {message}", data, level=logging.ERROR)


def log_latency_summary(
    stage: str,
    component: str,
    total_ms: int,
    breakdown_ms: Optional[dict[str, int]] = None,
    meta: Optional[dict[str, Any]] = None,
):
    """Log one compact latency summary event for downstream analysis."""
    payload: dict[str, Any] = {
        "component": component,
        "total_ms": int(total_ms),
    }
    if breakdown_ms:
        payload["breakdown_ms"] = {
            key: int(value) for key, value in breakdown_ms.items()
        }
    if meta:
        payload["meta"] = meta

    log_pipeline(stage, "LATENCY_SUMMARY", payload)
