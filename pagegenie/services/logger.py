"""Logging for model calls, search attempts and request events.

Every record is one line: a label followed by a JSON object, so the log file
can be grepped by label and parsed line by line.
"""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from pagegenie.config import settings

LOG_DIR = Path("logs")
LOG_FILE = LOG_DIR / "pagegenie.log"

# Framework and client loggers that drown out the app at INFO.
NOISY_LOGGERS = (
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
    "fastapi",
    "httpx",
    "httpcore",
    "openai._base_client",
    "trafilatura",
    "asyncio",
)


def _level(name: str, default: int) -> int:
    return getattr(logging, (name or "").upper(), default)


def configure_logging() -> logging.Logger:
    LOG_DIR.mkdir(exist_ok=True)
    logging.basicConfig(
        level=_level(settings.app_log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(LOG_FILE),
            logging.StreamHandler(),
        ],
    )
    noisy_level = _level(settings.noisy_log_level, logging.WARNING)
    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)
    return logging.getLogger("pagegenie")


logger = configure_logging()


def _emit(label: str, data: dict[str, Any], level: int = logging.INFO) -> None:
    record = {"timestamp": datetime.now(timezone.utc).isoformat(), **data}
    logger.log(level, f"{label}: {json.dumps(record, default=str)}")


def _status_level(status: str) -> int:
    return logging.INFO if status == "success" else logging.WARNING


def log_llm_call(
    model: str,
    caller: str,
    input_tokens: int = 0,
    output_tokens: int = 0,
    duration_ms: int = 0,
    status: str = "success",
    error: Optional[str] = None,
) -> None:
    """Log a generative-model call; failures go out at WARNING."""
    _emit(
        "LLM_CALL",
        {
            "model": model,
            "caller": caller,
            "input_tokens": input_tokens,
            "output_tokens": output_tokens,
            "total_tokens": input_tokens + output_tokens,
            "duration_ms": duration_ms,
            "status": status,
            "error": error,
        },
        _status_level(status),
    )


def log_search_attempt(
    query: str,
    provider: Optional[str],
    status: str,
    results_count: int = 0,
    duration_ms: int = 0,
    error: Optional[str] = None,
) -> None:
    """Log one planned search attempt, including the skipped ones."""
    _emit(
        "SEARCH_ATTEMPT",
        {
            "query": query,
            "provider": provider,
            "status": status,
            "results_count": results_count,
            "duration_ms": duration_ms,
            "error": error,
        },
        _status_level(status),
    )


def log_event(event_type: str, message: str, **kwargs) -> None:
    _emit("EVENT", {"event_type": event_type, "message": message, **kwargs})
