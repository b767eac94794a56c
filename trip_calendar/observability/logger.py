from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping


# Booking and reservation references identify a traveller; they never reach the JSON log.
REDACTED_KEY_RE = re.compile(r"(reference|reservation|booking[_-]?ref|token|secret)", re.IGNORECASE)
REDACTED = "[REDACTED]"

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s %(name)s - %(message)s"

# Handlers added by the last setup_logging call; closed when it runs again.
_installed: list[logging.Handler] = []


@dataclass(frozen=True)
class LogContext:
    """Where in a conversion run a log line comes from."""

    run_id: str | None = None
    provider: str | None = None
    stage: str | None = None
    entry_uid: str | None = None

    def as_extra(self) -> dict[str, str | None]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


CONTEXT_KEYS = tuple(f.name for f in fields(LogContext))


def redact(data: Mapping[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, value in data.items():
        if REDACTED_KEY_RE.search(str(key)):
            cleaned[key] = REDACTED
        elif isinstance(value, Mapping):
            cleaned[key] = redact(value)
        else:
            cleaned[key] = value
    return cleaned


class JsonLineFormatter(logging.Formatter):
    """Render a record as one JSON object: level, module, message, run context, event and data."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }
        for key in (*CONTEXT_KEYS, "event"):
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        data = getattr(record, "data", None)
        if data is not None:
            payload["data"] = redact(data)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ContextTextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        tags = [f"{key}={getattr(record, key)}" for key in (*CONTEXT_KEYS, "event") if getattr(record, key, None)]
        return f"{line} [{' '.join(tags)}]" if tags else line


def _level(name: str, default: int) -> int:
    value = getattr(logging, name.upper(), default)
    return value if isinstance(value, int) else default


def _configured(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(*, runtime_dir: Path, level: str = "INFO") -> None:
    """
    Route every run's logs to runtime_dir/logs.

    app.jsonl and app.log receive records at ``level``. The console only shows
    CONSOLE_LOG_LEVEL (WARNING by default) so the run summary stays readable.
    Calling this again replaces the handlers of the previous call.
    """
    logs_dir = runtime_dir.resolve() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    file_level = _level(level, logging.INFO)
    console_level = _level(os.environ.get("CONSOLE_LOG_LEVEL", "WARNING"), logging.WARNING)

    root = logging.getLogger()
    root.handlers.clear()
    while _installed:
        _installed.pop().close()
    root.setLevel(min(file_level, console_level))

    handlers = (
        _configured(logging.FileHandler(logs_dir / "app.jsonl", encoding="utf-8"), file_level, JsonLineFormatter()),
        _configured(logging.FileHandler(logs_dir / "app.log", encoding="utf-8"), file_level, ContextTextFormatter(TEXT_FORMAT)),
        _configured(logging.StreamHandler(), console_level, ContextTextFormatter(CONSOLE_FORMAT)),
    )
    for handler in handlers:
        root.addHandler(handler)
    _installed.extend(handlers)

    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_event(
    logger: logging.Logger,
    *,
    level: int,
    message: str,
    event: str,
    context: LogContext | None = None,
    data: Mapping[str, Any] | None = None,
) -> None:
    extra: dict[str, Any] = {"event": event}
    if context is not None:
        extra.update(context.as_extra())
    if data is not None:
        extra["data"] = dict(data)
    logger.log(level, message, extra=extra)
