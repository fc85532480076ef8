"""Runtime diagnostics log: structured JSON lines in the storage root."""

from __future__ import annotations

import json
import os
import sys
import traceback
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from streamlit.runtime.scriptrunner import get_script_run_ctx


LOG_DIR = Path(".local_store")
RUNTIME_EVENTS_LOG_FILE = LOG_DIR / "runtime_events.jsonl"

_DEFAULT_LOG_DIR = Path(".local_store")
_STORAGE_ENV_VAR = "JUSTCOOK_STORAGE_ROOT"
_LOG_FILE_NAME = "runtime_events.jsonl"

# Severity rank used for filtering.
LEVEL_ORDER = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40, "CRITICAL": 50}

_hook_installed = False


def _json_default(value: Any):
    if isinstance(value, (set, frozenset, tuple)):
        return sorted(value, key=str) if isinstance(value, (set, frozenset)) else list(value)
    return str(value)


def configure_log_root(path_value: str | Path | None) -> Path:
    global LOG_DIR, RUNTIME_EVENTS_LOG_FILE
    text = "" if path_value is None else str(path_value).strip()
    LOG_DIR = Path(os.path.expandvars(os.path.expanduser(text))) if text else _DEFAULT_LOG_DIR
    RUNTIME_EVENTS_LOG_FILE = LOG_DIR / _LOG_FILE_NAME
    return LOG_DIR


def runtime_log_path() -> str:
    return str(RUNTIME_EVENTS_LOG_FILE.resolve())


def normalize_level(level: str) -> str:
    name = str(level).strip().upper()
    return name if name in LEVEL_ORDER else "INFO"


def build_event_record(
    level: str,
    event: str,
    message: str,
    context: dict[str, Any] | None = None,
    exc: BaseException | None = None,
) -> dict[str, Any]:
    record: dict[str, Any] = {
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "level": normalize_level(level),
        "event": str(event),
        "message": str(message),
        "context": dict(context or {}),
    }
    if exc is not None:
        record["exception_type"] = type(exc).__name__
        record["exception_message"] = str(exc)
        record["traceback"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return record


def append_runtime_event(
    level: str,
    event: str,
    message: str,
    context: dict[str, Any] | None = None,
    exc: BaseException | None = None,
) -> None:
    """Append one event record to the JSONL log.

    A failed write is dropped: the log sits next to the scenario store and
    an unwritable storage root must not take the page down with it.
    """
    line = json.dumps(build_event_record(level, event, message, context, exc), default=_json_default, ensure_ascii=False)
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        with RUNTIME_EVENTS_LOG_FILE.open("a", encoding="utf-8") as f:
            f.write(line + "\n")
    except OSError:
        pass


def _parse_line(line: str) -> dict[str, Any]:
    try:
        record = json.loads(line)
    except json.JSONDecodeError:
        record = None
    if not isinstance(record, dict):
        record = build_event_record("ERROR", "log_parse_error", "Malformed log line encountered.", {"line": line})
    return record


def read_runtime_events(limit: int = 200, min_level: str | None = None) -> list[dict[str, Any]]:
    """Most recent events, oldest first, optionally at or above min_level."""
    if limit <= 0 or not RUNTIME_EVENTS_LOG_FILE.exists():
        return []
    try:
        lines = RUNTIME_EVENTS_LOG_FILE.read_text(encoding="utf-8").splitlines()
    except OSError:
        return []

    floor = LEVEL_ORDER[normalize_level(min_level)] if min_level else 0
    records = [_parse_line(line) for line in lines if line.strip()]
    kept = [r for r in records if LEVEL_ORDER.get(str(r.get("level", "INFO")).upper(), 20) >= floor]
    return kept[-int(limit) :]


def summarize_runtime_events(events: list[dict[str, Any]]) -> dict[str, int]:
    """Count events per level, in severity order."""
    counts = Counter(normalize_level(e.get("level", "INFO")) for e in events)
    return {level: counts[level] for level in LEVEL_ORDER if counts[level]}


def install_global_exception_logging() -> None:
    """Record uncaught exceptions raised during Streamlit script runs."""
    global _hook_installed
    if _hook_installed:
        return
    previous_hook = sys.excepthook

    def _hook(exc_type, exc, exc_tb):
        if get_script_run_ctx() is not None:
            append_runtime_event("CRITICAL", "uncaught_exception", str(exc), exc=exc)
        previous_hook(exc_type, exc, exc_tb)

    sys.excepthook = _hook
    _hook_installed = True


configure_log_root(os.getenv(_STORAGE_ENV_VAR, ""))
