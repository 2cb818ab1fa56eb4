"""
ContentDB Logging — Structured JSON file-based operation log.

Implements:
- FileLogger: Per-category log files (daily rotation)
- Log entry builders for record operations and parse failures
- A module-level logger singleton; entries are dropped when it is not initialized

Plain diagnostics go through the stdlib ``logging`` loggers under ``contentdb.*``.
This module records *what happened to which file*, one JSON object per line.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger("contentdb.engine.logging")

# Valid log categories
CATEGORIES = ("records", "errors")


class LogEntry:
    """A structured log entry destined for a specific file."""

    __slots__ = ("category", "data")

    def __init__(self, category: str, data: Dict[str, Any]):
        self.category = category
        self.data = data

    def to_json(self) -> str:
        return json.dumps(self.data, default=str, separators=(",", ":"))


class FileLogger:
    """
    Writes structured JSON log entries to per-category files.
    Files rotate daily: logs/{category}/{YYYY-MM-DD}.jsonl
    """

    def __init__(self, log_dir: str = "logs"):
        self._log_dir = Path(log_dir)
        self._ensure_directories()

    def _ensure_directories(self) -> None:
        for cat in CATEGORIES:
            (self._log_dir / cat).mkdir(parents=True, exist_ok=True)

    def write(self, entry: LogEntry) -> None:
        """Write a single log entry to the appropriate file."""
        file_path = self._resolve_path(entry.category)
        with open(file_path, "a", encoding="utf-8") as f:
            f.write(entry.to_json())
            f.write("\n")

    def _resolve_path(self, category: str) -> Path:
        """Resolve the log file path for today's date."""
        if category not in CATEGORIES:
            raise ValueError(f"Unknown log category '{category}'")
        today = date.today().isoformat()
        return self._log_dir / category / f"{today}.jsonl"

    @property
    def log_dir(self) -> Path:
        return self._log_dir

    def query(
        self,
        category: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 500,
    ) -> List[Dict[str, Any]]:
        """
        Query log entries from JSONL files for a category.

        Args:
            category: "records" or "errors".
            start_date: Earliest date to include (defaults to 7 days ago).
            end_date: Latest date to include (defaults to today).
            filters: Only entries matching ALL key/value pairs are returned.
            limit: Max number of entries to return.

        Returns:
            List of parsed log-entry dicts, newest first.
        """
        if end_date is None:
            end_date = date.today()
        if start_date is None:
            start_date = end_date - timedelta(days=7)

        log_base = self._log_dir / category
        if not log_base.exists():
            return []

        results: List[Dict[str, Any]] = []
        current = start_date
        while current <= end_date:
            file_path = log_base / f"{current.isoformat()}.jsonl"
            if file_path.exists():
                results.extend(self._read_jsonl(file_path, filters))
            current += timedelta(days=1)

        results.reverse()
        return results[:limit]

    @staticmethod
    def _read_jsonl(
        path: Path,
        filters: Optional[Dict[str, Any]],
    ) -> List[Dict[str, Any]]:
        """Read matching entries from a .jsonl file, oldest first."""
        entries: List[Dict[str, Any]] = []
        try:
            with open(path, "r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        data = json.loads(line)
                    except json.JSONDecodeError:
                        continue
                    if filters and not all(data.get(k) == v for k, v in filters.items()):
                        continue
                    entries.append(data)
        except OSError as exc:
            logger.warning("Could not read log file %s: %s", path, exc)
        return entries


# ---------------------------------------------------------------------------
# Log Entry Builders
# ---------------------------------------------------------------------------

def _base_entry(event: str, level: str, model: str, **extra: Any) -> Dict[str, Any]:
    """Build a base log entry with common fields."""
    entry: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": level,
        "event": event,
        "model": model,
    }
    entry.update(extra)
    return entry


def log_record_operation(
    operation: str,
    model: str,
    file_path: Optional[str],
    key_path: Optional[str] = None,
    fields: Optional[List[str]] = None,
    duration_ms: Optional[float] = None,
) -> LogEntry:
    """Build a record save/create/update/destroy log entry."""
    data = _base_entry(
        event=f"record_{operation}",
        level="INFO",
        model=model,
        operation=operation,
        file_path=file_path,
    )
    if key_path is not None:
        data["key_path"] = key_path
    if fields:
        data["fields"] = fields
    if duration_ms is not None:
        data["duration_ms"] = duration_ms
    return LogEntry("records", data)


def log_parse_error(model: str, file_path: str, error: str) -> LogEntry:
    """Build an entry for YAML that could not be parsed during load."""
    data = _base_entry(
        event="yaml_parse_failed",
        level="ERROR",
        model=model,
        file_path=file_path,
        error=error,
    )
    return LogEntry("errors", data)


# ---------------------------------------------------------------------------
# Convenience: Global File Logger Singleton
# ---------------------------------------------------------------------------

_file_logger: Optional[FileLogger] = None


def init_logging(log_dir: str = "logs", level: str = "INFO") -> FileLogger:
    """Initialize the global operation log and the contentdb logger level."""
    global _file_logger
    logging.getLogger("contentdb").setLevel(level)
    _file_logger = FileLogger(log_dir=log_dir)
    logger.info(f"Operation log initialized at {_file_logger.log_dir}")
    return _file_logger


def get_file_logger() -> Optional[FileLogger]:
    """Get the global operation log."""
    return _file_logger


def log(entry: LogEntry) -> bool:
    """Write a log entry to the global operation log, if there is one."""
    if _file_logger is None:
        logger.debug(f"Operation log not initialized, {entry.data.get('event')} dropped")
        return False
    _file_logger.write(entry)
    return True


def shutdown_logging() -> None:
    """Stop writing to the global operation log."""
    global _file_logger
    _file_logger = None
