"""
ContentDB Error Hierarchy — Structured exceptions for the file-backed store.

Every error carries the record type and file path involved (when known) so
failures can be logged as JSON next to the record operation log.

Hierarchy:
    ContentDBError
    ├── ContentDBConfigError        — Store / model configuration error
    │   └── MissingBasePathError    — Model has no base path
    ├── ContentDBPathError          — File path problem
    │   ├── PathTraversalError      — Resolved path escapes its collection
    │   └── MissingFilePathError    — Operation needs a bound file path
    ├── ContentDBKeyPathError       — Key path problem inside a datafile
    │   ├── MissingKeyPathError     — Load without a key path
    │   └── InvalidKeyPathError     — Key path does not address the structure
    ├── ContentDBValidationError    — Input validation failed
    │   └── InvalidArgumentError    — Mass assignment given a non-mapping
    ├── UnparseableDataError        — Datafile YAML could not be loaded
    └── UnsupportedOperationError   — Operation not defined for this record type
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class ContentDBError(Exception):
    """
    Base error for all ContentDB failures.
    All context is serializable to JSON.
    """

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.model: Optional[str] = context.get("model")
        self.file_path: Optional[str] = context.get("file_path")
        self.key_path: Optional[str] = context.get("key_path")
        self.error_type: str = self.__class__.__name__
        self.context: Dict[str, Any] = context
        self.timestamp: str = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error to JSON-compatible dict for logging."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "model": self.model,
            "file_path": self.file_path,
            "key_path": self.key_path,
            "timestamp": self.timestamp,
            "context": {
                k: str(v) for k, v in self.context.items()
                if k not in ("model", "file_path", "key_path")
            },
        }

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), default=str)

    def __repr__(self) -> str:
        parts = [f"{self.error_type}: {self.message}"]
        if self.model:
            parts.append(f"model={self.model}")
        if self.file_path:
            parts.append(f"file_path={self.file_path}")
        if self.key_path is not None:
            parts.append(f"key_path={self.key_path}")
        return " | ".join(parts)


class ContentDBConfigError(ContentDBError):
    """Configuration error — invalid contentdb.yaml or model declaration."""
    pass


class MissingBasePathError(ContentDBConfigError):
    """The model has no base path and the store config provides none."""
    pass


class ContentDBPathError(ContentDBError):
    """A file path could not be used for the requested operation."""
    pass


class PathTraversalError(ContentDBPathError):
    """
    A resolved path contains a parent-directory segment.
    Includes the offending input id.
    """

    def __init__(self, message: str, **context: Any):
        self.input_id: Optional[str] = context.get("input_id")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["input_id"] = self.input_id
        return d


class MissingFilePathError(ContentDBPathError):
    """The record is not bound to a file path."""
    pass


class ContentDBKeyPathError(ContentDBError):
    """A key path could not be used inside a parsed datafile."""
    pass


class MissingKeyPathError(ContentDBKeyPathError):
    """A datafile record was loaded without a key path."""
    pass


class InvalidKeyPathError(ContentDBKeyPathError):
    """The key path does not address a slot in the structure."""
    pass


class ContentDBValidationError(ContentDBError):
    """Input validation failed."""
    pass


class InvalidArgumentError(ContentDBValidationError):
    """Mass assignment was given something that is not a mapping."""

    def __init__(self, message: str, **context: Any):
        self.received_type: Optional[str] = context.get("received_type")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["received_type"] = self.received_type
        return d


class UnparseableDataError(ContentDBError):
    """A datafile could not be loaded as YAML, or loaded as nothing."""
    pass


class UnsupportedOperationError(ContentDBError, NotImplementedError):
    """The operation is not defined for this record type."""

    def __init__(self, message: str, **context: Any):
        self.operation: Optional[str] = context.get("operation")
        super().__init__(message, **context)
