"""
ContentDB Model Registry — Register and look up record types by name.

Populated by the @content_model / @datafile_model decorators at import time.

Model kinds: content (front-matter files), datafile (entries in a YAML file)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from contentdb.engine.config import ModelConfig
from contentdb.engine.errors import ContentDBConfigError

logger = logging.getLogger("contentdb.engine.registry")

# Valid model kinds
MODEL_KINDS = frozenset({"content", "datafile"})


@dataclass
class RegisteredModel:
    """Metadata for a registered record type."""

    name: str            # e.g., "post"
    kind: str            # "content" or "datafile"
    model_class: type
    config: ModelConfig

    @property
    def qualified_name(self) -> str:
        return f"{self.kind}.{self.name}"


class ModelRegistry:
    """
    In-memory model registry with lookup by name and kind.

    Usage:
        registry = ModelRegistry()
        registry.register(entry)
        post = registry.resolve("post")
        datafiles = registry.get_by_kind("datafile")
    """

    def __init__(self):
        self._models: Dict[str, RegisteredModel] = {}
        self._by_kind: Dict[str, Dict[str, RegisteredModel]] = {}

    def register(self, entry: RegisteredModel) -> None:
        """Register a model; re-registering a name replaces the old entry."""
        if entry.kind not in MODEL_KINDS:
            raise ValueError(f"Invalid model kind: {entry.kind}. Valid: {MODEL_KINDS}")

        previous = self._models.get(entry.name)
        if previous is not None:
            self._by_kind.get(previous.kind, {}).pop(entry.name, None)

        self._models[entry.name] = entry
        self._by_kind.setdefault(entry.kind, {})[entry.name] = entry

        logger.debug(f"Registered: {entry.qualified_name}")

    def unregister(self, name: str) -> None:
        """Remove a model from the registry."""
        entry = self._models.pop(name, None)
        if entry is None:
            return
        self._by_kind.get(entry.kind, {}).pop(name, None)

    def resolve(self, name: str) -> Optional[RegisteredModel]:
        """Resolve a model name to its registration, or None."""
        return self._models.get(name)

    def resolve_or_raise(self, name: str) -> RegisteredModel:
        """Resolve or raise ContentDBConfigError."""
        entry = self.resolve(name)
        if entry is None:
            raise ContentDBConfigError(f"Model not registered: {name}", model=name)
        return entry

    def get_by_kind(self, kind: str) -> List[RegisteredModel]:
        return list(self._by_kind.get(kind, {}).values())

    def get_all(self) -> List[RegisteredModel]:
        """Get all registered models."""
        return list(self._models.values())

    def get_all_names(self) -> Set[str]:
        return set(self._models.keys())

    def contains(self, name: str) -> bool:
        return name in self._models

    @property
    def count(self) -> int:
        """Total number of registered models."""
        return len(self._models)

    def clear(self) -> None:
        """Clear all registrations."""
        self._models.clear()
        self._by_kind.clear()


# Global registry singleton
model_registry = ModelRegistry()
