"""
ContentDB Repository Notifier — optional hook for version control.

After a successful save the affected path is passed to ``add``; after a
successful destroy, to ``remove``. Nothing is notified until a notifier is set.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

logger = logging.getLogger("contentdb.engine.repository")


class RepositoryNotifier(Protocol):
    def add(self, path: str) -> None: ...

    def remove(self, path: str) -> None: ...


_repository: Optional[RepositoryNotifier] = None


def set_repository(notifier: Optional[RepositoryNotifier]) -> None:
    """Install (or with None, remove) the global repository notifier."""
    global _repository
    _repository = notifier


def get_repository() -> Optional[RepositoryNotifier]:
    return _repository


def notify_added(path: str) -> None:
    if _repository is not None:
        logger.debug(f"Repository add: {path}")
        _repository.add(path)


def notify_removed(path: str) -> None:
    if _repository is not None:
        logger.debug(f"Repository remove: {path}")
        _repository.remove(path)
