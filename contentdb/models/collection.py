"""
Collection enumeration and ordering for front-matter records.

With a folder configured, a collection is the content files directly in
``base/folder[/subfolder]`` plus those one directory level down. Without a
folder, the whole base path is scanned recursively, skipping any path with
an underscore-prefixed component (``_drafts``, ``_data``, ...).
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from contentdb.models import paths

logger = logging.getLogger("contentdb.models.collection")


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortKey(str, Enum):
    """Built-in sort keys for Model.all()."""

    POSTED_DATETIME = "posted_datetime"
    FILE_NAME = "file_name"
    TITLE = "title"

    def extract(self, record: Any) -> Any:
        return _EXTRACTORS[self](record)


_EXTRACTORS: Dict[SortKey, Callable[[Any], Any]] = {
    SortKey.POSTED_DATETIME: lambda record: record.posted_datetime,
    SortKey.FILE_NAME: lambda record: record.file_name,
    SortKey.TITLE: lambda record: record.get("title"),
}

OrderBy = Union[SortKey, Callable[[Any], Any]]


def by_field(name: str) -> Callable[[Any], Any]:
    """Sort key reading one attribute, declared or retained."""

    def extract(record: Any) -> Any:
        return record.get(name)

    extract.__name__ = f"by_{name}"
    return extract


def _has_underscore_part(path: Path, root: Path) -> bool:
    return any(part.startswith("_") for part in path.relative_to(root).parts)


def content_files(
    base_dir: str,
    folder_dir: str,
    extensions: Iterable[str],
    subfolder: Optional[str] = None,
) -> List[str]:
    """Candidate content files of a collection, directories excluded."""
    extensions = tuple(extensions)
    if subfolder:
        root = Path(paths.join(base_dir, folder_dir, subfolder))
    else:
        root = Path(paths.collection_dir(base_dir, folder_dir))

    if not root.is_dir():
        logger.debug(f"Collection directory {root} does not exist")
        return []

    if folder_dir:
        candidates = [
            p
            for ext in extensions
            for pattern in (f"*{ext}", f"*/*{ext}")
            for p in root.glob(pattern)
        ]
    else:
        candidates = [
            p for p in root.rglob("*")
            if p.suffix in extensions and not _has_underscore_part(p, root)
        ]

    return sorted(str(p) for p in candidates if not p.is_dir())


def sort_records(
    records: List[Any],
    order_by: OrderBy = SortKey.POSTED_DATETIME,
    order_direction: Union[SortOrder, str] = SortOrder.DESC,
) -> List[Any]:
    """
    Order records by the string form of a sort key.

    A missing value sorts as the empty string. Descending order is the
    ascending order reversed.
    """
    direction = SortOrder(order_direction)
    extract = order_by.extract if isinstance(order_by, SortKey) else order_by
    name = getattr(order_by, "value", None) or getattr(order_by, "__name__", repr(order_by))

    def sort_value(record: Any) -> str:
        value = extract(record)
        if value is None:
            logger.warning(f"Sorting {type(record).__name__} by {name}, value is missing for {record.file_path}")
            return ""
        return str(value)

    ordered = sorted(records, key=sort_value)
    if direction is SortOrder.DESC:
        ordered.reverse()
    return ordered
