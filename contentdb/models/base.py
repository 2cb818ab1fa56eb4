"""
Shared record behaviour for front-matter and datafile models.

A model class gets its immutable ``ModelConfig`` from the @content_model /
@datafile_model decorators. Instances keep their values in an
``AttributeBag``: declared variables are ``Variable`` descriptors on the
class, undeclared keys read through ``__getattr__`` and ``get``. Assigning
any other public name stores it as an undeclared field of the record.
"""

from __future__ import annotations

import logging
import os
import time
from datetime import date, datetime
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Optional, Union

import yaml

from contentdb.engine.config import ModelConfig, get_store_config
from contentdb.engine.errors import MissingBasePathError
from contentdb.engine.logging import log, log_record_operation
from contentdb.models import paths
from contentdb.models.attributes import AttributeBag
from contentdb.utilities.utils import to_snake

logger = logging.getLogger("contentdb.models.base")


def to_datetime(value: Any) -> Optional[datetime]:
    """Coerce a date-like attribute value to a datetime, or None."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


class Record:
    """Base class for file-backed records. Use ContentModel or DatafileModel."""

    _config: ClassVar[ModelConfig] = ModelConfig()
    # False for models whose attribute map only lists field names
    _attribute_values: ClassVar[bool] = True
    # Instance state that is never an attribute of the record's data
    RESERVED_NAMES: ClassVar[frozenset] = frozenset({"content", "file_path", "key_path", "root_is_sequence"})

    def __init__(self, file_path: Optional[str] = None, **attributes: Any):
        cls = type(self)
        self._attributes = AttributeBag(
            declared=cls._config.variables,
            protected=(*get_store_config().protected_attributes, *cls._config.protected),
            owner=cls.__name__,
        )
        self.file_path = file_path
        self._file_stat: Optional[os.stat_result] = None
        if attributes:
            self.assign_attributes(attributes)

    # -- Configuration --

    @classmethod
    def model_config(cls) -> ModelConfig:
        return cls._config

    @classmethod
    def base_path(cls) -> str:
        """The configured base path; falls back to the store config."""
        base = cls._config.base_path or get_store_config().base_path
        if not base:
            raise MissingBasePathError(
                f"Missing base path for the {cls.__name__} model",
                model=cls.__name__,
            )
        return base

    @classmethod
    def folder_path(cls) -> str:
        return cls._config.folder_path

    @classmethod
    def absolute_path(cls, path: str) -> str:
        return paths.resolve(cls.base_path(), cls.folder_path(), path)

    @classmethod
    def root_name(cls) -> str:
        return cls._config.root_name or to_snake(cls.__name__)

    # -- Attribute access --

    def __getattr__(self, name: str) -> Any:
        bag = self.__dict__.get("_attributes")
        if bag is not None and bag.is_retained(name):
            return bag.get(name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        bag = self.__dict__.get("_attributes")
        if (
            bag is not None
            and not name.startswith("_")
            and name not in type(self).RESERVED_NAMES
            and name not in self.__dict__
            and not hasattr(type(self), name)
        ):
            bag.set(name, value)
        else:
            super().__setattr__(name, value)

    def __getitem__(self, name: str) -> Any:
        if name not in self._attributes:
            raise KeyError(name)
        return self._attributes.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self._attributes.set(name, value)

    def __contains__(self, name: str) -> bool:
        return name in self._attributes

    def get(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._attributes.set(name, value)

    @property
    def variable_names(self) -> List[str]:
        """The effective field set of this instance."""
        return list(self._attributes.names)

    @property
    def attributes(self) -> Dict[str, Any]:
        return self._attributes.to_attribute_map(with_values=type(self)._attribute_values)

    def assign_attributes(self, new_attributes: Any) -> None:
        """Mass-assign a mapping; protected keys are skipped."""
        self._attributes.assign_many(new_attributes)

    # -- Serialization --

    def as_yaml(self, as_hash: bool = False) -> Union[str, Dict[str, Any]]:
        root = type(self).root_name() if type(self)._config.include_root else None
        return self._attributes.to_serializable(as_hash=as_hash, root=root)

    def to_dict(self) -> Dict[str, Any]:
        return self.as_yaml(as_hash=True)

    def from_yaml(self, text: str) -> "Record":
        """Assign attributes from YAML text, unwrapping the root key if configured."""
        data = yaml.safe_load(text)
        if type(self)._config.include_root and isinstance(data, dict) and data:
            data = next(iter(data.values()))
        self.assign_attributes(data)
        return self

    @classmethod
    def new_from_yaml(cls, text: str) -> "Record":
        return cls().from_yaml(text)

    # -- Persistence state --

    @property
    def persisted(self) -> bool:
        return bool(self.file_path) and os.path.exists(self.file_path)

    @property
    def new_record(self) -> bool:
        return not self.persisted

    @property
    def id(self) -> Optional[str]:
        if not self.persisted:
            return None
        cls = type(self)
        return paths.encode_id(self.file_path, cls.base_path(), cls.folder_path())

    @property
    def relative_path(self) -> Optional[str]:
        if not self.file_path:
            return None
        cls = type(self)
        return paths.relative_path(self.file_path, cls.base_path(), cls.folder_path())

    @property
    def file_name(self) -> Optional[str]:
        return os.path.basename(self.file_path) if self.file_path else None

    @property
    def file_stat(self) -> Optional[os.stat_result]:
        if not self.persisted:
            return None
        if self._file_stat is None:
            self._file_stat = os.stat(self.file_path)
        return self._file_stat

    @property
    def posted_datetime(self) -> Optional[datetime]:
        """The ``date`` attribute if set, else the file's modification time."""
        if "date" in self._attributes:
            posted = to_datetime(self._attributes.get("date"))
            if posted is not None:
                return posted
        stat = self.file_stat
        return datetime.fromtimestamp(stat.st_mtime) if stat else None

    # -- File I/O --

    def _read_text(self) -> str:
        return Path(self.file_path).read_text(encoding="utf-8")

    def _write_text(self, text: str) -> None:
        Path(self.file_path).write_text(text, encoding="utf-8")
        self._file_stat = None

    def _log_operation(self, operation: str, started: float, key_path: Optional[str] = None) -> None:
        duration_ms = (time.monotonic() - started) * 1000
        logger.info(f"{type(self).__name__} {operation}: {self.file_path}")
        log(log_record_operation(
            operation=operation,
            model=type(self).__name__,
            file_path=self.file_path,
            key_path=key_path,
            fields=self.variable_names,
            duration_ms=round(duration_ms, 3),
        ))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.file_path or '(unsaved)'}>"
