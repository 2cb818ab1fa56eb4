"""
Dynamic attributes for records.

A record type declares its variables up front; each becomes a ``Variable``
descriptor on the class. Keys found in a file that were not declared are
retained in an ordered extras map, join the instance's effective field set,
and are written back on save, so unknown data round-trips untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime, time
from typing import Any, Dict, Iterable, List, Optional, Union

from contentdb.engine.errors import InvalidArgumentError
from contentdb.models import frontmatter

logger = logging.getLogger("contentdb.models.attributes")


class Variable:
    """Class-level accessor for a declared variable, backed by the record's bag."""

    def __init__(self, name: Optional[str] = None):
        self.name = name

    def __set_name__(self, owner: type, name: str) -> None:
        if self.name is None:
            self.name = name

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        return instance._attributes.get(self.name)

    def __set__(self, instance: Any, value: Any) -> None:
        instance._attributes.set(self.name, value)

    def __repr__(self) -> str:
        return f"<Variable {self.name}>"


def normalize_value(value: Any) -> Any:
    """Dates are written as midnight timestamps; everything else as is."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    return value


class AttributeBag:
    """
    Declared and retained attribute values for one record instance.

    ``names`` is the effective field set: the declared variables followed by
    any undeclared keys seen since, in the order they were first set.
    """

    def __init__(
        self,
        declared: Iterable[str] = (),
        protected: Iterable[str] = (),
        owner: str = "",
    ):
        self.declared = tuple(declared)
        self.names: List[str] = list(self.declared)
        self._declared_set = frozenset(self.declared)
        self._protected = frozenset(protected)
        self._owner = owner
        self._values: Dict[str, Any] = {}
        self._extra: Dict[str, Any] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._declared_set or name in self._extra

    def __len__(self) -> int:
        return len(self.names)

    def is_declared(self, name: str) -> bool:
        return name in self._declared_set

    def is_retained(self, name: str) -> bool:
        """True for an undeclared name that has been set on this instance."""
        return name in self._extra

    @property
    def extras(self) -> Dict[str, Any]:
        return dict(self._extra)

    def get(self, name: str, default: Any = None) -> Any:
        if name in self._declared_set:
            return self._values.get(name, default)
        return self._extra.get(name, default)

    def set(self, name: str, value: Any) -> None:
        if name in self._declared_set:
            self._values[name] = value
            return
        if name not in self._extra:
            logger.warning(
                f":{name}: is not a declared variable of {self._owner or 'this record'}, "
                "it will be kept as an undeclared field"
            )
            self.names.append(name)
        self._extra[name] = value

    def sanitize(self, attributes: Mapping) -> Dict[str, Any]:
        """Drop keys that may not be mass-assigned."""
        clean: Dict[str, Any] = {}
        for key, value in attributes.items():
            key = str(key)
            if key in self._protected:
                logger.debug(f"Skipping protected attribute '{key}' on {self._owner}")
                continue
            clean[key] = value
        return clean

    def assign_many(self, attributes: Any, sanitize: bool = True) -> None:
        """
        Set every key of a mapping.

        Data read back from a record's own file is assigned with
        ``sanitize=False`` so protected keys still round-trip.

        Raises:
            InvalidArgumentError: ``attributes`` is not a mapping.
        """
        if not isinstance(attributes, Mapping):
            raise InvalidArgumentError(
                "When assigning attributes, you must pass a mapping as an argument.",
                model=self._owner,
                received_type=type(attributes).__name__,
            )
        if not attributes:
            return
        if sanitize:
            attributes = self.sanitize(attributes)
        for key, value in attributes.items():
            self.set(str(key), value)

    def to_attribute_map(self, with_values: bool = True) -> Dict[str, Any]:
        """Every effective field; values are None placeholders unless ``with_values``."""
        if with_values:
            return {name: self.get(name) for name in self.names}
        return dict.fromkeys(self.names)

    def serializable_hash(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for name in self.names:
            value = self.get(name)
            if value is None:
                continue
            data[name] = normalize_value(value)
        return data

    def to_serializable(
        self, as_hash: bool = False, root: Optional[str] = None
    ) -> Union[str, Dict[str, Any]]:
        """
        Attribute values ready to write: None dropped, dates normalized,
        optionally wrapped under ``root``.
        """
        data = self.serializable_hash()
        if root:
            data = {root: data}
        return data if as_hash else frontmatter.dump_yaml(data)
