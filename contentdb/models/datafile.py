"""
DatafileModel — one record per entry of a shared YAML data file.

A record is addressed by (file path, key path): the key path is a mapping key
or, for a file whose root is a sequence, the entry's index as a string.

Usage:
    @datafile_model(folder="_data", variables=["name", "url"])
    class Link(DatafileModel):
        pass

    links = Link.all("links.yml")
    link = Link.find("links.yml", "2")
    link.url = "https://example.com"
    link.save()

Saving re-reads the whole file, replaces the one entry and rewrites the
file; edits made to other entries since the read are overwritten.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Any, List, Optional

import yaml

from contentdb.engine.callbacks import run_callbacks
from contentdb.engine.errors import (
    InvalidArgumentError,
    MissingFilePathError,
    MissingKeyPathError,
    UnparseableDataError,
    UnsupportedOperationError,
)
from contentdb.engine.logging import log, log_parse_error
from contentdb.engine.repository import notify_added
from contentdb.models import keypath
from contentdb.models.base import Record

logger = logging.getLogger("contentdb.models.datafile")

DOCUMENT_START = re.compile(r"^---[ \t]*\n")


class DatafileModel(Record):
    """A record stored as one entry inside a YAML data file."""

    # The attribute map of a datafile record lists field names only
    _attribute_values = False

    def __init__(self, file_path: Optional[str] = None, key_path: Optional[str] = None, **attributes: Any):
        super().__init__(file_path=file_path, **attributes)
        self.key_path = None if key_path is None else str(key_path)
        self.root_is_sequence: Optional[bool] = None

    # -- Finders --

    @classmethod
    def find(cls, file_path: str, key_path: Any) -> "DatafileModel":
        """Load the entry at ``key_path`` of a file given by relative path or base64 id."""
        return cls.load_from(cls.absolute_path(file_path), key_path)

    @classmethod
    def load_from(cls, file_path: str, key_path: Any) -> "DatafileModel":
        record = cls(file_path=file_path, key_path=key_path)
        record.load()
        return record

    @classmethod
    def all(cls, file_path: str) -> List["DatafileModel"]:
        """One record per sequence index or mapping key of the file."""
        path = cls.absolute_path(file_path)
        structure = cls.read_structure(path)

        if keypath.is_sequence(structure):
            key_paths = [str(index) for index in range(len(structure))]
        elif isinstance(structure, dict):
            key_paths = [str(key) for key in structure]
        else:
            raise UnparseableDataError(
                f"{path} must hold a sequence or a mapping, found {type(structure).__name__}",
                model=cls.__name__,
                file_path=path,
            )
        return [cls.load_from(path, key) for key in key_paths]

    @classmethod
    def read_structure(cls, path: str) -> Any:
        """
        Parse a whole data file.

        Raises:
            UnparseableDataError: non-UTF-8 text, malformed YAML, or a file that
                loads as nothing.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = f.read()
        except UnicodeDecodeError as e:
            raise UnparseableDataError(
                f"{path} is not UTF-8 text: {e}", model=cls.__name__, file_path=path
            ) from e
        try:
            structure = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise UnparseableDataError(
                f"YAML wasn't loadable: {e}", model=cls.__name__, file_path=path
            ) from e
        if structure is None:
            raise UnparseableDataError(
                "YAML wasn't loadable", model=cls.__name__, file_path=path
            )
        return structure

    # -- Loading --

    def load(self) -> None:
        """Assign the entry at ``key_path``; non-mapping entries leave attributes empty."""
        if self.key_path is None:
            raise MissingKeyPathError(
                "Missing keypath", model=type(self).__name__, file_path=self.file_path
            )

        try:
            structure = yaml.safe_load(self._read_text())
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            logger.error(f"Error: YAML Exception reading {self.file_path}: {e}")
            log(log_parse_error(type(self).__name__, self.file_path, str(e)))
            return

        self.root_is_sequence = keypath.is_sequence(structure)
        entry = keypath.get(structure, self.key_path)
        if not entry:
            return
        try:
            self._attributes.assign_many(entry, sanitize=False)
        except InvalidArgumentError:
            logger.warning(
                f"Entry {self.key_path!r} of {self.file_path} is not a mapping, no attributes loaded"
            )

    # -- Persistence --

    def save(self) -> bool:
        """
        Replace this record's entry in its file.

        Returns False when a before callback halted the save.
        """
        return run_callbacks("save", self, self._write)

    def _write(self) -> bool:
        started = time.monotonic()
        if not self.file_path:
            raise MissingFilePathError(
                "Must supply a file path to save to", model=type(self).__name__
            )
        if self.key_path is None:
            raise MissingKeyPathError(
                "Must supply a keypath to save to",
                model=type(self).__name__,
                file_path=self.file_path,
            )

        structure = type(self).read_structure(self.file_path)
        if self.root_is_sequence is not None and self.root_is_sequence != keypath.is_sequence(structure):
            logger.warning(f"Root of {self.file_path} changed shape since it was loaded")
        keypath.set(structure, self.key_path, self.as_yaml(as_hash=True))

        output = yaml.safe_dump(
            structure,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
        self._write_text(DOCUMENT_START.sub("", output, count=1))

        notify_added(self.file_path)
        self._log_operation("save", started, key_path=self.key_path)
        return True

    def destroy(self) -> bool:
        raise UnsupportedOperationError(
            "Removing an entry from a data file is not supported",
            model=type(self).__name__,
            file_path=self.file_path,
            key_path=self.key_path,
            operation="destroy",
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.file_path or '(unsaved)'}#{self.key_path}>"
