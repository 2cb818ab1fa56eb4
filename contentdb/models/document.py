"""
ContentModel — one record per front-matter file (posts, pages, ...).

Usage:
    @content_model(folder="_posts", variables=["title", "date", "tags"])
    class Post(ContentModel):
        pass

    post = Post.find("MjAyNC0wMS0wMi1oZWxsby5tZA==")
    post.title = "Hello again"
    post.save()

    for post in Post.all(order_direction="asc"):
        ...
"""

from __future__ import annotations

import logging
import os
import re
import time
from datetime import datetime
from typing import Any, List, Optional, Union

import yaml

from contentdb.engine.callbacks import run_callbacks
from contentdb.engine.config import get_store_config
from contentdb.engine.errors import InvalidArgumentError
from contentdb.engine.logging import log, log_parse_error
from contentdb.engine.repository import notify_added, notify_removed
from contentdb.models import collection, frontmatter
from contentdb.models.base import Record, to_datetime
from contentdb.utilities.utils import parameterize

logger = logging.getLogger("contentdb.models.document")

DATE_PREFIX_PATTERN = re.compile(r"^[0-9]+-[0-9]+-[0-9]+")


class ContentModel(Record):
    """A record stored as a whole file: YAML front matter plus a body."""

    def __init__(self, file_path: Optional[str] = None, content: Optional[str] = None, **attributes: Any):
        super().__init__(file_path=file_path, **attributes)
        self.content = content

    # -- Finders --

    @classmethod
    def find(cls, record_id: str) -> "ContentModel":
        """Load a record from a relative path or its base64 id."""
        return cls.load_from(cls.absolute_path(record_id))

    @classmethod
    def load_from(cls, file_path: str) -> "ContentModel":
        record = cls(file_path=file_path)
        record.load()
        return record

    @classmethod
    def all(
        cls,
        sorted: bool = True,
        order_by: collection.OrderBy = collection.SortKey.POSTED_DATETIME,
        order_direction: Union[collection.SortOrder, str] = collection.SortOrder.DESC,
        subfolder: Optional[str] = None,
    ) -> List["ContentModel"]:
        """Every record of the collection, newest first by default."""
        files = collection.content_files(
            cls.base_path(),
            cls.folder_path(),
            get_store_config().content_extensions,
            subfolder=subfolder,
        )
        records = [cls.load_from(file_path) for file_path in files]
        if not sorted:
            return records
        return collection.sort_records(records, order_by, order_direction)

    # -- Loading --

    def load(self) -> None:
        """Read the file; the body becomes ``content``, the header the attributes."""
        try:
            raw = self._read_text()
        except UnicodeDecodeError as e:
            logger.error(f"Error: {self.file_path} is not UTF-8 text: {e}")
            log(log_parse_error(type(self).__name__, self.file_path, str(e)))
            return

        header, body = frontmatter.split(raw)
        self.content = body
        if header is None:
            return

        try:
            loaded = frontmatter.load_header(header)
        except yaml.YAMLError as e:
            logger.error(f"Error: YAML Exception reading {self.file_path}: {e}")
            log(log_parse_error(type(self).__name__, self.file_path, str(e)))
            return

        if not loaded:
            return
        try:
            self._attributes.assign_many(loaded, sanitize=False)
        except InvalidArgumentError:
            logger.warning(f"Front matter of {self.file_path} is not a mapping, no attributes loaded")

    # -- Persistence --

    def save(self) -> bool:
        """
        Write the record, generating a file path for a new one.

        Returns False when a before callback halted the save.
        """
        kind = "create" if self.new_record else "update"
        return run_callbacks(("save", kind), self, lambda: self._write(kind))

    def _write(self, operation: str) -> bool:
        started = time.monotonic()
        if not self.file_path:
            self.file_path = self.generate_new_file_path()

        os.makedirs(os.path.dirname(self.file_path), exist_ok=True)
        self._write_text(self.generate_file_output())

        notify_added(self.file_path)
        self._log_operation(operation, started)
        return True

    def destroy(self) -> bool:
        """Delete the backing file. False (and no file access) when not persisted."""
        return run_callbacks("destroy", self, self._delete)

    def _delete(self) -> bool:
        if not self.persisted:
            return False
        started = time.monotonic()
        removed = self.file_path
        os.remove(removed)
        self._log_operation("destroy", started)
        self.file_path = None
        self._file_stat = None
        notify_removed(removed)
        return True

    def generate_new_file_path(self) -> str:
        """``<base>/<folder>/<YYYY-MM-DD>-<slug>.md`` from the date and title."""
        posted = to_datetime(self.get("date")) or datetime.now()
        date_prefix = posted.strftime("%Y-%m-%d")

        title = self.get("title")
        slug = parameterize(re.sub(r"['|\"]", "", str(title))) if title else ""
        if not slug:
            slug = f"untitled_{parameterize(type(self).__name__)}"

        return type(self).absolute_path(f"{date_prefix}-{slug}.md")

    def generate_file_output(self) -> str:
        return frontmatter.join(self.as_yaml(), self.content)

    # -- Derived values --

    @property
    def posted_datetime(self) -> Optional[datetime]:
        """The ``date`` attribute, a YYYY-MM-DD file name prefix, or the mtime."""
        if "date" in self._attributes:
            posted = to_datetime(self._attributes.get("date"))
            if posted is not None:
                return posted
        matched = DATE_PREFIX_PATTERN.match(self.file_name or "")
        if matched:
            try:
                return datetime.strptime(matched.group(0), "%Y-%m-%d")
            except ValueError:
                logger.debug(f"File name prefix {matched.group(0)!r} is not a date")
        stat = self.file_stat
        return datetime.fromtimestamp(stat.st_mtime) if stat else None

    @property
    def will_be_published(self) -> bool:
        if self.get("published") is False:
            return False
        if self.get("draft"):
            return False
        return True
