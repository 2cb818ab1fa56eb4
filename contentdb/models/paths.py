"""
Path resolution for record ids.

A record id is either a path relative to the collection directory
(``base/folder``) or the base64 encoding of one. Both are accepted wherever
an id is accepted.

The traversal guard is syntactic: a joined path containing ``../`` is
rejected before normalization. It does not canonicalize symlinks or
compare against the collection directory.
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
import re

from contentdb.engine.errors import PathTraversalError

logger = logging.getLogger("contentdb.models.paths")

BASE64_PATTERN = re.compile(
    r"([A-Za-z0-9+/]{4})*([A-Za-z0-9+/]{4}|[A-Za-z0-9+/]{3}=|[A-Za-z0-9+/]{2}==)"
)


def looks_like_base64(text: str) -> bool:
    return BASE64_PATTERN.fullmatch(text) is not None


def decode_id(input_id: str) -> str:
    """Decode a base64 id; text that only looks like base64 is returned as is."""
    if not looks_like_base64(input_id):
        return input_id
    try:
        return base64.b64decode(input_id, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        logger.debug(f"'{input_id}' matched the base64 pattern but is not an encoded path")
        return input_id


def collection_dir(base_dir: str, folder_dir: str) -> str:
    return os.path.join(base_dir, folder_dir) if folder_dir else base_dir


def join(base_dir: str, folder_dir: str, relative: str, input_id: str = "") -> str:
    """
    Join a plain relative path onto ``base/folder`` and normalize it.

    Raises:
        PathTraversalError: the joined path contains ``../``.
    """
    joined = os.path.join(collection_dir(base_dir, folder_dir), relative.lstrip("/"))
    if "../" in joined:
        raise PathTraversalError(
            f"Refusing to resolve '{input_id or relative}': path leaves its collection",
            input_id=input_id or relative,
            file_path=joined,
        )
    return os.path.normpath(joined)


def resolve(base_dir: str, folder_dir: str, input_id: str) -> str:
    """
    Turn a relative or base64-encoded id into a path inside ``base/folder``.

    Raises:
        PathTraversalError: the joined path contains ``../``.
    """
    return join(base_dir, folder_dir, decode_id(input_id), input_id=input_id)


def relative_path(path: str, base_dir: str, folder_dir: str) -> str:
    """Strip the ``base/folder`` prefix (and its separator) from a path."""
    prefix = os.path.normpath(collection_dir(base_dir, folder_dir))
    normalized = os.path.normpath(path)
    if normalized.startswith(prefix):
        normalized = normalized[len(prefix):]
    return normalized.lstrip(os.sep)


def encode_id(path: str, base_dir: str, folder_dir: str) -> str:
    """Base64 of the path relative to ``base/folder``."""
    relative = relative_path(path, base_dir, folder_dir)
    return base64.b64encode(relative.encode("utf-8")).decode("ascii").strip()
