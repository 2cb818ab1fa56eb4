"""
Single-segment key paths into parsed YAML.

A key path is a mapping key or, for a sequence, a decimal index, always
given as a string. Mapping keys are matched by their string form, so
``"2024"`` addresses both ``"2024":`` and ``2024:`` keys.
"""

from __future__ import annotations

from typing import Any, Optional

from contentdb.engine.errors import InvalidKeyPathError


def is_sequence(structure: Any) -> bool:
    return isinstance(structure, list)


def _index(structure: list, key_path: str) -> Optional[int]:
    try:
        index = int(key_path)
    except ValueError:
        return None
    return index if index >= 0 else None


def _find_key(structure: dict, key_path: str) -> Any:
    if key_path in structure:
        return key_path
    for key in structure:
        if str(key) == key_path:
            return key
    return None


def get(structure: Any, key_path: str) -> Any:
    """Value at ``key_path``, or None when nothing is there."""
    if is_sequence(structure):
        index = _index(structure, key_path)
        if index is None or index >= len(structure):
            return None
        return structure[index]
    if isinstance(structure, dict):
        key = _find_key(structure, key_path)
        return None if key is None else structure[key]
    return None


def set(structure: Any, key_path: str, value: Any) -> Any:
    """
    Replace the value at ``key_path`` in place and return the structure.

    Mappings insert missing keys at the end. Sequences accept an existing
    index or the next one (append).

    Raises:
        InvalidKeyPathError: the key path cannot address the structure.
    """
    if is_sequence(structure):
        index = _index(structure, key_path)
        if index is None or index > len(structure):
            raise InvalidKeyPathError(
                f"'{key_path}' is not an index into a sequence of {len(structure)}",
                key_path=key_path,
            )
        if index == len(structure):
            structure.append(value)
        else:
            structure[index] = value
        return structure
    if isinstance(structure, dict):
        key = _find_key(structure, key_path)
        structure[key_path if key is None else key] = value
        return structure
    raise InvalidKeyPathError(
        f"Cannot set '{key_path}' inside a {type(structure).__name__}",
        key_path=key_path,
    )
