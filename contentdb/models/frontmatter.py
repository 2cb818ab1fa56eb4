"""
Front matter codec: a YAML header block followed by a free-form body.

    ---
    title: Hello World
    ---

    Body text here.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Tuple

import yaml

# Header: a line of dashes, YAML, then a closing line of dashes or dots
FRONT_MATTER_PATTERN = re.compile(
    r"\A(---\s*\n.*?\n?)^((---|\.\.\.)\s*$\n?)", re.MULTILINE | re.DOTALL
)

SEPARATOR = "---\n\n"


def split(raw_text: str) -> Tuple[Optional[str], str]:
    """
    Split raw file text into (header, body).

    The header keeps its opening delimiter line. Blank lines directly after
    the closing delimiter belong to the separator, not the body. Text
    without a leading header block is all body.
    """
    match = FRONT_MATTER_PATTERN.match(raw_text)
    if match is None:
        return None, raw_text
    return match.group(1), raw_text[match.end():]


def join(attributes_yaml: str, body: Optional[str] = "") -> str:
    return attributes_yaml + SEPARATOR + (body or "")


def load_header(header: str) -> Any:
    """Parse header YAML. Raises yaml.YAMLError on malformed input."""
    return yaml.safe_load(header)


def dump_yaml(data: Any) -> str:
    """
    Dump to YAML text starting with a ``---`` line.

    An empty mapping becomes a bare ``---`` line so the header block
    stays recognizable when it is read back.
    """
    if not data:
        return "---\n"
    return yaml.safe_dump(
        data,
        explicit_start=True,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
