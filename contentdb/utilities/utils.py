"""
ContentDB Shared Utilities — naming helpers used by models and the CLI.
"""

from __future__ import annotations

import re
import unicodedata


def to_snake(name: str) -> str:
    """
    Convert CamelCase (or PascalCase) to snake_case.

    Examples:
        to_snake("BlogPost")        → "blog_post"
        to_snake("HTTPSConnection") → "https_connection"
        to_snake("simpleTest")      → "simple_test"
    """
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def parameterize(text: str, separator: str = "-") -> str:
    """
    Make text safe for use in a file name or URL.

    Examples:
        parameterize("Hello, World!")  → "hello-world"
        parameterize("Crème brûlée")   → "creme-brulee"
        parameterize("BlogPost")       → "blogpost"
    """
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-zA-Z0-9_-]+", separator, ascii_text)
    slug = re.sub(rf"{re.escape(separator)}{{2,}}", separator, slug)
    return slug.strip(separator).lower()
