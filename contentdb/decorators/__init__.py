"""ContentDB Decorators — model declaration and registration."""

from contentdb.decorators.core import content_model, datafile_model, define_model  # noqa: F401

__all__ = ["content_model", "datafile_model", "define_model"]
