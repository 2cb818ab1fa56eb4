"""
ContentDB — a file-backed document store for static site content.

Front-matter files (Markdown/HTML with a YAML header) and entries of YAML
data files are exposed as records with find/all/save/destroy.

    from contentdb import ContentModel, content_model

    @content_model(base_path="site", folder="_posts", variables=["title", "date"])
    class Post(ContentModel):
        pass
"""

__version__ = "0.3.0"

from contentdb.decorators import content_model, datafile_model, define_model  # noqa: E402
from contentdb.engine.callbacks import HaltCallbacks, on_event  # noqa: E402
from contentdb.models import (  # noqa: E402
    ContentModel,
    DatafileModel,
    SortKey,
    SortOrder,
    Variable,
    by_field,
)

__all__ = [
    "content_model",
    "datafile_model",
    "define_model",
    "HaltCallbacks",
    "on_event",
    "ContentModel",
    "DatafileModel",
    "SortKey",
    "SortOrder",
    "Variable",
    "by_field",
]
