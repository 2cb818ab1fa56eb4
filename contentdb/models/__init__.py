"""
ContentDB Models — records backed by files.

ContentModel: one record per front-matter file.
DatafileModel: one record per entry of a YAML data file.
"""

from contentdb.models.attributes import AttributeBag, Variable
from contentdb.models.collection import SortKey, SortOrder, by_field
from contentdb.models.datafile import DatafileModel
from contentdb.models.document import ContentModel

__all__ = [
    "AttributeBag",
    "Variable",
    "SortKey",
    "SortOrder",
    "by_field",
    "ContentModel",
    "DatafileModel",
]
