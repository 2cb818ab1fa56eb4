"""Unit tests for contentdb.models.collection — file enumeration and sorting."""

import os
from types import SimpleNamespace

import pytest

from contentdb.engine.errors import PathTraversalError
from contentdb.models.collection import SortKey, SortOrder, by_field, content_files, sort_records

EXTENSIONS = (".md", ".markdown", ".html")


def _record(name, **values):
    return SimpleNamespace(
        file_path=name,
        file_name=name,
        posted_datetime=values.pop("posted", None),
        get=values.get,
    )


class TestContentFiles:
    def test_folder_collection(self, site):
        files = content_files(str(site), "_posts", EXTENSIONS)
        assert [os.path.basename(f) for f in files] == [
            "2024-01-01-first.md",
            "2024-02-01-second.md",
            "2024-03-01-third.md",
        ]

    def test_folder_one_level_down(self, site):
        (site / "_posts" / "2023").mkdir()
        (site / "_posts" / "2023" / "old.md").write_text("old\n", encoding="utf-8")
        (site / "_posts" / "2023" / "deeper").mkdir()
        (site / "_posts" / "2023" / "deeper" / "hidden.md").write_text("x\n", encoding="utf-8")

        names = [os.path.basename(f) for f in content_files(str(site), "_posts", EXTENSIONS)]
        assert "old.md" in names
        assert "hidden.md" not in names

    def test_other_extensions_skipped(self, site):
        (site / "_posts" / "notes.txt").write_text("x\n", encoding="utf-8")
        (site / "_posts" / "page.html").write_text("x\n", encoding="utf-8")
        names = [os.path.basename(f) for f in content_files(str(site), "_posts", EXTENSIONS)]
        assert "notes.txt" not in names
        assert "page.html" in names

    def test_directories_skipped(self, site):
        (site / "_posts" / "folder.md").mkdir()
        names = [os.path.basename(f) for f in content_files(str(site), "_posts", EXTENSIONS)]
        assert "folder.md" not in names

    def test_no_folder_skips_underscore_paths(self, site):
        (site / "blog").mkdir()
        (site / "blog" / "deep").mkdir()
        (site / "blog" / "deep" / "post.md").write_text("x\n", encoding="utf-8")
        names = [os.path.basename(f) for f in content_files(str(site), "", EXTENSIONS)]
        assert names == ["about.md", "post.md"]

    def test_subfolder(self, site):
        (site / "_posts" / "archive").mkdir()
        (site / "_posts" / "archive" / "old.md").write_text("old\n", encoding="utf-8")
        files = content_files(str(site), "_posts", EXTENSIONS, subfolder="archive")
        assert [os.path.basename(f) for f in files] == ["old.md"]

    def test_subfolder_name_not_decoded(self, site):
        # "YWJj" is also the base64 of "abc"
        (site / "_posts" / "YWJj").mkdir()
        (site / "_posts" / "YWJj" / "kept.md").write_text("kept\n", encoding="utf-8")
        files = content_files(str(site), "_posts", EXTENSIONS, subfolder="YWJj")
        assert [os.path.basename(f) for f in files] == ["kept.md"]

    def test_subfolder_traversal_rejected(self, site):
        with pytest.raises(PathTraversalError):
            content_files(str(site), "_posts", EXTENSIONS, subfolder="../_data")

    def test_missing_directory(self, tmp_path):
        assert content_files(str(tmp_path), "_nothing", EXTENSIONS) == []


class TestSortRecords:
    def setup_method(self):
        self.records = [
            _record("b.md", posted="2024-02-01", title="Beta"),
            _record("a.md", posted="2024-03-01", title="Alpha"),
            _record("c.md", posted="2024-01-01", title="Gamma"),
        ]

    def test_default_newest_first(self):
        assert [r.file_name for r in sort_records(self.records)] == ["a.md", "b.md", "c.md"]

    def test_ascending(self):
        ordered = sort_records(self.records, SortKey.POSTED_DATETIME, SortOrder.ASC)
        assert [r.file_name for r in ordered] == ["c.md", "b.md", "a.md"]

    def test_direction_as_string(self):
        ordered = sort_records(self.records, SortKey.FILE_NAME, "asc")
        assert [r.file_name for r in ordered] == ["a.md", "b.md", "c.md"]

    def test_by_title(self):
        ordered = sort_records(self.records, SortKey.TITLE, SortOrder.ASC)
        assert [r.get("title") for r in ordered] == ["Alpha", "Beta", "Gamma"]

    def test_by_field_with_missing_value(self):
        records = self.records + [_record("d.md", posted="2024-04-01")]
        ordered = sort_records(records, by_field("title"), SortOrder.ASC)
        assert ordered[0].file_name == "d.md"

    def test_callable(self):
        ordered = sort_records(self.records, lambda r: r.file_name[::-1], SortOrder.ASC)
        assert [r.file_name for r in ordered] == ["a.md", "b.md", "c.md"]

    def test_invalid_direction(self):
        with pytest.raises(ValueError):
            sort_records(self.records, SortKey.FILE_NAME, "sideways")

    def test_by_field_name(self):
        assert by_field("rank").__name__ == "by_rank"
