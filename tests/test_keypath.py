"""Unit tests for contentdb.models.keypath — single-segment access into YAML data."""

import pytest

from contentdb.engine.errors import InvalidKeyPathError
from contentdb.models import keypath


class TestGet:
    def test_sequence_index(self):
        assert keypath.get(["a", "b"], "1") == "b"

    @pytest.mark.parametrize("key_path", ["2", "-1", "first"])
    def test_sequence_miss(self, key_path):
        assert keypath.get(["a", "b"], key_path) is None

    def test_mapping_key(self):
        assert keypath.get({"alice": 1}, "alice") == 1

    def test_mapping_non_string_key(self):
        assert keypath.get({2024: "year"}, "2024") == "year"

    def test_mapping_miss(self):
        assert keypath.get({"alice": 1}, "bob") is None

    def test_scalar(self):
        assert keypath.get("text", "0") is None


class TestSet:
    def test_sequence_replace(self):
        data = ["a", "b"]
        assert keypath.set(data, "0", "z") == ["z", "b"]

    def test_sequence_append(self):
        data = ["a"]
        keypath.set(data, "1", "b")
        assert data == ["a", "b"]

    @pytest.mark.parametrize("key_path", ["3", "-1", "name"])
    def test_sequence_invalid(self, key_path):
        with pytest.raises(InvalidKeyPathError):
            keypath.set(["a"], key_path, "x")

    def test_mapping_replace_keeps_order(self):
        data = {"a": 1, "b": 2, "c": 3}
        keypath.set(data, "b", 20)
        assert list(data.items()) == [("a", 1), ("b", 20), ("c", 3)]

    def test_mapping_keeps_original_key(self):
        data = {2024: "old"}
        keypath.set(data, "2024", "new")
        assert data == {2024: "new"}

    def test_mapping_insert(self):
        data = {"a": 1}
        keypath.set(data, "b", 2)
        assert list(data) == ["a", "b"]

    def test_scalar(self):
        with pytest.raises(InvalidKeyPathError):
            keypath.set("text", "0", "x")

    def test_is_sequence(self):
        assert keypath.is_sequence([])
        assert not keypath.is_sequence({})
