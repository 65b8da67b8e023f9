"""
Tests for the item store and source loading.
"""

import json

import pytest

from narrow.caserule import IGNORE_CASE
from narrow.items import (
    Candidate,
    ItemStore,
    SourceError,
    is_priority_text,
    load_keyed,
    load_lines,
    parse_priority_items,
    read_keyed_source,
)


class TestLoadLines:
    def test_ids_are_dense_and_ordered(self, fruit_lines):
        """Every line becomes one candidate; ids follow input order."""
        store = load_lines(fruit_lines)
        assert len(store) == len(fruit_lines)
        assert [c.id for c in store] == list(range(len(fruit_lines)))
        assert store.texts == fruit_lines

    def test_trailing_newline_stripped(self):
        store = load_lines(["one\n", "two words\n", "three"])
        assert store.texts == ["one", "two words", "three"]

    def test_empty_lines_are_candidates(self):
        store = load_lines(["a\n", "\n", "b\n"])
        assert store.texts == ["a", "", "b"]

    def test_priority_flag(self):
        store = load_lines(["firefox", "files", "fi", "chromium"], priority_items=["fire"])
        assert [c.is_priority for c in store] == [True, False, True, False]

    def test_not_keyed(self, fruit_store):
        assert fruit_store.keyed is False
        assert all(c.json_ref is None for c in fruit_store)


class TestPriority:
    def test_prefix_bounded_either_way(self):
        """Compared over the shorter length, so both directions count."""
        assert is_priority_text("firefox", ["fire"])
        assert is_priority_text("fi", ["fire"])
        assert not is_priority_text("file", ["fire"])

    def test_case_rule(self):
        assert not is_priority_text("Firefox", ["fire"])
        assert is_priority_text("Firefox", ["fire"], IGNORE_CASE)

    def test_parse_priority_items(self):
        assert parse_priority_items("a,,b,") == ["a", "b"]
        assert parse_priority_items("") == []
        assert parse_priority_items(None) == []


class TestLoadKeyed:
    def test_keys_become_candidates(self, keyed_source):
        store = load_keyed(keyed_source)
        assert store.keyed is True
        assert store.texts == ["browser", "terminal", "editor"]
        assert store[1].json_ref == "xterm"
        assert isinstance(store[0].json_ref, dict)
        assert store[2].is_keyed

    def test_invalid_values_rejected(self):
        with pytest.raises(SourceError):
            load_keyed({"a": 1})

    def test_read_keyed_source(self, keyed_source_file, keyed_source):
        assert read_keyed_source(keyed_source_file) == keyed_source

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(SourceError, match="not found"):
            read_keyed_source(tmp_path / "missing.json")

    def test_read_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"a": ')
        with pytest.raises(SourceError, match="line"):
            read_keyed_source(path)

    def test_non_object_root_rejected_on_load(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text(json.dumps(["a"]))
        with pytest.raises(SourceError):
            load_keyed(read_keyed_source(path))


class TestItemStore:
    def test_lookup_by_id(self, fruit_store):
        assert fruit_store[4].text == "cherry"
        assert fruit_store[4] == Candidate("cherry", 4)

    def test_ids_must_be_dense(self):
        with pytest.raises(ValueError):
            ItemStore([Candidate("a", 0), Candidate("b", 2)])

    def test_max_width(self, fruit_store):
        assert fruit_store.max_width(len) == len("blueberry")
        assert ItemStore().max_width(len) == 0
