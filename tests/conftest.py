"""
Pytest configuration and shared fixtures.
"""

import pytest
import json
from pathlib import Path
from typing import Any, Dict, List

from narrow.items import ItemStore, load_lines
from narrow.pagination import TextMeasure


@pytest.fixture
def fruit_lines() -> List[str]:
    """Plain candidates in input order."""
    return ["apple", "apricot", "banana", "blueberry", "cherry", "grape"]


@pytest.fixture
def fruit_store(fruit_lines) -> ItemStore:
    return load_lines(fruit_lines)


@pytest.fixture
def char_width() -> TextMeasure:
    """One unit per character, no padding."""
    return TextMeasure(len, padding=0)


@pytest.fixture
def keyed_source() -> Dict[str, Any]:
    """A keyed source with one nested object."""
    return {
        "browser": {
            "firefox": "firefox --new-window",
            "chromium": "chromium",
        },
        "terminal": "xterm",
        "editor": "vim",
    }


@pytest.fixture
def keyed_source_file(tmp_path, keyed_source) -> Path:
    path = tmp_path / "menu.json"
    path.write_text(json.dumps(keyed_source, indent=2))
    return path


@pytest.fixture
def history_file(tmp_path) -> Path:
    """History file holding three records."""
    path = tmp_path / "history"
    path.write_text("a\nb\nc\n")
    return path
