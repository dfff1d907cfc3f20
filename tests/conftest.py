"""
Pytest configuration and fixtures.
"""

import json
import shutil
from pathlib import Path
from typing import Any

import pytest

from ucitree.tree import Tree


TESTDATA = Path(__file__).parent / "testdata"


@pytest.fixture
def testdata() -> Path:
    """Read-only directory with UCI files and their JSON dumps."""
    return TESTDATA


@pytest.fixture
def tree_dir(tmp_path: Path) -> Path:
    """Writable copy of the UCI files in testdata."""
    target = tmp_path / "config"
    target.mkdir()
    for path in TESTDATA.iterdir():
        if path.suffix != ".json":
            shutil.copy(path, target / path.name)
    return target


@pytest.fixture
def tree(tree_dir: Path) -> Tree:
    """Tree over the writable copy of testdata."""
    return Tree(tree_dir)


def load_expected(name: str) -> dict[str, Any]:
    """Load the JSON dump of a testdata config."""
    with open(TESTDATA / f"{name}.json", encoding="utf-8") as f:
        return json.load(f)
