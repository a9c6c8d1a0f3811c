from __future__ import annotations

from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture()
def temp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture()
def recipes_root(tmp_path: Path) -> Path:
    root = tmp_path / "recipes"
    root.mkdir()
    return root


@pytest.fixture()
def sample_recipes(recipes_root: Path) -> Path:
    """a -> b -> c, d -> c, e standalone."""
    from tests.utils import write_recipe

    write_recipe(recipes_root, "a", ["b"])
    write_recipe(recipes_root, "b", ["c"])
    write_recipe(recipes_root, "c")
    write_recipe(recipes_root, "d", ["c"])
    write_recipe(recipes_root, "e")
    return recipes_root
