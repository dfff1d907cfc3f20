"""
Tests for DirectoryStorage.
"""

import os
import stat
from pathlib import Path

import pytest

from ucitree import storage as storage_module
from ucitree.errors import StorageError, UCIError
from ucitree.storage import DirectoryStorage, Storage


@pytest.fixture
def store(tmp_path: Path) -> DirectoryStorage:
    return DirectoryStorage(tmp_path)


def leftovers(root: Path) -> list[str]:
    return sorted(p.name for p in root.iterdir() if p.name.startswith(".ucitree-"))


def test_load_config(tree_dir: Path) -> None:
    store = DirectoryStorage(tree_dir)

    assert store.load_config("emptysection") == b"\nconfig foo\n"
    assert store.load_config("emptyfile") == b""


def test_load_config_missing(store: DirectoryStorage) -> None:
    with pytest.raises(FileNotFoundError):
        store.load_config("nonexistent")


def test_exists(store: DirectoryStorage, tmp_path: Path) -> None:
    (tmp_path / "network").write_text("")
    (tmp_path / "subdir").mkdir()

    assert store.exists("network")
    assert not store.exists("nonexistent")
    assert not store.exists("subdir")


@pytest.mark.parametrize("name", ["", ".", "..", "../passwd", "a/b"])
def test_invalid_names(store: DirectoryStorage, name: str) -> None:
    with pytest.raises(ValueError, match="invalid config name"):
        store.path(name)


def test_save_config(store: DirectoryStorage, tmp_path: Path) -> None:
    store.save_config("network", b"config interface 'lan'\n")

    path = tmp_path / "network"
    assert path.read_bytes() == b"config interface 'lan'\n"
    assert stat.S_IMODE(path.stat().st_mode) == 0o644
    assert leftovers(tmp_path) == []


def test_save_config_replaces(store: DirectoryStorage, tmp_path: Path) -> None:
    (tmp_path / "network").write_bytes(b"old")

    store.save_config("network", b"new")

    assert store.load_config("network") == b"new"


def test_save_config_file_mode(tmp_path: Path) -> None:
    store = DirectoryStorage(tmp_path, file_mode=0o600)

    store.save_config("secret", b"x")

    assert stat.S_IMODE((tmp_path / "secret").stat().st_mode) == 0o600


def test_save_config_missing_directory(tmp_path: Path) -> None:
    store = DirectoryStorage(tmp_path / "missing")

    with pytest.raises(StorageError) as excinfo:
        store.save_config("network", b"x")

    assert excinfo.value.phase == "create"
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_save_config_rename_failure(
    store: DirectoryStorage, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "network").write_bytes(b"original")

    def failing_replace(src, dst):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(storage_module.os, "replace", failing_replace)

    with pytest.raises(StorageError) as excinfo:
        store.save_config("network", b"changed")

    error = excinfo.value
    assert error.phase == "rename"
    assert error.path == str(tmp_path / "network")
    assert "rename" in str(error)
    assert isinstance(error, UCIError)
    assert isinstance(error.__cause__, PermissionError)

    assert (tmp_path / "network").read_bytes() == b"original"
    assert leftovers(tmp_path) == []


@pytest.mark.parametrize("phase, target", [("chmod", "chmod"), ("sync", "fsync")])
def test_save_config_phase_failure(
    store: DirectoryStorage,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    phase: str,
    target: str,
) -> None:
    def failing(*args):
        raise OSError(5, "Input/output error")

    monkeypatch.setattr(storage_module.os, target, failing)

    with pytest.raises(StorageError, match=phase) as excinfo:
        store.save_config("network", b"changed")

    assert excinfo.value.phase == phase
    assert not (tmp_path / "network").exists()
    assert leftovers(tmp_path) == []


def test_default_exists_uses_load_config() -> None:
    class Single(Storage):
        def load_config(self, name: str) -> bytes:
            if name != "only":
                raise FileNotFoundError(name)
            return b""

        def save_config(self, name: str, data: bytes) -> None:
            raise NotImplementedError

    store = Single()

    assert store.exists("only")
    assert not store.exists("other")


def test_storage_is_abstract() -> None:
    with pytest.raises(TypeError):
        Storage()  # type: ignore[abstract]


def test_temp_file_is_created_beside_destination(
    store: DirectoryStorage, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    seen = []
    real_replace = os.replace

    def spy_replace(src, dst):
        seen.append((Path(src).parent, Path(dst).parent))
        real_replace(src, dst)

    monkeypatch.setattr(storage_module.os, "replace", spy_replace)

    store.save_config("network", b"x")

    assert seen == [(tmp_path, tmp_path)]
