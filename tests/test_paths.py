from pathlib import Path

import pytest

from notevault.errors import ConfigurationError
from notevault.services.paths import AllowedRoot, AllowedRoots, expand_home, normalize_path


def test_normalize_folds_case_and_separators():
    assert normalize_path("/Vault/Notes/../Daily.MD") == "/vault/daily.md"
    assert normalize_path("/vault//a/./b") == "/vault/a/b"
    assert normalize_path("C:\\Vault\\Notes") == normalize_path("c:/vault/notes")


def test_expand_home(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert expand_home("~").rstrip("/") == str(Path.home())
    assert expand_home("~/notes/a.md") == str(Path.home() / "notes" / "a.md")
    assert expand_home("~other/a.md") == "~other/a.md"
    assert expand_home("notes/~/a.md") == "notes/~/a.md"


def test_root_contains_respects_segment_boundary(vault: Path, tmp_path: Path):
    root = AllowedRoot.from_path(vault)
    assert root.contains(vault)
    assert root.contains(vault / "a" / "b.md")
    assert root.contains(str(vault / "A.md").upper())
    assert not root.contains(tmp_path / "vault2" / "a.md")
    assert not root.contains(tmp_path)


def test_root_relative_uses_posix_separators(vault: Path):
    root = AllowedRoot.from_path(vault)
    assert root.relative(vault / "notes" / "sub" / "x.md") == "notes/sub/x.md"


def test_missing_root_is_a_configuration_error(tmp_path: Path):
    with pytest.raises(ConfigurationError):
        AllowedRoot.from_path(tmp_path / "nope")


def test_file_root_is_a_configuration_error(tmp_path: Path):
    f = tmp_path / "file.md"
    f.write_text("x", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        AllowedRoot.from_path(f)


def test_allowed_roots_primary_and_lookup(tmp_path: Path):
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.mkdir()
    b.mkdir()
    roots = AllowedRoots.from_paths([a, b, a])
    assert len(roots) == 2
    assert roots.primary.path == a.resolve()
    assert roots.find(b / "x.md").path == b.resolve()
    assert roots.find(tmp_path / "c" / "x.md") is None


def test_allowed_roots_requires_one():
    with pytest.raises(ConfigurationError):
        AllowedRoots([])
