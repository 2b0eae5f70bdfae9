import os
from pathlib import Path

import pytest

from notevault.services.walker import DirectoryEntry, Visit


def _everything(entry: DirectoryEntry) -> Visit:
    return Visit(recurse=entry.is_dir, report=True)


def _names(result):
    return [e.name for e in result.entries]


def test_walk_reports_and_recurses(container, vault: Path):
    (vault / "b").mkdir()
    (vault / "b" / "inner.md").write_text("x", encoding="utf-8")
    (vault / "a.md").write_text("x", encoding="utf-8")

    result = container.walker.walk(vault, _everything)

    assert _names(result) == ["a.md", "b", "inner.md"]
    assert result.diagnostics == []
    inner = result.entries[-1]
    assert inner.path == vault / "b" / "inner.md"
    assert inner.is_dir is False


def test_walk_without_recurse_stays_shallow(container, vault: Path):
    (vault / "b").mkdir()
    (vault / "b" / "inner.md").write_text("x", encoding="utf-8")

    result = container.walker.walk(vault, lambda e: Visit(report=True))
    assert _names(result) == ["b"]


def test_hidden_entries_are_skipped_with_diagnostic(container, vault: Path):
    (vault / ".obsidian").mkdir()
    (vault / ".obsidian" / "app.md").write_text("x", encoding="utf-8")
    (vault / "visible.md").write_text("x", encoding="utf-8")

    result = container.walker.walk(vault, _everything)

    assert _names(result) == ["visible.md"]
    assert len(result.diagnostics) == 1
    assert ".obsidian" in result.diagnostics[0]


def test_escaping_symlink_is_skipped_not_fatal(container, vault: Path, outside: Path):
    os.symlink(outside, vault / "linked")
    (vault / "kept.md").write_text("x", encoding="utf-8")

    result = container.walker.walk(vault, _everything)

    assert _names(result) == ["kept.md"]
    assert any("linked" in d for d in result.diagnostics)


def test_symlink_cycle_terminates(container, vault: Path):
    (vault / "a").mkdir()
    (vault / "a" / "note.md").write_text("x", encoding="utf-8")
    os.symlink(vault / "a", vault / "a" / "loop")

    result = container.walker.walk(vault, _everything)

    assert _names(result) == ["a", "note.md"]
    assert any("already visited" in d for d in result.diagnostics)


def test_start_must_be_listable(container, vault: Path):
    note = vault / "a.md"
    note.write_text("x", encoding="utf-8")
    with pytest.raises(OSError):
        container.walker.walk(note, _everything)
