# notevault/services/walker.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Set

from notevault.errors import VaultError
from notevault.services.confinement import PathValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryEntry:
    name: str
    path: Path  # full path as traversed (not the real path)
    is_dir: bool


@dataclass(frozen=True)
class Visit:
    recurse: bool = False
    report: bool = False


@dataclass
class WalkResult:
    entries: List[DirectoryEntry] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)


Visitor = Callable[[DirectoryEntry], Visit]


class TreeWalker:
    """
    Recursive visitor over a confined subtree.

    Every entry is re-validated before the visitor sees it, so a symlink
    planted inside the vault cannot lead the walk outside of it. Entries that
    fail validation are skipped and noted in `WalkResult.diagnostics`.
    Directories whose real path was already visited in the same walk are
    skipped as well, which keeps symlink cycles from recursing forever.
    """

    def __init__(self, validator: PathValidator):
        self.validator = validator

    def walk(self, start: Path, visit: Visitor) -> WalkResult:
        result = WalkResult()
        seen: Set[Path] = {Path(start).resolve()}
        # Listing the start directory is allowed to fail loudly.
        entries = self._list(Path(start))
        self._visit_entries(entries, visit, result, seen)
        return result

    def _list(self, directory: Path) -> List[os.DirEntry]:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda e: e.name)

    def _visit_entries(self, entries, visit: Visitor, result: WalkResult, seen: Set[Path]) -> None:
        for dirent in entries:
            full_path = Path(dirent.path)
            try:
                real = self.validator.validate(str(full_path))
                is_dir = dirent.is_dir()
            except (VaultError, OSError) as e:
                self._skip(result, full_path, str(e))
                continue

            entry = DirectoryEntry(name=dirent.name, path=full_path, is_dir=is_dir)
            if is_dir:
                if real in seen:
                    self._skip(result, full_path, f"already visited as {real}")
                    continue
                seen.add(real)

            decision = visit(entry)
            if decision.report:
                result.entries.append(entry)
            if is_dir and decision.recurse:
                try:
                    children = self._list(full_path)
                except OSError as e:
                    self._skip(result, full_path, str(e))
                    continue
                self._visit_entries(children, visit, result, seen)

    @staticmethod
    def _skip(result: WalkResult, path: Path, reason: str) -> None:
        logger.debug("skipping %s: %s", path, reason)
        result.diagnostics.append(f"{path}: {reason}")
