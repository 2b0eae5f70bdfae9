# notevault/services/paths.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple

from notevault.errors import ConfigurationError


def normalize_path(path: str) -> str:
    """
    Comparable form of a path: lexically normalized, '/' separators, lower case.
    Case folding is applied on every platform, including case-sensitive ones.
    """
    return os.path.normpath(path).replace("\\", "/").lower()


def expand_home(path: str) -> str:
    # Only '~' and '~/...'; '~user' forms are left alone.
    if path == "~" or path.startswith("~/"):
        return os.path.join(str(Path.home()), path[2:])
    return path


@dataclass(frozen=True)
class AllowedRoot:
    path: Path
    normalized: str

    @classmethod
    def from_path(cls, raw: str | Path) -> "AllowedRoot":
        p = Path(expand_home(str(raw))).absolute()
        if not p.exists():
            raise ConfigurationError(f"Vault directory does not exist: {p}")
        if not p.is_dir():
            raise ConfigurationError(f"Vault path is not a directory: {p}")
        real = p.resolve(strict=True)
        return cls(path=real, normalized=normalize_path(str(real)))

    def contains(self, path: str | Path) -> bool:
        candidate = normalize_path(str(path))
        if candidate == self.normalized:
            return True
        # Require a separator after the root so '/vault2' is not inside '/vault'.
        return candidate.startswith(self.normalized.rstrip("/") + "/")

    def relative(self, path: str | Path) -> str:
        return Path(os.path.relpath(str(path), str(self.path))).as_posix()


class AllowedRoots:
    """
    Immutable, ordered set of confinement roots. The first one is the primary
    root that relative note paths are joined onto.
    """

    def __init__(self, roots: Iterable[AllowedRoot]):
        unique = []
        for root in roots:
            if root not in unique:
                unique.append(root)
        if not unique:
            raise ConfigurationError("At least one vault directory is required")
        self._roots: Tuple[AllowedRoot, ...] = tuple(unique)

    @classmethod
    def from_paths(cls, paths: Iterable[str | Path]) -> "AllowedRoots":
        return cls(AllowedRoot.from_path(p) for p in paths)

    @property
    def primary(self) -> AllowedRoot:
        return self._roots[0]

    def __iter__(self) -> Iterator[AllowedRoot]:
        return iter(self._roots)

    def __len__(self) -> int:
        return len(self._roots)

    def find(self, path: str | Path) -> Optional[AllowedRoot]:
        for root in self._roots:
            if root.contains(path):
                return root
        return None

    def contains(self, path: str | Path) -> bool:
        return self.find(path) is not None

    def describe(self, sep: str = ", ") -> str:
        return sep.join(str(r.path) for r in self._roots)

    def __repr__(self) -> str:
        return f"AllowedRoots({self.describe()})"
