# notevault/services/confinement.py
from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from notevault.errors import AccessDenied, NotFound
from notevault.services.paths import AllowedRoots, expand_home

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\\/]")


def has_hidden_segment(path: str) -> bool:
    # '.' and '..' count as hidden too, which also rules out traversal segments.
    return any(part.startswith(".") for part in _SEPARATORS.split(path))


def _real_path(path: str) -> Path:
    try:
        return Path(path).resolve(strict=True)
    except (RuntimeError, ValueError) as e:
        # Older interpreters report symlink loops as RuntimeError; invalid paths raise ValueError.
        raise OSError(str(e)) from e


class PathValidator:
    """
    Resolve an untrusted path string to a location confined to the allowed roots.

    The returned path is either the real (symlink-free) path of an existing
    entry, or, for a target that does not exist yet, the absolute path whose
    parent directory has been resolved and confirmed to be inside a root.
    Callers never need to re-check what this returns.
    """

    def __init__(self, roots: AllowedRoots):
        self.roots = roots

    def validate(self, candidate: str) -> Path:
        if "\x00" in candidate:
            raise AccessDenied("Access denied - path contains a NUL byte")
        if has_hidden_segment(candidate):
            raise AccessDenied("Access denied - hidden files/directories not allowed")

        expanded = expand_home(candidate)
        # Relative paths resolve against the process cwd, not against a root.
        absolute = os.path.abspath(expanded)

        if not self.roots.contains(absolute):
            raise AccessDenied(
                f"Access denied - path outside allowed directories: {absolute} "
                f"not in {self.roots.describe()}"
            )

        try:
            real = _real_path(absolute)
        except OSError:
            return self._validate_new_target(absolute)

        if not self.roots.contains(real):
            raise AccessDenied("Access denied - symlink target outside allowed directories")
        return real

    def _validate_new_target(self, absolute: str) -> Path:
        target = Path(absolute)
        parent = os.path.dirname(absolute)
        try:
            real_parent = _real_path(parent)
        except OSError as e:
            raise NotFound(f"Parent directory does not exist: {parent}") from e

        if not self.roots.contains(real_parent):
            raise AccessDenied("Access denied - parent directory outside allowed directories")

        # A dangling symlink would be followed on write; its target must be confined too.
        if target.is_symlink():
            try:
                dangling_target = target.resolve()
            except (OSError, RuntimeError) as e:
                raise AccessDenied(f"Access denied - unresolvable symlink: {absolute}") from e
            if not self.roots.contains(dangling_target):
                logger.warning("dangling symlink %s points outside vault: %s", target, dangling_target)
                raise AccessDenied("Access denied - symlink target outside allowed directories")

        return target
