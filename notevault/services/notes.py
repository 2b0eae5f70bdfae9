# notevault/services/notes.py
from __future__ import annotations

import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from notevault.errors import InvalidPattern, VaultError
from notevault.services.confinement import PathValidator
from notevault.services.paths import AllowedRoots
from notevault.services.walker import DirectoryEntry, TreeWalker, Visit

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 200


def compile_query(query: str) -> re.Pattern[str]:
    """Treat '*' as a wildcard and compile the query as a case-insensitive regex."""
    try:
        return re.compile(query.replace("*", ".*"), re.IGNORECASE)
    except re.error as e:
        raise InvalidPattern(f"Invalid search pattern {query!r}: {e}") from e


@dataclass
class SearchResult:
    matches: List[str]
    total: int
    diagnostics: List[str] = field(default_factory=list)

    @property
    def omitted(self) -> int:
        return self.total - len(self.matches)

    def render(self) -> str:
        text = "\n".join(self.matches) if self.matches else "No matches found"
        if self.omitted > 0:
            text += f"\n\n... {self.omitted} more results not shown."
        return text


@dataclass(frozen=True)
class NoteReadResult:
    path: str
    content: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def render(self) -> str:
        if self.ok:
            return f"{self.path}:\n{self.content}\n"
        return f"{self.path}: Error - {self.error}"


class WriteStatus(str, Enum):
    WRITTEN = "written"
    REJECTED = "rejected"  # path did not validate; message carries guidance
    FAILED = "failed"      # path was fine, the write itself failed


@dataclass(frozen=True)
class WriteResult:
    status: WriteStatus
    message: str

    @property
    def ok(self) -> bool:
        return self.status is WriteStatus.WRITTEN


class NoteService:
    """
    The four vault operations. Every path argument goes through the
    PathValidator before the filesystem is touched; listings go through the
    TreeWalker, which validates each entry again.
    """

    def __init__(
        self,
        roots: AllowedRoots,
        validator: PathValidator,
        walker: TreeWalker,
        note_extension: str = ".md",
        search_limit: int = SEARCH_LIMIT,
        max_workers: int = 8,
    ):
        self.roots = roots
        self.validator = validator
        self.walker = walker
        self.note_extension = note_extension
        self.search_limit = search_limit
        self.max_workers = max_workers

    def _in_primary(self, rel_path: str) -> str:
        # Lexically collapse "." and ".." segments before validation.
        return os.path.normpath(os.path.join(str(self.roots.primary.path), rel_path))

    # ---------- Search ----------

    def search_notes(self, query: str) -> SearchResult:
        needle = query.lower()
        try:
            pattern: Optional[re.Pattern[str]] = compile_query(query)
        except InvalidPattern as e:
            logger.info("%s; using substring match only", e)
            pattern = None

        def visit(entry: DirectoryEntry) -> Visit:
            if entry.is_dir:
                return Visit(recurse=True)
            if not entry.name.endswith(self.note_extension):
                return Visit()
            name = entry.name
            matched = needle in name.lower() or (pattern is not None and pattern.search(name) is not None)
            return Visit(report=matched)

        found: List[str] = []
        diagnostics: List[str] = []
        for root in self.roots:
            walked = self.walker.walk(root.path, visit)
            found.extend(root.relative(e.path) for e in walked.entries)
            diagnostics.extend(walked.diagnostics)

        return SearchResult(
            matches=found[: self.search_limit],
            total=len(found),
            diagnostics=diagnostics,
        )

    # ---------- Read ----------

    def read_notes(self, paths: Sequence[str]) -> List[NoteReadResult]:
        if not paths:
            return []
        workers = max(1, min(self.max_workers, len(paths)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(self._read_one, paths))

    def _read_one(self, rel_path: str) -> NoteReadResult:
        try:
            p = self.validator.validate(self._in_primary(rel_path))
            # newline="" keeps CRLF and CR line endings as stored.
            with open(p, encoding="utf-8", newline="") as f:
                content = f.read()
        except (VaultError, OSError, UnicodeDecodeError) as e:
            logger.warning("read failed for %s: %s", rel_path, e)
            return NoteReadResult(path=rel_path, error=str(e))
        return NoteReadResult(path=rel_path, content=content)

    # ---------- Directories ----------

    def list_directories(self, rel_path: str) -> List[str]:
        start = self.validator.validate(self._in_primary(rel_path))

        def visit(entry: DirectoryEntry) -> Visit:
            if entry.is_dir:
                return Visit(recurse=True, report=True)
            return Visit()

        walked = self.walker.walk(start, visit)
        dirs = []
        for e in walked.entries:
            root = self.roots.find(e.path) or self.roots.primary
            dirs.append(root.relative(e.path))
        return dirs

    # ---------- Write ----------

    def write_note(self, rel_path: str, content: str) -> WriteResult:
        try:
            p = self.validator.validate(self._in_primary(rel_path))
        except VaultError as e:
            logger.warning("write rejected for %s: %s", rel_path, e)
            return WriteResult(WriteStatus.REJECTED, self.write_guidance())

        try:
            p.write_text(content, encoding="utf-8", newline="")
        except OSError as e:
            logger.error("write failed for %s: %s", rel_path, e)
            return WriteResult(WriteStatus.FAILED, str(e))

        logger.info("note written: %s", p)
        return WriteResult(WriteStatus.WRITTEN, f"Note successfully written to {rel_path}")

    def write_guidance(self) -> str:
        return (
            "Please specify the target directory. Available directories:\n"
            + self.roots.describe(sep="\n")
        )
