# notevault/di.py
from dataclasses import dataclass
from typing import Optional

from notevault.config import Settings
from notevault.errors import ConfigurationError
from notevault.services.confinement import PathValidator
from notevault.services.notes import NoteService
from notevault.services.paths import AllowedRoots
from notevault.services.walker import TreeWalker


@dataclass
class Container:
    settings: Settings
    roots: AllowedRoots
    validator: PathValidator
    walker: TreeWalker
    note_service: NoteService


def build_container(settings: Optional[Settings] = None) -> Container:
    s = settings or Settings()

    if not s.OBSIDIAN_VAULT_PATH.strip():
        raise ConfigurationError("OBSIDIAN_VAULT_PATH environment variable is required")
    roots = AllowedRoots.from_paths(s.vault_paths())

    validator = PathValidator(roots)
    walker = TreeWalker(validator)
    notes = NoteService(
        roots,
        validator,
        walker,
        note_extension=s.NOTE_EXTENSION,
        search_limit=s.SEARCH_LIMIT,
        max_workers=s.READ_MAX_WORKERS,
    )

    return Container(s, roots, validator, walker, notes)
