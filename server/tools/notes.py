# server/tools/notes.py
import logging
from dataclasses import dataclass
from typing import Annotated, List

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import BaseModel, Field

from notevault.errors import VaultError
from notevault.logging import log_tool_call
from notevault.services.notes import NoteService, WriteStatus

logger = logging.getLogger(__name__)


class ReadNotesIn(BaseModel):
    paths: List[str] = Field(..., description="Note paths relative to the vault root")


class SearchNotesIn(BaseModel):
    query: str = Field(..., description="Case-insensitive name fragment; '*' acts as a wildcard")


class ReadNotesDirIn(BaseModel):
    path: str = Field(..., description="Directory relative to the vault root ('' for the root)")


class WriteNoteIn(BaseModel):
    path: str = Field(..., description="Note path relative to the vault root")
    content: str = Field(..., description="UTF-8 text content to write")


READ_NOTES_DESCRIPTION = (
    "Read the contents of multiple notes. Each note's content is returned with its "
    "path as a reference. Failed reads for individual notes won't stop "
    "the entire operation. Reading too many at once may result in an error."
)
SEARCH_NOTES_DESCRIPTION = (
    "Searches for a note by its name. The search "
    "is case-insensitive and matches partial names. "
    "Queries can also be a valid regex. Returns paths of the notes "
    "that match the query."
)
READ_NOTES_DIR_DESCRIPTION = (
    "Lists only the directory structure under the specified path. "
    "Returns the relative paths of all directories without file contents."
)
WRITE_NOTE_DESCRIPTION = (
    "Creates a new note at the specified path. Before writing, "
    "check the directory structure using obsidian_read_notes_dir. "
    "If the target directory is unclear, the operation will be paused "
    "and you will be prompted to specify the correct directory."
)


@dataclass(frozen=True)
class ToolResult:
    text: str
    is_error: bool = False

    @classmethod
    def error(cls, exc: BaseException) -> "ToolResult":
        return cls(text=f"Error: {exc}", is_error=True)


class NoteToolHandlers:
    """
    Named handlers for each note tool, shared by the stdio and HTTP transports.
    Operation-level failures are turned into error results here so they never
    reach the transport as exceptions.
    """

    def __init__(self, note_service: NoteService):
        self.notes = note_service

    def read_notes(self, args: ReadNotesIn) -> ToolResult:
        log_tool_call(logger, "obsidian_read_notes", args.model_dump())
        results = self.notes.read_notes(args.paths)
        return ToolResult("\n---\n".join(r.render() for r in results))

    def search_notes(self, args: SearchNotesIn) -> ToolResult:
        log_tool_call(logger, "obsidian_search_notes", args.model_dump())
        try:
            result = self.notes.search_notes(args.query)
        except (VaultError, OSError) as e:
            logger.warning("search failed: %s", e)
            return ToolResult.error(e)
        return ToolResult(result.render())

    def read_notes_dir(self, args: ReadNotesDirIn) -> ToolResult:
        log_tool_call(logger, "obsidian_read_notes_dir", args.model_dump())
        try:
            dirs = self.notes.list_directories(args.path)
        except (VaultError, OSError) as e:
            logger.warning("directory listing failed for %s: %s", args.path, e)
            return ToolResult.error(e)
        return ToolResult("\n".join(dirs))

    def write_note(self, args: WriteNoteIn) -> ToolResult:
        log_tool_call(logger, "obsidian_write_note", args.model_dump())
        outcome = self.notes.write_note(args.path, args.content)
        if outcome.ok:
            return ToolResult(outcome.message)
        if outcome.status is WriteStatus.FAILED:
            return ToolResult(f"Error: {outcome.message}", is_error=True)
        return ToolResult(outcome.message, is_error=True)


def _unwrap(result: ToolResult) -> str:
    # FastMCP reports a raised ToolError as a result with isError set.
    if result.is_error:
        raise ToolError(result.text)
    return result.text


def register_note_tools(mcp: FastMCP, handlers: NoteToolHandlers):
    """
    Very thin tool adapters:
    - flat, typed parameters (FastMCP builds the input schema from them)
    - call the shared handler (business logic + confinement)
    - surface error results as ToolError
    """

    @mcp.tool(name="obsidian_read_notes", description=READ_NOTES_DESCRIPTION)
    def obsidian_read_notes(
        paths: Annotated[List[str], Field(description="Note paths relative to the vault root")],
    ) -> str:
        return _unwrap(handlers.read_notes(ReadNotesIn(paths=paths)))

    @mcp.tool(name="obsidian_search_notes", description=SEARCH_NOTES_DESCRIPTION)
    def obsidian_search_notes(
        query: Annotated[str, Field(description="Name fragment or pattern ('*' is a wildcard)")],
    ) -> str:
        return _unwrap(handlers.search_notes(SearchNotesIn(query=query)))

    @mcp.tool(name="obsidian_read_notes_dir", description=READ_NOTES_DIR_DESCRIPTION)
    def obsidian_read_notes_dir(
        path: Annotated[str, Field(description="Directory relative to the vault root")],
    ) -> str:
        return _unwrap(handlers.read_notes_dir(ReadNotesDirIn(path=path)))

    @mcp.tool(name="obsidian_write_note", description=WRITE_NOTE_DESCRIPTION)
    def obsidian_write_note(
        path: Annotated[str, Field(description="Note path relative to the vault root")],
        content: Annotated[str, Field(description="UTF-8 text content to write")],
    ) -> str:
        return _unwrap(handlers.write_note(WriteNoteIn(path=path, content=content)))
