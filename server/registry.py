# server/registry.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Type

from pydantic import BaseModel, ValidationError

from server.tools.notes import (
    READ_NOTES_DESCRIPTION,
    READ_NOTES_DIR_DESCRIPTION,
    SEARCH_NOTES_DESCRIPTION,
    WRITE_NOTE_DESCRIPTION,
    NoteToolHandlers,
    ReadNotesDirIn,
    ReadNotesIn,
    SearchNotesIn,
    ToolResult,
    WriteNoteIn,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Callable[[BaseModel], ToolResult]


def _schema_from_model(model: Type[BaseModel]) -> Dict[str, Any]:
    return model.model_json_schema()


def build_tool_registry(handlers: NoteToolHandlers) -> Dict[str, ToolSpec]:
    """
    Build a registry once at startup from the injected handlers.
    Transport layers (HTTP) read from this registry to expose tools.
    """
    specs = [
        ToolSpec(
            name="obsidian_read_notes",
            description=READ_NOTES_DESCRIPTION,
            input_model=ReadNotesIn,
            handler=handlers.read_notes,
        ),
        ToolSpec(
            name="obsidian_search_notes",
            description=SEARCH_NOTES_DESCRIPTION,
            input_model=SearchNotesIn,
            handler=handlers.search_notes,
        ),
        ToolSpec(
            name="obsidian_read_notes_dir",
            description=READ_NOTES_DIR_DESCRIPTION,
            input_model=ReadNotesDirIn,
            handler=handlers.read_notes_dir,
        ),
        ToolSpec(
            name="obsidian_write_note",
            description=WRITE_NOTE_DESCRIPTION,
            input_model=WriteNoteIn,
            handler=handlers.write_note,
        ),
    ]
    return {spec.name: spec for spec in specs}


def list_tools_payload(registry: Dict[str, ToolSpec]) -> Dict[str, Any]:
    """
    Produce the `tools/list` payload body as per MCP Tools spec.
    """
    tools = []
    for spec in registry.values():
        tools.append({
            "name": spec.name,
            "description": spec.description,
            "inputSchema": _schema_from_model(spec.input_model),
        })
    return {"tools": tools}


def dispatch_tool_call(registry: Dict[str, ToolSpec], name: Any, arguments: Any) -> ToolResult:
    """
    Validate args with the tool's Pydantic model, then invoke the named handler.
    Raises KeyError for unknown tools and ValidationError for bad arguments.
    """
    if not isinstance(name, str) or name not in registry:
        raise KeyError(f"Unknown tool: {name}")
    spec = registry[name]
    # model_validate rejects non-object arguments with a ValidationError.
    args_obj = spec.input_model.model_validate({} if arguments is None else arguments)
    return spec.handler(args_obj)


def call_tool(registry: Dict[str, ToolSpec], name: Any, arguments: Any) -> ToolResult:
    """
    Like dispatch_tool_call, but every failure becomes an error result.
    """
    try:
        return dispatch_tool_call(registry, name, arguments)
    except KeyError as e:
        return ToolResult(f"Error: {e.args[0]}", is_error=True)
    except ValidationError as e:
        return ToolResult(f"Error: Invalid arguments for {name}: {e}", is_error=True)
