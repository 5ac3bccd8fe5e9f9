"""JSON I/O and the workspace wire codec.

Wire shape (field names are fixed for interop with existing consumers)::

    {
      "documents": [{"name": "Program.cs", "text": "..." | null}],
      "buffers": [{
        "id": {"documentName": "Program.cs", "regionLabel": "alpha"},
        "content": "...",
        "position": 0,
        "absolutePosition": 168 | null
      }]
    }

On input a buffer ``id`` may also be the string form ``"Program.cs@alpha"``.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson

from regionkit.workspace_types import Buffer, BufferId, Document, Workspace


def load_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON; ``pretty`` indents by two spaces."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dump_json_bytes(obj, pretty=pretty))


def dump_json_bytes(obj: Any, *, pretty: bool = True) -> bytes:
    opts = orjson.OPT_INDENT_2 if pretty else 0
    return orjson.dumps(obj, option=opts)


# ---------------------------------------------------------------------------
# Workspace <-> dict
# ---------------------------------------------------------------------------

def buffer_id_to_dict(buffer_id: BufferId) -> dict[str, str]:
    return {
        "documentName": buffer_id.document_name,
        "regionLabel": buffer_id.region_label,
    }


def buffer_to_dict(buffer: Buffer) -> dict[str, Any]:
    return {
        "id": buffer_id_to_dict(buffer.id),
        "content": buffer.content,
        "position": buffer.position,
        "absolutePosition": buffer.absolute_position,
    }


def document_to_dict(document: Document) -> dict[str, Any]:
    return {"name": document.name, "text": document.text}


def workspace_to_dict(workspace: Workspace) -> dict[str, Any]:
    return {
        "documents": [document_to_dict(d) for d in workspace.documents],
        "buffers": [buffer_to_dict(b) for b in workspace.buffers],
    }


def buffer_id_from_wire(raw: Any) -> BufferId:
    if isinstance(raw, str):
        return BufferId.parse(raw)
    if isinstance(raw, dict):
        return BufferId(
            document_name=str(raw.get("documentName", "")),
            region_label=str(raw.get("regionLabel", "")),
        )
    raise ValueError(f"Buffer id must be a string or an object, got {type(raw).__name__}")


def buffer_from_dict(data: dict[str, Any]) -> Buffer:
    # absolutePosition is derived by the inliner; incoming values are kept
    # only so a transformed workspace round-trips unchanged.
    return Buffer(
        id=buffer_id_from_wire(data.get("id", "")),
        content=data.get("content") or "",
        position=int(data.get("position", 0)),
        absolute_position=data.get("absolutePosition"),
    )


def document_from_dict(data: Any) -> Document:
    if not isinstance(data, dict) or not isinstance(data.get("name"), str):
        raise ValueError(f"Workspace document needs a string 'name': {data!r}")
    text = data.get("text")
    if text is not None and not isinstance(text, str):
        raise ValueError(f"Document {data['name']!r} text must be a string or null")
    return Document.create(data["name"], text)


def workspace_from_dict(data: dict[str, Any]) -> Workspace:
    documents = tuple(document_from_dict(d) for d in data.get("documents", []))
    buffers = tuple(buffer_from_dict(b) for b in data.get("buffers", []))
    return Workspace(documents=documents, buffers=buffers)


def load_workspace(path: Path) -> Workspace:
    data = load_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"Workspace root must be a JSON object: {path}")
    return workspace_from_dict(data)


def save_workspace(workspace: Workspace, path: Path) -> None:
    save_json(workspace_to_dict(workspace), path)
