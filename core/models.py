# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the *shape* of every piece of information that
# flows between the MCP boundary, the tool handlers and the n8n API client.
#
# OWNERSHIP:
#   - ToolDefinition belongs to this process.
#   - WorkflowRecord / ExecutionRecord belong to the remote n8n instance.
#     We only ever hold transient, read-only copies fetched per call.
#   - ResultEnvelope is created once per invocation and never mutated.
#
# "No Phantom Fields":
#   If a field exists in a projection, the agent *will* reason about it.
#   Projections (`to_summary`) only carry what a caller needs.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Optional


# -----------------------------------------------------------------------------
# ToolDefinition: what a tool is called and which arguments it accepts
# -----------------------------------------------------------------------------
# `input_schema` is a JSON-Schema-shaped dict:
#   {"type": "object", "properties": {...}, "required": [...]}
# Only the subset understood by core/validation.py is interpreted.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolDefinition:
    """Name, human description and input schema of one tool."""

    name: str
    description: str
    input_schema: dict[str, Any] = field(default_factory=dict)


# -----------------------------------------------------------------------------
# WorkflowRecord: a workflow as returned by the n8n public API
# -----------------------------------------------------------------------------
@dataclass
class WorkflowRecord:
    """A read-only copy of one n8n workflow."""

    id: str
    name: str
    active: bool = False
    updated_at: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    project_id: Optional[str] = None
    created_at: Optional[str] = None
    folder_ids: list[str] = field(default_factory=list)

    # Graph definition.  Present on single-workflow reads, often trimmed
    # on list endpoints.
    nodes: list[dict[str, Any]] = field(default_factory=list)
    connections: dict[str, Any] = field(default_factory=dict)
    settings: dict[str, Any] = field(default_factory=dict)
    static_data: Optional[dict[str, Any]] = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "WorkflowRecord":
        """Build a record from an n8n API payload.

        n8n returns tags as ``{"id": ..., "name": ...}`` objects; they are
        flattened to their names.  The project id may live at the top level
        or inside ``shared[].projectId`` depending on the n8n version.
        Folder ids are gathered from every place n8n has kept them:
        ``folderId``, ``settings.folderId``, ``meta.folderId`` and tag objects.
        """
        tags = []
        for tag in payload.get("tags") or []:
            if isinstance(tag, dict):
                if tag.get("name"):
                    tags.append(tag["name"])
            elif tag:
                tags.append(str(tag))

        project_id = payload.get("projectId")
        if project_id is None:
            for share in payload.get("shared") or []:
                if isinstance(share, dict) and share.get("projectId"):
                    project_id = share["projectId"]
                    break

        folder_ids = []
        for holder in (payload, payload.get("settings"), payload.get("meta"), *(payload.get("tags") or [])):
            if isinstance(holder, dict) and holder.get("folderId"):
                folder_id = str(holder["folderId"])
                if folder_id not in folder_ids:
                    folder_ids.append(folder_id)

        return cls(
            id=str(payload["id"]),
            name=payload.get("name", ""),
            active=bool(payload.get("active", False)),
            updated_at=payload.get("updatedAt"),
            tags=tags,
            project_id=project_id,
            created_at=payload.get("createdAt"),
            folder_ids=folder_ids,
            nodes=list(payload.get("nodes") or []),
            connections=dict(payload.get("connections") or {}),
            settings=dict(payload.get("settings") or {}),
            static_data=payload.get("staticData"),
        )

    def to_summary(self) -> dict[str, Any]:
        """The projection every listing tool returns."""
        return {
            "id": self.id,
            "name": self.name,
            "active": self.active,
            "updated_at": self.updated_at,
            "tags": list(self.tags),
            "project_id": self.project_id,
        }


@dataclass
class WorkflowPage:
    """One page of ``GET /workflows``."""

    data: list[WorkflowRecord] = field(default_factory=list)
    next_cursor: Optional[str] = None


# -----------------------------------------------------------------------------
# ExecutionRecord: one run of a workflow
# -----------------------------------------------------------------------------
@dataclass
class ExecutionRecord:
    """A read-only copy of one n8n execution."""

    id: str
    workflow_id: Optional[str] = None
    status: Optional[str] = None
    mode: Optional[str] = None
    finished: bool = False
    started_at: Optional[str] = None
    stopped_at: Optional[str] = None
    data: Optional[dict[str, Any]] = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "ExecutionRecord":
        workflow_id = payload.get("workflowId")
        return cls(
            id=str(payload["id"]),
            workflow_id=str(workflow_id) if workflow_id is not None else None,
            status=payload.get("status"),
            mode=payload.get("mode"),
            finished=bool(payload.get("finished", False)),
            started_at=payload.get("startedAt"),
            stopped_at=payload.get("stoppedAt"),
            data=payload.get("data"),
        )

    def to_summary(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "workflow_id": self.workflow_id,
            "status": self.status,
            "mode": self.mode,
            "finished": self.finished,
            "started_at": self.started_at,
            "stopped_at": self.stopped_at,
        }


@dataclass
class ExecutionPage:
    """One page of ``GET /executions``."""

    data: list[ExecutionRecord] = field(default_factory=list)
    next_cursor: Optional[str] = None


# -----------------------------------------------------------------------------
# ResultEnvelope: the uniform answer of every tool
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ErrorInfo:
    """Classified failure: `kind` is one of the names in core/errors.py."""

    kind: str
    message: str


@dataclass(frozen=True)
class ResultEnvelope:
    """`{ok, data, message}` on success, `{ok: False, error}` on failure."""

    ok: bool
    data: Any = None
    message: Optional[str] = None
    error: Optional[ErrorInfo] = None

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True, "data": self.data, "message": self.message}
        return {
            "ok": False,
            "error": {"kind": self.error.kind, "message": self.error.message},
        }
