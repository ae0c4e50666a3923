# =============================================================================
# core/workflows.py  —  Workflow CRUD tools
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Defines list / get / create / update / delete / activate / deactivate.
#   Each tool is a ToolDefinition (name, description, input schema) plus a
#   plain async function `(client, args) -> ResultEnvelope`.
#
#   The functions may raise; core/registry.py's `Tool` turns exceptions into
#   failed envelopes.  Mutating tools call n8n exactly once per mutation.
#
# PAYLOADS:
#   Never the raw n8n record.  Listings use WorkflowRecord.to_summary().
# =============================================================================

import logging
from typing import Any

from core.envelope import plural, success
from core.models import ResultEnvelope, ToolDefinition

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 10

_WORKFLOW_ID = {
    "type": "string",
    "description": "ID of the workflow",
}

# `active` and `tags` are read-only on the n8n public API.  They are accepted
# so callers get a clear message instead of a rejection, but never sent.
READ_ONLY_FIELDS = {
    "active": "active (read-only, use activate/deactivate workflow tools)",
    "tags": "tags (read-only property)",
}


# =============================================================================
# list_workflows
# =============================================================================
LIST_WORKFLOWS = ToolDefinition(
    name="list_workflows",
    description=(
        "Retrieve a list of workflows from n8n with optional filtering and "
        "pagination support. Pass `next_cursor` back as `cursor` to fetch the "
        "following page."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "active": {
                "type": "boolean",
                "description": "Filter by active status",
            },
            "tags": {
                "type": "string",
                "description": 'Filter by tags (comma-separated, e.g. "production,api")',
            },
            "name": {
                "type": "string",
                "description": "Filter by workflow name",
            },
            "project_id": {
                "type": "string",
                "description": "Filter by project ID",
            },
            "exclude_pinned_data": {
                "type": "boolean",
                "description": "Exclude pinned data to reduce response size",
            },
            "limit": {
                "type": "integer",
                "description": f"Page size (1-250, default {DEFAULT_LIST_LIMIT})",
                "minimum": 1,
                "maximum": 250,
            },
            "cursor": {
                "type": "string",
                "description": "Pagination cursor from a previous response",
            },
        },
        "required": [],
    },
)


async def list_workflows(client, args: dict[str, Any]) -> ResultEnvelope:
    page = await client.get_workflows(
        active=args.get("active"),
        tags=args.get("tags"),
        name=args.get("name"),
        project_id=args.get("project_id"),
        exclude_pinned_data=args.get("exclude_pinned_data"),
        limit=args.get("limit", DEFAULT_LIST_LIMIT),
        cursor=args.get("cursor"),
    )
    workflows = [record.to_summary() for record in page.data]
    has_more = page.next_cursor is not None

    message = f"Found {plural(len(workflows), 'workflow')}"
    if has_more:
        message += " (more available)"

    return success(
        {
            "workflows": workflows,
            "count": len(workflows),
            "next_cursor": page.next_cursor,
            "has_more": has_more,
        },
        message,
    )


# =============================================================================
# get_workflow
# =============================================================================
GET_WORKFLOW = ToolDefinition(
    name="get_workflow",
    description="Retrieve a specific workflow by ID, including its nodes and connections",
    input_schema={
        "type": "object",
        "properties": {"workflow_id": _WORKFLOW_ID},
        "required": ["workflow_id"],
    },
)


async def get_workflow(client, args: dict[str, Any]) -> ResultEnvelope:
    record = await client.get_workflow(args["workflow_id"])
    data = record.to_summary()
    data.update(
        created_at=record.created_at,
        nodes=record.nodes,
        connections=record.connections,
        settings=record.settings,
    )
    return success(data, f'Retrieved workflow "{record.name}" (ID: {record.id})')


# =============================================================================
# create_workflow
# =============================================================================
CREATE_WORKFLOW = ToolDefinition(
    name="create_workflow",
    description="Create a new workflow in n8n from a name, nodes and connections",
    input_schema={
        "type": "object",
        "properties": {
            "name": {"type": "string", "description": "Name of the workflow"},
            "nodes": {
                "type": "array",
                "description": "Node objects that define the workflow",
                "items": {"type": "object"},
            },
            "connections": {
                "type": "object",
                "description": "Connection mappings between nodes",
            },
            "settings": {
                "type": "object",
                "description": "Workflow settings (execution order, timezone, ...)",
            },
            "tags": {
                "type": "array",
                "description": "Read-only on n8n: accepted and reported as ignored",
                "items": {"type": "string"},
            },
        },
        "required": ["name", "nodes", "connections"],
    },
)


async def create_workflow(client, args: dict[str, Any]) -> ResultEnvelope:
    spec: dict[str, Any] = {
        "name": args["name"],
        "nodes": args["nodes"],
        "connections": args["connections"],
        "settings": args.get("settings") or {},
    }
    record = await client.create_workflow(spec)
    logger.info("Created workflow %s (%s)", record.id, record.name)

    ignored = ["tags"] if args.get("tags") is not None else []
    message = f'Workflow "{record.name}" created successfully (ID: {record.id})'
    if ignored:
        message += f". Note: Ignored {READ_ONLY_FIELDS['tags']}."
    return success(
        {"id": record.id, "name": record.name, "active": record.active, "ignored": ignored},
        message,
    )


# =============================================================================
# update_workflow
# =============================================================================

UPDATE_WORKFLOW = ToolDefinition(
    name="update_workflow",
    description="Update an existing workflow's name, nodes or connections",
    input_schema={
        "type": "object",
        "properties": {
            "workflow_id": {"type": "string", "description": "ID of the workflow to update"},
            "name": {"type": "string", "description": "New name for the workflow"},
            "nodes": {
                "type": "array",
                "description": "Updated array of node objects",
                "items": {"type": "object"},
            },
            "connections": {
                "type": "object",
                "description": "Updated connection mappings between nodes",
            },
            "active": {
                "type": "boolean",
                "description": "Read-only here: use activate/deactivate workflow tools",
            },
            "tags": {
                "type": "array",
                "description": "Read-only here: tags cannot be updated via this tool",
                "items": {"type": "string"},
            },
        },
        "required": ["workflow_id"],
    },
)


async def update_workflow(client, args: dict[str, Any]) -> ResultEnvelope:
    workflow_id = args["workflow_id"]
    name = args.get("name")
    nodes = args.get("nodes")
    connections = args.get("connections")

    current = await client.get_workflow(workflow_id)

    spec: dict[str, Any] = {
        "name": name if name is not None else current.name,
        "nodes": nodes if nodes is not None else current.nodes,
        "connections": connections if connections is not None else current.connections,
        "settings": current.settings,
    }
    if current.static_data is not None:
        spec["staticData"] = current.static_data

    updated = await client.update_workflow(workflow_id, spec)

    changes = []
    if name is not None and name != current.name:
        changes.append(f'name: "{current.name}" → "{name}"')
    if nodes is not None:
        changes.append("nodes updated")
    if connections is not None:
        changes.append("connections updated")

    ignored = [field for field in READ_ONLY_FIELDS if args.get(field) is not None]

    message = "Workflow updated successfully. "
    message += f"Changes: {', '.join(changes)}" if changes else "No changes were made"
    if ignored:
        message += f". Note: Ignored {', '.join(READ_ONLY_FIELDS[f] for f in ignored)}."

    return success(
        {
            "id": updated.id,
            "name": updated.name,
            "active": updated.active,
            "ignored": ignored,
        },
        message,
    )


# =============================================================================
# delete / activate / deactivate
# =============================================================================
DELETE_WORKFLOW = ToolDefinition(
    name="delete_workflow",
    description="Delete a workflow from n8n",
    input_schema={
        "type": "object",
        "properties": {"workflow_id": _WORKFLOW_ID},
        "required": ["workflow_id"],
    },
)


async def delete_workflow(client, args: dict[str, Any]) -> ResultEnvelope:
    workflow_id = args["workflow_id"]
    await client.delete_workflow(workflow_id)
    logger.info("Deleted workflow %s", workflow_id)
    return success(
        {"id": workflow_id, "deleted": True},
        f"Workflow {workflow_id} deleted successfully",
    )


ACTIVATE_WORKFLOW = ToolDefinition(
    name="activate_workflow",
    description="Activate a workflow so its triggers start firing",
    input_schema={
        "type": "object",
        "properties": {"workflow_id": _WORKFLOW_ID},
        "required": ["workflow_id"],
    },
)


async def activate_workflow(client, args: dict[str, Any]) -> ResultEnvelope:
    record = await client.activate_workflow(args["workflow_id"])
    return success(
        {"id": record.id, "name": record.name, "active": record.active},
        f'Workflow "{record.name}" (ID: {record.id}) activated successfully',
    )


DEACTIVATE_WORKFLOW = ToolDefinition(
    name="deactivate_workflow",
    description="Deactivate a workflow so its triggers stop firing",
    input_schema={
        "type": "object",
        "properties": {"workflow_id": _WORKFLOW_ID},
        "required": ["workflow_id"],
    },
)


async def deactivate_workflow(client, args: dict[str, Any]) -> ResultEnvelope:
    record = await client.deactivate_workflow(args["workflow_id"])
    return success(
        {"id": record.id, "name": record.name, "active": record.active},
        f'Workflow "{record.name}" (ID: {record.id}) deactivated successfully',
    )


TOOLS = [
    (LIST_WORKFLOWS, list_workflows),
    (GET_WORKFLOW, get_workflow),
    (CREATE_WORKFLOW, create_workflow),
    (UPDATE_WORKFLOW, update_workflow),
    (DELETE_WORKFLOW, delete_workflow),
    (ACTIVATE_WORKFLOW, activate_workflow),
    (DEACTIVATE_WORKFLOW, deactivate_workflow),
]
