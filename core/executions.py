# =============================================================================
# core/executions.py  —  Execution management and webhook runs
# =============================================================================
#
# list_executions follows the same single-page contract as list_workflows:
# one request per call, `next_cursor` handed back for the caller to follow.
# run_webhook is a mutation from our point of view (it triggers a workflow)
# and is attempted exactly once.
# =============================================================================

import logging
from typing import Any

from core.envelope import plural, success
from core.models import ResultEnvelope, ToolDefinition

logger = logging.getLogger(__name__)

DEFAULT_EXECUTION_LIMIT = 10
EXECUTION_STATUSES = ("error", "success", "waiting")

_EXECUTION_ID = {"type": "string", "description": "ID of the execution"}


LIST_EXECUTIONS = ToolDefinition(
    name="list_executions",
    description="List workflow executions, optionally filtered by workflow and status",
    input_schema={
        "type": "object",
        "properties": {
            "workflow_id": {"type": "string", "description": "Only executions of this workflow"},
            "status": {
                "type": "string",
                "description": "Only executions with this status",
                "enum": list(EXECUTION_STATUSES),
            },
            "include_data": {
                "type": "boolean",
                "description": "Include the full execution data (large)",
            },
            "limit": {
                "type": "integer",
                "description": f"Page size (1-250, default {DEFAULT_EXECUTION_LIMIT})",
                "minimum": 1,
                "maximum": 250,
            },
            "cursor": {"type": "string", "description": "Pagination cursor from a previous response"},
        },
        "required": [],
    },
)


async def list_executions(client, args: dict[str, Any]) -> ResultEnvelope:
    page = await client.get_executions(
        workflow_id=args.get("workflow_id"),
        status=args.get("status"),
        include_data=args.get("include_data"),
        limit=args.get("limit", DEFAULT_EXECUTION_LIMIT),
        cursor=args.get("cursor"),
    )
    executions = [record.to_summary() for record in page.data]
    has_more = page.next_cursor is not None

    message = f"Found {plural(len(executions), 'execution')}"
    if has_more:
        message += " (more available)"
    return success(
        {
            "executions": executions,
            "count": len(executions),
            "next_cursor": page.next_cursor,
            "has_more": has_more,
        },
        message,
    )


GET_EXECUTION = ToolDefinition(
    name="get_execution",
    description="Retrieve one execution by ID, optionally with its run data",
    input_schema={
        "type": "object",
        "properties": {
            "execution_id": _EXECUTION_ID,
            "include_data": {"type": "boolean", "description": "Include the full execution data"},
        },
        "required": ["execution_id"],
    },
)


async def get_execution(client, args: dict[str, Any]) -> ResultEnvelope:
    include_data = bool(args.get("include_data", False))
    record = await client.get_execution(args["execution_id"], include_data=include_data)
    data = record.to_summary()
    if include_data:
        data["data"] = record.data
    return success(data, f"Retrieved execution {record.id} (status: {record.status or 'unknown'})")


DELETE_EXECUTION = ToolDefinition(
    name="delete_execution",
    description="Delete one execution record",
    input_schema={
        "type": "object",
        "properties": {"execution_id": _EXECUTION_ID},
        "required": ["execution_id"],
    },
)


async def delete_execution(client, args: dict[str, Any]) -> ResultEnvelope:
    execution_id = args["execution_id"]
    await client.delete_execution(execution_id)
    logger.info("Deleted execution %s", execution_id)
    return success(
        {"id": execution_id, "deleted": True},
        f"Execution {execution_id} deleted successfully",
    )


RUN_WEBHOOK = ToolDefinition(
    name="run_webhook",
    description=(
        "Execute a workflow through its webhook trigger. `path` is the webhook "
        "path configured on the Webhook node (e.g. 'customer-support')."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "path": {"type": "string", "description": "Webhook path of the workflow"},
            "data": {"type": "object", "description": "JSON body sent to the webhook"},
            "headers": {"type": "object", "description": "Extra HTTP headers"},
        },
        "required": ["path"],
    },
)


async def run_webhook(client, args: dict[str, Any]) -> ResultEnvelope:
    path = args["path"].strip("/")
    response = await client.run_webhook(path, args.get("data"), args.get("headers"))
    return success(
        {"path": path, "response": response},
        f"Webhook '{path}' executed successfully",
    )


TOOLS = [
    (LIST_EXECUTIONS, list_executions),
    (GET_EXECUTION, get_execution),
    (DELETE_EXECUTION, delete_execution),
    (RUN_WEBHOOK, run_webhook),
]
