# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes every tool of core/catalog.py as an MCP tool, plus the static
#   SOP guide and two live workflow listings as MCP resources.  Each tool is
#   a thin wrapper: it drops unset arguments, forwards the rest to
#   ToolRegistry.dispatch(), and returns the ResultEnvelope as a dict.
#
# HOW IT WORKS (the flow):
#   1. An MCP client (Claude Desktop, the ADK agent in agent/, ...) calls a
#      tool by name, e.g. "list_workflows"
#   2. FastMCP routes the call to the decorated function below
#   3. The wrapper dispatches through the registry: validation, n8n calls,
#      pagination and dedup all happen in core/
#   4. The caller receives {"ok": ..., "data": ..., "message": ...}
#      or {"ok": false, "error": {"kind": ..., "message": ...}}
#
# TOOL NAMING CONVENTIONS:
#   - list_* / get_*  → read-only, idempotent, safe to retry
#   - create_* / update_* / delete_* / activate_* / deactivate_* / run_*
#                     → mutations, attempted exactly once per call
#
# RUNNING THIS SERVER:
#   a) Standalone:        python -m tools.mcp_server
#   b) Installed script:  n8n-workflow-mcp
#   c) Spawned over stdio by the SOP assistant (agent/sop_agent.py)
# =============================================================================

import json
import logging
import sys
from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional

from fastmcp import FastMCP

# The tools layer depends on core/ and nothing else.
from core.api_tools import ApiToolConfig, tagged_workflows
from core.catalog import build_registry
from core.client import N8nClient
from core.config import Settings, load_settings
from core.envelope import failure
from core.errors import ConfigError, ToolError
from core.registry import ToolRegistry
from core.templates import SOP_GENERATION_GUIDE, TEMPLATE_VERSION, guide_sections

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR: the stdio MCP transport owns STDOUT, and anything else
# written there would corrupt the JSON-RPC stream.
#
# ANSI colours:
#   CYAN    incoming tool calls with their arguments
#   YELLOW  intermediate status
#   GREEN   the response envelope
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: dict) -> dict:
    """Log the tool response as compact JSON in GREEN, then return it."""
    logging.info(
        f"{_GREEN}  ← {tool_name} response: "
        f"{json.dumps(result, separators=(',', ':'), default=str)}{_RESET}"
    )
    return result


# =============================================================================
# Registry wiring
# =============================================================================
# Built on first use so that importing this module never needs N8N_API_URL.
# =============================================================================
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    settings = load_settings()
    if settings.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    return settings


@lru_cache(maxsize=1)
def get_client() -> N8nClient:
    return N8nClient.from_settings(get_settings())


@lru_cache(maxsize=1)
def get_registry() -> ToolRegistry:
    settings = get_settings()
    registry = build_registry(get_client(), ApiToolConfig.from_settings(settings))
    _log_status(f"Registered {len(registry)} tools against {settings.api_url}")
    return registry


async def _dispatch(tool_name: str, **params) -> dict:
    """Forward one call to the registry, dropping unset arguments."""
    args = {k: v for k, v in params.items() if v is not None}
    _log_request(tool_name, **args)
    try:
        registry = get_registry()
    except ConfigError as exc:
        envelope = failure("Internal", f"Failed to {tool_name}: server is not configured: {exc}")
        return _log_response(tool_name, envelope.to_dict())

    envelope = await registry.dispatch(tool_name, args)
    if envelope.ok:
        _log_status(envelope.message or "ok")
    else:
        _log_status(f"{envelope.error.kind}: {envelope.error.message}")
    return _log_response(tool_name, envelope.to_dict())


mcp = FastMCP("n8n-workflow-manager")


# =============================================================================
# WORKFLOW TOOLS
# =============================================================================
@mcp.tool()
async def list_workflows(
    active: Optional[bool] = None,
    tags: Optional[str] = None,
    name: Optional[str] = None,
    project_id: Optional[str] = None,
    exclude_pinned_data: Optional[bool] = None,
    limit: Optional[int] = None,
    cursor: Optional[str] = None,
) -> dict:
    """List n8n workflows, one page at a time.

    Args:
        active: Only active (true) or inactive (false) workflows.
        tags: Comma-separated tag names, e.g. "production,api".
        name: Filter by workflow name.
        project_id: Filter by project ID.
        exclude_pinned_data: Leave pinned data out of the response.
        limit: Page size, 1-250 (default 10).
        cursor: `next_cursor` from a previous call, to fetch the next page.

    Returns:
        data.workflows (id, name, active, updated_at, tags, project_id),
        data.count, data.next_cursor and data.has_more.
    """
    return await _dispatch(
        "list_workflows",
        active=active, tags=tags, name=name, project_id=project_id,
        exclude_pinned_data=exclude_pinned_data, limit=limit, cursor=cursor,
    )


@mcp.tool()
async def get_workflow(workflow_id: str) -> dict:
    """Get one workflow with its nodes, connections and settings."""
    return await _dispatch("get_workflow", workflow_id=workflow_id)


@mcp.tool()
async def create_workflow(
    name: str,
    nodes: list[dict],
    connections: dict,
    settings: Optional[dict] = None,
    tags: Optional[list[str]] = None,
) -> dict:
    """Create a new (inactive) workflow.

    Args:
        name: Workflow name.
        nodes: n8n node objects (id, name, type, typeVersion, position, parameters).
        connections: Mapping of source node name → outputs → target nodes.
        settings: Optional workflow settings.
        tags: Read-only on n8n; accepted and reported back as ignored.
    """
    return await _dispatch(
        "create_workflow",
        name=name, nodes=nodes, connections=connections, settings=settings, tags=tags,
    )


@mcp.tool()
async def update_workflow(
    workflow_id: str,
    name: Optional[str] = None,
    nodes: Optional[list[dict]] = None,
    connections: Optional[dict] = None,
    active: Optional[bool] = None,
    tags: Optional[list[str]] = None,
) -> dict:
    """Update a workflow's name, nodes or connections.

    `active` and `tags` cannot be changed here: they are ignored and the
    response message says so.  Use activate_workflow / deactivate_workflow
    to change the activation state.
    """
    return await _dispatch(
        "update_workflow",
        workflow_id=workflow_id, name=name, nodes=nodes,
        connections=connections, active=active, tags=tags,
    )


@mcp.tool()
async def delete_workflow(workflow_id: str) -> dict:
    """Delete a workflow permanently."""
    return await _dispatch("delete_workflow", workflow_id=workflow_id)


@mcp.tool()
async def activate_workflow(workflow_id: str) -> dict:
    """Activate a workflow so its triggers start firing."""
    return await _dispatch("activate_workflow", workflow_id=workflow_id)


@mcp.tool()
async def deactivate_workflow(workflow_id: str) -> dict:
    """Deactivate a workflow so its triggers stop firing."""
    return await _dispatch("deactivate_workflow", workflow_id=workflow_id)


# =============================================================================
# API TOOL DISCOVERY
# =============================================================================
# get_api_tool is the expensive one: it pages through n8n once per
# criterion (each API tag, the API project, the tools folder) and merges
# the results.  Each workflow comes back once, with every reason it
# matched in `match_reason`.
# =============================================================================
@mcp.tool()
async def get_api_tool(
    include_inactive: Optional[bool] = None,
    limit: Optional[int] = None,
    query_type: Optional[str] = None,
    search_term: Optional[str] = None,
    include_name_matches: Optional[bool] = None,
) -> dict:
    """Find the workflows usable as API building blocks.

    WHEN TO CALL THIS: before designing a workflow from an SOP, to learn
    which data-fetching and routing workflows already exist.

    Args:
        include_inactive: Include inactive workflows (default true).
        limit: Maximum number of workflows returned (default 100).
        query_type: "list" (default), "count" (totals + per-reason
            breakdown) or "search" (name contains search_term).
        search_term: Required when query_type is "search".
        include_name_matches: Also include workflows whose NAME merely
            looks tool-like.  Their match_reason is marked "(heuristic)".
    """
    return await _dispatch(
        "get_api_tool",
        include_inactive=include_inactive, limit=limit, query_type=query_type,
        search_term=search_term, include_name_matches=include_name_matches,
    )


@mcp.tool()
async def list_api_workflows(active: Optional[bool] = None) -> dict:
    """List every workflow tagged "API"."""
    return await _dispatch("list_api_workflows", active=active)


@mcp.tool()
async def list_tool_workflows(active: Optional[bool] = None) -> dict:
    """List every workflow tagged "tool"."""
    return await _dispatch("list_tool_workflows", active=active)


# =============================================================================
# EXECUTION TOOLS
# =============================================================================
@mcp.tool()
async def list_executions(
    workflow_id: Optional[str] = None,
    status: Optional[str] = None,
    include_data: Optional[bool] = None,
    limit: Optional[int] = None,
    cursor: Optional[str] = None,
) -> dict:
    """List executions, one page at a time.

    Args:
        workflow_id: Only executions of this workflow.
        status: "error", "success" or "waiting".
        include_data: Include full run data (large).
        limit: Page size, 1-250 (default 10).
        cursor: `next_cursor` from a previous call.
    """
    return await _dispatch(
        "list_executions",
        workflow_id=workflow_id, status=status, include_data=include_data,
        limit=limit, cursor=cursor,
    )


@mcp.tool()
async def get_execution(execution_id: str, include_data: Optional[bool] = None) -> dict:
    """Get one execution, optionally with its full run data."""
    return await _dispatch("get_execution", execution_id=execution_id, include_data=include_data)


@mcp.tool()
async def delete_execution(execution_id: str) -> dict:
    """Delete one execution record."""
    return await _dispatch("delete_execution", execution_id=execution_id)


@mcp.tool()
async def run_webhook(
    path: str,
    data: Optional[dict] = None,
    headers: Optional[dict[str, str]] = None,
) -> dict:
    """Trigger a workflow through its Webhook node.

    Args:
        path: The webhook path configured on the workflow's Webhook node.
        data: JSON body to send.
        headers: Extra HTTP headers.
    """
    return await _dispatch("run_webhook", path=path, data=data, headers=headers)


# =============================================================================
# SOP CONVERSION TOOLS
# =============================================================================
@mcp.tool()
async def generate_sop_plan_prompt(sop_text: str, sop_title: Optional[str] = None) -> dict:
    """Wrap an SOP in the analysis framework and return the resulting prompt.

    No n8n calls are made.  Execute the returned `sop_plan_prompt` with an
    AI that has these tools to obtain an implementation plan.
    """
    return await _dispatch("generate_sop_plan_prompt", sop_text=sop_text, sop_title=sop_title)


@mcp.tool()
async def execute_sop_plan(
    implementation_plan: str,
    workflow_name: str,
    workflow_description: Optional[str] = None,
    dry_run: Optional[bool] = None,
    auto_activate: Optional[bool] = None,
) -> dict:
    """Turn an implementation plan into a workflow.

    With dry_run=true the workflow creation prompt is returned instead;
    otherwise a skeleton workflow seeded from the plan is created.
    """
    return await _dispatch(
        "execute_sop_plan",
        implementation_plan=implementation_plan, workflow_name=workflow_name,
        workflow_description=workflow_description, dry_run=dry_run,
        auto_activate=auto_activate,
    )


# =============================================================================
# RESOURCES
# =============================================================================
# Resources render failures as a JSON error document instead of raising, so
# a reader always gets a parseable payload.
# =============================================================================
def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def sop_guide_document() -> str:
    return json.dumps(
        {
            "resource_type": "sop-generation-guide",
            "title": "SOP to n8n Workflow Generation Guide",
            "version": TEMPLATE_VERSION,
            "description": (
                "Guide for converting Standard Operating Procedures into "
                "executable n8n workflows"
            ),
            "content": SOP_GENERATION_GUIDE,
            "metadata": {
                "content_type": "markdown",
                "sections": guide_sections(SOP_GENERATION_GUIDE),
                "target_audience": "n8n workflow developers and SOP automation specialists",
            },
        },
        indent=2,
    )


@mcp.resource(
    "n8n://sop-generation-guide",
    name="SOP Generation Guide",
    mime_type="application/json",
)
def sop_generation_guide() -> str:
    """Guide for converting SOPs into executable n8n workflows."""
    return sop_guide_document()


async def _tagged_document(tag: str, label: str) -> str:
    try:
        settings = get_settings()
        records = await tagged_workflows(get_client(), tag, max_pages=settings.max_pages)
    except (ToolError, ConfigError) as exc:
        return json.dumps(
            {"error": f"Failed to fetch {label}", "message": str(exc), "timestamp": _now()},
            indent=2,
        )
    return json.dumps(
        {
            "summary": f"Found {len(records)} {label}(s)",
            "workflows": [record.to_summary() for record in records],
            "timestamp": _now(),
        },
        indent=2,
    )


@mcp.resource("n8n://api-workflows", name="API Workflows", mime_type="application/json")
async def api_workflows_resource() -> str:
    """Every workflow tagged "API"."""
    return await _tagged_document("API", "API workflow")


@mcp.resource("n8n://tool-workflows", name="Tool Workflows", mime_type="application/json")
async def tool_workflows_resource() -> str:
    """Every workflow tagged "tool"."""
    return await _tagged_document("tool", "tool workflow")


def main() -> None:
    mcp.run()


# =============================================================================
# Server entry point
# =============================================================================
if __name__ == "__main__":
    main()
