# =============================================================================
# core/api_tools.py  —  Aggregated "API tool" listings
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Answers "which workflows can an agent call as building blocks?".  A
#   workflow qualifies when ANY of these holds:
#
#     - it carries one of the configured API tags   (reason "Tag: <tag>")
#     - it belongs to the configured project        (reason "Project <label>")
#     - it sits in the configured tools folder      (reason "Tools Folder")
#     - optionally, its NAME looks tool-like         (heuristic reason)
#
#   Every criterion is a separate query (the folder and name criteria
#   filter an unfiltered listing locally), merged by
#   core/pagination.py so each workflow appears once with all its reasons.
#
# VERIFIED vs HEURISTIC:
#   Tag, project and folder reasons are facts reported by n8n.  The name
#   heuristic is a guess and its reason string says so, so consumers can
#   tell the two apart.
# =============================================================================

from collections import Counter
from dataclasses import dataclass
from functools import partial
from typing import Any, Optional

from core.config import (
    DEFAULT_API_PROJECT_ID,
    DEFAULT_API_PROJECT_LABEL,
    DEFAULT_API_TOOL_TAGS,
    DEFAULT_TOOLS_FOLDER_ID,
    Settings,
)
from core.envelope import plural, success
from core.errors import InvalidArguments
from core.models import ResultEnvelope, ToolDefinition, WorkflowRecord
from core.pagination import DEFAULT_MAX_PAGES, DEFAULT_PAGE_SIZE, Criterion, collect_matches

HEURISTIC_KEYWORDS = ("tool", "api", "utility")
HEURISTIC_REASON = "Name match: tool/api/utility (heuristic)"
TOOLS_FOLDER_REASON = "Tools Folder"

DEFAULT_API_TOOL_LIMIT = 100
QUERY_TYPES = ("list", "count", "search")


@dataclass(frozen=True)
class ApiToolConfig:
    """Which tags, project and folder identify API tools on this n8n instance."""

    tags: tuple[str, ...] = DEFAULT_API_TOOL_TAGS
    project_id: Optional[str] = DEFAULT_API_PROJECT_ID
    project_label: str = DEFAULT_API_PROJECT_LABEL
    tools_folder_id: Optional[str] = DEFAULT_TOOLS_FOLDER_ID
    max_pages: int = DEFAULT_MAX_PAGES
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def from_settings(cls, settings: Settings) -> "ApiToolConfig":
        return cls(
            tags=settings.api_tool_tags,
            project_id=settings.api_project_id,
            project_label=settings.api_project_label,
            tools_folder_id=settings.tools_folder_id,
            max_pages=settings.max_pages,
        )


def in_tools_folder(record: WorkflowRecord, folder_id: str) -> bool:
    return folder_id in record.folder_ids


def looks_like_tool(record: WorkflowRecord) -> bool:
    """Name-based guess that a workflow lives in the tools folder."""
    name = (record.name or "").lower()
    return any(keyword in name for keyword in HEURISTIC_KEYWORDS)


def api_tool_criteria(config: ApiToolConfig, include_name_matches: bool = False) -> list[Criterion]:
    criteria = [Criterion.tag(tag) for tag in config.tags]
    if config.project_id:
        criteria.append(Criterion.project(config.project_id, config.project_label))
    if config.tools_folder_id:
        # unfiltered listing, matched locally on the folder id
        in_folder = partial(in_tools_folder, folder_id=config.tools_folder_id)
        criteria.append(Criterion(reason=TOOLS_FOLDER_REASON, accepts=in_folder))
    if include_name_matches:
        criteria.append(Criterion(reason=HEURISTIC_REASON, accepts=looks_like_tool))
    return criteria


# =============================================================================
# get_api_tool
# =============================================================================
GET_API_TOOL = ToolDefinition(
    name="get_api_tool",
    description=(
        "Retrieve API-related workflows: those tagged as API tools and those in "
        "the API project or the tools folder. Results are merged across all "
        "criteria and each "
        "workflow carries a match_reason. Supports counting all API tools "
        "(query_type=count), listing the first N (query_type=list) and "
        "searching by name (query_type=search)."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "include_inactive": {
                "type": "boolean",
                "description": "Whether to include inactive workflows",
                "default": True,
            },
            "limit": {
                "type": "integer",
                "description": f"Maximum number of workflows to return (default {DEFAULT_API_TOOL_LIMIT})",
                "minimum": 1,
                "default": DEFAULT_API_TOOL_LIMIT,
            },
            "query_type": {
                "type": "string",
                "description": "list, count or search",
                "enum": list(QUERY_TYPES),
                "default": "list",
            },
            "search_term": {
                "type": "string",
                "description": "Case-insensitive name filter, required for query_type=search",
            },
            "include_name_matches": {
                "type": "boolean",
                "description": "Also include workflows whose name merely looks tool-like (low confidence)",
                "default": False,
            },
        },
        "required": [],
    },
)


async def get_api_tool(client, args: dict[str, Any], config: ApiToolConfig = ApiToolConfig()) -> ResultEnvelope:
    include_inactive = args.get("include_inactive", True)
    limit = args.get("limit", DEFAULT_API_TOOL_LIMIT)
    query_type = args.get("query_type", "list")
    search_term = (args.get("search_term") or "").strip()

    if query_type == "search" and not search_term:
        raise InvalidArguments("search_term is required when query_type is 'search'", field="search_term")

    criteria = api_tool_criteria(config, args.get("include_name_matches", False))
    base_filters = {} if include_inactive else {"active": True}

    matches = await collect_matches(
        client,
        criteria,
        base_filters=base_filters,
        limit=limit if query_type == "list" else None,
        page_size=config.page_size,
        max_pages=config.max_pages,
    )

    if query_type == "count":
        breakdown = Counter(reason for match in matches for reason in match.reasons)
        return success(
            {
                "query_type": "count",
                "total": len(matches),
                "active": sum(1 for match in matches if match.record.active),
                "by_reason": dict(breakdown),
            },
            f"Found {plural(len(matches), 'API-related workflow')}",
        )

    if query_type == "search":
        needle = search_term.lower()
        matches = [m for m in matches if needle in (m.record.name or "").lower()]
        total = len(matches)
        matches = matches[:limit]
        return success(
            {
                "query_type": "search",
                "search_term": search_term,
                "workflows": [m.to_summary() for m in matches],
                "count": len(matches),
                "total": total,
            },
            f'Found {plural(total, "API-related workflow")} matching "{search_term}"',
        )

    return success(
        {
            "query_type": "list",
            "workflows": [m.to_summary() for m in matches],
            "count": len(matches),
        },
        f"Found {plural(len(matches), 'API-related workflow')}",
    )


# =============================================================================
# list_api_workflows / list_tool_workflows
# =============================================================================
async def tagged_workflows(
    client,
    tag: str,
    active: Optional[bool] = None,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> list[WorkflowRecord]:
    """Every workflow carrying `tag`, across all pages."""
    base_filters = {} if active is None else {"active": active}
    matches = await collect_matches(
        client, [Criterion.tag(tag)], base_filters=base_filters, max_pages=max_pages
    )
    return [match.record for match in matches]


def _tag_listing(name: str, tag: str, noun: str) -> ToolDefinition:
    return ToolDefinition(
        name=name,
        description=f'Retrieve every workflow tagged with "{tag}" from n8n',
        input_schema={
            "type": "object",
            "properties": {
                "active": {
                    "type": "boolean",
                    "description": f"Optional filter to show only active or inactive {noun}s",
                },
            },
            "required": [],
        },
    )


LIST_API_WORKFLOWS = _tag_listing("list_api_workflows", "API", "API workflow")
LIST_TOOL_WORKFLOWS = _tag_listing("list_tool_workflows", "tool", "tool workflow")


async def list_api_workflows(client, args: dict[str, Any], config: ApiToolConfig = ApiToolConfig()) -> ResultEnvelope:
    records = await tagged_workflows(client, "API", args.get("active"), config.max_pages)
    return success(
        {"workflows": [r.to_summary() for r in records], "count": len(records)},
        f"Found {plural(len(records), 'API workflow')}",
    )


async def list_tool_workflows(client, args: dict[str, Any], config: ApiToolConfig = ApiToolConfig()) -> ResultEnvelope:
    records = await tagged_workflows(client, "tool", args.get("active"), config.max_pages)
    return success(
        {"workflows": [r.to_summary() for r in records], "count": len(records)},
        f"Found {plural(len(records), 'tool workflow')}",
    )


TOOLS = [
    (GET_API_TOOL, get_api_tool),
    (LIST_API_WORKFLOWS, list_api_workflows),
    (LIST_TOOL_WORKFLOWS, list_tool_workflows),
]
