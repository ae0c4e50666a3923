# =============================================================================
# core/sop.py  —  SOP conversion tools
# =============================================================================
#
# Two tools bracket the SOP → workflow journey of an external agent:
#
#   generate_sop_plan_prompt   SOP text ──▶ analysis prompt (no n8n calls)
#   execute_sop_plan           plan     ──▶ creation prompt   (dry_run)
#                                       ──▶ skeleton workflow (otherwise)
#
# The prompts are assembled from core/templates.py.  This process never
# interprets them; the agent that receives them does the reasoning.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from core.envelope import success
from core.models import ResultEnvelope, ToolDefinition
from core.templates import get_template

logger = logging.getLogger(__name__)

DEFAULT_SOP_TITLE = "SOP Analysis"
DEFAULT_DESCRIPTION = "Generated from SOP implementation plan"


def build_sop_plan_prompt(sop_text: str, sop_title: str = DEFAULT_SOP_TITLE) -> str:
    return (
        f"{get_template('sop-analysis')}\n"
        "---\n\n"
        "## SOP TO ANALYZE\n\n"
        f"**Title:** {sop_title}\n\n"
        "**SOP Content:**\n"
        f"{sop_text}"
    )


def build_workflow_creation_prompt(
    implementation_plan: str,
    workflow_name: str,
    workflow_description: Optional[str] = None,
) -> str:
    return (
        f"{get_template('workflow-creation')}\n"
        "---\n\n"
        "## IMPLEMENTATION PLAN TO EXECUTE\n\n"
        f"**Workflow Name:** {workflow_name}\n"
        f"**Description:** {workflow_description or DEFAULT_DESCRIPTION}\n\n"
        "**Implementation Plan:**\n"
        f"{implementation_plan}\n\n"
        "---\n\n"
        "## EXECUTION INSTRUCTIONS\n\n"
        "1. **Analyze the Implementation Plan** using the validation framework above\n"
        "2. **Validate Technical Feasibility** of every component in n8n\n"
        "3. **Structure the Workflow** with complete node definitions and connections\n"
        "4. **Create the Workflow** with the `create_workflow` tool:\n"
        "   - workflow name and description\n"
        "   - complete nodes array\n"
        "   - connections object mapping every node relationship\n"
        "   - inactive at first, for testing\n"
        "5. **Verify Creation** with `get_workflow` and summarize the result\n"
    )


def skeleton_workflow(
    implementation_plan: str,
    workflow_name: str,
    workflow_description: Optional[str] = None,
) -> dict[str, Any]:
    """Minimal two-node workflow (manual trigger → code) seeded from a plan."""
    excerpt = implementation_plan[:200].replace("\n", "\n// ")
    spec: dict[str, Any] = {
        "name": workflow_name,
        "nodes": [
            {
                "id": "1",
                "name": "Start",
                "type": "n8n-nodes-base.manualTrigger",
                "typeVersion": 1,
                "position": [240, 300],
                "parameters": {},
            },
            {
                "id": "2",
                "name": "Process SOP",
                "type": "n8n-nodes-base.code",
                "typeVersion": 2,
                "position": [460, 300],
                "parameters": {
                    "jsCode": (
                        "// Generated from SOP plan. Replace with the business logic of:\n"
                        f"// {excerpt}\n\n"
                        "return $input.all();"
                    ),
                },
            },
        ],
        "connections": {
            "Start": {
                "main": [[{"node": "Process SOP", "type": "main", "index": 0}]],
            },
        },
        "settings": {},
    }
    if workflow_description:
        spec["meta"] = {"description": workflow_description}
    return spec


# =============================================================================
# generate_sop_plan_prompt
# =============================================================================
GENERATE_SOP_PLAN_PROMPT = ToolDefinition(
    name="generate_sop_plan_prompt",
    description=(
        "Generate a comprehensive analysis prompt for converting an SOP into an "
        "n8n workflow. Embeds the SOP in the analysis framework; the returned "
        "prompt is meant to be executed by an AI that has these MCP tools."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "sop_text": {"type": "string", "description": "The SOP text to analyze"},
            "sop_title": {
                "type": "string",
                "description": f'Title for the SOP (default "{DEFAULT_SOP_TITLE}")',
            },
        },
        "required": ["sop_text"],
    },
)


async def generate_sop_plan_prompt(client, args: dict[str, Any]) -> ResultEnvelope:
    sop_title = (args.get("sop_title") or DEFAULT_SOP_TITLE).strip()
    prompt = build_sop_plan_prompt(args["sop_text"].strip(), sop_title)
    return success(
        {
            "sop_plan_prompt": prompt,
            "prompt_length": len(prompt),
            "sop_title": sop_title,
            "usage": "Execute 'sop_plan_prompt' with an AI that has the n8n MCP tools to produce the implementation plan",
        },
        f'Generated SOP analysis prompt for "{sop_title}" ({len(prompt)} characters)',
    )


# =============================================================================
# execute_sop_plan
# =============================================================================
EXECUTE_SOP_PLAN = ToolDefinition(
    name="execute_sop_plan",
    description=(
        "Execute an SOP implementation plan. With dry_run=true, returns the "
        "workflow creation prompt; otherwise creates a skeleton n8n workflow "
        "seeded from the plan (inactive unless auto_activate=true)."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "implementation_plan": {
                "type": "string",
                "description": "The complete SOP implementation plan",
            },
            "workflow_name": {"type": "string", "description": "Name for the workflow"},
            "workflow_description": {"type": "string", "description": "Optional description"},
            "dry_run": {
                "type": "boolean",
                "description": "Return the creation prompt instead of creating (default false)",
            },
            "auto_activate": {
                "type": "boolean",
                "description": "Activate the workflow right after creation (default false)",
            },
        },
        "required": ["implementation_plan", "workflow_name"],
    },
)


async def execute_sop_plan(client, args: dict[str, Any]) -> ResultEnvelope:
    plan = args["implementation_plan"]
    workflow_name = args["workflow_name"]
    description = args.get("workflow_description")

    if args.get("dry_run", False):
        prompt = build_workflow_creation_prompt(plan, workflow_name, description)
        return success(
            {
                "workflow_creation_prompt": prompt,
                "prompt_length": len(prompt),
                "workflow_name": workflow_name,
                "mode": "DRY_RUN",
                "usage": "Execute 'workflow_creation_prompt' with an AI that has the n8n MCP tools to build the workflow",
            },
            f'Generated workflow creation prompt for "{workflow_name}" (DRY RUN - {len(prompt)} characters)',
        )

    record = await client.create_workflow(skeleton_workflow(plan, workflow_name, description))
    logger.info("Created SOP skeleton workflow %s", record.id)

    active = record.active
    if args.get("auto_activate", False):
        active = (await client.activate_workflow(record.id)).active

    return success(
        {
            "workflow_id": record.id,
            "workflow_name": record.name,
            "active": active,
            "created_at": record.created_at or datetime.now(timezone.utc).isoformat(),
        },
        f'Created workflow "{record.name}" (ID: {record.id}) from SOP implementation plan',
    )


TOOLS = [
    (GENERATE_SOP_PLAN_PROMPT, generate_sop_plan_prompt),
    (EXECUTE_SOP_PLAN, execute_sop_plan),
]
