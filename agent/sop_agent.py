# =============================================================================
# agent/sop_agent.py  —  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Creates the Google ADK agent that drives the n8n tool server.  The agent
#   receives user requests ("turn this onboarding SOP into a workflow"),
#   reasons about them and calls MCP tools.
#
# HOW IT WORKS (simplified):
#
#   ┌───────────────────────────────────────────────────────────┐
#   │                    Google ADK Agent                        │
#   │                                                           │
#   │  System prompt ──▶ LLM (via LiteLlm) ──▶ MCPToolset      │
#   └───────────────────────────────────────────────────────────┘
#                                                 │ stdio
#                                                 ▼
#                                   ┌───────────────────────────┐
#                                   │  FastMCP Server           │
#                                   │  (tools/mcp_server.py)    │
#                                   └───────────────────────────┘
#                                                 │
#                                                 ▼
#                                   ┌───────────────────────────┐
#                                   │  core/ → n8n public API   │
#                                   └───────────────────────────┘
#
# MODEL:
#   Any LiteLlm model string works.  It comes from SOP_AGENT_MODEL and
#   defaults to "openrouter/openai/gpt-4o" (LiteLlm reads
#   OPENROUTER_API_KEY from the environment).
#
# MCP CONNECTION:
#   ADK starts the tool server as a subprocess with the SAME interpreter
#   that runs this process, from the project root, so `core` and `tools`
#   import without installation.  The subprocess inherits the environment,
#   including N8N_API_URL / N8N_API_KEY.
# =============================================================================

import os
import sys
from typing import Optional

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_sop_assistant_prompt
from core.config import DEFAULT_AGENT_MODEL

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def create_mcp_toolset() -> MCPToolset:
    """MCP connection to tools/mcp_server.py over stdio."""
    return MCPToolset(
        connection_params=StdioServerParameters(
            command=sys.executable,
            args=["-m", "tools.mcp_server"],
            cwd=PROJECT_ROOT,
            env=dict(os.environ),
        ),
    )


def create_agent(model: Optional[str] = None) -> Agent:
    """Create the n8n SOP assistant agent.

    Args:
        model: LiteLlm model string.  Defaults to SOP_AGENT_MODEL, then to
            DEFAULT_AGENT_MODEL.

    Returns:
        A configured Google ADK Agent instance.
    """
    model = model or os.getenv("SOP_AGENT_MODEL") or DEFAULT_AGENT_MODEL

    return Agent(
        name="n8n_sop_assistant",
        model=LiteLlm(model=model),
        instruction=get_sop_assistant_prompt(),
        tools=[create_mcp_toolset()],
    )
