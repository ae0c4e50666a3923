# =============================================================================
# core/catalog.py  —  Builds the Dispatch Registry
# =============================================================================
#
# The single place that decides WHICH tools exist and in WHICH order they
# are advertised.  Order is registration order and never changes for the
# life of the process.
# =============================================================================

from functools import partial
from typing import Optional

from core import api_tools, executions, sop, workflows
from core.api_tools import ApiToolConfig
from core.registry import Tool, ToolRegistry

# Tools whose implementation needs the API-tool configuration
_CONFIGURED = {
    api_tools.get_api_tool,
    api_tools.list_api_workflows,
    api_tools.list_tool_workflows,
}


def build_registry(client, config: Optional[ApiToolConfig] = None) -> ToolRegistry:
    """Register every tool against `client`.

    Raises DuplicateTool if two modules declare the same tool name.
    """
    config = config or ApiToolConfig()
    registry = ToolRegistry()

    for module in (workflows, api_tools, executions, sop):
        for definition, run in module.TOOLS:
            if run in _CONFIGURED:
                run = partial(run, config=config)
            registry.register(definition, Tool(definition=definition, run=run, client=client))

    return registry
