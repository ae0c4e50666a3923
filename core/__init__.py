# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL tool logic of the n8n workflow manager.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports Google ADK, FastMCP, or any orchestration
#   framework.  The only outward dependency is httpx, confined to
#   core/client.py.  Every tool function takes a client object and an
#   argument dict, so tests drive it with an in-memory stand-in.
#
# LAYOUT:
#   models.py      records, tool definitions, the result envelope
#   errors.py      error taxonomy (the `kind` of a failed envelope)
#   validation.py  argument validation against a tool's input schema
#   registry.py    Tool handler + Dispatch Registry
#   pagination.py  multi-criterion paging with dedup
#   client.py      n8n public API client
#   workflows.py / api_tools.py / executions.py / sop.py   the tools
#   catalog.py     registers every tool, in advertised order
# =============================================================================
