# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP server.
#
# ARCHITECTURAL ROLE:
#   tools/ is the "translation layer" between MCP clients and core/.  The
#   server:
#     1. Declares one FastMCP tool per registered core tool
#     2. Forwards each call to ToolRegistry.dispatch()
#     3. Serializes the ResultEnvelope to a plain dict
#     4. Logs every request and response to STDERR
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT validate arguments or talk to n8n (that's core/)
#   - They do NOT know about Google ADK
#
# TOOL CONTRACT QUALITY:
#   The docstring of every wrapper is what an LLM reads to decide WHEN to
#   call the tool.  Keep them short and precise.
# =============================================================================
