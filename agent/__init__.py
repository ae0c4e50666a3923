# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK agent that drives the n8n tool server.
#
# ARCHITECTURAL ROLE:
#   The agent/ layer is the interactive client of tools/mcp_server.py.  It:
#     1. Receives the user's request ("automate our refund SOP")
#     2. Discovers existing API tool workflows
#     3. Plans, confirms and builds workflows through MCP tool calls
#
# WHAT THE AGENT IS NOT:
#   - It is NOT the tool logic (that's in core/)
#   - It is NOT the MCP boundary (that's in tools/)
#
# The tool server works without this package: any MCP client (Claude
# Desktop, an IDE, another agent) can connect to it directly.
# =============================================================================
