# =============================================================================
# core/errors.py  —  Error taxonomy
# =============================================================================
#
# Every failure a tool can report is one of these classes.  The class-level
# `kind` is what ends up in `ResultEnvelope.error.kind`.
#
#   InvalidArguments     local, the request never reaches n8n
#   UnknownTool          dispatch-time usage error
#   RemoteUnavailable    network / transport / 5xx, safe for the caller to retry
#   RemoteRejected       n8n answered with a 4xx, never retried
#   PaginationExhausted  a paged listing did not terminate within the cap
#   Internal             anything unexpected, caught at the handler boundary
# =============================================================================

from typing import Optional


class ToolError(Exception):
    """Base exception for all tool failures."""

    kind = "Internal"


class InvalidArguments(ToolError):
    """Arguments do not match the tool's input schema."""

    kind = "InvalidArguments"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class UnknownTool(ToolError):
    """No tool is registered under the requested name."""

    kind = "UnknownTool"


class DuplicateTool(ToolError):
    """A second tool was registered under an existing name."""


class RemoteUnavailable(ToolError):
    """The n8n instance could not be reached or failed server-side."""

    kind = "RemoteUnavailable"


class RemoteRejected(ToolError):
    """The n8n instance rejected the request."""

    kind = "RemoteRejected"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFound(RemoteRejected):
    """The requested workflow or execution does not exist."""


class PaginationExhausted(ToolError):
    """The page cap was hit before the remote stopped returning cursors."""

    kind = "PaginationExhausted"


class ConfigError(ValueError):
    """Missing or malformed environment configuration."""
