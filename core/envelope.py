# =============================================================================
# core/envelope.py  —  Result Envelope construction
# =============================================================================
#
# Free functions shared by every tool handler.  A handler never builds a
# ResultEnvelope by hand; it calls `success()` or lets an exception reach
# `from_exception()` at its boundary.
# =============================================================================

from typing import Any, Optional

from core.errors import ToolError
from core.models import ErrorInfo, ResultEnvelope


def success(data: Any, message: Optional[str] = None) -> ResultEnvelope:
    """Wrap a tool payload in a successful envelope."""
    return ResultEnvelope(ok=True, data=data, message=message)


def failure(kind: str, message: str) -> ResultEnvelope:
    """Build a failed envelope with an explicit error kind."""
    return ResultEnvelope(ok=False, error=ErrorInfo(kind=kind, message=message))


def from_exception(operation: str, exc: BaseException) -> ResultEnvelope:
    """Convert any exception into a failed envelope.

    The message names the operation and carries the cause text, never a
    traceback.  Exceptions outside the ToolError hierarchy are classified
    as ``Internal``.
    """
    kind = exc.kind if isinstance(exc, ToolError) else "Internal"
    cause = str(exc) or exc.__class__.__name__
    return failure(kind, f"Failed to {operation}: {cause}")


def plural(count: int, noun: str) -> str:
    """`3 workflow(s)`-style count used in summary messages."""
    return f"{count} {noun}(s)"
