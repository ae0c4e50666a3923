# =============================================================================
# core/registry.py  —  Tool handlers and the Dispatch Registry
# =============================================================================
#
# HOW A CALL FLOWS:
#   tools/mcp_server.py ──▶ ToolRegistry.dispatch(name, args)
#                              │ resolve(name)            (UnknownTool)
#                              ▼
#                           Tool.execute(args)
#                              │ validate_arguments()     (InvalidArguments)
#                              │ await run(client, args)  (0..N n8n calls)
#                              ▼
#                           ResultEnvelope
#
# A handler is anything with `async execute(args) -> ResultEnvelope`.  The
# stock implementation, `Tool`, pairs a definition with a plain async
# function and owns the try/except boundary, so the per-tool functions in
# core/workflows.py etc. can simply raise.
#
# The registry is written once at startup and only read afterwards, so
# concurrent invocations share it without locking.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol

from core.envelope import from_exception
from core.errors import DuplicateTool, ToolError, UnknownTool
from core.models import ResultEnvelope, ToolDefinition
from core.validation import validate_arguments

logger = logging.getLogger(__name__)


class ToolHandler(Protocol):
    async def execute(self, args: dict[str, Any]) -> ResultEnvelope: ...


ToolFunction = Callable[[Any, dict[str, Any]], Awaitable[ResultEnvelope]]


@dataclass(frozen=True)
class Tool:
    """Binds a tool definition and its implementation to a client."""

    definition: ToolDefinition
    run: ToolFunction
    client: Any

    async def execute(self, args: dict[str, Any]) -> ResultEnvelope:
        operation = self.definition.name
        try:
            validate_arguments(self.definition.input_schema, args)
            return await self.run(self.client, args)
        except ToolError as exc:
            logger.warning("%s failed (%s): %s", operation, exc.kind, exc)
            return from_exception(operation, exc)
        except Exception as exc:
            logger.exception("%s raised an unexpected error", operation)
            return from_exception(operation, exc)


class ToolRegistry:
    """Maps tool names to handlers, in registration order."""

    def __init__(self) -> None:
        self._handlers: dict[str, ToolHandler] = {}
        self._definitions: list[ToolDefinition] = []

    def register(self, definition: ToolDefinition, handler: ToolHandler) -> None:
        if definition.name in self._handlers:
            raise DuplicateTool(f"Tool '{definition.name}' is already registered")
        self._handlers[definition.name] = handler
        self._definitions.append(definition)
        logger.debug("Registered tool: %s", definition.name)

    def resolve(self, name: str) -> ToolHandler:
        try:
            return self._handlers[name]
        except KeyError:
            raise UnknownTool(f"Tool '{name}' not found") from None

    def list_definitions(self) -> tuple[ToolDefinition, ...]:
        return tuple(self._definitions)

    def __contains__(self, name: str) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._definitions)

    async def dispatch(self, name: str, args: dict[str, Any] | None = None) -> ResultEnvelope:
        """Route one invocation.  Never raises."""
        try:
            handler = self.resolve(name)
        except UnknownTool as exc:
            return from_exception(f"dispatch '{name}'", exc)
        if args is None:
            args = {}
        elif isinstance(args, dict):
            args = dict(args)
        return await handler.execute(args)
