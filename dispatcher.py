"""
Tool Dispatcher
Shared execution path for MCP tool calls and REST requests.

dispatch() looks the tool up in the catalog, validates the arguments against
its inputSchema, resolves credentials, runs the handler and folds the outcome
into a ToolResult. Nothing raised below this point escapes to the transports.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from config import AnyDBConfig
from gateway import AnyDBClient
from handlers import get_handler
from models import Credentials
from tools import get_tool
from utils.errors import AnyDBError, ErrorKind
from utils.error_messages import describe_error
from utils.validation import validate_arguments

logger = logging.getLogger(__name__)


@dataclass
class ToolResult:
    """Outcome of one tool call"""
    success: bool
    data: Any = None
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None
    details: list[dict[str, Any]] = field(default_factory=list)
    status: Optional[int] = None  # Backend HTTP status, None when no response was received

    @classmethod
    def ok(cls, data: Any) -> 'ToolResult':
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, error: AnyDBError) -> 'ToolResult':
        return cls(
            success=False,
            error=describe_error(error),
            kind=error.kind,
            details=error.details,
            status=error.status,
        )

    def to_dict(self) -> dict[str, Any]:
        """Response envelope: {success, data} or {success, error, kind, details}"""
        if self.success:
            return {"success": True, "data": self.data}
        payload: dict[str, Any] = {"success": False, "error": self.error}
        if self.kind is not None:
            payload["kind"] = self.kind.value
        if self.details:
            payload["details"] = self.details
        return payload


class ToolDispatcher:
    """
    Routes tool calls to handlers.

    Args:
        config: Process configuration (provides the default credentials)
        client: Gateway client shared by all calls
    """

    def __init__(self, config: AnyDBConfig, client: AnyDBClient):
        self.config = config
        self.client = client

    def resolve_credentials(self, credentials: Optional[Credentials]) -> Credentials:
        """Fill missing fields of per-call credentials from the configured defaults"""
        api_key = credentials.api_key if credentials else None
        user_email = credentials.user_email if credentials else None
        return Credentials(
            api_key=api_key or self.config.default_api_key,
            user_email=user_email or self.config.default_user_email,
        )

    async def dispatch(
        self,
        name: str,
        arguments: Optional[dict[str, Any]],
        credentials: Optional[Credentials] = None,
    ) -> ToolResult:
        """
        Execute one tool call.

        Args:
            name: Tool name from the catalog
            arguments: Tool arguments (validated here before any network call)
            credentials: Per-call credentials; missing fields fall back to defaults

        Returns:
            ToolResult carrying the backend data or a described error
        """
        tool = get_tool(name)
        handler = get_handler(name)
        if tool is None or handler is None:
            logger.warning(f"Unknown tool requested: {name}")
            return ToolResult.failed(AnyDBError(
                ErrorKind.UNKNOWN_OPERATION,
                f"Unknown tool: {name}",
            ))

        arguments = {} if arguments is None else arguments
        keys = sorted(arguments) if isinstance(arguments, dict) else []
        logger.info(f"[TOOL_CALL] {name} args={keys}")

        try:
            validate_arguments(tool, arguments)
            resolved = self.resolve_credentials(credentials)
            data = await handler(self.client, resolved, arguments)
        except AnyDBError as e:
            if e.kind == ErrorKind.VALIDATION:
                logger.warning(f"Invalid arguments for {name}: {e.message}")
            else:
                logger.error(f"Tool {name} failed: {e}")
            return ToolResult.failed(e)
        except Exception as e:
            logger.error(f"Error executing tool {name}: {e}", exc_info=True)
            return ToolResult(success=False, error=f"Error executing {name}: {e}")

        return ToolResult.ok(data)
