"""
Handler Registry - Maps tool names to handler functions

This module provides a centralized registry that routes tool calls to their
respective handler functions. Handlers are organized by category matching
the tools/ directory structure.

Architecture:
- Each handler module exports async functions: handle_<tool_name>(client, credentials, arguments)
- Arguments have already been validated against the tool's inputSchema
- Handlers return the backend's response data unchanged (or raise AnyDBError)

Usage:
    from handlers import get_handler

    handler = get_handler(tool_name)
    if handler:
        data = await handler(client, credentials, arguments)
"""

from typing import Any, Awaitable, Callable, Optional

from . import directory_handlers
from . import record_handlers
from . import file_handlers

Handler = Callable[..., Awaitable[Any]]

# Handler registry: {tool_name: handler_function}
HANDLER_REGISTRY: dict[str, Handler] = {
    # Directory
    "list_teams": directory_handlers.handle_list_teams,
    "list_databases_for_team": directory_handlers.handle_list_databases_for_team,
    "list_records": directory_handlers.handle_list_records,
    "search_records": directory_handlers.handle_search_records,

    # Records
    "get_record": record_handlers.handle_get_record,
    "create_record": record_handlers.handle_create_record,
    "update_record": record_handlers.handle_update_record,
    "delete_record": record_handlers.handle_delete_record,
    "copy_record": record_handlers.handle_copy_record,
    "move_record": record_handlers.handle_move_record,

    # Files
    "download_file": file_handlers.handle_download_file,
    "get_upload_url": file_handlers.handle_get_upload_url,
    "upload_file_to_url": file_handlers.handle_upload_file_to_url,
    "complete_upload": file_handlers.handle_complete_upload,
    "upload_file": file_handlers.handle_upload_file,
}


def get_handler(tool_name: str) -> Optional[Handler]:
    """Get the handler function for a tool, or None if the tool is unknown"""
    return HANDLER_REGISTRY.get(tool_name)


def list_all_handlers() -> list[str]:
    """Get list of all registered tool names"""
    return list(HANDLER_REGISTRY.keys())


__all__ = [
    'get_handler',
    'list_all_handlers',
    'HANDLER_REGISTRY',
]
