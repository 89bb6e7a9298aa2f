"""
MCP Tools Package
Single declaration of every operation the server exposes.

Each tool is defined once (name, description, inputSchema) together with its
REST route. The MCP stdio server lists the catalog as-is and the REST app
derives one route per tool from it, so both surfaces always expose the same
operations with the same validation rules.

- Directory tools: list_teams, list_databases_for_team, list_records, search_records
- Record tools: get_record, create_record, update_record, delete_record, copy_record, move_record
- File tools: download_file, get_upload_url, upload_file_to_url, complete_upload, upload_file
"""

from typing import Optional

from mcp import types

from . import directory_tools, record_tools, file_tools
from .directory_tools import get_directory_tools
from .record_tools import get_record_tools
from .file_tools import get_file_tools


_TOOL_CATALOG: list[types.Tool] = [
    *get_directory_tools(),
    *get_record_tools(),
    *get_file_tools(),
]

_TOOLS_BY_NAME: dict[str, types.Tool] = {tool.name: tool for tool in _TOOL_CATALOG}


def get_tool_catalog() -> list[types.Tool]:
    """Get all MCP tools, in listing order"""
    return list(_TOOL_CATALOG)


def get_tool(name: str) -> Optional[types.Tool]:
    """Look up a tool definition by name"""
    return _TOOLS_BY_NAME.get(name)


def get_rest_routes() -> dict[str, tuple[str, str]]:
    """Get {tool_name: (HTTP method, path)} for every tool"""
    return {
        **directory_tools.REST_ROUTES,
        **record_tools.REST_ROUTES,
        **file_tools.REST_ROUTES,
    }


__all__ = [
    'get_tool_catalog',
    'get_tool',
    'get_rest_routes',
    'get_directory_tools',
    'get_record_tools',
    'get_file_tools',
]
