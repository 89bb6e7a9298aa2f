"""
Directory Tools
Discovery and lookup: teams, databases, record listings and keyword search.
"""

from mcp import types

from .common import TEAMID, ADBID, object_schema

REST_ROUTES = {
    "list_teams": ("GET", "/integrations/ext/listteams"),
    "list_databases_for_team": ("GET", "/integrations/ext/listdbsforteam"),
    "list_records": ("GET", "/integrations/ext/list"),
    "search_records": ("GET", "/integrations/ext/search"),
}


def list_teams() -> types.Tool:
    return types.Tool(
        name="list_teams",
        description="List all teams the API key has access to. A team is a workspace with its own databases and users. Call this first to discover teamid values.",
        inputSchema=object_schema({}, []),
    )


def list_databases_for_team() -> types.Tool:
    return types.Tool(
        name="list_databases_for_team",
        description="List all databases (ADBs) in a team. A database is a collection of records, similar to a spreadsheet file. Use this to discover adbid values.",
        inputSchema=object_schema({"teamid": TEAMID}, ["teamid"]),
    )


def list_records() -> types.Tool:
    return types.Tool(
        name="list_records",
        description="List records (ADOs) in a database. Without parentid the root records are returned. Optionally filter by template and page through large result sets with pagesize and lastmarker.",
        inputSchema=object_schema(
            {
                "teamid": TEAMID,
                "adbid": ADBID,
                "parentid": {
                    "type": "string",
                    "description": "Optional parent record ID; returns that record's children.",
                },
                "templateid": {
                    "type": "string",
                    "description": "Optional template ID; only records created from this template are returned.",
                },
                "templatename": {
                    "type": "string",
                    "description": "Optional template name. Alternative to templateid, provide one or the other.",
                },
                "pagesize": {
                    "type": "string",
                    "description": "Optional page size as a numeric string (e.g. '50').",
                },
                "lastmarker": {
                    "type": "string",
                    "description": "Optional pagination marker from the previous response.",
                },
            },
            ["teamid", "adbid"],
        ),
    )


def search_records() -> types.Tool:
    return types.Tool(
        name="search_records",
        description="Search records in a database by keyword. Optionally restrict to the children of a parent record and paginate with start and limit.",
        inputSchema=object_schema(
            {
                "adbid": ADBID,
                "teamid": TEAMID,
                "search": {
                    "type": "string",
                    "description": "The search keyword",
                },
                "parentid": {
                    "type": "string",
                    "description": "Optional parent record ID to filter results",
                },
                "start": {
                    "type": "string",
                    "description": "Optional start offset for pagination (numeric string)",
                },
                "limit": {
                    "type": "string",
                    "description": "Optional maximum number of results (numeric string)",
                },
            },
            ["adbid", "teamid", "search"],
        ),
    )


def get_directory_tools() -> list[types.Tool]:
    return [
        list_teams(),
        list_databases_for_team(),
        list_records(),
        search_records(),
    ]
