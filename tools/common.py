"""
Shared schema fragments for tool definitions.
"""

TEAMID = {
    "type": "string",
    "description": "The team ID (MongoDB ObjectId). Get from list_teams.",
}

ADBID = {
    "type": "string",
    "description": "The database ID (MongoDB ObjectId). Get from list_databases_for_team.",
}

ADOID = {
    "type": "string",
    "description": "The record ID (MongoDB ObjectId). Get from list_records or search_records.",
}

CELLPOS = {
    "type": "string",
    "description": "Cell position inside the record (e.g. 'A1', 'B2'). Use get_record to see the cell layout.",
}

FILE_ENCODING = {
    "type": "string",
    "description": "How fileContent is encoded: 'text' (default, sent as UTF-8) or 'base64' (decoded to raw bytes before upload). Use 'base64' for images and other binary files.",
    "enum": ["text", "base64"],
}


def object_schema(properties: dict, required: list[str]) -> dict:
    """Build a tool inputSchema"""
    return {
        "type": "object",
        "properties": properties,
        "required": required,
    }
