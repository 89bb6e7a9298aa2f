"""
Record Tools
Read and write operations on individual records (ADOs).
"""

from mcp import types

from .common import TEAMID, ADBID, ADOID, object_schema

REST_ROUTES = {
    "get_record": ("GET", "/integrations/ext/record"),
    "create_record": ("POST", "/integrations/ext/createrecord"),
    "update_record": ("PUT", "/integrations/ext/updaterecord"),
    "delete_record": ("POST", "/integrations/ext/removerecord"),
    "copy_record": ("POST", "/integrations/ext/copyrecord"),
    "move_record": ("PUT", "/integrations/ext/moverecord"),
}

ATTACHMENT_MODES = ["noattachments", "link", "duplicate"]


def get_record() -> types.Tool:
    return types.Tool(
        name="get_record",
        description="Get a record by its fully qualified address (teamid, adbid, adoid). Returns the record metadata and all cells with their positions, types and values.",
        inputSchema=object_schema(
            {"teamid": TEAMID, "adbid": ADBID, "adoid": ADOID},
            ["teamid", "adbid", "adoid"],
        ),
    )


def create_record() -> types.Tool:
    return types.Tool(
        name="create_record",
        description="Create a new record in a database. Optionally attach it to a parent record, create it from a template, or pre-populate its content. The backend assigns the new adoid.",
        inputSchema=object_schema(
            {
                "adbid": ADBID,
                "teamid": TEAMID,
                "name": {
                    "type": "string",
                    "description": "The name of the record",
                },
                "attach": {
                    "type": "string",
                    "description": "Optional parent record ID to attach the new record to",
                },
                "template": {
                    "type": "string",
                    "description": "Optional template ID to create the record from",
                },
                "content": {
                    "type": "object",
                    "description": "Optional initial content, keyed by cell key",
                },
            },
            ["adbid", "teamid", "name"],
        ),
    )


def update_record() -> types.Tool:
    return types.Tool(
        name="update_record",
        description="Update an existing record's metadata and/or content.",
        inputSchema=object_schema(
            {
                "meta": {
                    "type": "object",
                    "description": "Record metadata. adoid, adbid and teamid identify the record; the other fields are optional updates.",
                    "properties": {
                        "adoid": ADOID,
                        "adbid": ADBID,
                        "teamid": TEAMID,
                        "name": {"type": "string", "description": "New record name"},
                        "description": {"type": "string", "description": "Record description"},
                        "icon": {"type": "string", "description": "Record icon"},
                        "followup": {"type": "number", "description": "Follow-up timestamp"},
                        "locked": {"type": "boolean", "description": "Lock or unlock the record"},
                        "status": {"type": "string", "description": "Record status"},
                        "assignees": {
                            "type": "object",
                            "description": "Assigned users and groups",
                            "properties": {
                                "users": {
                                    "type": "array",
                                    "items": {"type": "string"},
                                    "description": "User IDs",
                                },
                                "groups": {
                                    "type": "array",
                                    "items": {"type": "string"},
                                    "description": "Group IDs",
                                },
                            },
                        },
                    },
                    "required": ["adoid", "adbid", "teamid"],
                },
                "content": {
                    "type": "object",
                    "description": "Optional content updates keyed by cell key. Each value is an object with 'pos' (e.g. 'A1'), 'key' and 'value'. Fetch the record with get_record first and reuse its cell structure, changing only what needs to change.",
                },
            },
            ["meta"],
        ),
    )


def delete_record() -> types.Tool:
    return types.Tool(
        name="delete_record",
        description="Delete or unlink a record. A record can have several parents: pass their IDs in removefromids to unlink it from those parents only, or pass '000000000000000000000000' to delete it permanently. Without removefromids the record is deleted permanently.",
        inputSchema=object_schema(
            {
                "adoid": ADOID,
                "adbid": ADBID,
                "teamid": TEAMID,
                "removefromids": {
                    "type": "string",
                    "description": "Comma-separated parent record IDs to unlink from, or '000000000000000000000000' for permanent deletion (default).",
                },
            },
            ["adoid", "adbid", "teamid"],
        ),
    )


def copy_record() -> types.Tool:
    return types.Tool(
        name="copy_record",
        description="Copy a record into a new, independent record. Attachment modes: 'noattachments' copies without files, 'link' makes the copy reference the same stored files, 'duplicate' copies the files to new storage.",
        inputSchema=object_schema(
            {
                "adoid": {
                    "type": "string",
                    "description": "The source record ID to copy",
                },
                "adbid": ADBID,
                "teamid": TEAMID,
                "attachto": {
                    "type": "string",
                    "description": "Optional parent record ID for the copy. Defaults to the same level as the original.",
                },
                "attachmentsmode": {
                    "type": "string",
                    "description": "How file attachments are copied. Defaults to 'link'.",
                    "enum": ATTACHMENT_MODES,
                },
            },
            ["adoid", "adbid", "teamid"],
        ),
    )


def move_record() -> types.Tool:
    return types.Tool(
        name="move_record",
        description="Move a record under a new parent record. The record itself is unchanged; only its place in the hierarchy changes.",
        inputSchema=object_schema(
            {
                "adoid": {
                    "type": "string",
                    "description": "The record ID to move",
                },
                "adbid": ADBID,
                "teamid": TEAMID,
                "parentid": {
                    "type": "string",
                    "description": "The new parent record ID",
                },
            },
            ["adoid", "adbid", "teamid", "parentid"],
        ),
    )


def get_record_tools() -> list[types.Tool]:
    return [
        get_record(),
        create_record(),
        update_record(),
        delete_record(),
        copy_record(),
        move_record(),
    ]
