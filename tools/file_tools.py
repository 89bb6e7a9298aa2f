"""
File Tools
Download and upload of files stored in record cells.

Uploading takes three ordered calls (get_upload_url, upload_file_to_url,
complete_upload) that must use the same teamid/adbid/adoid/cellpos and
filesize. upload_file runs all three in one call.
"""

from mcp import types

from .common import TEAMID, ADBID, ADOID, CELLPOS, FILE_ENCODING, object_schema

REST_ROUTES = {
    "download_file": ("GET", "/integrations/ext/download"),
    "get_upload_url": ("GET", "/integrations/ext/getuploadurl"),
    "upload_file_to_url": ("PUT", "/integrations/ext/uploadtourl"),
    "complete_upload": ("PUT", "/integrations/ext/completeupload"),
    "upload_file": ("POST", "/integrations/ext/uploadfile"),
}

FILESIZE = {
    "type": "string",
    "description": "File size in bytes as a numeric string. Must match the size of the uploaded content and be the same in get_upload_url and complete_upload.",
}


def download_file() -> types.Tool:
    return types.Tool(
        name="download_file",
        description="Get the download URL of a file stored in a record cell. Returns JSON with a 'url' field. The URL may be pre-signed and short-lived: show it to the user as a link, or fetch it promptly if the file content is needed. Use get_record first to find which cells hold files.",
        inputSchema=object_schema(
            {
                "teamid": TEAMID,
                "adbid": ADBID,
                "adoid": ADOID,
                "cellpos": CELLPOS,
                "redirect": {
                    "type": "boolean",
                    "description": "If true, ask AnyDB for a redirect; the redirect target is returned as {url, redirect: true}. If false (default), the JSON response is returned.",
                },
                "preview": {
                    "type": "boolean",
                    "description": "If true, the URL displays the file inline instead of downloading it.",
                },
            },
            ["teamid", "adbid", "adoid", "cellpos"],
        ),
    )


def get_upload_url() -> types.Tool:
    return types.Tool(
        name="get_upload_url",
        description="Upload step 1 of 3: request a pre-signed URL for uploading a file into a record cell. Then call upload_file_to_url with the returned url, then complete_upload.",
        inputSchema=object_schema(
            {
                "filename": {
                    "type": "string",
                    "description": "Name of the file (e.g. 'report.pdf')",
                },
                "teamid": TEAMID,
                "adbid": ADBID,
                "adoid": ADOID,
                "filesize": FILESIZE,
                "cellpos": CELLPOS,
            },
            ["filename", "teamid", "adbid", "adoid", "filesize"],
        ),
    )


def upload_file_to_url() -> types.Tool:
    return types.Tool(
        name="upload_file_to_url",
        description="Upload step 2 of 3: PUT the file content to the pre-signed URL returned by get_upload_url.",
        inputSchema=object_schema(
            {
                "uploadUrl": {
                    "type": "string",
                    "description": "The 'url' returned by get_upload_url",
                },
                "fileContent": {
                    "type": "string",
                    "description": "The file content itself (not a file path)",
                },
                "contentType": {
                    "type": "string",
                    "description": "MIME type of the file (default: application/octet-stream)",
                },
                "encoding": FILE_ENCODING,
            },
            ["uploadUrl", "fileContent"],
        ),
    )


def complete_upload() -> types.Tool:
    return types.Tool(
        name="complete_upload",
        description="Upload step 3 of 3: confirm the upload so AnyDB attaches the file to the record cell. Use the same teamid, adbid, adoid, cellpos and filesize as in get_upload_url.",
        inputSchema=object_schema(
            {
                "filesize": FILESIZE,
                "teamid": TEAMID,
                "adbid": ADBID,
                "adoid": ADOID,
                "cellpos": CELLPOS,
            },
            ["filesize", "teamid", "adbid"],
        ),
    )


def upload_file() -> types.Tool:
    return types.Tool(
        name="upload_file",
        description="Upload a file to a record cell in one call (runs get_upload_url, upload_file_to_url and complete_upload in order). Provide the file content directly, not a file path. If a step fails, the error names the step; repeat the whole upload.",
        inputSchema=object_schema(
            {
                "filename": {
                    "type": "string",
                    "description": "Name of the file (e.g. 'document.pdf', 'image.png')",
                },
                "fileContent": {
                    "type": "string",
                    "description": "The file content itself (not a file path)",
                },
                "teamid": TEAMID,
                "adbid": ADBID,
                "adoid": {
                    "type": "string",
                    "description": "The record ID the file is attached to",
                },
                "cellpos": {
                    "type": "string",
                    "description": "Optional cell position for the file (e.g. 'A1'). AnyDB uses 'A1' when omitted.",
                },
                "contentType": {
                    "type": "string",
                    "description": "MIME type of the file (e.g. 'image/png', 'application/pdf')",
                },
                "encoding": FILE_ENCODING,
            },
            ["filename", "fileContent", "teamid", "adbid", "adoid"],
        ),
    )


def get_file_tools() -> list[types.Tool]:
    return [
        download_file(),
        get_upload_url(),
        upload_file_to_url(),
        complete_upload(),
        upload_file(),
    ]
