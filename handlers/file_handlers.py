"""
File Handlers
Download URLs and the three-step upload, plus the single-call upload.

fileContent arrives as a string. With encoding "text" (the default) it is
encoded as UTF-8; with "base64" it is decoded to the raw bytes.
"""

import base64
import binascii
import logging
from typing import Any, Optional

from gateway import AnyDBClient
from models import (
    Credentials,
    FileEncoding,
    DownloadFileParams,
    GetUploadUrlParams,
    CompleteUploadParams,
    UploadFileParams,
)
from utils.errors import AnyDBError, ErrorKind
from utils.validation import build_model

logger = logging.getLogger(__name__)


def decode_file_content(content: str, encoding: Optional[str], operation: str) -> bytes:
    """Turn a fileContent string into the bytes that will be uploaded"""
    if encoding == FileEncoding.BASE64.value:
        try:
            return base64.b64decode(content, validate=True)
        except (binascii.Error, ValueError) as e:
            raise AnyDBError(
                ErrorKind.VALIDATION,
                f"fileContent is not valid base64: {e}",
                operation=operation,
                details=[{"code": "INVALID_VALUE", "path": "fileContent", "message": "fileContent is not valid base64"}],
            ) from e
    return content.encode("utf-8")


async def handle_download_file(client: AnyDBClient, credentials: Credentials, arguments: dict) -> Any:
    params = build_model(DownloadFileParams, arguments, "download_file")
    return await client.download_file(params, credentials)


async def handle_get_upload_url(client: AnyDBClient, credentials: Credentials, arguments: dict) -> Any:
    params = build_model(GetUploadUrlParams, arguments, "get_upload_url")
    return await client.get_upload_url(params, credentials)


async def handle_upload_file_to_url(client: AnyDBClient, credentials: Credentials, arguments: dict) -> Any:
    """
    PUT the content to a pre-signed URL.

    Needs no AnyDB credentials; the URL itself authorizes the upload.
    """
    content = decode_file_content(arguments["fileContent"], arguments.get("encoding"), "upload_file_to_url")
    await client.upload_file_to_url(arguments["uploadUrl"], content, arguments.get("contentType"))
    return {"message": "File uploaded successfully", "size": len(content)}


async def handle_complete_upload(client: AnyDBClient, credentials: Credentials, arguments: dict) -> Any:
    params = build_model(CompleteUploadParams, arguments, "complete_upload")
    return await client.complete_upload(params, credentials)


async def handle_upload_file(client: AnyDBClient, credentials: Credentials, arguments: dict) -> Any:
    content = decode_file_content(arguments["fileContent"], arguments.get("encoding"), "upload_file")
    params = build_model(
        UploadFileParams,
        {
            "filename": arguments["filename"],
            "content": content,
            "teamid": arguments["teamid"],
            "adbid": arguments["adbid"],
            "adoid": arguments["adoid"],
            "cellpos": arguments.get("cellpos"),
            "content_type": arguments.get("contentType"),
        },
        "upload_file",
    )
    return await client.upload_file(params, credentials)
