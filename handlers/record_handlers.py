"""
Record Handlers
Get, create, update, delete, copy and move records.
"""

import logging
from typing import Any

from gateway import AnyDBClient
from models import (
    Credentials,
    NULL_OBJECTID,
    CreateRecordParams,
    UpdateRecordParams,
    DeleteRecordParams,
    CopyRecordParams,
    MoveRecordParams,
)
from utils.validation import build_model

logger = logging.getLogger(__name__)


async def handle_get_record(client: AnyDBClient, credentials: Credentials, arguments: dict) -> Any:
    return await client.get_record(
        arguments["teamid"], arguments["adbid"], arguments["adoid"], credentials
    )


async def handle_create_record(client: AnyDBClient, credentials: Credentials, arguments: dict) -> Any:
    params = build_model(CreateRecordParams, arguments, "create_record")
    return await client.create_record(params, credentials)


async def handle_update_record(client: AnyDBClient, credentials: Credentials, arguments: dict) -> Any:
    """Send meta and content as given; the backend merges them into the record"""
    params = build_model(UpdateRecordParams, arguments, "update_record")
    return await client.update_record(params, credentials)


async def handle_delete_record(client: AnyDBClient, credentials: Credentials, arguments: dict) -> Any:
    """
    Unlink or delete a record.

    An omitted or empty removefromids means permanent deletion.
    """
    data = dict(arguments)
    data["removefromids"] = (data.get("removefromids") or "").strip() or NULL_OBJECTID

    params = build_model(DeleteRecordParams, data, "delete_record")
    if params.removefromids == NULL_OBJECTID:
        logger.info(f"Deleting record {params.adoid} permanently")
    else:
        logger.info(f"Unlinking record {params.adoid} from {params.removefromids}")
    return await client.remove_record(params, credentials)


async def handle_copy_record(client: AnyDBClient, credentials: Credentials, arguments: dict) -> Any:
    params = build_model(CopyRecordParams, arguments, "copy_record")
    return await client.copy_record(params, credentials)


async def handle_move_record(client: AnyDBClient, credentials: Credentials, arguments: dict) -> Any:
    params = build_model(MoveRecordParams, arguments, "move_record")
    return await client.move_record(params, credentials)
