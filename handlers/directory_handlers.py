"""
Directory Handlers
Teams, databases, record listings and keyword search.
"""

import logging
from typing import Any

from gateway import AnyDBClient
from models import Credentials, ListRecordsParams, SearchRecordsParams
from utils.validation import build_model

logger = logging.getLogger(__name__)


async def handle_list_teams(client: AnyDBClient, credentials: Credentials, arguments: dict) -> Any:
    return await client.list_teams(credentials)


async def handle_list_databases_for_team(client: AnyDBClient, credentials: Credentials, arguments: dict) -> Any:
    return await client.list_databases_for_team(arguments["teamid"], credentials)


async def handle_list_records(client: AnyDBClient, credentials: Credentials, arguments: dict) -> Any:
    """List records, optionally under a parent and filtered by template"""
    params = build_model(ListRecordsParams, arguments, "list_records")
    return await client.list_records(params, credentials)


async def handle_search_records(client: AnyDBClient, credentials: Credentials, arguments: dict) -> Any:
    params = build_model(SearchRecordsParams, arguments, "search_records")
    return await client.search_records(params, credentials)
