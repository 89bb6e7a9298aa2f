"""
AnyDB Gateway Client
Authenticated access to the AnyDB integrations API (/integrations/ext/*)

Each call builds its own httpx.AsyncClient from the credentials of that call,
so concurrent calls with different credentials never share state. No call is
retried; failures surface immediately as AnyDBError.
"""

import logging
from typing import Any, Optional

import httpx

from config import AnyDBConfig
from models import (
    Credentials,
    ListRecordsParams,
    CreateRecordParams,
    UpdateRecordParams,
    DeleteRecordParams,
    CopyRecordParams,
    MoveRecordParams,
    SearchRecordsParams,
    DownloadFileParams,
    GetUploadUrlParams,
    CompleteUploadParams,
    UploadFileParams,
)
from utils.errors import AnyDBError, ErrorKind, UPLOAD_STEP_NAMES
from utils.redaction import summarize_payload, strip_query

logger = logging.getLogger(__name__)

API_PREFIX = "/integrations/ext"

API_KEY_HEADER = "x-anydb-api-key"
EMAIL_HEADER = "x-anydb-email"


def extract_backend_message(response: httpx.Response) -> str:
    """Pull the error message out of a backend response (message, then error, then reason)."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"]

    return response.reason_phrase or f"HTTP {response.status_code}"


def decode_body(response: httpx.Response) -> Any:
    """Relay a response body: JSON when possible, text otherwise, None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class AnyDBClient:
    """
    Client for the AnyDB integrations API.

    Args:
        config: Process configuration (base URL, timeout)
        transport: Optional httpx transport, used by tests to stand in for the backend
    """

    def __init__(self, config: AnyDBConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = config.api_base_url
        self.timeout = config.request_timeout
        self._transport = transport

    # ========================================================================
    # Request plumbing
    # ========================================================================

    def _auth_headers(self, operation: str, credentials: Optional[Credentials]) -> dict[str, str]:
        """Build auth headers, failing before any I/O when credentials are incomplete."""
        if credentials is None or not credentials.api_key:
            raise AnyDBError(
                ErrorKind.AUTH,
                "AnyDB API key required. Provide an API key or set ANYDB_DEFAULT_API_KEY.",
                operation=operation,
            )
        if not credentials.user_email:
            raise AnyDBError(
                ErrorKind.AUTH,
                "User email required. Provide a user email or set ANYDB_DEFAULT_USER_EMAIL.",
                operation=operation,
            )
        return {
            "Content-Type": "application/json",
            API_KEY_HEADER: credentials.api_key,
            EMAIL_HEADER: credentials.user_email,
        }

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        credentials: Optional[Credentials],
        params: Optional[dict[str, Any]] = None,
        body: Optional[dict[str, Any]] = None,
        allow_redirect_response: bool = False,
    ) -> httpx.Response:
        """
        Send one authenticated request to the backend.

        Redirects are followed unless allow_redirect_response is set, in which
        case a 3xx response is returned to the caller as-is.
        """
        headers = self._auth_headers(operation, credentials)

        logger.debug(f"[AnyDB Request] {method} {self.base_url}{path} ({operation})")
        logger.debug(f"[AnyDB Request] API Key: {credentials.masked_key}")
        logger.debug(f"[AnyDB Request] User Email: {credentials.user_email}")
        if params:
            logger.debug(f"[AnyDB Request] Params: {summarize_payload(params)}")
        if body is not None:
            logger.debug(f"[AnyDB Request] Body: {summarize_payload(body)}")

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                follow_redirects=not allow_redirect_response,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, params=params, json=body)
        except httpx.TimeoutException as e:
            logger.error(f"[AnyDB Response Error] {operation}: timed out after {self.timeout}s")
            raise AnyDBError(
                ErrorKind.TRANSPORT,
                f"Request timed out after {self.timeout:g}s",
                operation=operation,
            ) from e
        except httpx.RequestError as e:
            logger.error(f"[AnyDB Response Error] {operation}: no response received ({e})")
            raise AnyDBError(
                ErrorKind.TRANSPORT,
                str(e) or type(e).__name__,
                operation=operation,
            ) from e

        status = response.status_code
        logger.debug(f"[AnyDB Response] Status: {status} {response.reason_phrase}")

        accepted = 200 <= status < 300 or (allow_redirect_response and 300 <= status < 400)
        if not accepted:
            message = extract_backend_message(response)
            logger.warning(f"[AnyDB Response Error] {operation}: {status} {message}")
            raise AnyDBError(
                ErrorKind.AUTH if status in (401, 403) else ErrorKind.UPSTREAM,
                message,
                operation=operation,
                status=status,
            )

        return response

    async def _call(self, operation: str, method: str, endpoint: str, credentials, **kwargs) -> Any:
        response = await self._request(operation, method, f"{API_PREFIX}/{endpoint}", credentials, **kwargs)
        data = decode_body(response)
        logger.debug(f"[AnyDB Response] Data Type: {summarize_payload(data)}")
        return data

    # ========================================================================
    # AnyDB Record Operations
    # ========================================================================

    async def get_record(self, teamid: str, adbid: str, adoid: str, credentials: Credentials) -> Any:
        """Get a specific record by teamid, adbid, and adoid"""
        return await self._call(
            "get_record", "GET", "record", credentials,
            params={"teamid": teamid, "adbid": adbid, "adoid": adoid},
        )

    async def list_teams(self, credentials: Credentials) -> Any:
        """List all teams the API key provides access to"""
        return await self._call("list_teams", "GET", "listteams", credentials)

    async def list_databases_for_team(self, teamid: str, credentials: Credentials) -> Any:
        """Get all databases (ADBs) for a specific team"""
        return await self._call(
            "list_databases_for_team", "GET", "listdbsforteam", credentials,
            params={"teamid": teamid},
        )

    async def list_records(self, params: ListRecordsParams, credentials: Credentials) -> Any:
        """List records (ADOs) in a database, optionally under a parent record"""
        return await self._call("list_records", "GET", "list", credentials, params=params.to_request())

    async def create_record(self, params: CreateRecordParams, credentials: Credentials) -> Any:
        return await self._call("create_record", "POST", "createrecord", credentials, body=params.to_request())

    async def update_record(self, params: UpdateRecordParams, credentials: Credentials) -> Any:
        return await self._call("update_record", "PUT", "updaterecord", credentials, body=params.to_request())

    async def remove_record(self, params: DeleteRecordParams, credentials: Credentials) -> Any:
        """Unlink a record from the given parents, or delete it when removefromids is NULL_OBJECTID"""
        return await self._call("delete_record", "POST", "removerecord", credentials, body=params.to_request())

    async def copy_record(self, params: CopyRecordParams, credentials: Credentials) -> Any:
        return await self._call("copy_record", "POST", "copyrecord", credentials, body=params.to_request())

    async def move_record(self, params: MoveRecordParams, credentials: Credentials) -> Any:
        return await self._call("move_record", "PUT", "moverecord", credentials, body=params.to_request())

    async def search_records(self, params: SearchRecordsParams, credentials: Credentials) -> Any:
        """Keyword search; start/limit are forwarded untouched"""
        return await self._call("search_records", "GET", "search", credentials, params=params.to_request())

    # ========================================================================
    # Files
    # ========================================================================

    async def download_file(self, params: DownloadFileParams, credentials: Credentials) -> Any:
        """
        Resolve a file cell to a download URL.

        With redirect requested the backend may answer 302; the Location header
        is then returned as {"url": ..., "redirect": True}. Otherwise the
        backend's JSON body is returned unchanged.
        """
        response = await self._request(
            "download_file", "GET", f"{API_PREFIX}/download", credentials,
            params=params.to_request(),
            allow_redirect_response=True,
        )
        location = response.headers.get("location")
        if response.status_code == 302 and location:
            return {"url": location, "redirect": True}
        return decode_body(response)

    async def get_upload_url(self, params: GetUploadUrlParams, credentials: Credentials) -> Any:
        """Step 1: request a pre-signed upload URL"""
        return await self._call("get_upload_url", "GET", "getuploadurl", credentials, params=params.to_request())

    async def upload_file_to_url(
        self,
        upload_url: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> None:
        """
        Step 2: PUT the raw bytes to the pre-signed URL.

        Goes straight to object storage: no AnyDB credentials, no timeout and
        no size limit. The declared filesize is not checked against len(content).
        """
        operation = "upload_file_to_url"
        headers = {"Content-Type": content_type or "application/octet-stream"}
        logger.debug(f"[AnyDB Upload] PUT {strip_query(upload_url)} ({len(content)} bytes)")

        try:
            async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                response = await client.put(upload_url, content=content, headers=headers)
        except httpx.RequestError as e:
            logger.error(f"[AnyDB Upload Error] {strip_query(upload_url)}: {e}")
            raise AnyDBError(
                ErrorKind.TRANSPORT,
                str(e) or type(e).__name__,
                operation=operation,
            ) from e

        if not 200 <= response.status_code < 300:
            message = extract_backend_message(response)
            logger.warning(f"[AnyDB Upload Error] {response.status_code} {message}")
            raise AnyDBError(
                ErrorKind.UPSTREAM,
                message,
                operation=operation,
                status=response.status_code,
            )

        logger.debug(f"[AnyDB Upload] Status: {response.status_code}")

    async def complete_upload(self, params: CompleteUploadParams, credentials: Credentials) -> Any:
        """Step 3: tell AnyDB the bytes are in place so it attaches them to the cell"""
        return await self._call("complete_upload", "PUT", "completeupload", credentials, body=params.to_request())

    async def upload_file(self, params: UploadFileParams, credentials: Credentials) -> dict[str, Any]:
        """
        Upload a file in one call: get_upload_url, upload_file_to_url and
        complete_upload run in sequence with the same (team, database, record,
        cell) tuple and a filesize computed from the content.

        Not atomic: if step 2 or 3 fails the pre-signed URL from step 1 simply
        expires. The raised UPLOAD error names the step that failed.
        """
        self._auth_headers("upload_file", credentials)

        try:
            upload = await self.get_upload_url(
                GetUploadUrlParams(
                    filename=params.filename,
                    teamid=params.teamid,
                    adbid=params.adbid,
                    adoid=params.adoid,
                    filesize=params.filesize,
                    cellpos=params.cellpos,
                ),
                credentials,
            )
        except AnyDBError as e:
            raise _upload_step_error(1, e) from e

        upload_url = upload.get("url") if isinstance(upload, dict) else None
        if not upload_url:
            raise AnyDBError(
                ErrorKind.UPLOAD,
                f"Step 1 ({UPLOAD_STEP_NAMES[1]}) failed: backend response has no upload URL",
                operation="upload_file",
                step=1,
            )

        try:
            await self.upload_file_to_url(upload_url, params.content, params.content_type)
        except AnyDBError as e:
            raise _upload_step_error(2, e) from e

        try:
            complete = await self.complete_upload(
                CompleteUploadParams(
                    filesize=params.filesize,
                    teamid=params.teamid,
                    adbid=params.adbid,
                    adoid=params.adoid,
                    cellpos=params.cellpos,
                ),
                credentials,
            )
        except AnyDBError as e:
            raise _upload_step_error(3, e) from e

        logger.info(f"Uploaded {params.filename} ({params.filesize} bytes) to record {params.adoid}")
        return {"upload": upload, "complete": complete}


def _upload_step_error(step: int, cause: AnyDBError) -> AnyDBError:
    return AnyDBError(
        ErrorKind.UPLOAD,
        f"Step {step} ({UPLOAD_STEP_NAMES[step]}) failed: {cause.message}",
        operation="upload_file",
        status=cause.status,
        step=step,
    )
