"""
Request models for the AnyDB backend API
Using Pydantic for request shaping and serialization

Records, teams and databases are owned by the backend and relayed as plain
JSON, so only the outbound request shapes are modelled here. Optional fields
left as None are dropped from query strings and bodies (see to_request()).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict

from utils.redaction import mask_api_key

# Reserved ObjectId: "remove from every parent", i.e. permanent deletion
NULL_OBJECTID = "000000000000000000000000"


# ============================================================================
# Credentials
# ============================================================================

@dataclass(frozen=True)
class Credentials:
    """AnyDB API key and user email for a single call"""
    api_key: Optional[str]
    user_email: Optional[str]

    @property
    def masked_key(self) -> str:
        return mask_api_key(self.api_key)

    def __repr__(self) -> str:
        return f"Credentials(api_key='{self.masked_key}', user_email={self.user_email!r})"


# ============================================================================
# Enums
# ============================================================================

class AttachmentsMode(str, Enum):
    """How copy_record treats files attached to the source record"""
    NO_ATTACHMENTS = "noattachments"  # Copy without files
    LINK = "link"                     # Copy references the same stored files
    DUPLICATE = "duplicate"           # Files are copied to new storage locations


class FileEncoding(str, Enum):
    """How fileContent strings are turned into bytes before upload"""
    TEXT = "text"      # UTF-8 encode the string
    BASE64 = "base64"  # Decode the string as base64


# ============================================================================
# Base
# ============================================================================

class RequestModel(BaseModel):
    """Base for backend request shapes"""
    model_config = ConfigDict(use_enum_values=True)

    def to_request(self) -> dict[str, Any]:
        """Serialize for the backend, omitting unset optional fields"""
        return self.model_dump(exclude_none=True, mode="json")


# ============================================================================
# Records
# ============================================================================

class Assignees(BaseModel):
    users: Optional[list[str]] = None
    groups: Optional[list[str]] = None


class RecordMeta(BaseModel):
    """Record metadata sent with update_record; unknown keys pass through"""
    model_config = ConfigDict(extra="allow")

    adoid: str
    adbid: str
    teamid: str
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    followup: Optional[Union[int, float]] = None
    locked: Optional[bool] = None
    status: Optional[str] = None
    assignees: Optional[Assignees] = None


class ListRecordsParams(RequestModel):
    teamid: str
    adbid: str
    parentid: Optional[str] = None
    templateid: Optional[str] = None
    templatename: Optional[str] = None
    pagesize: Optional[str] = None
    lastmarker: Optional[str] = None


class ContentRequestModel(RequestModel):
    """Request carrying record content, which is relayed exactly as given"""
    content: Optional[dict[str, Any]] = None

    def to_request(self) -> dict[str, Any]:
        payload = self.model_dump(exclude_none=True, mode="json", exclude={"content"})
        if self.content is not None:
            payload["content"] = self.content
        return payload


class CreateRecordParams(ContentRequestModel):
    adbid: str
    teamid: str
    name: str
    attach: Optional[str] = None
    template: Optional[str] = None


class UpdateRecordParams(ContentRequestModel):
    meta: RecordMeta


class DeleteRecordParams(RequestModel):
    """
    removefromids is a comma-separated list of parent adoids to unlink from,
    or NULL_OBJECTID to delete the record permanently (the default).
    """
    adoid: str
    adbid: str
    teamid: str
    removefromids: str = NULL_OBJECTID


class CopyRecordParams(RequestModel):
    adoid: str
    adbid: str
    teamid: str
    attachto: Optional[str] = None
    attachmentsmode: AttachmentsMode = AttachmentsMode.LINK


class MoveRecordParams(RequestModel):
    adoid: str
    adbid: str
    teamid: str
    parentid: str


class SearchRecordsParams(RequestModel):
    """start and limit are opaque pagination tokens, forwarded as given"""
    adbid: str
    teamid: str
    search: str
    parentid: Optional[str] = None
    start: Optional[str] = None
    limit: Optional[str] = None


# ============================================================================
# Files
# ============================================================================

class DownloadFileParams(RequestModel):
    teamid: str
    adbid: str
    adoid: str
    cellpos: str
    redirect: Optional[bool] = None
    preview: Optional[bool] = None

    def to_request(self) -> dict[str, Any]:
        params = self.model_dump(exclude_none=True, exclude={"redirect", "preview"})
        if self.redirect is not None:
            params["redirect"] = "1" if self.redirect else "0"
        if self.preview is not None:
            params["preview"] = "1" if self.preview else "0"
        return params


class GetUploadUrlParams(RequestModel):
    """Step 1 of the upload sequence"""
    filename: str
    teamid: str
    adbid: str
    adoid: str
    filesize: str
    cellpos: Optional[str] = None


class CompleteUploadParams(RequestModel):
    """Step 3 of the upload sequence"""
    filesize: str
    teamid: str
    adbid: str
    adoid: Optional[str] = None
    cellpos: Optional[str] = None


class UploadFileParams(BaseModel):
    """Input for the single-call upload (all three steps)"""
    filename: str
    content: bytes
    teamid: str
    adbid: str
    adoid: str
    cellpos: Optional[str] = None
    content_type: Optional[str] = None

    @property
    def filesize(self) -> str:
        return str(len(self.content))
