"""
Error Message Utilities

Turns AnyDBError instances into messages an agent can act on: the backend's
own message first, followed by a short hint about what to check.
"""

from typing import Optional

from .errors import AnyDBError, ErrorKind

# Hints keyed by backend HTTP status
STATUS_HINTS = {
    400: "The backend rejected the request parameters. Check identifiers and field formats.",
    401: "Authentication failed. Check the AnyDB API key and user email.",
    403: "Permission denied. The credentials do not grant access to this team or database.",
    404: "Not found. Check that teamid, adbid and adoid refer to existing objects (use list_teams, list_databases_for_team and list_records).",
    409: "Conflict. The record may have been modified or locked by another user.",
    413: "The file is too large for the backend to accept.",
    429: "Rate limit exceeded. Wait a moment before calling again.",
}

# Hints keyed by error kind when no status-specific hint applies
KIND_HINTS = {
    ErrorKind.VALIDATION: "Fix the arguments and call again; no request was sent to AnyDB.",
    ErrorKind.AUTH: "Provide an AnyDB API key and user email for this call.",
    ErrorKind.TRANSPORT: "AnyDB could not be reached. Check ANYDB_API_URL and network connectivity.",
    ErrorKind.UNKNOWN_OPERATION: "Use one of the tools returned by tools/list.",
}


def get_status_hint(status: Optional[int]) -> Optional[str]:
    """Get the hint for a backend HTTP status, if one is known."""
    if status is None:
        return None
    if status in STATUS_HINTS:
        return STATUS_HINTS[status]
    if status >= 500:
        return "AnyDB returned a server error. The request may succeed if repeated later."
    return None


def describe_error(error: AnyDBError) -> str:
    """
    Build the user-visible message for an error.

    Format: "<operation> failed (HTTP <status>): <message>. <hint>"
    """
    text = str(error)
    hint = get_status_hint(error.status) or KIND_HINTS.get(error.kind)
    if hint:
        text = f"{text}. {hint}" if not text.endswith(".") else f"{text} {hint}"
    return text
