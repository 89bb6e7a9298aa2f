"""
Log Redaction Helpers

Credentials are masked and payloads are summarised by shape only, so request
logs show which fields were sent without leaking record content.
"""

from typing import Any, Optional
from urllib.parse import urlsplit, urlunsplit


def mask_api_key(api_key: Optional[str]) -> str:
    """Mask an API key as first8...last4."""
    if not api_key:
        return "none"
    if len(api_key) < 12:
        return "***"
    return f"{api_key[:8]}...{api_key[-4:]}"


def summarize_payload(data: Any) -> str:
    """
    Describe a payload by shape without values.

    Examples:
        {"teamid": "...", "name": "..."} -> "Object{teamid, name}"
        [1, 2, 3]                        -> "Array[3]"
    """
    if data is None:
        return "empty"
    if isinstance(data, dict):
        return f"Object{{{', '.join(str(key) for key in data.keys())}}}"
    if isinstance(data, (list, tuple)):
        return f"Array[{len(data)}]"
    if isinstance(data, (bytes, bytearray)):
        return f"Bytes[{len(data)}]"
    return type(data).__name__


def strip_query(url: str) -> str:
    """Drop the query string (pre-signed URLs carry credentials there)."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
