"""
Tests for log redaction helpers
"""

import logging

import pytest

from models import Credentials
from utils.redaction import mask_api_key, summarize_payload, strip_query
from tests.backend_test_utils import api_path, TEST_API_KEY, TEAM_ID


class TestMaskApiKey:

    def test_shows_prefix_and_suffix_only(self):
        key = "adb_live_abcdefghijklmnop1234"

        masked = mask_api_key(key)

        assert masked == "adb_live...1234"
        assert "abcdefghijklmnop" not in masked

    def test_short_keys_fully_hidden(self):
        assert mask_api_key("short") == "***"

    def test_missing_key(self):
        assert mask_api_key(None) == "none"
        assert mask_api_key("") == "none"

    def test_credentials_repr_is_masked(self):
        credentials = Credentials(api_key=TEST_API_KEY, user_email="a@example.com")

        assert TEST_API_KEY not in repr(credentials)
        assert credentials.masked_key in repr(credentials)


class TestSummarizePayload:

    def test_object_lists_field_names(self):
        assert summarize_payload({"teamid": "secret-team", "name": "Payroll"}) == "Object{teamid, name}"

    def test_shapes(self):
        assert summarize_payload([1, 2, 3]) == "Array[3]"
        assert summarize_payload(b"abcd") == "Bytes[4]"
        assert summarize_payload(None) == "empty"
        assert summarize_payload("text") == "str"


def test_strip_query_removes_signature():
    url = "https://storage.test/bucket/file.pdf?X-Amz-Signature=abc&X-Amz-Credential=def"

    assert strip_query(url) == "https://storage.test/bucket/file.pdf"


@pytest.mark.asyncio
async def test_request_logs_never_contain_key_or_values(client, backend, credentials, caplog):
    backend.on("GET", api_path("listdbsforteam"), json_body=[{"name": "Confidential Payroll"}])

    with caplog.at_level(logging.DEBUG, logger="gateway"):
        await client.list_databases_for_team(TEAM_ID, credentials)

    assert "[AnyDB Request]" in caplog.text
    assert TEST_API_KEY not in caplog.text
    assert TEAM_ID not in caplog.text
    assert "Confidential Payroll" not in caplog.text
    assert credentials.masked_key in caplog.text
