"""
Tests for tool argument validation and query-string coercion
"""

import pytest

from models import CopyRecordParams
from tools import get_tool
from utils.errors import AnyDBError, ErrorKind
from utils.validation import validate_arguments, coerce_query_params, build_model


def validation_error(tool_name, arguments) -> AnyDBError:
    with pytest.raises(AnyDBError) as exc_info:
        validate_arguments(get_tool(tool_name), arguments)
    assert exc_info.value.kind == ErrorKind.VALIDATION
    return exc_info.value


class TestValidateArguments:

    def test_valid_arguments_pass(self):
        validate_arguments(get_tool("search_records"), {
            "adbid": "db", "teamid": "team", "search": "invoice", "limit": "5",
        })

    def test_none_arguments_treated_as_empty(self):
        validate_arguments(get_tool("list_teams"), None)

    def test_missing_fields_named_in_message(self):
        error = validation_error("get_upload_url", {"filename": "a.txt"})

        assert error.message == "teamid, adbid, adoid, and filesize are required"
        assert error.operation == "get_upload_url"
        assert error.details[0]["missing"] == ["teamid", "adbid", "adoid", "filesize"]

    def test_single_missing_field(self):
        error = validation_error("list_databases_for_team", {})

        assert error.message == "teamid is required"

    def test_every_problem_reported(self):
        error = validation_error("download_file", {
            "teamid": "t", "adbid": "d", "cellpos": 3, "preview": "yes",
        })

        codes = sorted(detail["code"] for detail in error.details)
        assert codes == ["INVALID_TYPE", "INVALID_TYPE", "MISSING_REQUIRED"]

    def test_number_rejects_boolean(self):
        error = validation_error("update_record", {
            "meta": {"adoid": "a", "adbid": "d", "teamid": "t", "followup": True},
        })

        assert error.details[0]["path"] == "meta.followup"

    def test_array_items_checked(self):
        error = validation_error("update_record", {
            "meta": {"adoid": "a", "adbid": "d", "teamid": "t", "assignees": {"users": ["u1", 7]}},
        })

        assert error.details[0]["path"] == "meta.assignees.users[1]"

    def test_meta_must_be_object(self):
        error = validation_error("update_record", {"meta": "adoid=1"})

        assert error.details[0]["code"] == "INVALID_TYPE"

    def test_encoding_enum(self):
        error = validation_error("upload_file_to_url", {
            "uploadUrl": "https://storage.test/x", "fileContent": "abc", "encoding": "hex",
        })

        assert error.details[0]["validValues"] == ["text", "base64"]


class TestCoerceQueryParams:

    def test_booleans(self):
        tool = get_tool("download_file")

        coerced = coerce_query_params(tool, {"redirect": "TRUE", "preview": "0", "cellpos": "A1"})

        assert coerced == {"redirect": True, "preview": False, "cellpos": "A1"}

    def test_unparseable_boolean_left_for_validation(self):
        coerced = coerce_query_params(get_tool("download_file"), {"redirect": "maybe"})

        assert coerced == {"redirect": "maybe"}

    def test_string_properties_never_parsed(self):
        coerced = coerce_query_params(get_tool("search_records"), {"start": "007", "limit": "10"})

        assert coerced == {"start": "007", "limit": "10"}


class TestBuildModel:

    def test_builds_model(self):
        params = build_model(CopyRecordParams, {"adoid": "a", "adbid": "d", "teamid": "t"}, "copy_record")

        assert params.attachmentsmode == "link"

    def test_model_errors_become_validation_errors(self):
        with pytest.raises(AnyDBError) as exc_info:
            build_model(CopyRecordParams, {"adoid": "a", "adbid": "d"}, "copy_record")

        assert exc_info.value.kind == ErrorKind.VALIDATION
        assert exc_info.value.details[0]["path"] == "teamid"
