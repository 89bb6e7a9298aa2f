"""
REST Surface Tests
Routes, envelopes, status mapping, credentials, service key and OpenAPI.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from config import AnyDBConfig
from dispatcher import ToolDispatcher
from gateway import AnyDBClient
from tools import get_tool_catalog, get_rest_routes
from transport.rest import create_rest_app, build_openapi_spec
from tests.backend_test_utils import (
    api_path,
    TEST_API_URL,
    TEST_API_KEY,
    TEST_EMAIL,
    TEAM_ID,
    DB_ID,
    RECORD_ID,
)

SERVICE_KEY = "rest-service-secret"


@pytest.fixture
def rest_client(config, client):
    return TestClient(create_rest_app(config, client=client))


@pytest.fixture
def bare_rest_client(bare_config, backend):
    return TestClient(create_rest_app(bare_config, client=AnyDBClient(bare_config, transport=backend.transport)))


@pytest.fixture
def keyed_rest_client(backend):
    keyed_config = AnyDBConfig(
        api_base_url=TEST_API_URL,
        default_api_key=TEST_API_KEY,
        default_user_email=TEST_EMAIL,
        rest_api_key=SERVICE_KEY,
    )
    return TestClient(create_rest_app(keyed_config, client=AnyDBClient(keyed_config, transport=backend.transport)))


class TestRoutes:

    def test_every_tool_has_a_route(self, rest_client):
        registered = {route.name for route in rest_client.app.routes}
        for tool in get_tool_catalog():
            assert tool.name in registered

    def test_success_envelope(self, rest_client, backend):
        teams = [{"teamid": TEAM_ID, "name": "Finance"}]
        backend.on("GET", api_path("listteams"), json_body=teams)

        response = rest_client.get("/integrations/ext/listteams")

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": teams}

    def test_query_parameters_forwarded(self, rest_client, backend):
        backend.on("GET", api_path("search"), json_body=[])

        response = rest_client.get(
            "/integrations/ext/search",
            params={"teamid": TEAM_ID, "adbid": DB_ID, "search": "invoice", "start": "0", "limit": "10"},
        )

        assert response.status_code == 200
        assert backend.params(backend.requests[0]) == {
            "teamid": TEAM_ID, "adbid": DB_ID, "search": "invoice", "start": "0", "limit": "10",
        }

    def test_boolean_query_parameters_coerced(self, rest_client, backend):
        backend.on("GET", api_path("download"), json_body={"url": "https://storage.test/f"})

        response = rest_client.get("/integrations/ext/download", params={
            "teamid": TEAM_ID, "adbid": DB_ID, "adoid": RECORD_ID, "cellpos": "A1",
            "redirect": "false", "preview": "true",
        })

        assert response.status_code == 200
        params = backend.params(backend.requests[0])
        assert params["redirect"] == "0"
        assert params["preview"] == "1"

    def test_json_body_forwarded(self, rest_client, backend):
        backend.on("POST", api_path("createrecord"), json_body={"adoid": RECORD_ID})

        response = rest_client.post(
            "/integrations/ext/createrecord",
            json={"teamid": TEAM_ID, "adbid": DB_ID, "name": "Invoice", "attach": RECORD_ID},
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"adoid": RECORD_ID}
        assert backend.body(backend.requests[0]) == {
            "teamid": TEAM_ID, "adbid": DB_ID, "name": "Invoice", "attach": RECORD_ID,
        }

    def test_upload_file_route(self, rest_client, backend):
        backend.on("GET", api_path("getuploadurl"), json_body={"url": "https://storage.test/up/a.txt?sig=1"})
        backend.on("PUT", "/up/a.txt", status=200)
        backend.on("PUT", api_path("completeupload"), json_body={"success": True})

        response = rest_client.post("/integrations/ext/uploadfile", json={
            "filename": "a.txt", "fileContent": "hello", "teamid": TEAM_ID, "adbid": DB_ID, "adoid": RECORD_ID,
        })

        assert response.status_code == 200
        assert response.json()["data"]["complete"] == {"success": True}


class TestStatusMapping:

    def test_validation_is_400(self, rest_client, backend):
        response = rest_client.get("/integrations/ext/record", params={"teamid": TEAM_ID})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["kind"] == "validation"
        assert "adbid and adoid are required" in body["error"]
        assert body["details"][0]["code"] == "MISSING_REQUIRED"
        assert backend.requests == []

    def test_invalid_json_body_is_400(self, rest_client, backend):
        response = rest_client.post(
            "/integrations/ext/createrecord",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert "Invalid JSON body" in response.json()["error"]
        assert backend.requests == []

    def test_non_object_body_is_400(self, rest_client, backend):
        response = rest_client.put("/integrations/ext/moverecord", json=[TEAM_ID, DB_ID])

        assert response.status_code == 400
        assert "JSON object" in response.json()["error"]

    def test_missing_credentials_is_400(self, bare_rest_client, backend):
        response = bare_rest_client.get("/integrations/ext/listteams")

        assert response.status_code == 400
        assert response.json()["kind"] == "auth"
        assert backend.requests == []

    @pytest.mark.parametrize("backend_status", [401, 403])
    def test_backend_credential_rejection_is_500(self, rest_client, backend, backend_status):
        backend.on("GET", api_path("record"), status=backend_status, json_body={"message": "No access to team"})

        response = rest_client.get(
            "/integrations/ext/record",
            params={"teamid": TEAM_ID, "adbid": DB_ID, "adoid": RECORD_ID},
        )

        assert response.status_code == 500
        body = response.json()
        assert body["kind"] == "auth"
        assert f"HTTP {backend_status}" in body["error"]
        assert "No access to team" in body["error"]

    def test_backend_rejection_distinct_from_service_key_rejection(self, keyed_rest_client, backend):
        backend.on("GET", api_path("listteams"), status=403, json_body={"message": "No access to team"})

        rejected_key = keyed_rest_client.get("/integrations/ext/listteams", headers={"X-REST-API-Key": "wrong"})
        rejected_upstream = keyed_rest_client.get(
            "/integrations/ext/listteams", headers={"X-REST-API-Key": SERVICE_KEY}
        )

        assert rejected_key.status_code == 401
        assert rejected_upstream.status_code == 500
        assert rejected_upstream.json()["kind"] == "auth"

    def test_upstream_error_is_500(self, rest_client, backend):
        backend.on("GET", api_path("record"), status=404, json_body={"message": "Record not found"})

        response = rest_client.get(
            "/integrations/ext/record",
            params={"teamid": TEAM_ID, "adbid": DB_ID, "adoid": RECORD_ID},
        )

        assert response.status_code == 500
        body = response.json()
        assert body["kind"] == "upstream"
        assert "Record not found" in body["error"]


class TestCredentialHeaders:

    def test_anydb_headers_forwarded(self, bare_rest_client, backend):
        backend.on("GET", api_path("listteams"), json_body=[])

        response = bare_rest_client.get(
            "/integrations/ext/listteams",
            headers={"X-AnyDB-API-Key": "caller_key_abcdefgh", "X-AnyDB-Email": "caller@example.com"},
        )

        assert response.status_code == 200
        assert backend.requests[0].headers["x-anydb-api-key"] == "caller_key_abcdefgh"
        assert backend.requests[0].headers["x-anydb-email"] == "caller@example.com"

    def test_bearer_token_used_as_api_key(self, rest_client, backend):
        backend.on("GET", api_path("listteams"), json_body=[])

        rest_client.get("/integrations/ext/listteams", headers={"Authorization": "Bearer bearer_key_12345678"})

        assert backend.requests[0].headers["x-anydb-api-key"] == "bearer_key_12345678"
        assert backend.requests[0].headers["x-anydb-email"] == TEST_EMAIL


class TestServiceKey:

    def test_missing_service_key_rejected(self, keyed_rest_client, backend):
        response = keyed_rest_client.get("/integrations/ext/listteams")

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Unauthorized - Invalid REST API key"}
        assert backend.requests == []

    def test_valid_service_key_accepted(self, keyed_rest_client, backend):
        backend.on("GET", api_path("listteams"), json_body=[])

        response = keyed_rest_client.get("/integrations/ext/listteams", headers={"X-REST-API-Key": SERVICE_KEY})

        assert response.status_code == 200

    def test_health_and_openapi_are_public(self, keyed_rest_client):
        assert keyed_rest_client.get("/healthz").status_code == 200
        assert keyed_rest_client.get("/openapi.json").status_code == 200


class TestDocuments:

    def test_healthz(self, rest_client, backend):
        response = rest_client.get("/healthz")

        assert response.json() == {"status": "healthy", "backend": TEST_API_URL}
        assert backend.requests == []

    def test_openapi_generated_from_catalog(self, rest_client):
        spec = rest_client.get("/openapi.json").json()
        routes = get_rest_routes()

        assert spec["openapi"] == "3.1.0"
        operation_ids = set()
        for path, methods in spec["paths"].items():
            for method, operation in methods.items():
                operation_ids.add(operation["operationId"])
                assert routes[operation["operationId"]] == (method.upper(), path)
        assert operation_ids == {tool.name for tool in get_tool_catalog()}

    def test_openapi_get_parameters_and_bodies(self, config):
        spec = build_openapi_spec(config)

        record_params = {p["name"]: p for p in spec["paths"]["/integrations/ext/record"]["get"]["parameters"]}
        assert record_params["teamid"]["required"] is True
        assert record_params["teamid"]["in"] == "query"
        assert record_params["X-AnyDB-API-Key"]["in"] == "header"

        create = spec["paths"]["/integrations/ext/createrecord"]["post"]
        assert create["requestBody"]["content"]["application/json"]["schema"]["required"] == ["adbid", "teamid", "name"]
        assert "security" not in spec

    def test_openapi_security_when_keyed(self, keyed_rest_client):
        spec = keyed_rest_client.get("/openapi.json").json()

        assert spec["components"]["securitySchemes"]["ApiKeyAuth"]["name"] == "X-REST-API-Key"
        assert spec["security"] == [{"ApiKeyAuth": []}]


class TestSurfaceParity:
    """MCP dispatch and REST routes give the same answers"""

    def test_same_validation_message(self, config, client, rest_client):
        dispatcher = ToolDispatcher(config, client)
        mcp_result = asyncio.run(dispatcher.dispatch("list_records", {"teamid": TEAM_ID}))

        rest_body = rest_client.get("/integrations/ext/list", params={"teamid": TEAM_ID}).json()

        assert rest_body == mcp_result.to_dict()

    def test_same_data(self, config, client, rest_client, backend):
        record = {"meta": {"adoid": RECORD_ID}, "content": {"Total": {"pos": "C1", "value": 12.5}}}
        backend.on("GET", api_path("record"), json_body=record)
        arguments = {"teamid": TEAM_ID, "adbid": DB_ID, "adoid": RECORD_ID}

        mcp_result = asyncio.run(ToolDispatcher(config, client).dispatch("get_record", arguments))
        rest_body = rest_client.get("/integrations/ext/record", params=arguments).json()

        assert rest_body == mcp_result.to_dict() == {"success": True, "data": record}
