"""
REST transport for AnyDB tools.

Exposes every catalog tool as a plain HTTP route for clients that do not
speak MCP (e.g. ChatGPT actions):
- One route per tool, method and path taken from tools.get_rest_routes()
- GET routes read query parameters, POST/PUT routes read a JSON object body
- Responses use the envelope {"success": true, "data": ...} or
  {"success": false, "error": ..., "kind": ..., "details": [...]}
- /openapi.json: OpenAPI 3.1 document generated from the same catalog
- /healthz: health check (does not contact the backend)

Calls go through the same ToolDispatcher as the MCP server, so validation,
backend requests and error messages are identical on both surfaces.
"""

import json
import logging
import secrets
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from mcp import types
from starlette.status import (
    HTTP_200_OK,
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_500_INTERNAL_SERVER_ERROR,
)
import uvicorn

from config import AnyDBConfig
from dispatcher import ToolDispatcher, ToolResult
from gateway import AnyDBClient
from models import Credentials
from tools import get_tool_catalog, get_rest_routes
from utils.errors import AnyDBError, ErrorKind
from utils.validation import coerce_query_params

logger = logging.getLogger(__name__)

SERVICE_KEY_HEADER = "X-REST-API-Key"
ANYDB_KEY_HEADER = "X-AnyDB-API-Key"
ANYDB_EMAIL_HEADER = "X-AnyDB-Email"

CALLER_ERROR_KINDS = (ErrorKind.VALIDATION, ErrorKind.UNKNOWN_OPERATION)


def status_for(result: ToolResult) -> int:
    """
    HTTP status for a dispatch outcome.

    400: bad arguments, unknown tool, or credentials missing before any
    backend call. 500: anything the backend or the network rejected,
    including a backend 401/403 (the envelope still carries kind "auth").
    401 is only returned by ServiceKeyMiddleware.
    """
    if result.success:
        return HTTP_200_OK
    if result.kind in CALLER_ERROR_KINDS:
        return HTTP_400_BAD_REQUEST
    if result.kind == ErrorKind.AUTH and result.status is None:
        return HTTP_400_BAD_REQUEST
    return HTTP_500_INTERNAL_SERVER_ERROR


def extract_credentials(request: Request) -> Credentials:
    """
    Read AnyDB credentials from request headers.

    The key comes from X-AnyDB-API-Key, else from "Authorization: Bearer <key>".
    Missing fields are filled from the configured defaults by the dispatcher.
    """
    api_key = request.headers.get(ANYDB_KEY_HEADER)
    if not api_key:
        authorization = request.headers.get("authorization", "")
        if authorization.lower().startswith("bearer "):
            api_key = authorization[len("bearer "):].strip()
    user_email = request.headers.get(ANYDB_EMAIL_HEADER)
    return Credentials(api_key=api_key or None, user_email=user_email or None)


async def read_arguments(request: Request, tool: types.Tool, method: str) -> dict[str, Any]:
    """Collect tool arguments from the query string (GET) or JSON body (POST/PUT)"""
    if method == "GET":
        return coerce_query_params(tool, dict(request.query_params))

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except ValueError as e:
        raise AnyDBError(
            ErrorKind.VALIDATION,
            f"Invalid JSON body: {e}",
            operation=tool.name,
        ) from e
    if not isinstance(body, dict):
        raise AnyDBError(
            ErrorKind.VALIDATION,
            "Request body must be a JSON object",
            operation=tool.name,
        )
    return body


# ============================================================================
# OpenAPI
# ============================================================================

def _query_parameters(tool: types.Tool) -> list[dict[str, Any]]:
    schema = tool.inputSchema
    required = set(schema.get("required", []))
    parameters = []
    for name, prop in schema.get("properties", {}).items():
        param_schema = {"type": prop.get("type", "string")}
        if "enum" in prop:
            param_schema["enum"] = prop["enum"]
        parameters.append({
            "name": name,
            "in": "query",
            "required": name in required,
            "description": prop.get("description", ""),
            "schema": param_schema,
        })
    return parameters


def _credential_headers() -> list[dict[str, Any]]:
    return [
        {
            "name": ANYDB_KEY_HEADER,
            "in": "header",
            "required": False,
            "description": "AnyDB API key. Falls back to the server's default key.",
            "schema": {"type": "string"},
        },
        {
            "name": ANYDB_EMAIL_HEADER,
            "in": "header",
            "required": False,
            "description": "AnyDB user email. Falls back to the server's default email.",
            "schema": {"type": "string"},
        },
    ]


def _error_responses() -> dict[str, Any]:
    ref = {"application/json": {"schema": {"$ref": "#/components/schemas/ErrorResponse"}}}
    return {
        "400": {"description": "Invalid arguments or missing AnyDB credentials", "content": ref},
        "401": {"description": "Missing or invalid REST API key", "content": ref},
        "500": {"description": "Backend, credential rejection or transport failure", "content": ref},
    }


def build_openapi_spec(config: AnyDBConfig) -> dict[str, Any]:
    """Generate the OpenAPI 3.1 document from the tool catalog"""
    routes = get_rest_routes()
    paths: dict[str, Any] = {}

    for tool in get_tool_catalog():
        method, path = routes[tool.name]
        operation: dict[str, Any] = {
            "operationId": tool.name,
            "summary": tool.name.replace("_", " ").capitalize(),
            "description": tool.description,
            "parameters": _credential_headers(),
            "responses": {
                "200": {
                    "description": "Backend response",
                    "content": {"application/json": {"schema": {"$ref": "#/components/schemas/SuccessResponse"}}},
                },
                **_error_responses(),
            },
        }
        if method == "GET":
            operation["parameters"] = _query_parameters(tool) + operation["parameters"]
        else:
            operation["requestBody"] = {
                "required": True,
                "content": {"application/json": {"schema": tool.inputSchema}},
            }
        paths.setdefault(path, {})[method.lower()] = operation

    spec: dict[str, Any] = {
        "openapi": "3.1.0",
        "info": {
            "title": "AnyDB REST API",
            "version": config.server_version,
            "description": "REST access to AnyDB teams, databases, records and files. Mirrors the tools of the AnyDB MCP server.",
        },
        "servers": [{"url": config.public_url or f"http://{config.rest_host}:{config.rest_port}"}],
        "paths": paths,
        "components": {
            "schemas": {
                "SuccessResponse": {
                    "type": "object",
                    "properties": {
                        "success": {"type": "boolean", "const": True},
                        "data": {"description": "Backend response, relayed unchanged"},
                    },
                    "required": ["success"],
                },
                "ErrorResponse": {
                    "type": "object",
                    "properties": {
                        "success": {"type": "boolean", "const": False},
                        "error": {"type": "string"},
                        "kind": {"type": "string", "enum": [kind.value for kind in ErrorKind]},
                        "details": {"type": "array", "items": {"type": "object"}},
                    },
                    "required": ["success", "error"],
                },
            },
        },
    }

    if config.rest_api_key:
        spec["components"]["securitySchemes"] = {
            "ApiKeyAuth": {"type": "apiKey", "in": "header", "name": SERVICE_KEY_HEADER}
        }
        spec["security"] = [{"ApiKeyAuth": []}]

    return spec


# ============================================================================
# Middleware
# ============================================================================

class ServiceKeyMiddleware(BaseHTTPMiddleware):
    """
    Shared-key authentication for the REST surface.

    Accepted via:
      - Header: X-REST-API-Key: <key>

    Excluded paths (no key required): /healthz, /openapi.json, and CORS
    preflight requests. Not installed at all when no key is configured.
    """

    EXCLUDED_PATHS = ("/healthz", "/openapi.json")

    def __init__(self, app, api_key: str):
        super().__init__(app)
        self.api_key = api_key

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS" or request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        key = request.headers.get(SERVICE_KEY_HEADER, "")
        if not secrets.compare_digest(key, self.api_key):
            logger.warning(f"Rejected {request.method} {request.url.path}: invalid REST API key")
            return JSONResponse(
                status_code=HTTP_401_UNAUTHORIZED,
                content={"success": False, "error": "Unauthorized - Invalid REST API key"},
            )
        return await call_next(request)


# ============================================================================
# Application
# ============================================================================

def create_rest_app(
    config: AnyDBConfig,
    client: Optional[AnyDBClient] = None,
    dispatcher: Optional[ToolDispatcher] = None,
) -> FastAPI:
    """
    Build the REST application.

    Args:
        config: Process configuration
        client: Gateway client (built from config when omitted)
        dispatcher: Tool dispatcher (built from config and client when omitted)
    """
    if dispatcher is None:
        dispatcher = ToolDispatcher(config, client or AnyDBClient(config))

    app = FastAPI(
        title="AnyDB REST API",
        version=config.server_version,
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
    )

    if config.rest_api_key:
        app.add_middleware(ServiceKeyMiddleware, api_key=config.rest_api_key)

    # Outermost: CORS headers also reach 401 responses
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )

    routes = get_rest_routes()
    for tool in get_tool_catalog():
        method, path = routes[tool.name]
        app.add_api_route(
            path,
            _make_endpoint(tool, method, dispatcher),
            methods=[method],
            name=tool.name,
        )

    openapi_spec = build_openapi_spec(config)

    @app.get("/openapi.json")
    async def openapi_document():
        return JSONResponse(content=openapi_spec)

    @app.get("/healthz")
    async def health_check():
        """Health check endpoint"""
        return JSONResponse(content={"status": "healthy", "backend": config.api_base_url})

    return app


def _make_endpoint(tool: types.Tool, method: str, dispatcher: ToolDispatcher):
    async def endpoint(request: Request) -> JSONResponse:
        try:
            arguments = await read_arguments(request, tool, method)
        except AnyDBError as e:
            result = ToolResult.failed(e)
        else:
            result = await dispatcher.dispatch(tool.name, arguments, extract_credentials(request))
        return JSONResponse(status_code=status_for(result), content=result.to_dict())

    endpoint.__name__ = f"rest_{tool.name}"
    return endpoint


def run_rest_server(config: AnyDBConfig):
    """
    Run the REST surface with uvicorn.

    Args:
        config: Process configuration (rest_host / rest_port give the bind address)
    """
    app = create_rest_app(config)
    logger.info(f"AnyDB REST API starting on http://{config.rest_host}:{config.rest_port}")
    logger.info(f"Backend: {config.api_base_url}")
    if not config.rest_api_key:
        logger.warning("REST_API_KEY not set - REST endpoints are open to any caller")
    uvicorn.run(app, host=config.rest_host, port=config.rest_port, log_level=config.log_level.lower())
