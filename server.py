"""
MCP Server Entry Point for AnyDB
Run with: python server.py            (stdio, for MCP clients)
          python server.py --rest     (REST surface, for HTTP clients)
"""

import asyncio
import json
import logging
import sys
from typing import Any, Optional

from mcp.server.models import InitializationOptions
from mcp.server import NotificationOptions, Server
from mcp.server.stdio import stdio_server
from mcp import types

from config import AnyDBConfig, SERVER_NAME, SERVER_VERSION, get_environment_mode, create_env_file
from dispatcher import ToolDispatcher
from gateway import AnyDBClient
from prompts import USAGE_GUIDE_FILE, load_prompt

__version__ = SERVER_VERSION

logger = logging.getLogger(__name__)

# Initialize server
app = Server(SERVER_NAME)
config: Optional[AnyDBConfig] = None
dispatcher: Optional[ToolDispatcher] = None

USAGE_GUIDE_PROMPT = "anydb_usage_guide"


def init_server(server_config: AnyDBConfig, client: Optional[AnyDBClient] = None) -> ToolDispatcher:
    """Build the dispatcher used by the MCP handlers"""
    global config, dispatcher
    config = server_config
    dispatcher = ToolDispatcher(server_config, client or AnyDBClient(server_config))
    return dispatcher


@app.list_tools()
async def handle_list_tools() -> list[types.Tool]:
    """List every AnyDB tool"""
    from tools import get_tool_catalog
    return get_tool_catalog()


@app.list_prompts()
async def handle_list_prompts() -> list[types.Prompt]:
    """List available prompts - usage instructions for the LLM"""
    return [
        types.Prompt(
            name=USAGE_GUIDE_PROMPT,
            description="How AnyDB is organised (teams, databases, records, cells) and how to chain the tools, including the download and three-step upload workflows. Read this first.",
            arguments=[]
        )
    ]


@app.get_prompt()
async def handle_get_prompt(
    name: str, arguments: dict[str, Any] | None
) -> types.GetPromptResult:
    """Get prompt content"""
    if name != USAGE_GUIDE_PROMPT:
        raise ValueError(f"Unknown prompt: {name}")

    text = load_prompt(USAGE_GUIDE_FILE)
    if text is None:
        logger.warning(f"Instruction file not found: {USAGE_GUIDE_FILE}")
        text = f"ERROR: Usage guide ({USAGE_GUIDE_FILE}) not found in prompts/."
        description = "Usage guide not found"
    else:
        description = "AnyDB - Usage Guide"

    return types.GetPromptResult(
        description=description,
        messages=[
            types.PromptMessage(
                role="user",
                content=types.TextContent(type="text", text=text)
            )
        ]
    )


@app.call_tool(validate_input=False)
async def handle_call_tool(
    name: str, arguments: dict[str, Any]
) -> list[types.TextContent] | types.CallToolResult:
    """
    Handle tool execution.

    Arguments are validated by the dispatcher so MCP and REST callers get the
    same messages. The stdio surface always uses the configured default
    credentials.
    """
    if dispatcher is None:
        raise RuntimeError("Server not initialized")

    result = await dispatcher.dispatch(name, arguments)

    if result.success:
        return [types.TextContent(
            type="text",
            text=json.dumps(result.data, indent=2)
        )]

    return types.CallToolResult(
        content=[types.TextContent(type="text", text=f"Error: {result.error}")],
        isError=True,
    )


async def main():
    """Main entry point for MCP server"""
    try:
        server_config = AnyDBConfig.from_environment()
        logging.getLogger().setLevel(server_config.log_level)

        if server_config.default_credentials is None:
            logger.error(
                "ANYDB_DEFAULT_API_KEY and ANYDB_DEFAULT_USER_EMAIL must be set for stdio mode"
            )
            sys.exit(1)

        init_server(server_config)

        logger.info("AnyDB MCP Server starting...")
        logger.info(f"Environment: {get_environment_mode()}")
        logger.info(f"Backend: {server_config.api_base_url}")
        logger.info(f"API Key: {server_config.default_credentials.masked_key}")

        async with stdio_server() as (read_stream, write_stream):
            await app.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=server_config.server_name,
                    server_version=server_config.server_version,
                    capabilities=app.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={}
                    )
                )
            )
    except Exception as e:
        logger.error(f"Failed to start MCP server: {e}", exc_info=True)
        raise


def cli_entry():
    """Entry point for console script - wraps async main()"""
    import argparse

    parser = argparse.ArgumentParser(description="AnyDB MCP Server")
    parser.add_argument('--version', '-v', action='store_true', help='Show version')
    parser.add_argument('--rest', action='store_true', help='Run the REST surface instead of stdio')
    parser.add_argument('--port', type=int, default=None, help='Port for REST mode (default: REST_API_PORT or 3001)')
    parser.add_argument('--host', type=str, default=None, help='Host for REST mode (default: REST_API_HOST or 127.0.0.1)')
    parser.add_argument('--init-env', action='store_true', help='Write a template .env file and exit')

    args = parser.parse_args()

    # Logs go to stderr; stdout carries JSON-RPC in stdio mode
    logging.basicConfig(level=logging.INFO)

    if args.version:
        print(f"{SERVER_NAME} version {__version__}")
        sys.exit(0)

    if args.init_env:
        create_env_file()
        sys.exit(0)

    if args.rest:
        server_config = AnyDBConfig.from_environment()
        if args.host:
            server_config.rest_host = args.host
        if args.port:
            server_config.rest_port = args.port
        logging.getLogger().setLevel(server_config.log_level)

        logger.info(f"Starting in REST mode on {server_config.rest_host}:{server_config.rest_port}")
        from transport.rest import run_rest_server
        run_rest_server(server_config)
    else:
        # Default: stdio mode
        logger.info("Starting in stdio mode...")
        asyncio.run(main())


if __name__ == "__main__":
    cli_entry()
