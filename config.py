"""
Configuration for the AnyDB MCP Server
Environment-aware configuration based on APP_ENV

The configuration is built once at process start (AnyDBConfig.from_environment)
and passed into the gateway client, dispatcher and REST app. Request handling
code never reads environment variables directly.
"""

import os
from dataclasses import dataclass
from typing import Optional, Literal
from pathlib import Path
from dotenv import load_dotenv

from models import Credentials

SERVER_NAME = "anydb-mcp-server"
SERVER_VERSION = "1.0.0"

DEFAULT_API_BASE_URL = "http://localhost:3000/api"
DEFAULT_REQUEST_TIMEOUT = 30.0  # seconds

# Environment modes
EnvironmentMode = Literal["development", "test", "production"]


def load_app_environment(mode: Optional[str] = None) -> str:
    """
    Load environment variables from the appropriate .env file.

    Priority:
    1. Explicit 'mode' argument
    2. APP_ENV environment variable
    3. Default to 'development'

    Loads .env.{mode} if it exists, falling back to .env
    """
    if not mode:
        mode = os.getenv('APP_ENV', 'development')

    base_path = Path(__file__).parent
    env_file = base_path / f'.env.{mode}'

    # override=False lets variables from the host (e.g. an MCP client config)
    # take precedence over .env file values.
    if env_file.exists():
        load_dotenv(env_file, override=False)
    else:
        load_dotenv(base_path / '.env', override=False)

    return mode


def _optional(name: str, fallback: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        value = os.getenv(fallback) if fallback else None
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass
class AnyDBConfig:
    """AnyDB backend and server configuration"""

    api_base_url: str = DEFAULT_API_BASE_URL

    # Optional single-tenant fallback credentials
    default_api_key: Optional[str] = None
    default_user_email: Optional[str] = None

    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    # REST surface
    rest_api_key: Optional[str] = None
    rest_host: str = "127.0.0.1"
    rest_port: int = 3001
    public_url: Optional[str] = None

    log_level: str = "INFO"

    server_name: str = SERVER_NAME
    server_version: str = SERVER_VERSION

    def __post_init__(self):
        self.api_base_url = self.api_base_url.rstrip('/')
        if not self.api_base_url.startswith(('http://', 'https://')):
            raise ValueError(f"ANYDB_API_URL must be an http(s) URL, got '{self.api_base_url}'")
        if self.request_timeout <= 0:
            raise ValueError(f"ANYDB_REQUEST_TIMEOUT must be positive, got {self.request_timeout}")

    @property
    def default_credentials(self) -> Optional[Credentials]:
        """Process-wide credentials, or None when single-tenant mode is not configured"""
        if self.default_api_key and self.default_user_email:
            return Credentials(self.default_api_key, self.default_user_email)
        return None

    @classmethod
    def from_environment(cls, mode: Optional[EnvironmentMode] = None) -> 'AnyDBConfig':
        """
        Load configuration from environment variables

        Environment variables:
        - APP_ENV: Environment mode (development, test, production)
        - ANYDB_API_URL: Backend API base URL (default: http://localhost:3000/api)
        - ANYDB_DEFAULT_API_KEY / ANYDB_DEFAULT_USER_EMAIL: Fallback credentials
        - ANYDB_REQUEST_TIMEOUT: Backend request timeout in seconds (default: 30)
        - REST_API_KEY (or CHATGPT_API_KEY): Key required by the REST surface
        - REST_API_HOST / REST_API_PORT: REST bind address (default: 127.0.0.1:3001)
        - REST_PUBLIC_URL: Public URL advertised in the OpenAPI document
        - LOG_LEVEL: Logging level (default: INFO)

        Args:
            mode: Override environment mode (default: reads from APP_ENV)
        """
        load_app_environment(mode)

        return cls(
            api_base_url=os.getenv('ANYDB_API_URL', DEFAULT_API_BASE_URL),
            default_api_key=_optional('ANYDB_DEFAULT_API_KEY'),
            default_user_email=_optional('ANYDB_DEFAULT_USER_EMAIL'),
            request_timeout=float(os.getenv('ANYDB_REQUEST_TIMEOUT', str(DEFAULT_REQUEST_TIMEOUT))),
            rest_api_key=_optional('REST_API_KEY', fallback='CHATGPT_API_KEY'),
            rest_host=os.getenv('REST_API_HOST', '127.0.0.1'),
            rest_port=int(os.getenv('REST_API_PORT', '3001')),
            public_url=_optional('REST_PUBLIC_URL'),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        )


# Utility functions
def get_environment_mode() -> EnvironmentMode:
    """Get current environment mode from APP_ENV variable"""
    mode = os.getenv('APP_ENV', 'development').lower()
    if mode not in ('development', 'test', 'production'):
        mode = 'development'
    return mode  # type: ignore


# Example .env file content
ENV_TEMPLATE = """
# Application Environment
# Options: development, test, production
APP_ENV=development

# AnyDB backend
ANYDB_API_URL=http://localhost:3000/api
ANYDB_REQUEST_TIMEOUT=30

# Default credentials (required for stdio mode, optional for REST mode)
ANYDB_DEFAULT_API_KEY=your_api_key_here
ANYDB_DEFAULT_USER_EMAIL=you@example.com

# REST surface
REST_API_HOST=127.0.0.1
REST_API_PORT=3001
# REST_API_KEY=shared_secret_for_rest_clients
# REST_PUBLIC_URL=https://anydb-mcp.example.com

LOG_LEVEL=INFO
"""


def create_env_file(filepath: str = ".env"):
    """Create a template .env file"""
    with open(filepath, 'w') as f:
        f.write(ENV_TEMPLATE)
    print(f"Created template .env file at {filepath}")
