"""
Pytest configuration and shared fixtures for AnyDB MCP Server tests

APPROACH: Stand in for the AnyDB backend with httpx.MockTransport
- The real AnyDBClient and ToolDispatcher are used unchanged
- Every outbound request is recorded so tests can assert on exactly what was sent
- No network access and no running backend needed
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config import AnyDBConfig
from dispatcher import ToolDispatcher
from gateway import AnyDBClient

from tests.backend_test_utils import MockBackend, TEST_API_URL, TEST_API_KEY, TEST_EMAIL


@pytest.fixture
def config():
    """Configuration with default credentials (single-tenant mode)"""
    return AnyDBConfig(
        api_base_url=TEST_API_URL,
        default_api_key=TEST_API_KEY,
        default_user_email=TEST_EMAIL,
    )


@pytest.fixture
def bare_config():
    """Configuration without default credentials"""
    return AnyDBConfig(api_base_url=TEST_API_URL)


@pytest.fixture
def backend():
    return MockBackend()


@pytest.fixture
def client(config, backend):
    return AnyDBClient(config, transport=backend.transport)


@pytest.fixture
def dispatcher(config, client):
    return ToolDispatcher(config, client)


@pytest.fixture
def bare_dispatcher(bare_config, backend):
    return ToolDispatcher(bare_config, AnyDBClient(bare_config, transport=backend.transport))


@pytest.fixture
def credentials(config):
    return config.default_credentials
