"""
Shared pytest fixtures for plancost tests.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import pytest
from fastapi.testclient import TestClient
from plancost.core.config import EstimationDefaults
from plancost.domain.resource_data import ResourceData
from plancost.domain.usage_data import UsageData
from plancost.main import app


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def defaults():
    """Handler defaults matching the built-in configuration."""
    return EstimationDefaults()


@pytest.fixture
def make_resource():
    """Factory for ResourceData views."""
    def _make(resource_type, values=None, address=None):
        return ResourceData(address or f"{resource_type}.test", resource_type, values or {})
    return _make


@pytest.fixture
def make_usage():
    """Factory for UsageData views."""
    def _make(values, address="test"):
        return UsageData(address, values)
    return _make


@pytest.fixture
def key_vault():
    """Premium key vault in eastus."""
    return ResourceData(
        "azurerm_key_vault.vault",
        "azurerm_key_vault",
        {"location": "eastus", "sku_name": "premium"},
    )
