"""
Tests for loading resource and usage input.
"""

import pytest
from plancost.providers.registry import default_registry
from plancost.services.resource_loader import ResourceLoaderError, load_resources, load_usage


@pytest.fixture
def registry():
    """Default registry."""
    return default_registry()


def test_resources_loaded_in_order(registry):
    """Views are returned in input order."""
    resources = load_resources([
        {"address": "aws_instance.b", "type": "aws_instance", "values": {"instance_type": "m5.large"}},
        {"address": "aws_instance.a", "type": "aws_instance"},
    ], registry)

    assert [r.address for r in resources] == ["aws_instance.b", "aws_instance.a"]
    assert resources[0].get("instance_type").string() == "m5.large"
    assert not resources[1].exists("instance_type")


def test_references_linked_forward_and_backward(registry):
    """Declared reference attributes are linked regardless of input order."""
    resources = load_resources([
        {
            "address": "azurerm_key_vault_key.key",
            "type": "azurerm_key_vault_key",
            "values": {"key_type": "RSA"},
            "references": {"key_vault_id": ["azurerm_key_vault.vault"]},
        },
        {"address": "azurerm_key_vault.vault", "type": "azurerm_key_vault", "values": {"location": "eastus"}},
    ], registry)

    key, vault = resources
    assert key.references("key_vault_id") == (vault,)


def test_undeclared_reference_attributes_ignored(registry):
    """Only attributes the type declares are linked."""
    resources = load_resources([
        {"address": "aws_vpc.main", "type": "aws_vpc"},
        {
            "address": "aws_instance.web",
            "type": "aws_instance",
            "references": {"vpc_id": ["aws_vpc.main"]},
        },
    ], registry)

    assert resources[1].references("vpc_id") == ()


def test_unknown_reference_targets_dropped(registry):
    """References to addresses not in the input are dropped."""
    resources = load_resources([{
        "address": "azurerm_key_vault_key.key",
        "type": "azurerm_key_vault_key",
        "references": {"key_vault_id": ["azurerm_key_vault.missing"]},
    }], registry)

    assert resources[0].references("key_vault_id") == ()


def test_duplicate_addresses_rejected(registry):
    """Addresses must be unique."""
    with pytest.raises(ResourceLoaderError, match="Duplicate"):
        load_resources([
            {"address": "aws_instance.web", "type": "aws_instance"},
            {"address": "aws_instance.web", "type": "aws_instance"},
        ], registry)


@pytest.mark.parametrize("raw", [
    {"type": "aws_instance"},
    {"address": "aws_instance.web"},
    {"address": "aws_instance.web", "type": "aws_instance", "values": ["not", "a", "mapping"]},
    "aws_instance.web",
])
def test_malformed_resources_rejected(registry, raw):
    """Resources need an address, a type and mapping values."""
    with pytest.raises(ResourceLoaderError):
        load_resources([raw], registry)


def test_load_usage():
    """Usage entries become views keyed by address."""
    usage = load_usage({"aws_instance.web": {"operating_system": "windows"}, "aws_ebs_volume.data": None})

    assert usage["aws_instance.web"].get("operating_system").string() == "windows"
    assert not usage["aws_ebs_volume.data"].exists("monthly_standard_io_requests")
    assert load_usage(None) == {}


def test_load_usage_rejects_non_mapping():
    """Each usage entry must be an object."""
    with pytest.raises(ResourceLoaderError):
        load_usage({"aws_instance.web": 42})
