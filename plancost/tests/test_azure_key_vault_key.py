"""
Tests for Azure Key Vault key cost components.
"""

import logging
import pytest
from decimal import Decimal
from plancost.domain.resource_data import ResourceData
from plancost.providers.azure.key_vault_key import new_key_vault_key


def _meter(component):
    return next(a.value for a in component.catalog_filter.attribute_filters if a.key == "meterName")


def _sku(component):
    return next(a.value for a in component.catalog_filter.attribute_filters if a.key == "skuName")


@pytest.fixture
def make_key(key_vault):
    """Factory for keys linked to the premium vault."""
    def _make(key_type, key_size=None, vault=None):
        values = {"key_type": key_type}
        if key_size is not None:
            values["key_size"] = key_size
        key = ResourceData("azurerm_key_vault_key.key", "azurerm_key_vault_key", values)
        key.link_references("key_vault_id", [vault or key_vault])
        return key
    return _make


@pytest.fixture
def standard_vault():
    """Standard key vault in westeurope."""
    return ResourceData(
        "azurerm_key_vault.standard",
        "azurerm_key_vault",
        {"location": "westeurope", "sku_name": "standard"},
    )


def test_missing_vault_reference_is_skipped(defaults, caplog):
    """Keys without a linked vault have no location and are skipped."""
    key = ResourceData("azurerm_key_vault_key.key", "azurerm_key_vault_key", {"key_type": "RSA"})

    with caplog.at_level(logging.WARNING):
        result = new_key_vault_key(key, None, defaults)

    assert result is None
    assert "Could not find the location" in caplog.text


def test_rsa_2048_software_key(make_key, standard_vault, defaults):
    """RSA 2048 software keys use the standard operations meter."""
    result = new_key_vault_key(make_key("RSA", 2048, standard_vault), None, defaults)

    assert [c.name for c in result.cost_components] == [
        "Secrets operations",
        "Certificate operations",
        "Certificate operations",
        "Storage key rotation",
        "Software-protected keys",
    ]
    software = result.cost_components[-1]
    assert _meter(software) == "Operations"
    assert _sku(software) == "Standard"
    assert software.catalog_filter.region == "westeurope"
    assert software.catalog_filter.service == "Key Vault"
    assert software.price_filter.purchase_option == "Consumption"
    assert all(not c.has_quantity for c in result.cost_components)


def test_other_software_keys_use_advanced_operations(make_key, defaults):
    """Every other software key uses the advanced operations meter."""
    for key_type, key_size in [("RSA", 4096), ("EC", None)]:
        result = new_key_vault_key(make_key(key_type, key_size), None, defaults)
        assert _meter(result.cost_components[-1]) == "Advanced Key Operations"


def test_usage_quantities_are_scaled_to_units(make_key, make_usage, defaults):
    """Transaction counts are billed per 10K, renewals per request."""
    usage = make_usage({
        "monthly_secrets_operations": 15000,
        "monthly_certificate_renewal_requests": 3,
        "monthly_certificate_other_operations": 20000,
        "monthly_key_rotation_renewals": 2,
        "monthly_protected_keys_operations": 5000,
    })

    result = new_key_vault_key(make_key("RSA", 2048), usage, defaults)
    quantities = [c.monthly_quantity for c in result.cost_components]

    assert quantities == [Decimal("1.5"), Decimal(3), Decimal(2), Decimal(2), Decimal("0.5")]
    assert [c.unit for c in result.cost_components] == [
        "10K transactions", "renewals", "10K transactions", "renewals", "10K transactions",
    ]
    assert _meter(result.cost_components[1]) == "Certificate Renewal Request"
    assert _meter(result.cost_components[3]) == "Secret Renewal"


def test_hsm_key_on_standard_vault_has_no_key_components(make_key, standard_vault, defaults):
    """HSM keys are only billed on premium vaults."""
    result = new_key_vault_key(make_key("RSA-HSM", 2048, standard_vault), None, defaults)

    assert len(result.cost_components) == 4
    assert "HSM-protected keys" not in [c.name for c in result.cost_components]


def test_rsa_hsm_2048_is_not_tiered(make_key, make_usage, defaults):
    """RSA-HSM 2048 keys have a single flat component."""
    usage = make_usage({"hsm_protected_keys": 500})

    result = new_key_vault_key(make_key("RSA-HSM", 2048), usage, defaults)
    hsm = [c for c in result.cost_components if c.name.startswith("HSM-protected keys")]

    assert len(hsm) == 1
    assert hsm[0].name == "HSM-protected keys"
    assert hsm[0].unit == "months"
    assert hsm[0].monthly_quantity == Decimal(500)
    assert hsm[0].price_filter.start_usage_amount == "0"
    assert _meter(hsm[0]) == "Premium HSM-protected RSA 2048-bit key"


def test_advanced_hsm_keys_are_tiered(make_key, make_usage, defaults):
    """Advanced HSM keys are split across volume tiers; unused later tiers are omitted."""
    usage = make_usage({"hsm_protected_keys": 300})

    result = new_key_vault_key(make_key("EC-HSM"), usage, defaults)
    hsm = [c for c in result.cost_components if c.name.startswith("HSM-protected keys")]

    assert [c.name for c in hsm] == ["HSM-protected keys (first 250)", "HSM-protected keys (next 1250)"]
    assert [c.monthly_quantity for c in hsm] == [Decimal(250), Decimal(50)]
    assert [c.price_filter.start_usage_amount for c in hsm] == ["0", "250"]
    assert all(_meter(c) == "Premium HSM-protected Advanced Key" for c in hsm)


def test_advanced_hsm_keys_fill_every_tier(make_key, make_usage, defaults):
    """Large key counts reach the unbounded tier."""
    usage = make_usage({"hsm_protected_keys": 5000})

    result = new_key_vault_key(make_key("RSA-HSM", 4096), usage, defaults)
    hsm = [c for c in result.cost_components if c.name.startswith("HSM-protected keys")]

    assert [c.monthly_quantity for c in hsm] == [Decimal(250), Decimal(1250), Decimal(2500), Decimal(1000)]
    assert [c.price_filter.start_usage_amount for c in hsm] == ["0", "250", "1500", "4000"]
    assert hsm[-1].name == "HSM-protected keys (over 4000)"


def test_zero_hsm_keys_keeps_first_tier(make_key, make_usage, defaults):
    """The first tier is always shown, even at zero."""
    usage = make_usage({"hsm_protected_keys": 0})

    result = new_key_vault_key(make_key("EC-HSM"), usage, defaults)
    hsm = [c for c in result.cost_components if c.name.startswith("HSM-protected keys")]

    assert len(hsm) == 1
    assert hsm[0].monthly_quantity == Decimal(0)


def test_unknown_hsm_key_count(make_key, defaults):
    """Without usage the HSM key component has an unknown quantity and the key's meter."""
    result = new_key_vault_key(make_key("EC-HSM"), None, defaults)
    hsm = [c for c in result.cost_components if c.name.startswith("HSM-protected keys")]

    assert len(hsm) == 1
    assert hsm[0].monthly_quantity is None
    assert _meter(hsm[0]) == "Premium HSM-protected Advanced Key"


def test_hsm_key_operations(make_key, make_usage, defaults):
    """HSM key operations are billed per 10K transactions."""
    usage = make_usage({"hsm_protected_keys": 10, "monthly_protected_keys_operations": 20000})

    result = new_key_vault_key(make_key("EC-HSM"), usage, defaults)
    operations = result.cost_components[-1]

    assert operations.name == "HSM-protected keys"
    assert operations.unit == "10K transactions"
    assert operations.monthly_quantity == Decimal(2)
    assert _meter(operations) == "Advanced Key Operations"
    assert "Software-protected keys" not in [c.name for c in result.cost_components]


def test_negative_hsm_key_count_is_treated_as_unknown(make_key, make_usage, defaults, caplog):
    """A negative key count is ignored with a warning instead of failing the resource."""
    usage = make_usage({"hsm_protected_keys": -5})

    with caplog.at_level(logging.WARNING):
        result = new_key_vault_key(make_key("EC-HSM"), usage, defaults)
    hsm = [c for c in result.cost_components if c.name.startswith("HSM-protected keys")]

    assert len(hsm) == 1
    assert hsm[0].monthly_quantity is None
    assert "hsm_protected_keys" in caplog.text
    assert "negative" in caplog.text


def test_non_numeric_usage_is_treated_as_unknown(make_key, make_usage, defaults, caplog):
    """Usage values that are not numbers are ignored with a warning naming the key."""
    usage = make_usage({"monthly_secrets_operations": "lots"})

    with caplog.at_level(logging.WARNING):
        result = new_key_vault_key(make_key("RSA", 2048), usage, defaults)

    assert result.cost_components[0].monthly_quantity is None
    assert "monthly_secrets_operations" in caplog.text
    assert "'lots'" in caplog.text
