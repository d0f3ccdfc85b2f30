"""
Tests for Azure managed disk cost components.
"""

import logging
import pytest
from decimal import Decimal
from plancost.providers.azure.managed_disk import map_disk_tier, new_managed_disk


def _attributes(component):
    return {a.key: a.value for a in component.catalog_filter.attribute_filters}


def _disk(make_resource, storage_account_type, size, location="eastus"):
    values = {"storage_account_type": storage_account_type, "disk_size_gb": size}
    if location:
        values["location"] = location
    return make_resource("azurerm_managed_disk", values)


@pytest.mark.parametrize("prefix,size,tier", [
    ("Premium", 1, "P1"),
    ("Premium", 128, "P10"),
    ("Premium", 129, "P15"),
    ("Standard", 32, "S4"),
    ("Standard", 33, "S6"),
    ("StandardSSD", 32767, "E80"),
])
def test_disk_tier_mapping(prefix, size, tier):
    """Sizes map to the smallest tier that fits."""
    assert map_disk_tier(prefix, Decimal(size)) == tier


def test_oversized_disk_has_no_tier():
    """Sizes above the largest tier cannot be mapped."""
    assert map_disk_tier("Premium", Decimal(40000)) is None


def test_premium_disk_storage(make_resource, defaults):
    """Premium disks are billed per month for their tier."""
    result = new_managed_disk(_disk(make_resource, "Premium_LRS", 100), None, defaults)

    assert len(result.cost_components) == 1
    storage = result.cost_components[0]
    assert storage.name == "Storage (P10 LRS)"
    assert storage.unit == "months"
    assert storage.monthly_quantity == Decimal(1)
    assert storage.catalog_filter.region == "eastus"
    assert _attributes(storage) == {
        "productName": "Premium SSD Managed Disks",
        "skuName": "P10 LRS",
        "meterName": "P10 Disks",
    }


def test_standard_disk_operations(make_resource, make_usage, defaults):
    """Standard disks also bill disk operations per 10K."""
    usage = make_usage({"monthly_disk_operations": 50000})

    result = new_managed_disk(_disk(make_resource, "StandardSSD_ZRS", 4), usage, defaults)
    storage, operations = result.cost_components

    assert storage.name == "Storage (E1 ZRS)"
    assert operations.name == "Disk operations"
    assert operations.unit == "10K operations"
    assert operations.monthly_quantity == Decimal(5)
    assert _attributes(operations)["meterName"] == "Disk Operations"


def test_disk_operations_unknown_without_usage(make_resource, defaults):
    """Disk operations stay unknown without usage data."""
    result = new_managed_disk(_disk(make_resource, "Standard_LRS", 100), None, defaults)

    assert result.cost_components[1].monthly_quantity is None


@pytest.mark.parametrize("storage_account_type,size,message", [
    ("UltraSSD_LRS", 100, "Ultra SSD"),
    ("Premium_LRS", 40000, "Could not map"),
    ("Archive_LRS", 100, "Unrecognized storage account type"),
])
def test_unpriceable_disks_are_skipped(make_resource, defaults, caplog, storage_account_type, size, message):
    """Disks that cannot be mapped to a SKU are skipped with a warning."""
    with caplog.at_level(logging.WARNING):
        result = new_managed_disk(_disk(make_resource, storage_account_type, size), None, defaults)

    assert result is None
    assert message in caplog.text


def test_missing_location_or_size_is_skipped(make_resource, defaults):
    """Location and size are required."""
    assert new_managed_disk(_disk(make_resource, "Premium_LRS", 100, location=None), None, defaults) is None
    assert new_managed_disk(
        make_resource("azurerm_managed_disk", {"location": "eastus", "storage_account_type": "Premium_LRS"}),
        None,
        defaults,
    ) is None


@pytest.mark.parametrize("size", ["NaN", "Infinity"])
def test_non_finite_disk_size_is_skipped(make_resource, defaults, caplog, size):
    """Disk sizes that are not finite numbers are treated as missing."""
    with caplog.at_level(logging.WARNING):
        result = new_managed_disk(_disk(make_resource, "Premium_LRS", size), None, defaults)

    assert result is None
    assert "Could not find the disk size" in caplog.text
