"""
Cost components for Azure managed disks (azurerm_managed_disk).
"""
import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from plancost.core.config import EstimationDefaults
from plancost.domain.cost_models import AttributeFilter, CatalogFilter, CostComponent, PriceFilter, Resource
from plancost.domain.pricing_options import PurchaseOption
from plancost.domain.resource_data import ResourceData
from plancost.domain.usage_data import UsageData
from plancost.providers.helpers import per_block, usage_quantity


logger = logging.getLogger(__name__)


# Disk tiers per storage prefix, smallest first: (tier name, max size in GiB)
DISK_SIZE_TIERS = {
    "Standard": [
        ("S4", 32), ("S6", 64), ("S10", 128), ("S15", 256), ("S20", 512), ("S30", 1024),
        ("S40", 2048), ("S50", 4096), ("S60", 8192), ("S70", 16384), ("S80", 32767),
    ],
    "StandardSSD": [
        ("E1", 4), ("E2", 8), ("E3", 16), ("E4", 32), ("E6", 64), ("E10", 128), ("E15", 256),
        ("E20", 512), ("E30", 1024), ("E40", 2048), ("E50", 4096), ("E60", 8192),
        ("E70", 16384), ("E80", 32767),
    ],
    "Premium": [
        ("P1", 4), ("P2", 8), ("P3", 16), ("P4", 32), ("P6", 64), ("P10", 128), ("P15", 256),
        ("P20", 512), ("P30", 1024), ("P40", 2048), ("P50", 4096), ("P60", 8192),
        ("P70", 16384), ("P80", 32767),
    ],
}

PRODUCT_NAMES = {
    "Standard": "Standard HDD Managed Disks",
    "StandardSSD": "Standard SSD Managed Disks",
    "Premium": "Premium SSD Managed Disks",
}

DISK_OPERATIONS_BLOCK = 10000


def map_disk_tier(storage_prefix: str, disk_size_gb: Decimal) -> Optional[str]:
    """Smallest disk tier that fits the requested size, or None."""
    for tier_name, max_size in DISK_SIZE_TIERS.get(storage_prefix, []):
        if disk_size_gb <= max_size:
            return tier_name
    return None


def _split_storage_account_type(storage_account_type: str) -> Tuple[str, str]:
    prefix, _, replication = storage_account_type.partition("_")
    return prefix, replication.upper()


def managed_disk_cost_components(
    address: str,
    location: str,
    storage_account_type: str,
    disk_size_gb: Decimal,
    u: Optional[UsageData],
) -> Optional[List[CostComponent]]:
    """
    Build managed disk cost components.

    Returns None (after logging a warning) when the disk cannot be priced.
    """
    prefix, replication = _split_storage_account_type(storage_account_type)

    if prefix == "UltraSSD":
        logger.warning(
            "Skipping resource %s. Ultra SSD managed disks are not supported.", address
        )
        return None

    if prefix not in PRODUCT_NAMES or not replication:
        logger.warning(
            "Skipping resource %s. Unrecognized storage account type %s.", address, storage_account_type
        )
        return None

    tier_name = map_disk_tier(prefix, disk_size_gb)
    if tier_name is None:
        logger.warning(
            "Skipping resource %s. Could not map disk type %s and size %s to a disk tier.",
            address,
            storage_account_type,
            disk_size_gb,
        )
        return None

    product_name = PRODUCT_NAMES[prefix]
    sku_name = f"{tier_name} {replication}"

    def catalog_filter(meter_name: str) -> CatalogFilter:
        return CatalogFilter(
            vendor_name="azure",
            region=location,
            service="Storage",
            product_family="Storage",
            attribute_filters=[
                AttributeFilter(key="productName", value=product_name),
                AttributeFilter(key="skuName", value=sku_name),
                AttributeFilter(key="meterName", value=meter_name),
            ],
        )

    components = [
        CostComponent(
            name=f"Storage ({sku_name})",
            unit="months",
            monthly_quantity=Decimal(1),
            catalog_filter=catalog_filter(f"{tier_name} Disks"),
            price_filter=PriceFilter(purchase_option=PurchaseOption.CONSUMPTION.value),
        )
    ]

    if prefix in ("Standard", "StandardSSD"):
        components.append(CostComponent(
            name="Disk operations",
            unit="10K operations",
            monthly_quantity=per_block(usage_quantity(u, "monthly_disk_operations"), DISK_OPERATIONS_BLOCK),
            catalog_filter=catalog_filter("Disk Operations"),
            price_filter=PriceFilter(purchase_option=PurchaseOption.CONSUMPTION.value),
        ))

    return components


def new_managed_disk(d: ResourceData, u: Optional[UsageData], defaults: EstimationDefaults) -> Optional[Resource]:
    """Handler for azurerm_managed_disk."""
    location = d.get("location").string()
    if not location:
        logger.warning(
            "Skipping resource %s. Could not find the location for this resource.", d.address
        )
        return None

    disk_size_gb = d.get("disk_size_gb").decimal()
    if disk_size_gb is None:
        logger.warning(
            "Skipping resource %s. Could not find the disk size for this resource.", d.address
        )
        return None

    cost_components = managed_disk_cost_components(
        d.address,
        location,
        d.get("storage_account_type").string(),
        disk_size_gb,
        u,
    )
    if cost_components is None:
        return None

    return Resource(
        name=d.address,
        resource_type=d.type,
        cost_components=cost_components,
    )
