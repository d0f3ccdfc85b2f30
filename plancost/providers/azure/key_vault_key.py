"""
Cost components for Azure Key Vault keys (azurerm_key_vault_key).

The vault's location and SKU come from the key_vault_id reference. Key
operations are billed per 10K transactions; HSM-protected keys on Premium
vaults are also billed per key per month, in volume tiers.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from plancost.core.config import EstimationDefaults
from plancost.domain.cost_models import AttributeFilter, CatalogFilter, CostComponent, PriceFilter, Resource
from plancost.domain.pricing_options import PurchaseOption
from plancost.domain.resource_data import ResourceData
from plancost.domain.usage_data import UsageData
from plancost.providers.helpers import per_block, usage_quantity
from plancost.services.tier_allocator import calculate_tier_buckets, tier_labels, tier_start_amounts


logger = logging.getLogger(__name__)


TRANSACTIONS_UNIT = "10K transactions"
TRANSACTIONS_BLOCK = 10000

# Advanced HSM-protected keys are priced per key in these volume tiers
HSM_KEY_TIER_WIDTHS = [250, 1250, 2500]


def vault_keys_cost_component(
    name: str,
    location: str,
    unit: str,
    sku_name: str,
    meter_name: str,
    start_usage: str,
    quantity: Optional[Decimal],
    block_size: int,
) -> CostComponent:
    """Build a Key Vault cost component; quantity is divided by block_size."""
    return CostComponent(
        name=name,
        unit=unit,
        monthly_quantity=per_block(quantity, block_size),
        catalog_filter=CatalogFilter(
            vendor_name="azure",
            region=location,
            service="Key Vault",
            product_family="Security",
            attribute_filters=[
                AttributeFilter(key="productName", value="Key Vault"),
                AttributeFilter(key="skuName", value=sku_name),
                AttributeFilter(key="meterName", value=meter_name),
            ],
        ),
        price_filter=PriceFilter(
            purchase_option=PurchaseOption.CONSUMPTION.value,
            start_usage_amount=start_usage,
        ),
    )


def _key_operations_meter(key_type: str, key_size: str) -> str:
    # Only plain RSA 2048 keys use the standard operations meter
    if key_type == "RSA" and key_size == "2048":
        return "Operations"
    return "Advanced Key Operations"


def _hsm_keys_meter(key_type: str, key_size: str) -> str:
    if key_type == "RSA-HSM" and key_size == "2048":
        return "Premium HSM-protected RSA 2048-bit key"
    return "Premium HSM-protected Advanced Key"


def new_key_vault_key(d: ResourceData, u: Optional[UsageData], defaults: EstimationDefaults) -> Optional[Resource]:
    """Handler for azurerm_key_vault_key."""
    key_vaults = d.references("key_vault_id")
    location = key_vaults[0].get("location").string() if key_vaults else ""
    if not location:
        logger.warning(
            "Skipping resource %s. Could not find the location for this resource.", d.address
        )
        return None

    sku_name = key_vaults[0].get("sku_name").string().title()
    key_type = d.get("key_type").string()
    key_size = d.get("key_size").string() if d.exists("key_size") else ""

    cost_components: List[CostComponent] = [
        vault_keys_cost_component(
            "Secrets operations", location, TRANSACTIONS_UNIT, sku_name, "Operations", "0",
            usage_quantity(u, "monthly_secrets_operations"), TRANSACTIONS_BLOCK,
        ),
        vault_keys_cost_component(
            "Certificate operations", location, "renewals", sku_name, "Certificate Renewal Request", "0",
            usage_quantity(u, "monthly_certificate_renewal_requests"), 1,
        ),
        vault_keys_cost_component(
            "Certificate operations", location, TRANSACTIONS_UNIT, sku_name, "Operations", "0",
            usage_quantity(u, "monthly_certificate_other_operations"), TRANSACTIONS_BLOCK,
        ),
        vault_keys_cost_component(
            "Storage key rotation", location, "renewals", sku_name, "Secret Renewal", "0",
            usage_quantity(u, "monthly_key_rotation_renewals"), 1,
        ),
    ]

    is_hsm_key = key_type.endswith("HSM")

    if not is_hsm_key:
        cost_components.append(vault_keys_cost_component(
            "Software-protected keys", location, TRANSACTIONS_UNIT, sku_name,
            _key_operations_meter(key_type, key_size), "0",
            usage_quantity(u, "monthly_protected_keys_operations"), TRANSACTIONS_BLOCK,
        ))

    if is_hsm_key and sku_name == "Premium":
        cost_components.extend(_hsm_protected_keys_cost_components(location, sku_name, key_type, key_size, u))

    return Resource(
        name=d.address,
        resource_type=d.type,
        cost_components=cost_components,
    )


def _hsm_protected_keys_cost_components(
    location: str,
    sku_name: str,
    key_type: str,
    key_size: str,
    u: Optional[UsageData],
) -> List[CostComponent]:
    name = "HSM-protected keys"
    key_unit = "months"
    meter_name = _hsm_keys_meter(key_type, key_size)
    components: List[CostComponent] = []

    protected_keys = usage_quantity(u, "hsm_protected_keys")
    if protected_keys is None:
        components.append(vault_keys_cost_component(
            name, location, key_unit, sku_name, meter_name, "0", None, 1,
        ))
    elif key_type == "RSA-HSM" and key_size == "2048":
        components.append(vault_keys_cost_component(
            name, location, key_unit, sku_name, meter_name, "0", protected_keys, 1,
        ))
    else:
        buckets = calculate_tier_buckets(protected_keys, HSM_KEY_TIER_WIDTHS)
        labels = tier_labels(HSM_KEY_TIER_WIDTHS)
        starts = tier_start_amounts(HSM_KEY_TIER_WIDTHS)
        for index, quantity in enumerate(buckets):
            # The first tier is always shown, later tiers only when used
            if index > 0 and quantity == 0:
                continue
            components.append(vault_keys_cost_component(
                f"{name} ({labels[index]})", location, key_unit, sku_name, meter_name,
                starts[index], quantity, 1,
            ))

    hsm_transactions = usage_quantity(u, "monthly_protected_keys_operations")
    if hsm_transactions is not None:
        components.append(vault_keys_cost_component(
            name, location, TRANSACTIONS_UNIT, sku_name,
            _key_operations_meter(key_type, key_size), "0",
            hsm_transactions, TRANSACTIONS_BLOCK,
        ))

    return components
