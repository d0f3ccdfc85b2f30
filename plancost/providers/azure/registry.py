"""
Azure resource registrations.
"""
from typing import List

from plancost.providers.azure.key_vault_key import new_key_vault_key
from plancost.providers.azure.managed_disk import new_managed_disk
from plancost.providers.registry import RegistryItem


RESOURCE_REGISTRY: List[RegistryItem] = [
    RegistryItem(
        name="azurerm_key_vault_key",
        handler=new_key_vault_key,
        reference_attributes=("key_vault_id",),
        notes=(
            "The location and SKU are taken from the referenced key vault.",
        ),
    ),
    RegistryItem(
        name="azurerm_managed_disk",
        handler=new_managed_disk,
        notes=(
            "Ultra SSD disks are not supported.",
            "Disk operations for Standard HDD and Standard SSD disks are taken from monthly_disk_operations in usage data.",
        ),
    ),
]

# Free resources grouped alphabetically
FREE_RESOURCES: List[str] = [
    # Azure Base
    "azurerm_resource_group",
    "azurerm_resource_provider_registration",
    "azurerm_subscription",

    # Azure Blueprints
    "azurerm_blueprint_assignment",

    # Azure Key Vault
    "azurerm_key_vault_access_policy",
    "azurerm_key_vault_certificate_data",
    "azurerm_key_vault_certificate_issuer",
    "azurerm_key_vault_secret",

    # Azure Networking
    "azurerm_application_security_group",
    "azurerm_network_security_group",
    "azurerm_virtual_network",

    # Azure Policy
    "azurerm_policy_assignment",
    "azurerm_policy_definition",
    "azurerm_policy_remediation",
    "azurerm_policy_set_definition",
]

USAGE_ONLY_RESOURCES: List[str] = []

# Only Basic load balancers are free of charge, so azurerm_lb is not listed
