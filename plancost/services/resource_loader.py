"""
Builds resource and usage views from already-parsed plan and usage input.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from plancost.domain.resource_data import ResourceData
from plancost.domain.usage_data import UsageData
from plancost.providers.registry import ResourceRegistry


logger = logging.getLogger(__name__)


class ResourceLoaderError(Exception):
    """Raised when resource or usage input is malformed."""
    pass


def load_resources(
    raw_resources: Sequence[Mapping[str, Any]],
    registry: ResourceRegistry,
) -> List[ResourceData]:
    """
    Build ResourceData views and link the references each type declares.

    Args:
        raw_resources: Mappings with 'address', 'type', 'values' and optional
                       'references' ({attribute: [address, ...]})
        registry: Registry providing the reference attributes per type

    Returns:
        ResourceData views in input order

    Raises:
        ResourceLoaderError: If a resource is malformed or an address repeats
    """
    resources: List[ResourceData] = []
    by_address: Dict[str, ResourceData] = {}
    pending_references: List[tuple] = []

    for index, raw in enumerate(raw_resources):
        if not isinstance(raw, Mapping):
            raise ResourceLoaderError(f"Resource at index {index} must be an object")

        address = raw.get("address")
        resource_type = raw.get("type")
        if not address or not isinstance(address, str):
            raise ResourceLoaderError(f"Resource at index {index} is missing an address")
        if not resource_type or not isinstance(resource_type, str):
            raise ResourceLoaderError(f"Resource {address} is missing a type")
        if address in by_address:
            raise ResourceLoaderError(f"Duplicate resource address: {address}")

        values = raw.get("values") or {}
        if not isinstance(values, Mapping):
            raise ResourceLoaderError(f"Values for resource {address} must be an object")

        resource = ResourceData(address, resource_type, values)
        resources.append(resource)
        by_address[address] = resource

        references = raw.get("references") or {}
        if not isinstance(references, Mapping):
            raise ResourceLoaderError(f"References for resource {address} must be an object")
        pending_references.append((resource, references))

    # Link after every resource exists so references may point forward
    for resource, references in pending_references:
        wanted = registry.reference_attributes(resource.type)
        for attribute, target_addresses in references.items():
            if attribute not in wanted:
                logger.debug(
                    "Ignoring reference attribute %s on %s", attribute, resource.address
                )
                continue
            if isinstance(target_addresses, str):
                target_addresses = [target_addresses]

            targets = []
            for target_address in target_addresses:
                target = by_address.get(target_address)
                if target is None:
                    logger.debug(
                        "Dropping reference %s.%s to unknown resource %s",
                        resource.address,
                        attribute,
                        target_address,
                    )
                    continue
                targets.append(target)
            resource.link_references(attribute, targets)

    logger.debug("Loaded %d resources", len(resources))
    return resources


def load_usage(raw_usage: Optional[Mapping[str, Any]]) -> Dict[str, UsageData]:
    """
    Build UsageData views keyed by resource address.

    Raises:
        ResourceLoaderError: If an entry is not an object
    """
    usage: Dict[str, UsageData] = {}
    for address, values in (raw_usage or {}).items():
        if values is None:
            values = {}
        if not isinstance(values, Mapping):
            raise ResourceLoaderError(f"Usage for resource {address} must be an object")
        usage[address] = UsageData(address, values)

    logger.debug("Loaded usage for %d resources", len(usage))
    return usage
