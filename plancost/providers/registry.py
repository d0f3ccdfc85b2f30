"""
Resource registry.
Maps Terraform resource types to handlers and lists free and usage-only types.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from plancost.providers.helpers import ResourceHandler


@dataclass(frozen=True)
class RegistryItem:
    """Registration of one supported resource type."""
    name: str
    handler: ResourceHandler
    notes: Tuple[str, ...] = ()
    reference_attributes: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "notes": list(self.notes),
            "reference_attributes": list(self.reference_attributes),
        }


class ResourceRegistry:
    """Lookup table consulted by the estimator for every resource instance."""

    def __init__(
        self,
        items: Iterable[RegistryItem],
        free_resources: Iterable[str] = (),
        usage_only_resources: Iterable[str] = (),
    ):
        """
        Initialize the registry.

        Args:
            items: Handler registrations
            free_resources: Resource types that never cost anything
            usage_only_resources: Resource types whose cost depends entirely on usage data

        Raises:
            ValueError: If a resource type is registered twice or is both
                        free and handled
        """
        self._items: Dict[str, RegistryItem] = {}
        for item in items:
            if item.name in self._items:
                raise ValueError(f"Resource type '{item.name}' is registered more than once")
            self._items[item.name] = item

        self._free = frozenset(free_resources)
        self._usage_only = frozenset(usage_only_resources)

        overlap = self._free & set(self._items)
        if overlap:
            raise ValueError(
                f"Resource types cannot be both free and handled: {', '.join(sorted(overlap))}"
            )

    def get(self, resource_type: str) -> Optional[RegistryItem]:
        return self._items.get(resource_type)

    def is_free(self, resource_type: str) -> bool:
        return resource_type in self._free

    def is_usage_only(self, resource_type: str) -> bool:
        return resource_type in self._usage_only

    def reference_attributes(self, resource_type: str) -> Tuple[str, ...]:
        item = self._items.get(resource_type)
        return item.reference_attributes if item else ()

    def supported_types(self) -> List[str]:
        return sorted(self._items)

    def describe(self) -> Dict[str, Any]:
        """Summary of the registry for the API."""
        return {
            "supported": [self._items[name].to_dict() for name in self.supported_types()],
            "free": sorted(self._free),
            "usage_only": sorted(self._usage_only),
        }


def default_registry() -> ResourceRegistry:
    """Registry with every provider's handlers and resource lists."""
    from plancost.providers.aws import registry as aws
    from plancost.providers.azure import registry as azure

    return ResourceRegistry(
        items=aws.RESOURCE_REGISTRY + azure.RESOURCE_REGISTRY,
        free_resources=aws.FREE_RESOURCES + azure.FREE_RESOURCES,
        usage_only_resources=aws.USAGE_ONLY_RESOURCES + azure.USAGE_ONLY_RESOURCES,
    )
