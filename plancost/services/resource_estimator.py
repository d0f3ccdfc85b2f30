"""
Resource estimator service.
Runs each resource through its registered handler and collects the
resulting cost component trees.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from plancost.core.config import EstimationDefaults, config
from plancost.domain.cost_models import Resource
from plancost.domain.resource_data import ResourceData
from plancost.domain.usage_data import UsageData
from plancost.providers.registry import ResourceRegistry, default_registry


logger = logging.getLogger(__name__)


@dataclass
class SkippedResource:
    """A resource that produced no cost components."""
    address: str
    resource_type: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": self.address,
            "resource_type": self.resource_type,
            "reason": self.reason,
        }


@dataclass
class EstimateResult:
    """Cost component trees plus the resources that were skipped."""
    resources: List[Resource] = field(default_factory=list)
    skipped_resources: List[SkippedResource] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "resources": [resource.to_dict() for resource in self.resources],
            "skipped_resources": [skipped.to_dict() for skipped in self.skipped_resources],
        }


class ResourceEstimator:
    """Maps resource instances to cost components using a registry."""

    def __init__(
        self,
        registry: Optional[ResourceRegistry] = None,
        defaults: Optional[EstimationDefaults] = None,
    ):
        """
        Initialize the estimator.

        Args:
            registry: Registry to consult (default: every built-in provider)
            defaults: Handler defaults (default: from environment configuration)
        """
        self.registry = registry or default_registry()
        self.defaults = defaults or config.estimation_defaults()

    def estimate(
        self,
        resources: Sequence[ResourceData],
        usage: Optional[Mapping[str, UsageData]] = None,
    ) -> EstimateResult:
        """
        Estimate cost components for every resource.

        Args:
            resources: Resource views, already linked by the loader
            usage: Usage views keyed by resource address

        Returns:
            EstimateResult with resources and skipped resources in input order
        """
        usage = usage or {}
        result = EstimateResult()

        for resource in resources:
            if self.registry.is_free(resource.type):
                result.resources.append(Resource(
                    name=resource.address,
                    resource_type=resource.type,
                    no_price=True,
                ))
                continue

            resource_usage = usage.get(resource.address)

            if self.registry.is_usage_only(resource.type) and resource_usage is None:
                result.skipped_resources.append(SkippedResource(
                    address=resource.address,
                    resource_type=resource.type,
                    reason="no usage data supplied",
                ))
                continue

            item = self.registry.get(resource.type)
            if item is None:
                logger.debug("No handler registered for %s (%s)", resource.address, resource.type)
                result.skipped_resources.append(SkippedResource(
                    address=resource.address,
                    resource_type=resource.type,
                    reason="resource type not supported",
                ))
                continue

            try:
                mapped = item.handler(resource, resource_usage, self.defaults)
            except Exception as error:
                # Unexpected handler failures skip the resource rather than the whole estimate
                logger.error(
                    "Unexpected error mapping cost components for %s (%s): %s: %s",
                    resource.address,
                    resource.type,
                    type(error).__name__,
                    error,
                    exc_info=True,
                )
                result.skipped_resources.append(SkippedResource(
                    address=resource.address,
                    resource_type=resource.type,
                    reason="unexpected error while mapping cost components",
                ))
                continue

            if mapped is None:
                result.skipped_resources.append(SkippedResource(
                    address=resource.address,
                    resource_type=resource.type,
                    reason="unsupported configuration",
                ))
                continue

            result.resources.append(mapped)

        return result
