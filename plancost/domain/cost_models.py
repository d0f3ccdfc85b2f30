"""
Domain models for cost component mapping.
Defines cost components, their catalog and price filters, and the resource tree.
"""
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field
from decimal import Decimal


def _decimal_to_str(value: Optional[Decimal]) -> Optional[str]:
    """Serialize a quantity exactly; None stays None (unknown quantity)."""
    if value is None:
        return None
    return format(value.normalize(), "f")


@dataclass(frozen=True)
class AttributeFilter:
    """Predicate on a named catalog attribute: exact value or /regex/."""
    key: str
    value: Optional[str] = None
    value_regex: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.value is None) == (self.value_regex is None):
            raise ValueError(
                f"Attribute filter '{self.key}' needs exactly one of value or value_regex"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        if self.value_regex is not None:
            return {"key": self.key, "value_regex": self.value_regex}
        return {"key": self.key, "value": self.value}


@dataclass
class CatalogFilter:
    """Identifies a single billing SKU in the pricing catalog."""
    vendor_name: Optional[str] = None
    region: Optional[str] = None
    service: Optional[str] = None
    product_family: Optional[str] = None
    attribute_filters: List[AttributeFilter] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not any((
            self.vendor_name,
            self.region,
            self.service,
            self.product_family,
            self.attribute_filters,
        ))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "vendor_name": self.vendor_name,
            "region": self.region,
            "service": self.service,
            "product_family": self.product_family,
            "attribute_filters": [attribute.to_dict() for attribute in self.attribute_filters],
        }


@dataclass
class PriceFilter:
    """Selects one price record within a matched product."""
    purchase_option: Optional[str] = None
    start_usage_amount: Optional[str] = None
    term_offering_class: Optional[str] = None
    term_length: Optional[str] = None
    term_purchase_option: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization, omitting unset fields."""
        result = {
            "purchase_option": self.purchase_option,
            "start_usage_amount": self.start_usage_amount,
            "term_offering_class": self.term_offering_class,
            "term_length": self.term_length,
            "term_purchase_option": self.term_purchase_option,
        }
        return {key: value for key, value in result.items() if value is not None}


@dataclass
class CostComponent:
    """
    One priced line item of a resource.

    At most one of hourly_quantity / monthly_quantity is set. Leaving both
    unset means the quantity depends on usage that was not supplied, which
    renders differently from a confirmed zero.
    """
    name: str
    unit: str
    catalog_filter: CatalogFilter
    unit_multiplier: int = 1
    hourly_quantity: Optional[Decimal] = None
    monthly_quantity: Optional[Decimal] = None
    price_filter: Optional[PriceFilter] = None
    ignore_if_missing_price: bool = False

    def __post_init__(self) -> None:
        if self.hourly_quantity is not None and self.monthly_quantity is not None:
            raise ValueError(
                f"Cost component '{self.name}' cannot have both hourly and monthly quantities"
            )
        if self.catalog_filter is None or self.catalog_filter.is_empty():
            raise ValueError(f"Cost component '{self.name}' requires a catalog filter")

    @property
    def has_quantity(self) -> bool:
        return self.hourly_quantity is not None or self.monthly_quantity is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "unit": self.unit,
            "unit_multiplier": self.unit_multiplier,
            "hourly_quantity": _decimal_to_str(self.hourly_quantity),
            "monthly_quantity": _decimal_to_str(self.monthly_quantity),
            "catalog_filter": self.catalog_filter.to_dict(),
            "price_filter": self.price_filter.to_dict() if self.price_filter else None,
            "ignore_if_missing_price": self.ignore_if_missing_price,
        }


@dataclass
class Resource:
    """Cost component tree computed for one resource (or a nested sub-resource)."""
    name: str
    cost_components: List[CostComponent] = field(default_factory=list)
    sub_resources: List["Resource"] = field(default_factory=list)
    resource_type: Optional[str] = None
    no_price: bool = False

    def all_cost_components(self) -> List[CostComponent]:
        """Cost components of this resource and all sub-resources, depth first."""
        components = list(self.cost_components)
        for sub_resource in self.sub_resources:
            components.extend(sub_resource.all_cost_components())
        return components

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: Dict[str, Any] = {
            "name": self.name,
            "cost_components": [component.to_dict() for component in self.cost_components],
            "sub_resources": [sub_resource.to_dict() for sub_resource in self.sub_resources],
        }
        if self.resource_type is not None:
            result["resource_type"] = self.resource_type
        if self.no_price:
            result["no_price"] = True
        return result
