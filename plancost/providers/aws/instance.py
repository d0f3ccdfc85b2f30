"""
Cost components for EC2 instances (aws_instance, aws_spot_instance_request).
"""
import logging
from decimal import Decimal
from typing import List, Optional

from plancost.core.config import EstimationDefaults
from plancost.domain.cost_models import AttributeFilter, CatalogFilter, CostComponent, PriceFilter, Resource
from plancost.domain.pricing_options import (
    OperatingSystem,
    PurchaseOption,
    ReservedOfferingClass,
    ReservedPaymentOption,
    ReservedTerm,
)
from plancost.domain.resource_data import ResourceData
from plancost.domain.usage_data import UsageData
from plancost.providers.aws.ebs import new_block_device


logger = logging.getLogger(__name__)


INSTANCE_NOTES = (
    "Costs associated with marketplace AMIs are not supported.",
    "For non-standard Linux AMIs such as Windows and RHEL, the operating system should be specified in usage data.",
    "EC2 detailed monitoring assumes the standard 7 metrics and the lowest tier of prices for CloudWatch.",
    "If a root volume is not specified then an 8Gi gp2 volume is assumed.",
)


def new_instance(d: ResourceData, u: Optional[UsageData], defaults: EstimationDefaults) -> Optional[Resource]:
    """Handler for aws_instance."""
    return _new_instance(d, u, defaults, PurchaseOption.ON_DEMAND)


def new_spot_instance_request(
    d: ResourceData,
    u: Optional[UsageData],
    defaults: EstimationDefaults,
) -> Optional[Resource]:
    """Handler for aws_spot_instance_request."""
    return _new_instance(d, u, defaults, PurchaseOption.SPOT)


def _new_instance(
    d: ResourceData,
    u: Optional[UsageData],
    defaults: EstimationDefaults,
    purchase_option: PurchaseOption,
) -> Optional[Resource]:
    tenancy = "Shared"
    if d.get("tenancy").string() == "host":
        logger.warning(
            "Skipping resource %s. Host tenancy is not supported for AWS EC2 instances.", d.address
        )
        return None
    elif d.get("tenancy").string() == "dedicated":
        tenancy = "Dedicated"

    region = d.get("region").string()
    if not region:
        logger.warning("Skipping resource %s. Could not find the region for this resource.", d.address)
        return None

    instance_type = d.get("instance_type").string()
    if not instance_type:
        logger.warning("Skipping resource %s. Could not find the instance type for this resource.", d.address)
        return None

    sub_resources = [new_block_device("root_block_device", d.get("root_block_device.0"), region, defaults)]
    for index, block_device in enumerate(d.get("ebs_block_device").array()):
        sub_resources.append(
            new_block_device(f"ebs_block_device[{index}]", block_device, region, defaults)
        )

    cost_components = [
        compute_cost_component(d, u, region, instance_type, purchase_option, tenancy)
    ]
    if d.get("ebs_optimized").boolean():
        cost_components.append(ebs_optimized_cost_component(region, instance_type))
    if d.get("monitoring").boolean():
        cost_components.append(
            detailed_monitoring_cost_component(region, defaults.ec2_detailed_monitoring_metrics)
        )
    cpu_credits = cpu_credits_cost_component(d, region, instance_type, defaults)
    if cpu_credits is not None:
        cost_components.append(cpu_credits)

    return Resource(
        name=d.address,
        resource_type=d.type,
        cost_components=cost_components,
        sub_resources=sub_resources,
    )


def _operating_system(d: ResourceData, u: Optional[UsageData]) -> OperatingSystem:
    # The AMI doesn't tell us the OS, so usage data may override the Linux default
    if u is None or not u.exists("operating_system"):
        return OperatingSystem.LINUX

    raw = u.get("operating_system").string()
    operating_system = OperatingSystem.parse(raw)
    if operating_system is None:
        logger.warning(
            "Unrecognized operating system %s for %s, defaulting to Linux/UNIX", raw, d.address
        )
        return OperatingSystem.LINUX
    return operating_system


def _reserved_price_filter(
    d: ResourceData,
    u: Optional[UsageData],
    fallback: PurchaseOption,
) -> Optional[PriceFilter]:
    """
    Price filter for a reserved instance override, or None to use the regular path.

    All three of reserved_instance_type, reserved_instance_term and
    reserved_instance_payment_option must be present and recognised.
    """
    if u is None or not u.exists("reserved_instance_type"):
        return None

    raw_type = u.get("reserved_instance_type").string()
    raw_term = u.get("reserved_instance_term").string()
    raw_payment = u.get("reserved_instance_payment_option").string()

    offering_class = ReservedOfferingClass.parse(raw_type)
    term = ReservedTerm.parse(raw_term)
    payment_option = ReservedPaymentOption.parse(raw_payment)

    if offering_class is None or term is None or payment_option is None:
        logger.warning(
            "Ignoring reserved instance usage for %s (type=%r, term=%r, payment_option=%r); "
            "falling back to %s pricing",
            d.address,
            raw_type,
            raw_term,
            raw_payment,
            fallback.label,
        )
        return None

    return PriceFilter(
        start_usage_amount="0",
        term_offering_class=offering_class.value,
        term_length=term.catalog_name,
        term_purchase_option=payment_option.catalog_name,
    )


def _instance_attribute_filters(instance_type: str, tenancy: str, operating_system: OperatingSystem) -> List[AttributeFilter]:
    return [
        AttributeFilter(key="instanceType", value=instance_type),
        AttributeFilter(key="tenancy", value=tenancy),
        AttributeFilter(key="operatingSystem", value=operating_system.catalog_name),
        AttributeFilter(key="preInstalledSw", value="NA"),
        AttributeFilter(key="capacitystatus", value="Used"),
    ]


def compute_cost_component(
    d: ResourceData,
    u: Optional[UsageData],
    region: str,
    instance_type: str,
    purchase_option: PurchaseOption,
    tenancy: str,
) -> CostComponent:
    """
    Hourly instance usage component.

    Exactly one variant is emitted: reserved when usage data supplies a
    complete reserved instance override, otherwise on-demand or spot.
    """
    operating_system = _operating_system(d, u)

    price_filter = _reserved_price_filter(d, u, purchase_option)
    if price_filter is not None:
        purchase_label = PurchaseOption.RESERVED.label
    else:
        purchase_label = purchase_option.label
        price_filter = PriceFilter(purchase_option=purchase_option.value)

    return CostComponent(
        name=f"Instance usage ({operating_system.label}, {purchase_label}, {instance_type})",
        unit="hours",
        hourly_quantity=Decimal(1),
        catalog_filter=CatalogFilter(
            vendor_name="aws",
            region=region,
            service="AmazonEC2",
            product_family="Compute Instance",
            attribute_filters=_instance_attribute_filters(instance_type, tenancy, operating_system),
        ),
        price_filter=price_filter,
    )


def ebs_optimized_cost_component(region: str, instance_type: str) -> CostComponent:
    # Types that are EBS-optimized by default have no catalog price
    return CostComponent(
        name="EBS-optimized usage",
        unit="hours",
        hourly_quantity=Decimal(1),
        ignore_if_missing_price=True,
        catalog_filter=CatalogFilter(
            vendor_name="aws",
            region=region,
            service="AmazonEC2",
            product_family="Compute Instance",
            attribute_filters=[
                AttributeFilter(key="instanceType", value=instance_type),
                AttributeFilter(key="usagetype", value_regex="/EBSOptimized/"),
            ],
        ),
    )


def detailed_monitoring_cost_component(region: str, metric_count: int) -> CostComponent:
    return CostComponent(
        name="EC2 detailed monitoring",
        unit="metrics",
        monthly_quantity=Decimal(metric_count),
        ignore_if_missing_price=True,
        catalog_filter=CatalogFilter(
            vendor_name="aws",
            region=region,
            service="AmazonCloudWatch",
            product_family="Metric",
        ),
        price_filter=PriceFilter(start_usage_amount="0"),
    )


def cpu_credits_cost_component(
    d: ResourceData,
    region: str,
    instance_type: str,
    defaults: EstimationDefaults,
) -> Optional[CostComponent]:
    """
    CPU credits component for instances running in unlimited mode.

    Burstable families without an explicit credit specification default to
    unlimited. The quantity depends on usage and is left unknown.
    """
    cpu_credits = d.get("credit_specification.0.cpu_credits").string()
    if not cpu_credits and instance_type.startswith(defaults.burstable_instance_prefixes):
        cpu_credits = "unlimited"

    if cpu_credits != "unlimited":
        return None

    instance_family = instance_type.split(".", 1)[0]

    return CostComponent(
        name="CPU credits",
        unit="vCPU-hours",
        catalog_filter=CatalogFilter(
            vendor_name="aws",
            region=region,
            service="AmazonEC2",
            product_family="CPU Credits",
            attribute_filters=[
                AttributeFilter(key="operatingSystem", value="Linux"),
                AttributeFilter(key="usagetype", value_regex=f"/CPUCredits:{instance_family}$/"),
            ],
        ),
    )
