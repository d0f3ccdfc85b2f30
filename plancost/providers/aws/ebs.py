"""
EBS volume cost components, shared by aws_ebs_volume and instance block devices.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from plancost.core.config import EstimationDefaults
from plancost.domain.cost_models import AttributeFilter, CatalogFilter, CostComponent, Resource
from plancost.domain.resource_data import AttributeValue, ResourceData
from plancost.domain.usage_data import UsageData
from plancost.providers.helpers import per_block, usage_quantity


logger = logging.getLogger(__name__)


STORAGE_NAMES = {
    "standard": "Magnetic storage",
    "gp2": "General Purpose SSD storage (gp2)",
    "gp3": "General Purpose SSD storage (gp3)",
    "io1": "Provisioned IOPS SSD storage (io1)",
    "io2": "Provisioned IOPS SSD storage (io2)",
    "st1": "Throughput Optimized HDD storage (st1)",
    "sc1": "Cold HDD storage (sc1)",
}

# gp3 includes this much performance before provisioned extras are billed
GP3_BASELINE_IOPS = Decimal(3000)
GP3_BASELINE_THROUGHPUT = Decimal(125)


def _ebs_catalog_filter(region: str, product_family: str, attribute_filters: List[AttributeFilter]) -> CatalogFilter:
    return CatalogFilter(
        vendor_name="aws",
        region=region,
        service="AmazonEC2",
        product_family=product_family,
        attribute_filters=attribute_filters,
    )


def ebs_volume_cost_components(
    region: str,
    volume_type: str,
    size_gb: Decimal,
    iops: Optional[Decimal] = None,
    throughput: Optional[Decimal] = None,
    monthly_io_requests: Optional[Decimal] = None,
    default_volume_type: str = "gp2",
) -> List[CostComponent]:
    """
    Build the cost components for one EBS volume.

    Args:
        region: AWS region code
        volume_type: EBS volume API name (gp2, gp3, io1, io2, st1, sc1, standard)
        size_gb: Provisioned size in GB
        iops: Provisioned IOPS, if configured
        throughput: Provisioned throughput in MiBps (gp3 only), if configured
        monthly_io_requests: Monthly I/O requests for magnetic volumes, None if unknown
        default_volume_type: Volume type used when volume_type is empty or unknown

    Returns:
        Storage component first, followed by any IOPS / throughput / I/O components
    """
    if not volume_type:
        volume_type = default_volume_type
    elif volume_type not in STORAGE_NAMES:
        logger.warning(
            "Unrecognized EBS volume type %s, defaulting to %s", volume_type, default_volume_type
        )
        volume_type = default_volume_type

    components = [
        CostComponent(
            name=STORAGE_NAMES[volume_type],
            unit="GB",
            monthly_quantity=size_gb,
            catalog_filter=_ebs_catalog_filter(
                region,
                "Storage",
                [AttributeFilter(key="volumeApiName", value=volume_type)],
            ),
        )
    ]

    if volume_type in ("io1", "io2"):
        components.append(CostComponent(
            name="Provisioned IOPS",
            unit="IOPS",
            monthly_quantity=iops if iops is not None else Decimal(0),
            catalog_filter=_ebs_catalog_filter(
                region,
                "System Operation",
                [
                    AttributeFilter(key="volumeApiName", value=volume_type),
                    AttributeFilter(key="usagetype", value_regex="/EBS:VolumeP-IOPS/"),
                ],
            ),
        ))

    if volume_type == "gp3":
        if iops is not None and iops > GP3_BASELINE_IOPS:
            components.append(CostComponent(
                name="Provisioned IOPS",
                unit="IOPS",
                monthly_quantity=iops - GP3_BASELINE_IOPS,
                catalog_filter=_ebs_catalog_filter(
                    region,
                    "System Operation",
                    [
                        AttributeFilter(key="volumeApiName", value="gp3"),
                        AttributeFilter(key="usagetype", value_regex="/EBS:VolumeP-IOPS.gp3/"),
                    ],
                ),
            ))
        if throughput is not None and throughput > GP3_BASELINE_THROUGHPUT:
            components.append(CostComponent(
                name="Provisioned throughput",
                unit="Mbps",
                monthly_quantity=throughput - GP3_BASELINE_THROUGHPUT,
                catalog_filter=_ebs_catalog_filter(
                    region,
                    "Provisioned Throughput",
                    [
                        AttributeFilter(key="volumeApiName", value="gp3"),
                        AttributeFilter(key="usagetype", value_regex="/EBS:VolumeP-Throughput.gp3/"),
                    ],
                ),
            ))

    if volume_type == "standard":
        components.append(CostComponent(
            name="I/O requests",
            unit="1M requests",
            monthly_quantity=per_block(monthly_io_requests, 1000000),
            catalog_filter=_ebs_catalog_filter(
                region,
                "System Operation",
                [
                    AttributeFilter(key="volumeApiName", value="standard"),
                    AttributeFilter(key="usagetype", value_regex="/EBS:VolumeIOUsage/"),
                ],
            ),
        ))

    return components


def new_block_device(name: str, d: AttributeValue, region: str, defaults: EstimationDefaults) -> Resource:
    """
    Build a sub-resource for an inline block device.

    An absent block device yields the default volume (defaults.volume_type,
    defaults.volume_size_gb).
    """
    volume_type = defaults.volume_type
    if d.get("volume_type").exists:
        volume_type = d.get("volume_type").string()

    size_gb = d.get("volume_size").decimal()
    if size_gb is None:
        size_gb = Decimal(defaults.volume_size_gb)

    iops = d.get("iops").decimal()
    throughput = d.get("throughput").decimal()

    return Resource(
        name=name,
        cost_components=ebs_volume_cost_components(
            region,
            volume_type,
            size_gb,
            iops=iops,
            throughput=throughput,
            default_volume_type=defaults.volume_type,
        ),
    )


def new_ebs_volume(d: ResourceData, u: Optional[UsageData], defaults: EstimationDefaults) -> Optional[Resource]:
    """Handler for aws_ebs_volume."""
    region = d.get("region").string()
    if not region:
        logger.warning("Skipping resource %s. Could not find the region for this resource.", d.address)
        return None

    volume_type = d.get("type").string() or defaults.volume_type
    size_gb = d.get("size").decimal()
    if size_gb is None:
        size_gb = Decimal(defaults.volume_size_gb)

    return Resource(
        name=d.address,
        resource_type=d.type,
        cost_components=ebs_volume_cost_components(
            region,
            volume_type,
            size_gb,
            iops=d.get("iops").decimal(),
            throughput=d.get("throughput").decimal(),
            monthly_io_requests=usage_quantity(u, "monthly_standard_io_requests"),
            default_volume_type=defaults.volume_type,
        ),
    )
