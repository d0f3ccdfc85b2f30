"""
AWS resource registrations.
"""
from typing import List

from plancost.providers.aws.ebs import new_ebs_volume
from plancost.providers.aws.instance import INSTANCE_NOTES, new_instance, new_spot_instance_request
from plancost.providers.registry import RegistryItem


RESOURCE_REGISTRY: List[RegistryItem] = [
    RegistryItem(
        name="aws_instance",
        handler=new_instance,
        notes=INSTANCE_NOTES,
    ),
    RegistryItem(
        name="aws_spot_instance_request",
        handler=new_spot_instance_request,
        notes=INSTANCE_NOTES,
    ),
    RegistryItem(
        name="aws_ebs_volume",
        handler=new_ebs_volume,
        notes=(
            "If the volume type is not specified then gp2 is assumed.",
            "Magnetic volume I/O requests are taken from monthly_standard_io_requests in usage data.",
        ),
    ),
]

# Free resources grouped by service
FREE_RESOURCES: List[str] = [
    # VPC & Networking
    "aws_vpc",
    "aws_subnet",
    "aws_internet_gateway",
    "aws_egress_only_internet_gateway",
    "aws_route_table",
    "aws_route_table_association",
    "aws_route",
    "aws_network_acl",
    "aws_network_acl_rule",
    "aws_vpc_dhcp_options",
    "aws_vpc_dhcp_options_association",
    "aws_default_vpc",
    "aws_default_subnet",
    "aws_default_route_table",
    "aws_default_network_acl",

    # EC2
    "aws_security_group",
    "aws_security_group_rule",
    "aws_default_security_group",
    "aws_key_pair",
    "aws_launch_template",
    "aws_placement_group",
    "aws_volume_attachment",

    # IAM
    "aws_iam_role",
    "aws_iam_role_policy",
    "aws_iam_role_policy_attachment",
    "aws_iam_policy",
    "aws_iam_policy_attachment",
    "aws_iam_instance_profile",
    "aws_iam_user",
    "aws_iam_user_policy",
    "aws_iam_user_policy_attachment",
    "aws_iam_group",
    "aws_iam_group_policy",
    "aws_iam_group_policy_attachment",
    "aws_iam_group_membership",
    "aws_iam_access_key",
    "aws_iam_service_linked_role",

    # Certificate Manager
    "aws_acm_certificate_validation",

    # KMS
    "aws_kms_alias",
    "aws_kms_grant",
]

USAGE_ONLY_RESOURCES: List[str] = []
