"""
Configuration module for loading environment variables.
Handler defaults are read once here and passed explicitly into handlers.
"""
import os
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class EstimationDefaults:
    """Named defaults applied by resource handlers when configuration omits a value."""
    volume_size_gb: int = 8
    volume_type: str = "gp2"
    ec2_detailed_monitoring_metrics: int = 7
    burstable_instance_prefixes: Tuple[str, ...] = ("t3.", "t4g.")


def _split_prefixes(raw: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


class Config:
    """Application configuration loaded from environment variables."""

    # Handler defaults
    DEFAULT_VOLUME_SIZE_GB: int = int(os.getenv("PLANCOST_DEFAULT_VOLUME_SIZE_GB", "8"))
    DEFAULT_VOLUME_TYPE: str = os.getenv("PLANCOST_DEFAULT_VOLUME_TYPE", "gp2")
    EC2_DETAILED_MONITORING_METRICS: int = int(
        os.getenv("PLANCOST_EC2_DETAILED_MONITORING_METRICS", "7")
    )  # CloudWatch's standard EC2 metric set
    BURSTABLE_INSTANCE_PREFIXES: Tuple[str, ...] = _split_prefixes(
        os.getenv("PLANCOST_BURSTABLE_INSTANCE_PREFIXES", "t3.,t4g.")
    )

    # API limits
    MAX_RESOURCES_PER_REQUEST: int = int(os.getenv("PLANCOST_MAX_RESOURCES_PER_REQUEST", "5000"))

    @classmethod
    def validate(cls) -> None:
        """
        Validates that configuration values are usable.

        Raises:
            ValueError: If any configuration value is missing or invalid.
        """
        if cls.DEFAULT_VOLUME_SIZE_GB <= 0:
            raise ValueError("PLANCOST_DEFAULT_VOLUME_SIZE_GB must be positive")
        if not cls.DEFAULT_VOLUME_TYPE:
            raise ValueError("PLANCOST_DEFAULT_VOLUME_TYPE is required")
        if cls.EC2_DETAILED_MONITORING_METRICS < 0:
            raise ValueError("PLANCOST_EC2_DETAILED_MONITORING_METRICS must not be negative")
        if cls.MAX_RESOURCES_PER_REQUEST <= 0:
            raise ValueError("PLANCOST_MAX_RESOURCES_PER_REQUEST must be positive")

    @classmethod
    def estimation_defaults(cls) -> EstimationDefaults:
        """Build the immutable handler defaults from the current configuration."""
        return EstimationDefaults(
            volume_size_gb=cls.DEFAULT_VOLUME_SIZE_GB,
            volume_type=cls.DEFAULT_VOLUME_TYPE,
            ec2_detailed_monitoring_metrics=cls.EC2_DETAILED_MONITORING_METRICS,
            burstable_instance_prefixes=cls.BURSTABLE_INSTANCE_PREFIXES,
        )


config = Config()
