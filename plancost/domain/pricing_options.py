"""
Enumerations for pricing options that appear in cost component names and filters.

Each enum maps a user or configuration string to the catalog value and the
display label explicitly. parse() returns None for strings it does not know;
callers pick the fallback and log it, so an unmapped value never turns into
an empty label.
"""
from enum import Enum
from typing import Optional


class _ParsableEnum(Enum):
    """Enum whose members can be looked up case-insensitively by value."""

    @classmethod
    def parse(cls, raw: Optional[str]):
        if raw is None:
            return None
        normalized = str(raw).strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        return None


class PurchaseOption(_ParsableEnum):
    """Purchase options; values are the catalog's purchaseOption strings."""
    ON_DEMAND = "on_demand"
    SPOT = "spot"
    RESERVED = "reserved"
    CONSUMPTION = "Consumption"

    @property
    def label(self) -> str:
        return _PURCHASE_OPTION_LABELS[self]


_PURCHASE_OPTION_LABELS = {
    PurchaseOption.ON_DEMAND: "on-demand",
    PurchaseOption.SPOT: "spot",
    PurchaseOption.RESERVED: "reserved",
    PurchaseOption.CONSUMPTION: "consumption",
}


class ReservedTerm(_ParsableEnum):
    """Reserved instance term lengths as written in usage files."""
    ONE_YEAR = "1_year"
    THREE_YEAR = "3_year"

    @property
    def catalog_name(self) -> str:
        return {
            ReservedTerm.ONE_YEAR: "1yr",
            ReservedTerm.THREE_YEAR: "3yr",
        }[self]


class ReservedPaymentOption(_ParsableEnum):
    """Reserved instance payment options as written in usage files."""
    NO_UPFRONT = "no_upfront"
    PARTIAL_UPFRONT = "partial_upfront"
    ALL_UPFRONT = "all_upfront"

    @property
    def catalog_name(self) -> str:
        return {
            ReservedPaymentOption.NO_UPFRONT: "No Upfront",
            ReservedPaymentOption.PARTIAL_UPFRONT: "Partial Upfront",
            ReservedPaymentOption.ALL_UPFRONT: "All Upfront",
        }[self]


class ReservedOfferingClass(_ParsableEnum):
    """Reserved instance offering classes; values match the catalog."""
    STANDARD = "standard"
    CONVERTIBLE = "convertible"


class OperatingSystem(_ParsableEnum):
    """EC2 operating systems that can be set through usage data."""
    LINUX = "linux"
    WINDOWS = "windows"
    RHEL = "rhel"
    SUSE = "suse"

    @property
    def catalog_name(self) -> str:
        return {
            OperatingSystem.LINUX: "Linux",
            OperatingSystem.WINDOWS: "Windows",
            OperatingSystem.RHEL: "RHEL",
            OperatingSystem.SUSE: "SUSE",
        }[self]

    @property
    def label(self) -> str:
        if self is OperatingSystem.LINUX:
            return "Linux/UNIX"
        return self.catalog_name
