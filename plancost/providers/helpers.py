"""
Helpers shared by resource handlers.
"""
import logging
from decimal import Decimal
from typing import Callable, Optional

from plancost.core.config import EstimationDefaults
from plancost.domain.cost_models import Resource
from plancost.domain.resource_data import ResourceData
from plancost.domain.usage_data import UsageData


logger = logging.getLogger(__name__)


# Signature every resource handler implements
ResourceHandler = Callable[[ResourceData, Optional[UsageData], EstimationDefaults], Optional[Resource]]


def usage_quantity(u: Optional[UsageData], key: str) -> Optional[Decimal]:
    """
    Integer usage value as a Decimal, or None when not supplied.

    Fractional values are truncated, as counts of operations or keys are whole.
    Non-numeric or negative counts are logged and treated as unknown.
    """
    if u is None or not u.exists(key):
        return None
    value = u.get(key).integer()
    if value is None:
        logger.warning(
            "Ignoring usage %s for %s: %r is not a number", key, u.address, u.get(key).raw
        )
        return None
    if value < 0:
        logger.warning(
            "Ignoring usage %s for %s: %s is negative", key, u.address, value
        )
        return None
    return Decimal(value)


def per_block(quantity: Optional[Decimal], block_size: int) -> Optional[Decimal]:
    """Convert a raw count to catalog blocks (e.g. '10K transactions'); None stays None."""
    if quantity is None:
        return None
    return quantity / Decimal(block_size)
