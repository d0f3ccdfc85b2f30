"""
Tiered quantity allocation.

Splits a total quantity across volume tiers. Tier widths are the sizes of
each finite tier (e.g. [250, 1250, 2500] means first 250, next 1250, next
2500); one more unbounded bucket absorbs the remainder.
"""
from decimal import Decimal
from typing import List, Sequence, Union

Number = Union[int, Decimal]


def _validate_widths(tier_widths: Sequence[Number]) -> None:
    for width in tier_widths:
        if Decimal(width) <= 0:
            raise ValueError(f"Tier widths must be positive (got {width})")


def calculate_tier_buckets(total: Number, tier_widths: Sequence[Number]) -> List[Decimal]:
    """
    Allocate a total quantity to tier buckets.

    Args:
        total: Non-negative quantity to allocate
        tier_widths: Widths of the finite tiers, in ascending tier order

    Returns:
        List of len(tier_widths) + 1 quantities summing to total; the last
        entry is the unbounded tier

    Raises:
        ValueError: If total is negative or a width is not positive
    """
    remaining = Decimal(total)
    if remaining < 0:
        raise ValueError(f"Cannot allocate a negative quantity to tiers (got {total})")
    _validate_widths(tier_widths)

    buckets: List[Decimal] = []
    for width in tier_widths:
        allocated = min(remaining, Decimal(width))
        buckets.append(allocated)
        remaining -= allocated
    buckets.append(remaining)
    return buckets


def tier_start_amounts(tier_widths: Sequence[Number]) -> List[str]:
    """
    Start-usage amounts for each tier, as the catalog expects them.

    [250, 1250, 2500] -> ["0", "250", "1500", "4000"]
    """
    _validate_widths(tier_widths)
    starts = ["0"]
    cumulative = Decimal(0)
    for width in tier_widths:
        cumulative += Decimal(width)
        starts.append(str(cumulative))
    return starts


def tier_labels(tier_widths: Sequence[Number]) -> List[str]:
    """
    Human-readable tier names.

    [250, 1250, 2500] -> ["first 250", "next 1250", "next 2500", "over 4000"]
    """
    _validate_widths(tier_widths)
    if not tier_widths:
        return ["all"]
    labels = [f"first {tier_widths[0]}"]
    labels.extend(f"next {width}" for width in tier_widths[1:])
    labels.append(f"over {sum(Decimal(width) for width in tier_widths)}")
    return labels
