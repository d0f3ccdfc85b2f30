"""
Read-only view over user-supplied usage estimates for one resource.
A missing key means the usage is unknown, not zero.
"""
from typing import Any, Mapping, Optional

from plancost.domain.resource_data import AttributeValue, freeze


class UsageData:
    """Usage estimates keyed by metric name (e.g. 'monthly_secrets_operations')."""

    def __init__(self, address: str, values: Optional[Mapping[str, Any]] = None):
        self.address = address
        self._root = AttributeValue(freeze(values or {}))

    @property
    def raw_values(self) -> Mapping[str, Any]:
        return self._root.raw

    def get(self, key: str) -> AttributeValue:
        return self._root.get(key)

    def exists(self, key: str) -> bool:
        return self._root.get(key).exists

    def __repr__(self) -> str:
        return f"UsageData(address={self.address!r}, keys={sorted(self.raw_values)})"
