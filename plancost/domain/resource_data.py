"""
Read-only views over a resource's parsed Terraform configuration.

Attribute trees are wrapped in AttributeValue nodes, a tagged union of
absent / scalar / sequence / mapping. Lookups never raise: a missing path,
an out-of-range index or an explicit null all yield an absent value, so
handlers can branch on `exists` instead of guarding every access.
"""
from decimal import Decimal, InvalidOperation
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


class ValueKind(Enum):
    """Kinds of attribute values."""
    ABSENT = "absent"
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def freeze(value: Any) -> Any:
    """
    Deep-copy a parsed JSON value into an immutable structure.

    Mappings become read-only proxies and lists become tuples.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({str(key): freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def _kind_of(raw: Any) -> ValueKind:
    if raw is None:
        return ValueKind.ABSENT
    if isinstance(raw, Mapping):
        return ValueKind.MAPPING
    if isinstance(raw, tuple):
        return ValueKind.SEQUENCE
    return ValueKind.SCALAR


def split_path(path: str) -> List[str]:
    """Split a dotted attribute path, e.g. 'root_block_device.0.volume_size'."""
    if not path:
        return []
    return path.split(".")


class AttributeValue:
    """A node in a frozen attribute tree."""

    __slots__ = ("_raw", "_kind")

    def __init__(self, raw: Any = None):
        self._raw = raw
        self._kind = _kind_of(raw)

    @classmethod
    def absent(cls) -> "AttributeValue":
        return cls(None)

    @property
    def kind(self) -> ValueKind:
        return self._kind

    @property
    def exists(self) -> bool:
        return self._kind is not ValueKind.ABSENT

    @property
    def raw(self) -> Any:
        return self._raw

    def get(self, path: str) -> "AttributeValue":
        """
        Return the value at a dotted path relative to this node.

        Numeric segments index into sequences. Any segment that cannot be
        followed yields an absent value.
        """
        current = self._raw
        for segment in split_path(path):
            if isinstance(current, Mapping):
                current = current.get(segment)
            elif isinstance(current, tuple) and segment.isdigit():
                index = int(segment)
                current = current[index] if index < len(current) else None
            else:
                current = None
            if current is None:
                return AttributeValue.absent()
        return AttributeValue(current)

    def array(self) -> List["AttributeValue"]:
        """Return sequence elements as sub-views. Absent yields an empty list."""
        if self._kind is ValueKind.ABSENT:
            return []
        if self._kind is ValueKind.SEQUENCE:
            return [AttributeValue(item) for item in self._raw]
        return [self]

    def string(self) -> str:
        """Render a scalar as a string. Absent, mappings and sequences render as ''."""
        if self._kind is not ValueKind.SCALAR:
            return ""
        raw = self._raw
        if isinstance(raw, bool):
            return "true" if raw else "false"
        if isinstance(raw, float) and raw.is_integer():
            return str(int(raw))
        if isinstance(raw, Decimal) and raw.is_finite() and raw == raw.to_integral_value():
            return str(raw.quantize(Decimal(1)))
        return str(raw)

    def boolean(self) -> bool:
        """Interpret a scalar as a boolean. Only true and 'true' are truthy."""
        if self._kind is not ValueKind.SCALAR:
            return False
        if isinstance(self._raw, bool):
            return self._raw
        if isinstance(self._raw, str):
            return self._raw.strip().lower() == "true"
        return False

    def decimal(self) -> Optional[Decimal]:
        """Return a finite numeric scalar as a Decimal, or None (NaN and Infinity included)."""
        if self._kind is not ValueKind.SCALAR or isinstance(self._raw, bool):
            return None
        try:
            # str() keeps float literals such as 0.1 exact as written
            value = Decimal(str(self._raw).strip())
        except InvalidOperation:
            return None
        return value if value.is_finite() else None

    def integer(self) -> Optional[int]:
        """Return a numeric scalar truncated to an int, or None."""
        value = self.decimal()
        if value is None:
            return None
        return int(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AttributeValue):
            return NotImplemented
        return self._kind is other._kind and self._raw == other._raw

    def __repr__(self) -> str:
        return f"AttributeValue(kind={self._kind.value}, raw={self._raw!r})"


class ResourceData:
    """Read-only view over a single resource instance."""

    def __init__(
        self,
        address: str,
        resource_type: str,
        values: Optional[Mapping[str, Any]] = None,
    ):
        """
        Initialize a resource view.

        Args:
            address: Unique resource address (e.g. 'aws_instance.web[0]')
            resource_type: Terraform resource type (e.g. 'aws_instance')
            values: Parsed attribute tree; deep-frozen on construction
        """
        self.address = address
        self.type = resource_type
        self._root = AttributeValue(freeze(values or {}))
        self._references: Dict[str, Tuple["ResourceData", ...]] = {}

    @property
    def raw_values(self) -> Mapping[str, Any]:
        return self._root.raw

    def get(self, path: str) -> AttributeValue:
        return self._root.get(path)

    def exists(self, path: str) -> bool:
        return self._root.get(path).exists

    def references(self, attribute: str) -> Tuple["ResourceData", ...]:
        """Resources linked through a reference attribute, in declaration order."""
        return self._references.get(attribute, ())

    def link_references(self, attribute: str, targets: Sequence["ResourceData"]) -> None:
        """Record resolved references. Only called by the loader before estimation."""
        self._references[attribute] = tuple(targets)

    def __repr__(self) -> str:
        return f"ResourceData(address={self.address!r}, type={self.type!r})"
