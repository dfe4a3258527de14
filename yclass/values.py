"""Field kinds and typed scalar values read from memory."""

from __future__ import annotations

import enum
import math
import struct
from decimal import Decimal


class FieldKind(enum.Enum):
    """Every kind of field a class can contain."""

    UNK8 = "Unk8"
    UNK16 = "Unk16"
    UNK32 = "Unk32"
    UNK64 = "Unk64"
    I8 = "I8"
    I16 = "I16"
    I32 = "I32"
    I64 = "I64"
    U8 = "U8"
    U16 = "U16"
    U32 = "U32"
    U64 = "U64"
    F32 = "F32"
    F64 = "F64"
    PTR = "Ptr"
    STR_PTR = "StrPtr"
    BOOL = "Bool"

    def size(self) -> int:
        """Size of the field in bytes."""
        return _SIZES[self]

    def label(self) -> str | None:
        """Display label for numeric kinds, None for the others."""
        return _LABELS.get(self)


_SIZES = {
    FieldKind.UNK8: 1,
    FieldKind.I8: 1,
    FieldKind.U8: 1,
    FieldKind.BOOL: 1,
    FieldKind.UNK16: 2,
    FieldKind.I16: 2,
    FieldKind.U16: 2,
    FieldKind.UNK32: 4,
    FieldKind.I32: 4,
    FieldKind.U32: 4,
    FieldKind.F32: 4,
    FieldKind.UNK64: 8,
    FieldKind.I64: 8,
    FieldKind.U64: 8,
    FieldKind.F64: 8,
    FieldKind.PTR: 8,
    FieldKind.STR_PTR: 8,
}

_NAMED_VARIANTS = (
    (FieldKind.I8, "I8"),
    (FieldKind.I16, "I16"),
    (FieldKind.I32, "I32"),
    (FieldKind.I64, "I64"),
    (FieldKind.U8, "U8"),
    (FieldKind.U16, "U16"),
    (FieldKind.U32, "U32"),
    (FieldKind.U64, "U64"),
    (FieldKind.F32, "F32"),
    (FieldKind.F64, "F64"),
)
_LABELS = dict(_NAMED_VARIANTS)


def named_variants() -> tuple[tuple[FieldKind, str], ...]:
    """The numeric kinds with their labels, in display order."""
    return _NAMED_VARIANTS


_INT_RANGES = {
    FieldKind.I8: (-(1 << 7), (1 << 7) - 1),
    FieldKind.I16: (-(1 << 15), (1 << 15) - 1),
    FieldKind.I32: (-(1 << 31), (1 << 31) - 1),
    FieldKind.I64: (-(1 << 63), (1 << 63) - 1),
    FieldKind.U8: (0, (1 << 8) - 1),
    FieldKind.U16: (0, (1 << 16) - 1),
    FieldKind.U32: (0, (1 << 32) - 1),
    FieldKind.U64: (0, (1 << 64) - 1),
}

_EPSILON = {
    FieldKind.F32: 1.1920929e-07,
    FieldKind.F64: 2.220446049250313e-16,
}


def _to_f32(number: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", number))[0]
    except OverflowError:
        return math.copysign(math.inf, number)


def _plain_decimal(text: str) -> str:
    rendered = format(Decimal(text), "f")
    if "." in rendered:
        rendered = rendered.rstrip("0").rstrip(".")
    return rendered


def _format_float(number: float, single: bool) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    if not single:
        return _plain_decimal(repr(number))
    for precision in range(1, 10):
        candidate = f"{number:.{precision}g}"
        if _to_f32(float(candidate)) == number:
            return _plain_decimal(candidate)
    return _plain_decimal(repr(number))


class Value:
    """A scalar of one numeric field kind."""

    __slots__ = ("_kind", "data")
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, kind: FieldKind, data: int | float) -> None:
        if kind in _INT_RANGES:
            if not isinstance(data, int):
                raise TypeError(f"{kind.value} value must be an integer")
            low, high = _INT_RANGES[kind]
            if not low <= data <= high:
                raise ValueError(f"{data} does not fit into {kind.value}")
            data = int(data)
        elif kind is FieldKind.F32:
            data = _to_f32(float(data))
        elif kind is FieldKind.F64:
            data = float(data)
        else:
            raise ValueError(f"{kind.value} is not a numeric kind")
        self._kind = kind
        self.data = data

    def kind(self) -> FieldKind:
        """The field kind this value belongs to."""
        return self._kind

    def _check(self, other: object) -> bool:
        if not isinstance(other, Value):
            return False
        if other._kind is not self._kind:
            raise TypeError("Comparing different value types")
        return True

    def __eq__(self, other: object) -> bool:
        if not self._check(other):
            return NotImplemented
        assert isinstance(other, Value)
        epsilon = _EPSILON.get(self._kind)
        if epsilon is not None:
            return abs(self.data - other.data) < epsilon
        return self.data == other.data

    def __lt__(self, other: object) -> bool:
        if not self._check(other):
            return NotImplemented
        assert isinstance(other, Value)
        return self.data < other.data

    def __le__(self, other: object) -> bool:
        if not self._check(other):
            return NotImplemented
        assert isinstance(other, Value)
        return self.data <= other.data

    def __gt__(self, other: object) -> bool:
        if not self._check(other):
            return NotImplemented
        assert isinstance(other, Value)
        return self.data > other.data

    def __ge__(self, other: object) -> bool:
        if not self._check(other):
            return NotImplemented
        assert isinstance(other, Value)
        return self.data >= other.data

    def __str__(self) -> str:
        if self._kind is FieldKind.F32:
            return _format_float(self.data, single=True)
        if self._kind is FieldKind.F64:
            return _format_float(self.data, single=False)
        return str(self.data)

    def __repr__(self) -> str:
        return f"Value({self._kind.name}, {self.data!r})"