"""Fields that make up a class layout and how they read and write memory."""

from __future__ import annotations

import abc
import itertools
import math
import re
import struct
import threading
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from yclass.context import InspectionContext
from yclass.process import Process
from yclass.values import FieldKind, Value

_id_counter = itertools.count()
_id_lock = threading.Lock()


def next_id() -> int:
    """Return a new, unique field id."""
    with _id_lock:
        return next(_id_counter)


@dataclass(frozen=True)
class FieldRow:
    """What inspecting one field at one position produced."""

    field_id: int
    offset: int
    address: int
    value: str
    name: str | None = None
    selected: bool = False
    details: tuple[tuple[str, str | None], ...] = ()


_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?)",
    re.IGNORECASE,
)

_HEX_KINDS = {
    1: FieldKind.UNK8,
    2: FieldKind.UNK16,
    4: FieldKind.UNK32,
    8: FieldKind.UNK64,
}
_SIGNED_KINDS = {1: FieldKind.I8, 2: FieldKind.I16, 4: FieldKind.I32, 8: FieldKind.I64}
_UNSIGNED_KINDS = {1: FieldKind.U8, 2: FieldKind.U16, 4: FieldKind.U32, 8: FieldKind.U64}
_FLOAT_KINDS = {4: FieldKind.F32, 8: FieldKind.F64}


def _parse_int(text: str, size: int, signed: bool) -> int:
    if not _INT_PATTERN.fullmatch(text) or (not signed and text.startswith("-")):
        raise ValueError(f"invalid integer: {text!r}")
    number = int(text)
    bits = size * 8
    low, high = (-(1 << (bits - 1)), (1 << (bits - 1)) - 1) if signed else (0, (1 << bits) - 1)
    if not low <= number <= high:
        raise ValueError(f"{text} does not fit into {bits} bits")
    return number


def _pack_f32(number: float) -> bytes:
    try:
        return struct.pack("<f", number)
    except OverflowError:
        return struct.pack("<f", math.copysign(math.inf, number))


def _parse_float(text: str) -> float:
    if not _FLOAT_PATTERN.fullmatch(text):
        raise ValueError(f"invalid float: {text!r}")
    return float(text)


def _exp_format(number: float) -> str:
    """Scientific notation with the shortest round-tripping mantissa."""
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    if number == 0:
        return "-0e0" if math.copysign(1.0, number) < 0 else "0e0"
    sign, digits, exponent = Decimal(repr(number)).normalize().as_tuple()
    text = "".join(map(str, digits))
    power = int(exponent) + len(text) - 1
    mantissa = text[0] + (f".{text[1:]}" if len(text) > 1 else "")
    return f"{'-' if sign else ''}{mantissa}e{power}"


def _display_f64(number: float) -> str:
    return str(Value(FieldKind.F64, number))


def _display_f32(number: float) -> str:
    return str(Value(FieldKind.F32, number))


class Field(abc.ABC):
    """One entry of a class: a run of bytes with a meaning."""

    def __init__(self, size: int, name: str | None = None) -> None:
        self.id = next_id()
        self.name = name
        self._size = size

    def size(self) -> int:
        """Size of the field in bytes."""
        return self._size

    @abc.abstractmethod
    def kind(self) -> FieldKind:
        """The kind of this field."""

    @abc.abstractmethod
    def _describe(
        self, data: bytes, ctx: InspectionContext
    ) -> tuple[str, tuple[tuple[str, str | None], ...]]:
        """The displayed value and extra views for ``data``."""

    def inspect(self, ctx: InspectionContext) -> FieldRow:
        """Read this field at the context's position and advance past it."""
        address = ctx.address + ctx.offset
        data = ctx.process.read(address, self._size)
        value, details = self._describe(data, ctx)
        row = FieldRow(
            field_id=self.id,
            offset=ctx.offset,
            address=address,
            value=value,
            name=self.name,
            selected=ctx.is_selected(self.id),
            details=details,
        )
        ctx.offset += self._size
        return row

    def codegen(self, generator: Any, classes: Any) -> None:
        """Describe this field to a code generator."""
        generator.add_field(self.name, self.kind(), None)


class HexField(Field):
    """Bytes of unknown meaning, shown as hex, integer, float and pointer."""

    def __init__(self, size: int) -> None:
        if size not in _HEX_KINDS:
            raise ValueError(f"unsupported hex field size: {size}")
        super().__init__(size)

    def kind(self) -> FieldKind:
        return _HEX_KINDS[self._size]

    def byte_view(self, data: bytes) -> str:
        """The bytes as two-digit upper-case hex, separated by spaces."""
        return " ".join(f"{b:02X}" for b in data[: self._size])

    def int_view(self, data: bytes) -> tuple[str, str | None]:
        """The bytes as a signed integer, with halves as hover text."""
        data = data[: self._size]
        displayed = int.from_bytes(data, "little", signed=True)
        if self._size == 1:
            return str(displayed), None
        half = self._size // 2
        high = int.from_bytes(data[:half], "little", signed=True)
        low = int.from_bytes(data[half:], "little", signed=True)
        return str(displayed), f"High: {high}\nLow: {low}"

    def float_view(self, data: bytes) -> tuple[str, str | None] | None:
        """The bytes as a float, or None for sizes that hold no float."""
        if self._size == 4:
            displayed = struct.unpack("<f", data[:4])[0]
            return _exp_format(displayed), f"Full:{_display_f64(displayed)}"
        if self._size == 8:
            displayed = struct.unpack("<d", data[:8])[0]
            high, low = struct.unpack("<ff", data[:8])
            hover = (
                f"Full:{_display_f64(displayed)}\n"
                f"High: {_display_f32(high)}\nLow: {_display_f32(low)}"
            )
            return _exp_format(displayed), hover
        return None

    def pointer_view(self, data: bytes) -> tuple[str, str | None] | None:
        """The bytes as a pointer, or None unless the field is 8 bytes."""
        if self._size != 8:
            return None
        address = int.from_bytes(data[:8], "little")
        return f"-> {address:X}", None

    def _describe(
        self, data: bytes, ctx: InspectionContext
    ) -> tuple[str, tuple[tuple[str, str | None], ...]]:
        details = [self.int_view(data)]
        float_view = self.float_view(data)
        if float_view is not None:
            details.append(float_view)
        pointer_view = self.pointer_view(data)
        if pointer_view is not None and ctx.process.can_read(int.from_bytes(data[:8], "little")):
            details.append(pointer_view)
        return self.byte_view(data), tuple(details)

    def codegen(self, generator: Any, classes: Any) -> None:
        generator.add_offset(self._size)


class IntField(Field):
    """A named signed or unsigned integer."""

    def __init__(self, size: int, signed: bool, name: str) -> None:
        if size not in _SIGNED_KINDS:
            raise ValueError(f"unsupported integer size: {size}")
        super().__init__(size, name)
        self.signed = signed

    def kind(self) -> FieldKind:
        return (_SIGNED_KINDS if self.signed else _UNSIGNED_KINDS)[self._size]

    def format_value(self, data: bytes) -> str:
        """The integer held in ``data``."""
        return str(int.from_bytes(data[: self._size], "little", signed=self.signed))

    def write_value(self, process: Process, address: int, text: str) -> None:
        """Parse ``text`` and store it; raises ValueError if it does not parse."""
        number = _parse_int(text, self._size, self.signed)
        process.write(address, number.to_bytes(self._size, "little", signed=self.signed))

    def _describe(
        self, data: bytes, ctx: InspectionContext
    ) -> tuple[str, tuple[tuple[str, str | None], ...]]:
        return self.format_value(data), ()


class FloatField(Field):
    """A named single or double precision float."""

    def __init__(self, size: int, name: str) -> None:
        if size not in _FLOAT_KINDS:
            raise ValueError(f"unsupported float size: {size}")
        super().__init__(size, name)

    def kind(self) -> FieldKind:
        return _FLOAT_KINDS[self._size]

    def format_value(self, data: bytes) -> str:
        """The float held in ``data``."""
        fmt = "<f" if self._size == 4 else "<d"
        return _display_f64(struct.unpack(fmt, data[: self._size])[0])

    def write_value(self, process: Process, address: int, text: str) -> None:
        """Parse ``text`` and store it; raises ValueError if it does not parse."""
        number = _parse_float(text)
        data = _pack_f32(number) if self._size == 4 else struct.pack("<d", number)
        process.write(address, data)

    def _describe(
        self, data: bytes, ctx: InspectionContext
    ) -> tuple[str, tuple[tuple[str, str | None], ...]]:
        return self.format_value(data), ()


class BoolField(Field):
    """A named one-byte boolean."""

    _TRUE = frozenset({"1", "true", "yes", "on"})
    _FALSE = frozenset({"0", "false", "no", "off"})

    def __init__(self, name: str) -> None:
        super().__init__(1, name)

    def kind(self) -> FieldKind:
        return FieldKind.BOOL

    def format_value(self, data: bytes) -> str:
        """``true``, ``false`` or ``invalid`` for the byte in ``data``."""
        return {1: "true", 0: "false"}.get(data[0], "invalid")

    def write_value(self, process: Process, address: int, text: str) -> None:
        """Store a boolean given as text; raises ValueError for other words."""
        if text in self._TRUE:
            process.write(address, b"\x01")
        elif text in self._FALSE:
            process.write(address, b"\x00")
        else:
            raise ValueError(f"invalid boolean: {text!r}")

    def _describe(
        self, data: bytes, ctx: InspectionContext
    ) -> tuple[str, tuple[tuple[str, str | None], ...]]:
        return self.format_value(data), ()