"""Building fields: padding, fields of a given kind and row prefixes."""

from __future__ import annotations

from yclass.fields import BoolField, Field, FloatField, HexField, IntField
from yclass.pointers import PointerField, StringPointerField
from yclass.values import FieldKind

_PADDING_SIZES = (8, 4, 2, 1)

_DEFAULT_NAMES = {
    FieldKind.I8: "int8",
    FieldKind.I16: "int16",
    FieldKind.I32: "int32",
    FieldKind.I64: "int64",
    FieldKind.U8: "uint8",
    FieldKind.U16: "uint16",
    FieldKind.U32: "uint32",
    FieldKind.U64: "uint64",
    FieldKind.F32: "float",
    FieldKind.F64: "double",
    FieldKind.BOOL: "boolean",
    FieldKind.PTR: "pointer",
    FieldKind.STR_PTR: "str_ptr",
}

_SIGNED = {FieldKind.I8, FieldKind.I16, FieldKind.I32, FieldKind.I64}
_UNSIGNED = {FieldKind.U8, FieldKind.U16, FieldKind.U32, FieldKind.U64}
_HEX = {FieldKind.UNK8, FieldKind.UNK16, FieldKind.UNK32, FieldKind.UNK64}


def allocate_padding(n: int) -> list[Field]:
    """Hex fields covering ``n`` bytes, largest first."""
    fields: list[Field] = []
    for size in _PADDING_SIZES:
        count, n = divmod(n, size)
        fields.extend(HexField(size) for _ in range(count))
    return fields


def into_field(kind: FieldKind, name: str | None = None) -> Field:
    """A new field of ``kind``, named ``name`` or a default for the kind."""
    if kind in _HEX:
        return HexField(kind.size())
    name = name if name is not None else _DEFAULT_NAMES[kind]
    if kind in _SIGNED:
        return IntField(kind.size(), True, name)
    if kind in _UNSIGNED:
        return IntField(kind.size(), False, name)
    if kind in (FieldKind.F32, FieldKind.F64):
        return FloatField(kind.size(), name)
    if kind is FieldKind.BOOL:
        return BoolField(name)
    if kind is FieldKind.PTR:
        return PointerField(name)
    return StringPointerField(name)


def format_prelude(offset: int, address: int) -> tuple[str, str]:
    """The offset and absolute address shown before every field."""
    return f"{offset:04X}", f"{address:012X}"


def is_unaligned(offset: int) -> bool:
    """Whether ``offset`` is not a multiple of eight."""
    return offset % 8 != 0