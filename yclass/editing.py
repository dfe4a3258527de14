"""Edits to the field list of a class."""

from __future__ import annotations

from yclass.fields import Field
from yclass.layout import allocate_padding, into_field
from yclass.values import FieldKind


class EditError(ValueError):
    """Raised when an edit cannot be carried out."""


def is_valid_ident(name: str) -> bool:
    """Whether ``name`` can be used as a class or field name."""
    return bool(name) and not name[0].isnumeric() and not any(ch.isspace() for ch in name)


def _position(fields: list[Field], field_id: int) -> int:
    for index, field in enumerate(fields):
        if field.id == field_id:
            return index
    raise LookupError(f"no field with id {field_id}")


def add_bytes(fields: list[Field], n: int) -> None:
    """Append ``n`` bytes of unknown fields."""
    fields.extend(allocate_padding(n))


def remove_fields(fields: list[Field], field_id: int, n: int) -> list[Field]:
    """Remove up to ``n`` fields starting at ``field_id``; return the removed ones."""
    pos = _position(fields, field_id)
    end = min(pos + n, len(fields))
    removed = fields[pos:end]
    del fields[pos:end]
    return removed


def insert_bytes(fields: list[Field], field_id: int, n: int) -> None:
    """Insert ``n`` bytes of unknown fields before ``field_id``."""
    pos = _position(fields, field_id)
    fields[pos:pos] = allocate_padding(n)


def change_kind(fields: list[Field], field_id: int, kind: FieldKind) -> int:
    """Replace a field with one of ``kind``, keeping its name; return the new id.

    A smaller field is followed by padding; a larger one takes over the
    following fields. Raises EditError if there are not enough bytes after it.
    """
    pos = _position(fields, field_id)
    old = fields[pos]
    new_size = kind.size()

    if old.size() > new_size:
        padding = allocate_padding(old.size() - new_size)
        fields[pos] = into_field(kind, old.name)
        fields[pos + 1:pos + 1] = padding
        return fields[pos].id

    steal_size = 0
    steal_len = 0
    while steal_size < new_size and pos + steal_len < len(fields):
        steal_size += fields[pos + steal_len].size()
        steal_len += 1

    if steal_size < new_size:
        raise EditError("Not enough space for a new field")

    del fields[pos:pos + steal_len]
    fields[pos:pos] = [into_field(kind, old.name), *allocate_padding(steal_size - new_size)]
    return fields[pos].id