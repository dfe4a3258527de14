"""Pointer fields: pointers to classes and pointers to strings."""

from __future__ import annotations

import random
from collections.abc import Iterable
from typing import Any

from yclass.address import parse_address
from yclass.context import InspectionContext
from yclass.fields import Field
from yclass.process import Process
from yclass.values import FieldKind

_POINTER_SIZE = 8
_STRING_PREVIEW = 64

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def _debug_str(text: str) -> str:
    """Quote ``text`` with escapes for quotes, backslashes and control characters."""
    parts = []
    for ch in text:
        escaped = _ESCAPES.get(ch)
        if escaped is not None:
            parts.append(escaped)
        elif not ch.isprintable() and ch != " ":
            parts.append(f"\\u{{{ord(ch):x}}}")
        else:
            parts.append(ch)
    return '"' + "".join(parts) + '"'


class PointerField(Field):
    """A named pointer to an instance of another class."""

    def __init__(self, name: str, class_id: int | None = None) -> None:
        super().__init__(_POINTER_SIZE, name)
        self.class_id = class_id

    def kind(self) -> FieldKind:
        return FieldKind.PTR

    def format_value(self, address: int, editing: bool) -> str:
        """The pointer as hex; prefixed with an arrow unless it seeds an editor."""
        return f"{address:X}" if editing else f"-> {address:X}"

    def write_value(self, process: Process, address: int, text: str) -> None:
        """Parse ``text`` as an address and store it; raises ValueError if invalid."""
        target = parse_address(text)
        process.write(address, target.to_bytes(_POINTER_SIZE, "little"))

    def header_label(self, class_list: Any, address: int) -> tuple[str, bool]:
        """The bracketed name of the pointed-to class and whether it exists."""
        target = None
        if self.class_id is not None and class_list is not None:
            target = class_list.by_id(self.class_id)
        if target is not None:
            return f"[{target.name}]", True
        return f"[C{address:X}]", False

    def _describe(
        self, data: bytes, ctx: InspectionContext
    ) -> tuple[str, tuple[tuple[str, str | None], ...]]:
        if self.class_id is None:
            self.class_id = random.getrandbits(64)
        address = int.from_bytes(data[:_POINTER_SIZE], "little")
        label, _ = self.header_label(ctx.class_list, address)
        return self.format_value(address, False), ((label, None),)

    def codegen(self, generator: Any, classes: Iterable[Any]) -> None:
        """Describe this pointer, naming its target class; LookupError if none."""
        if self.class_id is None:
            raise LookupError(f"pointer {self.name!r} has no target class")
        for cls in classes:
            if cls.id == self.class_id:
                generator.add_field(self.name, FieldKind.PTR, cls.name)
                return
        raise LookupError(f"pointer {self.name!r} refers to an unknown class")


class StringPointerField(Field):
    """A named pointer to a null-terminated string."""

    def __init__(self, name: str) -> None:
        super().__init__(_POINTER_SIZE, name)

    def kind(self) -> FieldKind:
        return FieldKind.STR_PTR

    def format_value(self, data: bytes, editing: bool) -> str:
        """The quoted string up to the first NUL; arrow-prefixed unless editing."""
        end = data.find(b"\0")
        raw = data if end < 0 else data[:end]
        quoted = _debug_str(raw.decode("utf-8", errors="replace"))
        return quoted if editing else f"-> {quoted}"

    def _describe(
        self, data: bytes, ctx: InspectionContext
    ) -> tuple[str, tuple[tuple[str, str | None], ...]]:
        address = int.from_bytes(data[:_POINTER_SIZE], "little")
        if not ctx.process.can_read(address):
            return "Invalid Address", ()
        return self.format_value(ctx.process.read(address, _STRING_PREVIEW), False), ()