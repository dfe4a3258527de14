"""Code generators that turn class layouts into struct declarations."""

from __future__ import annotations

import abc
import enum
from collections.abc import Callable, Iterable
from typing import Any

from yclass.values import FieldKind

_VERSION = "0.1.0"

_RUST_TYPES = {
    FieldKind.I8: "i8",
    FieldKind.U8: "u8",
    FieldKind.I16: "i16",
    FieldKind.U16: "u16",
    FieldKind.I32: "i32",
    FieldKind.U32: "u32",
    FieldKind.I64: "i64",
    FieldKind.U64: "u64",
    FieldKind.F32: "f32",
    FieldKind.F64: "f64",
    FieldKind.STR_PTR: "*const u8",
    FieldKind.BOOL: "bool",
}

_CPP_TYPES = {
    FieldKind.I8: "int8_t",
    FieldKind.U8: "uint8_t",
    FieldKind.I16: "int16_t",
    FieldKind.U16: "uint16_t",
    FieldKind.I32: "int32_t",
    FieldKind.U32: "uint32_t",
    FieldKind.I64: "int64_t",
    FieldKind.U64: "uint64_t",
    FieldKind.F32: "float",
    FieldKind.F64: "double",
    FieldKind.STR_PTR: "const char*",
    FieldKind.BOOL: "bool",
}


def _type_name(
    table: dict[FieldKind, str],
    kind: FieldKind,
    metadata: str | None,
    pointer: Callable[[str], str],
) -> str:
    if kind is FieldKind.PTR:
        if metadata is None:
            raise ValueError("a pointer field needs the name of its target class")
        return pointer(metadata)
    try:
        return table[kind]
    except KeyError:
        raise ValueError(f"{kind.value} fields have no declared type") from None


class Generator(abc.ABC):
    """Receives classes field by field and produces source text."""

    def __init__(self) -> None:
        self._offset = 0
        self._last_offset = 0

    @abc.abstractmethod
    def begin_class(self, name: str) -> None:
        """Start the declaration of class ``name``."""

    def end_class(self) -> None:
        """Finish the current class declaration."""
        self._close_class()
        self._offset = 0
        self._last_offset = 0

    def add_field(self, name: str, kind: FieldKind, metadata: str | None = None) -> None:
        """Declare a named field, padding any bytes skipped before it."""
        type_name = self._type_name(kind, metadata)
        if self._offset != self._last_offset:
            self._padding(self._offset, self._offset - self._last_offset)
        self._field(name, type_name)
        self._offset += kind.size()
        self._last_offset = self._offset

    def add_offset(self, offset: int) -> None:
        """Skip ``offset`` bytes of unnamed data."""
        self._offset += offset

    @abc.abstractmethod
    def finalize(self) -> str:
        """Return the generated text and reset the output."""

    @abc.abstractmethod
    def _type_name(self, kind: FieldKind, metadata: str | None) -> str: ...

    @abc.abstractmethod
    def _padding(self, offset: int, size: int) -> None: ...

    @abc.abstractmethod
    def _field(self, name: str, type_name: str) -> None: ...

    @abc.abstractmethod
    def _close_class(self) -> None: ...


class RustGenerator(Generator):
    """Produces ``#[repr(C)]`` struct declarations."""

    def __init__(self) -> None:
        super().__init__()
        self._text = f"// Generated by YClass {_VERSION}\n\n"

    def begin_class(self, name: str) -> None:
        self._text += f"#[repr(C)]\npub struct {name} {{\n"

    def finalize(self) -> str:
        text, self._text = self._text, ""
        return text

    def _type_name(self, kind: FieldKind, metadata: str | None) -> str:
        return _type_name(_RUST_TYPES, kind, metadata, lambda target: f"Option<&'static {target}>")

    def _padding(self, offset: int, size: int) -> None:
        self._text += f"    _pad_0x{offset:x}: [u8; 0x{size:x}],\n"

    def _field(self, name: str, type_name: str) -> None:
        self._text += f"    pub {name}: {type_name},\n"

    def _close_class(self) -> None:
        self._text += "}\n\n"


class CppGenerator(Generator):
    """Produces class declarations with forward declarations first."""

    def __init__(self) -> None:
        super().__init__()
        self._predecls = f"// Generated by YClass {_VERSION}\n\n#include <cstdint>\n\n"
        self._main = ""

    def begin_class(self, name: str) -> None:
        self._predecls += f"class {name};\n"
        self._main += f"class {name} {{\npublic:\n"

    def finalize(self) -> str:
        text = self._predecls + "\n" + self._main
        self._predecls = ""
        self._main = ""
        return text

    def _type_name(self, kind: FieldKind, metadata: str | None) -> str:
        return _type_name(_CPP_TYPES, kind, metadata, lambda target: f"{target}*")

    def _padding(self, offset: int, size: int) -> None:
        self._main += f"    char _pad0x{offset:x}[0x{size:x}];\n"

    def _field(self, name: str, type_name: str) -> None:
        self._main += f"    {type_name} {name};\n"

    def _close_class(self) -> None:
        self._main += "};\n\n"


class AvailableGenerator(enum.Enum):
    """The generators a user can choose from."""

    RUST = "Rust"
    CPP = "C++"

    def label(self) -> str:
        """Name shown to the user."""
        return self.value

    def generator(self) -> Generator:
        """A fresh generator of this kind."""
        if self is AvailableGenerator.RUST:
            return RustGenerator()
        return CppGenerator()


def generate(classes: Iterable[Any], generator: Generator | AvailableGenerator) -> str:
    """Run every class through ``generator`` and return the produced text."""
    if isinstance(generator, AvailableGenerator):
        generator = generator.generator()
    classes = list(classes)
    for cls in classes:
        generator.begin_class(cls.name)
        for field in cls.fields:
            field.codegen(generator, classes)
        generator.end_class()
    return generator.finalize()