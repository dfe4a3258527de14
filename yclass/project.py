"""Saving and loading projects: the classes and their named fields."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from yclass.classes import Class, ClassList
from yclass.layout import allocate_padding, into_field
from yclass.pointers import PointerField
from yclass.values import FieldKind


class ProjectFormatError(ValueError):
    """Raised when project text cannot be understood."""


@dataclass
class DataField:
    """A named field at an offset inside a stored class."""

    name: str
    offset: int
    kind: FieldKind
    metadata: str | None = None


@dataclass
class DataClass:
    """A stored class with its named fields."""

    name: str
    fields: list[DataField] = field(default_factory=list)


@dataclass(frozen=True)
class _Variant:
    name: str


_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t", "\0": "\\0"}
_UNESCAPES = {"n": "\n", "r": "\r", "t": "\t", "0": "\0", "\\": "\\", '"': '"', "'": "'"}


def _quote(text: str) -> str:
    parts = []
    for ch in text:
        escaped = _ESCAPES.get(ch)
        if escaped is not None:
            parts.append(escaped)
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            parts.append(f"\\u{{{ord(ch):x}}}")
        else:
            parts.append(ch)
    return '"' + "".join(parts) + '"'


class _Reader:
    """Reader for the subset of the RON notation used by project files."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def parse(self) -> Any:
        value = self._value()
        self._skip()
        if self._pos != len(self._text):
            raise self._error("unexpected trailing text")
        return value

    def _error(self, message: str) -> ProjectFormatError:
        return ProjectFormatError(f"{message} at position {self._pos}")

    def _skip(self) -> None:
        text = self._text
        while self._pos < len(text):
            if text[self._pos].isspace():
                self._pos += 1
            elif text.startswith("//", self._pos):
                end = text.find("\n", self._pos)
                self._pos = len(text) if end < 0 else end + 1
            elif text.startswith("/*", self._pos):
                end = text.find("*/", self._pos + 2)
                if end < 0:
                    raise self._error("unterminated comment")
                self._pos = end + 2
            else:
                break

    def _peek(self) -> str:
        self._skip()
        return self._text[self._pos] if self._pos < len(self._text) else ""

    def _expect(self, ch: str) -> None:
        if self._peek() != ch:
            raise self._error(f"expected {ch!r}")
        self._pos += 1

    def _value(self) -> Any:
        ch = self._peek()
        if ch == "(":
            return self._struct()
        if ch == "[":
            return self._list()
        if ch == '"':
            return self._string()
        if ch.isdigit() or ch in ("+", "-") and ch:
            return self._number()
        if ch.isalpha() or ch == "_":
            name = self._ident()
            if name == "Some":
                self._expect("(")
                inner = self._value()
                if self._peek() == ",":
                    self._pos += 1
                self._expect(")")
                return inner
            if name == "None":
                return None
            if name in ("true", "false"):
                return name == "true"
            if self._peek() == "(":
                return self._struct()
            return _Variant(name)
        raise self._error("unexpected character" if ch else "unexpected end of input")

    def _ident(self) -> str:
        self._skip()
        start = self._pos
        text = self._text
        while self._pos < len(text) and (text[self._pos].isalnum() or text[self._pos] == "_"):
            self._pos += 1
        if start == self._pos:
            raise self._error("expected an identifier")
        return text[start:self._pos]

    def _number(self) -> int:
        start = self._pos
        text = self._text
        if text[self._pos] in "+-":
            self._pos += 1
        digits_start = self._pos
        while self._pos < len(text) and text[self._pos].isdigit():
            self._pos += 1
        if digits_start == self._pos:
            raise self._error("expected a number")
        if self._pos < len(text) and (text[self._pos].isalpha() or text[self._pos] == "."):
            raise self._error("expected an integer")
        return int(text[start:self._pos])

    def _string(self) -> str:
        text = self._text
        self._pos += 1
        parts = []
        while True:
            if self._pos >= len(text):
                raise self._error("unterminated string")
            ch = text[self._pos]
            self._pos += 1
            if ch == '"':
                return "".join(parts)
            if ch != "\\":
                parts.append(ch)
                continue
            if self._pos >= len(text):
                raise self._error("unterminated escape")
            code = text[self._pos]
            self._pos += 1
            if code in _UNESCAPES:
                parts.append(_UNESCAPES[code])
            elif code == "u":
                parts.append(self._unicode_escape())
            else:
                raise self._error(f"unknown escape \\{code}")

    def _unicode_escape(self) -> str:
        text = self._text
        if text.startswith("{", self._pos):
            end = text.find("}", self._pos)
            if end < 0:
                raise self._error("unterminated unicode escape")
            digits = text[self._pos + 1:end]
            self._pos = end + 1
        else:
            digits = text[self._pos:self._pos + 4]
            self._pos += 4
        try:
            return chr(int(digits, 16))
        except ValueError:
            raise self._error("invalid unicode escape") from None

    def _struct(self) -> dict[str, Any]:
        self._expect("(")
        result: dict[str, Any] = {}
        while True:
            if self._peek() == ")":
                self._pos += 1
                return result
            key = self._ident()
            self._expect(":")
            result[key] = self._value()
            ch = self._peek()
            if ch == ",":
                self._pos += 1
            elif ch != ")":
                raise self._error("expected ',' or ')'")

    def _list(self) -> list[Any]:
        self._expect("[")
        result: list[Any] = []
        while True:
            if self._peek() == "]":
                self._pos += 1
                return result
            result.append(self._value())
            ch = self._peek()
            if ch == ",":
                self._pos += 1
            elif ch != "]":
                raise self._error("expected ',' or ']'")


def _required(data: Any, key: str, kind: type, what: str) -> Any:
    if not isinstance(data, dict) or key not in data:
        raise ProjectFormatError(f"{what} is missing {key!r}")
    value = data[key]
    if not isinstance(value, kind) or isinstance(value, bool):
        raise ProjectFormatError(f"{what} has an invalid {key!r}")
    return value


def _data_field(raw: Any) -> DataField:
    name = _required(raw, "name", str, "field")
    offset = _required(raw, "offset", int, "field")
    if offset < 0:
        raise ProjectFormatError(f"field {name!r} has a negative offset")
    kind_raw = _required(raw, "kind", _Variant, "field")
    try:
        kind = FieldKind(kind_raw.name)
    except ValueError:
        raise ProjectFormatError(f"unknown field kind {kind_raw.name!r}") from None
    metadata = raw.get("metadata")
    if metadata is not None and not isinstance(metadata, str):
        raise ProjectFormatError(f"field {name!r} has invalid metadata")
    return DataField(name, offset, kind, metadata)


def _data_class(raw: Any) -> DataClass:
    name = _required(raw, "name", str, "class")
    fields = _required(raw, "fields", list, "class")
    return DataClass(name, [_data_field(f) for f in fields])


class _Recorder:
    """Collects named fields and their offsets as classes are described."""

    def __init__(self) -> None:
        self.classes: list[DataClass] = []
        self._offset = 0

    def begin_class(self, name: str) -> None:
        self.classes.append(DataClass(name, []))

    def add_field(self, name: str, kind: FieldKind, metadata: str | None = None) -> None:
        self.classes[-1].fields.append(DataField(name, self._offset, kind, metadata))
        self._offset += kind.size()

    def add_offset(self, offset: int) -> None:
        self._offset += offset

    def end_class(self) -> None:
        self._offset = 0


@dataclass
class ProjectData:
    """The stored form of a project."""

    classes: list[DataClass] = field(default_factory=list)

    @classmethod
    def store(cls, classes: list[Class]) -> ProjectData:
        """Capture the named fields of ``classes``."""
        classes = list(classes)
        recorder = _Recorder()
        for klass in classes:
            recorder.begin_class(klass.name)
            for f in klass.fields:
                f.codegen(recorder, classes)
            recorder.end_class()
        return cls(recorder.classes)

    def load(self) -> ClassList:
        """Rebuild a class list, padding the gaps between named fields."""
        class_list = ClassList.empty()
        for data_class in self.classes:
            class_list.add_empty_class(data_class.name)

        for data_class in self.classes:
            target = class_list.by_name(data_class.name)
            assert target is not None
            current_offset = 0
            for data_field in sorted(data_class.fields, key=lambda f: f.offset):
                if data_field.offset > current_offset:
                    target.fields.extend(allocate_padding(data_field.offset - current_offset))
                if data_field.kind is FieldKind.PTR:
                    if data_field.metadata is None:
                        raise ProjectFormatError(
                            f"pointer {data_field.name!r} does not name its target class"
                        )
                    referenced = class_list.by_name(data_field.metadata)
                    if referenced is not None:
                        ref_id = referenced.id
                    else:
                        ref_id = class_list.add_class(data_field.metadata)
                    target.fields.append(PointerField(data_field.name, class_id=ref_id))
                else:
                    target.fields.append(into_field(data_field.kind, data_field.name))
                current_offset = data_field.offset + data_field.kind.size()

            if current_offset % 8:
                target.fields.extend(allocate_padding(8 - current_offset % 8))

        return class_list

    @classmethod
    def from_str(cls, text: str) -> ProjectData:
        """Parse project text; raises ProjectFormatError if it is invalid."""
        raw = _Reader(text).parse()
        classes = _required(raw, "classes", list, "project")
        return cls([_data_class(c) for c in classes])

    def to_string(self) -> str:
        """The project as text."""
        return "(classes:[" + ",".join(self._class_text(c) for c in self.classes) + "])"

    @staticmethod
    def _class_text(data_class: DataClass) -> str:
        fields = ",".join(ProjectData._field_text(f) for f in data_class.fields)
        return f"(name:{_quote(data_class.name)},fields:[{fields}])"

    @staticmethod
    def _field_text(data_field: DataField) -> str:
        metadata = "None" if data_field.metadata is None else f"Some({_quote(data_field.metadata)})"
        return (
            f"(name:{_quote(data_field.name)},offset:{data_field.offset},"
            f"kind:{data_field.kind.value},metadata:{metadata})"
        )