"""Classes being reverse engineered and the list holding them."""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from yclass.fields import Field, HexField
from yclass.values import FieldKind

_UNKNOWN_KINDS = frozenset({FieldKind.UNK8, FieldKind.UNK16, FieldKind.UNK32, FieldKind.UNK64})
_NEW_CLASS_FIELDS = 10


def _random_id() -> int:
    return random.getrandbits(64)


@dataclass
class Class:
    """A named layout of fields."""

    id: int
    name: str
    fields: list[Field] = field(default_factory=list)

    @classmethod
    def new(cls, class_id: int, name: str) -> Class:
        """A class filled with ten unknown eight-byte fields."""
        return cls(class_id, name, [HexField(8) for _ in range(_NEW_CLASS_FIELDS)])

    @classmethod
    def empty(cls, class_id: int, name: str) -> Class:
        """A class with no fields."""
        return cls(class_id, name, [])


def _default_classes() -> list[Class]:
    return [Class.new(0, "FirstClass")]


@dataclass
class ClassList:
    """All classes of a project and which one is selected."""

    classes: list[Class] = field(default_factory=_default_classes)
    selected: int | None = 0

    @classmethod
    def empty(cls) -> ClassList:
        """A list with no classes and no selection."""
        return cls(classes=[], selected=None)

    def remove_empty(self) -> None:
        """Drop classes whose fields are all of unknown kind."""
        self.classes = [
            c for c in self.classes if not all(f.kind() in _UNKNOWN_KINDS for f in c.fields)
        ]

    def add_empty_class(self, name: str) -> int:
        """Add a class without fields and return its new id."""
        class_id = _random_id()
        self.classes.append(Class.empty(class_id, name))
        return class_id

    def add_class(self, name: str) -> int:
        """Add a class with default fields and return its new id."""
        class_id = _random_id()
        self.classes.append(Class.new(class_id, name))
        return class_id

    def add_class_with_id(self, name: str, class_id: int) -> None:
        """Add a class with default fields under the given id."""
        self.classes.append(Class.new(class_id, name))

    def by_id(self, class_id: int) -> Class | None:
        """The class with ``class_id``, if any."""
        return next((c for c in self.classes if c.id == class_id), None)

    def by_name(self, name: str) -> Class | None:
        """The first class called ``name``, if any."""
        return next((c for c in self.classes if c.name == name), None)

    def delete_by_id(self, class_id: int) -> None:
        """Remove every class with ``class_id``."""
        self.classes = [c for c in self.classes if c.id != class_id]

    def selected_class(self) -> Class | None:
        """The selected class, if it still exists."""
        return None if self.selected is None else self.by_id(self.selected)

    def toggle_selection(self, class_id: int) -> None:
        """Select ``class_id``, or clear the selection if it is already selected."""
        self.selected = None if self.selected == class_id else class_id