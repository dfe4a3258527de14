"""State shared by fields while a class is inspected."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from yclass.process import Process


@dataclass(frozen=True)
class Selection:
    """A selected field at a particular address."""

    address: int
    container_id: int
    field_id: int


@dataclass
class InspectionContext:
    """Where inspection currently is and what is selected."""

    process: Process
    class_list: Any = None
    address: int = 0
    offset: int = 0
    current_container: int = 0
    selection: Selection | None = None
    errors: list[str] = field(default_factory=list)

    def select(self, field_id: int) -> None:
        """Toggle selection of ``field_id`` at the current position."""
        if self.is_selected(field_id):
            self.selection = None
        else:
            self.selection = Selection(
                address=self.address + self.offset,
                container_id=self.current_container,
                field_id=field_id,
            )

    def is_selected(self, field_id: int) -> bool:
        """Whether ``field_id`` is selected at the current position."""
        selection = self.selection
        return (
            selection is not None
            and selection.address == self.address + self.offset
            and selection.field_id == field_id
        )