"""Text buffers bound to the value parsed from them."""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class TextBind(Generic[T]):
    """Editable text that is parsed again every time it changes."""

    def __init__(self, parser: Callable[[str], T], text: str = "") -> None:
        self._parser = parser
        self._text = text
        self._parsed = False
        self._value: T | None = None
        self._error: ValueError | None = None

    @classmethod
    def from_parser(
        cls, parser: Callable[[str], T], text: str = "", value: T | None = None
    ) -> TextBind[T]:
        """A bind showing ``text`` and holding ``value`` if one is given."""
        bind = cls(parser, text)
        if value is not None:
            bind._store(value)
        return bind

    @property
    def text(self) -> str:
        """The current text."""
        return self._text

    @property
    def error(self) -> ValueError | None:
        """Why the current text does not parse, if it does not."""
        return self._error

    def value(self) -> T | None:
        """The parsed value, None if nothing was parsed yet.

        Raises the parser's ValueError if the current text is invalid.
        """
        if self._error is not None:
            raise self._error
        return self._value

    def set(self, value: T, text: str) -> None:
        """Replace both the value and the text shown for it."""
        self._store(value)
        self._text = text

    def insert_text(self, text: str, char_index: int) -> int:
        """Insert ``text`` at ``char_index`` and return how many characters were added."""
        if not 0 <= char_index <= len(self._text):
            raise IndexError(f"character index {char_index} is out of range")
        self._text = self._text[:char_index] + text + self._text[char_index:]
        self._update()
        return len(text)

    def delete_char_range(self, start: int, end: int) -> None:
        """Delete the characters from ``start`` up to ``end``."""
        if not 0 <= start <= end <= len(self._text):
            raise IndexError(f"character range {start}..{end} is out of range")
        self._text = self._text[:start] + self._text[end:]
        self._update()

    def _store(self, value: T) -> None:
        self._parsed = True
        self._value = value
        self._error = None

    def _update(self) -> None:
        try:
            self._store(self._parser(self._text))
        except ValueError as exc:
            self._parsed = True
            self._value = None
            self._error = exc