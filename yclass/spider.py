"""Searching memory for values reachable through chains of pointers."""

from __future__ import annotations

import enum
import re
import struct
import threading
import time
from collections import deque
from dataclasses import dataclass, field

from yclass.process import Process
from yclass.values import FieldKind, Value

_POINTER_SIZE = 8
_ADDRESS_MAX = (1 << 64) - 1

_INT_KINDS = {
    FieldKind.I8: True,
    FieldKind.I16: True,
    FieldKind.I32: True,
    FieldKind.I64: True,
    FieldKind.U8: False,
    FieldKind.U16: False,
    FieldKind.U32: False,
    FieldKind.U64: False,
}
_FLOAT_FORMATS = {FieldKind.F32: "<f", FieldKind.F64: "<d"}

_DECIMAL_PATTERN = re.compile(r"[+-]?[0-9]+")
_HEX_PATTERN = re.compile(r"[+-]?[0-9a-fA-F]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?)",
    re.IGNORECASE,
)


class FilterMode(enum.Enum):
    """How a follow-up search compares the current value."""

    GREATER = "Greater"
    GREATER_EQ = "Greater or Equal"
    LESS = "Less"
    LESS_EQ = "Less or Equal"
    EQUAL = "Equal"
    NOT_EQUAL = "Not equal"
    CHANGED = "Changed"
    UNCHANGED = "Unchanged"

    def label(self) -> str:
        """Name shown to the user."""
        return self.value


class DisplayMode(enum.Enum):
    """How found values are rendered."""

    NORMAL = "normal"
    HEX = "hex"

    def format(self, value: Value) -> str:
        """Render ``value``; hex shows integers in two's complement."""
        if self is DisplayMode.NORMAL:
            return str(value)
        kind = value.kind()
        if kind not in _INT_KINDS:
            raise ValueError(f"{kind.value} values cannot be shown as hex")
        mask = (1 << (kind.size() * 8)) - 1
        return f"{value.data & mask:X}"


@dataclass(frozen=True)
class SearchOptions:
    """Parameters of a first search."""

    address: int
    value: Value
    struct_size: int = 256
    alignment: int = 4
    depth: int = 2
    offsets: tuple[int, ...] = ()


def _read_pointer(process: Process, address: int) -> int:
    return int.from_bytes(process.read(address, _POINTER_SIZE), "little")


def bytes_to_value(data: bytes, kind: FieldKind) -> Value:
    """Interpret the leading bytes of ``data`` as a value of ``kind``."""
    size = kind.size()
    if kind in _INT_KINDS:
        if len(data) < size:
            raise ValueError(f"{kind.value} needs {size} bytes")
        return Value(kind, int.from_bytes(data[:size], "little", signed=_INT_KINDS[kind]))
    fmt = _FLOAT_FORMATS.get(kind)
    if fmt is None:
        raise ValueError(f"{kind.value} is not a numeric kind")
    if len(data) < size:
        raise ValueError(f"{kind.value} needs {size} bytes")
    return Value(kind, struct.unpack(fmt, data[:size])[0])


def parse_kind_to_value(kind: FieldKind, text: str) -> Value:
    """Parse ``text`` as a value of ``kind``; integers may be given as ``0x`` hex.

    Raises ValueError if the text is not a valid value of that kind.
    """
    if kind in _INT_KINDS:
        signed = _INT_KINDS[kind]
        if text.startswith("0x"):
            digits, pattern, base = text[2:], _HEX_PATTERN, 16
        else:
            digits, pattern, base = text, _DECIMAL_PATTERN, 10
        if not pattern.fullmatch(digits) or (not signed and digits.startswith("-")):
            raise ValueError(f"Value: invalid digit in {text!r}")
        try:
            return Value(kind, int(digits, base))
        except ValueError as exc:
            raise ValueError(f"Value: {exc}") from None
    if kind in _FLOAT_FORMATS:
        if not _FLOAT_PATTERN.fullmatch(text):
            raise ValueError(f"Value: invalid float literal {text!r}")
        return Value(kind, float(text))
    raise ValueError(f"{kind.value} is not a numeric kind")


@dataclass
class SearchResult:
    """A value found at ``offset`` after following ``parent_offsets``."""

    parent_offsets: tuple[int, ...]
    offset: int
    last_value: Value

    def current_value(self, process: Process, address: int) -> Value:
        """Read the value this result refers to, starting from ``address``."""
        for offset in self.parent_offsets:
            address = _read_pointer(process, address + offset)
        data = process.read(address + self.offset, _POINTER_SIZE)
        return bytes_to_value(data, self.last_value.kind())

    def should_remain(
        self, process: Process, address: int, filter_mode: FilterMode, new_value: Value
    ) -> bool:
        """Whether the result passes ``filter_mode``; remembers the value read.

        The value compared is the one at the address stored where this result
        points.
        """
        for offset in self.parent_offsets:
            address = _read_pointer(process, min(address + offset, _ADDRESS_MAX))
        address = _read_pointer(process, min(address + self.offset, _ADDRESS_MAX))
        current = bytes_to_value(process.read(address, _POINTER_SIZE), self.last_value.kind())

        match filter_mode:
            case FilterMode.LESS:
                result = current < new_value
            case FilterMode.LESS_EQ:
                result = current <= new_value
            case FilterMode.GREATER:
                result = current > new_value
            case FilterMode.GREATER_EQ:
                result = current >= new_value
            case FilterMode.EQUAL:
                result = current == new_value
            case FilterMode.NOT_EQUAL:
                result = current != new_value
            case FilterMode.CHANGED:
                result = current != self.last_value
            case FilterMode.UNCHANGED:
                result = current == self.last_value
            case _:
                raise ValueError(f"unknown filter mode: {filter_mode!r}")

        self.last_value = current
        return result


def first_search(process: Process, options: SearchOptions) -> list[SearchResult]:
    """Find every place equal to ``options.value``, following pointers down to ``depth`` levels."""
    if options.alignment <= 0:
        raise ValueError("alignment must be positive")
    if options.struct_size < 0:
        raise ValueError("structure size must not be negative")

    alignment = options.alignment
    kind = options.value.kind()
    results: list[SearchResult] = []
    pending = deque([(options.address, tuple(options.offsets), options.depth)])

    while pending:
        base, offsets, depth = pending.popleft()
        if depth <= 0:
            continue
        start = base + (-base % alignment)
        for address in range(start, start + options.struct_size, alignment):
            data = process.read(address, _POINTER_SIZE)
            pointer = int.from_bytes(data, "little")
            if address % 8 == 0 and process.can_read(pointer):
                pending.append((pointer, offsets + (address - start,), depth - 1))
            value = bytes_to_value(data, kind)
            if value == options.value:
                results.append(SearchResult(offsets, address - start, value))

    return results


class ScanStatus(enum.Enum):
    """Where a background scan stands."""

    FINISHED = "finished"
    IN_PROGRESS = "in progress"
    IDLE = "idle"


@dataclass(frozen=True)
class ScannerReport:
    """The outcome of polling a scanner."""

    status: ScanStatus
    elapsed: float | None = None
    results: list[SearchResult] = field(default_factory=list)


class ScannerState:
    """Runs a first search in the background and hands over its results."""

    def __init__(self) -> None:
        self._thread: threading.Thread | None = None
        self._results: list[SearchResult] = []
        self._error: BaseException | None = None
        self._start = time.perf_counter()
        self._active = False

    def active(self) -> bool:
        """Whether a scan has been started and not yet taken."""
        return self._active

    def begin(self, process: Process, options: SearchOptions) -> None:
        """Start scanning; raises RuntimeError if a scan is already running."""
        if self._active:
            raise RuntimeError("a scan is already running")
        self._active = True
        self._start = time.perf_counter()
        self._results = []
        self._error = None
        self._thread = threading.Thread(target=self._run, args=(process, options), daemon=True)
        self._thread.start()

    def _run(self, process: Process, options: SearchOptions) -> None:
        try:
            self._results = first_search(process, options)
        except Exception as exc:  # handed to the caller in try_take
            self._error = exc

    def try_take(self) -> ScannerReport:
        """Report progress; once finished, hand over the results sorted by depth."""
        if not self._active or self._thread is None:
            return ScannerReport(ScanStatus.IDLE)
        if self._thread.is_alive():
            return ScannerReport(ScanStatus.IN_PROGRESS)

        self._active = False
        self._thread.join()
        self._thread = None
        error, self._error = self._error, None
        if error is not None:
            raise error
        results = sorted(self._results, key=lambda r: len(r.parent_offsets))
        self._results = []
        return ScannerReport(ScanStatus.FINISHED, time.perf_counter() - self._start, results)

    def wait(self, timeout: float | None = None) -> ScannerReport:
        """Wait up to ``timeout`` seconds for the scan, then report as try_take does."""
        if self._active and self._thread is not None:
            self._thread.join(timeout)
        return self.try_take()