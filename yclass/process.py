"""Access to the memory of an inspected process."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Any, Protocol

_ADDRESS_LIMIT = 1 << 64


class MemoryAccessError(OSError):
    """Raised when memory outside of any mapped region is accessed."""


class MemoryBackend(Protocol):
    """Anything that exposes a process's memory."""

    pid: int
    name: str

    def read(self, address: int, size: int) -> bytes: ...

    def write(self, address: int, data: bytes) -> None: ...


class BufferMemory:
    """Process memory held in in-memory regions keyed by base address."""

    def __init__(
        self, regions: Mapping[int, bytes] | None = None, *, pid: int = 0, name: str = ""
    ) -> None:
        self.pid = pid
        self.name = name
        self._regions: list[tuple[int, bytearray]] = []
        for base, data in sorted((regions or {}).items()):
            if base < 0 or base + len(data) > _ADDRESS_LIMIT:
                raise ValueError(f"region at {base:#x} is outside the address space")
            if self._regions:
                last_base, last_data = self._regions[-1]
                if last_base + len(last_data) > base:
                    raise ValueError(f"region at {base:#x} overlaps another region")
            self._regions.append((base, bytearray(data)))

    def _locate(self, address: int, size: int) -> tuple[bytearray, int]:
        for base, data in self._regions:
            if base <= address and address + size <= base + len(data):
                return data, address - base
        raise MemoryAccessError(f"cannot access {size} bytes at {address:#x}")

    def read(self, address: int, size: int) -> bytes:
        """Read ``size`` bytes at ``address``."""
        data, start = self._locate(address, size)
        return bytes(data[start:start + size])

    def write(self, address: int, data: bytes) -> None:
        """Write ``data`` at ``address``."""
        region, start = self._locate(address, len(data))
        region[start:start + len(data)] = data


class Process:
    """An attached process whose memory can be read and written."""

    def __init__(self, backend: MemoryBackend) -> None:
        self._backend = backend
        self._lock = threading.RLock()

    @classmethod
    def attach(cls, os: Any, pid: int) -> Process:
        """Attach to process ``pid`` of ``os``.

        ``os`` is either a mapping from pids to backends or an object with a
        ``process_by_pid`` method. Raises LookupError if there is no such process.
        """
        if isinstance(os, Mapping):
            backend = os.get(pid)
            if backend is None:
                raise LookupError(f"no process with pid {pid}")
        else:
            backend = os.process_by_pid(pid)
        return cls(backend)

    def read(self, address: int, size: int) -> bytes:
        """Read memory; unreadable memory comes back as zero bytes."""
        if address < 0 or address + size > _ADDRESS_LIMIT:
            return bytes(size)
        with self._lock:
            try:
                data = self._backend.read(address, size)
            except (OSError, ValueError):
                return bytes(size)
        return bytes(data[:size]).ljust(size, b"\0")

    def write(self, address: int, data: bytes) -> None:
        """Write memory; failures are ignored."""
        if address < 0 or address + len(data) > _ADDRESS_LIMIT:
            return
        with self._lock:
            try:
                self._backend.write(address, bytes(data))
            except (OSError, ValueError):
                pass

    def id(self) -> int:
        """The process id."""
        return self._backend.pid

    def can_read(self, address: int) -> bool:
        """Whether ``address`` may be read: any address in the 64-bit space is."""
        return 0 <= address < _ADDRESS_LIMIT

    def name(self) -> str:
        """The process name."""
        return str(self._backend.name)