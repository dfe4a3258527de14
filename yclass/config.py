"""Persistent user settings."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import platformdirs
import tomli_w


def _optional(data: dict[str, Any], key: str, kinds: tuple[type, ...]) -> Any:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, kinds):
        raise TypeError(f"invalid value for {key!r}")
    return value


@dataclass
class YClassConfig:
    """Settings kept between sessions."""

    last_attached_process_name: str | None = None
    last_address: int | None = None
    recent_projects: set[Path] | None = None
    dpi: float | None = None

    @classmethod
    def config_path(cls) -> Path:
        """Where the settings file lives."""
        return platformdirs.user_config_path() / "yclass" / "config.toml"

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> YClassConfig:
        """Load settings; an unreadable file gives defaults, a missing one is created."""
        path = Path(path) if path is not None else cls.config_path()
        if path.exists():
            try:
                return cls._from_dict(tomllib.loads(path.read_text(encoding="utf-8")))
            except (tomllib.TOMLDecodeError, TypeError, ValueError):
                return cls()
        config = cls()
        config.save(path)
        return config

    def save(self, path: Path | None = None) -> None:
        """Write the settings, creating the directory if needed."""
        path = Path(path) if path is not None else self.config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(tomli_w.dumps(self._to_dict()), encoding="utf-8")

    def _to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.last_attached_process_name is not None:
            data["last_attached_process_name"] = self.last_attached_process_name
        if self.last_address is not None:
            data["last_address"] = self.last_address
        if self.recent_projects is not None:
            data["recent_projects"] = sorted(str(p) for p in self.recent_projects)
        if self.dpi is not None:
            data["dpi"] = float(self.dpi)
        return data

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> YClassConfig:
        name = _optional(data, "last_attached_process_name", (str,))
        address = _optional(data, "last_address", (int,))
        if address is not None and address < 0:
            raise ValueError("last_address must not be negative")
        projects = _optional(data, "recent_projects", (list,))
        if projects is not None:
            if not all(isinstance(p, str) for p in projects):
                raise TypeError("recent_projects must hold paths")
            projects = {Path(p) for p in projects}
        dpi = _optional(data, "dpi", (int, float))
        return cls(
            last_attached_process_name=name,
            last_address=address,
            recent_projects=projects,
            dpi=None if dpi is None else float(dpi),
        )