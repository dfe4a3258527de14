"""Application state: the open project, selection and attachment."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from yclass.classes import ClassList
from yclass.config import YClassConfig
from yclass.context import Selection
from yclass.process import Process
from yclass.project import ProjectData, ProjectFormatError


class ProjectError(Exception):
    """Raised when a project cannot be saved or opened."""


@dataclass
class GlobalState:
    """Everything the application keeps while it runs."""

    class_list: ClassList = field(default_factory=ClassList)
    config: YClassConfig = field(default_factory=YClassConfig)
    config_path: Path | None = None
    last_opened_project: Path | None = None
    selection: Selection | None = None
    os: Any = None
    process: Process | None = None
    inspect_address: int = 0
    # True while the project was just created and holds nothing useful.
    dummy: bool = True

    def save_project(self, path: Path | None = None) -> None:
        """Save to ``path``, or to the last opened project.

        Raises ProjectError if there is nowhere to save or writing fails.
        """
        if path is None:
            path = self.last_opened_project
        if path is None:
            raise ProjectError("No project path to save to")
        path = Path(path)
        text = ProjectData.store(self.class_list.classes).to_string()
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise ProjectError(f"Failed to save the project. {exc}") from exc
        self.last_opened_project = path
        self.dummy = False

    def open_project_path(self, path: Path) -> None:
        """Open the project at ``path``, saving the current one first if it matters.

        Raises ProjectError if the file cannot be read or is not a project.
        """
        path = Path(path)
        if self.class_list.classes and not self.dummy and self.last_opened_project is not None:
            self.save_project(None)

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ProjectError(f"Failed to open the project. {exc}") from exc

        try:
            class_list = ProjectData.from_str(text).load()
        except ProjectFormatError as exc:
            raise ProjectError("Project file is in invalid format") from exc

        self.class_list = class_list
        self.dummy = False
        self.last_opened_project = path

        if self.config.recent_projects is None:
            self.config.recent_projects = {path}
        else:
            self.config.recent_projects.add(path)
        self.config.save(self.config_path)