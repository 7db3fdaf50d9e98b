"""
DataCore - Central load/save handler for aplan project files.

A project file holds the full task store and member list of one project. It
is always read and written as a whole snapshot.
"""
import os
from pathlib import Path
from typing import Union

from aplan.errors import FileOperationError
from aplan.logs import get_logger
from aplan.project import Project
from .io import atomic_write, data_type_for, load_model

log = get_logger("data")

class ProjectContext:
    """Loaded project that is written back when the `with` block exits cleanly."""

    def __init__(self, path: Path):
        self.path = path
        self.project = DataCore.load(path)

    def __enter__(self) -> 'ProjectContext':
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - save all changes unless the block failed."""
        if exc_type is None:
            self.save_all()

    def save_all(self):
        DataCore.save(self.project, self.path)

class DataCore:
    DEFAULT_PROJECT_FILE = Path(".aplan.ap")

    @staticmethod
    def project_file() -> Path:
        """The project file to use when none is given explicitly."""
        return Path(os.getenv('APLAN_FILE', '') or DataCore.DEFAULT_PROJECT_FILE)

    @staticmethod
    def create(path: Union[Path, str], name: str) -> Project:
        path = Path(path)
        if path.exists():
            raise FileOperationError(f"Project file {path} already exists")
        project = Project.new(name)
        DataCore.save(project, path)
        log.info(f"Created project '{name}' in {path}")
        return project

    @staticmethod
    def load(path: Union[Path, str]) -> Project:
        path = Path(path)
        project = load_model(Project, path)
        if project is None:
            raise FileOperationError(f"Project file {path} not found, run 'aplan init' first")
        log.debug(f"Loaded project '{project.name}' from {path}")
        return project

    @staticmethod
    def save(project: Project, path: Union[Path, str]):
        path = Path(path)
        atomic_write(data_type_for(path), path, project.model_dump(mode='json'), create_dirs=True)

    @staticmethod
    def get_context(path: Union[Path, str, None] = None) -> ProjectContext:
        return ProjectContext(Path(path) if path is not None else DataCore.project_file())
