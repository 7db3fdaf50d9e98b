"""Unit tests for DataCore and file I/O."""

import json
import pytest
import yaml
from unittest.mock import patch

from aplan.data import DataCore, atomic_write, load_model, data_type_for, DATA_JSON, DATA_YAML
from aplan.errors import CorruptionError, FatalError, FileOperationError
from aplan.project import Project


class TestIO:
    """Test atomic writes and model loading."""

    def test_data_type_for(self):
        """Test picking the format from the file suffix."""
        assert data_type_for("project.yml") == DATA_YAML
        assert data_type_for("project.YAML") == DATA_YAML
        assert data_type_for(".aplan.ap") == DATA_JSON
        assert data_type_for("project.json") == DATA_JSON

    def test_atomic_write_json(self, tmp_path):
        """Test writing JSON and leaving no temp files behind."""
        target = tmp_path / "data.json"
        assert atomic_write(DATA_JSON, target, {"a": 1})
        assert json.loads(target.read_text()) == {"a": 1}
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]

    def test_atomic_write_yaml_creates_dirs(self, tmp_path):
        """Test writing YAML into a directory that does not exist yet."""
        target = tmp_path / "nested" / "data.yml"
        atomic_write(DATA_YAML, target, {"a": [1, 2]}, create_dirs=True)
        assert yaml.safe_load(target.read_text()) == {"a": [1, 2]}

    def test_atomic_write_unserializable(self, tmp_path):
        """Test that unserializable data is fatal and keeps the old file."""
        target = tmp_path / "data.json"
        target.write_text('{"old": true}')
        with pytest.raises(FatalError, match="serialization failed"):
            atomic_write(DATA_JSON, target, {"bad": object()})
        assert json.loads(target.read_text()) == {"old": True}
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]

    def test_atomic_write_unknown_format(self, tmp_path):
        """Test rejecting an unknown data type."""
        with pytest.raises(FatalError, match="Unsupported Data Format"):
            atomic_write(7, tmp_path / "data.txt", {})

    def test_atomic_write_io_error(self, tmp_path):
        """Test that failing to replace the file is recoverable."""
        target = tmp_path / "data.json"
        with patch("aplan.data.io.os.replace", side_effect=PermissionError("denied")):
            with pytest.raises(FileOperationError, match="I/O error"):
                atomic_write(DATA_JSON, target, {"a": 1})
        assert list(tmp_path.iterdir()) == []

    def test_load_missing(self, tmp_path):
        """Test that a missing file loads as None."""
        assert load_model(Project, tmp_path / "missing.ap") is None

    def test_load_corrupt(self, tmp_path):
        """Test that syntax and validation errors are corruption."""
        broken = tmp_path / "broken.ap"
        broken.write_text("{not json")
        with pytest.raises(CorruptionError, match="Syntax error"):
            load_model(Project, broken)

        invalid = tmp_path / "invalid.ap"
        invalid.write_text(json.dumps({"tasks": {"1": {"id": "1", "name": "No root"}}}))
        with pytest.raises(CorruptionError, match="Invalid data"):
            load_model(Project, invalid)


class TestDataCore:
    """Test creating, loading and saving project files."""

    def test_create_and_load(self, tmp_path):
        """Test that a created project can be loaded back."""
        path = tmp_path / ".aplan.ap"
        DataCore.create(path, "Project")
        project = DataCore.load(path)
        assert project.name == "Project"
        assert len(project.tasks) == 1

    def test_create_refuses_existing(self, tmp_path):
        """Test that init never overwrites a project."""
        path = tmp_path / ".aplan.ap"
        DataCore.create(path, "Project")
        with pytest.raises(FileOperationError, match="already exists"):
            DataCore.create(path, "Other")
        assert DataCore.load(path).name == "Project"

    def test_load_missing(self, tmp_path):
        """Test loading a project that was never created."""
        with pytest.raises(FileOperationError, match="not found"):
            DataCore.load(tmp_path / ".aplan.ap")

    def test_context_saves_changes(self, tmp_path):
        """Test that a clean context exit writes the project back."""
        path = tmp_path / "project.yml"
        DataCore.create(path, "Project")
        with DataCore.get_context(path) as context:
            context.project.wbs.add("", "A")
            context.project.wbs.set_planned_value("1", 2.0)

        project = DataCore.load(path)
        assert project.wbs.get("1").name == "A"
        assert project.wbs.get("").planned_value == 2.0

    def test_context_discards_on_error(self, tmp_path):
        """Test that a failing block leaves the file untouched."""
        path = tmp_path / ".aplan.ap"
        DataCore.create(path, "Project")
        with pytest.raises(RuntimeError):
            with DataCore.get_context(path) as context:
                context.project.wbs.add("", "A")
                raise RuntimeError("boom")
        assert len(DataCore.load(path).tasks) == 1

    def test_project_file_from_environment(self, monkeypatch):
        """Test the APLAN_FILE override."""
        monkeypatch.delenv("APLAN_FILE", raising=False)
        assert str(DataCore.project_file()) == ".aplan.ap"
        monkeypatch.setenv("APLAN_FILE", "other.ap")
        assert str(DataCore.project_file()) == "other.ap"
