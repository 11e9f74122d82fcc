"""Tests for ProjectConfig"""

import json
import sys
from pathlib import Path

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from jsval.config.project import ProjectConfig
from jsval.core.errors import ConfigError
from jsval.generators.program import GeneratorOptions


def write_config(base: Path, config) -> None:
    (base / ".jsval").mkdir()
    (base / ".jsval" / "config.json").write_text(json.dumps(config))


class TestLoad:
    def test_defaults_without_file(self, tmp_path):
        project = ProjectConfig(tmp_path)
        assert not project.exists()
        assert project.load() == ProjectConfig.DEFAULT_CONFIG

    def test_file_values_override_defaults(self, tmp_path):
        write_config(tmp_path, {"prefix": "app.rules", "formatter": "none"})
        config = ProjectConfig(tmp_path).load()
        assert config["prefix"] == "app.rules"
        assert config["formatter"] == "none"
        assert config["table_name"] == "M"

    def test_overrides_win_and_none_is_ignored(self, tmp_path):
        write_config(tmp_path, {"prefix": "app.rules"})
        config = ProjectConfig(tmp_path).load({"prefix": "other", "formatter": None})
        assert config["prefix"] == "other"
        assert config["formatter"] == "ast"

    def test_options(self, tmp_path):
        write_config(tmp_path, {"table_name": "REFS", "init_function": "setup"})
        options = ProjectConfig(tmp_path).options()
        assert options == GeneratorOptions(table_name="REFS", init_function="setup")


class TestValidation:
    def test_invalid_prefix(self, tmp_path):
        write_config(tmp_path, {"prefix": "not a module"})
        with pytest.raises(ConfigError) as exc:
            ProjectConfig(tmp_path).load()
        assert [e.path for e in exc.value.errors] == ["prefix"]
        assert exc.value.errors[0].code == "CFG-001"

    def test_unknown_formatter(self, tmp_path):
        with pytest.raises(ConfigError) as exc:
            ProjectConfig(tmp_path).load({"formatter": "black"})
        assert exc.value.errors[0].path == "formatter"

    def test_unknown_key(self, tmp_path):
        write_config(tmp_path, {"colour": "blue"})
        with pytest.raises(ConfigError) as exc:
            ProjectConfig(tmp_path).load()
        assert exc.value.errors[0].path == "root"

    def test_invalid_json(self, tmp_path):
        (tmp_path / ".jsval").mkdir()
        (tmp_path / ".jsval" / "config.json").write_text("{not json")
        with pytest.raises(ConfigError) as exc:
            ProjectConfig(tmp_path).load()
        assert exc.value.errors[0].code == "CFG-002"

    def test_non_object_config(self, tmp_path):
        write_config(tmp_path, ["prefix"])
        with pytest.raises(ConfigError):
            ProjectConfig(tmp_path).load()

    def test_error_to_dict(self, tmp_path):
        write_config(tmp_path, {"table_name": "1bad"})
        with pytest.raises(ConfigError) as exc:
            ProjectConfig(tmp_path).load()
        data = exc.value.errors[0].to_dict()
        assert data["path"] == "table_name"
        assert data["actual"] == "1bad"


class TestInit:
    def test_init_writes_file(self, tmp_path):
        project = ProjectConfig(tmp_path)
        config = project.init(prefix="app.rules", output="generated/validators.py")
        assert project.exists()
        assert json.loads(project.config_file.read_text()) == config
        assert project.get_output_path() == tmp_path / "generated" / "validators.py"

    def test_no_output_path_by_default(self, tmp_path):
        assert ProjectConfig(tmp_path).get_output_path() is None

    def test_init_rejects_invalid_values(self, tmp_path):
        project = ProjectConfig(tmp_path)
        with pytest.raises(ConfigError):
            project.init(formatter="pretty")
        assert not project.exists()
