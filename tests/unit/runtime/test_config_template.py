"""Tests for YAML configuration loading with environment substitution."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from src.bookstore.runtime.config.config_template import (
    apply_environment_overrides,
    load_templated_yaml,
    substitute_env_vars,
    validate_config_env_vars,
)

CONFIG_YAML = """
config:
  app:
    environment: ${APP_ENVIRONMENT:-development}
  database:
    uri: "${DATABASE_URI:-}"
    name: ${DATABASE_NAME:-exercise-1}
  services:
    post:
      port: ${POST_PORT:-3032}
  books:
    duplicate_policy: ${BOOKS_DUPLICATE_POLICY:-exact}
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    return path


class TestSubstituteEnvVars:
    def test_default_used_when_unset(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("name: ${DATABASE_NAME:-exercise-1}") == "name: exercise-1"

    def test_value_wins_over_default(self):
        with patch.dict(os.environ, {"DATABASE_NAME": "library"}, clear=True):
            assert substitute_env_vars("${DATABASE_NAME:-exercise-1}") == "library"

    def test_empty_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("uri: '${DATABASE_URI:-}'") == "uri: ''"

    def test_required_variable_missing(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="DATABASE_URI not set"):
                substitute_env_vars("${DATABASE_URI}")

    def test_required_variable_custom_message(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="point at MongoDB"):
                substitute_env_vars("${DATABASE_URI:?point at MongoDB}")

    def test_several_placeholders(self):
        env = {"HOST": "mongo", "PORT": "27017"}
        with patch.dict(os.environ, env, clear=True):
            assert substitute_env_vars("mongodb://${HOST}:${PORT}") == "mongodb://mongo:27017"


class TestApplyEnvironmentOverrides:
    def test_prefixed_variables_copied(self):
        env = {"PRODUCTION_DATABASE_URI": "mongodb://prod:27017", "OTHER": "x"}
        with patch.dict(os.environ, env, clear=True):
            applied = apply_environment_overrides("production")
            assert applied == ["DATABASE_URI"]
            assert os.environ["DATABASE_URI"] == "mongodb://prod:27017"

    def test_other_environments_ignored(self):
        env = {"TEST_DATABASE_URI": "mongodb://test:27017"}
        with patch.dict(os.environ, env, clear=True):
            assert apply_environment_overrides("production") == []
            assert "DATABASE_URI" not in os.environ


class TestLoadTemplatedYaml:
    def test_defaults(self, config_file):
        with patch.dict(os.environ, {}, clear=True):
            config = load_templated_yaml(config_file)

        assert config.app.environment == "development"
        assert config.database.uri == ""
        assert config.database.name == "exercise-1"
        assert config.database.collection == "information"
        assert config.database.connect_timeout_ms == 10000
        assert config.services.post.port == 3032
        assert config.books.duplicate_policy == "exact"

    def test_environment_values(self, config_file):
        env = {
            "DATABASE_URI": "mongodb://mongo:27017",
            "POST_PORT": "4032",
            "BOOKS_DUPLICATE_POLICY": "subset",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_templated_yaml(config_file)

        assert config.database.uri == "mongodb://mongo:27017"
        assert config.services.post.port == 4032
        assert config.books.duplicate_policy == "subset"

    def test_environment_specific_override(self, config_file):
        env = {
            "APP_ENVIRONMENT": "production",
            "PRODUCTION_DATABASE_URI": "mongodb://prod:27017",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_templated_yaml(config_file)

        assert config.app.environment == "production"
        assert config.database.uri == "mongodb://prod:27017"

    def test_invalid_value_rejected(self, config_file):
        with patch.dict(os.environ, {"BOOKS_DUPLICATE_POLICY": "fuzzy"}, clear=True):
            with pytest.raises(ValueError, match="Invalid configuration"):
                load_templated_yaml(config_file)

    def test_empty_file_rejected(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ValueError):
            load_templated_yaml(path)

    def test_malformed_yaml_rejected(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("config: [unclosed", encoding="utf-8")
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="Error parsing YAML"):
                load_templated_yaml(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_templated_yaml(tmp_path / "absent.yaml")

    def test_repository_config_loads(self):
        path = Path(__file__).resolve().parents[3] / "config.yaml"
        with patch.dict(os.environ, {"DATABASE_URI": "mongodb://mongo:27017"}, clear=True):
            config = load_templated_yaml(path)

        assert config.database.uri == "mongodb://mongo:27017"
        assert config.services.frontend.port == 3030
        assert config.services.delete.port == 3034


class TestValidateConfigEnvVars:
    def test_missing_database_uri(self):
        with patch.dict(os.environ, {}, clear=True):
            assert set(validate_config_env_vars()) == {"DATABASE_URI"}

    def test_empty_database_uri_counts_as_missing(self):
        with patch.dict(os.environ, {"DATABASE_URI": ""}, clear=True):
            assert "DATABASE_URI" in validate_config_env_vars()

    def test_all_present(self):
        with patch.dict(os.environ, {"DATABASE_URI": "mongodb://mongo:27017"}, clear=True):
            assert validate_config_env_vars() == {}
