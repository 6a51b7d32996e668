"""Tests for configuration management."""

from pathlib import Path

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_client_version,
    get_environment,
    get_environment_info,
    get_json_indent,
    get_schema_strategy,
    list_environment_variables,
    resolve_output_path,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("SDUI_JSON_INDENT", raising=False)
        assert get_environment(EnvVar.SDUI_JSON_INDENT) == 2

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("SDUI_JSON_INDENT", "8")
        assert get_environment(EnvVar.SDUI_JSON_INDENT, override=4) == 4

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("SDUI_TARGET_VERSION", "3")
        result = get_environment(EnvVar.SDUI_TARGET_VERSION)
        assert result == 3
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_bool_type_conversion_true(self, monkeypatch):
        """Boolean type conversion for true values."""
        for value in ("true", "1", "yes", "TRUE", "Yes"):
            monkeypatch.setenv("SDUI_INFER_TOKEN_TYPE", value)
            assert get_environment(EnvVar.SDUI_INFER_TOKEN_TYPE) is True

    @pytest.mark.unit
    def test_bool_type_conversion_false(self, monkeypatch):
        """Boolean type conversion for false values."""
        for value in ("false", "0", "no", "FALSE", "No"):
            monkeypatch.setenv("SDUI_INFER_TOKEN_TYPE", value)
            assert get_environment(EnvVar.SDUI_INFER_TOKEN_TYPE) is False

    @pytest.mark.unit
    def test_invalid_int_returns_default(self, monkeypatch):
        """Invalid integer value returns default."""
        monkeypatch.setenv("SDUI_JSON_INDENT", "wide")
        assert get_environment(EnvVar.SDUI_JSON_INDENT) == 2

    @pytest.mark.unit
    def test_path_conversion(self, monkeypatch, tmp_path):
        """Path variables convert to Path objects."""
        monkeypatch.setenv("SDUI_OUTPUT_DIR", str(tmp_path))
        assert get_environment(EnvVar.SDUI_OUTPUT_DIR) == tmp_path


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.SDUI_TARGET_VERSION)
        assert isinstance(info, EnvConfig)
        assert info.name == "SDUI_TARGET_VERSION"
        assert info.default is None
        assert info.var_type is int
        assert info.category == "versioning"

    @pytest.mark.unit
    def test_every_variable_has_description(self):
        for var in EnvVar:
            assert var.value.description, f"{var.name} missing description"


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_list_all(self):
        assert set(list_environment_variables()) == set(EnvVar)

    @pytest.mark.unit
    def test_filter_by_category(self):
        schema_vars = list_environment_variables("schema")
        assert EnvVar.SDUI_SCHEMA_STRATEGY in schema_vars
        assert EnvVar.SDUI_LOG_LEVEL not in schema_vars


class TestConvenienceFunctions:
    """Tests for convenience accessors."""

    @pytest.mark.unit
    def test_schema_strategy_normalised(self, monkeypatch):
        monkeypatch.setenv("SDUI_SCHEMA_STRATEGY", " Explicit ")
        assert get_schema_strategy() == "explicit"

    @pytest.mark.unit
    def test_schema_strategy_unknown_falls_back(self, monkeypatch):
        monkeypatch.setenv("SDUI_SCHEMA_STRATEGY", "reflection")
        assert get_schema_strategy() == "metadata"

    @pytest.mark.unit
    def test_client_version_unbounded_by_default(self, monkeypatch):
        monkeypatch.delenv("SDUI_CLIENT_VERSION", raising=False)
        assert get_client_version() is None

    @pytest.mark.unit
    def test_json_indent_override(self):
        assert get_json_indent(4) == 4

    @pytest.mark.unit
    def test_output_path_relative_uses_output_dir(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SDUI_OUTPUT_DIR", str(tmp_path))
        assert resolve_output_path("schema.json") == tmp_path / "schema.json"

    @pytest.mark.unit
    def test_output_path_absolute_unchanged(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SDUI_OUTPUT_DIR", "/elsewhere")
        target = tmp_path / "out.json"
        assert resolve_output_path(target) == target

    @pytest.mark.unit
    def test_output_path_without_output_dir(self, monkeypatch):
        monkeypatch.delenv("SDUI_OUTPUT_DIR", raising=False)
        assert resolve_output_path("out.json") == Path("out.json")
