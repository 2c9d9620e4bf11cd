"""
Test suite for configuration loading system.

This module tests YAML merging, environment variable overrides, the
DEVSTRIDE_* credential variables and configuration validation.
"""

import pytest

from stride_agent.config.loader import ConfigLoader, ConfigurationError, validate_config_file
from stride_agent.config.models import StatusLabel, StrideAgentConfig


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run each test from an empty directory so no project config is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_yaml(path, content):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.mark.unit
class TestConfigLoader:
    """Test the ConfigLoader class functionality."""

    def test_load_builtin_defaults(self, workdir):
        config = ConfigLoader().load_config()

        assert isinstance(config, StrideAgentConfig)
        assert config.app.name == "Stride Agent"
        assert config.tracker.api_base == "https://api.devstride.com"
        assert config.resolver.concurrent_board_lookups is False
        assert not config.tracker.has_credentials

    def test_load_config_from_yaml_file(self, workdir):
        config_file = write_yaml(workdir / "custom.yaml", """
tracker:
  org_id: org-42
  timeout: 12
resolver:
  concurrent_board_lookups: true
""")

        config = ConfigLoader().load_config(config_file)

        assert config.tracker.org_id == "org-42"
        assert config.tracker.timeout == 12
        assert config.tracker.base_url == "https://api.devstride.com/v1/organizations/org-42"
        assert config.resolver.concurrent_board_lookups is True

    def test_default_then_environment_file(self, workdir, monkeypatch):
        write_yaml(workdir / "configs" / "default.yaml", "tracker:\n  timeout: 20\n  max_retries: 1\n")
        write_yaml(workdir / "configs" / "staging.yaml", "tracker:\n  timeout: 40\n")
        monkeypatch.setenv("STRIDE_ENV", "staging")

        config = ConfigLoader().load_config()

        assert config.tracker.timeout == 40
        assert config.tracker.max_retries == 1

    def test_cli_file_overrides_default(self, workdir):
        write_yaml(workdir / "configs" / "default.yaml", "tools:\n  timeout_seconds: 30\n")
        cli_file = write_yaml(workdir / "cli.yaml", "tools:\n  timeout_seconds: 90\n")

        config = ConfigLoader().load_config(cli_file)

        assert config.tools.timeout_seconds == 90

    def test_legacy_credential_variables(self, workdir, monkeypatch):
        monkeypatch.setenv("DEVSTRIDE_ORG_ID", "org-7")
        monkeypatch.setenv("DEVSTRIDE_API_KEY", "key")
        monkeypatch.setenv("DEVSTRIDE_API_SECRET", "secret")

        config = ConfigLoader().load_config()

        assert config.tracker.org_id == "org-7"
        assert config.tracker.has_credentials

    def test_prefixed_overrides_win(self, workdir, monkeypatch):
        cli_file = write_yaml(workdir / "cli.yaml", "tracker:\n  org_id: from-file\n")
        monkeypatch.setenv("DEVSTRIDE_ORG_ID", "from-legacy")
        monkeypatch.setenv("STRIDE_TRACKER_ORG_ID", "12345")
        monkeypatch.setenv("STRIDE_RESOLVER_CONCURRENT_BOARD_LOOKUPS", "yes")
        monkeypatch.setenv("STRIDE_TRACKER_MAX_RETRIES", "3")

        config = ConfigLoader().load_config(cli_file)

        assert config.tracker.org_id == "12345"
        assert config.resolver.concurrent_board_lookups is True
        assert config.tracker.max_retries == 3

    def test_default_board_by_name(self, workdir, monkeypatch):
        monkeypatch.setenv("STRIDE_TOOLS_DEFAULT_BOARD_ID", "sprint_3_q1_26")

        config = ConfigLoader().load_config()

        assert config.tools.default_board_id == "bdb79b38-8b45-4460-bcce-efaa2bd2e562"

    def test_workflow_tables_from_yaml(self, workdir):
        cli_file = write_yaml(workdir / "cli.yaml", """
workflow:
  lanes:
    Not Started: lane-0
    In Progress: lane-1
    QA Review: lane-2
    Code Review: lane-3
    Design Review: lane-4
  board_workstreams:
    board-1: F1
""")

        config = ConfigLoader().load_config(cli_file)

        assert config.workflow.lanes[StatusLabel.CODE_REVIEW] == "lane-3"
        assert config.workflow.board_workstreams == {"board-1": "F1"}

    def test_missing_file(self, workdir):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigLoader().load_config("nope.yaml")

    def test_invalid_yaml(self, workdir):
        bad = write_yaml(workdir / "bad.yaml", "tracker: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            ConfigLoader().load_config(bad)

    def test_non_mapping_yaml(self, workdir):
        bad = write_yaml(workdir / "list.yaml", "- a\n- b\n")

        with pytest.raises(ConfigurationError, match="YAML object"):
            ConfigLoader().load_config(bad)

    def test_validation_error_is_readable(self, workdir):
        bad = write_yaml(workdir / "bad.yaml", "tracker:\n  timeout: 0\n")

        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader().load_config(bad)

        assert "tracker -> timeout" in str(exc_info.value)

    def test_incomplete_lane_table_rejected(self, workdir):
        bad = write_yaml(workdir / "bad.yaml", "workflow:\n  lanes:\n    Not Started: lane-0\n")

        with pytest.raises(ConfigurationError, match="missing lane ids"):
            ConfigLoader().load_config(bad)

    def test_get_config_caches(self, workdir):
        loader = ConfigLoader()

        assert loader.get_config() is loader.get_config()
        assert loader.reload_config() is not None


@pytest.mark.unit
class TestEnvValueConversion:
    """Test environment string conversion."""

    def setup_method(self):
        self.loader = ConfigLoader()

    def test_booleans(self):
        assert self.loader._convert_env_value("on") is True
        assert self.loader._convert_env_value("False") is False

    def test_numbers(self):
        assert self.loader._convert_env_value("42") == 42
        assert self.loader._convert_env_value("2.5") == 2.5

    def test_strings(self):
        assert self.loader._convert_env_value("hello") == "hello"

    def test_set_nested_value_copies_sections(self):
        original = {"tracker": {"timeout": 10}}
        merged = dict(original)

        self.loader._set_nested_value(merged, ["tracker", "timeout"], 20)

        assert merged["tracker"]["timeout"] == 20
        assert original["tracker"]["timeout"] == 10


@pytest.mark.unit
class TestValidateConfigFile:
    """Test standalone file validation."""

    def test_valid_file(self, workdir):
        good = write_yaml(workdir / "good.yaml", "app:\n  log_level: DEBUG\n")

        assert validate_config_file(good) == (True, None)

    def test_invalid_file(self, workdir):
        bad = write_yaml(workdir / "bad.yaml", "app:\n  log_level: LOUD\n")

        valid, error = validate_config_file(bad)

        assert valid is False
        assert "log_level" in error
