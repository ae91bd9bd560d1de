"""Unit tests for the config module."""

from pathlib import Path

import pytest

from a11y_audit.utils.config import (
    API_KEY_ENV,
    A11yAuditConfig,
    AnalyzerConfig,
    ConcurrencyConfig,
    DiscoveryConfig,
    EngineConfig,
    get_config,
    get_config_paths,
    load_config,
    save_config,
    set_config,
)
from a11y_audit.utils.errors import ConfigurationError


class TestConfigModels:
    """Tests for configuration models."""

    def test_default_values(self):
        """Test default values."""
        config = A11yAuditConfig()
        assert config.discovery.search_dirs == ["components", "pages", "src/components", "src/pages"]
        assert config.discovery.extensions == [".ts", ".tsx", ".js", ".jsx"]
        assert config.engine.include_builtin is True
        assert config.engine.heuristics is False
        assert config.analyzer.endpoint is None
        assert config.analyzer.mode == "augment"
        assert config.concurrency.max_workers == 8
        assert config.concurrency.timeout is None
        assert config.workspace.clone_depth == 1
        assert config.output.default_format == "terminal"

    def test_custom_values(self):
        """Test custom values."""
        config = A11yAuditConfig(
            discovery=DiscoveryConfig(search_dirs=["ui"]),
            engine=EngineConfig(heuristics=True, seed=42),
            concurrency=ConcurrencyConfig(max_workers=2, timeout=60),
        )
        assert config.discovery.search_dirs == ["ui"]
        assert config.engine.seed == 42
        assert config.concurrency.timeout == 60

    def test_worker_count_validated(self):
        with pytest.raises(ValueError):
            ConcurrencyConfig(max_workers=0)

    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "from-env")
        assert AnalyzerConfig().resolved_api_key() == "from-env"
        assert AnalyzerConfig(api_key="explicit").resolved_api_key() == "explicit"

    def test_api_key_absent(self, monkeypatch):
        monkeypatch.delenv(API_KEY_ENV, raising=False)
        assert AnalyzerConfig().resolved_api_key() is None


class TestConfigFunctions:
    """Tests for config loading and saving."""

    def test_get_config_paths(self, monkeypatch, tmp_path: Path):
        """Test config paths include cwd, home and XDG locations."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        paths = get_config_paths()

        assert paths[0] == Path.cwd() / ".a11y-audit.yaml"
        assert Path.home() / ".config" / "a11y-audit" / "config.yaml" in paths
        assert paths[-1] == tmp_path / "xdg" / "a11y-audit" / "config.yaml"

    def test_load_explicit_file(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "concurrency:\n  max_workers: 3\nengine:\n  heuristics: true\n  seed: 9\n"
        )

        config = load_config(path)

        assert config.concurrency.max_workers == 3
        assert config.engine.seed == 9
        assert config.discovery.search_dirs[0] == "components"

    def test_load_empty_file(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == A11yAuditConfig()

    def test_load_missing_explicit_file(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_load_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("concurrency: [unclosed")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(path)

    def test_load_invalid_values(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("concurrency:\n  max_workers: 0\n")
        with pytest.raises(ConfigurationError, match="Invalid config"):
            load_config(path)

    def test_load_searches_default_paths(self, monkeypatch, tmp_path: Path):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".a11y-audit.yaml").write_text("output:\n  color: false\n")

        assert load_config().output.color is False

    def test_save_and_reload(self, tmp_path: Path):
        config = A11yAuditConfig(engine=EngineConfig(rules_file="rules.yaml"))
        path = save_config(config, tmp_path / "nested" / "config.yaml")

        assert path.exists()
        assert "rules_file: rules.yaml" in path.read_text()
        assert load_config(path) == config

    def test_global_config(self):
        custom = A11yAuditConfig(concurrency=ConcurrencyConfig(max_workers=1))
        set_config(custom)
        assert get_config() is custom

        set_config(None)
        assert get_config() is not custom
