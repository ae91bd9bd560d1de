"""Configuration file support for a11y-audit."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from a11y_audit.utils.errors import ConfigurationError

API_KEY_ENV = "A11Y_AUDIT_API_KEY"


class DiscoveryConfig(BaseModel):
    """Where and what to look for."""

    search_dirs: list[str] = Field(
        default_factory=lambda: ["components", "pages", "src/components", "src/pages"],
        description="Candidate roots relative to the workspace, in search order",
    )
    extensions: list[str] = Field(
        default_factory=lambda: [".ts", ".tsx", ".js", ".jsx"],
        description="Component source extensions (case-insensitive)",
    )


class EngineConfig(BaseModel):
    """Rule engine configuration."""

    include_builtin: bool = Field(default=True, description="Include built-in rules")
    rules_file: str | None = Field(default=None, description="Extra YAML rule pack")
    heuristics: bool = Field(default=False, description="Enable random heuristic findings")
    seed: int | None = Field(default=None, description="Seed for the heuristic pass")


class AnalyzerConfig(BaseModel):
    """External analyzer configuration."""

    endpoint: str | None = Field(default=None, description="OpenAI-compatible endpoint URL")
    model: str = Field(default="gpt-4o-mini", description="Model name sent to the endpoint")
    api_key: str | None = Field(default=None, description=f"API key (falls back to ${API_KEY_ENV})")
    timeout: float = Field(default=30.0, description="Per-file analyzer timeout in seconds")
    mode: str = Field(default="augment", description="augment or replace rule findings")

    def resolved_api_key(self) -> str | None:
        """API key from config, else from the environment."""
        return self.api_key or os.environ.get(API_KEY_ENV)


class ConcurrencyConfig(BaseModel):
    """Orchestrator configuration."""

    max_workers: int = Field(default=8, ge=1, description="Maximum simultaneous evaluations")
    timeout: float | None = Field(default=None, description="Whole-run deadline in seconds")


class WorkspaceConfig(BaseModel):
    """Repository checkout configuration."""

    git_executable: str = Field(default="git", description="git binary")
    clone_depth: int = Field(default=1, ge=1, description="Shallow clone depth")
    clone_timeout: float = Field(default=300.0, description="Clone timeout in seconds")


class OutputConfig(BaseModel):
    """Output configuration."""

    default_format: str = Field(default="terminal", description="Default output format")
    color: bool = Field(default=True, description="Enable color output")


class A11yAuditConfig(BaseModel):
    """Main configuration for a11y-audit."""

    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    analyzer: AnalyzerConfig = Field(default_factory=AnalyzerConfig)
    concurrency: ConcurrencyConfig = Field(default_factory=ConcurrencyConfig)
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def get_config_paths() -> list[Path]:
    """Get possible configuration file paths, highest priority first."""
    paths = [
        Path.cwd() / ".a11y-audit.yaml",
        Path.cwd() / ".a11y-audit.yml",
        Path.cwd() / "a11y-audit.yaml",
    ]

    home = Path.home()
    paths.append(home / ".a11y-audit.yaml")
    paths.append(home / ".config" / "a11y-audit" / "config.yaml")

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        paths.append(Path(xdg_config) / "a11y-audit" / "config.yaml")

    return paths


def load_config(config_path: Path | str | None = None) -> A11yAuditConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file. If None, searches default locations.

    Returns:
        Loaded configuration

    Raises:
        ConfigurationError: If an explicit path is missing or a file is invalid
    """
    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            return _load_config_file(path)
        raise ConfigurationError(f"Config file not found: {config_path}")

    for path in get_config_paths():
        if path.exists():
            return _load_config_file(path)

    return A11yAuditConfig()


def _load_config_file(path: Path) -> A11yAuditConfig:
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {path}: {e}")

    if data is None:
        return A11yAuditConfig()
    try:
        return A11yAuditConfig.model_validate(data)
    except ValueError as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}")


def save_config(config: A11yAuditConfig, config_path: Path | str | None = None) -> Path:
    """Save configuration to file.

    Args:
        config: Configuration to save
        config_path: Path to save to. Defaults to ~/.config/a11y-audit/config.yaml

    Returns:
        Path where config was saved
    """
    if config_path is None:
        config_path = Path.home() / ".config" / "a11y-audit" / "config.yaml"
    else:
        config_path = Path(config_path)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json", exclude_defaults=True)
    config_path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))
    return config_path


_config: A11yAuditConfig | None = None


def get_config() -> A11yAuditConfig:
    """Get the global configuration instance, loading it on first call."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: A11yAuditConfig | None) -> None:
    """Set (or with None, reset) the global configuration instance."""
    global _config
    _config = config
