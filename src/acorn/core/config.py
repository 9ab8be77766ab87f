"""Configuration for acorn."""

import os
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from acorn.core.github import GITHUB_API_BASE
from acorn.core.tags import TagFilter, compile_filter
from acorn.errors import ConfigError

TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class AcornConfig:
    """Configuration of the release backend and catalog."""

    repository: str | None = None  # owner/repo
    backend: str = "github"
    token: str | None = None
    endpoint: str = GITHUB_API_BASE
    tag_filter: TagFilter | None = None
    pre_fetch: bool = True  # list versions once during init

    def __post_init__(self):
        # Compile here so a bad pattern fails when the config is built
        self.tag_filter = compile_filter(self.tag_filter)
        if isinstance(self.pre_fetch, str):
            self.pre_fetch = self.pre_fetch.lower() in TRUE_VALUES

    @classmethod
    def from_env(cls) -> dict:
        """Configuration values present in the environment."""
        values = {
            "repository": os.environ.get("ACORN_REPOSITORY") or os.environ.get("GITHUB_REPO"),
            "backend": os.environ.get("ACORN_BACKEND"),
            "token": os.environ.get("GITHUB_TOKEN"),
            "endpoint": os.environ.get("ACORN_GITHUB_ENDPOINT"),
            "tag_filter": os.environ.get("ACORN_TAG_FILTER"),
            "pre_fetch": os.environ.get("ACORN_PRE_FETCH"),
        }
        return {key: value for key, value in values.items() if value is not None}

    @classmethod
    def default(cls) -> "AcornConfig":
        """Create config from environment variables."""
        return cls(**cls.from_env())

    @classmethod
    def from_file(cls, path: Path) -> "AcornConfig":
        """Load config from a YAML file; the environment fills missing keys."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigError(f"{path}: expected a mapping of settings")

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"{path}: unknown settings {', '.join(sorted(unknown))}")

        values = cls.from_env()
        values.update(data)
        return cls(**values)

    def replace(self, **overrides) -> "AcornConfig":
        """Copy of this config with the non-None overrides applied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({key: value for key, value in overrides.items() if value is not None})
        return AcornConfig(**values)


# Global config instance
_config: AcornConfig | None = None


def get_config() -> AcornConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AcornConfig.default()
    return _config


def set_config(config: AcornConfig | None) -> None:
    """Set a custom configuration (useful for testing)."""
    global _config
    _config = config
