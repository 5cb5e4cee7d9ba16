"""Configuration loading for nuclei-runner."""

from nucleirunner.config.loader import ConfigError, load_config
from nucleirunner.config.models import RemoteConfig, RunnerConfig

__all__ = ["ConfigError", "load_config", "RemoteConfig", "RunnerConfig"]
