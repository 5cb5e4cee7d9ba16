"""YAML configuration for nuclei-runner.

Settings come from up to three layers, later layers winning:

    ~/.nuclei-runner/config/config.yml     global defaults for a build agent
    .nuclei-runner.yml or --config FILE    per-project settings
    command line flags                     per-invocation overrides

String values may reference the environment as ${VAR} or ${VAR:-fallback},
which is how CI secrets usually end up in the reporting configuration.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from nucleirunner.bootstrap.paths import get_nuclei_runner_home
from nucleirunner.config.models import RemoteConfig, RunnerConfig
from nucleirunner.config.validation import ValidationSeverity, parse_bool, validate_config
from nucleirunner.core.logging import get_logger

LOGGER = get_logger(__name__)

PROJECT_CONFIG_NAMES = [
    ".nuclei-runner.yml",
    ".nuclei-runner.yaml",
    "nuclei-runner.yml",
    "nuclei-runner.yaml",
]
GLOBAL_CONFIG_NAME = "config.yml"

_ENV_REFERENCE = re.compile(r"\$\{(?P<name>[^}:]+)(?::-(?P<fallback>[^}]*))?\}")


class ConfigError(Exception):
    """A configuration file is missing, unparsable or has the wrong shape."""


def load_config(
    project_root: Path,
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> RunnerConfig:
    """Build the effective RunnerConfig for one invocation.

    Args:
        project_root: Directory searched for a project config file.
        cli_config_path: Explicit --config file; replaces the project file.
        cli_overrides: Values from command line flags. None values mean
            "flag not given" and never mask file settings.

    Raises:
        ConfigError: If the --config file is missing, or the project or
            custom file is not a valid YAML mapping or holds values of the
            wrong type. A broken global file is only logged.
    """
    layers: List[Tuple[str, Dict[str, Any]]] = []

    global_path = find_global_config()
    if global_path is not None:
        try:
            layers.append((f"global:{global_path}", _read_layer(global_path)))
        except ConfigError as e:
            LOGGER.warning(f"Ignoring global config: {e}")

    if cli_config_path is not None:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        layers.append((f"custom:{cli_config_path}", _read_layer(cli_config_path)))
    else:
        project_path = find_project_config(project_root)
        if project_path is not None:
            layers.append((f"project:{project_path}", _read_layer(project_path)))

    if cli_overrides:
        layers.append(("cli", _drop_none(cli_overrides)))

    merged: Dict[str, Any] = {}
    for source, data in layers:
        merged = merge_configs(merged, data)
        LOGGER.debug(f"Applied config layer {source}")

    config = dict_to_config(merged)
    config._config_sources = [source for source, _ in layers]
    return config


def _read_layer(path: Path) -> Dict[str, Any]:
    try:
        data = load_yaml_file(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    errors = [
        issue.message
        for issue in validate_config(data, source=str(path), partial=True)
        if issue.severity == ValidationSeverity.ERROR
    ]
    if errors:
        raise ConfigError(f"Invalid configuration in {path}: {'; '.join(errors)}")
    return data


def find_project_config(project_root: Path) -> Optional[Path]:
    """First existing PROJECT_CONFIG_NAMES entry in `project_root`, if any."""
    candidates = (project_root / name for name in PROJECT_CONFIG_NAMES)
    return next((path for path in candidates if path.exists()), None)


def find_global_config() -> Optional[Path]:
    path = get_nuclei_runner_home() / "config" / GLOBAL_CONFIG_NAME
    return path if path.exists() else None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Parse a config file and expand environment references.

    An empty file is an empty mapping.

    Raises:
        yaml.YAMLError: On a syntax error.
        ConfigError: If the document root is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: Config file must be a YAML mapping, got {type(data).__name__}")
    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Substitute ${VAR} / ${VAR:-fallback} in every string of `data`.

    Unset variables without a fallback become empty strings (with a
    warning); non-string scalars pass through untouched.
    """
    if isinstance(data, str):
        return _ENV_REFERENCE.sub(_substitute, data)
    if isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    if isinstance(data, dict):
        return {key: expand_env_vars(value) for key, value in data.items()}
    return data


def _substitute(match: re.Match[str]) -> str:
    name = match.group("name")
    if name in os.environ:
        return os.environ[name]
    fallback = match.group("fallback")
    if fallback is None:
        LOGGER.warning(f"Environment variable ${name} is not set and has no default")
        return ""
    return fallback


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Return `base` updated with `overlay`.

    Nested mappings (such as `remote`) merge key by key; anything else,
    lists included, is replaced wholesale.
    """
    merged = dict(base)
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = merge_configs(current, value)
        merged[key] = value
    return merged


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            value = _drop_none(value)
            if not value:
                continue
        if value is not None:
            cleaned[key] = value
    return cleaned


def _reporting_config_text(value: Any) -> Optional[str]:
    """Reporting config may be given as YAML text or as a nested mapping."""
    if value is None or isinstance(value, str):
        return value
    return yaml.safe_dump(value, default_flow_style=False, sort_keys=False)


def _extra_flags_text(value: Any) -> Optional[str]:
    """Extra flags may be one string or a list of tokens."""
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(str(flag) for flag in value)
    return str(value)


def _as_bool(data: Dict[str, Any], key: str, default: bool, prefix: str = "") -> bool:
    if key not in data or data[key] is None:
        return default
    value = parse_bool(data[key])
    if value is None:
        raise ConfigError(f"'{prefix}{key}' must be true or false, got {data[key]!r}")
    return value


def _remote_config(data: Dict[str, Any]) -> RemoteConfig:
    defaults = RemoteConfig()
    port = data.get("port")
    try:
        port = defaults.port if port is None else int(port)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"'remote.port' must be an integer: {e}") from e
    return RemoteConfig(
        host=data.get("host"),
        user=data.get("user"),
        port=port,
        key_path=data.get("key_path"),
        workdir=data.get("workdir"),
        agent_command=data.get("agent_command", defaults.agent_command),
        strict_host_key=_as_bool(
            data, "strict_host_key", defaults.strict_host_key, prefix="remote."
        ),
    )


def dict_to_config(data: Dict[str, Any]) -> RunnerConfig:
    """Turn a merged config mapping into a RunnerConfig.

    Raises:
        ConfigError: If `remote` is not a mapping, `remote.port` is not an
            integer or a boolean setting is not a boolean word.
    """
    config = RunnerConfig(
        extra_flags=_extra_flags_text(data.get("extra_flags")),
        reporting_config=_reporting_config_text(data.get("reporting_config")),
    )
    if data.get("target") is not None:
        config.target = str(data["target"])
    if data.get("nuclei_version") is not None:
        config.nuclei_version = str(data["nuclei_version"])
    config.verify_checksums = _as_bool(data, "verify_checksums", config.verify_checksums)
    if data.get("workdir") is not None:
        config.workdir = str(data["workdir"])

    remote = data.get("remote")
    if remote is not None:
        if not isinstance(remote, dict):
            raise ConfigError(f"'remote' must be a mapping, got {type(remote).__name__}")
        config.remote = _remote_config(remote)
    return config
