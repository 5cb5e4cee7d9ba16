"""Configuration checks for nuclei-runner.

validate_config never raises; it returns the problems it finds and logs
each one. The loader refuses a layer with errors, and the `validate`
command uses validate_config_file to report problems with their severity.

Values expanded from `${VAR}` references are always strings, so boolean
and integer keys also accept their string spellings ("false", "2222").
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from nucleirunner.core.logging import get_logger

LOGGER = get_logger(__name__)


class ValidationSeverity(Enum):
    """How bad a configuration problem is."""

    ERROR = "error"  # the value cannot be used
    WARNING = "warning"  # probably a mistake, ignored at runtime


@dataclass
class ConfigValidationIssue:
    """One problem found in a configuration source."""

    message: str
    source: str
    severity: ValidationSeverity = ValidationSeverity.WARNING
    key: Optional[str] = None
    suggestion: Optional[str] = None

    def __str__(self) -> str:
        text = f"{self.message} in {self.source}"
        if self.suggestion:
            text += f" (did you mean '{self.suggestion}'?)"
        return text


Schema = Dict[str, Tuple[type, ...]]

TOP_LEVEL_SCHEMA: Schema = {
    "target": (str,),
    "extra_flags": (str, list),
    "reporting_config": (str, dict),
    "nuclei_version": (str,),
    "verify_checksums": (bool,),
    "workdir": (str,),
    "remote": (dict,),
}

REMOTE_SCHEMA: Schema = {
    "host": (str,),
    "user": (str,),
    "port": (int,),
    "key_path": (str,),
    "workdir": (str,),
    "agent_command": (str,),
    "strict_host_key": (bool,),
}

_TYPE_NAMES = {
    str: "string",
    int: "integer",
    bool: "boolean",
    list: "list",
    dict: "mapping",
}

BOOLEAN_WORDS = {
    "true": True,
    "yes": True,
    "on": True,
    "1": True,
    "false": False,
    "no": False,
    "off": False,
    "0": False,
}


def parse_bool(value: Any) -> Optional[bool]:
    """A YAML boolean or a boolean word, case-insensitive; None for anything else."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return BOOLEAN_WORDS.get(value.strip().lower())
    return None


def validate_config(
    data: Dict[str, Any], source: str, partial: bool = False
) -> List[ConfigValidationIssue]:
    """Check a parsed config mapping against the known keys and types.

    Args:
        data: Parsed YAML document.
        source: Where `data` came from, used in messages.
        partial: `data` is one layer of a layered config, so settings that
            depend on each other may be split across layers and are not
            checked together.

    Returns:
        The issues found, in document order. Each one is also logged.
    """
    if not isinstance(data, dict):
        issues = [ConfigValidationIssue(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
            severity=ValidationSeverity.ERROR,
        )]
    else:
        issues = list(_check_section(data, TOP_LEVEL_SCHEMA, source))
        remote = data.get("remote")
        if isinstance(remote, dict):
            issues.extend(_check_section(remote, REMOTE_SCHEMA, source, prefix="remote."))
            if not partial:
                issues.extend(_check_remote(remote, source))
        issues.extend(_check_extra_flags(data.get("extra_flags"), source))

    for issue in issues:
        LOGGER.warning(str(issue))
    return issues


def _check_section(
    section: Dict[str, Any],
    schema: Schema,
    source: str,
    prefix: str = "",
) -> Iterable[ConfigValidationIssue]:
    for key, value in section.items():
        full_key = f"{prefix}{key}"
        expected = schema.get(key)
        if expected is None:
            yield ConfigValidationIssue(
                message=f"Unknown key '{full_key}'",
                source=source,
                key=full_key,
                suggestion=_closest(str(key), schema),
            )
        elif value is not None and not _is_instance(value, expected):
            names = " or ".join(_TYPE_NAMES.get(t, t.__name__) for t in expected)
            yield ConfigValidationIssue(
                message=f"'{full_key}' must be a {names}, got {type(value).__name__}",
                source=source,
                severity=ValidationSeverity.ERROR,
                key=full_key,
            )


def _is_instance(value: Any, expected: Tuple[type, ...]) -> bool:
    # YAML booleans are ints to Python; `port: yes` is not a port.
    if isinstance(value, bool):
        return bool in expected
    if isinstance(value, str) and str not in expected:
        if "${" in value:
            # Checked again by the loader once the reference is expanded.
            return True
        if bool in expected:
            return parse_bool(value) is not None
        if int in expected:
            return value.strip().isdigit()
    return isinstance(value, expected)


def _check_remote(remote: Dict[str, Any], source: str) -> Iterable[ConfigValidationIssue]:
    if remote.get("host") and not remote.get("workdir"):
        yield ConfigValidationIssue(
            message="'remote.workdir' is required when 'remote.host' is set",
            source=source,
            severity=ValidationSeverity.ERROR,
            key="remote.workdir",
        )


def _check_extra_flags(extra_flags: Any, source: str) -> Iterable[ConfigValidationIssue]:
    if isinstance(extra_flags, list) and any(" " in str(flag) for flag in extra_flags):
        yield ConfigValidationIssue(
            message="'extra_flags' entries containing spaces are split into separate arguments",
            source=source,
            key="extra_flags",
        )


def _closest(key: str, schema: Schema) -> Optional[str]:
    matches = get_close_matches(key, list(schema), n=1, cutoff=0.6)
    return matches[0] if matches else None


def validate_config_file(config_path: Path) -> Tuple[bool, List[ConfigValidationIssue]]:
    """Validate a config file on disk.

    Returns:
        (is_valid, issues). The file is valid when no issue is an ERROR.
    """
    source = str(config_path)

    if not config_path.exists():
        return False, [ConfigValidationIssue(
            message=f"Configuration file not found: {config_path}",
            source=source,
            severity=ValidationSeverity.ERROR,
        )]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [ConfigValidationIssue(
            message=f"Invalid YAML syntax: {e}",
            source=source,
            severity=ValidationSeverity.ERROR,
        )]

    if data is None:
        return True, [ConfigValidationIssue(
            message="Configuration file is empty",
            source=source,
        )]

    issues = validate_config(data, source)
    is_valid = all(issue.severity != ValidationSeverity.ERROR for issue in issues)
    return is_valid, issues
