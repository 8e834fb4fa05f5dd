"""
YAML configuration loading.

Scalars may reference environment variables as ``${NAME}``; unset
variables expand to an empty string.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from beartype import beartype
from yaml import MappingNode, ScalarNode
from yaml.loader import SafeLoader

_ENV_REFERENCE = re.compile(r"\$\{([^}^{]+)\}")


class ConfigError(Exception):
    """Raised when solver configuration loading or validation fails."""

    pass


class EnvVarLoader(SafeLoader):
    """YAML loader that expands ``${VAR}`` references from the environment."""

    def construct_scalar(self, node: ScalarNode | MappingNode) -> str:
        value: str = super().construct_scalar(node)
        if isinstance(value, str):
            value = _ENV_REFERENCE.sub(lambda match: os.environ.get(match.group(1), ""), value)
        return value


@beartype
def load_from_yaml(path: str | Path) -> dict[str, object]:
    """
    Load a YAML config file with environment variable interpolation.

    Raises:
        ConfigError: If the file does not exist, the YAML is invalid or its root is not a mapping.
    """
    config_path: Path = Path(path)
    if not config_path.is_file():
        raise ConfigError(f"Solver config file not found: {config_path}")
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.load(f, Loader=EnvVarLoader)
    except yaml.YAMLError as err:
        raise ConfigError(f"Solver config {config_path} is not valid YAML: {err}") from err
    if not isinstance(data, dict):
        raise ConfigError(f"Solver config {config_path} must have a mapping at its root")
    return data


@beartype
def load_section(path: str | Path, section: str) -> dict[str, object]:
    """
    Load one named section of a YAML config file.

    A file without that key is treated as the section itself, so a dedicated
    solver file does not need a wrapping ``solver:`` key.
    """
    data = load_from_yaml(path)
    if section not in data:
        return data
    value = data[section]
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{section}' in {path} must be a mapping")
    return value
