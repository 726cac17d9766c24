# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader: YAML on disk in, validated and frozen BpeportConfig out.

  1. Read the file as text
  2. Parse it with yaml.safe_load
  3. Validate the resulting dict against the pydantic schema

Any failure stops right there with a ConfigLoadError or ConfigValidationError.
There are no fallback defaults for a file that exists but is broken.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from bpeport.config.exceptions import ConfigLoadError, ConfigValidationError
from bpeport.config.schema import BpeportConfig
from bpeport.utils.filesystem import safe_read


def _read_yaml_file(config_path: Path) -> dict[str, Any]:
    """
    Read a YAML file and return the parsed mapping.

    Raises:
        ConfigLoadError: If the file doesn't exist, isn't readable, isn't valid
            YAML, or doesn't hold a mapping at the top level.
    """
    try:
        raw_text = safe_read(config_path)
    except (OSError, ValueError) as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err

    try:
        parsed = yaml.safe_load(raw_text)
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"Config file must contain a YAML mapping (dict), got {type(parsed).__name__}"
        )

    return parsed


def load_config(config_path: Path) -> BpeportConfig:
    """
    Load, validate, and freeze a config file.

    Args:
        config_path: Path to a YAML config file.

    Returns:
        A fully validated, frozen BpeportConfig instance.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations (missing fields, wrong types, unknown keys).
    """
    raw_data = _read_yaml_file(config_path)

    try:
        return BpeportConfig.model_validate(raw_data)
    except ValidationError as err:
        raise ConfigValidationError(
            f"Config validation failed for {config_path}:\n{err}"
        ) from err
