# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Exceptions for the configuration system.

Kept apart from the converter's own errors: a bad YAML file is a problem with
how bpeport was invoked, not with the tokenizer being converted, and the CLI
maps the two families to different exit codes.
"""


class ConfigError(Exception):
    """Base for all configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when a config file cannot be read from disk or parsed as YAML."""


class ConfigValidationError(ConfigError):
    """
    Raised when a config file parses fine but fails schema validation:
    missing required fields, wrong types, or keys the schema doesn't know.
    """
