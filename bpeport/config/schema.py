# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for bpeport.

Each section of the YAML config gets its own frozen pydantic model:
  - frozen=True: the config can't be mutated after it's loaded
  - extra="forbid": a typo in a key fails loudly instead of being ignored
  - validate_default=True: defaults go through the same checks as user values

A config file looks like:

    global:
      config_version: "1.0.0"
      log_level: "INFO"
    convert:
      config_version: "1.0.0"
      input_directory: "models/gpt2"
      output_path: "out/gpt2.model"

Only `global:` is required. Command line flags take precedence over the
`convert:` section.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class GlobalConfig(BaseModel):
    """Cross-cutting settings: identity and observability."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    project_name: str = Field(
        default="bpeport", description="Human-readable identifier attached to startup logs"
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for a JSON-lines log file next to stdout output",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_VALID_LOG_LEVELS)}, got '{value}'")
        return upper


class ConvertConfig(BaseModel):
    """
    Where to read a Hugging Face tokenizer directory and where to write the
    SentencePiece model. Both paths are taken as-is (relative paths resolve
    against the working directory).
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(description="Schema version")
    input_directory: Optional[str] = Field(
        default=None,
        description="Directory holding tokenizer_config.json and tokenizer.json",
    )
    output_path: Optional[str] = Field(
        default=None,
        description="Destination file for the serialized model; parents are created",
    )


class BpeportConfig(BaseModel):
    """Top-level config container. Sections not present in the YAML stay None."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    convert: Optional[ConvertConfig] = Field(default=None)
