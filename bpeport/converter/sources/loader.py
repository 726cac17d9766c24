# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Loader for a Hugging Face tokenizer directory.

The directory layout is fixed: `tokenizer_config.json` and `tokenizer.json`
side by side. Both files are read and parsed before either is validated, so a
missing second file is reported as a load problem even when the first one
has bad data.

  read/parse failure     -> DocumentLoadError
  schema failure         -> DocumentDataError
"""

import json
from pathlib import Path
from typing import Any, NamedTuple

from pydantic import BaseModel, ValidationError

from bpeport.converter.exceptions import DocumentDataError, DocumentLoadError
from bpeport.converter.sources.schema import TokenizerConfigDocument, TokenizerDocument
from bpeport.utils.filesystem import safe_read

CONFIG_FILENAME = "tokenizer_config.json"
TOKENIZER_FILENAME = "tokenizer.json"


class TokenizerSources(NamedTuple):
    """Both input documents, validated."""

    config: TokenizerConfigDocument
    tokenizer: TokenizerDocument


def _read_json(path: Path) -> Any:
    try:
        raw_text = safe_read(path)
    except (OSError, ValueError) as err:
        raise DocumentLoadError(f"Cannot read {path}: {err}") from err

    try:
        return json.loads(raw_text)
    except json.JSONDecodeError as err:
        raise DocumentLoadError(f"Invalid JSON in {path}: {err}") from err


def _validate(document_type: type[BaseModel], raw: Any, path: Path) -> Any:
    if not isinstance(raw, dict):
        raise DocumentDataError(
            f"{path} must contain a JSON object, got {type(raw).__name__}"
        )
    try:
        return document_type.model_validate(raw)
    except ValidationError as err:
        raise DocumentDataError(f"{path} failed validation:\n{err}") from err


def load_tokenizer_sources(input_dir: Path) -> TokenizerSources:
    """
    Read and validate both documents from a tokenizer directory.

    Args:
        input_dir: Directory holding tokenizer_config.json and tokenizer.json.

    Returns:
        The validated documents.

    Raises:
        DocumentLoadError: A file is missing, unreadable, or not valid JSON.
        DocumentDataError: A file is valid JSON but lacks a required field or
            has one of the wrong shape.
    """
    if not input_dir.is_dir():
        raise DocumentLoadError(f"Tokenizer directory not found: {input_dir}")

    config_path = input_dir / CONFIG_FILENAME
    tokenizer_path = input_dir / TOKENIZER_FILENAME

    raw_config = _read_json(config_path)
    raw_tokenizer = _read_json(tokenizer_path)

    return TokenizerSources(
        config=_validate(TokenizerConfigDocument, raw_config, config_path),
        tokenizer=_validate(TokenizerDocument, raw_tokenizer, tokenizer_path),
    )
