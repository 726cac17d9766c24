# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for bpeport tests.

Most tests need a Hugging Face style tokenizer directory on disk. The
`make_tokenizer_dir` factory writes one from plain Python values, shaped the
way the `tokenizers` library writes its own files.
"""

import json
import textwrap
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

TokenizerDirFactory = Callable[..., Path]


def write_json(path: Path, payload: Any) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def _added_token(content: str, normalized: bool, token_id: int = 0) -> dict[str, Any]:
    return {
        "id": token_id,
        "content": content,
        "single_word": False,
        "lstrip": False,
        "rstrip": False,
        "normalized": normalized,
        "special": not normalized,
    }


@pytest.fixture()
def added_token() -> Callable[..., dict[str, Any]]:
    """Builds an added_tokens entry the way tokenizers serializes it."""
    return _added_token


@pytest.fixture()
def make_tokenizer_dir(tmp_path: Path) -> TokenizerDirFactory:
    """
    Factory for tokenizer directories.

    make_tokenizer_dir({"a": 0, "b": 1}, unk_token="b", added_tokens=[...])
    """

    def _make(
        vocab: dict[str, int],
        unk_token: Any = "<unk>",
        added_tokens: Optional[list[dict[str, Any]]] = None,
        name: str = "hf_tokenizer",
    ) -> Path:
        directory = tmp_path / name
        directory.mkdir(parents=True, exist_ok=True)
        write_json(
            directory / "tokenizer_config.json",
            {
                "unk_token": unk_token,
                "model_max_length": 1024,
                "tokenizer_class": "GPT2Tokenizer",
            },
        )
        write_json(
            directory / "tokenizer.json",
            {
                "version": "1.0",
                "truncation": None,
                "padding": None,
                "added_tokens": added_tokens or [],
                "normalizer": None,
                "pre_tokenizer": {"type": "ByteLevel", "add_prefix_space": False},
                "model": {"type": "BPE", "vocab": vocab, "merges": []},
            },
        )
        return directory

    return _make


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """The smallest config that passes schema validation."""
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          project_name: "bpeport-test"
          log_level: "DEBUG"
    """)
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """Valid YAML, but the required config_version is missing."""
    config_content = textwrap.dedent("""\
        global:
          project_name: "bpeport-test"
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file
