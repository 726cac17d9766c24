# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
End-to-end tests for convert_tokenizer.

These go through the filesystem: tokenizer directory in, model file out,
then the model is parsed back with the SentencePiece protobuf to check what
was actually written.
"""

import os
import stat
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from sentencepiece import sentencepiece_model_pb2 as model_pb2

from bpeport.converter.exceptions import (
    CharsMapCompileError,
    DocumentDataError,
    DocumentLoadError,
    OutputWriteError,
)
from bpeport.converter.pipeline.core import build_model_proto, convert_tokenizer
from bpeport.converter.sources.loader import load_tokenizer_sources
from bpeport.utils.filesystem import TEMP_PREFIX
from bpeport.utils.hashing import compute_sha256

SP_TYPE = model_pb2.ModelProto.SentencePiece


def _read_model(path: Path) -> model_pb2.ModelProto:
    return model_pb2.ModelProto.FromString(path.read_bytes())


class TestConvert:
    def test_writes_complete_model(self, make_tokenizer_dir, tmp_path: Path) -> None:
        directory = make_tokenizer_dir({"a": 0, "b": 1, "c": 2}, unk_token="c")
        output = tmp_path / "out" / "model.spm"

        result = convert_tokenizer(directory, output)
        model = _read_model(output)

        assert [(p.piece, p.type, p.score) for p in model.pieces] == [
            ("a", SP_TYPE.NORMAL, 0.0),
            ("b", SP_TYPE.NORMAL, -1.0),
            ("c", SP_TYPE.UNKNOWN, -2.0),
        ]
        assert model.trainer_spec.model_type == model_pb2.TrainerSpec.BPE
        assert model.trainer_spec.vocab_size == 3
        assert model.normalizer_spec.precompiled_charsmap
        assert model.denormalizer_spec.precompiled_charsmap
        assert model.normalizer_spec.add_dummy_prefix is False
        assert model.denormalizer_spec.escape_whitespaces is False

        assert result.vocab_size == 3
        assert result.unknown_piece == "c"
        assert result.user_defined_count == 0
        assert result.sha256 == compute_sha256(output)

    def test_unknown_token_absent(self, make_tokenizer_dir, tmp_path: Path) -> None:
        directory = make_tokenizer_dir({"a": 0, "b": 1, "c": 2}, unk_token="z")
        output = tmp_path / "model.spm"

        result = convert_tokenizer(directory, output)

        assert result.unknown_piece is None
        assert all(p.type == SP_TYPE.NORMAL for p in _read_model(output).pieces)

    def test_added_tokens(self, make_tokenizer_dir, added_token, tmp_path: Path) -> None:
        directory = make_tokenizer_dir(
            {"x": 0, "y": 1},
            added_tokens=[added_token("<pad>", True, 2), added_token("<cls>", False, 3)],
        )
        output = tmp_path / "model.spm"

        result = convert_tokenizer(directory, output)
        model = _read_model(output)

        assert [p.piece for p in model.pieces] == ["x", "y", "<pad>"]
        assert model.pieces[2].type == SP_TYPE.USER_DEFINED
        assert model.pieces[2].score == -2.0
        assert model.trainer_spec.vocab_size == len(model.pieces) == result.vocab_size
        assert result.user_defined_count == 1

    def test_creates_parent_directories_and_overwrites(
        self, make_tokenizer_dir, tmp_path: Path
    ) -> None:
        output = tmp_path / "deep" / "er" / "model.spm"

        convert_tokenizer(make_tokenizer_dir({"a": 0}, name="first"), output)
        first = output.read_bytes()
        convert_tokenizer(make_tokenizer_dir({"a": 0, "b": 1}, name="second"), output)

        assert output.read_bytes() != first
        assert _read_model(output).trainer_spec.vocab_size == 2
        assert list(output.parent.glob(f"{TEMP_PREFIX}*")) == []

    def test_same_input_gives_identical_bytes(self, make_tokenizer_dir, tmp_path: Path) -> None:
        directory = make_tokenizer_dir({"a": 0, "Ġb": 1, "Ċ": 2})

        first = convert_tokenizer(directory, tmp_path / "one.spm")
        second = convert_tokenizer(directory, tmp_path / "two.spm")

        assert first.sha256 == second.sha256

    def test_build_model_proto_matches_written_file(
        self, make_tokenizer_dir, tmp_path: Path
    ) -> None:
        directory = make_tokenizer_dir({"a": 0, "b": 1})
        output = tmp_path / "model.spm"
        convert_tokenizer(directory, output)

        model_proto, pieces = build_model_proto(load_tokenizer_sources(directory))

        assert model_proto.SerializeToString() == output.read_bytes()
        assert len(pieces) == 2


class TestConvertFailures:
    def test_missing_tokenizer_json(self, make_tokenizer_dir, tmp_path: Path) -> None:
        directory = make_tokenizer_dir({"a": 0})
        (directory / "tokenizer.json").unlink()
        output = tmp_path / "out" / "model.spm"

        with pytest.raises(DocumentLoadError):
            convert_tokenizer(directory, output)

        assert not output.exists()
        assert not output.parent.exists()

    def test_missing_unk_token(self, make_tokenizer_dir, tmp_path: Path) -> None:
        directory = make_tokenizer_dir({"a": 0})
        (directory / "tokenizer_config.json").write_text("{}", encoding="utf-8")
        output = tmp_path / "model.spm"

        with pytest.raises(DocumentDataError):
            convert_tokenizer(directory, output)

        assert not output.exists()

    def test_compile_failure_writes_nothing(self, make_tokenizer_dir, tmp_path: Path) -> None:
        output = tmp_path / "model.spm"

        with patch(
            "bpeport.converter.normalizer.core.compile_chars_map",
            side_effect=CharsMapCompileError("invalid map"),
        ):
            with pytest.raises(CharsMapCompileError):
                convert_tokenizer(make_tokenizer_dir({"a": 0}), output)

        assert not output.exists()

    def test_parent_is_a_file(self, make_tokenizer_dir, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")

        with pytest.raises(OutputWriteError, match="output directory"):
            convert_tokenizer(make_tokenizer_dir({"a": 0}), blocker / "model.spm")

    def test_write_failure_leaves_previous_model(
        self, make_tokenizer_dir, tmp_path: Path
    ) -> None:
        output = tmp_path / "model.spm"
        convert_tokenizer(make_tokenizer_dir({"a": 0}, name="v1"), output)
        before = output.read_bytes()

        with patch(
            "bpeport.converter.pipeline.core.atomic_write_bytes",
            side_effect=OSError("disk full"),
        ):
            with pytest.raises(OutputWriteError, match="disk full"):
                convert_tokenizer(make_tokenizer_dir({"a": 0, "b": 1}, name="v2"), output)

        assert output.read_bytes() == before


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
class TestOutputPermissions:
    def test_model_is_readable_by_other_users(self, make_tokenizer_dir, tmp_path: Path) -> None:
        output = tmp_path / "out" / "model.spm"
        previous = os.umask(0o022)
        try:
            convert_tokenizer(make_tokenizer_dir({"a": 0}), output)
        finally:
            os.umask(previous)

        assert stat.S_IMODE(output.stat().st_mode) == 0o644

    def test_overwrite_keeps_mode(self, make_tokenizer_dir, tmp_path: Path) -> None:
        output = tmp_path / "model.spm"
        convert_tokenizer(make_tokenizer_dir({"a": 0}, name="v1"), output)
        output.chmod(0o604)

        convert_tokenizer(make_tokenizer_dir({"a": 0, "b": 1}, name="v2"), output)

        assert stat.S_IMODE(output.stat().st_mode) == 0o604
