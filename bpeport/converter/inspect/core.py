# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Read a converted model back and summarize it.

Useful after a conversion to confirm what the runtime will actually load: how
many pieces of each type, what the trainer metadata says, and how many
entries each character map holds.
"""

from collections import Counter
from pathlib import Path
from typing import NamedTuple, Optional

from google.protobuf.message import DecodeError
from sentencepiece import sentencepiece_model_pb2 as model_pb2

from bpeport.converter.charsmap.core import CompiledCharsMap
from bpeport.converter.exceptions import DocumentDataError, DocumentLoadError
from bpeport.utils.filesystem import safe_read_bytes
from bpeport.utils.hashing import compute_sha256


class ModelSummary(NamedTuple):
    path: str
    sha256: str
    model_type: str
    vocab_size: int
    piece_count: int
    piece_types: dict[str, int]
    unknown_piece: Optional[str]
    normalizer_entries: int
    denormalizer_entries: int


def _count_entries(spec: model_pb2.NormalizerSpec) -> int:
    if not spec.precompiled_charsmap:
        return 0
    return len(CompiledCharsMap(spec.precompiled_charsmap).entries())


def load_model_proto(model_path: Path) -> model_pb2.ModelProto:
    """
    Parse a serialized model file.

    Raises:
        DocumentLoadError: If the file can't be read.
        DocumentDataError: If the bytes aren't a ModelProto.
    """
    try:
        data = safe_read_bytes(model_path)
    except OSError as err:
        raise DocumentLoadError(f"Cannot read model {model_path}: {err}") from err

    try:
        return model_pb2.ModelProto.FromString(data)
    except DecodeError as err:
        raise DocumentDataError(f"{model_path} is not a SentencePiece model: {err}") from err


def inspect_model(model_path: Path) -> ModelSummary:
    """
    Summarize a model file written by the converter (or any SentencePiece model).

    Raises:
        DocumentLoadError: If the file can't be read.
        DocumentDataError: If the file isn't a ModelProto.
        CharsMapCompileError: If a character map in it is corrupt.
    """
    model_proto = load_model_proto(model_path)

    type_names = model_pb2.ModelProto.SentencePiece.Type
    piece_types = Counter(type_names.Name(piece.type) for piece in model_proto.pieces)
    unknown = next(
        (piece.piece for piece in model_proto.pieces if piece.type == type_names.Value("UNKNOWN")),
        None,
    )

    return ModelSummary(
        path=str(model_path),
        sha256=compute_sha256(model_path),
        model_type=model_pb2.TrainerSpec.ModelType.Name(model_proto.trainer_spec.model_type),
        vocab_size=model_proto.trainer_spec.vocab_size,
        piece_count=len(model_proto.pieces),
        piece_types=dict(sorted(piece_types.items())),
        unknown_piece=unknown,
        normalizer_entries=_count_entries(model_proto.normalizer_spec),
        denormalizer_entries=_count_entries(model_proto.denormalizer_spec),
    )
