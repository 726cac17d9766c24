# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
End-to-end conversion of a Hugging Face byte-level BPE tokenizer directory
into a SentencePiece model file.

Stages, in order:

  IDLE            nothing loaded yet
  CONFIGS_LOADED  tokenizer_config.json and tokenizer.json read and validated
  SPECS_BUILT     normalizer and denormalizer character maps compiled
  VOCAB_BUILT     pieces appended and trainer metadata filled in
  SERIALIZED      model written to the output path
  DONE            success

Each transition is logged. A failure in any stage is logged as FAILED with
the stage that was reached, then the original exception propagates. The
model is only serialized once every stage before it has succeeded, so a
failed run never produces an output file.
"""

from enum import Enum
from pathlib import Path
from typing import NamedTuple, Optional

from sentencepiece import sentencepiece_model_pb2 as model_pb2

from bpeport.converter.bytemap.core import build_byte_remap_table
from bpeport.converter.exceptions import OutputWriteError
from bpeport.converter.normalizer.core import (
    configure_denormalizer_spec,
    configure_normalizer_spec,
)
from bpeport.converter.sources.loader import TokenizerSources, load_tokenizer_sources
from bpeport.converter.trainer.core import configure_trainer_spec
from bpeport.converter.vocab.core import PieceType, VocabularyPiece, add_pieces, assemble_pieces
from bpeport.logging.logger import get_logger
from bpeport.utils.filesystem import atomic_write_bytes
from bpeport.utils.hashing import compute_sha256_bytes
from bpeport.utils.paths import ensure_directory


class ConversionStage(Enum):
    IDLE = "IDLE"
    CONFIGS_LOADED = "CONFIGS_LOADED"
    SPECS_BUILT = "SPECS_BUILT"
    VOCAB_BUILT = "VOCAB_BUILT"
    SERIALIZED = "SERIALIZED"
    DONE = "DONE"
    FAILED = "FAILED"


class ConversionResult(NamedTuple):
    """What you get back after a successful conversion."""

    output_path: str
    vocab_size: int
    user_defined_count: int
    unknown_piece: Optional[str]
    sha256: str


def build_normalization_specs(model_proto: model_pb2.ModelProto) -> int:
    """
    Compile the byte substitution into both normalizer specs.

    Returns the number of remapped bytes.

    Raises:
        CharsMapCompileError: If a character map fails to compile.
    """
    table = build_byte_remap_table()
    configure_normalizer_spec(model_proto.normalizer_spec, table)
    configure_denormalizer_spec(model_proto.denormalizer_spec, table)
    return len(table)


def build_vocabulary(
    model_proto: model_pb2.ModelProto,
    sources: TokenizerSources,
) -> list[VocabularyPiece]:
    """Append the scored pieces and fill in the trainer metadata."""
    pieces = assemble_pieces(
        sources.tokenizer.model.vocab,
        sources.config.unk_token,
        sources.tokenizer.added_tokens,
    )
    add_pieces(model_proto, pieces)
    configure_trainer_spec(model_proto)
    return pieces


def build_model_proto(sources: TokenizerSources) -> tuple[model_pb2.ModelProto, list[VocabularyPiece]]:
    """
    Assemble the complete model from validated documents without touching
    the filesystem. The CLI's --dry-run goes through here.
    """
    model_proto = model_pb2.ModelProto()
    build_normalization_specs(model_proto)
    pieces = build_vocabulary(model_proto, sources)
    return model_proto, pieces


def _write_model(data: bytes, output_path: Path) -> None:
    try:
        ensure_directory(output_path.parent)
    except OSError as err:
        raise OutputWriteError(
            f"Cannot create output directory {output_path.parent}: {err}"
        ) from err

    try:
        atomic_write_bytes(output_path, data)
    except OSError as err:
        raise OutputWriteError(f"Cannot write model to {output_path}: {err}") from err


def convert_tokenizer(input_dir: Path, output_path: Path) -> ConversionResult:
    """
    Convert a Hugging Face tokenizer directory into a SentencePiece model.

    Args:
        input_dir: Directory holding tokenizer_config.json and tokenizer.json.
        output_path: File to write. Missing parent directories are created and
            an existing file is replaced.

    Returns:
        A summary of what was written.

    Raises:
        DocumentLoadError: An input file is missing, unreadable, or not JSON.
        DocumentDataError: An input file lacks a required field.
        CharsMapCompileError: A character map failed to compile.
        OutputWriteError: The output directory or file couldn't be written.
    """
    logger = get_logger("bpeport.converter.pipeline")
    stage = ConversionStage.IDLE

    def advance(next_stage: ConversionStage, **context: object) -> ConversionStage:
        logger.info("Stage reached", extra={"stage": next_stage.value, **context})
        return next_stage

    logger.info(
        "Starting tokenizer conversion",
        extra={"input_dir": str(input_dir), "output_path": str(output_path)},
    )

    try:
        sources = load_tokenizer_sources(input_dir)
        if sources.tokenizer.model.type not in (None, "BPE"):
            logger.warning(
                "tokenizer.json does not declare a BPE model, converting anyway",
                extra={"model_type": sources.tokenizer.model.type},
            )
        stage = advance(
            ConversionStage.CONFIGS_LOADED,
            vocab_entries=len(sources.tokenizer.model.vocab),
            added_tokens=len(sources.tokenizer.added_tokens),
        )

        model_proto = model_pb2.ModelProto()
        remapped = build_normalization_specs(model_proto)
        stage = advance(ConversionStage.SPECS_BUILT, remapped_bytes=remapped)

        pieces = build_vocabulary(model_proto, sources)
        stage = advance(ConversionStage.VOCAB_BUILT, vocab_size=model_proto.trainer_spec.vocab_size)

        data = model_proto.SerializeToString()
        _write_model(data, output_path)
        stage = advance(ConversionStage.SERIALIZED, size_bytes=len(data))
    except Exception as err:
        logger.error(
            "Tokenizer conversion failed",
            extra={
                "stage": ConversionStage.FAILED.value,
                "last_stage": stage.value,
                "error": str(err),
            },
        )
        raise

    unknown = next((piece.text for piece in pieces if piece.type is PieceType.UNKNOWN), None)
    result = ConversionResult(
        output_path=str(output_path),
        vocab_size=len(pieces),
        user_defined_count=sum(1 for piece in pieces if piece.type is PieceType.USER_DEFINED),
        unknown_piece=unknown,
        sha256=compute_sha256_bytes(data),
    )
    advance(ConversionStage.DONE, **result._asdict())
    return result
