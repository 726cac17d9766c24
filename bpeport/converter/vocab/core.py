# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Vocabulary assembly: Hugging Face token -> index map in, scored pieces out.

A SentencePiece BPE model ranks merges by piece score. tokenizer.json has no
scores, only indices, and for a BPE vocabulary the index order is the order
the merges were learned in. So the index becomes the rank and the score is
the negated rank: 0 for the first piece, -1 for the next, and so on.

Added tokens marked `normalized` are ordinary text the runtime should match
after normalization, so they're appended as USER_DEFINED pieces, continuing
the same score sequence. Added tokens that are not normalized are control
tokens (<|endoftext|>, <s>, ...) the runtime deals with on its own; they are
left out.
"""

from collections.abc import Iterable, Mapping, Sequence
from enum import IntEnum
from typing import NamedTuple

from sentencepiece import sentencepiece_model_pb2 as model_pb2

from bpeport.converter.sources.schema import AddedTokenRecord
from bpeport.logging.logger import get_logger


class PieceType(IntEnum):
    """Piece types, valued as ModelProto.SentencePiece.Type on the wire."""

    NORMAL = 1
    UNKNOWN = 2
    USER_DEFINED = 4


class VocabularyPiece(NamedTuple):
    text: str
    type: PieceType
    score: float


def order_by_index(vocab: Mapping[str, int]) -> list[str]:
    """
    Lay the vocabulary out by index.

    Indices are expected to be exactly 0..len(vocab)-1, which the document
    schema enforces at load time.
    """
    ordered = [""] * len(vocab)
    for token, index in vocab.items():
        ordered[index] = token
    return ordered


def assemble_pieces(
    vocab: Mapping[str, int],
    unk_token: str,
    added_tokens: Sequence[AddedTokenRecord],
) -> list[VocabularyPiece]:
    """
    Build the ordered piece list for a model.

    Args:
        vocab: token text -> dense index, from tokenizer.json's model.vocab.
        unk_token: text of the unknown token from tokenizer_config.json.
        added_tokens: tokenizer.json's added_tokens, in document order.

    Returns:
        Vocabulary pieces in index order, then normalized added tokens in
        document order. Scores run 0, -1, -2, ... across the whole list.
    """
    logger = get_logger("bpeport.converter.vocab")

    pieces: list[VocabularyPiece] = []
    for rank, token in enumerate(order_by_index(vocab)):
        piece_type = PieceType.UNKNOWN if token == unk_token else PieceType.NORMAL
        pieces.append(VocabularyPiece(token, piece_type, float(-rank)))

    if unk_token not in vocab:
        logger.warning(
            "Unknown token is not in the vocabulary, no piece is marked UNKNOWN",
            extra={"unk_token": unk_token},
        )

    skipped = 0
    for record in added_tokens:
        if not record.normalized:
            skipped += 1
            continue
        pieces.append(
            VocabularyPiece(record.content, PieceType.USER_DEFINED, float(-len(pieces)))
        )

    logger.debug(
        "Vocabulary assembled",
        extra={
            "vocab_pieces": len(vocab),
            "user_defined_pieces": len(pieces) - len(vocab),
            "skipped_added_tokens": skipped,
        },
    )
    return pieces


def add_pieces(model_proto: model_pb2.ModelProto, pieces: Iterable[VocabularyPiece]) -> None:
    """Append pieces to a ModelProto in order."""
    for piece in pieces:
        entry = model_proto.pieces.add()
        entry.piece = piece.text
        entry.type = int(piece.type)
        entry.score = piece.score
