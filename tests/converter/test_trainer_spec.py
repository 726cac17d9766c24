# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tests for the trainer metadata written into converted models."""

from sentencepiece import sentencepiece_model_pb2 as model_pb2

from bpeport.converter.trainer.core import configure_trainer_spec
from bpeport.converter.vocab.core import PieceType, VocabularyPiece, add_pieces


def test_marks_model_as_bpe() -> None:
    model_proto = model_pb2.ModelProto()
    configure_trainer_spec(model_proto)

    assert model_proto.trainer_spec.model_type == model_pb2.TrainerSpec.BPE


def test_vocab_size_matches_piece_count() -> None:
    model_proto = model_pb2.ModelProto()
    add_pieces(model_proto, [VocabularyPiece(str(i), PieceType.NORMAL, float(-i)) for i in range(7)])
    configure_trainer_spec(model_proto)

    assert model_proto.trainer_spec.vocab_size == 7
