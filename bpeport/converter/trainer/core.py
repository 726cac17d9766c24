# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Trainer metadata for a converted model.

Nothing is trained here. The runtime still reads `trainer_spec` to learn the
model family and to size its tables, so it has to describe the pieces that
were actually written.
"""

from sentencepiece import sentencepiece_model_pb2 as model_pb2


def configure_trainer_spec(model_proto: model_pb2.ModelProto) -> None:
    """Mark the model as BPE and set vocab_size to the number of pieces."""
    trainer_spec = model_proto.trainer_spec
    trainer_spec.model_type = model_pb2.TrainerSpec.BPE
    trainer_spec.vocab_size = len(model_proto.pieces)
