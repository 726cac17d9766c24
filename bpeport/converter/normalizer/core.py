# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Normalizer and denormalizer specs for a byte-level BPE model.

The normalizer rewrites raw text into the substituted alphabet the vocabulary
was written in (space becomes `Ġ`, newline becomes `Ċ`, ...). The denormalizer
runs the same table backwards on decoded text. Everything SentencePiece would
normally do on top of that (dummy prefix, whitespace squashing, `▁` escaping)
is switched off: the runtime must see exactly the text a Hugging Face
ByteLevel pre-tokenizer would have produced.
"""

from collections.abc import Sequence

from sentencepiece import sentencepiece_model_pb2 as model_pb2

from bpeport.converter.bytemap.core import ByteRemapEntry
from bpeport.converter.charsmap.core import CharsMap, compile_chars_map


def build_forward_chars_map(table: Sequence[ByteRemapEntry]) -> CharsMap:
    """raw byte -> substitute codepoint, one single-codepoint entry per row."""
    return {(entry.raw_byte,): (entry.mapped_codepoint,) for entry in table}


def build_inverse_chars_map(table: Sequence[ByteRemapEntry]) -> CharsMap:
    """substitute codepoint -> raw byte, the exact inverse of the forward map."""
    return {(entry.mapped_codepoint,): (entry.raw_byte,) for entry in table}


def _apply(spec: model_pb2.NormalizerSpec, chars_map: CharsMap) -> None:
    # Compile first so a failure leaves the spec untouched.
    blob = compile_chars_map(chars_map)
    spec.precompiled_charsmap = blob
    spec.add_dummy_prefix = False
    spec.remove_extra_whitespaces = False
    spec.escape_whitespaces = False


def configure_normalizer_spec(
    spec: model_pb2.NormalizerSpec,
    table: Sequence[ByteRemapEntry],
) -> None:
    """
    Fill a NormalizerSpec with the forward byte substitution.

    Raises:
        CharsMapCompileError: If the map can't be compiled.
    """
    _apply(spec, build_forward_chars_map(table))


def configure_denormalizer_spec(
    spec: model_pb2.NormalizerSpec,
    table: Sequence[ByteRemapEntry],
) -> None:
    """
    Fill a NormalizerSpec with the inverse substitution, for decoding.

    Raises:
        CharsMapCompileError: If the map can't be compiled.
    """
    _apply(spec, build_inverse_chars_map(table))
