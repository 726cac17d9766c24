# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The byte -> codepoint substitution table behind byte-level BPE.

GPT-2 style tokenizers never see raw bytes. Before merging, every byte is
swapped for a visible Unicode character: bytes that already print cleanly
(`!`..`~`, `¡`..`¬`, `®`..`ÿ`) stand for themselves, and everything else
(control characters, space, NBSP, soft hyphen, ...) is shifted up past U+0100
so it gets its own unambiguous character. The vocabulary in tokenizer.json is
written in that substituted alphabet, so the SentencePiece model has to apply
the same substitution in its normalizer and undo it in its denormalizer.

Byte 0 is left out. SentencePiece's character map can't hold a NUL key, so
the counter starts at 1 and byte 1 lands on U+0101, which is exactly where
GPT-2 puts it too. For every byte >= 1 this table agrees with the original.
"""

from typing import NamedTuple

PRINTABLE_BYTES: frozenset[int] = frozenset(
    [*range(ord("!"), ord("~") + 1), *range(ord("¡"), ord("¬") + 1), *range(ord("®"), ord("ÿ") + 1)]
)

REMAP_BASE = 256


class ByteRemapEntry(NamedTuple):
    """One non-printable byte and the codepoint that stands in for it."""

    raw_byte: int
    mapped_codepoint: int


def build_byte_remap_table() -> tuple[ByteRemapEntry, ...]:
    """
    Build the substitution table for every non-printable byte in 1..255.

    Bytes are visited in ascending order and the n-th non-printable one
    (counting from 1) maps to 256 + n, so the mapped codepoints start at 257
    and increase by one per entry. Pure and deterministic.
    """
    entries: list[ByteRemapEntry] = []
    n = 0
    for raw_byte in range(1, 256):
        if raw_byte in PRINTABLE_BYTES:
            continue
        n += 1
        entries.append(ByteRemapEntry(raw_byte, REMAP_BASE + n))
    return tuple(entries)
