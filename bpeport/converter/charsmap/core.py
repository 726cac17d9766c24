# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
SentencePiece precompiled character maps.

A SentencePiece normalizer doesn't carry its rules as a table. It carries a
`precompiled_charsmap` blob, and the runtime walks that blob with a
longest-prefix search over the UTF-8 input. The layout is:

  uint32 (little endian)   size of the trie section in bytes
  trie section             darts-clone double-array, one uint32 per unit
  replacement section      NUL-terminated UTF-8 strings, back to back

Each key in the trie is the UTF-8 encoding of a source string. Its value is
the byte offset of the replacement string inside the replacement section.

Unit layout (darts-clone):
  bits 0..7    label (the byte that leads to this unit)
  bit  8       has-leaf: a key ends here, its value sits at label 0 below
  bit  9       extended offset (offset stored shifted by 8)
  bits 10..31  offset: XOR distance from this unit to its children's base
  leaf units have bit 31 set and carry the value in bits 0..30

The runtime does no bounds checking while it walks, so the array is padded to
whole 256-unit blocks: every `base ^ byte` stays inside the block of `base`.
"""

import struct
from collections import deque
from collections.abc import Mapping
from typing import Optional

from bpeport.converter.exceptions import CharsMapCompileError

CharsMap = Mapping[tuple[int, ...], tuple[int, ...]]

_LABEL_MASK = 0xFF
_HAS_LEAF = 1 << 8
_EXTENDED_OFFSET = 1 << 9
_IS_LEAF = 1 << 31
_VALUE_MASK = _IS_LEAF - 1
_MAX_OFFSET = 1 << 21
_BLOCK_SIZE = 256
_MAX_CODEPOINT = 0x10FFFF
_SURROGATES = range(0xD800, 0xE000)


def _to_utf8(codepoints: tuple[int, ...], role: str) -> bytes:
    if not codepoints:
        raise CharsMapCompileError(f"Character map {role} must not be empty")
    for codepoint in codepoints:
        if not isinstance(codepoint, int) or codepoint <= 0 or codepoint > _MAX_CODEPOINT:
            raise CharsMapCompileError(
                f"Character map {role} {codepoints!r} holds invalid codepoint {codepoint!r}"
            )
        if codepoint in _SURROGATES:
            raise CharsMapCompileError(
                f"Character map {role} {codepoints!r} holds surrogate codepoint U+{codepoint:04X}"
            )
    return "".join(chr(codepoint) for codepoint in codepoints).encode("utf-8")


def _unit_label(unit: int) -> int:
    return unit & (_IS_LEAF | _LABEL_MASK)


def _unit_offset(unit: int) -> int:
    return (unit >> 10) << ((unit & _EXTENDED_OFFSET) >> 6)


class _TrieNode:
    __slots__ = ("children", "value")

    def __init__(self) -> None:
        self.children: dict[int, _TrieNode] = {}
        self.value: Optional[int] = None


class _DoubleArrayBuilder:
    """
    Places a byte trie into a double array.

    Nodes are placed breadth first. Each node gets a base that no other node
    uses, with every `base ^ label` slot free. Unique bases are what make the
    label check on lookup sufficient.
    """

    def __init__(self) -> None:
        self.units: list[int] = [0]
        self.occupied: list[bool] = [True]
        self.used_bases: set[int] = set()
        self.first_free = 1

    def _grow(self, position: int) -> None:
        if position >= len(self.units):
            extra = position + 1 - len(self.units)
            self.units.extend([0] * extra)
            self.occupied.extend([False] * extra)

    def _is_free(self, position: int) -> bool:
        return position >= len(self.occupied) or not self.occupied[position]

    def _place(self, position: int, unit: int) -> None:
        self._grow(position)
        self.units[position] = unit
        self.occupied[position] = True
        while self.first_free < len(self.occupied) and self.occupied[self.first_free]:
            self.first_free += 1

    def _find_base(self, labels: list[int]) -> int:
        position = self.first_free
        while True:
            if self._is_free(position):
                base = position ^ labels[0]
                if (
                    base != 0
                    and base not in self.used_bases
                    and all(self._is_free(base ^ label) for label in labels)
                ):
                    return base
            position += 1

    def build(self, root: _TrieNode) -> bytes:
        queue: deque[tuple[_TrieNode, int]] = deque([(root, 0)])
        while queue:
            node, position = queue.popleft()
            labels = sorted(node.children)
            if node.value is not None:
                labels.insert(0, 0)

            base = self._find_base(labels)
            offset = position ^ base
            if offset >= _MAX_OFFSET:
                raise CharsMapCompileError(
                    "Character map is too large for a double-array trie"
                )
            self.used_bases.add(base)
            self.units[position] |= offset << 10

            if node.value is not None:
                self.units[position] |= _HAS_LEAF
                self._place(base, node.value | _IS_LEAF)
            for label in labels:
                if label == 0:
                    continue
                child_position = base ^ label
                self._place(child_position, label)
                queue.append((node.children[label], child_position))

        padded = -(-len(self.units) // _BLOCK_SIZE) * _BLOCK_SIZE
        self.units.extend([0] * (padded - len(self.units)))
        return struct.pack(f"<{len(self.units)}I", *self.units)


def _build_trie(entries: list[tuple[bytes, int]]) -> bytes:
    root = _TrieNode()
    for key, value in entries:
        node = root
        for byte in key:
            node = node.children.setdefault(byte, _TrieNode())
        if node.value is not None:
            raise CharsMapCompileError(f"Duplicate character map key {key!r}")
        if value > _VALUE_MASK:
            raise CharsMapCompileError("Replacement section is too large")
        node.value = value
    return _DoubleArrayBuilder().build(root)


def compile_chars_map(chars_map: CharsMap) -> bytes:
    """
    Compile a codepoint-sequence map into a SentencePiece precompiled charsmap.

    Replacement strings are de-duplicated and laid out in codepoint order,
    keys are inserted in bytewise order, the same arrangement SentencePiece's
    own builder produces.

    Args:
        chars_map: source codepoints -> replacement codepoints. Keys and values
            must be non-empty, free of U+0000 and surrogates.

    Returns:
        The blob to store in NormalizerSpec.precompiled_charsmap.

    Raises:
        CharsMapCompileError: If the map is empty or holds an invalid entry.
    """
    if not chars_map:
        raise CharsMapCompileError("Cannot compile an empty character map")

    keyed = [(_to_utf8(tuple(key), "key"), tuple(value)) for key, value in chars_map.items()]

    positions: dict[tuple[int, ...], int] = {}
    replacements = bytearray()
    for value in sorted({value for _, value in keyed}):
        positions[value] = len(replacements)
        replacements += _to_utf8(value, "value") + b"\0"

    trie = _build_trie(sorted((key, positions[value]) for key, value in keyed))
    return struct.pack("<I", len(trie)) + trie + bytes(replacements)


class CompiledCharsMap:
    """Read side of a precompiled charsmap: enumerate it or apply it to text."""

    def __init__(self, blob: bytes) -> None:
        if len(blob) <= 4:
            raise CharsMapCompileError("Precompiled charsmap is truncated")
        (trie_size,) = struct.unpack_from("<I", blob, 0)
        if trie_size == 0 or trie_size % 4 or 4 + trie_size >= len(blob):
            raise CharsMapCompileError(
                f"Precompiled charsmap declares an invalid trie size ({trie_size} bytes)"
            )
        self._units = struct.unpack_from(f"<{trie_size // 4}I", blob, 4)
        self._replacements = bytes(blob[4 + trie_size:])

    def _unit(self, position: int) -> int:
        if position >= len(self._units):
            raise CharsMapCompileError(f"Trie unit {position} is out of range")
        return self._units[position]

    def _replacement(self, offset: int) -> str:
        end = self._replacements.find(b"\0", offset)
        if end < 0:
            raise CharsMapCompileError(f"Replacement at offset {offset} is not terminated")
        return self._replacements[offset:end].decode("utf-8")

    def entries(self) -> dict[str, str]:
        """Every key -> replacement pair in the map, keys in bytewise order."""
        found: dict[str, str] = {}
        stack: list[tuple[int, bytes]] = [(0, b"")]
        while stack:
            position, prefix = stack.pop()
            unit = self._unit(position)
            base = position ^ _unit_offset(unit)
            if unit & _HAS_LEAF:
                value = self._unit(base) & _VALUE_MASK
                found[prefix.decode("utf-8")] = self._replacement(value)
            for label in range(_LABEL_MASK, 0, -1):
                child = base ^ label
                if child < len(self._units) and _unit_label(self._units[child]) == label:
                    stack.append((child, prefix + bytes((label,))))
        return dict(sorted(found.items(), key=lambda item: item[0].encode("utf-8")))

    def _longest_match(self, data: bytes, start: int) -> tuple[int, Optional[str]]:
        best_length, best_value = 0, None
        base = _unit_offset(self._units[0])
        for index in range(start, len(data)):
            byte = data[index]
            child = base ^ byte
            if child >= len(self._units) or _unit_label(self._units[child]) != byte:
                break
            unit = self._units[child]
            base = child ^ _unit_offset(unit)
            if unit & _HAS_LEAF:
                best_length = index - start + 1
                best_value = self._unit(base) & _VALUE_MASK
        if best_value is None:
            return 0, None
        return best_length, self._replacement(best_value)

    def normalize(self, text: str) -> str:
        """
        Apply the map to text with longest-prefix matching.

        Characters with no entry are copied through unchanged, one UTF-8
        character at a time.
        """
        data = text.encode("utf-8")
        pieces: list[str] = []
        index = 0
        while index < len(data):
            length, replacement = self._longest_match(data, index)
            if replacement is not None:
                pieces.append(replacement)
                index += length
                continue
            width = _utf8_width(data[index])
            pieces.append(data[index:index + width].decode("utf-8"))
            index += width
        return "".join(pieces)


def _utf8_width(lead: int) -> int:
    if lead < 0x80:
        return 1
    if lead < 0xE0:
        return 2
    if lead < 0xF0:
        return 3
    return 4


def decode_chars_map(blob: bytes) -> dict[str, str]:
    """Shortcut for CompiledCharsMap(blob).entries()."""
    return CompiledCharsMap(blob).entries()
