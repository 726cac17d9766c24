# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for hashing utilities.

SHA256 should produce identical output for identical input, every single
time, and the file and in-memory variants must agree.
"""

from pathlib import Path

from bpeport.utils.hashing import HASH_BUFFER_SIZE, compute_sha256, compute_sha256_bytes


class TestSha256Determinism:
    def test_same_bytes_produce_same_hash(self) -> None:
        data = b"deterministic input"
        assert compute_sha256_bytes(data) == compute_sha256_bytes(data)

    def test_different_bytes_produce_different_hash(self) -> None:
        assert compute_sha256_bytes(b"input_a") != compute_sha256_bytes(b"input_b")

    def test_empty_bytes_has_known_hash(self) -> None:
        expected = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        assert compute_sha256_bytes(b"") == expected


class TestFileHashing:
    def test_file_hash_matches_bytes_hash(self, tmp_path: Path) -> None:
        content = b"some file content for hashing"
        test_file = tmp_path / "test.bin"
        test_file.write_bytes(content)

        assert compute_sha256(test_file) == compute_sha256_bytes(content)

    def test_file_larger_than_buffer(self, tmp_path: Path) -> None:
        content = bytes(range(256)) * (HASH_BUFFER_SIZE // 128 + 3)
        test_file = tmp_path / "large.bin"
        test_file.write_bytes(content)

        assert compute_sha256(test_file) == compute_sha256_bytes(content)
