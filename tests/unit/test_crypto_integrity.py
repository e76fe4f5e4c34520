"""
Unit tests for random generation and integrity hashing in the Crypto facade.
"""

import pytest
from unittest.mock import MagicMock

from sste.crypto import Crypto, EngineFailureError, PrimitiveEngine
from sste.crypto import integrity_hash, integrity_verify
from sste.crypto.profiles import MINIMUM


# ==============================================================================
# Fixtures
# ==============================================================================

@pytest.fixture
def crypto():
    return Crypto(PrimitiveEngine(), MINIMUM)


# ==============================================================================
# Tests: Random Generation
# ==============================================================================

def test_random_bytes_length(crypto):
    assert len(crypto.random_bytes(32)) == 32
    assert crypto.random_bytes(0) == b""


def test_random_bytes_differ(crypto):
    assert crypto.random_bytes(32) != crypto.random_bytes(32)


def test_random_bytes_negative_size(crypto):
    with pytest.raises(ValueError, match="non-negative"):
        crypto.random_bytes(-1)


# ==============================================================================
# Tests: Integrity Hash
# ==============================================================================

def test_integrity_hash_uses_max_digest_size(crypto):
    digest = crypto.integrity_hash(b"payload")
    assert len(digest) == crypto.engine.digest_size


def test_integrity_hash_str_matches_utf8_bytes(crypto):
    text = "She wasn't dead though... And she struck back at the enemy behind her."
    assert crypto.integrity_hash(text) == crypto.integrity_hash(text.encode("utf-8"))


def test_integrity_verify_roundtrip(crypto):
    message = "She wasn't dead though... And she struck back at the enemy behind her."
    digest = crypto.integrity_hash(message)
    assert crypto.integrity_verify(message, digest) is True


def test_integrity_verify_other_message(crypto):
    digest = crypto.integrity_hash("She wasn't dead though... And she struck back at the enemy behind her.")
    other = "Suddenly, the red lights went out and the whole area was dark."
    assert crypto.integrity_verify(other, digest) is False


def test_integrity_verify_single_byte_difference(crypto):
    data = bytearray(b"x" * 100)
    digest = crypto.integrity_hash(bytes(data))
    data[57] ^= 0x01
    assert crypto.integrity_verify(bytes(data), digest) is False


def test_integrity_verify_tampered_digest(crypto):
    digest = bytearray(crypto.integrity_hash(b"data"))
    digest[-1] ^= 0xFF
    assert crypto.integrity_verify(b"data", bytes(digest)) is False


@pytest.mark.parametrize("bad_digest", [b"", b"\x00" * 32, b"\x00" * 65, None, "abcd"])
def test_integrity_verify_malformed_digest(crypto, bad_digest):
    """A digest of the wrong length or type is a mismatch, never an error."""
    assert crypto.integrity_verify(b"data", bad_digest) is False


def test_integrity_verify_truncated_digest(crypto):
    digest = crypto.integrity_hash(b"data")
    assert crypto.integrity_verify(b"data", digest[:-1]) is False


def test_integrity_hash_engine_failure():
    engine = MagicMock(spec=PrimitiveEngine)
    engine.generic_hash.side_effect = ValueError("boom")
    crypto = Crypto(engine, MINIMUM)

    with pytest.raises(EngineFailureError) as excinfo:
        crypto.integrity_hash(b"data")
    assert excinfo.value.operation == "generic_hash"
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_module_level_functions():
    digest = integrity_hash(b"module level")
    assert integrity_verify(b"module level", digest)


# ==============================================================================
# Tests: File Hashing
# ==============================================================================

def test_integrity_hash_file_matches_bytes(crypto, tmp_path):
    data = bytes(range(256)) * 1000
    path = tmp_path / "blob.bin"
    path.write_bytes(data)

    assert crypto.integrity_hash_file(path) == crypto.integrity_hash(data)
    assert crypto.integrity_hash_file(str(path), chunk_size=7) == crypto.integrity_hash(data)


def test_integrity_verify_file(crypto, tmp_path):
    path = tmp_path / "doc.txt"
    path.write_bytes(b"contents")
    digest = crypto.integrity_hash(b"contents")

    assert crypto.integrity_verify_file(path, digest) is True
    path.write_bytes(b"contents!")
    assert crypto.integrity_verify_file(path, digest) is False
    assert crypto.integrity_verify_file(path, b"short") is False


def test_integrity_hash_file_missing(crypto, tmp_path):
    with pytest.raises(FileNotFoundError):
        crypto.integrity_hash_file(tmp_path / "missing.bin")


def test_integrity_hash_file_rejects_non_positive_chunk_size(crypto, tmp_path):
    path = tmp_path / "doc.txt"
    path.write_bytes(b"definitely not empty")
    for size in (0, -1):
        with pytest.raises(ValueError, match="chunk_size"):
            crypto.integrity_hash_file(path, chunk_size=size)


# ==============================================================================
# Tests: Input Errors
# ==============================================================================

def test_unencodable_text_is_an_input_error(crypto):
    """A lone surrogate fails UTF-8 encoding the same way for every operation."""
    with pytest.raises(UnicodeEncodeError):
        crypto.integrity_hash("\ud800")
    with pytest.raises(UnicodeEncodeError):
        crypto.password_hash("\ud800")
