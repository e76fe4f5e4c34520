"""Primitive engine: the thin binding between the facade and the crypto libraries.

Bindings:
- secure random: os.urandom
- generic hash: BLAKE2b at its maximum digest size (hashlib)
- password hash/verify and KDF: Argon2id (argon2-cffi low-level API)
- AEAD: AES-256-GCM (cryptography)

The engine does no validation of its own; it is called by
:class:`sste.crypto.facade.Crypto`, which checks sizes and maps failures.
All fixed sizes the facade relies on are read from the engine instance.
"""
from __future__ import annotations

import hashlib
import logging
import os
import threading
from typing import Optional

from argon2 import Parameters, extract_parameters
from argon2.exceptions import VerifyMismatchError
from argon2.low_level import Type, hash_secret, hash_secret_raw, verify_secret
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .profiles import CostProfile

logger = logging.getLogger(__name__)

# Variant prefixes of the PHC string encoding.
_ARGON2_TYPES = {
    b"$argon2id$": Type.ID,
    b"$argon2i$": Type.I,
    b"$argon2d$": Type.D,
}


class PrimitiveEngine:
    key_size = 32
    nonce_size = 12
    tag_size = 16
    digest_size = hashlib.blake2b.MAX_DIGEST_SIZE
    salt_size = 16
    password_hash_len = 32

    def random(self, size: int) -> bytes:
        return os.urandom(size)

    def new_generic_hash(self):
        """Return an incremental BLAKE2b object producing ``digest_size`` bytes."""
        return hashlib.blake2b(digest_size=self.digest_size)

    def generic_hash(self, data: bytes) -> bytes:
        h = self.new_generic_hash()
        h.update(data)
        return h.digest()

    def password_hash(self, password: bytes, salt: bytes, profile: CostProfile) -> bytes:
        """Return the PHC-encoded Argon2id hash (ASCII, no terminator)."""
        return hash_secret(
            secret=password,
            salt=salt,
            time_cost=profile.time_cost,
            memory_cost=profile.memory_cost,
            parallelism=profile.parallelism,
            hash_len=self.password_hash_len,
            type=Type.ID,
        )

    def password_verify(self, encoded: bytes, password: bytes) -> bool:
        """
        Verify ``password`` against a NUL-terminated encoded hash.

        A mismatch returns False; a malformed encoding raises
        :class:`argon2.exceptions.VerificationError`.
        """
        variant = Type.ID
        for prefix, candidate in _ARGON2_TYPES.items():
            if encoded.startswith(prefix):
                variant = candidate
                break
        try:
            return verify_secret(encoded, password, variant)
        except VerifyMismatchError:
            return False

    def password_parameters(self, encoded: str) -> Parameters:
        return extract_parameters(encoded)

    def kdf(self, secret: bytes, salt: bytes, profile: CostProfile, length: int) -> bytes:
        return hash_secret_raw(
            secret=secret,
            salt=salt,
            time_cost=profile.time_cost,
            memory_cost=profile.memory_cost,
            parallelism=profile.parallelism,
            hash_len=length,
            type=Type.ID,
        )

    def aead_encrypt(
        self, key: bytes, nonce: bytes, plaintext: bytes, associated_data: Optional[bytes]
    ) -> bytes:
        return AESGCM(key).encrypt(nonce, plaintext, associated_data)

    def aead_decrypt(
        self, key: bytes, nonce: bytes, ciphertext: bytes, associated_data: Optional[bytes]
    ) -> bytes:
        # raises cryptography.exceptions.InvalidTag on authentication failure
        return AESGCM(key).decrypt(nonce, ciphertext, associated_data)


_default_engine: Optional[PrimitiveEngine] = None
_engine_lock = threading.Lock()


def get_engine() -> PrimitiveEngine:
    """Return the process-wide engine, creating it on first use."""
    global _default_engine
    if _default_engine is None:
        with _engine_lock:
            if _default_engine is None:
                _default_engine = PrimitiveEngine()
                logger.debug(
                    "primitive engine initialized: aes-256-gcm, argon2id, blake2b-%d",
                    _default_engine.digest_size * 8,
                )
    return _default_engine
