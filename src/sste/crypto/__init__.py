"""Crypto helpers for sste.

This package provides stateless, single-call operations for:
- secure random generation
- BLAKE2b integrity hashing and constant-time verification
- Argon2id password hashing and verification
- Argon2id key derivation with an explicit, returnable salt
- single-message AEAD (AES-256-GCM) encryption/decryption

Module-level functions use a process-wide :class:`Crypto` facade; build your
own ``Crypto(engine, profile)`` to inject a different engine or cost tier.
"""

from .engine import PrimitiveEngine, get_engine
from .exceptions import (
    CryptoError,
    InvalidLengthError,
    DecryptionFailedError,
    EngineFailureError,
)
from .facade import (
    Crypto,
    DerivedKey,
    SealedMessage,
    get_crypto,
    random_bytes,
    integrity_hash,
    integrity_verify,
    integrity_hash_file,
    integrity_verify_file,
    password_hash,
    password_verify,
    password_needs_rehash,
    derive_key,
    encrypt,
    decrypt,
    decrypt_message,
)
from .profiles import CostProfile, INTERACTIVE, MODERATE, SENSITIVE, MINIMUM, get_profile

__all__ = [
    "PrimitiveEngine",
    "get_engine",
    "CryptoError",
    "InvalidLengthError",
    "DecryptionFailedError",
    "EngineFailureError",
    "Crypto",
    "DerivedKey",
    "SealedMessage",
    "get_crypto",
    "random_bytes",
    "integrity_hash",
    "integrity_verify",
    "integrity_hash_file",
    "integrity_verify_file",
    "password_hash",
    "password_verify",
    "password_needs_rehash",
    "derive_key",
    "encrypt",
    "decrypt",
    "decrypt_message",
    "CostProfile",
    "INTERACTIVE",
    "MODERATE",
    "SENSITIVE",
    "MINIMUM",
    "get_profile",
]
