"""Cryptographic facade: stateless single-call operations over the primitive engine.

The facade owns the contract the raw primitives do not enforce:

- fixed key, nonce and salt sizes, checked before any engine call
- nonce generation and return, so callers can store it with the ciphertext
- NUL termination of encoded password hashes before verification
- constant-time digest comparison

Text inputs (``str``) for data and passwords are encoded as UTF-8. Keys,
nonces, salts and digests must be bytes.
"""
from __future__ import annotations

import hmac
import threading
from pathlib import Path
from typing import NamedTuple, Optional, Union

from argon2.exceptions import HashingError, InvalidHashError, VerificationError
from argon2.low_level import Type
from cryptography.exceptions import InvalidTag

from .engine import PrimitiveEngine, get_engine
from .exceptions import DecryptionFailedError, EngineFailureError, InvalidLengthError
from .profiles import DEFAULT_PROFILE, CostProfile

BytesLike = Union[bytes, bytearray, memoryview]
Data = Union[str, bytes, bytearray, memoryview]

CHUNK_SIZE = 65536  # 64KB


class SealedMessage(NamedTuple):
    """Ciphertext plus the nonce it was sealed with; decryption needs both."""

    ciphertext: bytes
    nonce: bytes


class DerivedKey(NamedTuple):
    """A derived symmetric key and the salt needed to derive it again."""

    key: bytes
    salt: bytes


KeyLike = Union[bytes, bytearray, memoryview, DerivedKey]


def _to_bytes(value: Data) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"expected str or bytes-like, got {type(value).__name__}")


def _check_length(value, expected: int, field: str) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)) or len(value) != expected:
        raise InvalidLengthError(field)
    return bytes(value)


def _terminated(encoded: Union[str, bytes]) -> bytes:
    # The engine reads the hash as a C string; restore a dropped terminator.
    if isinstance(encoded, str):
        encoded = encoded.encode("ascii")
    if not encoded.endswith(b"\x00"):
        encoded += b"\x00"
    return encoded


class Crypto:
    """
    Facade over a :class:`PrimitiveEngine`.

    Instances hold no mutable state and can be shared between threads. The
    engine is injected (defaults to the process-wide one) and the Argon2id
    cost tier is fixed per instance via ``profile``.
    """

    def __init__(
        self,
        engine: Optional[PrimitiveEngine] = None,
        profile: Optional[CostProfile] = None,
    ):
        self.engine = engine if engine is not None else get_engine()
        self.profile = profile if profile is not None else DEFAULT_PROFILE

    # ------------------------------------------------------------------
    # Random generation
    # ------------------------------------------------------------------

    def random_bytes(self, size: int) -> bytes:
        """Return ``size`` cryptographically secure random bytes."""
        if size < 0:
            raise ValueError("size must be non-negative")
        return self.engine.random(size)

    # ------------------------------------------------------------------
    # Integrity hashing
    # ------------------------------------------------------------------

    def integrity_hash(self, data: Data) -> bytes:
        """
        Hash ``data`` with an **integrity** hash (not a password hash, not a MAC).

        Suitable for checksums of files or payloads.
        """
        data = _to_bytes(data)
        try:
            return self.engine.generic_hash(data)
        except ValueError as e:
            raise EngineFailureError("generic_hash") from e

    def integrity_verify(self, data: Data, digest) -> bool:
        """Check ``data`` against a digest produced by :meth:`integrity_hash`."""
        if not isinstance(digest, (bytes, bytearray, memoryview)):
            return False
        digest = bytes(digest)
        if len(digest) != self.engine.digest_size:
            return False
        return hmac.compare_digest(self.integrity_hash(data), digest)

    def integrity_hash_file(self, path: Union[str, Path], chunk_size: int = CHUNK_SIZE) -> bytes:
        """Stream a file through the integrity hash; same digest as hashing its bytes."""
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        try:
            h = self.engine.new_generic_hash()
        except ValueError as e:
            raise EngineFailureError("generic_hash") from e
        with open(path, "rb") as f:
            while True:
                data = f.read(chunk_size)
                if not data:
                    break
                h.update(data)
        return h.digest()

    def integrity_verify_file(self, path: Union[str, Path], digest) -> bool:
        if not isinstance(digest, (bytes, bytearray, memoryview)):
            return False
        digest = bytes(digest)
        if len(digest) != self.engine.digest_size:
            return False
        return hmac.compare_digest(self.integrity_hash_file(path), digest)

    # ------------------------------------------------------------------
    # Password hashing
    # ------------------------------------------------------------------

    def password_hash(self, password: Data) -> str:
        """
        Hash ``password`` with Argon2id at this facade's cost profile.

        The result is a self-describing encoded string suitable for storing in
        a database and passing back to :meth:`password_verify`.
        """
        salt = self.random_bytes(self.engine.salt_size)
        try:
            encoded = self.engine.password_hash(_to_bytes(password), salt, self.profile)
        except HashingError as e:
            raise EngineFailureError("password_hash") from e
        return encoded.decode("ascii")

    def password_verify(self, password: Data, encoded_hash: Union[str, bytes]) -> bool:
        """
        Verify ``password`` against a stored encoded hash.

        Returns False for a wrong password. A malformed hash string raises
        :class:`EngineFailureError` rather than reading as a mismatch.
        """
        try:
            encoded = _terminated(encoded_hash)
        except UnicodeEncodeError as e:
            raise EngineFailureError("password_verify") from e
        try:
            return self.engine.password_verify(encoded, _to_bytes(password))
        except VerificationError as e:
            raise EngineFailureError("password_verify") from e

    def password_needs_rehash(self, encoded_hash: str) -> bool:
        """Return True if ``encoded_hash`` was made with other parameters than ours."""
        try:
            params = self.engine.password_parameters(encoded_hash.rstrip("\x00"))
        except InvalidHashError as e:
            raise EngineFailureError("password_parameters") from e
        return (
            params.type is not Type.ID
            or params.time_cost != self.profile.time_cost
            or params.memory_cost != self.profile.memory_cost
            or params.parallelism != self.profile.parallelism
            or params.hash_len != self.engine.password_hash_len
        )

    # ------------------------------------------------------------------
    # Key derivation
    # ------------------------------------------------------------------

    def derive_key(self, secret: Data, salt: Optional[bytes] = None) -> DerivedKey:
        """
        Derive a symmetric encryption key from ``secret`` (e.g. a passphrase).

        Without ``salt`` a fresh random salt is generated, so repeated calls
        give different keys. Store the returned salt and pass it back in to
        derive the same key again.
        """
        if salt is None:
            salt = self.random_bytes(self.engine.salt_size)
        else:
            salt = _check_length(salt, self.engine.salt_size, "salt")

        try:
            key = self.engine.kdf(_to_bytes(secret), salt, self.profile, self.engine.key_size)
        except HashingError as e:
            raise EngineFailureError("derive_key") from e
        if len(key) != self.engine.key_size:
            raise EngineFailureError("derive_key")
        return DerivedKey(key, salt)

    # ------------------------------------------------------------------
    # Single-message authenticated encryption
    # ------------------------------------------------------------------

    def _key_bytes(self, key: KeyLike) -> bytes:
        if isinstance(key, DerivedKey):
            key = key.key
        return _check_length(key, self.engine.key_size, "key")

    def encrypt(
        self,
        plaintext: Data,
        key: KeyLike,
        nonce: Optional[bytes] = None,
        associated_data: Optional[bytes] = None,
    ) -> SealedMessage:
        """
        Encrypt ``plaintext`` with ``key``.

        ``key`` must come from :meth:`derive_key`. If ``nonce`` is omitted a
        random one is generated; never reuse a nonce with the same key. The
        nonce used is always returned next to the ciphertext.
        """
        key = self._key_bytes(key)
        if nonce is None:
            nonce = self.random_bytes(self.engine.nonce_size)
        else:
            nonce = _check_length(nonce, self.engine.nonce_size, "nonce")

        ciphertext = self.engine.aead_encrypt(key, nonce, _to_bytes(plaintext), associated_data)
        return SealedMessage(ciphertext, nonce)

    def decrypt(
        self,
        ciphertext: BytesLike,
        key: KeyLike,
        nonce: BytesLike,
        associated_data: Optional[bytes] = None,
    ) -> bytes:
        """
        Decrypt and authenticate ``ciphertext``.

        Raises :class:`DecryptionFailedError` without further detail if the
        tag does not verify.
        """
        key = self._key_bytes(key)
        nonce = _check_length(nonce, self.engine.nonce_size, "nonce")
        if (
            not isinstance(ciphertext, (bytes, bytearray, memoryview))
            or len(ciphertext) < self.engine.tag_size
        ):
            raise InvalidLengthError("ciphertext")

        try:
            return self.engine.aead_decrypt(key, nonce, bytes(ciphertext), associated_data)
        except InvalidTag:
            raise DecryptionFailedError() from None

    def decrypt_message(
        self, message: SealedMessage, key: KeyLike, associated_data: Optional[bytes] = None
    ) -> bytes:
        """Decrypt a :class:`SealedMessage` returned by :meth:`encrypt`."""
        return self.decrypt(message.ciphertext, key, message.nonce, associated_data)


# module-level default facade
_default_crypto: Optional[Crypto] = None
_crypto_lock = threading.Lock()


def get_crypto() -> Crypto:
    """Return the process-wide facade, configured from the environment on first use."""
    global _default_crypto
    if _default_crypto is None:
        with _crypto_lock:
            if _default_crypto is None:
                from sste.config import load_settings

                _default_crypto = Crypto(get_engine(), load_settings().profile)
    return _default_crypto


def random_bytes(size: int) -> bytes:
    return get_crypto().random_bytes(size)


def integrity_hash(data: Data) -> bytes:
    return get_crypto().integrity_hash(data)


def integrity_verify(data: Data, digest) -> bool:
    return get_crypto().integrity_verify(data, digest)


def integrity_hash_file(path: Union[str, Path], chunk_size: int = CHUNK_SIZE) -> bytes:
    return get_crypto().integrity_hash_file(path, chunk_size=chunk_size)


def integrity_verify_file(path: Union[str, Path], digest) -> bool:
    return get_crypto().integrity_verify_file(path, digest)


def password_hash(password: Data) -> str:
    return get_crypto().password_hash(password)


def password_verify(password: Data, encoded_hash: Union[str, bytes]) -> bool:
    return get_crypto().password_verify(password, encoded_hash)


def password_needs_rehash(encoded_hash: str) -> bool:
    return get_crypto().password_needs_rehash(encoded_hash)


def derive_key(secret: Data, salt: Optional[bytes] = None) -> DerivedKey:
    return get_crypto().derive_key(secret, salt)


def encrypt(
    plaintext: Data,
    key: KeyLike,
    nonce: Optional[bytes] = None,
    associated_data: Optional[bytes] = None,
) -> SealedMessage:
    return get_crypto().encrypt(plaintext, key, nonce, associated_data)


def decrypt(
    ciphertext: BytesLike,
    key: KeyLike,
    nonce: BytesLike,
    associated_data: Optional[bytes] = None,
) -> bytes:
    return get_crypto().decrypt(ciphertext, key, nonce, associated_data)


def decrypt_message(
    message: SealedMessage, key: KeyLike, associated_data: Optional[bytes] = None
) -> bytes:
    return get_crypto().decrypt_message(message, key, associated_data)
