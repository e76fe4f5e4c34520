"""sste: a small cryptographic facade over Argon2id, AES-256-GCM and BLAKE2b."""

__version__ = "0.1.0"
