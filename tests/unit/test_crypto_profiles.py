"""Unit tests for Argon2id cost profiles."""

import pytest
from sste.crypto import Crypto, PrimitiveEngine
from sste.crypto.profiles import (
    INTERACTIVE,
    MODERATE,
    SENSITIVE,
    MINIMUM,
    DEFAULT_PROFILE,
    get_profile,
    profile_to_dict,
    profile_from_dict,
)


def test_interactive_is_default():
    assert DEFAULT_PROFILE is INTERACTIVE
    assert INTERACTIVE.time_cost == 2
    assert INTERACTIVE.memory_cost == 64 * 1024  # KiB
    assert INTERACTIVE.parallelism == 1


def test_tiers_grow_in_cost():
    assert MINIMUM.memory_cost < INTERACTIVE.memory_cost < MODERATE.memory_cost < SENSITIVE.memory_cost
    assert INTERACTIVE.time_cost < MODERATE.time_cost < SENSITIVE.time_cost


def test_get_profile_is_case_insensitive():
    assert get_profile("Moderate") is MODERATE
    assert get_profile(" sensitive ") is SENSITIVE


def test_get_profile_unknown_raises():
    with pytest.raises(KeyError):
        get_profile("extreme")


def test_profile_to_dict():
    result = profile_to_dict(INTERACTIVE, b"\xaa" * 16)
    assert result == {
        "algo": "argon2id",
        "profile": "interactive",
        "salt": "aa" * 16,
        "time": 2,
        "memory": 65536,
        "parallelism": 1,
    }


def test_profile_from_dict_inverts_to_dict():
    salt = bytes(range(16))
    profile, restored = profile_from_dict(profile_to_dict(MODERATE, salt))
    assert profile == MODERATE
    assert restored == salt


def test_profile_from_dict_rejects_other_algorithms():
    with pytest.raises(ValueError, match="Unsupported KDF algorithm"):
        profile_from_dict({"algo": "scrypt", "salt": "00"})


def test_persisted_params_rederive_same_key():
    """Stored profile and salt are enough to derive the original key again."""
    original = Crypto(PrimitiveEngine(), MINIMUM).derive_key("passphrase")
    stored = profile_to_dict(MINIMUM, original.salt)

    profile, salt = profile_from_dict(stored)
    again = Crypto(PrimitiveEngine(), profile).derive_key("passphrase", salt)
    assert again.key == original.key
