"""Argon2id cost profiles shared by password hashing and key derivation.

The tiers follow the libsodium naming so stored parameters stay recognisable
across bindings. Memory costs are expressed in KiB, as argon2-cffi expects.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class CostProfile:
    name: str
    time_cost: int
    memory_cost: int
    parallelism: int = 1


INTERACTIVE = CostProfile("interactive", time_cost=2, memory_cost=65536)
MODERATE = CostProfile("moderate", time_cost=3, memory_cost=262144)
SENSITIVE = CostProfile("sensitive", time_cost=4, memory_cost=1048576)
# Only suitable for tests: the cheapest parameters Argon2 accepts.
MINIMUM = CostProfile("minimum", time_cost=1, memory_cost=8)

PROFILES: Dict[str, CostProfile] = {
    p.name: p for p in (INTERACTIVE, MODERATE, SENSITIVE, MINIMUM)
}

DEFAULT_PROFILE = INTERACTIVE


def get_profile(name: str) -> CostProfile:
    """Look up a profile by name (case-insensitive); raise KeyError if unknown."""
    return PROFILES[name.strip().lower()]


def profile_to_dict(profile: CostProfile, salt: bytes) -> Dict:
    """Serialize KDF parameters and salt so a key can be re-derived later."""
    return {
        "algo": "argon2id",
        "profile": profile.name,
        "salt": salt.hex(),
        "time": profile.time_cost,
        "memory": profile.memory_cost,
        "parallelism": profile.parallelism,
    }


def profile_from_dict(params: Dict) -> tuple[CostProfile, bytes]:
    """Inverse of :func:`profile_to_dict`; returns ``(profile, salt)``."""
    if params.get("algo", "argon2id") != "argon2id":
        raise ValueError("Unsupported KDF algorithm")
    profile = CostProfile(
        name=params.get("profile", "custom"),
        time_cost=int(params.get("time", INTERACTIVE.time_cost)),
        memory_cost=int(params.get("memory", INTERACTIVE.memory_cost)),
        parallelism=int(params.get("parallelism", 1)),
    )
    return profile, bytes.fromhex(params["salt"])
