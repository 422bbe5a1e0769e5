"""Password hashing for dashboard accounts (argon2id)."""

from __future__ import annotations

import argon2

_hasher = argon2.PasswordHasher(
    time_cost=2,
    memory_cost=65536,  # 64 MB
    parallelism=1,
    hash_len=32,
    salt_len=16,
    type=argon2.Type.ID,
)


def hash_password(password: str) -> str:
    """Hash a password with a fresh random salt."""
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a plain password against a stored hash.

    A mismatch, a corrupt hash or a hash from another scheme all yield False.
    """
    try:
        return _hasher.verify(password_hash, password)
    except (argon2.exceptions.VerificationError, argon2.exceptions.InvalidHashError):
        return False
