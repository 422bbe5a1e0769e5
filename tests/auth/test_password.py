"""Tests for password hashing."""

from notifyhub.auth.password import hash_password, verify_password


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("admin123")
        assert verify_password("admin123", hashed) is True

    def test_wrong_password_rejected(self):
        hashed = hash_password("admin123")
        assert verify_password("admin124", hashed) is False

    def test_hash_is_salted(self):
        assert hash_password("admin123") != hash_password("admin123")

    def test_hash_is_argon2id(self):
        assert hash_password("admin123").startswith("$argon2id$")

    def test_garbage_hash_rejected(self):
        assert verify_password("admin123", "not-a-hash") is False

    def test_foreign_scheme_rejected(self):
        bcrypt_hash = "$2a$10$N9qo8uLOickgx2ZMRZoMyeIjZAgcfl7p92ldGxad68LJZdL17lhWy"
        assert verify_password("admin123", bcrypt_hash) is False
