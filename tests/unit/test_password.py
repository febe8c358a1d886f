# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for password hashing utilities.

Uses the minimum bcrypt cost so the suite stays fast.
"""

import pytest

from src.domains.auth.password import PasswordHasher, hash_password, verify_password


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


class TestPasswordHasher:
    """Tests for PasswordHasher class."""

    def test_hash_is_bcrypt(self, hasher: PasswordHasher) -> None:
        hashed = hasher.hash("password123")

        assert hashed.startswith("$2b$04$")
        assert len(hashed) == 60

    def test_verify_roundtrip(self, hasher: PasswordHasher) -> None:
        hashed = hasher.hash("password123")

        assert hasher.verify("password123", hashed) is True
        assert hasher.verify("password124", hashed) is False

    def test_salted(self, hasher: PasswordHasher) -> None:
        assert hasher.hash("same") != hasher.hash("same")

    def test_empty_password_rejected(self, hasher: PasswordHasher) -> None:
        with pytest.raises(ValueError):
            hasher.hash("")

    def test_verify_empty_inputs(self, hasher: PasswordHasher) -> None:
        assert hasher.verify("", "$2b$04$abc") is False
        assert hasher.verify("password", "") is False

    def test_malformed_hash_is_a_mismatch(self, hasher: PasswordHasher) -> None:
        assert hasher.verify("password", "not-a-bcrypt-hash") is False

    def test_long_password_is_truncated_to_72_bytes(self, hasher: PasswordHasher) -> None:
        long_password = "x" * 100
        hashed = hasher.hash(long_password)

        assert hasher.verify("x" * 72, hashed) is True

    def test_needs_rehash(self, hasher: PasswordHasher) -> None:
        assert hasher.needs_rehash(hasher.hash("pw")) is False
        assert hasher.needs_rehash(PasswordHasher(rounds=5).hash("pw")) is True
        assert hasher.needs_rehash("garbage") is True
        assert hasher.needs_rehash("") is False


class TestModuleFunctions:
    def test_hash_and_verify(self) -> None:
        hashed = hash_password("password123")

        assert verify_password("password123", hashed) is True
        assert verify_password("wrong", hashed) is False
