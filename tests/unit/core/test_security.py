"""Unit tests for password hashing."""

import pytest

from src.catalog.core.errors import InvalidInputError
from src.catalog.core.security import PasswordHasher
from src.catalog.runtime.config.config_data import SecurityConfig


class TestPasswordHasher:
    def test_hash_is_salted_bcrypt(self, password_hasher: PasswordHasher):
        first = password_hasher.hash("s3cret")
        second = password_hasher.hash("s3cret")

        assert first.startswith("$2")
        assert first != second
        assert "s3cret" not in first

    def test_verify(self, password_hasher: PasswordHasher):
        hashed = password_hasher.hash("s3cret")

        assert password_hasher.verify("s3cret", hashed) is True
        assert password_hasher.verify("wrong", hashed) is False

    def test_malformed_hash_is_a_mismatch(self, password_hasher: PasswordHasher):
        assert password_hasher.verify("s3cret", "not-a-bcrypt-hash") is False

    def test_rejects_password_over_72_bytes(self, password_hasher: PasswordHasher):
        with pytest.raises(InvalidInputError, match="72 bytes"):
            password_hasher.hash("x" * 73)

    def test_multibyte_password_counted_in_bytes(self, password_hasher: PasswordHasher):
        # 36 two-byte characters fit exactly, one more does not
        hashed = password_hasher.hash("\u00e9" * 36)

        assert password_hasher.verify("\u00e9" * 36, hashed) is True
        with pytest.raises(InvalidInputError):
            password_hasher.hash("\u00e9" * 37)

    def test_over_long_password_never_verifies(self, password_hasher: PasswordHasher):
        hashed = password_hasher.hash("x" * 72)

        assert password_hasher.verify("x" * 80, hashed) is False

    def test_cost_factor_from_config(self):
        hashed = PasswordHasher(SecurityConfig(bcrypt_rounds=5)).hash("pw")
        assert hashed.split("$")[2] == "05"
