"""Tests for client ID generation."""

import secrets
from unittest.mock import patch

import pytest

from shopsense.tracking.identifiers import generate_uuid, is_uuid4, uuid_from_bytes


class TestUuidFromBytes:
    def test_zero_bytes(self):
        """Version and variant bits are forced on any input."""
        assert uuid_from_bytes(bytes(16)) == "00000000-0000-4000-8000-000000000000"

    def test_all_ones(self):
        assert uuid_from_bytes(b"\xff" * 16) == "ffffffff-ffff-4fff-bfff-ffffffffffff"

    def test_wrong_length(self):
        with pytest.raises(ValueError, match="expected 16 bytes"):
            uuid_from_bytes(b"\x00" * 15)


class TestGenerateUuid:
    def test_shape(self):
        value = generate_uuid()
        assert len(value) == 36
        assert value[14] == "4"
        assert value[19] in "89ab"
        assert is_uuid4(value)

    def test_unique(self):
        values = {generate_uuid() for _ in range(1000)}
        assert len(values) == 1000

    def test_falls_back_when_secure_source_unavailable(self, caplog):
        """GIVEN no secure random source WHEN generating SHOULD still return a v4 UUID."""
        with patch.object(secrets, "token_bytes", side_effect=NotImplementedError("no urandom")):
            value = generate_uuid()

        assert is_uuid4(value)
        assert "fallback" in caplog.text


class TestIsUuid4:
    @pytest.mark.parametrize(
        "value",
        [None, "", "111.222", "00000000-0000-1000-8000-000000000000", "not-a-uuid"],
    )
    def test_rejects(self, value):
        assert not is_uuid4(value)
