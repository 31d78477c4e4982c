"""
Unit tests for HMAC signing and secret key decoding.
"""

import base64
import hashlib
import hmac
from unittest.mock import patch

import pytest

from tsa_client import AuthDigest, ConfigurationError, SigningFailure, decode_secret_key, sign

# Example key from the API documentation; dashes are not base64 and get stripped.
EXAMPLE_KEY = "EXAMPLE----TE8sTgg45yusumoN6BYsBVkh+yRJ5czgsnCehZaOYldPJdmFh6NeX8kunZ2zU1YWaUw/0wV6xfw=="
EXAMPLE_KEY_HEX = (
    "11700c3cb11313cb13820e39caeb2e9a837a058b0156487ec9127973382c9c27"
    "a165a39895d3c9766161e8d797f24ba7676cd4d5859a530ff4c15eb17f"
)


class TestDecodeSecretKey:
    """Test secret key decoding."""

    def test_decode_strips_non_alphabet_characters(self):
        """Dashes are dropped before decoding."""
        assert decode_secret_key(EXAMPLE_KEY) == bytes.fromhex(EXAMPLE_KEY_HEX)

    def test_decode_tolerates_whitespace(self):
        """Keys pasted with newlines or spaces decode to the same bytes."""
        raw = b"0123456789abcdef"
        encoded = base64.b64encode(raw).decode('ascii')
        messy = f"  {encoded[:8]}\n{encoded[8:]}\r\n"

        assert decode_secret_key(messy) == raw

    def test_decode_empty_key(self):
        """Empty key is rejected."""
        with pytest.raises(ConfigurationError):
            decode_secret_key("")

    def test_decode_only_invalid_characters(self):
        """Key with nothing left after stripping is rejected."""
        with pytest.raises(ConfigurationError):
            decode_secret_key("!!!!----####")

    def test_decode_bad_padding(self):
        """Truncated base64 is rejected."""
        with pytest.raises(ConfigurationError):
            decode_secret_key("abcde")

    @pytest.mark.parametrize("encoded,raw", [
        ("YWJjZA", b"abcd"),
        ("YWJjZA=", b"abcd"),
        ("YWJjZGU", b"abcde"),
        ("YWJj\nZA", b"abcd"),
    ])
    def test_decode_missing_padding(self, encoded, raw):
        """Unpadded keys are padded before decoding."""
        assert decode_secret_key(encoded) == raw

    def test_decode_is_stable(self):
        """Repeated decoding returns identical bytes."""
        assert decode_secret_key(EXAMPLE_KEY) == decode_secret_key(EXAMPLE_KEY)


class TestAuthDigest:
    """Test digest selection."""

    @pytest.mark.parametrize("value,expected", [
        ("SHA1", AuthDigest.SHA1),
        ("sha256", AuthDigest.SHA256),
        ("hmac-sha1", AuthDigest.SHA1),
        ("HMAC-SHA256", AuthDigest.SHA256),
        (AuthDigest.SHA256, AuthDigest.SHA256),
    ])
    def test_parse(self, value, expected):
        assert AuthDigest.parse(value) is expected

    @pytest.mark.parametrize("value", ["md5", "sha512", "", None, 256])
    def test_parse_unsupported(self, value):
        with pytest.raises(ConfigurationError):
            AuthDigest.parse(value)

    def test_ts_values(self):
        assert AuthDigest.SHA1.ts_value == "hmac-sha1"
        assert AuthDigest.SHA256.ts_value == "hmac-sha256"


class TestSign:
    """Test signature computation."""

    @pytest.fixture
    def key(self):
        return decode_secret_key(EXAMPLE_KEY)

    def test_sign_sha256(self, key):
        """Signature is base64 of HMAC-SHA256."""
        expected = base64.b64encode(
            hmac.new(key, b"string to sign", hashlib.sha256).digest()
        ).decode('ascii')

        signature = sign("string to sign", key, AuthDigest.SHA256)

        assert signature == expected
        assert len(base64.b64decode(signature)) == 32

    def test_sign_sha1(self, key):
        """Signature is base64 of HMAC-SHA1."""
        expected = base64.b64encode(
            hmac.new(key, b"string to sign", hashlib.sha1).digest()
        ).decode('ascii')

        assert sign("string to sign", key, "sha1") == expected

    def test_sign_encodes_utf8(self, key):
        """Non-ASCII text is signed as UTF-8."""
        expected = base64.b64encode(
            hmac.new(key, "café".encode('utf-8'), hashlib.sha256).digest()
        ).decode('ascii')

        assert sign("café", key) == expected

    def test_sign_deterministic(self, key):
        assert sign("abc", key) == sign("abc", key)

    def test_sign_unsupported_digest(self, key):
        with pytest.raises(ConfigurationError):
            sign("abc", key, "md5")

    def test_sign_primitive_failure(self, key):
        """Failures inside the HMAC primitive are wrapped."""
        with patch('tsa_client.signer.hmac.new', side_effect=ValueError("unsupported hash type")):
            with pytest.raises(SigningFailure) as exc_info:
                sign("abc", key)

        assert isinstance(exc_info.value.__cause__, ValueError)
