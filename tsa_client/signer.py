"""
HMAC signature generation for TSA-authenticated requests.

The secret key is shared as base64 text; it is decoded to raw bytes and used
as the HMAC key over the UTF-8 bytes of the string-to-sign. The resulting
MAC is base64 encoded with the standard alphabet.
"""

import base64
import binascii
import hashlib
import hmac
import re
from enum import Enum
from typing import Union

from .exceptions import ConfigurationError, SigningFailure

# Anything outside the standard base64 alphabet (padding included) is discarded
# before decoding; padding is then restored from the length.
_NON_BASE64_CHARS = re.compile(r"[^A-Za-z0-9+/]")


class AuthDigest(Enum):
    """HMAC digest algorithms accepted by the API."""

    SHA1 = ("sha1", "hmac-sha1")
    SHA256 = ("sha256", "hmac-sha256")

    def __init__(self, hash_name: str, ts_value: str):
        self.hash_name = hash_name
        self.ts_value = ts_value

    @property
    def digestmod(self):
        """hashlib constructor for this digest."""
        return getattr(hashlib, self.hash_name)

    @classmethod
    def parse(cls, value: Union["AuthDigest", str]) -> "AuthDigest":
        """
        Resolve a digest from an enum member or a name.

        Accepts ``"SHA256"``, ``"sha256"``, ``"hmac-sha256"`` and the
        equivalent SHA1 spellings.

        Raises:
            ConfigurationError: If the digest is not supported
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().lower()
            if name.startswith('hmac-'):
                name = name[len('hmac-'):]
            for member in cls:
                if member.hash_name == name:
                    return member
        raise ConfigurationError(f"Unsupported auth digest: {value!r}")


def decode_secret_key(secret_key: str) -> bytes:
    """
    Decode a base64 secret key into raw HMAC key bytes.

    Args:
        secret_key: Base64 encoded key; characters outside the base64
            alphabet are stripped first

    Returns:
        Raw key bytes

    Raises:
        ConfigurationError: If the key is empty or not valid base64
    """
    if not secret_key:
        raise ConfigurationError("secret_key cannot be empty")

    cleaned = _NON_BASE64_CHARS.sub('', secret_key)
    if len(cleaned) % 4 == 1:
        raise ConfigurationError("secret_key is not valid base64: truncated data")
    cleaned += '=' * (-len(cleaned) % 4)
    try:
        key = base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ConfigurationError(f"secret_key is not valid base64: {e}") from e

    if not key:
        raise ConfigurationError("secret_key contains no base64 data")
    return key


def sign(string_to_sign: str, key: bytes, digest: Union[AuthDigest, str] = AuthDigest.SHA256) -> str:
    """
    Compute base64(HMAC(key, string_to_sign)).

    Args:
        string_to_sign: Canonical request string
        key: Raw key bytes (see decode_secret_key)
        digest: Digest algorithm to use

    Returns:
        Base64 encoded signature

    Raises:
        ConfigurationError: If the digest is not supported
        SigningFailure: If the HMAC primitive is unavailable
    """
    digest = AuthDigest.parse(digest)

    try:
        mac = hmac.new(key, string_to_sign.encode('utf-8'), digest.digestmod)
    except (AttributeError, TypeError, ValueError) as e:
        raise SigningFailure(f"Failed to generate HMAC-{digest.name}: {e}") from e

    return base64.b64encode(mac.digest()).decode('ascii')
