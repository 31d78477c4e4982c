"""
TSA Client Library

A Python client library that signs REST API requests with TSA
authentication headers, using either the nonce (HMAC-SHA256) scheme or the
legacy x-ts header scheme.

Example usage:
    from tsa_client import RestClient

    client = RestClient("your-customer-id", "your-base64-secret-key")
    response = client.post("/v1/messaging", {"phone_number": "15555551234",
                                             "message": "hello",
                                             "message_type": "ARN"})
"""

from .auth import compute_signature, generate_headers, sign_request, string_to_sign
from .client import ClientConfig, RestClient, TSAResponse
from .clock import new_nonce, rfc2616_date
from .constants import (
    DEFAULT_CONFIG,
    HEADER_TS_AUTH_METHOD,
    HEADER_TS_NONCE,
    SCHEME_LEGACY,
    SCHEME_NONCE,
    SDK_VERSION,
)
from .context import SigningContext
from .exceptions import (
    TSAClientError,
    ConfigurationError,
    SigningFailure,
    HTTPError
)
from .schemes import LegacyHeaderScheme, NonceScheme, SigningScheme, get_scheme
from .signer import AuthDigest, decode_secret_key, sign

__version__ = SDK_VERSION
__all__ = [
    "RestClient",
    "ClientConfig",
    "TSAResponse",
    "SigningContext",
    "SigningScheme",
    "NonceScheme",
    "LegacyHeaderScheme",
    "get_scheme",
    "AuthDigest",
    "decode_secret_key",
    "sign",
    "string_to_sign",
    "compute_signature",
    "generate_headers",
    "sign_request",
    "rfc2616_date",
    "new_nonce",
    "TSAClientError",
    "ConfigurationError",
    "SigningFailure",
    "HTTPError",
    "DEFAULT_CONFIG",
    "HEADER_TS_AUTH_METHOD",
    "HEADER_TS_NONCE",
    "SCHEME_NONCE",
    "SCHEME_LEGACY",
]
