"""
Constants for the TSA request-signing client.
Header names and defaults expected by the REST API authentication layer.
"""

SDK_VERSION = "1.0.0"

# Authorization scheme token ("Authorization: TSA <customer_id>:<signature>")
AUTH_SCHEME = "TSA"

# HTTP Headers
HEADER_AUTHORIZATION = "Authorization"
HEADER_DATE = "Date"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_CONTENT_LENGTH = "Content-Length"
HEADER_USER_AGENT = "User-Agent"
HEADER_TS_AUTH_METHOD = "x-ts-auth-method"
HEADER_TS_NONCE = "x-ts-nonce"
HEADER_TS_DATE = "x-ts-date"

# Caller headers starting with this prefix (case-insensitive) are signed
TS_HEADER_PREFIX = "x-ts-"

# Value of x-ts-auth-method in the nonce scheme
NONCE_AUTH_METHOD = "HMAC-SHA256"

# Content types
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"
CONTENT_TYPE_JSON = "application/json"

# Methods accepted by the signing layer
HTTP_METHODS = ("GET", "POST", "PUT", "DELETE")
BODY_METHODS = ("POST", "PUT")

# Signing schemes
SCHEME_NONCE = "nonce"
SCHEME_LEGACY = "legacy"

DEFAULT_API_HOST = "https://rest-api.telesign.com"

# Default client configuration values
DEFAULT_CONFIG = {
    'api_host': DEFAULT_API_HOST,
    'connect_timeout': 10,      # seconds
    'read_timeout': 10,         # seconds
    'proxies': None,
    'scheme': SCHEME_NONCE,
    'auth_digest': None,        # None selects the scheme's default digest
}
