"""
Custom exceptions for the TSA client library.
"""


class TSAClientError(Exception):
    """Base exception for TSA client errors."""
    pass


class ConfigurationError(TSAClientError):
    """Raised when credentials, signing inputs or client configuration are invalid."""
    pass


class SigningFailure(TSAClientError):
    """Raised when the HMAC primitive cannot produce a signature."""
    pass


class HTTPError(TSAClientError):
    """Raised when the HTTP request cannot be completed."""
    pass
