"""
Per-request signing inputs.

A SigningContext is built once per outbound request, used to compute the
authentication headers and then discarded.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Union

from .clock import new_nonce, rfc2616_date
from .constants import HTTP_METHODS, SCHEME_NONCE
from .exceptions import ConfigurationError
from .schemes import SigningScheme, get_scheme
from .signer import AuthDigest, decode_secret_key


@dataclass(frozen=True)
class SigningContext:
    """
    Everything needed to sign one request.

    Use ``SigningContext.build()`` rather than the constructor: it validates
    the inputs and fills in the timestamp, nonce, content type and digest
    that the selected scheme expects.

    Attributes:
        customer_id: Account identifier sent in the Authorization header
        secret_key: Base64 shared secret, never transmitted
        http_method: Upper-case HTTP method
        resource_path: Request path without host or query string
        content_type: Signed content type ('' for methods without a body)
        body: Serialized request body exactly as sent on the wire
        timestamp: RFC 2616 date
        nonce: Single-use token (None for the legacy scheme)
        scheme_headers: Caller headers (legacy scheme signs the x-ts-* ones)
        auth_digest: HMAC digest
        scheme: Signing scheme bound to this context
        date_in_header: True when the date travels in X-TS-Date
    """

    customer_id: str
    secret_key: str = field(repr=False)
    http_method: str
    resource_path: str
    content_type: str
    body: str
    timestamp: str
    nonce: Optional[str]
    scheme_headers: Mapping[str, str]
    auth_digest: AuthDigest
    scheme: SigningScheme
    date_in_header: bool = False

    @classmethod
    def build(
        cls,
        customer_id: str,
        secret_key: str,
        http_method: str,
        resource_path: str,
        body: str = "",
        content_type: Optional[str] = None,
        timestamp: Optional[str] = None,
        nonce: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        auth_digest: Optional[Union[AuthDigest, str]] = None,
        scheme: Union[SigningScheme, str] = SCHEME_NONCE,
    ) -> "SigningContext":
        """
        Validate inputs and build an immutable context.

        Args:
            customer_id: Account identifier
            secret_key: Base64 encoded secret key
            http_method: GET, POST, PUT or DELETE (any case)
            resource_path: Request path, e.g. ``/v1/phoneid/15555551234``
            body: Serialized body for POST/PUT (ignored for signing otherwise)
            content_type: Body content type; defaults to form encoding for
                methods that carry a body
            timestamp: RFC 2616 date override, generated when omitted
            nonce: Nonce override for the nonce scheme, generated when
                omitted. Must never be reused.
            headers: Extra request headers (legacy scheme signs x-ts-* ones)
            auth_digest: Digest override (legacy scheme only may use SHA1)
            scheme: ``"nonce"``, ``"legacy"`` or a SigningScheme instance

        Raises:
            ConfigurationError: If any input is invalid
        """
        scheme = get_scheme(scheme)

        if not customer_id:
            raise ConfigurationError("customer_id cannot be empty")
        decode_secret_key(secret_key)

        if not http_method:
            raise ConfigurationError("http_method cannot be empty")
        method = http_method.upper()
        if method not in HTTP_METHODS:
            raise ConfigurationError(f"Unsupported HTTP method: {http_method!r}")

        if not resource_path:
            raise ConfigurationError("resource_path cannot be empty")

        digest = scheme.select_digest(auth_digest)
        prepared = scheme.prepare_headers(headers or {}, digest)

        header_date = scheme.header_date(prepared)
        if header_date is not None:
            timestamp = header_date
        elif timestamp is None:
            timestamp = rfc2616_date()

        if scheme.uses_nonce:
            if nonce is None:
                nonce = new_nonce()
            elif not nonce:
                raise ConfigurationError("nonce cannot be empty")
        else:
            nonce = None

        return cls(
            customer_id=customer_id,
            secret_key=secret_key,
            http_method=method,
            resource_path=resource_path,
            content_type=scheme.content_type_for(method, content_type),
            body=body or "",
            timestamp=timestamp,
            nonce=nonce,
            scheme_headers=MappingProxyType(prepared),
            auth_digest=digest,
            scheme=scheme,
            date_in_header=header_date is not None,
        )
