"""
Signing schemes understood by the API.

Two incompatible schemes are supported:

* ``NonceScheme`` (current): HMAC-SHA256 over a fixed set of lines that
  includes a single-use ``x-ts-nonce``.
* ``LegacyHeaderScheme``: HMAC-SHA1 (or SHA256) over the method, date and
  every caller header starting with ``x-ts-``.

Each scheme turns a SigningContext into a string-to-sign and, given the
signature, into the headers to send. The scheme is bound to the context when
the context is built, so nothing downstream needs to know which one is in use.
"""

import abc
from typing import TYPE_CHECKING, Dict, Mapping, Optional, Union

from .constants import (
    AUTH_SCHEME,
    BODY_METHODS,
    CONTENT_TYPE_FORM,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_LENGTH,
    HEADER_CONTENT_TYPE,
    HEADER_DATE,
    HEADER_TS_AUTH_METHOD,
    HEADER_TS_DATE,
    HEADER_TS_NONCE,
    NONCE_AUTH_METHOD,
    SCHEME_LEGACY,
    SCHEME_NONCE,
    TS_HEADER_PREFIX,
)
from .exceptions import ConfigurationError
from .signer import AuthDigest

if TYPE_CHECKING:
    from .context import SigningContext


class SigningScheme(abc.ABC):
    """Canonicalization and header assembly for one signing scheme."""

    name: str = ""
    default_digest: AuthDigest = AuthDigest.SHA256
    uses_nonce: bool = False

    def select_digest(self, requested: Optional[Union[AuthDigest, str]]) -> AuthDigest:
        """Return the digest to sign with, falling back to the scheme default."""
        if requested is None:
            return self.default_digest
        return AuthDigest.parse(requested)

    @abc.abstractmethod
    def content_type_for(self, method: str, requested: Optional[str]) -> str:
        """Content type that is signed (and sent) for ``method``."""

    def prepare_headers(self, headers: Mapping[str, str], digest: AuthDigest) -> Dict[str, str]:
        """Caller headers as they will be stored on the context."""
        return dict(headers)

    def header_date(self, headers: Mapping[str, str]) -> Optional[str]:
        """Date carried in a caller header instead of the Date line, if any."""
        return None

    @abc.abstractmethod
    def canonicalize(self, context: "SigningContext") -> str:
        """Build the string-to-sign for ``context``."""

    @abc.abstractmethod
    def headers(self, context: "SigningContext", signature: str) -> Dict[str, str]:
        """Build the headers to attach to the request."""

    def authorization(self, context: "SigningContext", signature: str) -> str:
        return f"{AUTH_SCHEME} {context.customer_id}:{signature}"

    def __repr__(self):
        return f"<{type(self).__name__}>"


class NonceScheme(SigningScheme):
    """
    Current scheme: HMAC-SHA256 with a per-request nonce.

    String-to-sign lines, in order: method, content type, date,
    ``x-ts-auth-method:HMAC-SHA256``, ``x-ts-nonce:<nonce>``, the body (only
    when both content type and body are non-empty), resource path.

    The server accepts each (customer id, nonce) pair once. Never reuse a
    nonce passed in explicitly.
    """

    name = SCHEME_NONCE
    default_digest = AuthDigest.SHA256
    uses_nonce = True

    def select_digest(self, requested):
        digest = super().select_digest(requested)
        if digest is not AuthDigest.SHA256:
            raise ConfigurationError(
                f"{self.name} scheme only supports HMAC-SHA256, got {digest.name}"
            )
        return digest

    def content_type_for(self, method, requested):
        if method not in BODY_METHODS:
            return ""
        return requested or CONTENT_TYPE_FORM

    def canonicalize(self, context):
        lines = [
            context.http_method,
            context.content_type,
            context.timestamp,
            f"{HEADER_TS_AUTH_METHOD}:{NONCE_AUTH_METHOD}",
            f"{HEADER_TS_NONCE}:{context.nonce}",
        ]
        if context.content_type and context.body:
            lines.append(context.body)
        lines.append(context.resource_path)
        return "\n".join(lines)

    def headers(self, context, signature):
        return {
            HEADER_AUTHORIZATION: self.authorization(context, signature),
            HEADER_DATE: context.timestamp,
            HEADER_CONTENT_TYPE: context.content_type,
            HEADER_TS_AUTH_METHOD: NONCE_AUTH_METHOD,
            HEADER_TS_NONCE: context.nonce,
        }


class LegacyHeaderScheme(SigningScheme):
    """
    Legacy scheme: HMAC over the date and the caller's ``x-ts-*`` headers.

    String-to-sign lines, in order: method, content type (POST only), date
    (empty when the caller sends ``X-TS-Date``), every ``x-ts-*`` header as
    ``lowercased-name:value`` sorted by lowercased name, the body (POST only),
    resource path.
    """

    name = SCHEME_LEGACY
    default_digest = AuthDigest.SHA1

    def content_type_for(self, method, requested):
        if method != "POST":
            return ""
        if requested and requested != CONTENT_TYPE_FORM:
            raise ConfigurationError(
                f"{self.name} scheme only signs {CONTENT_TYPE_FORM} bodies, got {requested!r}"
            )
        return CONTENT_TYPE_FORM

    def prepare_headers(self, headers, digest):
        prepared = dict(headers)
        # SHA256 signing has to be announced so the server picks the same digest.
        if digest is AuthDigest.SHA256 and not any(
            key.lower() == HEADER_TS_AUTH_METHOD for key in prepared
        ):
            prepared[HEADER_TS_AUTH_METHOD] = digest.ts_value
        return prepared

    def header_date(self, headers):
        for key, value in headers.items():
            if key.lower() == HEADER_TS_DATE:
                return value
        return None

    def ts_headers(self, context: "SigningContext"):
        """Signed ``x-ts-*`` headers as (lowercased name, value), sorted by name."""
        signed = [
            (key.lower(), value)
            for key, value in context.scheme_headers.items()
            if key.lower().startswith(TS_HEADER_PREFIX)
        ]
        return sorted(signed, key=lambda item: item[0])

    def canonicalize(self, context):
        lines = [
            context.http_method,
            context.content_type,
            "" if context.date_in_header else context.timestamp,
        ]
        lines.extend(f"{key}:{value}" for key, value in self.ts_headers(context))
        if context.http_method == "POST":
            lines.append(context.body)
        lines.append(context.resource_path)
        return "\n".join(lines)

    def headers(self, context, signature):
        generated = {
            HEADER_AUTHORIZATION: self.authorization(context, signature),
            HEADER_DATE: context.timestamp,
        }
        if context.http_method == "POST":
            generated[HEADER_CONTENT_TYPE] = context.content_type
            generated[HEADER_CONTENT_LENGTH] = str(len(context.body.encode('utf-8')))

        # Header names are case-insensitive; a caller's "date" must not travel
        # alongside the generated "Date".
        replaced = {key.lower() for key in generated}
        headers = {
            key: value for key, value in context.scheme_headers.items()
            if key.lower() not in replaced
        }
        headers.update(generated)
        return headers


_SCHEMES = {
    SCHEME_NONCE: NonceScheme(),
    SCHEME_LEGACY: LegacyHeaderScheme(),
}


def get_scheme(scheme: Union[SigningScheme, str]) -> SigningScheme:
    """
    Resolve a scheme by name (``"nonce"`` or ``"legacy"``) or pass one through.

    Raises:
        ConfigurationError: If the scheme name is unknown
    """
    if isinstance(scheme, SigningScheme):
        return scheme
    try:
        return _SCHEMES[str(scheme).lower()]
    except KeyError:
        raise ConfigurationError(f"Unknown signing scheme: {scheme!r}") from None
