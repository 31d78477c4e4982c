"""
Authentication header generation.

``generate_headers`` is the whole signing pipeline: canonicalize the context
with its scheme, HMAC the result with the decoded secret key and assemble the
headers to send. It is a pure function of its input and safe to call from any
number of threads.
"""

from typing import Dict, Mapping, Optional, Union

import structlog

from .constants import HEADER_USER_AGENT, SCHEME_NONCE
from .context import SigningContext
from .schemes import SigningScheme
from .signer import AuthDigest, decode_secret_key, sign

logger = structlog.get_logger(__name__)


def string_to_sign(context: SigningContext) -> str:
    """Canonical string the server recomputes for ``context``."""
    return context.scheme.canonicalize(context)


def compute_signature(context: SigningContext) -> str:
    """Base64 HMAC signature for ``context``."""
    key = decode_secret_key(context.secret_key)
    return sign(string_to_sign(context), key, context.auth_digest)


def generate_headers(context: SigningContext, user_agent: Optional[str] = None) -> Dict[str, str]:
    """
    Generate the headers that authenticate a request.

    Args:
        context: Signing inputs for this request
        user_agent: Optional User-Agent value (never signed)

    Returns:
        Ordered mapping of header name to value

    Raises:
        ConfigurationError: If the key or digest is invalid
        SigningFailure: If the HMAC primitive fails
    """
    canonical = string_to_sign(context)
    signature = sign(canonical, decode_secret_key(context.secret_key), context.auth_digest)

    logger.debug(
        "Signed request",
        scheme=context.scheme.name,
        method=context.http_method,
        resource=context.resource_path,
        digest=context.auth_digest.name,
        string_to_sign_length=len(canonical),
    )

    headers = context.scheme.headers(context, signature)
    if user_agent:
        headers[HEADER_USER_AGENT] = user_agent
    return headers


def sign_request(
    customer_id: str,
    secret_key: str,
    method: str,
    resource: str,
    body: str = "",
    *,
    content_type: Optional[str] = None,
    timestamp: Optional[str] = None,
    nonce: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
    auth_digest: Optional[Union[AuthDigest, str]] = None,
    scheme: Union[SigningScheme, str] = SCHEME_NONCE,
    user_agent: Optional[str] = None,
) -> Dict[str, str]:
    """
    Build a SigningContext from keyword arguments and generate its headers.

    Example:
        headers = sign_request(customer_id, secret_key, "POST", "/v1/messaging",
                               "phone_number=15555551234&message=hi")
    """
    context = SigningContext.build(
        customer_id=customer_id,
        secret_key=secret_key,
        http_method=method,
        resource_path=resource,
        body=body,
        content_type=content_type,
        timestamp=timestamp,
        nonce=nonce,
        headers=headers,
        auth_digest=auth_digest,
        scheme=scheme,
    )
    return generate_headers(context, user_agent=user_agent)
