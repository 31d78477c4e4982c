"""
REST client that signs every request with TSA authentication headers.

This module is a thin adapter over requests: it serializes parameters,
builds a SigningContext, merges the generated headers and returns the
response as a TSAResponse. Authentication rejections come back as non-2xx
responses carrying the server's JSON error body; they are not raised.
"""

import json
import platform
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from urllib.parse import urlencode

import requests
import structlog

from .auth import generate_headers
from .constants import (
    BODY_METHODS,
    CONTENT_TYPE_JSON,
    DEFAULT_CONFIG,
    SCHEME_LEGACY,
    SCHEME_NONCE,
    SDK_VERSION,
)
from .context import SigningContext
from .exceptions import ConfigurationError, HTTPError
from .signer import AuthDigest, decode_secret_key

logger = structlog.get_logger(__name__)

USER_AGENT = "TSAClient/python-{} Python/{} Requests/{}".format(
    SDK_VERSION,
    platform.python_version(),
    requests.__version__,
)


@dataclass(frozen=True)
class ClientConfig:
    """Immutable transport and signing configuration for RestClient."""

    api_host: str = DEFAULT_CONFIG['api_host']
    connect_timeout: float = DEFAULT_CONFIG['connect_timeout']
    read_timeout: float = DEFAULT_CONFIG['read_timeout']
    proxies: Optional[Mapping[str, str]] = None
    scheme: str = DEFAULT_CONFIG['scheme']
    auth_digest: Optional[Union[AuthDigest, str]] = DEFAULT_CONFIG['auth_digest']

    @classmethod
    def from_options(cls, **options) -> "ClientConfig":
        """Merge keyword options over DEFAULT_CONFIG."""
        known = {f.name for f in fields(cls)}
        unknown = set(options) - known
        if unknown:
            raise ConfigurationError(f"Unknown config options: {', '.join(sorted(unknown))}")
        return cls(**{**DEFAULT_CONFIG, **options})

    @property
    def timeout(self) -> Tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)


@dataclass
class TSAResponse:
    """Plain view of an HTTP response."""

    status_code: int
    headers: Dict[str, str]
    body: str
    ok: bool
    json: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, response: requests.Response) -> "TSAResponse":
        body = response.text or ""
        try:
            parsed = json.loads(body)
        except ValueError:
            logger.warning("Response body is not JSON", status_code=response.status_code)
            parsed = {}
        if not isinstance(parsed, dict):
            parsed = {}

        return cls(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=body,
            ok=response.ok,
            json=parsed,
        )


class RestClient:
    """
    Generic client for the REST API.

    Every request is signed with either the nonce scheme (default) or the
    legacy header scheme, selected through ``ClientConfig.scheme``.
    """

    def __init__(self, customer_id: str, secret_key: str,
                 config: Optional[ClientConfig] = None, **options):
        """
        Initialize the client.

        Args:
            customer_id: Account customer id
            secret_key: Base64 encoded secret key
            config: Client configuration, defaults to DEFAULT_CONFIG
            **options: Overrides for individual config fields
                (api_host, connect_timeout, read_timeout, proxies, scheme,
                auth_digest)
        """
        self.customer_id = customer_id
        self.secret_key = secret_key

        if config is None:
            config = ClientConfig.from_options(**options)
        elif options:
            try:
                config = replace(config, **options)
            except TypeError as e:
                raise ConfigurationError(str(e)) from e
        self.config = config

        # Validate configuration
        self._validate_config()

        self.user_agent = USER_AGENT

        # Create HTTP session
        self.session = requests.Session()
        if self.config.proxies:
            self.session.proxies.update(self.config.proxies)

    def _validate_config(self):
        """Validate credentials and configuration before any request is made."""
        if not self.customer_id:
            raise ConfigurationError("customer_id cannot be empty")

        decode_secret_key(self.secret_key)

        if not self.config.api_host:
            raise ConfigurationError("api_host cannot be empty")

        if self.config.connect_timeout <= 0 or self.config.read_timeout <= 0:
            raise ConfigurationError("timeouts must be positive")

        if self.config.scheme not in (SCHEME_NONCE, SCHEME_LEGACY):
            raise ConfigurationError(f"Unknown signing scheme: {self.config.scheme!r}")

        if self.config.auth_digest is not None:
            AuthDigest.parse(self.config.auth_digest)

    def _prepare_request_body(self, method: str, params=None, json_data=None) -> Tuple[str, Optional[str]]:
        """
        Serialize the request body for signing.

        Returns:
            Tuple of (body, content_type); content_type is None when the
            scheme default applies
        """
        if method not in BODY_METHODS:
            return "", None
        if json_data is not None:
            return json.dumps(json_data, separators=(',', ':')), CONTENT_TYPE_JSON
        if params:
            return urlencode(params), None
        return "", None

    def _make_request(self, method: str, resource: str, params=None, json_data=None,
                      headers: Optional[Mapping[str, str]] = None) -> TSAResponse:
        """
        Make an authenticated HTTP request.

        Args:
            method: HTTP method
            resource: Resource path, e.g. ``/v1/phoneid/15555551234``
            params: Form fields for POST/PUT, query parameters for GET/DELETE
            json_data: JSON body for POST/PUT
            headers: Extra request headers

        Returns:
            TSAResponse for the request

        Raises:
            ConfigurationError: If the request cannot be signed
            HTTPError: If the request fails
        """
        method = (method or "").upper()
        body, content_type = self._prepare_request_body(method, params, json_data)

        context = SigningContext.build(
            customer_id=self.customer_id,
            secret_key=self.secret_key,
            http_method=method,
            resource_path=resource,
            body=body,
            content_type=content_type,
            headers=headers,
            auth_digest=self.config.auth_digest,
            scheme=self.config.scheme,
        )

        signed_headers = generate_headers(context, user_agent=self.user_agent)
        replaced = {key.lower() for key in signed_headers}
        request_headers = {
            key: value for key, value in (headers or {}).items()
            if key.lower() not in replaced
        }
        request_headers.update(signed_headers)

        kwargs = {
            'headers': request_headers,
            'timeout': self.config.timeout,
        }
        if context.http_method in BODY_METHODS:
            kwargs['data'] = body.encode('utf-8')
        elif params:
            kwargs['params'] = params

        url = self.config.api_host.rstrip('/') + resource
        logger.debug("Sending request", method=context.http_method, url=url)

        try:
            response = self.session.request(context.http_method, url, **kwargs)
        except requests.RequestException as e:
            logger.warning("HTTP request failed", method=context.http_method, url=url, error=str(e))
            raise HTTPError(f"HTTP request failed: {e}") from e

        return TSAResponse.from_response(response)

    def get(self, resource: str, params=None, **kwargs) -> TSAResponse:
        """Make authenticated GET request."""
        return self._make_request('GET', resource, params=params, **kwargs)

    def post(self, resource: str, params=None, json=None, **kwargs) -> TSAResponse:
        """Make authenticated POST request."""
        return self._make_request('POST', resource, params=params, json_data=json, **kwargs)

    def put(self, resource: str, params=None, json=None, **kwargs) -> TSAResponse:
        """Make authenticated PUT request."""
        return self._make_request('PUT', resource, params=params, json_data=json, **kwargs)

    def delete(self, resource: str, params=None, **kwargs) -> TSAResponse:
        """Make authenticated DELETE request."""
        return self._make_request('DELETE', resource, params=params, **kwargs)

    def close(self):
        """Close HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
