"""Bearer token authentication and the per-route authentication gate."""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any

import jwt
from aiohttp import web

from http_event_source.config import JwtSettings
from http_event_source.errors import ConfigurationError
from http_event_source.logging import get_logger

logger = get_logger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

USER_KEY = web.RequestKey("user", dict)

HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]
ASYMMETRIC_ALGORITHMS = [
    "RS256", "RS384", "RS512",
    "PS256", "PS384", "PS512",
    "ES256", "ES384", "ES512",
]


def is_pem_key(key: str) -> bool:
    return key.lstrip().startswith("-----BEGIN")


def resolve_algorithms(settings: JwtSettings) -> list[str]:
    """
    Pick the accepted algorithms for the configured key.

    PEM keys verify RSA, RSA-PSS and EC signatures; anything else is an HMAC
    secret.

    Raises:
        ConfigurationError: If an HMAC algorithm is configured with a PEM key
    """
    pem = is_pem_key(settings.secret_or_key)
    if settings.algorithms is None:
        return list(ASYMMETRIC_ALGORITHMS if pem else HMAC_ALGORITHMS)

    if pem and any(algorithm.upper().startswith("HS") for algorithm in settings.algorithms):
        raise ConfigurationError("HMAC algorithms cannot be used with a PEM encoded key")
    return list(settings.algorithms)


class BearerTokenAuthenticator:
    """Verifies ``Authorization: Bearer <jwt>`` headers with PyJWT."""

    def __init__(self, settings: JwtSettings):
        self._key = settings.secret_or_key
        self._algorithms = resolve_algorithms(settings)
        self._audience = settings.audience
        self._issuer = settings.issuer
        # 'sub' may be any JSON value, not only a string.
        self._options = {
            "verify_exp": not settings.ignore_expiration,
            "verify_aud": settings.audience is not None,
            "verify_sub": False,
        }

        if settings.ignore_expiration:
            logger.warning("JWT expiration checking is disabled; expired tokens will be accepted")

    @property
    def algorithms(self) -> list[str]:
        return list(self._algorithms)

    @staticmethod
    def extract_token(request: web.Request) -> str | None:
        """Return the bearer token from the Authorization header, if any."""
        parts = request.headers.get("Authorization", "").split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            return None
        return parts[1]

    def verify(self, token: str) -> dict[str, Any]:
        """
        Decode and verify a token.

        Raises:
            jwt.PyJWTError: If the token is malformed, signed with another key or
                algorithm, or its audience or issuer do not match
        """
        return jwt.decode(
            token,
            self._key,
            algorithms=self._algorithms,
            audience=self._audience,
            issuer=self._issuer,
            options=self._options,
        )

    def authenticate(self, request: web.Request) -> dict[str, Any]:
        """Return the verified claims or answer the request with 401."""
        token = self.extract_token(request)
        if token is None:
            logger.debug(f"No bearer token on {request.method} {request.path}")
            raise web.HTTPUnauthorized(headers={"WWW-Authenticate": "Bearer"})

        try:
            return self.verify(token)
        except jwt.PyJWTError as exc:
            logger.debug(f"Rejected bearer token on {request.method} {request.path}: {exc}")
            raise web.HTTPUnauthorized(
                headers={"WWW-Authenticate": 'Bearer error="invalid_token"'}
            ) from exc


def authn_gate(
    authn: bool, authenticator: BearerTokenAuthenticator | None
) -> Callable[[Handler], Handler]:
    """
    Build the decorator that guards one route.

    The decision is taken here, once per route. Requests on a guarded route
    carry the verified claims under ``request[USER_KEY]``.

    Raises:
        ConfigurationError: If authentication is required but no JWT settings exist
    """
    if authn and authenticator is None:
        raise ConfigurationError(
            "Route requires authentication but the event source has no 'jwt' settings"
        )

    def decorator(handler: Handler) -> Handler:
        if not authn:
            return handler

        @wraps(handler)
        async def gated(request: web.Request) -> web.StreamResponse:
            request[USER_KEY] = authenticator.authenticate(request)
            return await handler(request)

        return gated

    return decorator
