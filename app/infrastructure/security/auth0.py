"""Auth0 access token verification (RS256 against the tenant's JWKS).

Signing keys are fetched from https://<domain>/.well-known/jwks.json and
cached; an unknown kid triggers one refetch so key rotation needs no restart.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx
from jose import JWTError, jwt

from app.core.config import Settings
from app.domain.exceptions import AuthenticationException
from app.infrastructure.exceptions import IdentityProviderUnavailableException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthUser:
    """Verified caller identity taken from access token claims."""

    sub: str
    email: str | None = None
    name: str | None = None
    roles: tuple[str, ...] = field(default_factory=tuple)

    def has_any_role(self, roles: frozenset[str] | set[str]) -> bool:
        return any(role in roles for role in self.roles)


class JWKSClient:
    """Fetches and caches the tenant's JSON Web Key Set."""

    def __init__(
        self,
        jwks_url: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        cache_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
        timeout: float = 10.0,
    ) -> None:
        self.jwks_url = jwks_url
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None
        self._cache_seconds = cache_seconds
        self._clock = clock
        self._keys: list[dict[str, Any]] = []
        self._expires_at = 0.0

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def get_keys(self, *, force: bool = False) -> list[dict[str, Any]]:
        """Return cached keys, refetching when expired or forced.

        Raises:
            IdentityProviderUnavailableException: JWKS endpoint unreachable or malformed.
        """
        if not force and self._keys and self._clock() < self._expires_at:
            return self._keys
        try:
            resp = await self._http.get(self.jwks_url)
            resp.raise_for_status()
            keys = resp.json().get("keys")
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to fetch JWKS from %s: %s", self.jwks_url, e)
            raise IdentityProviderUnavailableException(str(e)) from e
        if not isinstance(keys, list):
            raise IdentityProviderUnavailableException("JWKS response has no keys")
        self._keys = keys
        self._expires_at = self._clock() + self._cache_seconds
        return self._keys

    async def get_signing_key(self, kid: str) -> dict[str, Any] | None:
        for refresh in (False, True):
            for key in await self.get_keys(force=refresh):
                if key.get("kid") == kid:
                    return key
        return None


class Auth0TokenVerifier:
    """Verifies Auth0 access tokens and maps claims to AuthUser."""

    def __init__(
        self,
        jwks: JWKSClient,
        *,
        audience: str,
        issuer: str,
        algorithms: list[str],
        email_claim: str = "email",
        roles_claim: str = "roles",
    ) -> None:
        self.jwks = jwks
        self.audience = audience
        self.issuer = issuer
        self.algorithms = algorithms
        self.email_claim = email_claim
        self.roles_claim = roles_claim

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> "Auth0TokenVerifier":
        issuer = settings.auth0_issuer
        jwks = JWKSClient(
            f"{issuer}.well-known/jwks.json",
            http_client=http_client,
            cache_seconds=settings.auth0_jwks_cache_seconds,
        )
        return cls(
            jwks,
            audience=settings.auth0_audience,
            issuer=issuer,
            algorithms=[a.strip() for a in settings.auth0_algorithms.split(",") if a.strip()],
            email_claim=settings.auth0_email_claim,
            roles_claim=settings.roles_claim,
        )

    async def aclose(self) -> None:
        await self.jwks.aclose()

    async def verify(self, token: str) -> AuthUser:
        """Verify signature, audience, issuer and expiry; return the caller.

        Raises:
            AuthenticationException: Token malformed, expired or not for this API.
            IdentityProviderUnavailableException: Signing keys unavailable.
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise AuthenticationException("Invalid token") from e
        kid = header.get("kid")
        if not kid:
            raise AuthenticationException("Invalid token: missing key id")
        key = await self.jwks.get_signing_key(kid)
        if key is None:
            raise AuthenticationException("Invalid token: unknown signing key")
        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={"require_exp": True, "require_sub": True},
            )
        except JWTError as e:
            logger.info("Rejected access token: %s", e)
            raise AuthenticationException(f"Invalid token: {e!s}") from e
        return self.user_from_claims(claims)

    def user_from_claims(self, claims: dict[str, Any]) -> AuthUser:
        email = claims.get("email") or claims.get(self.email_claim)
        roles = claims.get(self.roles_claim) or []
        if isinstance(roles, str):
            roles = [roles]
        return AuthUser(
            sub=claims["sub"],
            email=email.strip().lower() if isinstance(email, str) and email.strip() else None,
            name=claims.get("name"),
            roles=tuple(r for r in roles if isinstance(r, str)),
        )
