"""Security: Auth0 access token verification."""

from app.infrastructure.security.auth0 import Auth0TokenVerifier, AuthUser, JWKSClient

__all__ = [
    "Auth0TokenVerifier",
    "AuthUser",
    "JWKSClient",
]
