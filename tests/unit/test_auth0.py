"""Auth0 token verification against a mocked JWKS endpoint."""

import time

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwk, jwt

from app.domain.exceptions import AuthenticationException
from app.infrastructure.exceptions import IdentityProviderUnavailableException
from app.infrastructure.security import Auth0TokenVerifier, JWKSClient

ISSUER = "https://tenant.example.auth0.com/"
AUDIENCE = "https://dashboard-api"
JWKS_URL = f"{ISSUER}.well-known/jwks.json"


@pytest.fixture(scope="module")
def rsa_key() -> tuple[bytes, dict]:
    """Private PEM for signing and the matching public JWK (kid k1)."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo
    )
    public_jwk = jwk.construct(public_pem, "RS256").to_dict()
    public_jwk["kid"] = "k1"
    public_jwk["use"] = "sig"
    return private_pem, public_jwk


def _token(private_pem: bytes, kid: str = "k1", **overrides) -> str:
    now = int(time.time())
    claims = {
        "sub": "auth0|ada",
        "aud": AUDIENCE,
        "iss": ISSUER,
        "iat": now,
        "exp": now + 3600,
        "email": "Ada@Example.com",
        "https://dashboard/roles": ["admin"],
    }
    claims.update(overrides)
    return jwt.encode(claims, private_pem, algorithm="RS256", headers={"kid": kid})


def _verifier(jwks_handler, clock=time.monotonic) -> Auth0TokenVerifier:
    http = httpx.AsyncClient(transport=httpx.MockTransport(jwks_handler))
    jwks = JWKSClient(JWKS_URL, http_client=http, cache_seconds=600, clock=clock)
    return Auth0TokenVerifier(
        jwks,
        audience=AUDIENCE,
        issuer=ISSUER,
        algorithms=["RS256"],
        roles_claim="https://dashboard/roles",
    )


async def test_valid_token_maps_claims_to_user(rsa_key) -> None:
    private_pem, public_jwk = rsa_key
    verifier = _verifier(lambda request: httpx.Response(200, json={"keys": [public_jwk]}))
    user = await verifier.verify(_token(private_pem))
    assert user.sub == "auth0|ada"
    assert user.email == "ada@example.com"
    assert user.roles == ("admin",)
    assert user.has_any_role({"admin", "superadmin"})


async def test_expired_token_is_rejected(rsa_key) -> None:
    private_pem, public_jwk = rsa_key
    verifier = _verifier(lambda request: httpx.Response(200, json={"keys": [public_jwk]}))
    past = int(time.time()) - 7200
    with pytest.raises(AuthenticationException):
        await verifier.verify(_token(private_pem, iat=past, exp=past + 60))


async def test_wrong_audience_is_rejected(rsa_key) -> None:
    private_pem, public_jwk = rsa_key
    verifier = _verifier(lambda request: httpx.Response(200, json={"keys": [public_jwk]}))
    with pytest.raises(AuthenticationException):
        await verifier.verify(_token(private_pem, aud="https://other-api"))


async def test_malformed_token_is_rejected() -> None:
    verifier = _verifier(lambda request: httpx.Response(200, json={"keys": []}))
    with pytest.raises(AuthenticationException):
        await verifier.verify("not-a-jwt")


async def test_unknown_kid_refetches_once_then_rejects(rsa_key) -> None:
    private_pem, public_jwk = rsa_key
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"keys": [public_jwk]})

    verifier = _verifier(handler)
    with pytest.raises(AuthenticationException, match="unknown signing key"):
        await verifier.verify(_token(private_pem, kid="rotated"))
    assert len(calls) == 2


async def test_jwks_is_cached_until_expiry(rsa_key, clock) -> None:
    private_pem, public_jwk = rsa_key
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"keys": [public_jwk]})

    verifier = _verifier(handler, clock=clock)
    token = _token(private_pem)
    await verifier.verify(token)
    await verifier.verify(token)
    assert len(calls) == 1
    clock.advance(601)
    await verifier.verify(token)
    assert len(calls) == 2


async def test_jwks_outage_raises_identity_provider_unavailable(rsa_key) -> None:
    private_pem, _ = rsa_key
    verifier = _verifier(lambda request: httpx.Response(503))
    with pytest.raises(IdentityProviderUnavailableException):
        await verifier.verify(_token(private_pem))


def test_user_from_claims_accepts_single_role_string() -> None:
    verifier = _verifier(lambda request: httpx.Response(200, json={"keys": []}))
    user = verifier.user_from_claims({"sub": "auth0|x", "https://dashboard/roles": "admin"})
    assert user.roles == ("admin",)
    assert user.email is None
