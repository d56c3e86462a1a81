"""Cache key builders. Single place for key format.

Keys are <prefix>:<component>:...; every key of an entity type starts with
its prefix so writes can invalidate the type with delete_prefix(). Key
components must not contain CACHE_KEY_SEP to avoid colliding keys.
"""

from app.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_PROFILE
from app.domain.exceptions import ValidationException


def _validate_key_component(value: str, name: str) -> None:
    """Reject empty components and components containing CACHE_KEY_SEP.

    Components are usually record ids taken from the request path, so a bad
    one is a client error.

    Raises:
        ValidationException: If value is empty or contains CACHE_KEY_SEP.
    """
    if not value:
        raise ValidationException(f"Identifier {name!r} must not be empty", field=name)
    if CACHE_KEY_SEP in value:
        raise ValidationException(
            f"Identifier {name!r} must not contain {CACHE_KEY_SEP!r}", field=name
        )


def build_key(prefix: str, *components: str | int) -> str:
    """Cache key for prefix plus components (ints are formatted as text)."""
    parts = [prefix]
    for i, component in enumerate(components):
        text = str(component)
        _validate_key_component(text, f"component[{i}]")
        parts.append(text)
    return CACHE_KEY_SEP.join(parts)


def prefix_of(prefix: str) -> str:
    """Invalidation prefix covering every key built from prefix."""
    return f"{prefix}{CACHE_KEY_SEP}"


def profile_email_key(email: str) -> str:
    """Cache key for a profile looked up by (case-insensitive) email."""
    return build_key(CACHE_PREFIX_PROFILE, "email", email.strip().lower())


def profile_auth0_key(auth0_id: str) -> str:
    """Cache key for a profile looked up by Auth0 subject."""
    return build_key(CACHE_PREFIX_PROFILE, "auth0", auth0_id)
