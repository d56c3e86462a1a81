"""Input sanitization for free text that is stored and shown to other users."""

from typing import ClassVar

import nh3


class InputSanitizer:
    """Strip markup from user-entered text (team descriptions, messages)."""

    ALLOWED_TAGS: ClassVar[set[str]] = set()
    ALLOWED_ATTRIBUTES: ClassVar[dict[str, set[str]]] = {}

    @classmethod
    def sanitize_html(cls, value: str) -> str:
        """Remove all HTML tags with nh3 (strict by default).

        Args:
            value: Raw string that may contain HTML.

        Returns:
            Sanitized string safe for HTML display.
        """
        if not value:
            return value
        return nh3.clean(value, tags=cls.ALLOWED_TAGS, attributes=cls.ALLOWED_ATTRIBUTES)


def sanitize_text(value: str | None) -> str | None:
    """Sanitize and trim an optional free-text value."""
    if value is None:
        return None
    return InputSanitizer.sanitize_html(value).strip()
