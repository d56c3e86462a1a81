"""Collision-resistant ids for uploaded file keys."""

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """New CUID2 string; lowercase alphanumerics, safe inside storage keys."""
    return cuid_generator()
