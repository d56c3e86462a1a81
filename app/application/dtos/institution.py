"""DTOs for institutions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Institution:
    """Institution read-model; domains are lower-cased email domains."""

    id: str
    name: str
    short_name: str
    domains: list[str]
    aliases: list[str]
    state: str
    type: str
