"""DTOs for programs (initiatives) and majors."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Program:
    """Program/initiative read-model."""

    id: str
    name: str
    description: str
    participation_type: str
    status: str

    @property
    def is_team_based(self) -> bool:
        return self.participation_type.strip().lower() in ("team", "teams")


@dataclass(frozen=True)
class Major:
    """Major (degree program) offered for education records."""

    id: str
    name: str
