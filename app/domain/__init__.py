"""Domain layer: exceptions shared by application and infrastructure.

No dependencies on infrastructure or presentation.
"""

from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DashboardException,
    InsufficientPointsException,
    ResourceNotFoundException,
    TableNotConfiguredException,
    ValidationException,
    WorkflowFailedException,
)

__all__ = [
    "AuthenticationException",
    "AuthorizationException",
    "DashboardException",
    "InsufficientPointsException",
    "ResourceNotFoundException",
    "TableNotConfiguredException",
    "ValidationException",
    "WorkflowFailedException",
]
