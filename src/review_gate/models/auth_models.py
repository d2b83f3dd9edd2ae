"""
Reviewer authorization models and GitHub permission payloads
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

WRITE_PERMISSIONS = frozenset({"admin", "write"})


class ReviewerAuth(BaseModel):
    """
    Server-verified authorization of a reviewer on a repository.

    Carries identity, a boolean permission summary and an audit timestamp.
    It never holds the credential used for the lookup.
    """

    model_config = ConfigDict(frozen=True)

    is_verified: bool = Field(False, description="Identity confirmed by the host")
    login: str = Field(..., description="Reviewer login")
    has_write_access: bool = Field(False, description="admin or write permission")
    verified_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the lookup completed",
    )

    @classmethod
    def unverified(cls, login: str) -> "ReviewerAuth":
        """Fail-secure result for any ambiguous or failed lookup"""
        return cls(is_verified=False, login=login, has_write_access=False)


class CollaboratorUser(BaseModel):
    """User section of the collaborator permission response"""

    login: str


class CollaboratorPermission(BaseModel):
    """GitHub ``/collaborators/{username}/permission`` response body"""

    permission: str
    user: CollaboratorUser


@dataclass(frozen=True)
class PermissionLookupSuccess:
    permission: str
    login: str


@dataclass(frozen=True)
class PermissionLookupNotFound:
    pass


@dataclass(frozen=True)
class PermissionLookupFailure:
    reason: str
    status_code: Optional[int] = None


PermissionLookupResult = Union[
    PermissionLookupSuccess, PermissionLookupNotFound, PermissionLookupFailure
]
