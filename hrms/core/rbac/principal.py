"""Per-request value objects of the authorization core."""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple, Union

from .errors import AccessError, DenialReason
from .permissions import Module


@dataclass(frozen=True)
class Principal:
    """Authenticated identity making a request.

    Built once per request by the authentication collaborator and discarded
    with the response. ``explicit_permissions`` is None when the role's
    permissions were not loaded.
    """

    user_id: str
    company_id: Optional[str]
    role_name: str
    explicit_permissions: Optional[FrozenSet[str]] = None

    @classmethod
    def create(
        cls,
        user_id,
        company_id,
        role_name: str,
        permissions=None,
    ) -> "Principal":
        """Build a principal, normalizing ids to strings and permissions to a frozenset."""
        return cls(
            user_id=str(user_id),
            company_id=str(company_id) if company_id is not None else None,
            role_name=role_name,
            explicit_permissions=frozenset(permissions) if permissions is not None else None,
        )


@dataclass(frozen=True)
class AccessRequirement:
    """Route-level description of the checks a protected operation runs.

    All configured checks must pass. The module is static route
    configuration, never taken from the request.
    """

    module: Optional[Union[Module, str]] = None
    enforce_read_only: bool = False
    global_setup: bool = False
    permissions: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Decision:
    """Outcome of evaluating an access requirement."""

    allow: bool
    reason: Optional[DenialReason] = None
    message: Optional[str] = None
    status_code: int = 200

    @classmethod
    def allowed(cls) -> "Decision":
        return cls(allow=True)

    @classmethod
    def denied(cls, error: AccessError) -> "Decision":
        return cls(
            allow=False,
            reason=error.reason,
            message=error.message,
            status_code=error.status_code,
        )
