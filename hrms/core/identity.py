"""Identity lookup used by the authentication collaborator.

The store turns a verified user id into a Principal. Inactive or unknown
users resolve to None, which the API reports as unauthenticated.
"""

from dataclasses import dataclass
from threading import Lock
from typing import Dict, Iterable, Optional, Protocol

from hrms.core.rbac.principal import Principal


class IdentityStore(Protocol):
    """Resolves a user id to the principal for the current request."""

    def get_principal(self, user_id: str) -> Optional[Principal]:
        ...


@dataclass
class UserRecord:
    user_id: str
    company_id: Optional[str]
    role_name: str
    permissions: Optional[Iterable[str]] = None
    is_active: bool = True


class InMemoryIdentityStore:
    """Dictionary-backed identity store.

    A fresh Principal is built on every lookup, so role changes show up on
    the next request.
    """

    def __init__(self, users: Iterable[UserRecord] = ()):
        self._users: Dict[str, UserRecord] = {}
        self._lock = Lock()
        for user in users:
            self.add(user)

    def add(self, user: UserRecord) -> None:
        with self._lock:
            self._users[str(user.user_id)] = user

    def get_principal(self, user_id: str) -> Optional[Principal]:
        with self._lock:
            user = self._users.get(str(user_id))
        if user is None or not user.is_active:
            return None
        return Principal.create(
            user_id=user.user_id,
            company_id=user.company_id,
            role_name=user.role_name,
            permissions=user.permissions,
        )
