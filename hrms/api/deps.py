from typing import Callable, Optional, Union

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from hrms.core.config import Settings
from hrms.core.identity import IdentityStore
from hrms.core.rbac import AccessChecker, AccessRequirement, Module, Principal, Unauthenticated
from hrms.core.security import decode_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_settings_state(request: Request) -> Settings:
    return request.app.state.settings


def get_identity_store(request: Request) -> IdentityStore:
    return request.app.state.identity_store


def get_access_checker(request: Request) -> AccessChecker:
    return request.app.state.access_checker


def get_optional_principal(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings_state),
    store: IdentityStore = Depends(get_identity_store),
) -> Optional[Principal]:
    """Resolve the bearer token to a principal, or None.

    The failure message is left on ``request.state.auth_failure`` so the
    guard can report why authentication failed.
    """
    if not token:
        request.state.auth_failure = "No token provided"
        return None

    user_id = decode_token(token, settings)
    if user_id is None:
        request.state.auth_failure = "Invalid token"
        return None

    principal = store.get_principal(user_id)
    if principal is None:
        request.state.auth_failure = "User not found or inactive"
        return None

    request.state.principal = principal
    return principal


def require_access(
    module: Optional[Union[Module, str]] = None,
    *,
    read_only: bool = False,
    global_setup: bool = False,
    permissions: tuple = (),
) -> Callable[..., Principal]:
    """
    Dependency factory protecting a route.

    Args:
        module: Module the route belongs to (static route configuration)
        read_only: Block writes from the read-only Auditor role
        global_setup: Restrict the route to Super Admin
        permissions: Named permissions that must all be held

    Usage:
        @router.post("/payroll/run")
        def run_payroll(
            principal: Principal = Depends(
                require_access(Module.PAYROLL, read_only=True, permissions=("manage_payroll",))
            ),
        ):
            ...
    """
    if isinstance(permissions, str):
        permissions = (permissions,)
    requirement = AccessRequirement(
        module=module,
        enforce_read_only=read_only,
        global_setup=global_setup,
        permissions=tuple(permissions),
    )

    def guard(
        request: Request,
        principal: Optional[Principal] = Depends(get_optional_principal),
        checker: AccessChecker = Depends(get_access_checker),
    ) -> Principal:
        try:
            return checker.evaluate(principal, requirement, request.method)
        except Unauthenticated:
            raise Unauthenticated(getattr(request.state, "auth_failure", None))

    return guard


def get_current_principal(
    principal: Principal = Depends(require_access()),
) -> Principal:
    """Authenticated principal with no further checks."""
    return principal
