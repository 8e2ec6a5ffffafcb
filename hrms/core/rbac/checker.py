"""Access decision engine for the HRMS API.

Every check is a pure function of the principal and a static descriptor of
the requested operation: it returns on allow and raises a typed AccessError
on deny. No state is kept between calls, so the functions are safe to call
from any number of concurrent requests.

Super Admin is tested before any table lookup in every check.
"""

import logging
from typing import FrozenSet, List, Optional, Union

from .errors import AccessError, DenialReason, Forbidden, InternalCheckError, Unauthenticated
from .permissions import Action, Module, PORTAL_MODULES, WILDCARD_PERMISSION
from .principal import AccessRequirement, Decision, Principal
from .roles import (
    AUDITOR,
    DEFAULT_CATALOG,
    EMPLOYEE,
    SUPER_ADMIN,
    RoleCatalog,
    get_allowed_modules,
    normalize_role_name,
)

logger = logging.getLogger(__name__)


def _role_name(principal: Principal) -> str:
    role_name = principal.role_name
    if not isinstance(role_name, str):
        raise TypeError(f"Malformed role on principal {principal.user_id!r}: {role_name!r}")
    return role_name


def _has_role(principal: Principal, role_name: str) -> bool:
    return normalize_role_name(_role_name(principal)) == normalize_role_name(role_name)


def is_super_admin(principal: Principal) -> bool:
    return _has_role(principal, SUPER_ADMIN)


def _module_name(module: Union[Module, str]) -> str:
    return module.value if isinstance(module, Module) else str(module)


def check_authenticated(principal: Optional[Principal]) -> Principal:
    """Fail with Unauthenticated when no principal was resolved."""
    if principal is None:
        raise Unauthenticated()
    return principal


def check_write_access(principal: Principal, method: str) -> None:
    """Block write methods for the read-only Auditor role.

    Auditor is the only read-only role; every other role passes.
    """
    if is_super_admin(principal):
        return

    if _has_role(principal, AUDITOR) and Action.for_method(method) is Action.WRITE:
        raise Forbidden(
            DenialReason.READ_ONLY_ROLE,
            "Auditor role has read-only access. Write operations are not allowed.",
            role=principal.role_name,
        )


def check_module_access(principal: Principal, module: Union[Module, str]) -> None:
    """Check the principal's role may touch the given module."""
    if is_super_admin(principal):
        return

    name = _module_name(module)
    resolved = Module.lookup(name)

    if _has_role(principal, EMPLOYEE):
        if resolved in PORTAL_MODULES:
            return
        raise Forbidden(
            DenialReason.EMPLOYEE_PORTAL_ONLY,
            "Employee role can only access portal routes",
            module=name,
            role=principal.role_name,
        )

    if resolved not in get_allowed_modules(_role_name(principal)):
        role_label = principal.role_name or "Your role"
        raise Forbidden(
            DenialReason.MODULE_NOT_PERMITTED,
            f"Access denied. {role_label} does not have access to {name} module.",
            module=name,
            role=principal.role_name,
        )


def check_global_setup_access(principal: Principal) -> None:
    """Only Super Admin may reach global setup."""
    if not is_super_admin(principal):
        raise Forbidden(
            DenialReason.SUPER_ADMIN_ONLY,
            "Only Super Admin can access global setup",
            role=principal.role_name,
        )


def effective_permissions(
    principal: Principal,
    catalog: RoleCatalog = DEFAULT_CATALOG,
) -> FrozenSet[str]:
    """Permissions the principal holds.

    Explicit permissions win when they were loaded; otherwise the role's
    seeded set applies. Unknown roles with nothing loaded hold nothing.
    """
    if principal.explicit_permissions:
        return principal.explicit_permissions
    return catalog.permissions_for(_role_name(principal))


def check_permission(
    principal: Principal,
    permission: str,
    catalog: RoleCatalog = DEFAULT_CATALOG,
) -> None:
    """Check a named permission, independent of module access."""
    if is_super_admin(principal):
        return

    granted = effective_permissions(principal, catalog)
    if permission in granted or WILDCARD_PERMISSION in granted:
        return

    raise Forbidden(
        DenialReason.MISSING_PERMISSION,
        "Insufficient permissions",
        role=principal.role_name,
        permission=permission,
    )


def get_accessible_modules(principal: Principal) -> List[Module]:
    """Modules the principal may reach, in declaration order."""
    if is_super_admin(principal):
        return list(Module)
    if _has_role(principal, EMPLOYEE):
        allowed = PORTAL_MODULES
    else:
        allowed = get_allowed_modules(_role_name(principal))
    return [module for module in Module if module in allowed]


class AccessChecker:
    """Evaluates route requirements against a principal.

    Holds only the immutable role catalogue; one instance serves the whole
    process.
    """

    def __init__(self, catalog: RoleCatalog = DEFAULT_CATALOG):
        self.catalog = catalog

    @staticmethod
    def _portal_route_for_employee(principal: Principal, requirement: AccessRequirement) -> bool:
        # Employees hold no seeded permissions; the portal module grant covers them
        if requirement.module is None or not _has_role(principal, EMPLOYEE):
            return False
        return Module.lookup(_module_name(requirement.module)) in PORTAL_MODULES

    def evaluate(
        self,
        principal: Optional[Principal],
        requirement: AccessRequirement,
        method: str = "GET",
    ) -> Principal:
        """Run every configured check in order. The first failure is raised.

        Raises:
            Unauthenticated: no principal
            Forbidden: a check denied
            InternalCheckError: a check failed unexpectedly
        """
        principal = check_authenticated(principal)
        try:
            _role_name(principal)
            if requirement.global_setup:
                check_global_setup_access(principal)
            if requirement.module is not None:
                check_module_access(principal, requirement.module)
            if requirement.enforce_read_only:
                check_write_access(principal, method)
            if not self._portal_route_for_employee(principal, requirement):
                for permission in requirement.permissions:
                    check_permission(principal, permission, self.catalog)
        except Forbidden as e:
            logger.warning(
                "Access denied: reason=%s user=%s role=%s module=%s permission=%s method=%s",
                e.reason.value, principal.user_id, principal.role_name,
                e.module, e.permission, method,
            )
            raise
        except AccessError:
            raise
        except Exception as e:
            logger.exception(
                "Access check failed for user=%s role=%r requirement=%r",
                principal.user_id, principal.role_name, requirement,
            )
            raise InternalCheckError(cause=e) from e
        return principal

    def decide(
        self,
        principal: Optional[Principal],
        requirement: AccessRequirement,
        method: str = "GET",
    ) -> Decision:
        """Same as evaluate, but returns a Decision instead of raising."""
        try:
            self.evaluate(principal, requirement, method)
        except AccessError as e:
            return Decision.denied(e)
        return Decision.allowed()
