"""RBAC (Role-Based Access Control) module for the HRMS API.

This module defines the module/permission vocabulary, the role tables, and
the access decision engine.
"""

from .permissions import Module, Action, PERMISSION_DEFINITIONS
from .errors import AccessError, DenialReason, Forbidden, InternalCheckError, Unauthenticated
from .principal import AccessRequirement, Decision, Principal
from .roles import DEFAULT_CATALOG, RoleCatalog, RoleKey, load_role_catalog
from .checker import (
    AccessChecker,
    check_authenticated,
    check_global_setup_access,
    check_module_access,
    check_permission,
    check_write_access,
)

__all__ = [
    "Module",
    "Action",
    "PERMISSION_DEFINITIONS",
    "AccessError",
    "DenialReason",
    "Forbidden",
    "InternalCheckError",
    "Unauthenticated",
    "AccessRequirement",
    "Decision",
    "Principal",
    "DEFAULT_CATALOG",
    "RoleCatalog",
    "RoleKey",
    "load_role_catalog",
    "AccessChecker",
    "check_authenticated",
    "check_global_setup_access",
    "check_module_access",
    "check_permission",
    "check_write_access",
]
