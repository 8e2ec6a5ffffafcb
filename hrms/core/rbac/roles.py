"""Role definitions for the HRMS authorization core.

Two tables live here, both immutable after import:

1. MODULE_ACCESS - which modules each system role may touch. Keyed by the
   closed RoleKey enum; a role without a key gets no modules.
2. The role catalogue - the permission names each role is seeded with.
   Tenant-defined roles (e.g. Company Admin) can be added from a YAML file
   at startup; system roles cannot be redefined.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Union

import yaml

from .permissions import Module, WILDCARD_PERMISSION, is_valid_permission


SUPER_ADMIN = "Super Admin"
HR_ADMIN = "HR/Admin"
FINANCE = "Finance"
EMPLOYEE = "Employee"
AUDITOR = "Auditor"
COMPANY_ADMIN = "Company Admin"


def normalize_role_name(role_name: str) -> str:
    """Lower-cased role name used for every role comparison. Whitespace is significant."""
    return role_name.lower()


class RoleKey(str, Enum):
    """Roles that have an entry in the module access table."""

    HR_ADMIN = "hr_admin"
    FINANCE = "finance"
    AUDITOR = "auditor"

    @classmethod
    def from_role_name(cls, role_name: str) -> Optional["RoleKey"]:
        """'HR/Admin' -> RoleKey.HR_ADMIN. Roles without a table entry give None."""
        key = normalize_role_name(role_name).replace("/", "_")
        try:
            return cls(key)
        except ValueError:
            return None


MODULE_ACCESS: Mapping[RoleKey, FrozenSet[Module]] = MappingProxyType({
    RoleKey.HR_ADMIN: frozenset([
        Module.EMPLOYEE, Module.PAYROLL, Module.ATTENDANCE, Module.LOAN,
        Module.REIMBURSEMENT, Module.SUPPLEMENTARY, Module.INCREMENT,
        Module.HR_LETTERS, Module.BIOMETRIC, Module.OFFICE_LOCATION,
    ]),
    RoleKey.FINANCE: frozenset([
        Module.PAYROLL, Module.STATUTORY, Module.REPORTS, Module.ANALYTICS,
        Module.GOVERNMENT,
    ]),
    # Read-only everywhere; writes are blocked separately
    RoleKey.AUDITOR: frozenset([
        Module.EMPLOYEE, Module.PAYROLL, Module.ATTENDANCE, Module.LOAN,
        Module.REIMBURSEMENT, Module.SUPPLEMENTARY, Module.INCREMENT,
        Module.STATUTORY, Module.REPORTS, Module.ANALYTICS, Module.AUDIT_LOGS,
        Module.BIOMETRIC, Module.OFFICE_LOCATION, Module.HR_LETTERS,
        Module.GOVERNMENT,
    ]),
})


def get_allowed_modules(role_name: str) -> FrozenSet[Module]:
    """Modules a role may access per the static table. Unknown roles get none."""
    key = RoleKey.from_role_name(role_name)
    if key is None:
        return frozenset()
    return MODULE_ACCESS.get(key, frozenset())


# Seeded permission sets

HR_ADMIN_PERMISSIONS = [
    "view_employee", "manage_employee",
    "view_payroll", "manage_payroll",
    "view_attendance", "manage_attendance",
    "view_loan", "manage_loan",
    "view_reimbursement", "manage_reimbursement",
    "view_supplementary", "manage_supplementary",
    "view_increment", "manage_increment",
    "view_hr_letters", "manage_hr_letters",
    "view_office_location", "manage_office_location",
    "view_biometric", "manage_biometric",
]

# Company management on top of the HR/Admin set
COMPANY_ADMIN_PERMISSIONS = [
    "view_company", "manage_company", "manage_company_users",
    "manage_branches", "manage_departments", "manage_designations",
    "manage_regions", "manage_templates", "manage_news_policies",
    "view_statutory", "view_reports", "view_analytics",
] + HR_ADMIN_PERMISSIONS

FINANCE_PERMISSIONS = [
    "view_employee",
    "view_payroll", "process_salary", "manage_payroll",
    "view_statutory", "manage_statutory",
    "view_reports", "manage_reports",
    "view_analytics",
    "view_government_api", "manage_government_api",
    "view_loan", "view_reimbursement", "view_supplementary", "view_increment",
]

AUDITOR_PERMISSIONS = [
    "view_employee", "view_payroll", "view_attendance", "view_loan",
    "view_reimbursement", "view_supplementary", "view_increment",
    "view_statutory", "view_reports", "view_audit_logs", "view_analytics",
    "view_biometric", "view_office_location", "view_hr_letters",
    "view_government_api", "view_companies", "view_global_setup",
]


@dataclass(frozen=True)
class RoleDefinition:
    """A role and the permission names it is seeded with."""

    name: str
    permissions: FrozenSet[str]
    description: str = ""
    is_system: bool = False


DEFAULT_ROLES: Dict[str, RoleDefinition] = {
    definition.name: definition
    for definition in (
        RoleDefinition(SUPER_ADMIN, frozenset([WILDCARD_PERMISSION]),
                       "Full system access including global setup", True),
        RoleDefinition(HR_ADMIN, frozenset(HR_ADMIN_PERMISSIONS),
                       "Employee, Payroll, and Attendance management", True),
        RoleDefinition(FINANCE, frozenset(FINANCE_PERMISSIONS),
                       "Salary Processing and Statutory Reports", True),
        RoleDefinition(EMPLOYEE, frozenset(),
                       "Self-service portal access", True),
        RoleDefinition(AUDITOR, frozenset(AUDITOR_PERMISSIONS),
                       "Read-only access to all data", True),
        RoleDefinition(COMPANY_ADMIN, frozenset(COMPANY_ADMIN_PERMISSIONS),
                       "Company management and user creation"),
    )
}


class RoleCatalog:
    """Immutable lookup of role name to seeded permissions."""

    def __init__(self, roles: Iterable[RoleDefinition]):
        self._roles: Mapping[str, RoleDefinition] = MappingProxyType(
            {normalize_role_name(role.name): role for role in roles}
        )

    def __len__(self) -> int:
        return len(self._roles)

    def get(self, role_name: str) -> Optional[RoleDefinition]:
        return self._roles.get(normalize_role_name(role_name))

    def permissions_for(self, role_name: str) -> FrozenSet[str]:
        """Seeded permissions of a role. Unknown roles get an empty set."""
        role = self.get(role_name)
        return role.permissions if role else frozenset()

    def extended(self, roles: Iterable[RoleDefinition]) -> "RoleCatalog":
        """Return a new catalogue with tenant-defined roles added or replaced.

        Raises:
            ValueError: if a system role would be redefined
        """
        merged = dict(self._roles)
        for role in roles:
            existing = merged.get(normalize_role_name(role.name))
            if existing is not None and existing.is_system:
                raise ValueError(f"System role cannot be redefined: {role.name}")
            merged[normalize_role_name(role.name)] = role
        return RoleCatalog(merged.values())


DEFAULT_CATALOG = RoleCatalog(DEFAULT_ROLES.values())


def parse_role_definition(role_dict: Dict[str, Any]) -> RoleDefinition:
    """Parse a tenant role entry from the roles file.

    Args:
        role_dict: Mapping with ``name``, ``permissions`` and optional ``description``

    Returns:
        RoleDefinition instance

    Raises:
        ValueError: if the entry is malformed or names an unknown permission
    """
    if not isinstance(role_dict, dict):
        raise ValueError(f"Role entry must be a mapping, got {type(role_dict).__name__}")

    name = role_dict.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValueError("Role entry requires a non-empty 'name'")

    permissions = role_dict.get("permissions", [])
    if not isinstance(permissions, list):
        raise ValueError(f"Permissions for role '{name}' must be a list")

    unknown = [p for p in permissions if not is_valid_permission(p)]
    if unknown:
        raise ValueError(f"Unknown permissions for role '{name}': {', '.join(map(str, unknown))}")

    return RoleDefinition(
        name=name.strip(),
        permissions=frozenset(permissions),
        description=role_dict.get("description", ""),
    )


def load_role_catalog(
    roles_file: Optional[Union[str, Path]] = None,
    base: RoleCatalog = DEFAULT_CATALOG,
) -> RoleCatalog:
    """Load tenant-defined roles from YAML on top of the seeded defaults.

    Args:
        roles_file: Path to a YAML file with a top-level ``roles`` list.
            None returns ``base`` unchanged.
        base: Catalogue to extend

    Returns:
        RoleCatalog instance

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the file content is invalid
    """
    if roles_file is None:
        return base

    path = Path(roles_file)
    if not path.exists():
        raise FileNotFoundError(f"Roles file not found: {path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        return base
    if not isinstance(data, dict):
        raise ValueError("Roles file must contain a YAML dictionary")

    entries = data.get("roles", [])
    if not isinstance(entries, list):
        raise ValueError("'roles' must be a list")

    return base.extended(parse_role_definition(entry) for entry in entries)
