"""Access vocabulary for the HRMS authorization core.

Defines the closed set of modules, the read/write action classes derived
from HTTP methods, and the named permissions that tenant roles are seeded
with.

Permission names follow the "<verb>_<area>" convention of the seed data:
  - view_payroll
  - manage_employee
  - manage_regions
  - *              (wildcard, all permissions)
"""

from enum import Enum
from typing import FrozenSet, Optional, Union


class Module(str, Enum):
    """Functional areas of the application used as the unit of access control."""

    EMPLOYEE = "employee"
    PAYROLL = "payroll"
    ATTENDANCE = "attendance"
    LOAN = "loan"
    REIMBURSEMENT = "reimbursement"
    SUPPLEMENTARY = "supplementary"
    INCREMENT = "increment"
    STATUTORY = "statutory"
    REPORTS = "reports"
    ANALYTICS = "analytics"
    AUDIT_LOGS = "audit_logs"
    BIOMETRIC = "biometric"
    OFFICE_LOCATION = "office_location"
    HR_LETTERS = "hr_letters"
    GOVERNMENT = "government"

    # Employee self-service
    PORTAL = "portal"
    GPS_ATTENDANCE = "gps-attendance"

    @classmethod
    def lookup(cls, name: Union[str, "Module"]) -> Optional["Module"]:
        """Resolve a module name case-insensitively. Unknown names give None."""
        if isinstance(name, Module):
            return name
        try:
            return cls(name.lower())
        except ValueError:
            return None


class Action(str, Enum):
    """Action classes. Only read vs write matters for the read-only role."""

    READ = "read"
    WRITE = "write"

    @classmethod
    def for_method(cls, method: str) -> "Action":
        return cls.WRITE if method.upper() in WRITE_METHODS else cls.READ


WRITE_METHODS: FrozenSet[str] = frozenset(["POST", "PUT", "PATCH", "DELETE"])

# Modules an Employee may reach
PORTAL_MODULES: FrozenSet[Module] = frozenset([Module.PORTAL, Module.GPS_ATTENDANCE])

WILDCARD_PERMISSION = "*"


# Named permissions and the area each one belongs to
PERMISSION_DEFINITIONS: dict[str, str] = {
    # Global setup
    "manage_global_setup": "global",
    "view_global_setup": "global",

    # Company management
    "manage_companies": "company",
    "view_companies": "company",
    "manage_company_setup": "company",
    "view_company": "company",
    "manage_company": "company",
    "manage_company_users": "company",
    "manage_branches": "company",
    "manage_departments": "company",
    "manage_designations": "company",
    "manage_regions": "company",
    "manage_templates": "company",
    "manage_news_policies": "company",

    # HR and payroll
    "view_employee": "employee",
    "manage_employee": "employee",
    "view_payroll": "payroll",
    "manage_payroll": "payroll",
    "process_salary": "payroll",
    "view_attendance": "attendance",
    "manage_attendance": "attendance",
    "view_loan": "loan",
    "manage_loan": "loan",
    "view_reimbursement": "reimbursement",
    "manage_reimbursement": "reimbursement",
    "view_supplementary": "supplementary",
    "manage_supplementary": "supplementary",
    "view_increment": "increment",
    "manage_increment": "increment",
    "view_statutory": "statutory",
    "manage_statutory": "statutory",

    # Reporting
    "view_reports": "reports",
    "manage_reports": "reports",
    "view_audit_logs": "reports",
    "view_analytics": "analytics",

    # Devices, locations, letters, integrations
    "view_biometric": "biometric",
    "manage_biometric": "biometric",
    "view_office_location": "attendance",
    "manage_office_location": "attendance",
    "view_hr_letters": "hr_letters",
    "manage_hr_letters": "hr_letters",
    "view_government_api": "government",
    "manage_government_api": "government",

    WILDCARD_PERMISSION: "system",
}


def is_valid_permission(name: str) -> bool:
    """Check if a permission name is defined."""
    return name in PERMISSION_DEFINITIONS
