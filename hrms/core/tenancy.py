"""Company scoping for data-layer queries.

Module access says which kind of data a role may touch; these helpers decide
which company's rows. Every tenant-scoped query must go through them, since
an allowed module check never implies cross-company visibility.
"""

from typing import Optional

from sqlalchemy import Select, select

from hrms.core.rbac.checker import is_super_admin
from hrms.core.rbac.errors import DenialReason, Forbidden
from hrms.core.rbac.principal import Principal


def resolve_company_id(principal: Principal, requested: Optional[str] = None) -> str:
    """Pick the company a request operates on.

    Super Admin may name any company and defaults to its own. Everyone else
    is pinned to their own company.

    Raises:
        Forbidden: cross-company request, or no company to scope to
    """
    requested = str(requested) if requested is not None else None

    if is_super_admin(principal):
        company_id = requested or principal.company_id
    elif requested is not None and requested != principal.company_id:
        raise Forbidden(
            DenialReason.CROSS_TENANT,
            "Access denied. You can only access data of your own company.",
            role=principal.role_name,
        )
    else:
        company_id = principal.company_id

    if company_id is None:
        raise Forbidden(
            DenialReason.CROSS_TENANT,
            "No company associated with this account",
            role=principal.role_name,
        )
    return company_id


def scope_to_company(stmt: Select, model, company_id: str) -> Select:
    """Restrict a select to one company's rows."""
    return stmt.where(model.company_id == company_id)


def scoped_select(model, principal: Principal, requested: Optional[str] = None) -> Select:
    """``select(model)`` limited to the company the principal may see."""
    return scope_to_company(select(model), model, resolve_company_id(principal, requested))
