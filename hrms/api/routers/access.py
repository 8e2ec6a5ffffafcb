"""Endpoints describing the caller's own access."""

from fastapi import APIRouter, Depends

from hrms.api.deps import get_current_principal
from hrms.api.schemas import AccessSummary, SuccessResponse
from hrms.core.rbac import Principal
from hrms.core.rbac.checker import get_accessible_modules, is_super_admin
from hrms.core.rbac.roles import AUDITOR, normalize_role_name

router = APIRouter(prefix="/me", tags=["access"])


@router.get("/access", response_model=SuccessResponse)
def my_access(principal: Principal = Depends(get_current_principal)):
    """Modules the caller may open and whether they may write."""
    summary = AccessSummary(
        user_id=principal.user_id,
        company_id=principal.company_id,
        role=principal.role_name,
        modules=[module.value for module in get_accessible_modules(principal)],
        read_only=normalize_role_name(principal.role_name) == normalize_role_name(AUDITOR),
        global_setup=is_super_admin(principal),
    )
    return SuccessResponse(data=summary.model_dump())
