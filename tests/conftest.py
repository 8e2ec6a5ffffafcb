"""Pytest configuration and shared fixtures."""

import pytest
from fastapi import APIRouter, Depends
from fastapi.testclient import TestClient

from hrms.api.deps import require_access
from hrms.api.main import create_app
from hrms.api.middleware.audit import MemoryAuditSink
from hrms.core.config import Settings
from hrms.core.identity import InMemoryIdentityStore, UserRecord
from hrms.core.rbac import Module, Principal
from hrms.core.security import create_access_token


@pytest.fixture
def make_principal():
    """Factory for principals of a given role."""
    def _make(role_name, company_id="company-1", user_id="user-1", permissions=None):
        return Principal.create(
            user_id=user_id,
            company_id=company_id,
            role_name=role_name,
            permissions=permissions,
        )
    return _make


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        secret_key="test-secret",
        file_logging=False,
        log_level="WARNING",
    )


@pytest.fixture
def identity_store():
    return InMemoryIdentityStore([
        UserRecord("super-1", None, "Super Admin"),
        UserRecord("hr-1", "company-1", "HR/Admin"),
        UserRecord("finance-1", "company-1", "Finance"),
        UserRecord("employee-1", "company-1", "Employee"),
        UserRecord("auditor-1", "company-1", "Auditor"),
        UserRecord("company-admin-1", "company-1", "Company Admin"),
        UserRecord("clerk-1", "company-2", "Payroll Clerk"),
        UserRecord("inactive-1", "company-1", "HR/Admin", is_active=False),
        UserRecord("broken-1", "company-1", None),
    ])


@pytest.fixture
def audit_sink():
    return MemoryAuditSink()


def _protected_routes() -> APIRouter:
    router = APIRouter(prefix="/api")

    @router.get("/payroll")
    def list_payroll(principal: Principal = Depends(require_access(Module.PAYROLL, read_only=True))):
        return {"success": True, "data": [], "user": principal.user_id}

    @router.post("/payroll")
    def run_payroll(principal: Principal = Depends(require_access(Module.PAYROLL, read_only=True))):
        return {"success": True}

    @router.get("/portal/profile")
    def portal_profile(principal: Principal = Depends(require_access(Module.PORTAL))):
        return {"success": True}

    @router.get("/audit-logs")
    def audit_logs(principal: Principal = Depends(require_access(Module.AUDIT_LOGS, read_only=True))):
        return {"success": True}

    @router.delete("/audit-logs/{log_id}")
    def delete_audit_log(log_id: str, principal: Principal = Depends(require_access(Module.AUDIT_LOGS, read_only=True))):
        return {"success": True}

    @router.post("/global-setup/countries")
    def create_country(principal: Principal = Depends(require_access(global_setup=True))):
        return {"success": True}

    @router.put("/regions/{region_id}")
    def update_region(
        region_id: str,
        principal: Principal = Depends(require_access(permissions=("manage_regions",), read_only=True)),
    ):
        return {"success": True}

    return router


@pytest.fixture
def app(settings, identity_store, audit_sink):
    application = create_app(settings=settings, identity_store=identity_store, audit_sink=audit_sink)
    application.include_router(_protected_routes())
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers(settings):
    """Factory for Authorization headers of a known user."""
    def _headers(user_id):
        return {"Authorization": f"Bearer {create_access_token(user_id, settings)}"}
    return _headers
