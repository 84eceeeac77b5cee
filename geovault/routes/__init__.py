"""API routes package."""

from geovault.routes.auth_routes import router as auth_router
from geovault.routes.zone_routes import router as zone_router
from geovault.routes.file_routes import router as file_router
from geovault.routes.audit_routes import router as audit_router
from geovault.routes.diagnostics_routes import router as diagnostics_router

__all__ = ["auth_router", "zone_router", "file_router", "audit_router", "diagnostics_router"]
