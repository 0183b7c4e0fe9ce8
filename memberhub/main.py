from __future__ import annotations

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from memberhub.api.routers import (
    admin_content,
    admin_groups,
    admin_members,
    admin_messages,
    admin_plans,
    admin_sales_pages,
    admin_settings,
    admin_site_updates,
    admin_taxonomies,
    admin_tools,
    auth,
    members,
    public,
)
from memberhub.infra.db import check_db_ready
from memberhub.infra.log import configure_logging
from memberhub.infra.session import SessionRefreshMiddleware
from memberhub.services.auth_service import register_profile_provisioner

configure_logging()
register_profile_provisioner()

app = FastAPI(
    title="memberhub",
    description="Membership and community platform: admin console, member dashboard and public pages.",
    version="0.1.0",
)

app.add_middleware(SessionRefreshMiddleware)


@app.exception_handler(StarletteHTTPException)
async def http_error_envelope(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


@app.exception_handler(RequestValidationError)
async def validation_error_envelope(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"success": False, "error": _validation_message(exc)},
    )


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(admin_taxonomies.router, prefix="/api/admin/taxonomies", tags=["admin-taxonomies"])
app.include_router(admin_content.router, prefix="/api/admin/content", tags=["admin-content"])
app.include_router(admin_messages.router, prefix="/api/admin/messages", tags=["admin-messages"])
app.include_router(admin_plans.router, prefix="/api/admin/plans", tags=["admin-plans"])
app.include_router(admin_members.router, prefix="/api/admin/members", tags=["admin-members"])
app.include_router(admin_groups.router, prefix="/api/admin/groups", tags=["admin-groups"])
app.include_router(admin_settings.router, prefix="/api/admin/settings", tags=["admin-settings"])
app.include_router(admin_sales_pages.router, prefix="/api/admin/sales-pages", tags=["admin-sales-pages"])
app.include_router(admin_site_updates.router, prefix="/api/admin/site-updates", tags=["admin-site-updates"])
app.include_router(admin_tools.router, prefix="/api/admin/tools", tags=["admin-tools"])
app.include_router(members.router, prefix="/api/members", tags=["members"])
app.include_router(public.router, prefix="/api/public", tags=["public"])


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/readyz")
def readyz() -> dict[str, object]:
    db_ok = check_db_ready()
    checks = {"db": "ok" if db_ok else "fail"}
    if not db_ok:
        raise HTTPException(
            status_code=503,
            detail={"status": "not_ready", "checks": checks},
        )
    return {"status": "ready", "checks": checks}
