from __future__ import annotations

from fastapi import APIRouter

from employee_records.core.config import settings
from employee_records.services.employee_service import employee_service
from employee_records.services.upload_storage import upload_storage
from employee_records.services.user_service import user_service

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    services: dict[str, str] = {}

    try:
        if employee_service.initialized:
            ok = await employee_service.check_connection()
            services["cosmos_db"] = "ok" if ok else "error"
        else:
            services["cosmos_db"] = "not_configured"
    except Exception:
        services["cosmos_db"] = "error"

    services["users"] = "ok" if user_service.initialized else "not_configured"
    services["uploads"] = "ok" if upload_storage.check_directory() else "error"

    all_ok = all(v in ("ok", "not_configured") for v in services.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "services": services,
    }


@router.get("/ready")
async def readiness_probe():
    return {"ready": True}
