from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from hep_companion.api.deps import get_supabase
from hep_companion.core import AppError
from hep_companion.core.config import settings
from hep_companion.db.supabase import execute

router = APIRouter(prefix="/api", tags=["health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/")
def root():
    return {"message": f"{settings.app_name} API running", "docs": "/docs"}


@router.get("/health")
def health():
    return {"status": "ok", "timestamp": _now(), "service": settings.app_name}


@router.get("/db/health")
def db_health(client=Depends(get_supabase)):
    try:
        execute(client.table("exercises").select("id").limit(1), action="ping database")
    except AppError as e:
        return JSONResponse(
            status_code=503,
            content={"status": "error", "timestamp": _now(), "service": settings.app_name, "error": e.message},
        )
    return {"status": "ok", "db": "connected", "timestamp": _now()}
