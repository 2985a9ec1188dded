"""Health check endpoint."""

from fastapi import APIRouter, Depends

from todo_api.application.ports.info_repo import InfoRepository
from todo_api.config import settings
from todo_api.infrastructure.api.dependencies import get_info_repo

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(repo: InfoRepository = Depends(get_info_repo)):
    """Check API and storage connectivity."""
    try:
        await repo.count()
        storage_status = "connected"
    except Exception as e:
        storage_status = f"error: {e}"

    return {
        "status": "ok" if storage_status == "connected" else "degraded",
        "storage": storage_status,
        "backend": "sql" if settings.uses_sql_backend else "memory",
        "service": "Todo reminders API",
    }
