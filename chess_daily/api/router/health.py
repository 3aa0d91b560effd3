from fastapi import APIRouter, status, Request
from datetime import datetime
from typing import Dict

from chess_daily.api.controller.dto.output_dto import HealthCheckResponseDto
from chess_daily.core.service.attempt.lock_table import RedisLockTable
from chess_daily.infra.config.settings import settings

router = APIRouter()


async def check_storage_health(request: Request) -> Dict[str, str]:
    """Check the repository answers a catalog read."""
    container = getattr(request.app.state, "services", None)
    if container is None:
        return {"status": "unhealthy", "message": "Not initialized"}
    try:
        puzzles = await container.repository.list_puzzles()
        if not puzzles:
            return {"status": "degraded", "message": "Puzzle catalog is empty"}
        return {"status": "healthy", "message": f"{len(puzzles)} puzzles"}
    except Exception as e:
        return {"status": "unhealthy", "message": f"Storage check failed: {str(e)}"}


async def check_lock_health(request: Request) -> Dict[str, str]:
    """Check the attempt lock backend; Redis locks need a live connection."""
    container = getattr(request.app.state, "services", None)
    if container is None:
        return {"status": "unhealthy", "message": "Not initialized"}
    lock_table = container.lock_table
    if isinstance(lock_table, RedisLockTable):
        try:
            await lock_table.redis.ping()
        except Exception as e:
            return {"status": "unhealthy", "message": f"Redis connection failed: {str(e)}"}
    return {"status": "healthy", "message": lock_table.name}


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthCheckResponseDto)
async def health_check(request: Request) -> HealthCheckResponseDto:
    """
    Health check endpoint.
    Returns the status of storage and the attempt lock backend.
    """
    storage_health = await check_storage_health(request)
    lock_health = await check_lock_health(request)

    services = {
        "storage": storage_health["status"],
        "attempt_locks": lock_health["status"],
        "api": "healthy"
    }

    overall_status = "healthy"
    if any(value == "unhealthy" for value in services.values()):
        overall_status = "unhealthy"
    elif any(value == "degraded" for value in services.values()):
        overall_status = "degraded"

    return HealthCheckResponseDto(
        status=overall_status,
        service=settings.APP_NAME,
        version=settings.APP_VERSION,
        services=services,
        timestamp=datetime.utcnow().isoformat() + "Z"
    )
