"""헬스 체크 API 라우터."""

from fastapi import APIRouter, Request

from medextract_ai.core.config.settings import settings
from medextract_ai.core.models.api import HealthCheckResponse

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "",
    response_model=HealthCheckResponse,
    summary="헬스 체크",
    description="서비스 상태와 참조 데이터베이스 연결 여부를 확인합니다.",
)
async def health_check(request: Request) -> HealthCheckResponse:
    """참조 데이터베이스 풀이 열려 있지 않으면 degraded를 반환합니다."""
    database = getattr(request.app.state, "database", None)
    connected = database is not None and database.is_connected

    return HealthCheckResponse(
        status="healthy" if connected else "degraded",
        version=settings.app_version,
        service=settings.app_name,
        database="connected" if connected else "unavailable",
    )
