"""시스템 관련 API 라우터 (헬스 체크, API 문서)"""

from datetime import datetime, timezone
from fastapi import APIRouter, Request
from fastapi.openapi.docs import get_swagger_ui_html

from ..models.response import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse, summary="헬스 체크")
async def health_check(request: Request):
    """프로세스 상태 확인 (DB 를 호출하지 않으며 커넥션 풀 상태만 보고)"""
    return {
        "status": "ok",
        "now": datetime.now(timezone.utc).isoformat(),
        "database": request.app.state.pool.state.value,
    }


@router.get("/api-docs", include_in_schema=False)
async def api_docs(request: Request):
    """Swagger UI (/docs 와 동일, 기존 경로 호환)"""
    return get_swagger_ui_html(openapi_url=request.app.openapi_url, title=f"{request.app.title} - Swagger UI")
