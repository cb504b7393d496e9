"""원두 추천 API 라우터"""

from typing import Any, Dict, List
from fastapi import APIRouter, Depends

from .deps import ERROR_RESPONSES, get_gateway, invoke_procedure
from ..models.requests import RecommendRequest
from ..models.response import EnvelopeShape
from ..services import procedures
from ..services.procedure_gateway import ProcedureGateway

router = APIRouter(responses=ERROR_RESPONSES)


@router.post("/api/recommend", response_model=List[Dict[str, Any]], summary="취향 기반 원두 추천")
async def recommend(body: RecommendRequest, gateway: ProcedureGateway = Depends(get_gateway)):
    """DB 프로시저(PRC_COF_RECOMMEND)를 호출하여 취향 점수와 가까운 블렌드 목록을 거리순으로 반환합니다."""
    return await invoke_procedure(gateway, procedures.RECOMMEND, body, EnvelopeShape.ROWS)
