"""라우터 공통 의존성 및 헬퍼"""

from typing import Any, Dict, List, Union
from fastapi import Request
from pydantic import BaseModel

from ..models.response import EnvelopeShape, ErrorResponse, build_envelope
from ..services.procedure_gateway import ProcedureGateway, ProcedureSpec

# OpenAPI 문서용 공통 오류 응답
ERROR_RESPONSES: Dict[Union[int, str], Dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "요청 형식 오류"},
    500: {"model": ErrorResponse, "description": "DB 연결/실행 오류"},
    504: {"model": ErrorResponse, "description": "DB 응답 시간 초과"},
}


def get_gateway(request: Request) -> ProcedureGateway:
    """앱에 등록된 프로시저 게이트웨이"""
    return request.app.state.gateway


async def invoke_procedure(gateway: ProcedureGateway, spec: ProcedureSpec, body: BaseModel,
                           shape: EnvelopeShape) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
    result = await gateway.call_procedure(spec, body.model_dump())
    return build_envelope(result, shape)


def mask_phone(phone_number: str) -> str:
    if len(phone_number) < 7:
        return "***"
    return f"{phone_number[:3]}****{phone_number[-4:]}"
