"""
API 응답 모델
- 엔드포인트별 응답 형태(Envelope)는 고정: FULL / OUTPUT_ONLY / ROWS
- OUT 파라미터 키는 항상 존재 (값이 없으면 null)
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field

from ..services.procedure_gateway import ProcedureResult


class EnvelopeShape(str, Enum):
    """응답 형태"""
    FULL = "full"                # {output, recordset, recordsets, rowsAffected}
    OUTPUT_ONLY = "output_only"  # {output}
    ROWS = "rows"                # [row, ...]


def build_envelope(result: ProcedureResult, shape: EnvelopeShape) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
    """ProcedureResult -> 응답 본문"""
    if shape == EnvelopeShape.ROWS:
        return result.recordset
    if shape == EnvelopeShape.OUTPUT_ONLY:
        return {"output": result.output}
    return {
        "output": result.output,
        "recordset": result.recordset,
        "recordsets": result.recordsets,
        "rowsAffected": result.rows_affected,
    }


# === OUT 파라미터 ===

class ResultOutput(BaseModel):
    p_result_code: Optional[str] = Field(None, description="결과 코드 (SUCCESS, INVALID_CODE, ...)")
    p_result_message: Optional[str] = Field(None, description="결과 메시지")


class VerificationCodeOutput(ResultOutput):
    p_verification_code: Optional[str] = Field(None, description="발송된 인증번호")


class VerificationOutput(ResultOutput):
    p_verification_id: Optional[Union[int, str]] = Field(None, description="인증 ID")


class SessionOutput(ResultOutput):
    p_user_id: Optional[int] = Field(None, description="사용자 ID")
    p_session_id: Optional[Union[int, str]] = Field(None, description="세션 ID")


# === 응답 Envelope ===

class ProcedureEnvelope(BaseModel):
    recordset: List[Dict[str, Any]] = Field(default_factory=list, description="첫 번째 결과 집합의 행")
    recordsets: List[List[Dict[str, Any]]] = Field(default_factory=list, description="CALL 이 반환한 모든 결과 집합")
    rowsAffected: List[int] = Field(
        default_factory=list,
        description="문장별 행 수 (결과 집합마다 행 수, 마지막 항목은 프로시저 종료 시 영향받은 행 수)"
    )


class VerificationCodeEnvelope(ProcedureEnvelope):
    output: VerificationCodeOutput


class VerificationEnvelope(ProcedureEnvelope):
    output: VerificationOutput


class SignupEnvelope(ProcedureEnvelope):
    output: SessionOutput


class LoginEnvelope(BaseModel):
    output: SessionOutput


class ResultEnvelope(BaseModel):
    output: ResultOutput


class UserOut(BaseModel):
    id: Optional[int] = None
    name: str
    email: str


class HealthResponse(BaseModel):
    status: str = "ok"
    now: str = Field(..., description="서버 시간 (ISO format)")
    database: str = Field(..., description="커넥션 풀 상태")


class ErrorDetail(BaseModel):
    kind: str
    message: str
    detail: Optional[Any] = None
    stack: Optional[str] = None


class ErrorResponse(BaseModel):
    error: ErrorDetail
