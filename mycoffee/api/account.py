"""
회원 계정 API 라우터
- 회원가입 / 이메일 로그인 / 비밀번호 재설정
- 비밀번호 해싱, 중복 확인, 세션 발급은 모두 저장 프로시저에서 처리
"""

import logging
from fastapi import APIRouter, Depends

from .deps import ERROR_RESPONSES, get_gateway, invoke_procedure
from ..models.requests import SignupRequest, EmailLoginRequest, ResetPasswordRequest
from ..models.response import EnvelopeShape, SignupEnvelope, LoginEnvelope, ResultEnvelope
from ..services import procedures
from ..services.procedure_gateway import ProcedureGateway

logger = logging.getLogger(__name__)

router = APIRouter(responses=ERROR_RESPONSES)


@router.post("/signup", response_model=SignupEnvelope, summary="회원가입")
async def signup(body: SignupRequest, gateway: ProcedureGateway = Depends(get_gateway)):
    """DB 프로시저(PRC_COF_USER_SIGNUP)를 호출하여 신규 회원을 생성합니다.

    validation_mode 가 FULL_SIGNUP 이 아니면 해당 항목만 검증하고 가입하지 않습니다.
    결과 코드(EMAIL_DUPLICATE 등)는 output.p_result_code 로 그대로 전달됩니다.
    """
    envelope = await invoke_procedure(gateway, procedures.USER_SIGNUP, body, EnvelopeShape.FULL)
    logger.info(f"👤 회원가입 처리 ({body.validation_mode}): {envelope['output'].get('p_result_code')}")
    return envelope


@router.post("/api/login/email", response_model=LoginEnvelope, summary="이메일 로그인")
async def login_email(body: EmailLoginRequest, gateway: ProcedureGateway = Depends(get_gateway)):
    """DB 프로시저(PRC_COF_LOGIN_EMAIL)를 호출하여 로그인하고 세션을 발급합니다."""
    envelope = await invoke_procedure(gateway, procedures.LOGIN_EMAIL, body, EnvelopeShape.OUTPUT_ONLY)
    logger.info(f"🔑 이메일 로그인 처리: {envelope['output'].get('p_result_code')}")
    return envelope


@router.post("/api/reset-password", response_model=ResultEnvelope, summary="비밀번호 재설정")
async def reset_password(body: ResetPasswordRequest, gateway: ProcedureGateway = Depends(get_gateway)):
    """DB 프로시저(PRC_COF_RESET_PASSWORD)를 호출하여 휴대폰 인증 후 비밀번호를 재설정합니다."""
    envelope = await invoke_procedure(gateway, procedures.RESET_PASSWORD, body, EnvelopeShape.OUTPUT_ONLY)
    logger.info(f"🔒 비밀번호 재설정 처리: {envelope['output'].get('p_result_code')}")
    return envelope
