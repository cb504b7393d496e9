"""휴대폰 인증 API 라우터"""

import logging
from fastapi import APIRouter, Depends

from .deps import ERROR_RESPONSES, get_gateway, invoke_procedure, mask_phone
from ..models.requests import PhoneRequest, PhoneVerify, PhoneRequestFindId
from ..models.response import EnvelopeShape, VerificationCodeEnvelope, VerificationEnvelope
from ..services import procedures
from ..services.procedure_gateway import ProcedureGateway

logger = logging.getLogger(__name__)

router = APIRouter(responses=ERROR_RESPONSES)


@router.post("/phone/request", response_model=VerificationCodeEnvelope,
             summary="휴대폰 인증번호 발송")
async def request_phone_verification(body: PhoneRequest, gateway: ProcedureGateway = Depends(get_gateway)):
    """DB 프로시저(PRC_COF_PHONE_REQUEST)를 호출하여 인증번호를 발송합니다."""
    logger.info(f"📱 인증번호 발송 요청: {mask_phone(body.phone_number)} ({body.purpose})")
    return await invoke_procedure(gateway, procedures.PHONE_REQUEST, body, EnvelopeShape.FULL)


@router.post("/phone/verify", response_model=VerificationEnvelope,
             summary="휴대폰 인증번호 확인")
async def verify_phone(body: PhoneVerify, gateway: ProcedureGateway = Depends(get_gateway)):
    """DB 프로시저(PRC_COF_PHONE_VERIFY)를 호출하여 인증번호를 검증합니다."""
    logger.info(f"📱 인증번호 확인 요청: {mask_phone(body.phone_number)} ({body.purpose})")
    return await invoke_procedure(gateway, procedures.PHONE_VERIFY, body, EnvelopeShape.FULL)


@router.post("/phone/request-find-id", response_model=VerificationCodeEnvelope,
             summary="아이디 찾기 인증번호 발송")
async def request_find_id_verification(body: PhoneRequestFindId, gateway: ProcedureGateway = Depends(get_gateway)):
    """DB 프로시저(PRC_COF_PHONE_REQUEST_FIND_ID)를 호출하여 가입자 확인 후 인증번호를 발송합니다."""
    logger.info(f"📱 아이디 찾기 인증번호 요청: {mask_phone(body.phone_number)}")
    return await invoke_procedure(gateway, procedures.PHONE_REQUEST_FIND_ID, body, EnvelopeShape.FULL)
