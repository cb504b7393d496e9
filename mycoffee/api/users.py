"""
사용자 샘플 API (저장 프로시저 없이 단순 SQL 사용)
- GET /users: 전체 조회
- POST /users: 생성 후 생성된 ID 반환
"""

import logging
from typing import Any, Dict, List
from fastapi import APIRouter, Depends

from .deps import ERROR_RESPONSES, get_gateway
from ..models.requests import UserCreate
from ..models.response import UserOut
from ..services.procedure_gateway import ProcedureGateway

logger = logging.getLogger(__name__)

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("/users", response_model=List[Dict[str, Any]], summary="모든 사용자 조회")
async def list_users(gateway: ProcedureGateway = Depends(get_gateway)):
    return await gateway.fetch_rows("SELECT * FROM users")


@router.post("/users", response_model=UserOut, summary="사용자 생성")
async def create_user(body: UserCreate, gateway: ProcedureGateway = Depends(get_gateway)):
    user_id = await gateway.insert_row(
        "INSERT INTO users (name, email) VALUES (:name, :email)",
        {"name": body.name, "email": body.email},
    )
    logger.info(f"👤 사용자 생성: id={user_id}")
    return {"id": user_id, "name": body.name, "email": body.email}
