"""
게이트웨이 오류 분류
- 데이터 계층 오류를 종류별로 구분하여 HTTP 상태 코드로 매핑
- 저장 프로시저의 결과 코드(INVALID_CODE 등)는 오류가 아님 (200 으로 그대로 전달)
"""

import traceback
from enum import Enum
from typing import Any, Dict, Optional


class GatewayErrorKind(str, Enum):
    """오류 종류"""
    CONNECTIVITY = "CONNECTIVITY"  # 풀 생성/커넥션 획득 실패
    VALIDATION = "VALIDATION"      # 요청 형식 오류, 파라미터 바인딩 실패
    EXECUTION = "EXECUTION"        # 프로시저/SQL 실행 오류
    TIMEOUT = "TIMEOUT"            # 실행 제한 시간 초과


ERROR_STATUS: Dict[GatewayErrorKind, int] = {
    GatewayErrorKind.CONNECTIVITY: 500,
    GatewayErrorKind.VALIDATION: 400,
    GatewayErrorKind.EXECUTION: 500,
    GatewayErrorKind.TIMEOUT: 504,
}


class GatewayError(Exception):
    """게이트웨이 오류"""

    def __init__(self, kind: GatewayErrorKind, message: str, detail: Any = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.detail = detail

    @property
    def status_code(self) -> int:
        return ERROR_STATUS[self.kind]


def error_body(kind: GatewayErrorKind, message: str, exc: Optional[BaseException] = None,
               expose_stack: bool = False, detail: Any = None) -> Dict[str, Any]:
    """오류 응답 본문 생성

    운영 환경(expose_stack=False)에서는 스택 트레이스를 절대 포함하지 않는다.
    """
    error: Dict[str, Any] = {"kind": kind.value, "message": message}
    if detail is not None:
        error["detail"] = detail
    if expose_stack and exc is not None:
        error["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return {"error": error}
