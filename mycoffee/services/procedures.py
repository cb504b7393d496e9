"""MyCoffee 저장 프로시저 정의 (파라미터 폭은 프로시저 선언과 동일)"""

from sqlalchemy import BigInteger, Boolean, Date, Integer, String

from .procedure_gateway import ProcParam, ProcedureSpec

PHONE = String(20)
VERIFICATION_CODE = String(6)
EMAIL = String(255)
PASSWORD = String(255)

RESULT_OUTPUTS = ("p_result_code", "p_result_message")

_CLIENT_INFO = (
    ProcParam("p_ip_address", String(45)),
    ProcParam("p_user_agent", String(500)),
    ProcParam("p_device_type", String(20)),
    ProcParam("p_device_id", String(100)),
    ProcParam("p_app_version", String(20)),
)

# 휴대폰 인증번호 발송
PHONE_REQUEST = ProcedureSpec(
    name="PRC_COF_PHONE_REQUEST",
    inputs=(
        ProcParam("p_phone_number", PHONE),
        ProcParam("p_purpose", String(20), default="SIGNUP"),
        ProcParam("p_user_id", BigInteger()),
    ),
    outputs=("p_verification_code",) + RESULT_OUTPUTS,
)

# 휴대폰 인증번호 확인
PHONE_VERIFY = ProcedureSpec(
    name="PRC_COF_PHONE_VERIFY",
    inputs=(
        ProcParam("p_phone_number", PHONE),
        ProcParam("p_verification_code", VERIFICATION_CODE),
        ProcParam("p_purpose", String(20), default="SIGNUP"),
    ),
    outputs=("p_verification_id",) + RESULT_OUTPUTS,
)

# 아이디 찾기용 인증번호 발송
PHONE_REQUEST_FIND_ID = ProcedureSpec(
    name="PRC_COF_PHONE_REQUEST_FIND_ID",
    inputs=(
        ProcParam("p_name", String(50)),
        ProcParam("p_phone_number", PHONE),
    ),
    outputs=("p_verification_code",) + RESULT_OUTPUTS,
)

# 회원가입
USER_SIGNUP = ProcedureSpec(
    name="PRC_COF_USER_SIGNUP",
    inputs=(
        ProcParam("p_validation_mode", String(20), default="FULL_SIGNUP"),
        ProcParam("p_email", EMAIL),
        ProcParam("p_password", PASSWORD),
        ProcParam("p_name", String(50)),
        ProcParam("p_birth_year", Integer()),
        ProcParam("p_birth_date", Date()),
        ProcParam("p_gender", String(1)),
        ProcParam("p_phone_number", PHONE),
        ProcParam("p_verification_code", VERIFICATION_CODE),
        ProcParam("p_terms_agreed", Boolean()),
        ProcParam("p_privacy_agreed", Boolean()),
        ProcParam("p_marketing_agreed", Boolean(), default=False),
    ) + _CLIENT_INFO,
    outputs=("p_user_id", "p_session_id") + RESULT_OUTPUTS,
)

# 이메일 로그인
LOGIN_EMAIL = ProcedureSpec(
    name="PRC_COF_LOGIN_EMAIL",
    inputs=(
        ProcParam("p_email", EMAIL),
        ProcParam("p_password", PASSWORD),
        ProcParam("p_auto_login", Boolean(), default=False),
    ) + _CLIENT_INFO,
    outputs=("p_user_id", "p_session_id") + RESULT_OUTPUTS,
)

# 취향 기반 원두 추천 (결과는 행 목록)
RECOMMEND = ProcedureSpec(
    name="PRC_COF_RECOMMEND",
    inputs=(
        ProcParam("p_user_id", BigInteger()),
        ProcParam("p_aroma", Integer()),
        ProcParam("p_acidity", Integer()),
        ProcParam("p_nutty", Integer()),
        ProcParam("p_body", Integer()),
        ProcParam("p_sweetness", Integer()),
    ),
)

# 비밀번호 재설정
RESET_PASSWORD = ProcedureSpec(
    name="PRC_COF_RESET_PASSWORD",
    inputs=(
        ProcParam("p_email", EMAIL),
        ProcParam("p_phone_number", PHONE),
        ProcParam("p_verification_code", VERIFICATION_CODE),
        ProcParam("p_new_password", PASSWORD),
        ProcParam("p_new_password_confirm", PASSWORD),
    ),
    outputs=RESULT_OUTPUTS,
)
