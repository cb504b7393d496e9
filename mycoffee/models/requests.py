"""
API 요청 모델
- 엔드포인트별 필수/선택 필드와 기본값을 명시
- 형식/중복 등 업무 검증은 저장 프로시저가 담당 (여기서는 타입만 확인)
"""

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field

PURPOSES = ["SIGNUP", "LOGIN", "FIND_ID", "RESET_PASSWORD"]
VALIDATION_MODES = ["EMAIL_ONLY", "PASSWORD_ONLY", "PHONE_ONLY", "NAME_ONLY", "FULL_SIGNUP"]
DEVICE_TYPES = ["WEB", "MOBILE_ANDROID", "MOBILE_IOS"]


class ClientInfo(BaseModel):
    """접속 기기/클라이언트 정보 (선택)"""
    ip_address: Optional[str] = Field(None, description="접속 IP", examples=["127.0.0.1"])
    user_agent: Optional[str] = Field(None, description="User-Agent", examples=["MyCoffee/1.0"])
    device_type: Optional[str] = Field(None, description="기기 종류", json_schema_extra={"enum": DEVICE_TYPES})
    device_id: Optional[str] = Field(None, description="기기 고유 ID", examples=["TEST-DEVICE"])
    app_version: Optional[str] = Field(None, description="앱 버전", examples=["1.0"])


class PhoneRequest(BaseModel):
    phone_number: str = Field(..., description="휴대폰 번호", examples=["01012345678"])
    purpose: Optional[str] = Field("SIGNUP", description="인증 목적", json_schema_extra={"enum": PURPOSES})
    user_id: Optional[int] = Field(None, description="로그인 사용자 ID (있는 경우)")

    class Config:
        json_schema_extra = {
            "example": {"phone_number": "01012345678", "purpose": "SIGNUP"}
        }


class PhoneVerify(BaseModel):
    phone_number: str = Field(..., description="휴대폰 번호")
    verification_code: str = Field(..., description="6자리 인증번호")
    purpose: Optional[str] = Field("SIGNUP", description="인증 목적", json_schema_extra={"enum": PURPOSES})

    class Config:
        json_schema_extra = {
            "example": {"phone_number": "01012345678", "verification_code": "123456", "purpose": "SIGNUP"}
        }


class PhoneRequestFindId(BaseModel):
    name: str = Field(..., description="가입자 이름")
    phone_number: str = Field(..., description="휴대폰 번호")

    class Config:
        json_schema_extra = {
            "example": {"name": "김커피", "phone_number": "01012345678"}
        }


class SignupRequest(ClientInfo):
    """회원가입 요청"""
    validation_mode: Optional[str] = Field("FULL_SIGNUP", description="검증 범위",
                                           json_schema_extra={"enum": VALIDATION_MODES})
    email: str = Field(..., description="이메일")
    password: str = Field(..., description="비밀번호")
    name: str = Field(..., description="이름")
    birth_year: Optional[int] = Field(None, description="출생 연도")
    birth_date: Optional[date] = Field(None, description="생년월일")
    gender: Optional[str] = Field(None, description="성별", json_schema_extra={"enum": ["M", "F"]})
    phone_number: str = Field(..., description="휴대폰 번호")
    verification_code: str = Field(..., description="휴대폰 인증번호")
    terms_agreed: bool = Field(..., description="이용약관 동의")
    privacy_agreed: bool = Field(..., description="개인정보 처리방침 동의")
    marketing_agreed: Optional[bool] = Field(False, description="마케팅 수신 동의")

    class Config:
        json_schema_extra = {
            "example": {
                "validation_mode": "FULL_SIGNUP",
                "email": "coffeeuser@example.com",
                "password": "Coffee1234",
                "name": "김커피",
                "birth_year": 1990,
                "birth_date": "1990-05-01",
                "gender": "M",
                "phone_number": "01012345678",
                "verification_code": "123456",
                "terms_agreed": True,
                "privacy_agreed": True,
                "marketing_agreed": False,
                "ip_address": "127.0.0.1",
                "user_agent": "Test Script",
                "device_type": "WEB",
                "device_id": "TEST-DEVICE",
                "app_version": "1.0",
            }
        }


class EmailLoginRequest(ClientInfo):
    """이메일 로그인 요청"""
    email: str = Field(..., description="이메일")
    password: str = Field(..., description="비밀번호")
    auto_login: Optional[bool] = Field(False, description="자동 로그인 여부")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "coffeeuser@example.com",
                "password": "Coffee1234",
                "auto_login": False,
                "device_type": "WEB",
            }
        }


class RecommendRequest(BaseModel):
    """취향 점수 기반 추천 요청"""
    aroma: int = Field(..., description="향 선호도")
    acidity: int = Field(..., description="산미 선호도")
    nutty: int = Field(..., description="고소함 선호도")
    body: int = Field(..., description="바디감 선호도")
    sweetness: int = Field(..., description="단맛 선호도")
    user_id: Optional[int] = Field(None, description="사용자 ID (추천 이력 저장용)")

    class Config:
        json_schema_extra = {
            "example": {"aroma": 4, "acidity": 2, "nutty": 5, "body": 3, "sweetness": 3}
        }


class ResetPasswordRequest(BaseModel):
    email: str = Field(..., description="이메일")
    phone_number: str = Field(..., description="휴대폰 번호")
    verification_code: str = Field(..., description="휴대폰 인증번호")
    new_password: str = Field(..., description="새 비밀번호")
    new_password_confirm: str = Field(..., description="새 비밀번호 확인")


class UserCreate(BaseModel):
    name: str = Field(..., description="이름")
    email: str = Field(..., description="이메일")
