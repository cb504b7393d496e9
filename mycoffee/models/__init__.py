"""데이터 모델 모듈"""

from .requests import (
    PhoneRequest, PhoneVerify, PhoneRequestFindId, SignupRequest,
    EmailLoginRequest, RecommendRequest, ResetPasswordRequest, UserCreate,
)
from .response import EnvelopeShape, build_envelope, ErrorResponse, HealthResponse

__all__ = [
    'PhoneRequest', 'PhoneVerify', 'PhoneRequestFindId', 'SignupRequest',
    'EmailLoginRequest', 'RecommendRequest', 'ResetPasswordRequest', 'UserCreate',
    'EnvelopeShape', 'build_envelope', 'ErrorResponse', 'HealthResponse',
]
