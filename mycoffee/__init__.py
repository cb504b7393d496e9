"""MyCoffee API - 저장 프로시저 기반 회원가입/인증/추천 게이트웨이"""

__version__ = "1.0.0"
