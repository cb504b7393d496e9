"""FastAPI 라우터 모듈 (RouterRegistry 가 모듈 경로로 등록)"""
