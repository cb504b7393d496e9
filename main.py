"""
MyCoffee API - 메인 애플리케이션
- 환경 변수(.env) 기반 설정
- 저장 프로시저 게이트웨이 라우터 자동 등록
- 종료 시 진행 중 요청 처리 후 커넥션 풀 정리
"""

import logging

# 설정 관리자를 가장 먼저 초기화
from mycoffee.config_manager import config_manager
from mycoffee.app_factory import create_application, create_development_app, create_production_app

logger = logging.getLogger(__name__)


def main():
    """메인 애플리케이션 진입점"""
    if config_manager.is_production():
        app = create_production_app()
    elif config_manager.is_development():
        app = create_development_app()
    else:
        app = create_application()
    logger.info(f"✅ MyCoffee API 초기화 완료 - 환경: {config_manager.system.environment}")
    return app


# FastAPI 애플리케이션 인스턴스 생성
app = main()

# 개발 서버 실행을 위한 진입점
if __name__ == "__main__":
    import uvicorn

    if config_manager.is_production():
        # 운영 환경 설정
        uvicorn.run(
            "main:app",
            host=config_manager.webserver.host,
            port=config_manager.webserver.port,
            workers=config_manager.webserver.workers,
            reload=False,
            log_level="info",
            access_log=True,
            timeout_graceful_shutdown=30,
        )
    else:
        # 개발 환경 설정
        uvicorn.run(
            "main:app",
            host=config_manager.webserver.host,
            port=config_manager.webserver.port,
            reload=config_manager.webserver.reload,
            log_level="debug" if config_manager.system.debug else "info",
            access_log=True,
        )
