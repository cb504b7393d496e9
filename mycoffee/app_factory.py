"""
FastAPI 애플리케이션 팩토리
- 애플리케이션 생성 및 설정을 모듈화
- 커넥션 풀은 여기서 한 번 생성되어 app.state 로 주입 (테스트 시 가짜 풀 주입 가능)
- 게이트웨이 오류 -> HTTP 상태 코드 매핑
"""

import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config_manager import ConfigManager, config_manager
from .database.mysql_connection import DatabasePool
from .errors import GatewayError, GatewayErrorKind, ERROR_STATUS, error_body
from .router_registry import router_registry
from .app_lifecycle import ApplicationLifecycle, lifespan_manager
from .services.procedure_gateway import ProcedureGateway

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def setup_logging(config: ConfigManager):
    """로깅 설정"""
    handlers = []

    # 파일 핸들러
    if config.logging.file_path:
        from logging.handlers import RotatingFileHandler
        file_handler = RotatingFileHandler(
            config.logging.file_path,
            maxBytes=config.logging.max_bytes,
            backupCount=config.logging.backup_count,
            encoding='utf-8'
        )
        handlers.append(file_handler)

    # 콘솔 핸들러
    if config.logging.console_enabled or not handlers:
        handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=getattr(logging, config.logging.level, logging.INFO),
        format=config.logging.format,
        handlers=handlers,
        force=True  # 기존 설정 덮어쓰기
    )


def setup_cors_middleware(app: FastAPI, config: ConfigManager):
    """CORS 미들웨어 설정"""
    if not config.webserver.cors_enabled:
        return

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.webserver.cors_origins,
        allow_credentials="*" not in config.webserver.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    logger.info(f"✅ CORS 미들웨어 설정 완료 - Origins: {config.webserver.cors_origins}")


def setup_exception_handlers(app: FastAPI, config: ConfigManager):
    """예외 처리기 설정 (모든 오류는 {"error": {...}} 형태로 응답)"""
    expose_stack = config.system.expose_stack

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        if exc.kind == GatewayErrorKind.VALIDATION:
            logger.warning(f"요청 처리 실패 [{exc.kind.value}] {request.method} {request.url.path}: {exc.message}")
        else:
            logger.error(f"요청 처리 실패 [{exc.kind.value}] {request.method} {request.url.path}: {exc.message}",
                         exc_info=exc)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.kind, exc.message, exc, expose_stack, exc.detail)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # 요청 값(input)은 비밀번호가 포함될 수 있어 응답에서 제외
        errors = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
            for error in exc.errors()
        ]
        logger.warning(f"요청 형식 오류 {request.method} {request.url.path}: {errors}")
        return JSONResponse(
            status_code=ERROR_STATUS[GatewayErrorKind.VALIDATION],
            content=error_body(GatewayErrorKind.VALIDATION, "요청 형식이 올바르지 않습니다", detail=errors)
        )

    # Starlette 의 ServerErrorMiddleware 는 이 응답을 보낸 뒤 예외를 다시 올리므로
    # 서버(uvicorn) 로그에도 같은 오류가 한 번 더 남는다
    @app.exception_handler(Exception)
    async def internal_server_error_handler(request: Request, exc: Exception):
        logger.error(f"Internal server error: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=ERROR_STATUS[GatewayErrorKind.EXECUTION],
            content=error_body(GatewayErrorKind.EXECUTION, "Internal server error", exc, expose_stack)
        )


def create_application(environment: Optional[str] = None,
                       config: Optional[ConfigManager] = None,
                       pool: Optional[DatabasePool] = None) -> FastAPI:
    """
    FastAPI 애플리케이션 생성 팩토리

    Args:
        environment: 환경 설정 (development, production, testing)
        config: 설정 관리자 (기본: 전역 config_manager)
        pool: 커넥션 풀 (기본: 설정으로 새로 생성, 테스트 시 가짜 풀 주입)

    Returns:
        FastAPI: 구성된 FastAPI 애플리케이션 인스턴스
    """
    config = config or config_manager

    # 환경별 설정 오버라이드
    if environment:
        config.system.environment = environment
        config.system.debug = environment in ["development", "testing"]

    setup_logging(config)

    logger.info(f"🚀 애플리케이션 생성 시작 - 환경: {config.system.environment}")

    validation_result = config.validate_config()
    if not validation_result["valid"]:
        logger.error(f"❌ 설정 검증 실패: {validation_result['issues']}")
        raise ValueError(f"Invalid configuration: {validation_result['issues']}")

    if validation_result["warnings"]:
        logger.warning(f"⚠️ 설정 경고: {validation_result['warnings']}")

    pool = pool or DatabasePool(config.database)

    app = FastAPI(
        title="MyCoffee API",
        description="커피 추천 서비스 회원가입/인증 API (DB 저장 프로시저 게이트웨이)",
        version=API_VERSION,
        debug=False,  # 오류 응답은 예외 처리기에서 직접 구성
        lifespan=lifespan_manager,
        openapi_url="/swagger.json",
        docs_url="/docs",
        redoc_url=None,
    )

    app.state.config = config
    app.state.pool = pool
    app.state.gateway = ProcedureGateway(pool)
    app.state.lifecycle = ApplicationLifecycle(pool, config)

    setup_cors_middleware(app, config)
    setup_exception_handlers(app, config)

    registration_results = router_registry.register_api_routers(app)
    failed = [name for name, ok in registration_results.items() if not ok]
    if failed:
        raise RuntimeError(f"Router registration failed: {failed}")

    logger.info("✅ 애플리케이션 생성 완료")

    return app


def create_development_app(config: Optional[ConfigManager] = None,
                           pool: Optional[DatabasePool] = None) -> FastAPI:
    """개발환경용 애플리케이션 생성 (디버그 켜짐, 오류 응답에 스택 포함)"""
    return create_application("development", config=config, pool=pool)


def create_production_app(config: Optional[ConfigManager] = None,
                          pool: Optional[DatabasePool] = None) -> FastAPI:
    """운영환경용 애플리케이션 생성 (DEBUG 값과 무관하게 디버그 꺼짐)"""
    return create_application("production", config=config, pool=pool)
