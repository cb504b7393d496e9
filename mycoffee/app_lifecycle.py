"""
애플리케이션 생명주기 관리 모듈
- 시작 시 설정 요약 로그 및 (선택) 커넥션 풀 예열
- 종료 시 커넥션 풀 정리 (진행 중 요청은 uvicorn 이 먼저 마무리)
"""

import logging
from typing import Any, Dict
from contextlib import asynccontextmanager

from .config_manager import ConfigManager
from .database.mysql_connection import DatabasePool

logger = logging.getLogger(__name__)


class DatabaseManager:
    """커넥션 풀 시작/종료 관리"""

    def __init__(self, pool: DatabasePool):
        self.pool = pool

    async def initialize(self, warmup: bool) -> str:
        """풀 예열 (실패해도 기동은 계속, 첫 요청에서 재시도)"""
        if not warmup:
            logger.info("💤 커넥션 풀 지연 생성 모드 (첫 요청 시 연결)")
            return self.pool.state.value

        if await self.pool.warmup():
            logger.info("✅ MySQL 커넥션 풀 예열 완료")
        else:
            logger.error("❌ MySQL 커넥션 풀 예열 실패 - 첫 요청 시 재시도")
        return self.pool.state.value

    async def shutdown(self):
        if self.pool.in_use:
            logger.warning(f"⚠️ 반납되지 않은 커넥션 {self.pool.in_use}개가 있는 상태로 종료")
        await self.pool.dispose()


class ApplicationLifecycle:
    """애플리케이션 생명주기 총괄 관리"""

    def __init__(self, pool: DatabasePool, config: ConfigManager):
        self.config = config
        self.db_manager = DatabaseManager(pool)

    async def startup(self) -> Dict[str, Any]:
        """애플리케이션 시작 시 초기화 작업"""
        logger.info(f"🚀 MyCoffee API 시작 - 환경: {self.config.system.environment}")

        for key, value in self.config.get_config_summary().items():
            logger.info(f"   {key}: {value}")

        return {
            "database": await self.db_manager.initialize(self.config.database.warmup),
        }

    async def shutdown(self):
        """애플리케이션 종료 시 정리 작업"""
        logger.info("🛑 MyCoffee API 종료")
        await self.db_manager.shutdown()


@asynccontextmanager
async def lifespan_manager(app):
    """FastAPI 애플리케이션 생명주기 관리"""
    lifecycle: ApplicationLifecycle = app.state.lifecycle
    try:
        await lifecycle.startup()
    except Exception as e:
        logger.error(f"❌ 시스템 시작 중 오류: {str(e)}")
        raise

    try:
        yield
    finally:
        await lifecycle.shutdown()
