"""
MySQL 커넥션 풀 관리
- 최초 요청 시 비동기 엔진(커넥션 풀) 지연 생성
- 생성 실패 시 미초기화 상태로 되돌려 다음 요청에서 재시도
- 커넥션 획득/반납 짝 보장 (체크아웃/체크인 카운터)
"""

import asyncio
import logging
from enum import Enum
from typing import AsyncGenerator, Callable, Optional
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncConnection

from ..config_manager import DatabaseConfig
from ..errors import GatewayError, GatewayErrorKind

logger = logging.getLogger(__name__)


class PoolState(str, Enum):
    """커넥션 풀 상태"""
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class DatabasePool:
    """프로세스 전역에서 공유되는 커넥션 풀 핸들

    앱 팩토리에서 한 번 생성되어 app.state 에 보관되며 핸들러에는 의존성으로 주입된다.
    """

    def __init__(self, config: DatabaseConfig,
                 engine_factory: Callable[..., AsyncEngine] = create_async_engine):
        self.config = config
        self._engine_factory = engine_factory
        self._engine: Optional[AsyncEngine] = None
        self._lock = asyncio.Lock()
        self.checkouts = 0
        self.checkins = 0

    @property
    def state(self) -> PoolState:
        return PoolState.READY if self._engine is not None else PoolState.UNINITIALIZED

    @property
    def in_use(self) -> int:
        """현재 대여 중인 커넥션 수"""
        return self.checkouts - self.checkins

    def _create_engine(self) -> AsyncEngine:
        return self._engine_factory(
            self.config.url,
            echo=False,
            pool_size=self.config.pool_size,
            max_overflow=self.config.max_overflow,
            pool_timeout=self.config.pool_timeout,
            pool_recycle=self.config.pool_recycle,
            pool_pre_ping=True,  # 끊어진 커넥션 자동 감지
        )

    async def _ensure_engine(self) -> AsyncEngine:
        """엔진 지연 생성 (동시 최초 요청에도 한 번만 생성)"""
        engine = self._engine
        if engine is not None:
            return engine

        async with self._lock:
            if self._engine is not None:
                return self._engine

            logger.info(f"🔌 MySQL 커넥션 풀 생성: {self.config.host}:{self.config.port}/{self.config.name}")
            try:
                engine = self._create_engine()
            except Exception as e:
                logger.error(f"❌ MySQL 엔진 생성 실패: {str(e)}")
                raise GatewayError(GatewayErrorKind.CONNECTIVITY, "데이터베이스 연결에 실패했습니다") from e

            try:
                conn = await engine.connect()
                try:
                    await conn.execute(text("SELECT 1"))
                finally:
                    await conn.close()
            except Exception as e:
                logger.error(f"❌ MySQL 연결 테스트 실패: {str(e)}")
                await engine.dispose()
                raise GatewayError(GatewayErrorKind.CONNECTIVITY, "데이터베이스 연결에 실패했습니다") from e

            self._engine = engine
            logger.info("✅ MySQL 커넥션 풀 준비 완료")
            return engine

    async def _reset(self, engine: AsyncEngine):
        """실패한 엔진을 폐기하고 미초기화 상태로 전환"""
        async with self._lock:
            if self._engine is engine:
                self._engine = None
        try:
            await engine.dispose()
        except Exception as e:
            logger.warning(f"⚠️ 엔진 폐기 중 오류: {str(e)}")
        logger.warning("⚠️ MySQL 커넥션 풀 초기화 해제 - 다음 요청에서 재연결")

    @asynccontextmanager
    async def acquire(self) -> AsyncGenerator[AsyncConnection, None]:
        """커넥션 대여 컨텍스트 매니저 (모든 종료 경로에서 반납)"""
        engine = await self._ensure_engine()

        try:
            conn = await engine.connect()
        except PoolTimeoutError as e:
            # 풀 고갈: 엔진은 정상이므로 초기화하지 않음
            logger.error(f"❌ 커넥션 대기 시간 초과 (풀 크기 {self.config.pool_size}+{self.config.max_overflow})")
            raise GatewayError(GatewayErrorKind.CONNECTIVITY, "사용 가능한 데이터베이스 연결이 없습니다") from e
        except Exception as e:
            logger.error(f"❌ 커넥션 획득 실패: {str(e)}")
            await self._reset(engine)
            raise GatewayError(GatewayErrorKind.CONNECTIVITY, "데이터베이스 연결에 실패했습니다") from e

        self.checkouts += 1
        try:
            yield conn
        finally:
            try:
                await conn.close()
            finally:
                self.checkins += 1

    async def warmup(self) -> bool:
        """시작 시 풀 미리 생성 (실패해도 지연 생성으로 재시도)"""
        try:
            await self._ensure_engine()
            return True
        except GatewayError:
            return False

    async def dispose(self):
        """종료 시 풀 정리"""
        async with self._lock:
            engine, self._engine = self._engine, None
        if engine is not None:
            await engine.dispose()
            logger.info("🛑 MySQL 커넥션 풀 종료")
