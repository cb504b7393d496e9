"""
MyCoffee API 설정 관리
- 환경별 설정 관리 (개발/운영/테스트)
- DB 연결 풀 / 웹 서버 / 로깅 설정
- 설정 검증
"""

import os
import logging
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field
from pathlib import Path
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENVIRONMENTS = ("development", "production", "testing")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    file_path: str = ''
    max_bytes: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5
    console_enabled: bool = True


@dataclass
class DatabaseConfig:
    """데이터베이스 설정"""
    host: str = "localhost"
    port: int = 3306
    user: str = ""
    password: str = ""
    name: str = ""
    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30  # 커넥션 대기 시간 (초)
    pool_recycle: int = 3600  # 커넥션 재활용 시간 (1시간)
    query_timeout: float = 15.0  # 프로시저 실행 제한 시간 (초)
    warmup: bool = False

    @property
    def url(self) -> str:
        return (
            f"mysql+aiomysql://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.name}?charset=utf8mb4"
        )


@dataclass
class WebServerConfig:
    """웹 서버 설정"""
    host: str = "0.0.0.0"
    port: int = 3000
    reload: bool = False
    workers: int = 1
    cors_enabled: bool = True
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class SystemConfig:
    """시스템 설정"""
    environment: str = "development"  # development, production, testing
    debug: bool = True

    @property
    def expose_stack(self) -> bool:
        """오류 응답에 스택 트레이스 포함 여부 (운영 환경에서는 항상 False)"""
        return self.environment != "production" and self.debug


class ConfigManager:
    """설정 관리자"""

    def __init__(self, env_file: Optional[str] = None):
        self._env_file = env_file or '.env'
        self._load_environment()
        self._initialize_configs()

    def _load_environment(self):
        """환경 변수 로드"""
        if Path(self._env_file).exists():
            load_dotenv(self._env_file)
            logger.info(f"✅ 환경 설정 로드 완료: {self._env_file}")
        else:
            logger.warning(f"⚠️ 환경 파일 없음: {self._env_file} (기본값 사용)")

    def _initialize_configs(self):
        """설정 초기화"""
        # ENVIRONMENT 우선, 기존 배포 호환을 위해 NODE_ENV 도 인식
        environment = os.getenv('ENVIRONMENT', os.getenv('NODE_ENV', 'development')).lower()

        self.logging = LoggingConfig(
            level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            file_path=os.getenv('LOG_FILE', ''),
            console_enabled=_env_bool('LOG_CONSOLE', 'true'),
        )

        self.database = DatabaseConfig(
            host=os.getenv('DB_HOST', 'localhost'),
            port=int(os.getenv('DB_PORT', '3306')),
            user=os.getenv('DB_USER', ''),
            password=os.getenv('DB_PASS', ''),
            name=os.getenv('DB_NAME', ''),
            pool_size=int(os.getenv('DB_POOL_SIZE', '10')),
            max_overflow=int(os.getenv('DB_MAX_OVERFLOW', '20')),
            pool_timeout=int(os.getenv('DB_POOL_TIMEOUT', '30')),
            pool_recycle=int(os.getenv('DB_POOL_RECYCLE', '3600')),
            query_timeout=float(os.getenv('DB_QUERY_TIMEOUT', '15')),
            warmup=_env_bool('DB_WARMUP', 'false'),
        )

        cors_origins = os.getenv('CORS_ORIGINS', '*')
        self.webserver = WebServerConfig(
            host=os.getenv('HOST', '0.0.0.0'),
            port=int(os.getenv('PORT', '3000')),
            reload=_env_bool('RELOAD', 'false'),
            workers=int(os.getenv('WORKERS', '1')),
            cors_enabled=_env_bool('CORS_ENABLED', 'true'),
            cors_origins=[origin.strip() for origin in cors_origins.split(',') if origin.strip()],
        )

        self.system = SystemConfig(
            environment=environment,
            debug=_env_bool('DEBUG', 'false' if environment == 'production' else 'true'),
        )

        logger.info(f"⚙️ 설정 초기화 완료 - 환경: {environment}, DB: {self.database.host}:{self.database.port}")

    def get_config_summary(self) -> Dict[str, Any]:
        """설정 요약 정보 반환 (비밀번호 제외)"""
        return {
            "environment": self.system.environment,
            "debug": self.system.debug,
            "webserver_port": self.webserver.port,
            "database": {
                "host": self.database.host,
                "port": self.database.port,
                "name": self.database.name,
                "pool_size": self.database.pool_size,
                "query_timeout": self.database.query_timeout,
            },
        }

    def validate_config(self) -> Dict[str, Any]:
        """설정 유효성 검증"""
        issues = []
        warnings = []

        if self.system.environment not in ENVIRONMENTS:
            issues.append(f"알 수 없는 환경: {self.system.environment}")

        if not 0 < self.webserver.port < 65536:
            issues.append(f"포트가 유효하지 않음: {self.webserver.port}")

        if self.database.query_timeout <= 0:
            issues.append(f"쿼리 제한 시간이 유효하지 않음: {self.database.query_timeout}")

        if self.database.pool_size <= 0:
            issues.append(f"커넥션 풀 크기가 유효하지 않음: {self.database.pool_size}")

        if not self.is_testing():
            if not self.database.name:
                issues.append("DB_NAME 이 설정되지 않음")
            if not self.database.user:
                issues.append("DB_USER 가 설정되지 않음")

        if self.is_production() and self.system.debug:
            warnings.append("운영 환경에서 디버그 모드가 활성화됨 (스택 트레이스는 노출되지 않음)")

        if self.is_production() and "*" in self.webserver.cors_origins:
            warnings.append("운영 환경에서 모든 CORS Origin 허용")

        return {
            "valid": len(issues) == 0,
            "issues": issues,
            "warnings": warnings
        }

    def is_production(self) -> bool:
        """운영 환경 여부 확인"""
        return self.system.environment == 'production'

    def is_development(self) -> bool:
        """개발 환경 여부 확인"""
        return self.system.environment == 'development'

    def is_testing(self) -> bool:
        """테스트 환경 여부 확인"""
        return self.system.environment == 'testing'


# 전역 설정 관리자 인스턴스
config_manager = ConfigManager()
