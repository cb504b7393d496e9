"""
저장 프로시저 게이트웨이
- 요청 필드를 이름/타입이 지정된 프로시저 파라미터로 바인딩
- OUT 파라미터는 MySQL 세션 변수(@p_xxx)로 선언 후 SELECT 로 회수
- CALL 은 드라이버 커서로 실행해 모든 결과 집합(nextset)과 문장별 행 수를 수집
- 결과 행 / 영향받은 행 수 / OUT 값을 ProcedureResult 로 정규화
- 단순 SQL(SELECT/INSERT) 실행도 동일한 커넥션 규약으로 처리
"""

import re
import time
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar

import aiomysql
from sqlalchemy import text
from sqlalchemy.engine import Result
from sqlalchemy.exc import DBAPIError, SQLAlchemyError, StatementError
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.sql.elements import TextClause
from sqlalchemy.types import TypeEngine

from ..database.mysql_connection import DatabasePool
from ..errors import GatewayError, GatewayErrorKind

logger = logging.getLogger(__name__)

T = TypeVar('T')

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# 커넥션 단절로 간주하는 MySQL 클라이언트 오류 코드
_DISCONNECT_ERRNOS = {2002, 2003, 2006, 2013, 2055}


@dataclass(frozen=True)
class ProcParam:
    """프로시저 입력 파라미터 (이름, SQL 타입, 요청 필드, 기본값)"""
    name: str
    type_: TypeEngine
    field: Optional[str] = None
    default: Any = None

    @property
    def source(self) -> str:
        """값을 읽어올 요청 필드명 (기본: p_ 접두사 제거)"""
        if self.field:
            return self.field
        return self.name[2:] if self.name.startswith("p_") else self.name

    def check(self, value: Any) -> Any:
        """SQL 타입에 맞지 않는 값은 드라이버에 넘기기 전에 거부"""
        if value is None:
            return None
        try:
            python_type = self.type_.python_type
        except NotImplementedError:
            return value
        if not isinstance(value, python_type):
            raise GatewayError(
                GatewayErrorKind.VALIDATION,
                f"파라미터 타입 오류: {self.name} ({python_type.__name__} 필요)",
            )
        return value


@dataclass(frozen=True)
class ProcedureSpec:
    """저장 프로시저 정의"""
    name: str
    inputs: Tuple[ProcParam, ...] = ()
    outputs: Tuple[str, ...] = ()

    def __post_init__(self):
        # 프로시저명과 OUT 변수명은 SQL 문에 직접 들어가므로 식별자만 허용
        for identifier in (self.name, *(p.name for p in self.inputs), *self.outputs):
            if not _IDENTIFIER.match(identifier):
                raise ValueError(f"Invalid SQL identifier: {identifier!r}")

    def call_sql(self) -> str:
        """드라이버(pyformat) 형식의 CALL 문"""
        args = [f"%({p.name})s" for p in self.inputs] + [f"@{name}" for name in self.outputs]
        return f"CALL {self.name}({', '.join(args)})"

    def reset_outputs_statement(self) -> TextClause:
        # 풀에서 재사용된 커넥션에 이전 요청의 OUT 값이 남지 않도록 초기화
        return text("SET " + ", ".join(f"@{name} = NULL" for name in self.outputs))

    def select_outputs_statement(self) -> TextClause:
        return text("SELECT " + ", ".join(f"@{name} AS {name}" for name in self.outputs))

    def bind(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """요청 값 -> 파라미터 값 (누락된 값은 기본값 또는 NULL)"""
        values = {}
        for param in self.inputs:
            value = payload.get(param.source)
            values[param.name] = param.check(param.default if value is None else value)
        return values


@dataclass
class ProcedureResult:
    """프로시저 실행 결과

    recordsets 는 CALL 이 돌려준 모든 결과 집합, recordset 은 그 중 첫 번째.
    rows_affected 는 결과 집합마다 행 수, 마지막 항목은 프로시저 종료 OK 패킷의 영향받은 행 수.
    """
    output: Dict[str, Any] = field(default_factory=dict)
    recordset: List[Dict[str, Any]] = field(default_factory=list)
    rows_affected: List[int] = field(default_factory=list)
    recordsets: List[List[Dict[str, Any]]] = field(default_factory=list)


def _plain(value: Any) -> Any:
    # 세션 변수는 문자셋에 따라 bytes 로 돌아오기도 함
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return value


def _rows(result: Result) -> List[Dict[str, Any]]:
    if not result.returns_rows:
        return []
    return [{key: _plain(value) for key, value in row.items()} for row in result.mappings().all()]


async def _call_all_sets(conn: AsyncConnection, sql: str,
                         params: Mapping[str, Any]) -> Tuple[List[List[Dict[str, Any]]], List[int]]:
    """드라이버 커서로 CALL 실행 후 nextset 으로 남은 결과 집합까지 모두 읽음"""
    raw = await conn.get_raw_connection()
    recordsets: List[List[Dict[str, Any]]] = []
    counts: List[int] = []
    async with raw.driver_connection.cursor(aiomysql.DictCursor) as cursor:
        await cursor.execute(sql, dict(params))
        while True:
            if cursor.description:
                rows = await cursor.fetchall()
                recordsets.append([{key: _plain(value) for key, value in row.items()} for row in rows])
            counts.append(max(cursor.rowcount, 0))
            if not await cursor.nextset():
                break
    return recordsets, counts


def _is_disconnect(exc: BaseException) -> bool:
    """커넥션을 더 이상 쓸 수 없는 오류인지 (SQLAlchemy 래핑 / 드라이버 직접 오류 모두)"""
    if isinstance(exc, DBAPIError):
        if exc.connection_invalidated:
            return True
        source = exc.orig
    elif isinstance(exc, aiomysql.Error):
        source = exc
    else:
        return False
    args = getattr(source, "args", ())
    return bool(args) and args[0] in _DISCONNECT_ERRNOS


def translate_error(exc: BaseException) -> GatewayError:
    """데이터 계층 예외 -> GatewayError"""
    if isinstance(exc, GatewayError):
        return exc

    if isinstance(exc, asyncio.TimeoutError):
        return GatewayError(GatewayErrorKind.TIMEOUT, "데이터베이스 응답 시간이 초과되었습니다")

    if _is_disconnect(exc):
        return GatewayError(GatewayErrorKind.CONNECTIVITY, "데이터베이스 연결이 끊어졌습니다")

    if isinstance(exc, DBAPIError):
        return GatewayError(GatewayErrorKind.EXECUTION, str(exc.orig) if exc.orig is not None else str(exc))

    if isinstance(exc, StatementError):
        # DBAPI 호출 전 파라미터 변환 단계에서 발생한 오류
        return GatewayError(GatewayErrorKind.VALIDATION, f"파라미터 바인딩 실패: {exc.orig or exc}")

    if isinstance(exc, (SQLAlchemyError, aiomysql.Error)):
        return GatewayError(GatewayErrorKind.EXECUTION, str(exc))

    return GatewayError(GatewayErrorKind.EXECUTION, str(exc) or exc.__class__.__name__)


class ProcedureGateway:
    """커넥션 획득 -> 실행 -> 커밋/롤백 -> 반납 을 한 곳에서 처리"""

    def __init__(self, pool: DatabasePool, timeout: Optional[float] = None):
        self.pool = pool
        self.timeout = timeout if timeout is not None else pool.config.query_timeout

    async def _run(self, label: str, work: Callable[[AsyncConnection], Awaitable[T]]) -> T:
        started = time.monotonic()
        try:
            async with self.pool.acquire() as conn:
                try:
                    outcome = await asyncio.wait_for(work(conn), timeout=self.timeout)
                    await conn.commit()
                except asyncio.TimeoutError:
                    # 서버에서 아직 실행 중일 수 있으므로 풀로 돌려보내지 않음
                    await conn.invalidate()
                    raise
                except BaseException as e:
                    if _is_disconnect(e):
                        await conn.invalidate()
                    else:
                        await self._rollback(conn)
                    raise
        except Exception as e:
            error = translate_error(e)
            elapsed = (time.monotonic() - started) * 1000
            logger.warning(f"⚠️ {label} 실패 ({error.kind.value}, {elapsed:.1f}ms): {error.message}")
            if error is e:
                raise
            raise error from e

        elapsed = (time.monotonic() - started) * 1000
        logger.info(f"✅ {label} 완료 ({elapsed:.1f}ms)")
        return outcome

    @staticmethod
    async def _rollback(conn: AsyncConnection):
        try:
            await conn.rollback()
        except Exception as e:
            logger.warning(f"⚠️ 롤백 실패: {str(e)}")

    async def call_procedure(self, spec: ProcedureSpec, payload: Mapping[str, Any]) -> ProcedureResult:
        """저장 프로시저 호출"""
        values = spec.bind(payload)

        async def work(conn: AsyncConnection) -> ProcedureResult:
            if spec.outputs:
                await conn.execute(spec.reset_outputs_statement())
            if not conn.in_transaction():
                # 드라이버 커서 실행은 트랜잭션을 자동 시작하지 않으므로 커밋 대상이 되도록 명시
                await conn.begin()

            recordsets, rows_affected = await _call_all_sets(conn, spec.call_sql(), values)

            output: Dict[str, Any] = {}
            if spec.outputs:
                out = await conn.execute(spec.select_outputs_statement())
                row = out.mappings().first()
                output = {name: _plain(row[name]) if row is not None else None for name in spec.outputs}

            return ProcedureResult(
                output=output,
                recordset=recordsets[0] if recordsets else [],
                rows_affected=rows_affected,
                recordsets=recordsets,
            )

        logger.debug(f"📞 프로시저 호출: {spec.name} ({len(values)}개 파라미터)")
        return await self._run(f"프로시저 {spec.name}", work)

    async def fetch_rows(self, statement: str, params: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """단순 SELECT 실행"""

        async def work(conn: AsyncConnection) -> List[Dict[str, Any]]:
            result = await conn.execute(text(statement), dict(params or {}))
            return _rows(result)

        return await self._run("SELECT", work)

    async def insert_row(self, statement: str, params: Mapping[str, Any]) -> Optional[int]:
        """단순 INSERT 실행 후 생성된 ID 반환"""

        async def work(conn: AsyncConnection) -> Optional[int]:
            result = await conn.execute(text(statement), dict(params))
            return result.lastrowid

        return await self._run("INSERT", work)
