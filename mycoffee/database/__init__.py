"""데이터베이스 패키지"""

from .mysql_connection import DatabasePool, PoolState

__all__ = ['DatabasePool', 'PoolState']
