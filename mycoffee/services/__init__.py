"""게이트웨이 서비스 모듈"""

from .procedure_gateway import ProcParam, ProcedureSpec, ProcedureResult, ProcedureGateway, translate_error

__all__ = ['ProcParam', 'ProcedureSpec', 'ProcedureResult', 'ProcedureGateway', 'translate_error']
