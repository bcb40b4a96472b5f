"""
타입 정의 모듈

리포트 캐시 등에서 공용으로 사용하는 Enum 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class ReportType(str, Enum):
    """리포트 유형

    캐시 서명(signature)의 접두사로 사용됨.
    """

    BALANCE_SHEET = "balance_sheet"
    INCOME_STATEMENT = "income_statement"
    CASH_FLOW = "cash_flow"
    INCOME_COMPARISON = "income_comparison"
    VARIANCE_REPORT = "variance_report"
    MULTI_CURRENCY_SUMMARY = "multi_currency_summary"
    BUDGET_PROGRESS = "budget_progress"


class ReportFormat(str, Enum):
    """리포트 결과 포맷"""

    JSON = "json"
    CSV = "csv"
    PDF = "pdf"
