"""
core/types.py 테스트

리포트 유형 / 포맷 Enum 테스트
"""

import pytest

from core.types import ReportFormat, ReportType


class TestReportType:
    """ReportType 테스트"""

    def test_is_str(self) -> None:
        """문자열 비교 가능"""
        assert ReportType.BALANCE_SHEET == "balance_sheet"
        assert isinstance(ReportType.CASH_FLOW, str)

    def test_from_value(self) -> None:
        """문자열 값으로 생성"""
        assert ReportType("income_comparison") is ReportType.INCOME_COMPARISON

    def test_values(self) -> None:
        """지원 유형"""
        assert {t.value for t in ReportType} == {
            "balance_sheet",
            "income_statement",
            "cash_flow",
            "income_comparison",
            "variance_report",
            "multi_currency_summary",
            "budget_progress",
        }

    def test_unknown_value(self) -> None:
        """알 수 없는 값"""
        with pytest.raises(ValueError):
            ReportType("profit_forecast")


class TestReportFormat:
    """ReportFormat 테스트"""

    def test_values(self) -> None:
        """지원 포맷"""
        assert [f.value for f in ReportFormat] == ["json", "csv", "pdf"]
