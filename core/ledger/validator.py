"""
균형 검증

통화별 합계가 0인지 확인하여 위반 목록을 반환.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Sequence

from core.ledger.errors import UnbalancedEntryError
from core.ledger.grouping import CurrencyGroup, CurrencyGrouper
from core.ledger.journal import JournalLine
from core.ledger.types import DEFAULT_AMOUNT_SCALE, balance_tolerance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceViolation:
    """통화별 불균형 기록"""

    currency: str
    total: Decimal
    tolerance: Decimal

    def describe(self) -> str:
        """사용자 표시용 메시지"""
        return f"Currency {self.currency} does not balance (sum: {self.total})"


class BalanceValidator:
    """통화별 균형 검증기

    허용 오차는 통화 최소 단위의 1e-9배.
    Decimal 합계에는 표현 오차가 없으므로 실질적으로 "정확히 0"을 요구함.

    Args:
        amount_scale: 기본 고정 소수 자릿수
        currency_scales: 통화별 자릿수 (예: {"JPY": 0})
    """

    def __init__(
        self,
        amount_scale: int = DEFAULT_AMOUNT_SCALE,
        currency_scales: Mapping[str, int] | None = None,
    ):
        self.amount_scale = amount_scale
        self.currency_scales = dict(currency_scales or {})
        self._grouper = CurrencyGrouper()

    def scale_for(self, currency: str) -> int:
        """통화의 고정 소수 자릿수"""
        return self.currency_scales.get(currency, self.amount_scale)

    def tolerance_for(self, currency: str) -> Decimal:
        """통화의 허용 오차"""
        return balance_tolerance(self.scale_for(currency))

    def validate(self, groups: Mapping[str, CurrencyGroup]) -> list[BalanceViolation]:
        """그룹별 합계 검증

        Args:
            groups: CurrencyGrouper.group() 결과

        Returns:
            위반 목록 (그룹 순서). 빈 목록이면 완전 균형.
        """
        violations: list[BalanceViolation] = []

        for currency, group in groups.items():
            tolerance = self.tolerance_for(currency)
            if group.total.copy_abs() > tolerance:
                violations.append(BalanceViolation(
                    currency=currency,
                    total=group.total,
                    tolerance=tolerance,
                ))

        return violations

    def validate_lines(self, lines: Sequence[JournalLine]) -> list[BalanceViolation]:
        """라인 목록을 그룹핑 후 검증"""
        return self.validate(self._grouper.group(lines))

    def is_balanced(self, lines: Sequence[JournalLine]) -> bool:
        """모든 통화가 균형인지 여부"""
        return not self.validate_lines(lines)

    def ensure_balanced(self, lines: Sequence[JournalLine]) -> None:
        """분개 저장 전 균형 검증

        Raises:
            UnbalancedEntryError: 불균형 통화가 하나라도 있는 경우
        """
        violations = self.validate_lines(lines)
        if violations:
            logger.warning(
                "불균형 분개 거부",
                extra={"currencies": [v.currency for v in violations]},
            )
            raise UnbalancedEntryError(violations)
