"""
Ledger 예외 정의

자동 균형 및 균형 검증 실패를 구체적인 타입으로 전달.
호출자가 초안을 수정해서 해결하는 오류이므로 자동 재시도하지 않음.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.ledger.validator import BalanceViolation


class LedgerError(Exception):
    """Ledger 오류 베이스 클래스"""
    pass


class PreconditionError(LedgerError):
    """자동 균형 사전 조건 불충족

    라인이 2개 미만이거나 빈 라인이 정확히 1개가 아닌 경우 발생.
    """

    INSUFFICIENT_LINES = "insufficient lines"
    WRONG_EMPTY_COUNT = "must have exactly one empty line"

    def __init__(self, reason: str, line_count: int, empty_count: int):
        self.reason = reason
        self.line_count = line_count
        self.empty_count = empty_count
        super().__init__(
            f"{reason} (lines={line_count}, empty={empty_count})"
        )


class AmountPrecisionError(LedgerError):
    """금액 연산 정밀도 초과

    통화 합계나 균형 금액이 AmountPrecision.MAX_DIGITS 유효 자릿수를
    넘어 정확히 계산할 수 없는 경우 발생.
    """

    def __init__(self, currency: str, max_digits: int):
        self.currency = currency
        self.max_digits = max_digits
        super().__init__(
            f"Currency {currency} amount exceeds {max_digits} significant digits"
        )


class _ViolationError(LedgerError):
    """통화별 불균형 목록을 담는 오류"""

    def __init__(self, message: str, violations: list[BalanceViolation]):
        self.violations = violations
        super().__init__(f"{message}: {', '.join(self.currencies)}")

    @property
    def currencies(self) -> list[str]:
        """불균형 통화 코드 목록 (그룹 순서)"""
        return [violation.currency for violation in self.violations]

    @property
    def messages(self) -> list[str]:
        """통화별 오류 메시지 목록"""
        return [violation.describe() for violation in self.violations]


class PostValidationError(_ViolationError):
    """자동 균형 결과 재검증 실패

    균형 계산 후에도 합계가 0이 되지 않는 통화가 있는 경우 발생.
    (고정 소수 자릿수를 넘는 입력의 절사 잔여 등)
    입력 라인은 변경되지 않은 상태로 유지됨.
    """

    def __init__(self, violations: list[BalanceViolation]):
        super().__init__("Auto-balance did not converge", violations)


class UnbalancedEntryError(_ViolationError):
    """분개 저장 전 균형 검증 실패"""

    def __init__(self, violations: list[BalanceViolation]):
        super().__init__("Journal entry must be balanced", violations)
