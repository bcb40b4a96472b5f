"""
Ledger 타입 정의

EmptyAmountPolicy 등 Ledger 시스템에서 사용하는 Enum과 상수 정의
"""

from decimal import (
    MAX_EMAX,
    MIN_EMIN,
    Context,
    Decimal,
    DivisionByZero,
    Inexact,
    InvalidOperation,
    Overflow,
)
from enum import Enum

from core.constants import AmountPrecision, BalanceTolerance, Defaults


ZERO = Decimal("0")

DEFAULT_AMOUNT_SCALE: int = Defaults.AMOUNT_SCALE


class EmptyAmountPolicy(str, Enum):
    """빈 금액 판정 정책

    자동 균형(auto-balance)의 "빈 라인" 판정 기준.
    str을 상속하여 설정 파일 값과 직접 매핑 가능.
    """

    # 금액 미입력(None)만 빈 라인으로 취급 (0은 실제 금액)
    UNSET_ONLY = "unset_only"

    # 미입력 또는 0을 빈 라인으로 취급 (기존 폼 동작, 음수는 항상 실제 금액)
    UNSET_OR_ZERO = "unset_or_zero"


def exact_context() -> Context:
    """반올림 없는 금액 연산 컨텍스트

    기본 컨텍스트(28자리)는 큰 금액 합계를 조용히 반올림함.
    이 컨텍스트는 AmountPrecision.MAX_DIGITS 자리까지 정확히 계산하고
    그 이상은 Inexact 예외로 알림.
    """
    return Context(
        prec=AmountPrecision.MAX_DIGITS,
        Emax=MAX_EMAX,
        Emin=MIN_EMIN,
        traps=[InvalidOperation, DivisionByZero, Overflow, Inexact],
    )


def minor_unit(scale: int) -> Decimal:
    """통화 최소 단위 (예: scale=2 → 0.01)"""
    return Decimal(1).scaleb(-scale)


def balance_tolerance(scale: int) -> Decimal:
    """균형 판정 허용 오차 (최소 단위의 1e-9배)

    표현 오차 흡수용이며 실제 불균형을 허용하기 위한 값이 아님.
    """
    return minor_unit(scale) * Decimal(BalanceTolerance.MINOR_UNIT_FACTOR)
