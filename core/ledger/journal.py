"""
분개 라인 모델

자동 균형 계산의 입력/출력이 되는 JournalLine 정의.
금액은 반드시 Decimal (float 누적 금지).
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from core.ledger.types import EmptyAmountPolicy


def to_amount(value: Any) -> Decimal | None:
    """입력 값을 Decimal 금액으로 변환

    None은 미입력 표시로 그대로 유지.
    float은 str()을 거쳐 변환하여 이진 부동소수점 오차를 들여오지 않음.

    Args:
        value: Decimal, int, str, float 또는 None

    Returns:
        Decimal 금액 또는 None

    Raises:
        TypeError: 지원하지 않는 타입 (bool 포함)
        ValueError: 숫자로 해석할 수 없는 문자열, NaN/Infinity

    Example:
        >>> to_amount(0.1)
        Decimal('0.1')
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError("bool은 금액으로 사용할 수 없습니다")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"금액으로 변환할 수 없습니다: {value!r}") from e
    else:
        raise TypeError(f"지원하지 않는 금액 타입입니다: {type(value).__name__}")

    if not amount.is_finite():
        raise ValueError(f"유한한 금액이 아닙니다: {value!r}")
    return amount


def is_empty_amount(
    amount: Decimal | None,
    policy: EmptyAmountPolicy = EmptyAmountPolicy.UNSET_ONLY,
) -> bool:
    """빈 금액 여부 판정

    - UNSET_ONLY: None만 빈 값
    - UNSET_OR_ZERO: None 또는 0 (음수는 회계적 의미가 있으므로 빈 값 아님)

    Args:
        amount: 금액
        policy: 빈 금액 판정 정책

    Returns:
        빈 금액이면 True
    """
    if amount is None:
        return True
    if policy == EmptyAmountPolicy.UNSET_OR_ZERO:
        return amount.is_zero()
    return False


@dataclass
class JournalLine:
    """분개 라인

    한 계정, 한 통화에 대한 부호 있는 금액 이동.
    예: 1000 USD 입금
        - 현금 라인: amount=1000, currency="USD"
        - 수익 라인: amount=-1000, currency="USD"
    """

    account_id: str
    amount: Decimal | None  # None = 미입력
    currency: str  # USD, CNY, EUR, ... (대소문자 그대로 사용)

    tags: list[str] = field(default_factory=list)

    # 저장된 라인만 ID 보유
    id: str | None = None

    # 자동 균형이 생성한 라인 표시
    is_system_generated: bool = False

    # 메타
    remarks: str | None = None

    def __post_init__(self) -> None:
        self.amount = to_amount(self.amount)

    def is_empty(self, policy: EmptyAmountPolicy = EmptyAmountPolicy.UNSET_ONLY) -> bool:
        """빈 라인 여부"""
        return is_empty_amount(self.amount, policy)

    @property
    def signed_amount(self) -> Decimal:
        """합계 계산용 금액 (미입력은 0)"""
        return self.amount if self.amount is not None else Decimal("0")
