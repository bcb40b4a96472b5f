"""
자동 균형 (Auto-balance)

빈 라인이 정확히 1개인 분개 초안의 빈 금액을 계산하여 채움.

처리 순서:
1. 사전 조건 검사 (라인 2개 이상, 빈 라인 정확히 1개)
2. 통화별 그룹핑 (빈 라인은 0으로 합산)
3. 빈 라인 = -(자기 통화 그룹 합계)
4. 나머지 통화 중 합계가 0이 아닌 그룹마다 시스템 라인 추가
5. 결과 재검증 (실패 시 PostValidationError, 입력은 변경되지 않음)

통화 간 환산은 하지 않음. 각 통화는 독립적으로 균형을 맞춤.
예: [USD 빈 라인, CNY -500, EUR -300]
    → USD 라인 = 0, CNY +500 / EUR +300 시스템 라인 추가
"""

import logging
from dataclasses import dataclass, field, replace
from decimal import ROUND_DOWN, Decimal, Inexact, InvalidOperation
from typing import Mapping, Sequence

from core.constants import AmountPrecision
from core.ledger.errors import AmountPrecisionError, PostValidationError, PreconditionError
from core.ledger.grouping import CurrencyGroup, CurrencyGrouper
from core.ledger.journal import JournalLine
from core.ledger.types import (
    DEFAULT_AMOUNT_SCALE,
    EmptyAmountPolicy,
    exact_context,
    minor_unit,
)
from core.ledger.validator import BalanceValidator

logger = logging.getLogger(__name__)


@dataclass
class AutoBalanceResult:
    """자동 균형 결과

    lines: 원래 순서 유지 + 시스템 생성 라인이 뒤에 추가된 새 목록
    filled_index: 금액이 채워진 (원래 빈) 라인의 인덱스
    created_indices: 새로 생성된 라인들의 인덱스
    """

    lines: list[JournalLine]
    filled_index: int
    created_indices: list[int] = field(default_factory=list)
    message: str = ""

    @property
    def success(self) -> bool:
        """성공 여부 (실패는 예외로 전달되므로 항상 True)"""
        return True


class AutoBalanceEngine:
    """자동 균형 엔진

    상태가 없는 순수 계산기. I/O, 시계, 난수를 사용하지 않으므로
    동일 입력에 대해 항상 동일한 결과를 반환함.

    Args:
        amount_scale: 기본 고정 소수 자릿수 (기본 4)
        currency_scales: 통화별 자릿수 (예: {"JPY": 0})
        empty_policy: 빈 금액 판정 정책

    사용 예시:
    ```python
    engine = AutoBalanceEngine()
    result = engine.auto_balance([
        JournalLine(account_id="cash", amount=Decimal("1000"), currency="USD"),
        JournalLine(account_id="income", amount=None, currency="USD"),
    ])
    result.lines[1].amount  # Decimal("-1000.0000")
    ```
    """

    def __init__(
        self,
        amount_scale: int = DEFAULT_AMOUNT_SCALE,
        currency_scales: Mapping[str, int] | None = None,
        empty_policy: EmptyAmountPolicy = EmptyAmountPolicy.UNSET_ONLY,
    ):
        self.empty_policy = empty_policy
        self._grouper = CurrencyGrouper()
        self._validator = BalanceValidator(amount_scale, currency_scales)

    def empty_indices(self, lines: Sequence[JournalLine]) -> list[int]:
        """빈 라인 인덱스 목록"""
        return [
            index
            for index, line in enumerate(lines)
            if line.is_empty(self.empty_policy)
        ]

    def can_auto_balance(self, lines: Sequence[JournalLine]) -> bool:
        """자동 균형 가능 여부 (사전 조건 충족 여부)"""
        return len(lines) >= 2 and len(self.empty_indices(lines)) == 1

    def auto_balance(self, lines: Sequence[JournalLine]) -> AutoBalanceResult:
        """빈 라인을 채우고 필요한 통화 라인을 생성

        입력 목록과 라인 객체는 변경하지 않고 새 목록을 반환.

        Args:
            lines: 분개 초안 라인 목록

        Returns:
            AutoBalanceResult

        Raises:
            PreconditionError: 라인 2개 미만 또는 빈 라인 수 != 1
            PostValidationError: 재검증에서 불균형 통화 발견
            AmountPrecisionError: 합계나 균형 금액이 정밀도 한도를 넘는 경우
        """
        empty_indices = self.empty_indices(lines)
        self._check_preconditions(lines, empty_indices)

        empty_index = empty_indices[0]
        empty_line = lines[empty_index]
        groups = self._grouper.group(lines)

        # 입력 보호: 라인 복사본 위에서만 작업
        candidate = [replace(line, tags=list(line.tags)) for line in lines]

        candidate[empty_index] = replace(
            candidate[empty_index],
            amount=self._balancing_amount(groups[empty_line.currency]),
        )

        created_indices: list[int] = []
        for currency, group in groups.items():
            if currency == empty_line.currency or group.total.is_zero():
                continue

            candidate.append(JournalLine(
                account_id=empty_line.account_id,
                amount=self._balancing_amount(group),
                currency=currency,
                tags=[],
                is_system_generated=True,
            ))
            created_indices.append(len(candidate) - 1)

        violations = self._validator.validate(self._grouper.group(candidate))
        if violations:
            logger.warning(
                "자동 균형 재검증 실패",
                extra={"currencies": [v.currency for v in violations]},
            )
            raise PostValidationError(violations)

        message = (
            f"Balanced {len(groups)} currency group(s): "
            f"filled line {empty_index}, created {len(created_indices)} line(s)"
        )
        logger.debug(
            "자동 균형 완료",
            extra={
                "filled_index": empty_index,
                "created_count": len(created_indices),
                "currency_count": len(groups),
            },
        )

        return AutoBalanceResult(
            lines=candidate,
            filled_index=empty_index,
            created_indices=created_indices,
            message=message,
        )

    def _check_preconditions(
        self,
        lines: Sequence[JournalLine],
        empty_indices: list[int],
    ) -> None:
        """사전 조건 검사"""
        if len(lines) < 2:
            raise PreconditionError(
                PreconditionError.INSUFFICIENT_LINES,
                line_count=len(lines),
                empty_count=len(empty_indices),
            )

        if len(empty_indices) != 1:
            raise PreconditionError(
                PreconditionError.WRONG_EMPTY_COUNT,
                line_count=len(lines),
                empty_count=len(empty_indices),
            )

    def _balancing_amount(self, group: CurrencyGroup) -> Decimal:
        """그룹 합계의 부호 반전 금액

        고정 자릿수를 넘는 값은 0 방향으로 절사(ROUND_DOWN).
        절사 잔여는 재검증에서 위반으로 드러남.
        """
        scale = self._validator.scale_for(group.currency)

        # 절사는 허용, 자릿수 초과는 InvalidOperation
        context = exact_context()
        context.traps[Inexact] = False
        try:
            amount = group.total.copy_negate().quantize(
                minor_unit(scale), rounding=ROUND_DOWN, context=context
            )
        except InvalidOperation as e:
            raise AmountPrecisionError(group.currency, AmountPrecision.MAX_DIGITS) from e

        # -0.0000 표시 방지
        if amount.is_zero():
            return amount.copy_abs()
        return amount
