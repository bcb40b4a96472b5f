"""
통화별 그룹핑

분개 라인을 통화 코드로 묶고 통화별 합계를 Decimal로 계산.
"""

from dataclasses import dataclass, field
from decimal import Decimal, DecimalException, localcontext
from typing import Sequence

from core.constants import AmountPrecision
from core.ledger.errors import AmountPrecisionError
from core.ledger.journal import JournalLine
from core.ledger.types import exact_context


@dataclass
class CurrencyGroup:
    """통화 그룹

    동일 통화 라인들의 인덱스(입력 순서)와 부호 있는 합계.
    """

    currency: str
    indices: list[int] = field(default_factory=list)
    total: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def line_count(self) -> int:
        """그룹에 속한 라인 수"""
        return len(self.indices)

    @property
    def is_balanced(self) -> bool:
        """합계가 정확히 0인지 여부"""
        return self.total.is_zero()


class CurrencyGrouper:
    """통화별 그룹핑

    - 그룹 키는 currency 필드 그대로 사용 (대소문자 정규화 없음)
    - 그룹 순서는 처음 등장한 순서
    - 미입력 금액은 0으로 합산
    - 합계는 반올림 없이 정확히 계산 (정밀도 초과 시 AmountPrecisionError)
    """

    def group(self, lines: Sequence[JournalLine]) -> dict[str, CurrencyGroup]:
        """라인을 통화별로 그룹핑

        Args:
            lines: 분개 라인 목록 (빈 라인 포함 가능)

        Returns:
            {통화: CurrencyGroup} (처음 등장 순서 유지, 빈 입력이면 빈 dict)

        Raises:
            AmountPrecisionError: 통화 합계가 정밀도 한도를 넘는 경우
        """
        groups: dict[str, CurrencyGroup] = {}

        with localcontext(exact_context()):
            for index, line in enumerate(lines):
                group = groups.get(line.currency)
                if group is None:
                    group = CurrencyGroup(currency=line.currency)
                    groups[line.currency] = group

                group.indices.append(index)
                try:
                    group.total += line.signed_amount
                except DecimalException as e:
                    raise AmountPrecisionError(
                        line.currency, AmountPrecision.MAX_DIGITS
                    ) from e

        return groups

    def totals(self, lines: Sequence[JournalLine]) -> dict[str, Decimal]:
        """통화별 합계만 반환"""
        return {
            currency: group.total
            for currency, group in self.group(lines).items()
        }
