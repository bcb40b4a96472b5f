"""
복식부기 일관성 엔진 (Ledger Consistency)

다중 통화 분개의 통화별 균형(합계 = 0)을 보장하는 모듈.
- CurrencyGrouper: 통화별 그룹핑 및 Decimal 합계
- BalanceValidator: 통화별 불균형 검출
- AutoBalanceEngine: 빈 라인 1개를 가진 초안의 자동 균형

사용 예시:
```python
from core.ledger import AutoBalanceEngine, JournalLine, PreconditionError

engine = AutoBalanceEngine()

try:
    result = engine.auto_balance(draft_lines)
except PreconditionError as e:
    print(e.reason)  # "must have exactly one empty line"
else:
    draft_lines = result.lines
```
"""

from core.ledger.auto_balance import AutoBalanceEngine, AutoBalanceResult
from core.ledger.errors import (
    AmountPrecisionError,
    LedgerError,
    PostValidationError,
    PreconditionError,
    UnbalancedEntryError,
)
from core.ledger.grouping import CurrencyGroup, CurrencyGrouper
from core.ledger.journal import JournalLine, is_empty_amount, to_amount
from core.ledger.types import EmptyAmountPolicy
from core.ledger.validator import BalanceValidator, BalanceViolation

__all__ = [
    # 핵심 클래스
    "AutoBalanceEngine",
    "AutoBalanceResult",
    "BalanceValidator",
    "BalanceViolation",
    "CurrencyGrouper",
    "CurrencyGroup",
    "JournalLine",
    # Enum
    "EmptyAmountPolicy",
    # 함수
    "is_empty_amount",
    "to_amount",
    # 예외
    "LedgerError",
    "AmountPrecisionError",
    "PreconditionError",
    "PostValidationError",
    "UnbalancedEntryError",
]
