"""
유틸리티 패키지

정규화 직렬화, 타임존 처리 등 공통 유틸리티
"""

from core.utils.canonical import (
    canonical_key,
    canonical_value,
    from_canonical,
    parameters_equal,
)
from core.utils.timezone import (
    ensure_utc,
    from_iso,
    now_utc,
    to_iso,
)

__all__ = [
    "canonical_key",
    "canonical_value",
    "from_canonical",
    "parameters_equal",
    "ensure_utc",
    "from_iso",
    "now_utc",
    "to_iso",
]
