"""
타임존 유틸리티

내부 저장: UTC 원칙 준수를 위한 헬퍼 함수
캐시 만료 시각 비교는 모두 tz-aware UTC datetime으로 수행.
"""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)

    datetime.now(timezone.utc)의 축약형.
    ReportCacheStore의 기본 clock으로 사용됨.

    Returns:
        현재 UTC 시간 (tzinfo=timezone.utc)
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """datetime을 UTC tz-aware로 정규화

    Args:
        dt: datetime 객체 (naive면 UTC로 간주)

    Returns:
        UTC 타임존의 datetime

    Example:
        >>> ensure_utc(datetime(2026, 2, 20, 16, 0, 0)).tzinfo
        datetime.timezone.utc
    """
    if dt.tzinfo is None:
        # naive datetime은 UTC로 간주
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso(dt: datetime | None) -> str | None:
    """UTC ISO-8601 문자열로 변환 (DB 저장용)

    고정 포맷(마이크로초 6자리)을 사용하므로 문자열 정렬 = 시간 정렬.

    Args:
        dt: datetime 객체 또는 None

    Returns:
        ISO 문자열 또는 None

    Example:
        >>> to_iso(datetime(2026, 1, 1, tzinfo=timezone.utc))
        '2026-01-01T00:00:00.000000+00:00'
    """
    if dt is None:
        return None
    return ensure_utc(dt).isoformat(timespec="microseconds")


def from_iso(value: str | None) -> datetime | None:
    """ISO-8601 문자열을 UTC datetime으로 변환

    Args:
        value: ISO 문자열 또는 None

    Returns:
        UTC datetime 또는 None
    """
    if value is None:
        return None
    return ensure_utc(datetime.fromisoformat(value))
