"""
타임존 유틸리티 테스트
"""

from datetime import datetime, timedelta, timezone

from core.utils.timezone import ensure_utc, from_iso, now_utc, to_iso


class TestNowUtc:
    """now_utc 테스트"""

    def test_is_aware_utc(self) -> None:
        """UTC tz-aware"""
        assert now_utc().tzinfo == timezone.utc


class TestEnsureUtc:
    """ensure_utc 테스트"""

    def test_naive_treated_as_utc(self) -> None:
        """naive는 UTC로 간주"""
        result = ensure_utc(datetime(2024, 1, 1, 9, 0))

        assert result == datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)

    def test_converts_offset(self) -> None:
        """다른 타임존은 UTC로 변환"""
        kst = timezone(timedelta(hours=9))
        result = ensure_utc(datetime(2024, 1, 1, 9, 0, tzinfo=kst))

        assert result.tzinfo == timezone.utc
        assert result.hour == 0


class TestIsoConversion:
    """to_iso / from_iso 테스트"""

    def test_fixed_format(self) -> None:
        """마이크로초 6자리 고정"""
        assert to_iso(datetime(2026, 1, 1, tzinfo=timezone.utc)) == (
            "2026-01-01T00:00:00.000000+00:00"
        )

    def test_none(self) -> None:
        """None 유지"""
        assert to_iso(None) is None
        assert from_iso(None) is None

    def test_round_trip(self) -> None:
        """문자열 변환 후 복원"""
        value = datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=timezone.utc)

        assert from_iso(to_iso(value)) == value

    def test_string_order_matches_time_order(self) -> None:
        """문자열 정렬 = 시간 정렬"""
        earlier = datetime(2024, 1, 1, 0, 0, 0, 999999, tzinfo=timezone.utc)
        later = datetime(2024, 1, 1, 0, 0, 1, tzinfo=timezone.utc)

        assert to_iso(earlier) < to_iso(later)
