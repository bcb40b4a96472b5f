"""
ReportCacheStore - 리포트 결과 캐시

비용이 큰 집계 리포트(재무상태표, 예산 차이 분석, 다중 통화 요약 등)의
결과를 정규화된 파라미터 서명(signature)으로 저장/조회.

규칙:
- 서명 = "{report_type}:" + 키 정렬된 "{key}:{value}" 를 "|"로 연결
- 조회 적중 조건: 같은 report_type + 파라미터 값 동등 + 미만료
- 저장은 항상 새 항목 추가 (덮어쓰기/중복 제거 없음)
- 동일 조건이면 가장 최근 created_at 항목 우선
- 저장소 장애는 CacheUnavailableError 그대로 전파 (재시도/우회 없음)
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Mapping
from uuid import uuid4

from core.constants import Defaults
from core.types import ReportFormat, ReportType
from core.utils.canonical import canonical_key, canonical_value, parameters_equal
from core.utils.timezone import ensure_utc, now_utc

if TYPE_CHECKING:
    from adapters.interfaces import IReportCacheRepository

logger = logging.getLogger(__name__)


DEFAULT_CACHE_TTL = timedelta(hours=Defaults.CACHE_TTL_HOURS)


class CacheUnavailableError(Exception):
    """캐시 저장소 사용 불가

    저장소(DB 등) 연결 실패 또는 쿼리 실패 시 저장소 구현체가 발생시킴.
    ReportCacheStore는 이 예외를 변환하지 않고 그대로 전파.
    """

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"Report cache unavailable during {operation}: {message}")


@dataclass(frozen=True)
class ReportCacheEntry:
    """리포트 캐시 항목

    signature는 report_type + parameters에서 파생되며 직접 지정하지 않음.
    (ReportCacheStore.put()이 생성)
    """

    entry_id: str
    scope: str
    report_type: ReportType
    signature: str
    parameters: dict[str, Any]
    result: Any
    format: ReportFormat
    size_bytes: int
    created_at: datetime
    expires_at: datetime | None  # None = 만료 없음

    def is_expired(self, now: datetime) -> bool:
        """만료 여부 (expires_at이 현재 이전이거나 같으면 만료)"""
        return self.expires_at is not None and self.expires_at <= now


@dataclass(frozen=True)
class CacheStats:
    """캐시 통계"""

    total_cached: int
    total_size_bytes: int
    by_type: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """API 응답용 dict 변환"""
        return {
            "total_cached": self.total_cached,
            "total_size_bytes": self.total_size_bytes,
            "by_type": dict(self.by_type),
        }


def signature_of(report_type: ReportType | str, parameters: Mapping[str, Any]) -> str:
    """리포트 캐시 서명 생성

    파라미터 삽입 순서와 무관하게 동일한 문자열을 생성.
    키는 JSON 문자열 리터럴로 감싸므로 키에 ":" 나 "|"가 있어도 모호하지 않음.

    Args:
        report_type: 리포트 유형
        parameters: 리포트 파라미터

    Returns:
        서명 문자열

    Raises:
        ValueError: 알 수 없는 report_type
        TypeError: 직렬화할 수 없는 파라미터 값

    Example:
        >>> signature_of(ReportType.BALANCE_SHEET, {"as_of": "2024-01-01"})
        'balance_sheet:"as_of":"2024-01-01"'
    """
    report_type = ReportType(report_type)
    body = "|".join(
        f"{canonical_key(key)}:{canonical_value(parameters[key])}"
        for key in sorted(parameters)
    )
    return f"{report_type.value}:{body}"


def serialized_size(result: Any) -> int:
    """결과 페이로드의 직렬화 크기 (UTF-8 바이트)"""
    return len(canonical_value(result).encode("utf-8"))


class ReportCacheStore:
    """리포트 캐시 저장소

    영속화는 IReportCacheRepository 구현체에 위임.
    프로세스 내 잠금은 사용하지 않음 (원자성은 저장소가 보장).

    Args:
        repository: 캐시 항목 저장소 (SQLite 또는 In-Memory)
        default_ttl: 기본 유효 기간 (기본 24시간)
        clock: 현재 시각 함수 (테스트에서 교체 가능)

    사용 예시:
    ```python
    store = ReportCacheStore(SQLiteReportCacheRepository(db))

    cached = await store.get(ReportType.BALANCE_SHEET, {"as_of": "2024-01-01"})
    if cached is None:
        result = await generate_balance_sheet(...)
        cached = await store.put(
            ReportType.BALANCE_SHEET,
            {"as_of": "2024-01-01"},
            result,
            scope=tenant_id,
        )
    ```
    """

    signature_of = staticmethod(signature_of)

    def __init__(
        self,
        repository: IReportCacheRepository,
        default_ttl: timedelta = DEFAULT_CACHE_TTL,
        clock: Callable[[], datetime] = now_utc,
    ):
        if default_ttl <= timedelta(0):
            raise ValueError("default_ttl은 0보다 커야 합니다")

        self.repository = repository
        self.default_ttl = default_ttl
        self._clock = clock
        self._last_created_at: datetime | None = None

    def _now(self) -> datetime:
        return ensure_utc(self._clock())

    def _next_created_at(self) -> datetime:
        """단조 증가하는 생성 시각

        시계가 같은 값을 반환하거나 뒤로 가도 created_at은 항상 증가.
        """
        now = self._now()
        if self._last_created_at is not None and now <= self._last_created_at:
            now = self._last_created_at + timedelta(microseconds=1)
        self._last_created_at = now
        return now

    async def get(
        self,
        report_type: ReportType | str,
        parameters: Mapping[str, Any],
        scope: str | None = None,
    ) -> ReportCacheEntry | None:
        """캐시 조회

        서명이 같아도 저장된 파라미터와 값 동등성을 한 번 더 확인.
        만료 여부는 sweep 실행과 무관하게 조회 시점에 판단.

        Args:
            report_type: 리포트 유형
            parameters: 요청 파라미터
            scope: 테넌트/소유자 범위 (None이면 전체)

        Returns:
            적중한 캐시 항목 또는 None (miss)

        Raises:
            CacheUnavailableError: 저장소 사용 불가
        """
        report_type = ReportType(report_type)
        signature = signature_of(report_type, parameters)
        now = self._now()

        candidates = await self.repository.find_matching(report_type, signature, scope)

        for entry in candidates:
            if entry.is_expired(now):
                continue
            if not parameters_equal(parameters, entry.parameters):
                continue

            logger.debug(
                "리포트 캐시 적중",
                extra={"report_type": report_type.value, "entry_id": entry.entry_id},
            )
            return entry

        logger.debug(
            "리포트 캐시 미스",
            extra={"report_type": report_type.value, "candidates": len(candidates)},
        )
        return None

    async def put(
        self,
        report_type: ReportType | str,
        parameters: Mapping[str, Any],
        result: Any,
        ttl: timedelta | None = None,
        *,
        never_expires: bool = False,
        scope: str = Defaults.CACHE_SCOPE,
        format: ReportFormat | str = ReportFormat.JSON,
        size_bytes: int | None = None,
    ) -> ReportCacheEntry:
        """캐시 저장 (항상 새 항목 추가)

        Args:
            report_type: 리포트 유형
            parameters: 요청 파라미터
            result: 리포트 결과 (JSON 호환 + Decimal/date 허용)
            ttl: 유효 기간 (None이면 기본 TTL)
            never_expires: True면 만료 없음 (ttl 무시)
            scope: 테넌트/소유자 범위
            format: 결과 포맷 태그
            size_bytes: 직렬화 크기 (None이면 직접 계산)

        Returns:
            저장된 캐시 항목

        Raises:
            ValueError: ttl이 0 이하이거나 report_type/format이 잘못된 경우
            TypeError: 직렬화할 수 없는 파라미터/결과
            CacheUnavailableError: 저장소 사용 불가
        """
        report_type = ReportType(report_type)
        format = ReportFormat(format)

        if ttl is not None and ttl <= timedelta(0):
            raise ValueError(f"ttl은 0보다 커야 합니다: {ttl}")

        signature = signature_of(report_type, parameters)
        if size_bytes is None:
            size_bytes = serialized_size(result)

        created_at = self._next_created_at()
        if never_expires:
            expires_at = None
        else:
            expires_at = created_at + (ttl if ttl is not None else self.default_ttl)

        entry = ReportCacheEntry(
            entry_id=str(uuid4()),
            scope=scope,
            report_type=report_type,
            signature=signature,
            parameters=dict(parameters),
            result=result,
            format=format,
            size_bytes=size_bytes,
            created_at=created_at,
            expires_at=expires_at,
        )

        stored = await self.repository.insert(entry)

        logger.info(
            f"리포트 캐시 저장: {report_type.value}",
            extra={
                "entry_id": stored.entry_id,
                "scope": scope,
                "size_bytes": size_bytes,
                "expires_at": expires_at.isoformat() if expires_at else None,
            },
        )
        return stored

    async def get_or_compute(
        self,
        report_type: ReportType | str,
        parameters: Mapping[str, Any],
        compute: Callable[[], Any | Awaitable[Any]],
        ttl: timedelta | None = None,
        *,
        never_expires: bool = False,
        scope: str = Defaults.CACHE_SCOPE,
        format: ReportFormat | str = ReportFormat.JSON,
    ) -> ReportCacheEntry:
        """캐시 조회 후 미스면 계산하여 저장

        compute는 동기 함수 또는 코루틴 함수 모두 가능.
        저장소 장애 시 계산으로 우회하지 않고 예외를 전파함.
        """
        cached = await self.get(report_type, parameters, scope=scope)
        if cached is not None:
            return cached

        result = compute()
        if inspect.isawaitable(result):
            result = await result

        return await self.put(
            report_type,
            parameters,
            result,
            ttl,
            never_expires=never_expires,
            scope=scope,
            format=format,
        )

    async def invalidate(self, report_type: ReportType | str | None = None) -> int:
        """캐시 무효화

        Args:
            report_type: 삭제할 리포트 유형 (None이면 전체)

        Returns:
            삭제된 항목 수
        """
        if report_type is not None:
            report_type = ReportType(report_type)

        removed = await self.repository.delete_where(report_type=report_type)

        logger.info(
            "리포트 캐시 무효화",
            extra={
                "report_type": report_type.value if report_type else "ALL",
                "removed": removed,
            },
        )
        return removed

    async def sweep_expired(self) -> int:
        """만료된 항목 일괄 삭제 (만료 없음 항목은 유지)

        Returns:
            삭제된 항목 수
        """
        now = self._now()
        removed = await self.repository.delete_where(expired_before=now)

        if removed > 0:
            logger.info(f"만료된 리포트 캐시 {removed}건 삭제")
        return removed

    async def stats(self, scope: str | None = Defaults.CACHE_SCOPE) -> CacheStats:
        """범위 내 캐시 통계

        만료되었지만 아직 sweep되지 않은 항목도 포함.

        Args:
            scope: 테넌트/소유자 범위 (None이면 전체)

        Returns:
            CacheStats
        """
        entries = await self.repository.find_all(scope)

        by_type: dict[str, int] = {}
        total_size = 0
        for entry in entries:
            by_type[entry.report_type.value] = by_type.get(entry.report_type.value, 0) + 1
            total_size += entry.size_bytes

        return CacheStats(
            total_cached=len(entries),
            total_size_bytes=total_size,
            by_type=by_type,
        )
