"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체는 이 Protocol을 준수해야 함.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from core.storage.report_cache import ReportCacheEntry
    from core.types import ReportType


@runtime_checkable
class IReportCacheRepository(Protocol):
    """리포트 캐시 영속화 인터페이스

    ReportCacheStore가 사용하는 저장소 계약.
    - insert는 동시 insert/delete에 대해 원자적이어야 함
    - 최신순 정렬은 insert 시점의 created_at 기준
    - 장애 시 CacheUnavailableError 발생 (재시도는 구현체 책임)
    """

    async def find_matching(
        self,
        report_type: ReportType,
        signature: str,
        scope: str | None = None,
    ) -> list[ReportCacheEntry]:
        """같은 유형/서명의 항목 조회

        Args:
            report_type: 리포트 유형
            signature: 캐시 서명
            scope: 테넌트 범위 (None이면 전체)

        Returns:
            created_at 내림차순 (최신순) 항목 목록
        """
        ...

    async def insert(self, entry: ReportCacheEntry) -> ReportCacheEntry:
        """항목 추가

        Returns:
            저장된 항목
        """
        ...

    async def delete_where(
        self,
        report_type: ReportType | None = None,
        expired_before: datetime | None = None,
    ) -> int:
        """조건에 맞는 항목 삭제

        조건을 모두 생략하면 전체 삭제.
        expired_before가 주어지면 expires_at이 그 이전인 항목만 삭제
        (만료 없음 항목은 제외).

        Returns:
            삭제된 항목 수
        """
        ...

    async def find_all(self, scope: str | None = None) -> list[ReportCacheEntry]:
        """범위 내 전체 항목 조회 (통계용)"""
        ...
