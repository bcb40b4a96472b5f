"""
In-Memory 리포트 캐시 저장소

테스트 및 단일 프로세스용 IReportCacheRepository 구현.
- 항목: entry_id → ReportCacheEntry (삽입 순서 유지)
- 서명 인덱스: (report_type, signature) → entry_id 목록
- 만료 인덱스: expires_at 최소 힙 (sweep용, 지연 삭제)
"""

import copy
import heapq
from collections import OrderedDict
from dataclasses import replace
from datetime import datetime
from itertools import count

from core.storage.report_cache import CacheUnavailableError, ReportCacheEntry
from core.types import ReportType


class InMemoryReportCacheRepository:
    """In-Memory 리포트 캐시 저장소

    IReportCacheRepository Protocol 구현.
    저장/조회 시 결과 페이로드를 깊은 복사하여 호출자와 공유하지 않음.

    사용 예시:
    ```python
    repository = InMemoryReportCacheRepository()
    store = ReportCacheStore(repository)

    # 장애 시나리오
    repository.should_fail = True
    await store.get(...)  # CacheUnavailableError
    ```
    """

    def __init__(self, should_fail: bool = False):
        """
        Args:
            should_fail: True면 모든 작업 실패 (장애 시나리오 테스트용)
        """
        self.should_fail = should_fail
        self._entries: OrderedDict[str, ReportCacheEntry] = OrderedDict()
        self._by_signature: dict[tuple[str, str], list[str]] = {}
        self._expiry_heap: list[tuple[datetime, int, str]] = []
        self._seq = count()

    def _check_available(self, operation: str) -> None:
        if self.should_fail:
            raise CacheUnavailableError(operation, "in-memory repository marked as failing")

    @staticmethod
    def _copy(entry: ReportCacheEntry) -> ReportCacheEntry:
        return replace(
            entry,
            parameters=copy.deepcopy(entry.parameters),
            result=copy.deepcopy(entry.result),
        )

    def __len__(self) -> int:
        return len(self._entries)

    async def find_matching(
        self,
        report_type: ReportType,
        signature: str,
        scope: str | None = None,
    ) -> list[ReportCacheEntry]:
        """같은 유형/서명 항목 조회 (최신순)"""
        self._check_available("find_matching")

        entry_ids = self._by_signature.get((report_type.value, signature), [])
        matches = [
            self._entries[entry_id]
            for entry_id in entry_ids
            if scope is None or self._entries[entry_id].scope == scope
        ]
        matches.sort(key=lambda entry: entry.created_at, reverse=True)

        return [self._copy(entry) for entry in matches]

    async def insert(self, entry: ReportCacheEntry) -> ReportCacheEntry:
        """항목 추가"""
        self._check_available("insert")

        stored = self._copy(entry)
        self._entries[stored.entry_id] = stored
        self._by_signature.setdefault(
            (stored.report_type.value, stored.signature), []
        ).append(stored.entry_id)

        if stored.expires_at is not None:
            heapq.heappush(
                self._expiry_heap,
                (stored.expires_at, next(self._seq), stored.entry_id),
            )

        return self._copy(stored)

    async def delete_where(
        self,
        report_type: ReportType | None = None,
        expired_before: datetime | None = None,
    ) -> int:
        """조건에 맞는 항목 삭제"""
        self._check_available("delete_where")

        if expired_before is not None and report_type is None:
            return self._pop_expired(expired_before)

        targets = [
            entry_id
            for entry_id, entry in self._entries.items()
            if (report_type is None or entry.report_type == report_type)
            and (
                expired_before is None
                or (entry.expires_at is not None and entry.expires_at < expired_before)
            )
        ]
        for entry_id in targets:
            self._remove(entry_id)

        return len(targets)

    async def find_all(self, scope: str | None = None) -> list[ReportCacheEntry]:
        """범위 내 전체 항목 조회"""
        self._check_available("find_all")

        return [
            self._copy(entry)
            for entry in self._entries.values()
            if scope is None or entry.scope == scope
        ]

    def _pop_expired(self, expired_before: datetime) -> int:
        """힙에서 만료 항목 제거 (이미 삭제된 항목은 건너뜀)"""
        removed = 0
        while self._expiry_heap and self._expiry_heap[0][0] < expired_before:
            _, _, entry_id = heapq.heappop(self._expiry_heap)
            if entry_id in self._entries:
                self._remove(entry_id)
                removed += 1
        return removed

    def _remove(self, entry_id: str) -> None:
        entry = self._entries.pop(entry_id)
        key = (entry.report_type.value, entry.signature)
        entry_ids = self._by_signature.get(key, [])
        if entry_id in entry_ids:
            entry_ids.remove(entry_id)
        if not entry_ids:
            self._by_signature.pop(key, None)
