"""
SQLite 리포트 캐시 저장소

report_cache 테이블 기반 IReportCacheRepository 구현.
파라미터/결과는 정규화 JSON으로 저장하여 Decimal, date 타입을 보존.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator

import aiosqlite

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.storage.report_cache import CacheUnavailableError, ReportCacheEntry
from core.types import ReportFormat, ReportType
from core.utils.canonical import canonical_value, from_canonical
from core.utils.timezone import from_iso, to_iso

logger = logging.getLogger(__name__)


_SELECT_COLUMNS = """
    entry_id, scope, report_type, signature,
    parameters_json, result_json, format, size_bytes,
    created_at, expires_at
"""


class SQLiteReportCacheRepository:
    """SQLite 리포트 캐시 저장소

    IReportCacheRepository Protocol 구현.
    insert/delete는 각각 단일 트랜잭션으로 실행되어 sweep이
    부분 저장된 항목을 보지 않음.

    Args:
        db: SQLiteAdapter 인스턴스 (init_schema 완료 상태)

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        await init_schema(db)
        store = ReportCacheStore(SQLiteReportCacheRepository(db))
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncIterator[None]:
        """DB 오류를 CacheUnavailableError로 변환"""
        if not self.db.is_connected:
            raise CacheUnavailableError(operation, "database is not connected")

        try:
            yield
        except aiosqlite.Error as e:
            logger.error(f"리포트 캐시 DB 오류 ({operation}): {e}")
            raise CacheUnavailableError(operation, str(e)) from e

    async def find_matching(
        self,
        report_type: ReportType,
        signature: str,
        scope: str | None = None,
    ) -> list[ReportCacheEntry]:
        """같은 유형/서명 항목 조회 (최신순)"""
        sql = f"""
            SELECT {_SELECT_COLUMNS}
            FROM report_cache
            WHERE report_type = ? AND signature = ?
        """
        params: tuple[Any, ...] = (report_type.value, signature)

        if scope is not None:
            sql += " AND scope = ?"
            params += (scope,)

        sql += " ORDER BY created_at DESC, seq DESC"

        async with self._guard("find_matching"):
            rows = await self.db.fetchall(sql, params)

        return [self._row_to_entry(row) for row in rows]

    async def insert(self, entry: ReportCacheEntry) -> ReportCacheEntry:
        """항목 추가 (단일 트랜잭션)"""
        parameters_json = canonical_value(entry.parameters)
        result_json = canonical_value(entry.result)

        async with self._guard("insert"):
            async with self.db.transaction():
                await self.db.execute(
                    """
                    INSERT INTO report_cache (
                        entry_id, scope, report_type, signature,
                        parameters_json, result_json, format, size_bytes,
                        created_at, expires_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        entry.entry_id,
                        entry.scope,
                        entry.report_type.value,
                        entry.signature,
                        parameters_json,
                        result_json,
                        entry.format.value,
                        entry.size_bytes,
                        to_iso(entry.created_at),
                        to_iso(entry.expires_at),
                    ),
                )

        logger.debug(f"Saved report cache entry: {entry.entry_id}")

        # 호출자와 페이로드를 공유하지 않도록 저장된 형태로 복원
        return self._row_to_entry((
            entry.entry_id,
            entry.scope,
            entry.report_type.value,
            entry.signature,
            parameters_json,
            result_json,
            entry.format.value,
            entry.size_bytes,
            to_iso(entry.created_at),
            to_iso(entry.expires_at),
        ))

    async def delete_where(
        self,
        report_type: ReportType | None = None,
        expired_before: datetime | None = None,
    ) -> int:
        """조건에 맞는 항목 삭제 (단일 트랜잭션)"""
        conditions: list[str] = []
        params: tuple[Any, ...] = ()

        if report_type is not None:
            conditions.append("report_type = ?")
            params += (report_type.value,)

        if expired_before is not None:
            conditions.append("expires_at IS NOT NULL AND expires_at < ?")
            params += (to_iso(expired_before),)

        sql = "DELETE FROM report_cache"
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)

        async with self._guard("delete_where"):
            async with self.db.transaction():
                cursor = await self.db.execute(sql, params or None)
                removed = cursor.rowcount

        return max(removed, 0)

    async def find_all(self, scope: str | None = None) -> list[ReportCacheEntry]:
        """범위 내 전체 항목 조회"""
        sql = f"SELECT {_SELECT_COLUMNS} FROM report_cache"
        params: tuple[Any, ...] | None = None

        if scope is not None:
            sql += " WHERE scope = ?"
            params = (scope,)

        sql += " ORDER BY created_at, seq"

        async with self._guard("find_all"):
            rows = await self.db.fetchall(sql, params)

        return [self._row_to_entry(row) for row in rows]

    @staticmethod
    def _row_to_entry(row: tuple[Any, ...]) -> ReportCacheEntry:
        """DB 행 → ReportCacheEntry"""
        created_at = from_iso(row[8])
        assert created_at is not None

        return ReportCacheEntry(
            entry_id=row[0],
            scope=row[1],
            report_type=ReportType(row[2]),
            signature=row[3],
            parameters=from_canonical(row[4]),
            result=from_canonical(row[5]),
            format=ReportFormat(row[6]),
            size_bytes=row[7],
            created_at=created_at,
            expires_at=from_iso(row[9]),
        )
