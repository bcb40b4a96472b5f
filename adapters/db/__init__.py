"""
데이터베이스 어댑터

SQLite WAL 모드 연결 관리 및 리포트 캐시 저장소.
"""

from adapters.db.report_cache_repository import SQLiteReportCacheRepository
from adapters.db.sqlite_adapter import (
    SQLiteAdapter,
    create_connection,
    get_db_path,
    init_schema,
)

__all__ = [
    "SQLiteAdapter",
    "SQLiteReportCacheRepository",
    "create_connection",
    "get_db_path",
    "init_schema",
]
