"""
스토리지 모듈

리포트 캐시 저장소와 만료 항목 정리(Sweeper) 제공
"""

from core.storage.cache_sweeper import CacheSweeper
from core.storage.report_cache import (
    CacheStats,
    CacheUnavailableError,
    ReportCacheEntry,
    ReportCacheStore,
    signature_of,
)

__all__ = [
    "CacheStats",
    "CacheSweeper",
    "CacheUnavailableError",
    "ReportCacheEntry",
    "ReportCacheStore",
    "signature_of",
]
