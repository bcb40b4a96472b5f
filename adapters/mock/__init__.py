"""
Mock 어댑터

테스트 및 단일 프로세스용 In-Memory 구현체 제공.
Protocol 준수하여 실제 구현체와 교체 가능.
"""

from adapters.mock.report_cache_repository import InMemoryReportCacheRepository

__all__ = [
    "InMemoryReportCacheRepository",
]
