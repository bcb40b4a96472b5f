"""
CacheSweeper 테스트
"""

import asyncio
from datetime import timedelta

import pytest

from adapters.mock.report_cache_repository import InMemoryReportCacheRepository
from core.storage.cache_sweeper import CacheSweeper
from core.storage.report_cache import CacheUnavailableError, ReportCacheStore
from core.types import ReportType
from tests.utils.helpers import FakeClock


@pytest.fixture
def repository() -> InMemoryReportCacheRepository:
    """In-Memory 저장소"""
    return InMemoryReportCacheRepository()


@pytest.fixture
def store(repository: InMemoryReportCacheRepository, fake_clock: FakeClock) -> ReportCacheStore:
    """고정 시계 ReportCacheStore"""
    return ReportCacheStore(repository, clock=fake_clock)


@pytest.fixture
def sweeper(store: ReportCacheStore, fake_clock: FakeClock) -> CacheSweeper:
    """60초 간격 CacheSweeper"""
    return CacheSweeper(store, interval_seconds=60, clock=fake_clock)


class TestShouldSweep:
    """should_sweep() 테스트"""

    def test_first_run(self, sweeper: CacheSweeper) -> None:
        """최초에는 sweep 필요"""
        assert sweeper.last_sweep_time is None
        assert sweeper.should_sweep() is True

    @pytest.mark.asyncio
    async def test_interval(self, sweeper: CacheSweeper, fake_clock: FakeClock) -> None:
        """간격 경과 전에는 sweep 불필요"""
        await sweeper.sweep()

        assert sweeper.should_sweep() is False

        fake_clock.advance(timedelta(seconds=59))
        assert sweeper.should_sweep() is False

        fake_clock.advance(timedelta(seconds=1))
        assert sweeper.should_sweep() is True

    def test_running(self, sweeper: CacheSweeper) -> None:
        """실행 중에는 sweep 불필요"""
        sweeper._is_running = True

        assert sweeper.should_sweep() is False


class TestSweep:
    """sweep() 테스트"""

    @pytest.mark.asyncio
    async def test_removes_expired(
        self,
        sweeper: CacheSweeper,
        store: ReportCacheStore,
        repository: InMemoryReportCacheRepository,
        fake_clock: FakeClock,
    ) -> None:
        """만료 항목 삭제 결과"""
        await store.put(ReportType.CASH_FLOW, {"n": 1}, {}, ttl=timedelta(minutes=5))
        await store.put(ReportType.CASH_FLOW, {"n": 2}, {}, never_expires=True)
        fake_clock.advance(timedelta(minutes=10))

        result = await sweeper.sweep()

        assert result["removed"] == 1
        assert result["sweep_time"] == fake_clock.now
        assert result["duration_ms"] == 0
        assert sweeper.total_removed == 1
        assert sweeper.last_sweep_time == fake_clock.now
        assert len(repository) == 1

    @pytest.mark.asyncio
    async def test_skip_when_running(self, sweeper: CacheSweeper) -> None:
        """중복 실행 방지"""
        sweeper._is_running = True

        result = await sweeper.sweep()

        assert result == {"removed": 0, "skipped": True}

    @pytest.mark.asyncio
    async def test_unavailable_propagates(
        self,
        sweeper: CacheSweeper,
        repository: InMemoryReportCacheRepository,
    ) -> None:
        """저장소 장애는 그대로 전파, 실행 상태는 해제"""
        repository.should_fail = True

        with pytest.raises(CacheUnavailableError):
            await sweeper.sweep()

        assert sweeper._is_running is False
        assert sweeper.last_sweep_time is None


class TestRun:
    """run() 루프 테스트"""

    @pytest.mark.asyncio
    async def test_run_until_shutdown(
        self,
        sweeper: CacheSweeper,
        store: ReportCacheStore,
        fake_clock: FakeClock,
    ) -> None:
        """shutdown_event 설정 시 종료"""
        await store.put(ReportType.CASH_FLOW, {}, {}, ttl=timedelta(seconds=1))
        fake_clock.advance(timedelta(seconds=5))

        shutdown_event = asyncio.Event()
        task = asyncio.create_task(sweeper.run(shutdown_event, tick_seconds=0.01))
        await asyncio.sleep(0.05)
        shutdown_event.set()
        await asyncio.wait_for(task, timeout=1.0)

        assert sweeper.total_removed == 1
        assert sweeper.last_sweep_time == fake_clock.now

    @pytest.mark.asyncio
    async def test_run_survives_unavailable_store(
        self,
        sweeper: CacheSweeper,
        repository: InMemoryReportCacheRepository,
        fake_clock: FakeClock,
    ) -> None:
        """저장소 장애 시 로그만 남기고 다음 주기를 기다림"""
        repository.should_fail = True

        shutdown_event = asyncio.Event()
        task = asyncio.create_task(sweeper.run(shutdown_event, tick_seconds=0.01))
        await asyncio.sleep(0.05)
        shutdown_event.set()
        await asyncio.wait_for(task, timeout=1.0)

        assert sweeper.total_removed == 0
        assert sweeper.last_sweep_time == fake_clock.now
        assert sweeper.should_sweep() is False
