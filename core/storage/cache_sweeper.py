"""
CacheSweeper

리포트 캐시의 만료 항목을 주기적으로 삭제.
캐시는 append-only이므로 주기적 sweep으로 크기를 제한함.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable

from core.constants import Defaults
from core.storage.report_cache import CacheUnavailableError, ReportCacheStore
from core.utils.timezone import ensure_utc, now_utc

logger = logging.getLogger(__name__)


class CacheSweeper:
    """만료 캐시 정리기

    Args:
        store: 리포트 캐시 저장소
        interval_seconds: sweep 간격 (초)
        clock: 현재 시각 함수 (테스트에서 교체 가능)
    """

    def __init__(
        self,
        store: ReportCacheStore,
        interval_seconds: int = Defaults.CACHE_SWEEP_INTERVAL_SEC,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.store = store
        self.interval_seconds = interval_seconds
        self._clock = clock

        self._last_sweep_time: datetime | None = None
        self._is_running: bool = False
        self.total_removed: int = 0

    @property
    def last_sweep_time(self) -> datetime | None:
        """마지막 sweep 시각"""
        return self._last_sweep_time

    def should_sweep(self) -> bool:
        """sweep 필요 여부

        마지막 sweep 이후 interval_seconds가 경과했는지 확인.
        """
        if self._is_running:
            return False

        if self._last_sweep_time is None:
            return True

        elapsed = (ensure_utc(self._clock()) - self._last_sweep_time).total_seconds()
        return elapsed >= self.interval_seconds

    async def sweep(self) -> dict[str, Any]:
        """sweep 실행

        Returns:
            {
                "removed": int,
                "sweep_time": datetime,
                "duration_ms": float,
            }

        Raises:
            CacheUnavailableError: 저장소 사용 불가 (그대로 전파)
        """
        if self._is_running:
            logger.warning("CacheSweeper가 이미 실행 중입니다")
            return {"removed": 0, "skipped": True}

        self._is_running = True
        start_time = ensure_utc(self._clock())

        try:
            removed = await self.store.sweep_expired()

            self._last_sweep_time = start_time
            self.total_removed += removed

            duration_ms = (ensure_utc(self._clock()) - start_time).total_seconds() * 1000
            logger.debug(
                "CacheSweeper 완료",
                extra={"removed": removed, "duration_ms": duration_ms},
            )

            return {
                "removed": removed,
                "sweep_time": start_time,
                "duration_ms": duration_ms,
            }

        finally:
            self._is_running = False

    async def run(self, shutdown_event: asyncio.Event, tick_seconds: float = 1.0) -> None:
        """shutdown_event가 설정될 때까지 주기적으로 sweep

        저장소 장애는 로그만 남기고 다음 주기에 다시 시도.
        """
        logger.info(
            "CacheSweeper 시작",
            extra={"interval_seconds": self.interval_seconds},
        )

        while not shutdown_event.is_set():
            if self.should_sweep():
                try:
                    await self.sweep()
                except CacheUnavailableError as e:
                    logger.error(f"CacheSweeper 실패: {e}")
                    # 실패해도 간격만큼 대기 후 재시도
                    self._last_sweep_time = ensure_utc(self._clock())

            await asyncio.sleep(tick_seconds)

        logger.info(
            "CacheSweeper 종료",
            extra={"total_removed": self.total_removed},
        )
