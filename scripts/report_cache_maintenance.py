"""
리포트 캐시 유지보수 스크립트

사용법:
    python -m scripts.report_cache_maintenance sweep
    python -m scripts.report_cache_maintenance stats --scope tenant-a
    python -m scripts.report_cache_maintenance invalidate --report-type balance_sheet
    python -m scripts.report_cache_maintenance watch   # 주기적 sweep (종료: Ctrl+C)
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.report_cache_repository import SQLiteReportCacheRepository
from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.config.loader import Settings, load_settings
from core.logging import setup_logging
from core.storage.cache_sweeper import CacheSweeper
from core.storage.report_cache import ReportCacheStore
from core.types import ReportType

logger = logging.getLogger(__name__)

ACTIONS = ["sweep", "stats", "invalidate", "watch"]


async def run_action(
    store: ReportCacheStore,
    action: str,
    report_type: str | None = None,
    scope: str | None = None,
) -> dict[str, Any]:
    """단발성 유지보수 작업 실행

    Args:
        store: 리포트 캐시 저장소
        action: sweep / stats / invalidate
        report_type: invalidate 대상 (None이면 전체)
        scope: stats 대상 범위 (None이면 전체)

    Returns:
        작업 결과 dict
    """
    if action == "sweep":
        removed = await store.sweep_expired()
        logger.info(f"만료 항목 삭제: {removed}건")
        return {"removed": removed}

    if action == "invalidate":
        removed = await store.invalidate(report_type)
        logger.info(f"무효화: {removed}건")
        return {"removed": removed}

    if action == "stats":
        stats = await store.stats(scope)
        return stats.to_dict()

    raise ValueError(f"알 수 없는 작업입니다: {action}")


async def watch(store: ReportCacheStore, settings: Settings) -> None:
    """CacheSweeper 루프 실행 (Ctrl+C로 종료)"""
    sweeper = CacheSweeper(
        store,
        interval_seconds=settings.report_cache.sweep_interval_sec,
    )
    shutdown_event = asyncio.Event()

    logger.info("CacheSweeper 루프 시작 (종료: Ctrl+C)")

    try:
        await sweeper.run(shutdown_event)
    except asyncio.CancelledError:
        logger.info("CacheSweeper 루프 취소됨")
    except KeyboardInterrupt:
        logger.info("Ctrl+C 감지")
    finally:
        shutdown_event.set()


async def main(args: argparse.Namespace) -> None:
    """유지보수 작업 실행"""
    settings = load_settings(args.settings)
    setup_logging(
        "report-cache-maintenance",
        console_level=logging.getLevelName(settings.log_level),
    )

    db_path = settings.report_cache.db_path
    logger.info(f"리포트 캐시 DB: {db_path}")

    async with SQLiteAdapter(db_path) as db:
        await init_schema(db)
        store = ReportCacheStore(
            SQLiteReportCacheRepository(db),
            default_ttl=settings.report_cache.default_ttl,
        )

        if args.action == "watch":
            await watch(store, settings)
            return

        result = await run_action(store, args.action, args.report_type, args.scope)
        print(json.dumps(result, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="리포트 캐시 유지보수 (만료 정리 / 통계 / 무효화 / 주기 정리)"
    )
    parser.add_argument(
        "action",
        choices=ACTIONS,
        help="실행할 작업",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="settings.yaml 경로 (기본: config/settings.yaml)",
    )
    parser.add_argument(
        "--report-type",
        choices=[t.value for t in ReportType],
        default=None,
        help="invalidate 대상 리포트 유형 (생략 시 전체)",
    )
    parser.add_argument(
        "--scope",
        default=None,
        help="stats 대상 범위 (생략 시 전체)",
    )
    args = parser.parse_args()

    asyncio.run(main(args))
