"""
설정 로더

settings.yaml 로드 및 엔진/캐시 설정 생성
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml

from adapters.db.sqlite_adapter import get_db_path
from core.constants import Defaults, Paths
from core.ledger.auto_balance import AutoBalanceEngine
from core.ledger.types import EmptyAmountPolicy
from core.ledger.validator import BalanceValidator


@dataclass(frozen=True)
class LedgerSettings:
    """Ledger 설정

    불변 데이터 구조로 설정 변경 방지
    """

    amount_scale: int = Defaults.AMOUNT_SCALE
    empty_amount_policy: EmptyAmountPolicy = EmptyAmountPolicy(Defaults.EMPTY_AMOUNT_POLICY)
    currency_scales: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ReportCacheSettings:
    """리포트 캐시 설정"""

    db_path: Path = Paths.REPORT_CACHE_DB
    default_ttl_hours: int = Defaults.CACHE_TTL_HOURS
    sweep_interval_sec: int = Defaults.CACHE_SWEEP_INTERVAL_SEC

    @property
    def default_ttl(self) -> timedelta:
        """기본 TTL (timedelta)"""
        return timedelta(hours=self.default_ttl_hours)


@dataclass(frozen=True)
class Settings:
    """애플리케이션 설정 (settings.yaml에서 로드)"""

    ledger: LedgerSettings = field(default_factory=LedgerSettings)
    report_cache: ReportCacheSettings = field(default_factory=ReportCacheSettings)
    log_level: str = Defaults.LOG_LEVEL


class SettingsLoadError(Exception):
    """Settings 로드 실패 예외"""

    pass


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """섹션 조회 (없으면 빈 dict)"""
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise SettingsLoadError(f"settings.yaml의 '{name}' 섹션은 매핑이어야 합니다")
    return section


def _non_negative_int(section: dict[str, Any], key: str, default: int, name: str) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise SettingsLoadError(
            f"settings.yaml의 {name}.{key}는 0 이상의 정수여야 합니다: {value!r}"
        )
    return value


def _positive_int(section: dict[str, Any], key: str, default: int, name: str) -> int:
    value = _non_negative_int(section, key, default, name)
    if value == 0:
        raise SettingsLoadError(f"settings.yaml의 {name}.{key}는 0보다 커야 합니다")
    return value


def _parse_log_level(data: dict[str, Any]) -> str:
    """logging 섹션 파싱 (표준 로그 레벨 이름만 허용)"""
    level = str(_section(data, "logging").get("level", Defaults.LOG_LEVEL)).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise SettingsLoadError(f"logging.level 값이 올바르지 않습니다: {level}")
    return level


def _parse_ledger(data: dict[str, Any]) -> LedgerSettings:
    section = _section(data, "ledger")

    amount_scale = _non_negative_int(section, "amount_scale", Defaults.AMOUNT_SCALE, "ledger")

    policy_str = section.get("empty_amount_policy", Defaults.EMPTY_AMOUNT_POLICY)
    try:
        policy = EmptyAmountPolicy(policy_str)
    except ValueError as e:
        valid_policies = [p.value for p in EmptyAmountPolicy]
        raise SettingsLoadError(
            f"유효하지 않은 empty_amount_policy입니다: '{policy_str}'. "
            f"유효한 값: {valid_policies}"
        ) from e

    scales_raw = section.get("currency_scales") or {}
    if not isinstance(scales_raw, dict):
        raise SettingsLoadError("settings.yaml의 ledger.currency_scales는 매핑이어야 합니다")

    currency_scales = {
        str(currency): _non_negative_int(scales_raw, currency, 0, "ledger.currency_scales")
        for currency in scales_raw
    }

    return LedgerSettings(
        amount_scale=amount_scale,
        empty_amount_policy=policy,
        currency_scales=currency_scales,
    )


def _parse_report_cache(data: dict[str, Any]) -> ReportCacheSettings:
    section = _section(data, "report_cache")

    return ReportCacheSettings(
        db_path=get_db_path(section.get("db_path")),
        default_ttl_hours=_positive_int(
            section, "default_ttl_hours", Defaults.CACHE_TTL_HOURS, "report_cache"
        ),
        sweep_interval_sec=_positive_int(
            section, "sweep_interval_sec", Defaults.CACHE_SWEEP_INTERVAL_SEC, "report_cache"
        ),
    )


def load_settings(path: Path | None = None) -> Settings:
    """settings.yaml 파일 로드

    모든 섹션은 선택 사항이며 없으면 기본값 사용.

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 인스턴스

    Raises:
        SettingsLoadError: 파일이 없거나 형식/값이 잘못된 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        raise SettingsLoadError(f"settings.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    return Settings(
        ledger=_parse_ledger(data),
        report_cache=_parse_report_cache(data),
        log_level=_parse_log_level(data),
    )


def build_balance_validator(settings: Settings) -> BalanceValidator:
    """설정 기반 BalanceValidator 생성"""
    return BalanceValidator(
        amount_scale=settings.ledger.amount_scale,
        currency_scales=settings.ledger.currency_scales,
    )


def build_auto_balance_engine(settings: Settings) -> AutoBalanceEngine:
    """설정 기반 AutoBalanceEngine 생성"""
    return AutoBalanceEngine(
        amount_scale=settings.ledger.amount_scale,
        currency_scales=settings.ledger.currency_scales,
        empty_policy=settings.ledger.empty_amount_policy,
    )


_settings: Settings | None = None


def get_settings(path: Path | None = None) -> Settings:
    """Settings 싱글턴 반환

    Args:
        path: settings.yaml 경로 (최초 호출 시에만 사용)

    Returns:
        Settings 인스턴스
    """
    global _settings
    if _settings is None:
        _settings = load_settings(path)
    return _settings


def reset_settings() -> None:
    """싱글턴 초기화 (테스트용)"""
    global _settings
    _settings = None
