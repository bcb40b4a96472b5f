"""
core/constants.py 테스트

모든 경로가 pathlib.Path 타입이고, 상수가 정상적으로 접근 가능한지 확인
"""

from decimal import Decimal
from pathlib import Path

from core.constants import PROJECT_ROOT, AmountPrecision, BalanceTolerance, Defaults, Paths


class TestProjectRoot:
    """PROJECT_ROOT 테스트"""

    def test_project_root_is_path(self) -> None:
        """PROJECT_ROOT가 Path 타입인지 확인"""
        assert isinstance(PROJECT_ROOT, Path)

    def test_project_root_is_absolute(self) -> None:
        """PROJECT_ROOT가 절대 경로인지 확인"""
        assert PROJECT_ROOT.is_absolute()

    def test_project_root_contains_core_directory(self) -> None:
        """PROJECT_ROOT에 core 디렉토리가 있는지 확인"""
        assert (PROJECT_ROOT / "core").is_dir()


class TestPaths:
    """Paths 테스트"""

    def test_all_paths_are_path_type(self) -> None:
        """모든 경로가 Path 타입인지 확인"""
        for name in ("CONFIG_DIR", "DATA_DIR", "LOGS_DIR", "SETTINGS_FILE", "REPORT_CACHE_DB"):
            assert isinstance(getattr(Paths, name), Path), name

    def test_paths_under_project_root(self) -> None:
        """모든 경로가 프로젝트 루트 하위"""
        assert Paths.SETTINGS_FILE.parent == Paths.CONFIG_DIR
        assert Paths.REPORT_CACHE_DB.parent == Paths.DATA_DIR
        assert Paths.LOGS_DIR.parent == PROJECT_ROOT


class TestDefaults:
    """Defaults 테스트"""

    def test_ledger_defaults(self) -> None:
        """Ledger 기본값"""
        assert Defaults.AMOUNT_SCALE == 4
        assert Defaults.EMPTY_AMOUNT_POLICY == "unset_only"

    def test_cache_defaults(self) -> None:
        """리포트 캐시 기본값"""
        assert Defaults.CACHE_TTL_HOURS == 24
        assert Defaults.CACHE_SWEEP_INTERVAL_SEC > 0
        assert Defaults.CACHE_SCOPE == "default"


class TestBalanceTolerance:
    """BalanceTolerance 테스트"""

    def test_factor_parses_as_decimal(self) -> None:
        """계수는 Decimal로 변환 가능한 문자열"""
        assert Decimal(BalanceTolerance.MINOR_UNIT_FACTOR) == Decimal("0.000000001")


class TestAmountPrecision:
    """AmountPrecision 테스트"""

    def test_exceeds_default_context(self) -> None:
        """기본 Decimal 컨텍스트(28자리)보다 큼"""
        assert AmountPrecision.MAX_DIGITS > 28
