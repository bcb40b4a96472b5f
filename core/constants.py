"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수 (settings.yaml에 값이 없을 때 사용)"""

    # 금액 고정 소수 자릿수 (journal_lines.amount 컬럼 scale과 동일)
    AMOUNT_SCALE: int = 4
    EMPTY_AMOUNT_POLICY: str = "unset_only"

    # 리포트 캐시
    CACHE_TTL_HOURS: int = 24
    CACHE_SWEEP_INTERVAL_SEC: int = 3600
    CACHE_SCOPE: str = "default"

    LOG_LEVEL: str = "INFO"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    REPORT_CACHE_DB: Path = DATA_DIR / "report_cache.db"


class BalanceTolerance:
    """균형 검증 허용 오차

    통화 최소 단위(10^-scale)에 곱해지는 계수.
    Decimal 연산에서는 표현 오차가 없으므로 사실상 0과 같음.
    """

    MINOR_UNIT_FACTOR: str = "1e-9"


class AmountPrecision:
    """금액 연산 정밀도

    합계와 자릿수 맞춤은 이 유효 자릿수 안에서 정확히 계산.
    넘어서면 반올림 대신 오류로 처리.
    """

    MAX_DIGITS: int = 1000
