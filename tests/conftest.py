"""
pytest 공통 fixture 정의

임시 디렉토리, 설정 파일, 고정 시계 fixture
"""

import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from tests.utils.helpers import FakeClock


@pytest.fixture
def fake_clock() -> FakeClock:
    """2024-01-01 00:00 UTC에서 시작하는 시계"""
    return FakeClock(datetime(2024, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    settings_content = """# 테스트용 settings.yaml
ledger:
  amount_scale: 2
  empty_amount_policy: unset_or_zero
  currency_scales:
    JPY: 0

report_cache:
  db_path: cache/test_report_cache.db
  default_ttl_hours: 6
  sweep_interval_sec: 120

logging:
  level: debug
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def temp_settings_file_invalid_policy(temp_dir: Path) -> Path:
    """잘못된 정책의 settings.yaml 파일 생성"""
    settings_content = """ledger:
  empty_amount_policy: guess_it
"""
    settings_path = temp_dir / "settings_invalid.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path
