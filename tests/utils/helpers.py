"""
테스트 헬퍼

시계 주입이 필요한 컴포넌트(ReportCacheStore, CacheSweeper)용 도구
"""

from datetime import datetime, timedelta


class FakeClock:
    """테스트용 시계

    ReportCacheStore / CacheSweeper의 clock 인자로 주입.
    """

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> datetime:
        """시간 진행"""
        self.now = self.now + delta
        return self.now
