"""JournalLine / 금액 변환 테스트"""

from decimal import Decimal

import pytest

from core.ledger.journal import JournalLine, is_empty_amount, to_amount
from core.ledger.types import EmptyAmountPolicy


class TestToAmount:
    """to_amount 함수 테스트"""

    def test_decimal_kept(self) -> None:
        """Decimal은 그대로 유지"""
        value = Decimal("12.3400")
        assert to_amount(value) is value

    def test_none_kept(self) -> None:
        """None은 미입력 표시로 유지"""
        assert to_amount(None) is None

    def test_int_and_str(self) -> None:
        """int / str 변환"""
        assert to_amount(1000) == Decimal("1000")
        assert to_amount(" -500.25 ") == Decimal("-500.25")

    def test_float_via_str(self) -> None:
        """float은 str()을 거쳐 이진 오차 없이 변환"""
        assert to_amount(0.1) == Decimal("0.1")
        assert to_amount(0.1) + to_amount(0.2) == Decimal("0.3")

    def test_bool_rejected(self) -> None:
        """bool은 금액이 아님"""
        with pytest.raises(TypeError):
            to_amount(True)

    def test_unsupported_type(self) -> None:
        """지원하지 않는 타입"""
        with pytest.raises(TypeError, match="지원하지 않는 금액 타입"):
            to_amount([100])

    def test_malformed_string(self) -> None:
        """숫자가 아닌 문자열"""
        with pytest.raises(ValueError, match="변환할 수 없습니다"):
            to_amount("abc")

    def test_non_finite_string(self) -> None:
        """NaN / Infinity 거부"""
        with pytest.raises(ValueError):
            to_amount("NaN")
        with pytest.raises(ValueError):
            to_amount("Infinity")

    def test_non_finite_decimal(self) -> None:
        """Decimal NaN / Infinity 거부"""
        with pytest.raises(ValueError):
            to_amount(Decimal("NaN"))
        with pytest.raises(ValueError):
            to_amount(Decimal("-Infinity"))
        with pytest.raises(ValueError):
            to_amount(Decimal("sNaN"))

    def test_line_rejects_non_finite_decimal(self) -> None:
        """JournalLine 생성 시 Decimal NaN 거부"""
        with pytest.raises(ValueError):
            JournalLine(account_id="cash", amount=Decimal("NaN"), currency="USD")


class TestIsEmptyAmount:
    """is_empty_amount 함수 테스트"""

    def test_none_is_empty_for_all_policies(self) -> None:
        """None은 모든 정책에서 빈 값"""
        for policy in EmptyAmountPolicy:
            assert is_empty_amount(None, policy) is True

    def test_zero_not_empty_by_default(self) -> None:
        """기본 정책(UNSET_ONLY)에서 0은 실제 금액"""
        assert is_empty_amount(Decimal("0")) is False

    def test_zero_empty_with_legacy_policy(self) -> None:
        """UNSET_OR_ZERO 정책에서 0은 빈 값"""
        assert is_empty_amount(Decimal("0"), EmptyAmountPolicy.UNSET_OR_ZERO) is True
        assert is_empty_amount(Decimal("0.0000"), EmptyAmountPolicy.UNSET_OR_ZERO) is True

    def test_negative_never_empty(self) -> None:
        """음수는 회계적 의미가 있으므로 빈 값 아님"""
        for policy in EmptyAmountPolicy:
            assert is_empty_amount(Decimal("-100"), policy) is False
            assert is_empty_amount(Decimal("-0.01"), policy) is False

    def test_positive_never_empty(self) -> None:
        """양수는 빈 값 아님"""
        assert is_empty_amount(Decimal("0.01"), EmptyAmountPolicy.UNSET_OR_ZERO) is False


class TestJournalLine:
    """JournalLine 테스트"""

    def test_amount_coerced(self) -> None:
        """생성 시 금액을 Decimal로 변환"""
        line = JournalLine(account_id="cash", amount="1000.50", currency="USD")

        assert line.amount == Decimal("1000.50")
        assert isinstance(line.amount, Decimal)

    def test_defaults(self) -> None:
        """기본값 확인"""
        line = JournalLine(account_id="cash", amount=None, currency="USD")

        assert line.tags == []
        assert line.id is None
        assert line.is_system_generated is False
        assert line.remarks is None

    def test_tags_not_shared(self) -> None:
        """tags 기본값은 인스턴스마다 독립"""
        first = JournalLine(account_id="a", amount=None, currency="USD")
        second = JournalLine(account_id="b", amount=None, currency="USD")

        first.tags.append("food")

        assert second.tags == []

    def test_signed_amount_of_unset_line(self) -> None:
        """미입력 라인은 합계에서 0"""
        line = JournalLine(account_id="cash", amount=None, currency="USD")

        assert line.signed_amount == Decimal("0")
        assert line.is_empty() is True

    def test_is_empty_with_policy(self) -> None:
        """정책에 따른 빈 라인 판정"""
        line = JournalLine(account_id="cash", amount=Decimal("0"), currency="USD")

        assert line.is_empty() is False
        assert line.is_empty(EmptyAmountPolicy.UNSET_OR_ZERO) is True
