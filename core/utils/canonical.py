"""
정규화(canonical) 직렬화 유틸리티

리포트 캐시 서명 생성 및 파라미터 값 비교에 사용.
동일한 값은 삽입 순서와 무관하게 항상 동일한 문자열을 생성해야 함.
"""

import json
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping


def _normalize(value: Any) -> Any:
    """JSON 직렬화 가능한 결정적 구조로 변환

    Raises:
        TypeError: 지원하지 않는 타입
    """
    if isinstance(value, Enum):
        return _normalize(value.value)
    if value is None or isinstance(value, (bool, str, int)):
        return value
    if isinstance(value, float):
        # 정수값 float은 int 표기 (2024.0 == 2024), 나머지는 repr 기반 최단 표현
        if value.is_integer():
            return int(value)
        return value
    if isinstance(value, Decimal):
        # 1.0 / 1.00 / 1 을 동일하게 취급 (지수 표기 방지)
        if not value.is_finite():
            raise TypeError(f"유한하지 않은 Decimal은 직렬화할 수 없습니다: {value}")
        return {"$decimal": format(value.normalize(), "f")}
    if isinstance(value, datetime):
        return {"$datetime": value.isoformat()}
    if isinstance(value, date):
        return {"$date": value.isoformat()}
    if isinstance(value, time):
        return {"$time": value.isoformat()}
    if isinstance(value, Mapping):
        normalized: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"매핑 키는 문자열이어야 합니다: {key!r}")
            normalized[key] = _normalize(item)
        return normalized
    if isinstance(value, (list, tuple)):
        return [_normalize(item) for item in value]

    raise TypeError(f"정규화할 수 없는 타입입니다: {type(value).__name__}")


def canonical_value(value: Any) -> str:
    """값을 정규화된 JSON 문자열로 변환

    - 중첩 dict는 키 정렬
    - Decimal은 정규화된 고정 소수 표기
    - 정수값 float은 int와 같은 표기 (2024.0 → 2024)
    - date/datetime은 ISO-8601
    - tuple은 list와 동일하게 취급
    - Enum은 value 사용

    Args:
        value: 직렬화할 값

    Returns:
        정규화된 JSON 문자열

    Example:
        >>> canonical_value({"b": 1, "a": [1, 2]})
        '{"a":[1,2],"b":1}'
    """
    return json.dumps(
        _normalize(value),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def _restore(obj: dict[str, Any]) -> Any:
    """json object_hook: 태그된 값을 원래 타입으로 복원"""
    if len(obj) == 1:
        if "$decimal" in obj:
            return Decimal(obj["$decimal"])
        if "$datetime" in obj:
            return datetime.fromisoformat(obj["$datetime"])
        if "$date" in obj:
            return date.fromisoformat(obj["$date"])
        if "$time" in obj:
            return time.fromisoformat(obj["$time"])
    return obj


def from_canonical(text: str) -> Any:
    """canonical_value()로 만든 문자열을 값으로 복원

    Decimal, date, datetime은 원래 타입으로 돌아오며
    tuple과 Enum은 각각 list, 원시 값으로 돌아옴.

    Args:
        text: 정규화된 JSON 문자열

    Returns:
        복원된 값
    """
    return json.loads(text, object_hook=_restore)


def canonical_key(key: str) -> str:
    """파라미터 키를 JSON 문자열 리터럴로 변환 (구분자 충돌 방지)"""
    return json.dumps(key, ensure_ascii=False)


def parameters_equal(left: Mapping[str, Any], right: Mapping[str, Any]) -> bool:
    """두 파라미터 매핑의 값 동등성 비교 (순서 무관, 깊은 비교)

    Args:
        left: 요청 파라미터
        right: 저장된 파라미터

    Returns:
        키 집합이 같고 모든 값의 정규화 결과가 같으면 True
    """
    if set(left.keys()) != set(right.keys()):
        return False

    for key in left:
        if canonical_value(left[key]) != canonical_value(right[key]):
            return False

    return True
