"""데이터 변환 관련 헬퍼 함수."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Union

NumberLike = Union[str, int, float, Decimal]


def to_decimal(value: NumberLike) -> Decimal:
    """숫자형 또는 문자열 값을 Decimal로 변환한다."""
    if isinstance(value, bool):
        raise ValueError(f"Decimal 변환 실패: {value}")
    if isinstance(value, Decimal):
        decimal_value = value
    else:
        try:
            decimal_value = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise ValueError(f"Decimal 변환 실패: {value}") from exc
    if not decimal_value.is_finite():
        raise ValueError(f"유한한 숫자가 아닙니다: {value}")
    return decimal_value


def format_param_value(value: Any) -> str:
    """요청 파라미터 값을 전송용 문자열로 변환한다.

    불리언은 ``1``/``0``, 실수와 Decimal 은 지수 표기 없이 표현한다.
    """
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        value = Decimal(repr(value))
    if isinstance(value, Decimal):
        text = f"{value:f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text or "0"
    return str(value)


def str_to_bool(value: Union[str, bool, int, None], default: bool = False) -> bool:
    """문자열 혹은 기타 값을 불리언으로 해석한다."""
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    if isinstance(value, int):
        return value != 0
    normalized = str(value).strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


__all__ = [
    "NumberLike",
    "format_param_value",
    "str_to_bool",
    "to_decimal",
]
