"""비공개 API 요청 서명."""

from __future__ import annotations

import hashlib
import hmac
from typing import Any, Mapping

from ..utils.converters import format_param_value


def serialize_params(params: Mapping[str, Any]) -> str:
    """파라미터를 삽입 순서대로 ``key=value`` 로 이어 붙인다.

    정렬하지 않으며 URL 인코딩도 하지 않는다. 거래소가 검증하는 서명 원문과
    같은 순서여야 하므로 전송 본문도 같은 매핑으로 만든다.
    """
    return "&".join(f"{key}={format_param_value(value)}" for key, value in params.items())


def sign(secret: str, params: Mapping[str, Any]) -> str:
    """HMAC-SHA512 서명을 소문자 16진수 문자열로 반환한다."""
    message = serialize_params(params)
    return hmac.new(
        secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha512,
    ).hexdigest()


__all__ = ["serialize_params", "sign"]
