"""전송 오류, HTTP 상태, 응답 본문을 정규화된 결과로 분류한다."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from ..utils.exceptions import ErrorKind, YobitError

YOBIT_ERROR_MESSAGES: dict[int, str] = {
    10000: "Required parameter can not be null",
    10001: "Requests are too frequent",
    10002: "System Error",
    10003: "Restricted list request, please try again later",
    10004: "IP restriction",
    10005: "Key does not exist",
    10006: "User does not exist",
    10007: "Signatures do not match",
    10008: "Illegal parameter",
    10009: "Order does not exist",
    10010: "Insufficient balance",
    10011: "Order is less than minimum trade amount",
    10012: "Unsupported symbol (not btc_usd or ltc_usd)",
    10013: "This interface only accepts https requests",
    10014: "Order price must be between 0 and 1,000,000",
    10015: "Order price differs from current market price too much",
    10016: "Insufficient coins balance",
    10017: "API authorization error",
    10026: "Loan (including reserved loan) and margin cannot be withdrawn",
    10027: "Cannot withdraw within 24 hrs of authentication information modification",
    10028: "Withdrawal amount exceeds daily limit",
    10029: "Account has unpaid loan, please cancel/pay off the loan before withdraw",
    10031: "Deposits can only be withdrawn after 6 confirmations",
    10032: "Please enabled phone/google authenticator",
    10033: "Fee higher than maximum network transaction fee",
    10034: "Fee lower than minimum network transaction fee",
    10035: "Insufficient BTC/LTC",
    10036: "Withdrawal amount too low",
    10037: "Trade password not set",
    10040: "Withdrawal cancellation fails",
    10041: "Withdrawal address not approved",
    10042: "Admin password error",
    10100: "User account frozen",
    10216: "Non-available API",
    503: "Too many requests (Http)",
}


def map_error_message(error_code: Any) -> str:
    """요빗 오류 코드를 메시지로 변환한다. 모르는 코드도 버리지 않는다."""
    try:
        return YOBIT_ERROR_MESSAGES[int(error_code)]
    except (KeyError, TypeError, ValueError):
        return f"Unknown Yobit error code: {error_code}"


class Outcome(str, Enum):
    SUCCESS = "success"
    RETRY = "retry"
    ERROR = "error"


@dataclass(frozen=True)
class Classification:
    """분류 결과. ``outcome`` 에 따라 ``value`` 또는 ``error`` 가 채워진다."""

    outcome: Outcome
    value: Any = None
    error: Optional[YobitError] = None
    status_code: Optional[int] = None

    @classmethod
    def success(cls, value: Any, status_code: Optional[int] = None) -> "Classification":
        return cls(Outcome.SUCCESS, value=value, status_code=status_code)

    @classmethod
    def retry(cls, status_code: int) -> "Classification":
        return cls(Outcome.RETRY, status_code=status_code)

    @classmethod
    def failure(cls, error: YobitError, status_code: Optional[int] = None) -> "Classification":
        return cls(Outcome.ERROR, error=error, status_code=status_code)


def _to_code(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_body(response: Any, *, form: bool, description: str) -> tuple[Any, Optional[YobitError]]:
    if form:
        text = response.text
        try:
            return json.loads(text), None
        except (TypeError, ValueError) as exc:
            return None, YobitError(
                f"{description} 응답을 해석할 수 없습니다: {text!r}",
                kind=ErrorKind.PARSE,
                cause=exc,
            )

    try:
        payload = response.json()
    except ValueError as exc:
        payload = getattr(response, "text", None)
        cause: Optional[BaseException] = exc
    else:
        cause = None
    if not isinstance(payload, Mapping):
        return None, YobitError(
            f"{description} 응답이 JSON 객체가 아닙니다: {payload!r}",
            kind=ErrorKind.PARSE,
            cause=cause,
        )
    return payload, None


def classify(
    transport_error: Optional[BaseException],
    response: Any,
    *,
    form: bool,
    retry_allowed: bool,
    description: str = "요청",
) -> Classification:
    """응답 하나를 성공/재시도/오류 중 하나로 분류한다.

    판정 순서:
      1. 전송 계층 오류 -> network
      2. 5xx 이고 재시도 여유가 있으면 -> retry
      3. 2xx 가 아닌 상태 -> http-status
      4. form 요청 본문이 JSON 이 아님 -> parse
      5. JSON 요청 본문이 객체가 아님 -> parse
      6. ``error_code`` 필드 -> exchange-code
      7. ``error`` 필드 -> exchange-generic
      8. 그 외 성공
    """
    if transport_error is not None:
        return Classification.failure(
            YobitError(
                f"{description} 실패: {transport_error}",
                kind=ErrorKind.NETWORK,
                cause=transport_error,
            )
        )

    status_code = int(response.status_code)
    if 500 <= status_code < 600 and retry_allowed:
        return Classification.retry(status_code)

    if status_code < 200 or status_code >= 300:
        detail = YOBIT_ERROR_MESSAGES.get(status_code)
        message = f"{description} 에서 HTTP 상태 코드 {status_code} 반환"
        if detail:
            message = f"{message} ({detail})"
        return Classification.failure(
            YobitError(message, kind=ErrorKind.HTTP_STATUS, code=status_code),
            status_code=status_code,
        )

    payload, parse_error = _parse_body(response, form=form, description=description)
    if parse_error is not None:
        return Classification.failure(parse_error, status_code=status_code)

    if isinstance(payload, Mapping):
        if "error_code" in payload:
            raw_code = payload["error_code"]
            return Classification.failure(
                YobitError(
                    map_error_message(raw_code),
                    kind=ErrorKind.EXCHANGE_CODE,
                    code=_to_code(raw_code),
                ),
                status_code=status_code,
            )
        if "error" in payload:
            return Classification.failure(
                YobitError(str(payload["error"]), kind=ErrorKind.EXCHANGE_GENERIC),
                status_code=status_code,
            )

    return Classification.success(payload, status_code=status_code)


__all__ = [
    "Classification",
    "Outcome",
    "YOBIT_ERROR_MESSAGES",
    "classify",
    "map_error_message",
]
