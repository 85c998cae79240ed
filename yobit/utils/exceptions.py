"""애플리케이션 공통 예외 계층."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class AppError(Exception):
    """프로젝트 전반에서 사용하는 기본 예외 클래스."""


class ConfigurationError(AppError):
    """환경 설정이나 필수 값이 누락된 경우 발생."""


class ErrorKind(str, Enum):
    """정규화된 오류 분류."""

    MISSING_CREDENTIALS = "missing-credentials"
    MISSING_PARAMETER = "missing-parameter"
    INVALID_ARGUMENT_TYPE = "invalid-argument-type"
    NETWORK = "network"
    HTTP_STATUS = "http-status"
    PARSE = "parse"
    EXCHANGE_CODE = "exchange-code"
    EXCHANGE_GENERIC = "exchange-generic"
    NONCE_RANGE = "nonce-range"


class YobitError(AppError):
    """요빗 API 호출 결과를 정규화한 오류.

    ``kind`` 로 분류하고, 거래소 코드나 HTTP 상태가 있으면 ``code`` 에 담는다.
    원인 예외는 ``cause`` 로 보존한다.
    """

    default_kind: ErrorKind = ErrorKind.EXCHANGE_GENERIC

    def __init__(
        self,
        message: str,
        *,
        kind: Optional[ErrorKind] = None,
        code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind or self.default_kind
        self.message = message
        self.code = code
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, code={self.code!r}, message={self.message!r})"


class MissingCredentialsError(YobitError):
    """API 키/시크릿 없이 비공개 API를 호출한 경우."""

    default_kind = ErrorKind.MISSING_CREDENTIALS


class MissingParameterError(YobitError, ValueError):
    """필수 파라미터가 누락된 경우."""

    default_kind = ErrorKind.MISSING_PARAMETER

    def __init__(self, parameter: str) -> None:
        super().__init__(f"필수 파라미터 '{parameter}'가 누락되었습니다.")
        self.parameter = parameter


class InvalidArgumentTypeError(YobitError, TypeError):
    """파라미터 형식이 올바르지 않은 경우."""

    default_kind = ErrorKind.INVALID_ARGUMENT_TYPE

    def __init__(self, parameter: str, detail: str) -> None:
        super().__init__(f"파라미터 '{parameter}' 형식 오류: {detail}")
        self.parameter = parameter


class NonceRangeError(YobitError):
    """nonce 가 거래소 허용 범위를 넘어선 경우."""

    default_kind = ErrorKind.NONCE_RANGE


__all__ = [
    "AppError",
    "ConfigurationError",
    "ErrorKind",
    "InvalidArgumentTypeError",
    "MissingCredentialsError",
    "MissingParameterError",
    "NonceRangeError",
    "YobitError",
]
