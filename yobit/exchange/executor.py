"""HTTP 요청 실행기: 재시도, 응답 분류, 결과 정규화."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import partial
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Generic, Mapping, Optional, TypeVar

import requests
from requests import Response, Session

from ..config import DEFAULT_MAX_ATTEMPTS, DEFAULT_RETRY_DELAY_MS, DEFAULT_RETRY_INCREMENT_MS
from ..utils.exceptions import ErrorKind, YobitError
from .classifier import Outcome, classify

T = TypeVar("T")
Sleep = Callable[[float], Awaitable[Any]]


class HttpMethod(str, Enum):
    """지원하는 HTTP 메서드."""

    GET = "GET"
    POST = "POST"


@dataclass(frozen=True)
class RequestDescriptor:
    """한 번의 논리적 요청. 실행기에 넘긴 뒤에는 바뀌지 않는다."""

    method_name: str
    url: str
    http_method: HttpMethod
    params: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout: float = 20.0
    form: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def description(self) -> str:
        return f"{self.http_method.value} {self.url} ({self.method_name})"


@dataclass(frozen=True)
class RetryPolicy:
    """5xx 응답 재시도 정책. 지연은 선형으로 늘어난다."""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay: float = DEFAULT_RETRY_DELAY_MS / 1000
    progressive: bool = True
    increment: float = DEFAULT_RETRY_INCREMENT_MS / 1000

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts 는 1 이상이어야 합니다.")
        if self.delay < 0 or self.increment < 0:
            raise ValueError("재시도 지연은 음수일 수 없습니다.")

    def start(self) -> "RetryState":
        return RetryState(
            attempt=0,
            delay=self.delay,
            max_attempts=self.max_attempts,
            progressive=self.progressive,
            increment=self.increment,
        )


@dataclass(frozen=True)
class RetryState:
    """요청 하나의 재시도 진행 상태."""

    attempt: int
    delay: float
    max_attempts: int
    progressive: bool
    increment: float

    @property
    def exhausted(self) -> bool:
        """지금 진행 중인 시도가 마지막 시도인지 여부."""
        return self.attempt + 1 >= self.max_attempts

    def advance(self) -> "RetryState":
        """다음 시도 상태. 점진 모드에서는 지연이 ``increment`` 만큼 늘어난다."""
        next_delay = self.delay + self.increment if self.progressive else self.delay
        return replace(self, attempt=self.attempt + 1, delay=next_delay)


@dataclass(frozen=True)
class ApiResult(Generic[T]):
    """성공 값 또는 정규화된 오류 중 하나를 담는다."""

    value: Optional[T] = None
    error: Optional[YobitError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """성공 값을 반환하고, 오류가 있으면 그 오류를 발생시킨다."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    @classmethod
    def success(cls, value: T) -> "ApiResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: YobitError) -> "ApiResult[T]":
        return cls(error=error)


class RequestExecutor:
    """요청 설명자를 실행하고 결과를 :class:`ApiResult` 로 돌려준다.

    ``requests`` 호출은 기본 스레드 풀에서 실행되므로 이벤트 루프를 막지 않는다.
    재시도 대기는 ``asyncio.sleep`` 이며, 호출한 태스크를 취소하면 함께 취소된다.
    재시도 시 설명자(nonce, 서명 포함)는 그대로 다시 전송된다.
    """

    def __init__(
        self,
        session: Session,
        *,
        retry_policy: Optional[RetryPolicy] = None,
        verbose: bool = False,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._session = session
        self._retry_policy = retry_policy or RetryPolicy()
        self._verbose = verbose
        self._logger = logger or logging.getLogger(__name__)
        self._sleep: Sleep = asyncio.sleep

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    def _send(self, descriptor: RequestDescriptor) -> Response:
        params = dict(descriptor.params)
        if descriptor.http_method is HttpMethod.GET:
            return self._session.request(
                method=descriptor.http_method.value,
                url=descriptor.url,
                params=params or None,
                data=None,
                headers=dict(descriptor.headers),
                timeout=descriptor.timeout,
            )
        return self._session.request(
            method=descriptor.http_method.value,
            url=descriptor.url,
            params=None,
            data=params,
            headers=dict(descriptor.headers),
            timeout=descriptor.timeout,
        )

    async def _attempt(self, descriptor: RequestDescriptor) -> tuple[Optional[Response], Optional[BaseException]]:
        loop = asyncio.get_running_loop()
        try:
            response = await loop.run_in_executor(None, partial(self._send, descriptor))
        except requests.RequestException as exc:
            return None, exc
        return response, None

    async def execute(self, descriptor: RequestDescriptor) -> ApiResult[Any]:
        """요청을 실행한다. 취소 외의 실패는 예외가 아니라 결과의 ``error`` 로 전달된다."""
        state = self._retry_policy.start()
        level = logging.INFO if self._verbose else logging.DEBUG

        while True:
            self._logger.log(
                level,
                "요청 전송 %s (시도 %d/%d)",
                descriptor.description,
                state.attempt + 1,
                state.max_attempts,
            )
            response, transport_error = await self._attempt(descriptor)

            try:
                classification = classify(
                    transport_error,
                    response,
                    form=descriptor.form,
                    retry_allowed=not state.exhausted,
                    description=descriptor.description,
                )
            except Exception as exc:
                self._logger.exception("응답 분류 중 예기치 못한 오류: %s", descriptor.description)
                return ApiResult.failure(
                    YobitError(
                        f"{descriptor.description} 응답 처리 실패: {exc}",
                        kind=ErrorKind.PARSE,
                        cause=exc,
                    )
                )

            if classification.outcome is Outcome.RETRY:
                self._logger.warning(
                    "서버 오류 %s, %.3f초 후 재시도 %s (시도 %d/%d)",
                    classification.status_code,
                    state.delay,
                    descriptor.description,
                    state.attempt + 1,
                    state.max_attempts,
                )
                await self._sleep(state.delay)
                state = state.advance()
                continue

            error = classification.error
            if error is not None:
                self._logger.warning(
                    "요청 실패 %s: [%s] %s",
                    descriptor.description,
                    error.kind.value,
                    error.message,
                )
                return ApiResult.failure(error)

            return ApiResult.success(classification.value)


__all__ = [
    "ApiResult",
    "HttpMethod",
    "RequestDescriptor",
    "RequestExecutor",
    "RetryPolicy",
    "RetryState",
]
