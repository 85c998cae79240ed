"""요빗 REST API 클라이언트."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Awaitable, Iterable, Mapping, MutableMapping, Optional, Union

import requests
from requests import Session

from ..config import get_settings
from ..utils.converters import NumberLike, format_param_value, to_decimal
from ..utils.exceptions import (
    ConfigurationError,
    InvalidArgumentTypeError,
    MissingCredentialsError,
    MissingParameterError,
    YobitError,
)
from ..utils.logger import get_logger
from ..utils.time_utils import to_timestamp
from .executor import ApiResult, HttpMethod, RequestDescriptor, RequestExecutor, RetryPolicy
from .nonce import NonceGenerator
from .signer import sign

JsonMapping = Mapping[str, Any]
MutableJsonMapping = MutableMapping[str, Any]
PairLike = Union[str, Iterable[str]]

DEFAULT_USER_AGENT = "yobit-api/0.1 (+https://github.com/user/yobit-api)"
PUBLIC_API_PATH = "api/3"
PRIVATE_API_PATH = "tapi"
DEFAULT_LIST_LIMIT = 150
ORDER_TYPES = ("buy", "sell")
HISTORY_ORDERS = ("ASC", "DESC")

logger = get_logger(__name__)


def normalize_pair(pair: PairLike) -> str:
    """요빗에서 사용하는 거래쌍 표기로 정규화한다.

    ``"BTC/USD"`` -> ``"btc_usd"``. 여러 거래쌍은 ``-`` 로 잇는다.
    """
    if isinstance(pair, str):
        parts = pair.split("-")
    elif isinstance(pair, Iterable):
        parts = list(pair)
    else:
        raise InvalidArgumentTypeError("pair", f"문자열 또는 문자열 목록이 필요합니다: {pair!r}")
    cleaned = []
    for part in parts:
        if not isinstance(part, str):
            raise InvalidArgumentTypeError("pair", f"문자열이 아닌 값 {part!r}")
        value = part.strip().lower().replace("/", "_")
        if value:
            cleaned.append(value)
    return "-".join(cleaned)


class YobitMethod(str, Enum):
    """요빗 API 메서드 이름."""

    # Public API (api/3)
    INFO = "info"
    TICKER = "ticker/{pair}"
    DEPTH = "depth/{pair}"
    TRADES = "trades/{pair}"

    # Private API (tapi)
    GET_INFO = "getInfo"
    TRADE = "Trade"
    CANCEL_ORDER = "CancelOrder"
    ACTIVE_ORDERS = "ActiveOrders"
    ORDER_INFO = "OrderInfo"
    TRADE_HISTORY = "TradeHistory"
    GET_DEPOSIT_ADDRESS = "GetDepositAddress"
    WITHDRAW_COINS_TO_ADDRESS = "WithdrawCoinsToAddress"


@dataclass(frozen=True)
class ClientCredentials:
    """요빗 API 인증 정보를 담는 데이터 구조."""

    api_key: Optional[str]
    api_secret: Optional[str]

    @property
    def complete(self) -> bool:
        return bool(self.api_key and self.api_secret)


def _require(name: str, value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingParameterError(name)
    return value


def _require_pair(pair: Optional[PairLike]) -> str:
    _require("pair", pair)
    normalized = normalize_pair(pair)  # type: ignore[arg-type]
    if not normalized:
        raise MissingParameterError("pair")
    return normalized


def _positive_number(name: str, value: Optional[NumberLike]) -> NumberLike:
    _require(name, value)
    if isinstance(value, bool) or not isinstance(value, (str, int, float, Decimal)):
        raise InvalidArgumentTypeError(name, f"숫자가 필요합니다: {value!r}")
    try:
        decimal_value = to_decimal(value)
    except ValueError as exc:
        raise InvalidArgumentTypeError(name, f"숫자로 해석할 수 없습니다: {value!r}") from exc
    if decimal_value <= 0:
        raise InvalidArgumentTypeError(name, f"0보다 커야 합니다: {value!r}")
    return value


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentTypeError(name, f"정수가 필요합니다: {value!r}")
    if value <= 0:
        raise InvalidArgumentTypeError(name, f"0보다 커야 합니다: {value!r}")
    return value


def _non_negative_int(name: str, value: Any) -> int:
    if isinstance(value, datetime):
        return to_timestamp(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentTypeError(name, f"정수가 필요합니다: {value!r}")
    if value < 0:
        raise InvalidArgumentTypeError(name, f"음수일 수 없습니다: {value!r}")
    return value


class YobitClient:
    """요빗 REST API 호출을 담당하는 비동기 클라이언트.

    모든 연산은 파라미터를 호출 시점에 검증한 뒤 :class:`ApiResult` 로 끝나는 코루틴을 돌려준다.
    검증 오류는 코루틴을 만들기 전에 예외로 발생하고, 나머지 실패는 결과의 ``error`` 로 전달된다.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        *,
        server: Optional[str] = None,
        timeout: Optional[int] = None,
        verbose: Optional[bool] = None,
        session: Optional[Session] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        max_attempts: Optional[int] = None,
        retry_delay_ms: Optional[int] = None,
        retry_progressive: Optional[bool] = None,
        retry_increment_ms: Optional[int] = None,
    ) -> None:
        settings = get_settings().yobit

        resolved_api_key = api_key or (settings.api_key.get_secret_value() if settings.api_key else None)
        resolved_api_secret = api_secret or (
            settings.api_secret.get_secret_value() if settings.api_secret else None
        )
        self._credentials = ClientCredentials(resolved_api_key, resolved_api_secret)

        self._server = (server or settings.server).rstrip("/")
        timeout_ms = settings.timeout_ms if timeout is None else timeout
        if timeout_ms <= 0:
            raise ConfigurationError(f"timeout 은 0보다 커야 합니다: {timeout_ms}")
        self._timeout = timeout_ms / 1000
        self._verbose = settings.verbose if verbose is None else bool(verbose)
        self._session: Session = session or requests.Session()
        self._owns_session = session is None
        self._default_headers: dict[str, str] = {
            "Accept": "application/json",
            "User-Agent": user_agent,
        }

        try:
            retry_policy = RetryPolicy(
                max_attempts=settings.max_attempts if max_attempts is None else max_attempts,
                delay=(settings.retry_delay_ms if retry_delay_ms is None else retry_delay_ms) / 1000,
                progressive=settings.retry_progressive if retry_progressive is None else retry_progressive,
                increment=(settings.retry_increment_ms if retry_increment_ms is None else retry_increment_ms) / 1000,
            )
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        self._executor = RequestExecutor(
            self._session,
            retry_policy=retry_policy,
            verbose=self._verbose,
            logger=logger,
        )
        self._nonce = NonceGenerator.from_api_key(self._credentials.api_key)

    @property
    def server(self) -> str:
        """요빗 서버 기본 URL."""

        return self._server

    @property
    def timeout(self) -> float:
        """요청 타임아웃(초)."""

        return self._timeout

    @property
    def verbose(self) -> bool:
        return self._verbose

    @property
    def session(self) -> Session:
        """내부 HTTP 세션."""

        return self._session

    @property
    def credentials(self) -> ClientCredentials:
        """설정된 인증 정보."""

        return self._credentials

    @property
    def nonce(self) -> NonceGenerator:
        return self._nonce

    @property
    def executor(self) -> RequestExecutor:
        return self._executor

    def close(self) -> None:
        """세션을 종료한다."""

        if self._owns_session:
            self._session.close()

    async def __aenter__(self) -> "YobitClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # 요청 경로
    # ------------------------------------------------------------------
    def _headers(self, extra: Optional[Mapping[str, str]] = None) -> dict[str, str]:
        headers = dict(self._default_headers)
        if extra:
            headers.update(extra)
        return headers

    def build_public_request(self, method: str, params: Optional[JsonMapping] = None) -> RequestDescriptor:
        """공개 API 요청 설명자를 만든다."""
        query = {key: format_param_value(value) for key, value in (params or {}).items() if value is not None}
        return RequestDescriptor(
            method_name=method,
            url=f"{self._server}/{PUBLIC_API_PATH}/{method}",
            http_method=HttpMethod.GET,
            params=query,
            headers=self._headers(),
            timeout=self._timeout,
            form=False,
        )

    def build_private_request(self, method: str, params: Optional[JsonMapping] = None) -> RequestDescriptor:
        """비공개 API 요청 설명자를 만든다. nonce 를 소비하고 서명을 붙인다."""
        if not self._credentials.complete or not self._nonce.ready:
            raise MissingCredentialsError("비공개 API 호출에는 api_key 와 api_secret 이 필요합니다.")

        body: dict[str, str] = {
            key: format_param_value(value) for key, value in (params or {}).items() if value is not None
        }
        body["nonce"] = str(self._nonce.next())
        body["method"] = method

        signature = sign(self._credentials.api_secret, body)  # type: ignore[arg-type]
        return RequestDescriptor(
            method_name=method,
            url=f"{self._server}/{PRIVATE_API_PATH}",
            http_method=HttpMethod.POST,
            params=body,
            headers=self._headers({"Key": self._credentials.api_key, "Sign": signature}),  # type: ignore[dict-item]
            timeout=self._timeout,
            form=True,
        )

    async def public_request(self, method: str, params: Optional[JsonMapping] = None) -> ApiResult[Any]:
        """공개 API 를 GET 으로 호출한다."""
        return await self._executor.execute(self.build_public_request(method, params))

    async def private_request(self, method: str, params: Optional[JsonMapping] = None) -> ApiResult[Any]:
        """비공개 API 를 서명된 POST 로 호출한다.

        인증 정보가 없거나 nonce 를 발급할 수 없으면 네트워크 호출 없이 오류 결과를 반환한다.
        """
        try:
            descriptor = self.build_private_request(method, params)
        except YobitError as exc:
            logger.warning("비공개 요청 준비 실패 (%s): %s", method, exc.message)
            return ApiResult.failure(exc)
        return await self._executor.execute(descriptor)

    # ------------------------------------------------------------------
    # 공개 API
    # ------------------------------------------------------------------
    def get_info(self) -> Awaitable[ApiResult[JsonMapping]]:
        """거래소 정보(거래쌍, 수수료, 한도)."""
        return self.public_request(YobitMethod.INFO.value)

    def get_ticker(self, pair: Optional[PairLike] = None) -> Awaitable[ApiResult[JsonMapping]]:
        method = YobitMethod.TICKER.value.format(pair=_require_pair(pair))
        return self.public_request(method)

    def get_depth(
        self, pair: Optional[PairLike] = None, limit: int = DEFAULT_LIST_LIMIT
    ) -> Awaitable[ApiResult[JsonMapping]]:
        method = YobitMethod.DEPTH.value.format(pair=_require_pair(pair))
        return self.public_request(method, {"limit": _positive_int("limit", limit)})

    def get_trades(
        self, pair: Optional[PairLike] = None, limit: int = DEFAULT_LIST_LIMIT
    ) -> Awaitable[ApiResult[JsonMapping]]:
        method = YobitMethod.TRADES.value.format(pair=_require_pair(pair))
        return self.public_request(method, {"limit": _positive_int("limit", limit)})

    # ------------------------------------------------------------------
    # 비공개 API
    # ------------------------------------------------------------------
    def get_account_info(self) -> Awaitable[ApiResult[JsonMapping]]:
        """잔고, 권한, 진행 중 주문 수."""
        return self.private_request(YobitMethod.GET_INFO.value)

    def place_order(
        self,
        pair: Optional[str] = None,
        order_type: Optional[str] = None,
        rate: Optional[NumberLike] = None,
        amount: Optional[NumberLike] = None,
    ) -> Awaitable[ApiResult[JsonMapping]]:
        """지정가 주문을 낸다. ``order_type`` 은 ``buy`` 또는 ``sell`` (전송 필드명 ``type``)."""
        normalized_pair = _require_pair(pair)
        side = str(_require("type", order_type)).strip().lower()
        if side not in ORDER_TYPES:
            raise InvalidArgumentTypeError("type", f"'buy' 또는 'sell' 이어야 합니다: {order_type!r}")
        payload: MutableJsonMapping = {
            "pair": normalized_pair,
            "type": side,
            "rate": _positive_number("rate", rate),
            "amount": _positive_number("amount", amount),
        }
        return self.private_request(YobitMethod.TRADE.value, payload)

    def cancel_order(self, order_id: Optional[Union[int, str]] = None) -> Awaitable[ApiResult[JsonMapping]]:
        payload = {"order_id": _require("order_id", order_id)}
        return self.private_request(YobitMethod.CANCEL_ORDER.value, payload)

    def get_active_orders(self, pair: Optional[str] = None) -> Awaitable[ApiResult[JsonMapping]]:
        payload = {"pair": _require_pair(pair)}
        return self.private_request(YobitMethod.ACTIVE_ORDERS.value, payload)

    def get_order_info(self, order_id: Optional[Union[int, str]] = None) -> Awaitable[ApiResult[JsonMapping]]:
        payload = {"order_id": _require("order_id", order_id)}
        return self.private_request(YobitMethod.ORDER_INFO.value, payload)

    def get_trade_history(
        self,
        pair: Optional[str] = None,
        *,
        from_: Optional[int] = None,
        count: Optional[int] = None,
        from_id: Optional[int] = None,
        end_id: Optional[int] = None,
        order: Optional[str] = None,
        since: Optional[Union[int, datetime]] = None,
        end: Optional[Union[int, datetime]] = None,
    ) -> Awaitable[ApiResult[JsonMapping]]:
        """체결 내역. 지정한 필터만 전송하며 나머지는 거래소 기본값을 따른다.

        거래소 기본값: from=0, count=1000, from_id=0, end_id=∞, order=DESC, since=0, end=∞.
        """
        payload: MutableJsonMapping = {"pair": _require_pair(pair)}
        if from_ is not None:
            payload["from"] = _non_negative_int("from", from_)
        if count is not None:
            payload["count"] = _positive_int("count", count)
        if from_id is not None:
            payload["from_id"] = _non_negative_int("from_id", from_id)
        if end_id is not None:
            payload["end_id"] = _non_negative_int("end_id", end_id)
        if order is not None:
            normalized_order = str(order).strip().upper()
            if normalized_order not in HISTORY_ORDERS:
                raise InvalidArgumentTypeError("order", f"'ASC' 또는 'DESC' 이어야 합니다: {order!r}")
            payload["order"] = normalized_order
        if since is not None:
            payload["since"] = _non_negative_int("since", since)
        if end is not None:
            payload["end"] = _non_negative_int("end", end)
        return self.private_request(YobitMethod.TRADE_HISTORY.value, payload)

    def get_deposit_address(
        self,
        coin_name: Optional[str] = None,
        need_new: bool = False,
    ) -> Awaitable[ApiResult[JsonMapping]]:
        """입금 주소. ``need_new`` 가 참이면 새 주소를 발급받는다."""
        payload = {
            "coinName": str(_require("coin_name", coin_name)).strip().lower(),
            "need_new": bool(need_new),
        }
        return self.private_request(YobitMethod.GET_DEPOSIT_ADDRESS.value, payload)

    def withdraw(
        self,
        coin_name: Optional[str] = None,
        amount: Optional[NumberLike] = None,
        address: Optional[str] = None,
    ) -> Awaitable[ApiResult[JsonMapping]]:
        payload = {
            "coinName": str(_require("coin_name", coin_name)).strip().lower(),
            "amount": _positive_number("amount", amount),
            "address": str(_require("address", address)).strip(),
        }
        return self.private_request(YobitMethod.WITHDRAW_COINS_TO_ADDRESS.value, payload)


__all__ = [
    "ClientCredentials",
    "DEFAULT_LIST_LIMIT",
    "DEFAULT_USER_AGENT",
    "YobitClient",
    "YobitMethod",
    "normalize_pair",
]
