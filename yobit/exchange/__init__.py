"""요빗 API 연동 래퍼 패키지."""

from .classifier import YOBIT_ERROR_MESSAGES, Classification, Outcome, classify, map_error_message
from .executor import ApiResult, HttpMethod, RequestDescriptor, RequestExecutor, RetryPolicy, RetryState
from .nonce import MAX_NONCE, NonceGenerator, key_seed
from .signer import serialize_params, sign
from .yobit_client import (
    DEFAULT_LIST_LIMIT,
    DEFAULT_USER_AGENT,
    ClientCredentials,
    YobitClient,
    YobitMethod,
    normalize_pair,
)

__all__ = [
    "ApiResult",
    "Classification",
    "ClientCredentials",
    "DEFAULT_LIST_LIMIT",
    "DEFAULT_USER_AGENT",
    "HttpMethod",
    "MAX_NONCE",
    "NonceGenerator",
    "Outcome",
    "RequestDescriptor",
    "RequestExecutor",
    "RetryPolicy",
    "RetryState",
    "YOBIT_ERROR_MESSAGES",
    "YobitClient",
    "YobitMethod",
    "classify",
    "key_seed",
    "map_error_message",
    "normalize_pair",
    "serialize_params",
    "sign",
]
