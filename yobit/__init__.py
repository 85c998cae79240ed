"""요빗 거래소 HTTP API 클라이언트."""

from .exchange import ApiResult, YobitClient
from .utils.exceptions import (
    ErrorKind,
    InvalidArgumentTypeError,
    MissingCredentialsError,
    MissingParameterError,
    NonceRangeError,
    YobitError,
)

__version__ = "0.1.0"

__all__ = [
    "ApiResult",
    "ErrorKind",
    "InvalidArgumentTypeError",
    "MissingCredentialsError",
    "MissingParameterError",
    "NonceRangeError",
    "YobitClient",
    "YobitError",
    "__version__",
]
