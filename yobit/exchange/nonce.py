"""비공개 API 요청용 nonce 생성기."""

from __future__ import annotations

import threading
from typing import Optional

from ..utils.exceptions import MissingCredentialsError, NonceRangeError
from ..utils.time_utils import unix_time

KEY_SEED_LENGTH = 5
# 거래소는 1 ~ 2^31 - 2 범위의 nonce 만 받는다.
MAX_NONCE = 2**31 - 2
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def key_seed(api_key: str) -> int:
    """API 키 앞 5자리를 16진수로 해석한 값.

    16진수가 아닌 문자가 나오면 그 앞까지만 사용하고, 한 자리도 없으면 0 이다.
    """
    digits = []
    for char in api_key[:KEY_SEED_LENGTH]:
        if char not in _HEX_DIGITS:
            break
        digits.append(char)
    return int("".join(digits), 16) if digits else 0


class NonceGenerator:
    """API 키와 현재 시간으로 시드한 뒤 1씩 증가하는 nonce 를 발급한다.

    같은 인스턴스가 발급한 값은 엄격하게 증가하며 재사용되지 않는다.
    같은 키로 만든 두 인스턴스는 서로를 알지 못하므로 값이 겹칠 수 있다.
    """

    def __init__(self, seed: Optional[int] = None, *, max_value: int = MAX_NONCE) -> None:
        self._value = seed
        self._max_value = max_value
        self._lock = threading.Lock()

    @classmethod
    def from_api_key(cls, api_key: Optional[str], *, now: Optional[int] = None) -> "NonceGenerator":
        generator = cls()
        generator.initialize(api_key, now=now)
        return generator

    @property
    def ready(self) -> bool:
        """시드가 설정되어 nonce 를 발급할 수 있는지 여부."""
        return self._value is not None

    @property
    def current(self) -> Optional[int]:
        """마지막으로 발급한 값(발급 전이면 시드)."""
        return self._value

    def initialize(self, api_key: Optional[str], *, now: Optional[int] = None) -> Optional[int]:
        """API 키로 시드를 계산해 저장하고 반환한다. 키가 없으면 아무것도 하지 않는다."""
        if not api_key:
            return None
        seed = key_seed(api_key) + (unix_time() if now is None else int(now))
        with self._lock:
            self._value = seed
        return seed

    def next(self) -> int:
        """다음 nonce 를 발급한다."""
        with self._lock:
            if self._value is None:
                raise MissingCredentialsError("API 키가 없어 nonce 를 발급할 수 없습니다.")
            candidate = self._value + 1
            if candidate > self._max_value:
                raise NonceRangeError(
                    f"nonce {candidate} 가 허용 범위(최대 {self._max_value})를 벗어났습니다.",
                    code=candidate,
                )
            self._value = candidate
            return candidate


__all__ = ["KEY_SEED_LENGTH", "MAX_NONCE", "NonceGenerator", "key_seed"]
