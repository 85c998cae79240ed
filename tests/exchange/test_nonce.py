from __future__ import annotations

import threading

import pytest

from yobit.exchange import MAX_NONCE, NonceGenerator, key_seed
from yobit.utils.exceptions import ErrorKind, MissingCredentialsError, NonceRangeError


@pytest.mark.parametrize(
    "api_key,expected",
    [
        ("ABCDE12345", 0xABCDE),
        ("abcde", 0xABCDE),
        ("12", 0x12),
        ("1", 1),
        ("mockApiKey", 0),
        ("A1zzz", 0xA1),
    ],
)
def test_key_seed_uses_leading_hex_digits(api_key: str, expected: int) -> None:
    assert key_seed(api_key) == expected


def test_initialize_adds_unix_time_to_key_seed() -> None:
    generator = NonceGenerator.from_api_key("00010FFFF", now=1_700_000_000)

    assert generator.ready
    assert generator.current == 0x10 + 1_700_000_000


def test_initialize_uses_current_time(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("yobit.exchange.nonce.unix_time", lambda: 1_600_000_000)

    generator = NonceGenerator.from_api_key("1")

    assert generator.current == 1_600_000_001


def test_without_api_key_no_nonce_capability() -> None:
    generator = NonceGenerator.from_api_key(None)

    assert not generator.ready
    with pytest.raises(MissingCredentialsError):
        generator.next()


def test_next_is_strictly_increasing_by_one() -> None:
    generator = NonceGenerator.from_api_key("fffff", now=1_700_000_000)
    seed = generator.current

    issued = [generator.next() for _ in range(500)]

    assert issued == list(range(seed + 1, seed + 501))


def test_concurrent_issuance_never_repeats() -> None:
    generator = NonceGenerator(seed=1000)
    issued: list[int] = []
    lock = threading.Lock()

    def worker() -> None:
        local = [generator.next() for _ in range(200)]
        with lock:
            issued.extend(local)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(issued) == 1600
    assert len(set(issued)) == 1600
    assert max(issued) == 1000 + 1600


def test_next_raises_when_range_exceeded_without_wrapping() -> None:
    generator = NonceGenerator(seed=MAX_NONCE - 1)

    assert generator.next() == MAX_NONCE
    with pytest.raises(NonceRangeError) as exc:
        generator.next()

    assert exc.value.kind is ErrorKind.NONCE_RANGE
    assert generator.current == MAX_NONCE
