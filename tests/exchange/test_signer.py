from __future__ import annotations

import hashlib
import hmac
from decimal import Decimal

from yobit.exchange import serialize_params, sign


def test_serialize_keeps_insertion_order() -> None:
    params = {"pair": "ltc_btc", "type": "buy", "nonce": 12, "method": "Trade"}

    assert serialize_params(params) == "pair=ltc_btc&type=buy&nonce=12&method=Trade"
    assert serialize_params(dict(reversed(list(params.items())))) == "method=Trade&nonce=12&type=buy&pair=ltc_btc"


def test_serialize_renders_values_for_the_wire() -> None:
    params = {"need_new": True, "rate": 0.00001, "amount": Decimal("2.50"), "empty": False}

    assert serialize_params(params) == "need_new=1&rate=0.00001&amount=2.5&empty=0"


def test_serialize_empty_mapping() -> None:
    assert serialize_params({}) == ""


def test_sign_matches_reference_hmac_sha512() -> None:
    params = {"method": "getInfo", "nonce": 1700000001}
    expected = hmac.new(b"secret", b"method=getInfo&nonce=1700000001", hashlib.sha512).hexdigest()

    signature = sign("secret", params)

    assert signature == expected
    assert signature == signature.lower()
    assert len(signature) == 128


def test_sign_is_deterministic_and_order_sensitive() -> None:
    params = {"a": 1, "b": "x"}

    assert sign("k", params) == sign("k", dict(params))
    assert sign("k", params) != sign("k", {"b": "x", "a": 1})
    assert sign("k", params) != sign("other", params)


def test_sign_encodes_utf8() -> None:
    params = {"address": "주소"}
    expected = hmac.new("비밀".encode("utf-8"), "address=주소".encode("utf-8"), hashlib.sha512).hexdigest()

    assert sign("비밀", params) == expected
