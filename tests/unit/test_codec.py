from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

import pytest
from pydantic import BaseModel

from diskmemcache.core.codec import Codec, JsonCodec
from diskmemcache.core.exceptions import CacheTypeError, DeserializationError


class Quote(BaseModel):
    symbol: str
    price: float
    observed_at: datetime


@dataclass
class Point:
    x: int
    y: int


def test_json_codec_satisfies_protocol() -> None:
    assert isinstance(JsonCodec(), Codec)


def test_model_survives_encode_decode() -> None:
    codec = JsonCodec()
    q = Quote(symbol="BTC", price=1.5, observed_at=datetime(2026, 2, 17, tzinfo=UTC))

    assert codec.decode(codec.encode(q), Quote) == q


def test_dataclass_decodes_into_requested_type() -> None:
    codec = JsonCodec()

    assert codec.decode(codec.encode(Point(1, 2)), Point) == Point(1, 2)


def test_untyped_decode_returns_plain_json() -> None:
    assert JsonCodec().decode(b'{"a": [1, 2]}') == {"a": [1, 2]}


def test_invalid_json_is_deserialization_error() -> None:
    with pytest.raises(DeserializationError) as e:
        JsonCodec().decode(b"{oops")
    assert not isinstance(e.value, CacheTypeError)


def test_wrong_shape_is_type_error() -> None:
    with pytest.raises(CacheTypeError):
        JsonCodec().decode(b'{"symbol": "BTC"}', Quote)


def test_check_is_strict() -> None:
    codec = JsonCodec()

    assert codec.check(5, int) == 5
    with pytest.raises(CacheTypeError):
        codec.check("5", int)


def test_indent_is_applied() -> None:
    assert JsonCodec(indent=2).encode({"a": 1}) == b'{\n  "a": 1\n}'
