"""Response models for the Hermes price service API."""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

_I32 = (-(2**31), 2**31 - 1)
_I64 = (-(2**63), 2**63 - 1)
_U64_MAX = 2**64 - 1
_UNSIGNED = re.compile(r"\+?[0-9]+")


def _object(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object for {what}, got {type(data).__name__}")
    return data


def _value(data: Mapping[str, Any], key: str, optional: bool) -> Any:
    value = data.get(key)
    if value is None and not optional:
        raise ValueError(f"missing field `{key}`")
    return value


def _str(data: Mapping[str, Any], key: str, *, optional: bool = False) -> str | None:
    value = _value(data, key, optional)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"field `{key}` must be a string, got {type(value).__name__}")
    return value


def _int(
    data: Mapping[str, Any],
    key: str,
    bounds: tuple[int, int] = _I64,
    *,
    optional: bool = False,
) -> int | None:
    value = _value(data, key, optional)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field `{key}` must be an integer, got {type(value).__name__}")
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"field `{key}` is out of range: {value}")
    return value


def _list(data: Mapping[str, Any], key: str, *, optional: bool = False) -> list[Any] | None:
    value = _value(data, key, optional)
    if value is not None and not isinstance(value, list):
        raise ValueError(f"field `{key}` must be a list, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class RpcPrice:
    """A price with its confidence interval, exponent and publish time."""

    price: str
    conf: str
    expo: int
    publish_time: int

    @classmethod
    def from_dict(cls, data: Any) -> RpcPrice:
        data = _object(data, "price")
        return cls(
            price=_str(data, "price"),
            conf=_str(data, "conf"),
            expo=_int(data, "expo", _I32),
            publish_time=_int(data, "publish_time"),
        )

    def to_float(self) -> float | None:
        """Scale the integer price by its exponent; None if the price is not an unsigned integer."""
        if not _UNSIGNED.fullmatch(self.price):
            return None
        price = int(self.price)
        if price > _U64_MAX:
            return None
        scale = 10 ** abs(self.expo)
        if scale > _U64_MAX:
            raise OverflowError(f"exponent {self.expo} is too large to scale a price")
        return float(price) / float(scale)


@dataclass(frozen=True)
class RpcPriceFeedMetadata:
    """Optional metadata attached to a price feed update."""

    emitter_chain: int | None = None
    prev_publish_time: int | None = None
    price_service_receive_time: int | None = None
    slot: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> RpcPriceFeedMetadata:
        data = _object(data, "metadata")
        return cls(
            emitter_chain=_int(data, "emitter_chain", _I32, optional=True),
            prev_publish_time=_int(data, "prev_publish_time", optional=True),
            price_service_receive_time=_int(data, "price_service_receive_time", optional=True),
            slot=_int(data, "slot", optional=True),
        )


@dataclass(frozen=True)
class RpcPriceFeed:
    """A parsed price feed as returned by the update endpoints."""

    id: str
    price: RpcPrice
    ema_price: RpcPrice
    metadata: RpcPriceFeedMetadata | None = None
    vaa: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> RpcPriceFeed:
        data = _object(data, "price feed")
        metadata = data.get("metadata")
        return cls(
            id=_str(data, "id"),
            price=RpcPrice.from_dict(_value(data, "price", False)),
            ema_price=RpcPrice.from_dict(_value(data, "ema_price", False)),
            metadata=None if metadata is None else RpcPriceFeedMetadata.from_dict(metadata),
            vaa=_str(data, "vaa", optional=True),
        )


@dataclass(frozen=True)
class PriceFeedMetadata:
    """A price feed id with its descriptive attributes."""

    id: str
    attributes: dict[str, str]

    @classmethod
    def from_dict(cls, data: Any) -> PriceFeedMetadata:
        data = _object(data, "price feed metadata")
        attributes = _object(_value(data, "attributes", False), "attributes")
        for key, value in attributes.items():
            if not isinstance(value, str):
                raise ValueError(f"attribute `{key}` must be a string, got {type(value).__name__}")
        return cls(id=_str(data, "id"), attributes=dict(attributes))


@dataclass(frozen=True)
class BinaryUpdate:
    """Encoded update data suitable for on-chain submission."""

    encoding: str
    data: list[str]

    @classmethod
    def from_dict(cls, data: Any) -> BinaryUpdate:
        data = _object(data, "binary")
        chunks = _list(data, "data")
        for chunk in chunks:
            if not isinstance(chunk, str):
                raise ValueError(f"binary data entries must be strings, got {type(chunk).__name__}")
        return cls(encoding=_str(data, "encoding"), data=list(chunks))


@dataclass(frozen=True)
class ParsedPriceUpdate:
    """A streamed price update whose metadata is known to be present."""

    id: str
    price: RpcPrice
    ema_price: RpcPrice
    metadata: RpcPriceFeedMetadata


@dataclass(frozen=True)
class PriceUpdate:
    """Binary and parsed price updates."""

    binary: BinaryUpdate
    parsed: list[RpcPriceFeed] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> PriceUpdate:
        data = _object(data, "price update")
        parsed = _list(data, "parsed", optional=True)
        return cls(
            binary=BinaryUpdate.from_dict(_value(data, "binary", False)),
            parsed=None if parsed is None else [RpcPriceFeed.from_dict(item) for item in parsed],
        )

    def parsed_updates(self) -> Iterator[ParsedPriceUpdate]:
        """Yield the parsed feeds that carry metadata."""
        for feed in self.parsed or ():
            if feed.metadata is not None:
                yield ParsedPriceUpdate(
                    id=feed.id,
                    price=feed.price,
                    ema_price=feed.ema_price,
                    metadata=feed.metadata,
                )


@dataclass(frozen=True)
class ParsedPriceFeedTwap:
    """A time-weighted average price over a window."""

    id: str
    start_timestamp: int
    end_timestamp: int
    twap: RpcPrice
    down_slots_ratio: str

    @classmethod
    def from_dict(cls, data: Any) -> ParsedPriceFeedTwap:
        data = _object(data, "twap")
        return cls(
            id=_str(data, "id"),
            start_timestamp=_int(data, "start_timestamp"),
            end_timestamp=_int(data, "end_timestamp"),
            twap=RpcPrice.from_dict(_value(data, "twap", False)),
            down_slots_ratio=_str(data, "down_slots_ratio"),
        )


@dataclass(frozen=True)
class TwapsResponse:
    """Binary and parsed TWAP updates."""

    binary: BinaryUpdate
    parsed: list[ParsedPriceFeedTwap] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> TwapsResponse:
        data = _object(data, "twaps response")
        parsed = _list(data, "parsed", optional=True)
        return cls(
            binary=BinaryUpdate.from_dict(_value(data, "binary", False)),
            parsed=None
            if parsed is None
            else [ParsedPriceFeedTwap.from_dict(item) for item in parsed],
        )


@dataclass(frozen=True)
class ParsedPublisherStakeCap:
    """The stake cap of one publisher."""

    publisher: str
    cap: int

    @classmethod
    def from_dict(cls, data: Any) -> ParsedPublisherStakeCap:
        data = _object(data, "publisher stake cap")
        return cls(publisher=_str(data, "publisher"), cap=_int(data, "cap"))


@dataclass(frozen=True)
class ParsedPublisherStakeCapsUpdate:
    """A set of publisher stake caps."""

    publisher_stake_caps: list[ParsedPublisherStakeCap]

    @classmethod
    def from_dict(cls, data: Any) -> ParsedPublisherStakeCapsUpdate:
        data = _object(data, "publisher stake caps update")
        caps = _list(data, "publisher_stake_caps")
        return cls(publisher_stake_caps=[ParsedPublisherStakeCap.from_dict(item) for item in caps])


@dataclass(frozen=True)
class LatestPublisherStakeCapsUpdateDataResponse:
    """Binary and parsed publisher stake caps updates."""

    binary: BinaryUpdate
    parsed: list[ParsedPublisherStakeCapsUpdate] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> LatestPublisherStakeCapsUpdateDataResponse:
        data = _object(data, "publisher stake caps response")
        parsed = _list(data, "parsed", optional=True)
        return cls(
            binary=BinaryUpdate.from_dict(_value(data, "binary", False)),
            parsed=None
            if parsed is None
            else [ParsedPublisherStakeCapsUpdate.from_dict(item) for item in parsed],
        )