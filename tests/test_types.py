import pytest

from pyth_hermes.types import (
    BinaryUpdate,
    LatestPublisherStakeCapsUpdateDataResponse,
    ParsedPriceUpdate,
    PriceFeedMetadata,
    PriceUpdate,
    RpcPrice,
    RpcPriceFeed,
    RpcPriceFeedMetadata,
    TwapsResponse,
)

ETH_USD_FEED_ID = "ff61491a931112ddf1bd8147cd1b641375f79f5825126d665480874634fd0ace"
SOL_USD_FEED_ID = "ef0d8b6fda2ceba41da15d4095d1da392a0d2f8ed0c6c7bc0f4cfac8c280b56d"


def _price(price="12971500000", expo=-8):
    return {"price": price, "conf": "6486733", "expo": expo, "publish_time": 1744523548}


def _feed(feed_id, metadata=True):
    feed = {"id": feed_id, "price": _price(), "ema_price": _price("12970000000")}
    if metadata:
        feed["metadata"] = {"slot": 42, "prev_publish_time": 1744523547}
    return feed


def test_rpc_price_to_float():
    price = RpcPrice(price="12971500000", conf="6486733", expo=-8, publish_time=1744523548)
    assert price.to_float() == 129.715
    price = RpcPrice(price="160644665033", conf="73725033", expo=-8, publish_time=1744523627)
    assert price.to_float() == 1606.44665033


@pytest.mark.parametrize("raw", ["-5", "abc", "", "1.5", " 12", "1_000", str(2**64)])
def test_rpc_price_to_float_rejects_non_unsigned(raw):
    assert RpcPrice(price=raw, conf="0", expo=-8, publish_time=0).to_float() is None


def test_rpc_price_to_float_accepts_plus_sign():
    assert RpcPrice(price="+250", conf="0", expo=-2, publish_time=0).to_float() == 2.5


def test_rpc_price_positive_exponent_still_divides():
    assert RpcPrice(price="500", conf="0", expo=2, publish_time=0).to_float() == 5.0


def test_rpc_price_huge_exponent_overflows():
    with pytest.raises(OverflowError):
        RpcPrice(price="1", conf="0", expo=-20, publish_time=0).to_float()


def test_rpc_price_from_dict():
    price = RpcPrice.from_dict(_price())
    assert price == RpcPrice("12971500000", "6486733", -8, 1744523548)


@pytest.mark.parametrize(
    "data",
    [
        {"price": "1", "conf": "1", "publish_time": 1},
        {"price": "1", "conf": "1", "expo": "x", "publish_time": 1},
        {"price": "1", "conf": "1", "expo": True, "publish_time": 1},
        {"price": "1", "conf": "1", "expo": 2**31, "publish_time": 1},
        {"price": 1, "conf": "1", "expo": -8, "publish_time": 1},
        ["not", "an", "object"],
    ],
)
def test_rpc_price_from_dict_rejects_bad_input(data):
    with pytest.raises(ValueError):
        RpcPrice.from_dict(data)


def test_price_feed_optional_fields_default_to_none():
    feed = RpcPriceFeed.from_dict({**_feed(ETH_USD_FEED_ID, metadata=False), "vaa": None})
    assert feed.metadata is None
    assert feed.vaa is None
    assert feed.ema_price.price == "12970000000"


def test_price_feed_metadata_fields():
    metadata = RpcPriceFeedMetadata.from_dict({"emitter_chain": 26, "slot": 7})
    assert metadata == RpcPriceFeedMetadata(emitter_chain=26, slot=7)


def test_price_feed_metadata_attributes():
    meta = PriceFeedMetadata.from_dict(
        {"id": ETH_USD_FEED_ID, "attributes": {"asset_type": "Crypto", "base": "ETH"}}
    )
    assert meta.attributes == {"asset_type": "Crypto", "base": "ETH"}


def test_price_feed_metadata_rejects_non_string_attribute():
    with pytest.raises(ValueError):
        PriceFeedMetadata.from_dict({"id": "x", "attributes": {"base": 3}})


def test_binary_update_rejects_non_string_chunk():
    with pytest.raises(ValueError):
        BinaryUpdate.from_dict({"encoding": "hex", "data": [1]})


def test_price_update_parsed_updates_skips_feeds_without_metadata():
    update = PriceUpdate.from_dict(
        {
            "binary": {"encoding": "hex", "data": ["abcd"]},
            "parsed": [_feed(ETH_USD_FEED_ID), _feed(SOL_USD_FEED_ID, metadata=False)],
        }
    )
    updates = list(update.parsed_updates())
    assert [u.id for u in updates] == [ETH_USD_FEED_ID]
    assert updates[0] == ParsedPriceUpdate(
        id=ETH_USD_FEED_ID,
        price=RpcPrice.from_dict(_price()),
        ema_price=RpcPrice.from_dict(_price("12970000000")),
        metadata=RpcPriceFeedMetadata(slot=42, prev_publish_time=1744523547),
    )


def test_price_update_without_parsed():
    update = PriceUpdate.from_dict({"binary": {"encoding": "base64", "data": []}, "parsed": None})
    assert update.parsed is None
    assert list(update.parsed_updates()) == []


def test_price_update_requires_binary():
    with pytest.raises(ValueError):
        PriceUpdate.from_dict({"parsed": []})


def test_twaps_response():
    response = TwapsResponse.from_dict(
        {
            "binary": {"encoding": "hex", "data": ["00"]},
            "parsed": [
                {
                    "id": ETH_USD_FEED_ID,
                    "start_timestamp": 100,
                    "end_timestamp": 400,
                    "twap": _price(),
                    "down_slots_ratio": "0.01",
                }
            ],
        }
    )
    assert response.parsed[0].end_timestamp == 400
    assert response.parsed[0].twap.to_float() == 129.715


def test_publisher_stake_caps_response():
    response = LatestPublisherStakeCapsUpdateDataResponse.from_dict(
        {
            "binary": {"encoding": "hex", "data": ["ff"]},
            "parsed": [{"publisher_stake_caps": [{"publisher": "pub1", "cap": 1000}]}],
        }
    )
    assert response.binary.data == ["ff"]
    caps = response.parsed[0].publisher_stake_caps
    assert [(c.publisher, c.cap) for c in caps] == [("pub1", 1000)]