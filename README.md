# pyth-hermes

`pyth-hermes` is an asynchronous client for the Pyth Hermes HTTP API, built on
`httpx`. It can fetch:

- the latest price updates
- price feed metadata
- price updates by publish time
- TWAPs
- publisher stake caps

It can also follow the server-sent event stream of live price updates.

## Installation

```
pip install pyth-hermes
```

## Usage

`HermesClient` takes the base URL of a Hermes deployment. You can also pass
your own `httpx.AsyncClient` as `http`. When the client creates its own HTTP
client, `aclose()` closes it, and so does leaving an `async with` block. A
client that you pass in is never closed for you.

```python
import asyncio

from pyth_hermes.client import HermesClient

BASE_URL = "https://hermes.example.com"  # your Hermes deployment
ETH_USD = "ff61491a931112ddf1bd8147cd1b641375f79f5825126d665480874634fd0ace"


async def main():
    async with HermesClient(BASE_URL) as client:
        feeds = await client.get_latest_price_feeds([ETH_USD])
        for feed in feeds:
            print(feed.id, feed.price.to_float())

        metadata = await client.get_price_feeds_metadata(query="bitcoin")
        print(len(metadata), "matching feeds")

        by_time = await client.get_price_updates_by_time(1717632000, [ETH_USD])
        twaps = await client.get_latest_twaps(300, [ETH_USD])
        caps = await client.get_latest_publisher_stake_caps()
        print(by_time.binary.encoding, twaps.parsed, len(caps.binary.data))


asyncio.run(main())
```

The methods are:

- `get_latest_price_feeds(ids)` returns a list of `RpcPriceFeed`. The list is empty when the response has no parsed feeds.
- `get_price_feeds_metadata(query=None, asset_type=None)` returns a list of `PriceFeedMetadata`. A filter that is `None` is not sent.
- `get_price_updates_by_time(publish_time, ids)` returns a `PriceUpdate`.
- `get_latest_twaps(window_seconds, ids)` returns a `TwapsResponse`. It raises `ValueError` if `window_seconds` is negative.
- `get_latest_publisher_stake_caps()` returns a `LatestPublisherStakeCapsUpdateDataResponse`.

Feed ids are sent as repeated `ids[]` query parameters. HTTP error statuses
raise `httpx.HTTPStatusError`. A response body that does not have the expected
shape raises `ValueError`.

### Streaming

`stream_price_updates(ids, on_event)` starts an `asyncio` task and returns it.
The task connects to the streaming endpoint. For every event, it calls
`on_event` with a `ParsedPriceUpdate` for each parsed feed that carries
metadata. Event payloads that cannot be parsed are skipped.

The task reconnects when the stream ends or fails:

- If a connection cannot be opened, the task waits two seconds and retries. This covers a status other than 200 and a content type other than `text/event-stream`.
- In every case, the error is logged through the `pyth_hermes.client` logger.

Cancel the returned task to stop it.

```python
async def follow(client):
    task = await client.stream_price_updates(
        [ETH_USD], lambda update: print(update.id, update.price.to_float())
    )
    await asyncio.sleep(20)
    task.cancel()
```

### Types

All responses are parsed into frozen dataclasses in `pyth_hermes.types`. Each
response type has a `from_dict(data)` class method that builds it from decoded
JSON and checks it. Missing required fields, wrong types and out-of-range
integers raise `ValueError`.

`PriceUpdate.parsed_updates()` yields a `ParsedPriceUpdate` for each parsed feed
that has metadata.

`RpcPrice.to_float()` divides the integer price string by ten to the power of
the absolute exponent. It returns `None` when the price is not an unsigned
integer that fits in 64 bits. It raises `OverflowError` when the exponent is too
large to scale by.

## What it does not do

The package is a library only:

- It has no command-line tool.
- It has no built-in default deployment URL.
- It does not decode or verify the binary update data. `BinaryUpdate.data` is handed back as the strings the server sent.

## Running the tests

```
pip install -e ".[test]"
pytest
```