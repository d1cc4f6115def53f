"""Asynchronous HTTP client for the Hermes price service API."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Callable, Iterable
from typing import Any

import httpx

from .types import (
    LatestPublisherStakeCapsUpdateDataResponse,
    ParsedPriceUpdate,
    PriceFeedMetadata,
    PriceUpdate,
    RpcPriceFeed,
    TwapsResponse,
)

logger = logging.getLogger(__name__)

_RECONNECT_DELAY = 2.0
_SSE_HEADERS = {"Accept": "text/event-stream"}


class _StreamOpenError(Exception):
    """The event stream could not be opened."""


def _id_params(ids: Iterable[str]) -> list[tuple[str, str]]:
    return [("ids[]", feed_id) for feed_id in ids]


def _ensure_event_stream(response: httpx.Response) -> None:
    if response.status_code != 200:
        raise _StreamOpenError(f"invalid status code {response.status_code}")
    content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type != "text/event-stream":
        raise _StreamOpenError(f"invalid content type {content_type!r}")


async def _iter_sse_data(lines: AsyncIterator[str]) -> AsyncIterator[str]:
    """Yield the data payload of each server-sent event."""
    data: list[str] = []
    async for raw in lines:
        line = raw.rstrip("\r\n")
        if not line:
            if data:
                yield "\n".join(data)
                data = []
            continue
        if line.startswith(":"):
            continue
        name, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]
        if name == "data":
            data.append(value)


def _dispatch(payload: str, on_event: Callable[[ParsedPriceUpdate], Any]) -> None:
    try:
        update = PriceUpdate.from_dict(json.loads(payload))
    except ValueError:
        return
    for parsed in update.parsed_updates():
        on_event(parsed)


class HermesClient:
    """Queries a deployment of the Hermes API."""

    def __init__(self, base_url: str, http: httpx.AsyncClient | None = None) -> None:
        self.base_url = str(base_url)
        self._owns_http = http is None
        self._http = http if http is not None else httpx.AsyncClient(timeout=None)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> HermesClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def _get_json(self, path: str, params: Any = None) -> Any:
        response = await self._http.get(f"{self.base_url}{path}", params=params)
        response.raise_for_status()
        return response.json()

    async def get_latest_price_feeds(self, ids: Iterable[str]) -> list[RpcPriceFeed]:
        """Get the latest price updates by price feed id."""
        data = await self._get_json("/v2/updates/price/latest", _id_params(ids))
        return PriceUpdate.from_dict(data).parsed or []

    async def get_price_feeds_metadata(
        self, query: str | None = None, asset_type: str | None = None
    ) -> list[PriceFeedMetadata]:
        """List price feeds, optionally filtered by symbol substring and asset type."""
        params = {
            key: value
            for key, value in (("query", query), ("asset_type", asset_type))
            if value is not None
        }
        data = await self._get_json("/v2/price_feeds", params)
        if not isinstance(data, list):
            raise ValueError("expected a list of price feed metadata")
        return [PriceFeedMetadata.from_dict(item) for item in data]

    async def get_price_updates_by_time(
        self, publish_time: int, ids: Iterable[str]
    ) -> PriceUpdate:
        """Get price updates published at or after ``publish_time``."""
        data = await self._get_json(f"/v2/updates/price/{int(publish_time)}", _id_params(ids))
        return PriceUpdate.from_dict(data)

    async def get_latest_twaps(self, window_seconds: int, ids: Iterable[str]) -> TwapsResponse:
        """Get the latest TWAP over a window ending now."""
        if window_seconds < 0:
            raise ValueError("window_seconds must not be negative")
        data = await self._get_json(
            f"/v2/updates/twap/{int(window_seconds)}/latest", _id_params(ids)
        )
        return TwapsResponse.from_dict(data)

    async def get_latest_publisher_stake_caps(self) -> LatestPublisherStakeCapsUpdateDataResponse:
        """Get the most recent publisher stake caps update data."""
        data = await self._get_json("/v2/updates/publisher_stake_caps/latest")
        return LatestPublisherStakeCapsUpdateDataResponse.from_dict(data)

    async def stream_price_updates(
        self, ids: Iterable[str], on_event: Callable[[ParsedPriceUpdate], Any]
    ) -> asyncio.Task[None]:
        """Start a task that streams price updates into ``on_event``; cancel it to stop."""
        return asyncio.create_task(self._run_price_stream(list(ids), on_event))

    async def _run_price_stream(
        self, ids: list[str], on_event: Callable[[ParsedPriceUpdate], Any]
    ) -> None:
        url = f"{self.base_url}/v2/updates/price/stream"
        params = _id_params(ids)
        while True:
            opened = False
            try:
                async with self._http.stream(
                    "GET", url, params=params, headers=_SSE_HEADERS
                ) as response:
                    _ensure_event_stream(response)
                    opened = True
                    async for payload in _iter_sse_data(response.aiter_lines()):
                        _dispatch(payload, on_event)
                logger.error("stream ended, reconnecting")
            except (httpx.HTTPError, _StreamOpenError) as exc:
                if not opened:
                    logger.error("failed to connect SSE: %s", exc)
                    await asyncio.sleep(_RECONNECT_DELAY)
                    continue
                logger.error("sse error: %s", exc)
            await asyncio.sleep(0)