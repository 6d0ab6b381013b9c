"""
MTGO price lookup via Scryfall.

Price is decoration on a CardStatus. It never feeds the reconciliation
math, and a lookup failure only means the card shows no price.

Search strategy: all printings of the card ordered by MTGO price, taking the
first printing whose tix price is set and non-zero. Cheap reprints with no
MTGO listing report "0.00" and are skipped.

Respects Scryfall rate limits (10 requests/second) with a fixed minimum
delay between requests. Successful quotes are cached in memory.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import replace
from decimal import Decimal, InvalidOperation
from types import TracebackType
from typing import Any

import httpx

from deckrebuild.config import settings
from deckrebuild.models.status import CardStatus, PriceQuote

logger = logging.getLogger(__name__)

PriceLookup = Callable[[str], Awaitable[PriceQuote | None]]

_ZERO_PRICE = "0.00"


class ScryfallPriceClient:
    """
    Async client for card prices.

    Use as an async context manager, or call close() when done. A client
    passed in by the caller is not closed here.
    """

    def __init__(
        self,
        base_url: str | None = None,
        min_delay: float | None = None,
        cache_hours: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = (base_url or settings.scryfall_api_url).rstrip("/")
        self.min_delay = settings.price_lookup_delay if min_delay is None else min_delay
        hours = settings.price_cache_hours if cache_hours is None else cache_hours
        self.cache_ttl = hours * 3600

        self._client = client
        self._owns_client = client is None
        self._lock = asyncio.Lock()
        self._last_request = float("-inf")
        self._cache: dict[tuple[str, str | None], tuple[float, PriceQuote]] = {}

    async def __aenter__(self) -> "ScryfallPriceClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=settings.http_timeout,
                headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
            )
        return self._client

    async def lookup(self, card_name: str, grouping_hint: str | None = None) -> PriceQuote | None:
        """
        Get the MTGO price of a card.

        Args:
            card_name: Normalized card name
            grouping_hint: Set code to restrict the search to

        Returns:
            PriceQuote (price None when no printing has one), or None if
            the card was not found or the lookup failed
        """
        key = (card_name, grouping_hint.lower() if grouping_hint else None)
        cached = self._cache.get(key)
        if cached is not None:
            if time.monotonic() - cached[0] < self.cache_ttl:
                return cached[1]
            del self._cache[key]

        quote = await self._fetch(card_name, key[1])
        if quote is not None:
            self._cache[key] = (time.monotonic(), quote)
        return quote

    async def _fetch(self, card_name: str, set_code: str | None) -> PriceQuote | None:
        query = f'name:"{card_name}"'
        if set_code:
            query += f" set:{set_code}"
        params = {"q": query, "unique": "prints", "order": "tix"}

        try:
            await self._throttle()
            response = await self._http().get(f"{self.base_url}/cards/search", params=params)
            if response.status_code == 404:
                logger.debug("price_card_not_found", extra={"card_name": card_name})
                return None
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "price_lookup_failed",
                extra={"card_name": card_name, "status_code": e.response.status_code},
            )
            return None
        except httpx.RequestError as e:
            logger.warning("price_lookup_failed", extra={"card_name": card_name, "error": str(e)})
            return None
        except ValueError as e:
            logger.warning(
                "price_lookup_bad_response", extra={"card_name": card_name, "error": str(e)}
            )
            return None

        printings = data.get("data", []) if isinstance(data, dict) else []
        if not printings:
            logger.debug("price_card_not_found", extra={"card_name": card_name})
            return None

        return select_printing_price(printings)

    async def _throttle(self) -> None:
        async with self._lock:
            wait = self._last_request + self.min_delay - time.monotonic()
            if wait > 0:
                await asyncio.sleep(wait)
            self._last_request = time.monotonic()


def select_printing_price(printings: list[dict[str, Any]]) -> PriceQuote:
    """
    Pick the quote from a tix-ordered list of printings.

    The first printing with a usable tix price wins. If none has one, the
    first printing's set is reported with no price.
    """
    for printing in printings:
        price = _parse_tix(printing.get("prices", {}).get("tix"))
        if price is not None:
            return PriceQuote(price=price, canonical_grouping=str(printing.get("set", "")).upper())

    return PriceQuote(price=None, canonical_grouping=str(printings[0].get("set", "")).upper())


def _parse_tix(raw: object) -> Decimal | None:
    if not isinstance(raw, str) or not raw or raw == _ZERO_PRICE:
        return None
    try:
        price = Decimal(raw)
    except InvalidOperation:
        return None
    return price if price.is_finite() and price > 0 else None


async def decorate_with_prices(
    statuses: Iterable[CardStatus],
    lookup: PriceLookup,
) -> list[CardStatus]:
    """
    Attach price quotes to card statuses.

    Lookups run one at a time (the client throttles anyway). A lookup that
    raises leaves that card undecorated. Order and quantities are unchanged.
    """
    decorated: list[CardStatus] = []
    for card_status in statuses:
        try:
            quote = await lookup(card_status.name)
        except Exception as e:
            logger.warning(
                "price_decoration_failed",
                extra={"card_name": card_status.name, "error": str(e)},
            )
            quote = None
        decorated.append(replace(card_status, price=quote))
    return decorated
