"""Pyth Network price adapter."""
import logging
import ssl
from decimal import Decimal

import aiohttp
import certifi

from ..config import PythConfig
from .prices import LatestOraclePrices

logger = logging.getLogger(__name__)


class PythOracle:
    """Fetch prices from the Pyth Hermes API."""

    def __init__(self, config: PythConfig) -> None:
        self.hermes_url = config.hermes_url
        self.price_feeds = dict(config.feeds)

    async def fetch_prices(self, symbols: list[str] | None = None) -> dict[str, Decimal]:
        """Fetch current prices from Pyth Network.

        Args:
            symbols: Optional list of symbols to fetch. If None, fetches all
                     configured feeds.

        Returns an empty mapping when the request fails; the caller keeps
        whatever prices it already had.
        """
        prices: dict[str, Decimal] = {}

        feeds = self.price_feeds
        if symbols is not None:
            feeds = {k: v for k, v in self.price_feeds.items() if k in symbols}

        feed_ids = list(set(feeds.values()))
        if not feed_ids:
            return prices

        query_params = "&".join([f"ids[]={fid}" for fid in feed_ids])
        url = f"{self.hermes_url}?{query_params}"

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        try:
            async with aiohttp.ClientSession(connector=connector) as session:
                async with session.get(url) as response:
                    if response.status != 200:
                        logger.error(
                            "Error fetching prices from Pyth: HTTP %s", response.status
                        )
                        return prices

                    data = await response.json()

            id_to_assets: dict[str, list[str]] = {}
            for asset, feed_id in feeds.items():
                id_to_assets.setdefault(feed_id, []).append(asset)

            for item in data.get("parsed", []):
                feed_id = item.get("id")
                if feed_id not in id_to_assets:
                    continue
                price_data = item.get("price", {})
                price = Decimal(int(price_data.get("price", 0))).scaleb(
                    int(price_data.get("expo", 0))
                )
                for asset in id_to_assets[feed_id]:
                    prices[asset] = price

            logger.debug("Fetched %d prices from Pyth Network", len(prices))
        except (aiohttp.ClientError, OSError, ValueError) as e:
            logger.error("Error fetching prices from Pyth: %s", e)
            return {}

        return prices

    async def refresh(self, latest: LatestOraclePrices) -> int:
        """Fetch all feeds into ``latest``; returns the number of prices updated."""
        prices = await self.fetch_prices()
        if prices:
            latest.update(prices)
        return len(prices)
