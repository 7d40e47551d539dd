from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any

import httpx

from listings_subgraph.config import get_settings

from .base import RESTDataSource


class ListingsAPI(RESTDataSource):
    """Client for the listings REST service."""

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            base_url=base_url or str(get_settings().listings_api_url),
            transport=transport,
        )

    async def get_featured_listings(self, limit: int = 3) -> list[dict[str, Any]]:
        return await self.get("featured-listings", params={"limit": limit})

    async def get_listings_for_user(self, user_id: str) -> list[dict[str, Any]]:
        return await self.get(f"user/{user_id}/listings")

    async def get_listing(self, listing_id: str) -> dict[str, Any]:
        return await self.get(f"listings/{listing_id}")

    async def get_all_amenities(self) -> list[dict[str, Any]]:
        return await self.get("listing/amenities")

    async def get_listings(
        self,
        *,
        num_of_beds: int | None = None,
        page: int | None = None,
        limit: int | None = None,
        sort_by: str | None = None,
    ) -> list[dict[str, Any]]:
        return await self.get(
            "listings",
            params={
                "numOfBeds": num_of_beds,
                "page": page,
                "limit": limit,
                "sortBy": sort_by,
            },
        )

    async def get_total_cost(
        self, listing_id: str, check_in: date, check_out: date
    ) -> dict[str, Any]:
        return await self.get(
            f"listings/{listing_id}/totalCost",
            params={
                "checkInDate": check_in.isoformat(),
                "checkOutDate": check_out.isoformat(),
            },
        )

    async def create_listing(self, listing: Mapping[str, Any]) -> dict[str, Any]:
        return await self.post("listings", {"listing": dict(listing)})

    async def update_listing(
        self, listing_id: str, listing: Mapping[str, Any]
    ) -> dict[str, Any]:
        return await self.patch(f"listings/{listing_id}", {"listing": dict(listing)})
