from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from listings_subgraph.config import Settings, get_settings

from .bookings import Booking, BookingsDb
from .listings import ListingsAPI


@dataclass(slots=True)
class DataSources:
    listings_api: ListingsAPI
    bookings_db: BookingsDb

    async def close(self) -> None:
        await self.listings_api.close()
        await self.bookings_db.close()


DataSourceFactory = Callable[[], DataSources]


def build_data_sources(settings: Settings | None = None) -> DataSources:
    """Construct a fresh set of datasources for one request."""

    settings = settings or get_settings()
    return DataSources(
        listings_api=ListingsAPI(base_url=str(settings.listings_api_url)),
        bookings_db=BookingsDb(),
    )


__all__ = [
    "Booking",
    "BookingsDb",
    "DataSourceFactory",
    "DataSources",
    "ListingsAPI",
    "build_data_sources",
]
