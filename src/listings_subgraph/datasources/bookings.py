"""In-memory stand-in for the bookings database."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True, slots=True)
class Booking:
    id: str
    listing_id: str
    guest_id: str
    check_in_date: date
    check_out_date: date

    def overlaps(self, check_in: date, check_out: date) -> bool:
        # Stays are half-open: checking out on a day frees it for check-in.
        return self.check_in_date < check_out and check_in < self.check_out_date


SEED_BOOKINGS: tuple[Booking, ...] = (
    Booking(
        id="booking-1",
        listing_id="listing-1",
        guest_id="user-2",
        check_in_date=date(2025, 7, 1),
        check_out_date=date(2025, 7, 5),
    ),
    Booking(
        id="booking-2",
        listing_id="listing-1",
        guest_id="user-3",
        check_in_date=date(2025, 7, 10),
        check_out_date=date(2025, 7, 12),
    ),
    Booking(
        id="booking-3",
        listing_id="listing-2",
        guest_id="user-2",
        check_in_date=date(2025, 8, 2),
        check_out_date=date(2025, 8, 9),
    ),
)


class BookingsDb:
    """Booking lookups for a single request.

    ``query_count`` tracks how many lookups this instance served; a fresh
    instance is built for every request so the count never carries over.
    """

    def __init__(self, bookings: Iterable[Booking] | None = None) -> None:
        self._bookings: tuple[Booking, ...] = (
            SEED_BOOKINGS if bookings is None else tuple(bookings)
        )
        self.query_count = 0

    async def get_bookings_for_listing(self, listing_id: str) -> list[Booking]:
        self.query_count += 1
        return [booking for booking in self._bookings if booking.listing_id == listing_id]

    async def is_listing_available(
        self, listing_id: str, check_in: date, check_out: date
    ) -> bool:
        if check_out <= check_in:
            raise ValueError("Check-out date must be after check-in date")

        bookings = await self.get_bookings_for_listing(listing_id)
        return not any(booking.overlaps(check_in, check_out) for booking in bookings)

    async def close(self) -> None:
        return None
