from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any

import httpx
from ariadne import MutationType, QueryType, SchemaBindable
from ariadne.contrib.federation import FederatedObjectType
from graphql import GraphQLResolveInfo

from .datasources import DataSources
from .errors import AuthenticationError, BadUserInputError, ForbiddenError

logger = logging.getLogger(__name__)

HOST_ROLE = "Host"

query = QueryType()
mutation = MutationType()
listing = FederatedObjectType("Listing")


def get_data_sources(info: GraphQLResolveInfo) -> DataSources:
    data_sources = info.context.get("data_sources")
    if not isinstance(data_sources, DataSources):
        raise RuntimeError("Data sources missing from GraphQL context")
    return data_sources


def require_host(info: GraphQLResolveInfo, message: str) -> str:
    user_id = info.context.get("user_id")
    if not user_id:
        raise AuthenticationError()
    if info.context.get("user_role") != HOST_ROLE:
        raise ForbiddenError(message)
    return user_id


def parse_stay(check_in: str, check_out: str) -> tuple[date, date]:
    try:
        check_in_date = date.fromisoformat(check_in)
        check_out_date = date.fromisoformat(check_out)
    except ValueError as exc:
        raise BadUserInputError(f"Dates must be formatted as YYYY-MM-DD: {exc}") from exc

    if check_out_date <= check_in_date:
        raise BadUserInputError("Check-out date must be after check-in date")
    return check_in_date, check_out_date


def _upstream_failure(exc: httpx.HTTPError) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.text or str(exc)
    return str(exc)


@query.field("featuredListings")
async def resolve_featured_listings(_: Any, info: GraphQLResolveInfo) -> list[dict]:
    return await get_data_sources(info).listings_api.get_featured_listings()


@query.field("hostListings")
async def resolve_host_listings(_: Any, info: GraphQLResolveInfo) -> list[dict]:
    user_id = require_host(info, "Only hosts have access to listings.")
    return await get_data_sources(info).listings_api.get_listings_for_user(user_id)


@query.field("listing")
async def resolve_listing(_: Any, info: GraphQLResolveInfo, id: str) -> dict:  # noqa: A002
    return await get_data_sources(info).listings_api.get_listing(id)


@query.field("listingAmenities")
async def resolve_listing_amenities(_: Any, info: GraphQLResolveInfo) -> list[dict]:
    return await get_data_sources(info).listings_api.get_all_amenities()


@query.field("searchListings")
async def resolve_search_listings(
    _: Any, info: GraphQLResolveInfo, criteria: dict[str, Any]
) -> list[dict]:
    check_in, check_out = parse_stay(criteria["checkInDate"], criteria["checkOutDate"])
    data_sources = get_data_sources(info)

    listings = await data_sources.listings_api.get_listings(
        num_of_beds=criteria.get("numOfBeds"),
        page=criteria.get("page"),
        limit=criteria.get("limit"),
        sort_by=criteria.get("sortBy"),
    )
    availability = await asyncio.gather(
        *(
            data_sources.bookings_db.is_listing_available(item["id"], check_in, check_out)
            for item in listings
        )
    )
    return [item for item, available in zip(listings, availability) if available]


@mutation.field("createListing")
async def resolve_create_listing(
    _: Any, info: GraphQLResolveInfo, listing: dict[str, Any]
) -> dict[str, Any]:
    user_id = require_host(info, "Only hosts can create new listings")
    try:
        created = await get_data_sources(info).listings_api.create_listing(
            {**listing, "hostId": user_id}
        )
    except httpx.HTTPError as exc:
        logger.warning("Creating listing for host %s failed: %s", user_id, exc)
        return {
            "code": 500,
            "success": False,
            "message": _upstream_failure(exc),
            "listing": None,
        }

    return {
        "code": 200,
        "success": True,
        "message": "Listing successfully created!",
        "listing": created,
    }


@mutation.field("updateListing")
async def resolve_update_listing(
    _: Any,
    info: GraphQLResolveInfo,
    listingId: str,  # noqa: N803
    listing: dict[str, Any],
) -> dict[str, Any]:
    require_host(info, "Only hosts can update listings")
    try:
        updated = await get_data_sources(info).listings_api.update_listing(listingId, listing)
    except httpx.HTTPError as exc:
        logger.warning("Updating listing %s failed: %s", listingId, exc)
        return {
            "code": 500,
            "success": False,
            "message": _upstream_failure(exc),
            "listing": None,
        }

    return {
        "code": 200,
        "success": True,
        "message": "Listing successfully updated!",
        "listing": updated,
    }


@listing.reference_resolver
async def resolve_listing_reference(
    _: Any, info: GraphQLResolveInfo, representation: dict[str, Any]
) -> dict:
    return await get_data_sources(info).listings_api.get_listing(representation["id"])


@listing.field("host")
def resolve_listing_host(obj: dict[str, Any], *_: Any) -> dict[str, Any]:
    return {"id": obj["hostId"]}


@listing.field("totalCost")
async def resolve_listing_total_cost(
    obj: dict[str, Any],
    info: GraphQLResolveInfo,
    checkInDate: str,  # noqa: N803
    checkOutDate: str,  # noqa: N803
) -> float:
    check_in, check_out = parse_stay(checkInDate, checkOutDate)
    result = await get_data_sources(info).listings_api.get_total_cost(
        obj["id"], check_in, check_out
    )
    return result.get("totalCost") or 0


bindables: list[SchemaBindable] = [query, mutation, listing]
