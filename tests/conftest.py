"""
Shared pytest fixtures for the listings subgraph tests.
"""

from __future__ import annotations

import json
from collections.abc import Generator
from pathlib import Path
from typing import Any

import httpx
import pytest
from graphql import GraphQLSchema
from starlette.testclient import TestClient

from listings_subgraph.config import Settings
from listings_subgraph.datasources import BookingsDb, DataSources, ListingsAPI
from listings_subgraph.main import create_app
from listings_subgraph.schema import load_subgraph_schema

SCHEMA_PATH = Path(__file__).parent.parent / "schema.graphql"
LISTINGS_BASE_URL = "http://listings.test/"


def make_listing(listing_id: str, **overrides: Any) -> dict[str, Any]:
    listing = {
        "id": listing_id,
        "title": f"Listing {listing_id}",
        "description": "A cosy spot in orbit",
        "photoThumbnail": "https://example.test/photo.png",
        "locationType": "SPACESHIP",
        "numOfBeds": 2,
        "costPerNight": 120.0,
        "hostId": "user-1",
        "amenities": [
            {"id": "am-1", "category": "ACCOMMODATION_DETAILS", "name": "Towel"},
        ],
    }
    listing.update(overrides)
    return listing


class FakeListingsService:
    """In-process stand-in for the listings REST service."""

    def __init__(self) -> None:
        self.listings = {
            "listing-1": make_listing("listing-1"),
            "listing-2": make_listing("listing-2", costPerNight=80.0),
            "listing-3": make_listing("listing-3", hostId="user-9", numOfBeds=4),
        }
        self.amenities = [
            {"id": "am-1", "category": "ACCOMMODATION_DETAILS", "name": "Towel"},
            {"id": "am-2", "category": "SPACE_SURVIVAL", "name": "Oxygen"},
        ]
        self.requests: list[httpx.Request] = []
        self.fail_writes = False

    def hits(self, method: str, path: str) -> int:
        return sum(
            1 for request in self.requests if request.method == method and request.url.path == path
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.strip("/").split("/")

        if request.method == "GET":
            if parts == ["featured-listings"]:
                limit = int(request.url.params.get("limit", 3))
                return httpx.Response(200, json=list(self.listings.values())[:limit])
            if parts == ["listing", "amenities"]:
                return httpx.Response(200, json=self.amenities)
            if parts == ["listings"]:
                return httpx.Response(200, json=list(self.listings.values()))
            if len(parts) == 3 and parts[0] == "user" and parts[2] == "listings":
                owned = [item for item in self.listings.values() if item["hostId"] == parts[1]]
                return httpx.Response(200, json=owned)
            if len(parts) == 2 and parts[0] == "listings":
                return self._listing_or_404(parts[1])
            if len(parts) == 3 and parts[0] == "listings" and parts[2] == "totalCost":
                return httpx.Response(200, json={"totalCost": 250.0})

        if request.method == "POST" and parts == ["listings"]:
            if self.fail_writes:
                return httpx.Response(500, text="upstream down")
            body = json.loads(request.content)["listing"]
            created = {**make_listing("listing-new"), **body, "id": "listing-new"}
            created["amenities"] = [
                item for item in self.amenities if item["id"] in body.get("amenities", [])
            ]
            self.listings["listing-new"] = created
            return httpx.Response(200, json=created)

        if request.method == "PATCH" and len(parts) == 2 and parts[0] == "listings":
            if self.fail_writes:
                return httpx.Response(500, text="upstream down")
            if parts[1] not in self.listings:
                return httpx.Response(404, text="listing not found")
            body = json.loads(request.content)["listing"]
            self.listings[parts[1]].update(
                {key: value for key, value in body.items() if key != "amenities"}
            )
            return httpx.Response(200, json=self.listings[parts[1]])

        return httpx.Response(404, text="not found")

    def _listing_or_404(self, listing_id: str) -> httpx.Response:
        if listing_id not in self.listings:
            return httpx.Response(404, text="listing not found")
        return httpx.Response(200, json=self.listings[listing_id])


@pytest.fixture
def schema_path() -> Path:
    return SCHEMA_PATH


@pytest.fixture(scope="session")
def schema() -> GraphQLSchema:
    return load_subgraph_schema(SCHEMA_PATH)


@pytest.fixture
def listings_service() -> FakeListingsService:
    return FakeListingsService()


@pytest.fixture
def created_data_sources() -> list[DataSources]:
    """Every DataSources instance the app builds, in request order."""
    return []


@pytest.fixture
def client(
    schema: GraphQLSchema,
    listings_service: FakeListingsService,
    created_data_sources: list[DataSources],
) -> Generator[TestClient, None, None]:
    def factory() -> DataSources:
        data_sources = DataSources(
            listings_api=ListingsAPI(
                base_url=LISTINGS_BASE_URL,
                transport=httpx.MockTransport(listings_service.handler),
            ),
            bookings_db=BookingsDb(),
        )
        created_data_sources.append(data_sources)
        return data_sources

    app = create_app(schema, settings=Settings(), data_source_factory=factory)
    with TestClient(app) as test_client:
        yield test_client


def run_query(
    client: TestClient,
    query: str,
    variables: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    expected_status: int = 200,
) -> dict[str, Any]:
    """POST a GraphQL operation and return the decoded body.

    Errors that null the whole ``data`` payload are answered with a 400 that
    still carries a GraphQL ``errors`` list; anything else is a 200.
    """
    response = client.post(
        "/graphql/",
        json={"query": query, "variables": variables or {}},
        headers=headers or {},
    )
    assert response.status_code == expected_status, response.text
    body = response.json()
    if expected_status == 400:
        assert body["data"] is None
        assert body["errors"]
    return body


@pytest.fixture
def execute(client: TestClient):
    """POST a GraphQL operation to the app and return the decoded body."""

    def _execute(
        query: str,
        variables: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        expected_status: int = 200,
    ) -> dict[str, Any]:
        return run_query(
            client,
            query,
            variables=variables,
            headers=headers,
            expected_status=expected_status,
        )

    return _execute
