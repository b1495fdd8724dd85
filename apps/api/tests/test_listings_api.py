"""End-to-end tests for listing search and ownership-gated mutations."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from realty.core.ids import new_id


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def seeded(register_agent, create_listing):
    """Three listings owned by one agent."""

    owner = await register_agent()
    token = owner["token"]
    listings = [
        await create_listing(token, price=100000, squareFeet=900, zipCode="35801",
                             address="101 Budget Ln, Huntsville, AL 35801"),
        await create_listing(token, price=250000, squareFeet=1600, zipCode="35802",
                             address="505 Maple St, Huntsville, AL 35802", status="pending"),
        await create_listing(token, price=500000, squareFeet=3000, zipCode="35801-1234",
                             address="2222 Postal Way, Huntsville, AL 35801-1234", status="sold"),
    ]
    return owner, listings


@pytest.mark.asyncio
async def test_create_listing_records_owner(client, register_agent) -> None:
    owner = await register_agent()

    response = await client.post(
        "/api/listings",
        json={"price": 325000, "address": " 1 Main St ", "squareFeet": 2100, "zipCode": "35801"},
        headers=_bearer(owner["token"]),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Listing created successfully"
    listing = body["listing"]
    assert listing["createdBy"] == owner["agent"]["id"]
    assert listing["status"] == "active"
    assert listing["images"] == []
    assert listing["address"] == "1 Main St"
    assert len(listing["id"]) == 24


@pytest.mark.asyncio
async def test_create_listing_requires_token(client) -> None:
    response = await client.post(
        "/api/listings",
        json={"price": 1, "address": "x", "squareFeet": 1, "zipCode": "35801"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_listing_validation(client, register_agent) -> None:
    owner = await register_agent()

    response = await client.post(
        "/api/listings",
        json={"price": -10, "address": "   ", "squareFeet": 100, "zipCode": "ABCDE"},
        headers=_bearer(owner["token"]),
    )

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    assert body["details"]["price"] == "Price must be a positive number"
    assert body["details"]["address"] == "Address is required"
    assert body["details"]["zipCode"].startswith("ZIP code must be a valid US ZIP code format")


@pytest.mark.asyncio
async def test_search_filters_by_price_range(client, seeded) -> None:
    response = await client.get("/api/listings", params={"minPrice": "200000", "maxPrice": "600000"})

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert body["pagination"]["totalCount"] == 2
    assert sorted(item["price"] for item in body["listings"]) == [250000, 500000]


@pytest.mark.asyncio
async def test_search_inverted_range_is_rejected(client, seeded) -> None:
    response = await client.get("/api/listings", params={"minPrice": "500", "maxPrice": "100"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "minPrice cannot be greater than maxPrice"
    assert body["details"] == {"minPrice": 500, "maxPrice": 100}


@pytest.mark.asyncio
async def test_search_by_zip_status_and_keyword(client, seeded) -> None:
    by_zip = (await client.get("/api/listings", params={"zipCode": "35801-1234"})).json()
    by_status = (await client.get("/api/listings", params={"status": "pending"})).json()
    by_keyword = (await client.get("/api/listings", params={"keyword": "MAPLE"})).json()

    assert [item["zipCode"] for item in by_zip["listings"]] == ["35801-1234"]
    assert [item["status"] for item in by_status["listings"]] == ["pending"]
    assert [item["address"] for item in by_keyword["listings"]] == ["505 Maple St, Huntsville, AL 35802"]


@pytest.mark.asyncio
@pytest.mark.parametrize("keyword", ["%", "_", "35801_"])
async def test_keyword_wildcards_match_literally(client, seeded, keyword) -> None:
    body = (await client.get("/api/listings", params={"keyword": keyword})).json()

    assert body["count"] == 0
    assert body["listings"] == []


@pytest.mark.asyncio
async def test_search_reports_limit_overflow(client) -> None:
    response = await client.get("/api/listings", params={"limit": "101"})

    assert response.status_code == 400
    assert response.json()["error"] == "limit must not exceed 100"


@pytest.mark.asyncio
async def test_search_filters_are_repeatable(client, seeded) -> None:
    first = (await client.get("/api/listings", params={"zipCode": "35801"})).json()
    second = (await client.get("/api/listings", params={"zipCode": "35801"})).json()

    assert first == second
    assert first["count"] == 1


@pytest.mark.asyncio
async def test_search_sort_and_pagination(client, seeded) -> None:
    first = (await client.get("/api/listings", params={"sortBy": "price", "limit": "2"})).json()
    second = (
        await client.get("/api/listings", params={"sortBy": "price", "limit": "2", "page": "2"})
    ).json()

    assert [item["price"] for item in first["listings"]] == [100000, 250000]
    assert [item["price"] for item in second["listings"]] == [500000]
    assert first["pagination"] == {
        "currentPage": 1,
        "pageLimit": 2,
        "totalCount": 3,
        "totalPages": 2,
        "hasNextPage": True,
        "hasPrevPage": False,
    }
    assert second["pagination"]["hasNextPage"] is False
    assert second["pagination"]["hasPrevPage"] is True


@pytest.mark.asyncio
async def test_search_descending_square_feet(client, seeded) -> None:
    body = (await client.get("/api/listings", params={"sortBy": "squareFeet", "order": "desc"})).json()

    assert [item["squareFeet"] for item in body["listings"]] == [3000, 1600, 900]


@pytest.mark.asyncio
async def test_search_without_matches(client, seeded) -> None:
    body = (await client.get("/api/listings", params={"minPrice": "9000000"})).json()

    assert body["listings"] == []
    assert body["count"] == 0
    assert body["message"] == "No listings found matching the specified criteria"
    assert body["pagination"]["totalPages"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [
        {"minPrice": "cheap"},
        {"zipCode": "123"},
        {"status": "archived"},
        {"limit": "0"},
        {"limit": "101"},
        {"page": "10001"},
        {"sortBy": "address"},
    ],
)
async def test_search_rejects_bad_parameters(client, params) -> None:
    response = await client.get("/api/listings", params=params)

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid query parameter"


@pytest.mark.asyncio
async def test_get_listing_by_id(client, seeded) -> None:
    _, listings = seeded
    target = listings[1]

    response = await client.get(f"/api/listings/{target['id']}")

    assert response.status_code == 200
    assert response.json()["listing"]["address"] == target["address"]


@pytest.mark.asyncio
async def test_get_listing_bad_and_missing_ids(client) -> None:
    malformed = await client.get("/api/listings/not-an-id")
    missing_id = new_id()
    missing = await client.get(f"/api/listings/{missing_id}")

    assert malformed.status_code == 400
    assert malformed.json()["message"] == "Invalid listing ID format"
    assert missing.status_code == 404
    assert missing.json()["message"] == "Listing not found"
    assert missing.json()["error"] == f"No listing exists with ID: {missing_id}"


@pytest.mark.asyncio
async def test_owner_updates_listing(client, seeded) -> None:
    owner, listings = seeded
    target = listings[0]

    response = await client.patch(
        f"/api/listings/{target['id']}",
        json={"price": 110000, "status": "pending"},
        headers=_bearer(owner["token"]),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Listing updated successfully"
    assert body["listing"]["price"] == 110000
    assert body["listing"]["status"] == "pending"
    assert body["listing"]["address"] == target["address"]

    fetched = (await client.get(f"/api/listings/{target['id']}")).json()["listing"]
    assert fetched["price"] == 110000


@pytest.mark.asyncio
async def test_put_is_a_partial_update(client, seeded) -> None:
    owner, listings = seeded

    response = await client.put(
        f"/api/listings/{listings[2]['id']}",
        json={"images": ["https://example.com/a.jpg", "https://example.com/b.jpg"]},
        headers=_bearer(owner["token"]),
    )

    assert response.status_code == 200
    assert response.json()["listing"]["images"] == ["https://example.com/a.jpg", "https://example.com/b.jpg"]
    assert response.json()["listing"]["price"] == 500000


@pytest.mark.asyncio
async def test_update_rejects_invalid_values(client, seeded) -> None:
    owner, listings = seeded

    response = await client.patch(
        f"/api/listings/{listings[0]['id']}",
        json={"squareFeet": -1},
        headers=_bearer(owner["token"]),
    )

    assert response.status_code == 400
    assert response.json()["details"]["squareFeet"] == "Square footage must be a positive number"
    fetched = (await client.get(f"/api/listings/{listings[0]['id']}")).json()["listing"]
    assert fetched["squareFeet"] == 900


@pytest.mark.asyncio
async def test_update_with_empty_body(client, seeded) -> None:
    owner, listings = seeded

    response = await client.patch(
        f"/api/listings/{listings[0]['id']}",
        json={},
        headers=_bearer(owner["token"]),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "No update data provided"


@pytest.mark.asyncio
async def test_non_owner_cannot_update_or_delete(client, seeded, register_agent) -> None:
    _, listings = seeded
    intruder = await register_agent()
    target = listings[0]["id"]

    update = await client.patch(
        f"/api/listings/{target}", json={"price": 1}, headers=_bearer(intruder["token"])
    )
    delete = await client.delete(f"/api/listings/{target}", headers=_bearer(intruder["token"]))

    assert update.status_code == 403
    assert update.json() == {"message": "You can only update your own listings", "error": "Access denied"}
    assert delete.status_code == 403
    assert delete.json()["message"] == "You can only delete your own listings"
    assert (await client.get(f"/api/listings/{target}")).json()["listing"]["price"] == 100000


@pytest.mark.asyncio
async def test_owner_deletes_listing_and_its_showings(client, seeded) -> None:
    owner, listings = seeded
    target = listings[0]["id"]
    showing = await client.post(
        "/api/showings",
        json={
            "listing": target,
            "name": "Vic Visitor",
            "email": "vic@example.com",
            "phone": "205-555-0199",
            "preferredDate": (datetime.now(timezone.utc) + timedelta(days=2)).isoformat(),
        },
    )
    assert showing.status_code == 201

    response = await client.delete(f"/api/listings/{target}", headers=_bearer(owner["token"]))

    assert response.status_code == 200
    assert response.json()["message"] == "Listing deleted successfully"
    assert response.json()["listing"]["id"] == target
    assert (await client.get(f"/api/listings/{target}")).status_code == 404
    assert (await client.get(f"/api/showings/{showing.json()['showing']['id']}")).status_code == 404
