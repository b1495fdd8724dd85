"""End-to-end tests for showing requests."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from realty.core.ids import new_id


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _future(days: int = 3) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def _request(listing_id: str, **overrides) -> dict:
    payload = {
        "listing": listing_id,
        "name": "Vic Visitor",
        "email": "Vic@Example.com",
        "phone": "(205) 555-0199",
        "preferredDate": _future(),
        "message": "Is the garage heated?",
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def scenario(client, register_agent, create_listing):
    """An owner with one listing and a pending showing on it, plus an outsider."""

    owner = await register_agent()
    outsider = await register_agent()
    listing = await create_listing(owner["token"])
    response = await client.post("/api/showings", json=_request(listing["id"]))
    assert response.status_code == 201, response.text
    return {
        "owner": owner,
        "outsider": outsider,
        "listing": listing,
        "showing": response.json()["showing"],
    }


@pytest.mark.asyncio
async def test_create_showing_is_public_and_pending(client, scenario) -> None:
    showing = scenario["showing"]

    assert showing["status"] == "pending"
    assert showing["email"] == "vic@example.com"
    assert showing["scheduledAt"] is None
    assert showing["feedback"] == ""
    assert showing["listing"]["id"] == scenario["listing"]["id"]
    contact = showing["listing"]["createdBy"]
    assert contact["id"] == scenario["owner"]["agent"]["id"]
    assert contact["phone"] == "2055550100"
    assert "passwordHash" not in contact


@pytest.mark.asyncio
async def test_create_showing_rejects_past_date(client, scenario) -> None:
    response = await client.post(
        "/api/showings",
        json=_request(scenario["listing"]["id"], preferredDate=_future(days=-1)),
    )

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    assert body["details"]["preferredDate"] == "Preferred date must be in the future"


@pytest.mark.asyncio
async def test_create_showing_field_errors(client, scenario) -> None:
    response = await client.post(
        "/api/showings",
        json=_request(scenario["listing"]["id"], name="V", phone="call me", message="x" * 1001),
    )

    assert response.status_code == 400
    details = response.json()["details"]
    assert details["name"] == "Name must be at least 2 characters"
    assert details["phone"] == "Please provide a valid phone number"
    assert "message" in details


@pytest.mark.asyncio
async def test_create_showing_checks_listing_reference(client) -> None:
    malformed = await client.post("/api/showings", json=_request("abc"))
    missing = await client.post("/api/showings", json=_request(new_id()))

    assert malformed.status_code == 400
    assert malformed.json()["message"] == "Invalid listing ID format"
    assert missing.status_code == 404
    assert missing.json()["message"] == "Listing not found"


@pytest.mark.asyncio
async def test_get_showing_is_public(client, scenario) -> None:
    showing_id = scenario["showing"]["id"]

    response = await client.get(f"/api/showings/{showing_id}")

    assert response.status_code == 200
    assert response.json()["showing"]["id"] == showing_id
    assert (await client.get("/api/showings/xyz")).json()["message"] == "Invalid showing ID format"
    assert (await client.get(f"/api/showings/{new_id()}")).status_code == 404


@pytest.mark.asyncio
async def test_owner_confirms_then_completes(client, scenario) -> None:
    url = f"/api/showings/{scenario['showing']['id']}/status"
    headers = _bearer(scenario["owner"]["token"])

    confirmed = await client.patch(
        url, json={"status": "confirmed", "scheduledDate": _future(days=4)}, headers=headers
    )
    completed = await client.patch(url, json={"status": "completed"}, headers=headers)

    assert confirmed.status_code == 200
    assert confirmed.json()["message"] == "Showing status updated successfully"
    assert confirmed.json()["showing"]["status"] == "confirmed"
    assert confirmed.json()["showing"]["scheduledAt"] is not None
    assert completed.status_code == 200
    assert completed.json()["showing"]["status"] == "completed"
    assert completed.json()["showing"]["scheduledAt"] is None


@pytest.mark.asyncio
async def test_patch_without_suffix_updates_status(client, scenario) -> None:
    response = await client.patch(
        f"/api/showings/{scenario['showing']['id']}",
        json={"status": "cancelled"},
        headers=_bearer(scenario["owner"]["token"]),
    )

    assert response.status_code == 200
    assert response.json()["showing"]["status"] == "cancelled"


@pytest.mark.asyncio
async def test_confirm_without_date_is_rejected(client, scenario) -> None:
    response = await client.patch(
        f"/api/showings/{scenario['showing']['id']}/status",
        json={"status": "confirmed"},
        headers=_bearer(scenario["owner"]["token"]),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "scheduledDate is required when confirming a showing"


@pytest.mark.asyncio
async def test_aliases_disabled_by_default(client, scenario) -> None:
    response = await client.patch(
        f"/api/showings/{scenario['showing']['id']}/status",
        json={"status": "approved"},
        headers=_bearer(scenario["owner"]["token"]),
    )

    assert response.status_code == 400
    assert response.json()["details"]["validStatuses"] == ["pending", "confirmed", "completed", "cancelled"]


@pytest.mark.asyncio
async def test_outsider_is_forbidden(client, scenario) -> None:
    showing_id = scenario["showing"]["id"]
    headers = _bearer(scenario["outsider"]["token"])

    status = await client.patch(
        f"/api/showings/{showing_id}/status", json={"status": "cancelled"}, headers=headers
    )
    feedback = await client.patch(
        f"/api/showings/{showing_id}/feedback", json={"feedback": "no"}, headers=headers
    )
    delete = await client.delete(f"/api/showings/{showing_id}", headers=headers)
    scoped = await client.get(
        "/api/showings", params={"listingId": scenario["listing"]["id"]}, headers=headers
    )

    for response in (status, feedback, delete, scoped):
        assert response.status_code == 403
        assert response.json()["error"] == "Access denied"
    assert status.json()["message"] == "You can only update showings for your own listings"
    assert scoped.json()["message"] == "You can only view showings for your own listings"

    unchanged = (await client.get(f"/api/showings/{showing_id}")).json()["showing"]
    assert unchanged["status"] == "pending"


@pytest.mark.asyncio
async def test_protected_routes_require_token(client, scenario) -> None:
    showing_id = scenario["showing"]["id"]

    responses = [
        await client.get("/api/showings"),
        await client.get("/api/showings/count/pending"),
        await client.patch(f"/api/showings/{showing_id}/status", json={"status": "completed"}),
        await client.delete(f"/api/showings/{showing_id}"),
    ]

    assert [response.status_code for response in responses] == [401, 401, 401, 401]


@pytest.mark.asyncio
async def test_owner_adds_feedback(client, scenario) -> None:
    url = f"/api/showings/{scenario['showing']['id']}/feedback"
    headers = _bearer(scenario["owner"]["token"])

    saved = await client.patch(url, json={"feedback": "  Loved the kitchen.  "}, headers=headers)
    too_long = await client.patch(url, json={"feedback": "x" * 2001}, headers=headers)

    assert saved.status_code == 200
    assert saved.json()["message"] == "Showing feedback updated successfully"
    assert saved.json()["showing"]["feedback"] == "Loved the kitchen."
    assert too_long.status_code == 400


@pytest.mark.asyncio
async def test_owner_lists_and_counts(client, scenario, create_listing) -> None:
    owner_headers = _bearer(scenario["owner"]["token"])
    second = await create_listing(scenario["owner"]["token"], zipCode="35806")
    await client.post("/api/showings", json=_request(second["id"], name="Second Visitor"))

    everything = (await client.get("/api/showings", headers=owner_headers)).json()
    scoped = (
        await client.get(
            "/api/showings", params={"listingId": second["id"]}, headers=owner_headers
        )
    ).json()
    pending = (await client.get("/api/showings/count/pending", headers=owner_headers)).json()

    assert everything["count"] == 2
    assert everything["page"] == 1
    assert everything["totalPages"] == 1
    assert [item["name"] for item in scoped["showings"]] == ["Second Visitor"]
    assert pending == {"count": 2}

    await client.patch(
        f"/api/showings/{scenario['showing']['id']}/status",
        json={"status": "cancelled"},
        headers=owner_headers,
    )
    filtered = (
        await client.get("/api/showings", params={"status": "cancelled"}, headers=owner_headers)
    ).json()
    pending = (await client.get("/api/showings/count/pending", headers=owner_headers)).json()

    assert [item["id"] for item in filtered["showings"]] == [scenario["showing"]["id"]]
    assert pending == {"count": 1}


@pytest.mark.asyncio
async def test_agent_without_listings(client, scenario) -> None:
    headers = _bearer(scenario["outsider"]["token"])

    listed = (await client.get("/api/showings", headers=headers)).json()
    pending = (await client.get("/api/showings/count/pending", headers=headers)).json()

    assert listed["showings"] == []
    assert listed["message"] == "No listings found for this agent"
    assert pending == {"count": 0}


@pytest.mark.asyncio
async def test_owner_deletes_showing(client, scenario) -> None:
    showing = scenario["showing"]

    response = await client.delete(
        f"/api/showings/{showing['id']}", headers=_bearer(scenario["owner"]["token"])
    )

    assert response.status_code == 200
    assert response.json() == {
        "message": "Showing deleted successfully",
        "showing": {
            "id": showing["id"],
            "listing": scenario["listing"]["id"],
            "name": "Vic Visitor",
            "email": "vic@example.com",
        },
    }
    assert (await client.get(f"/api/showings/{showing['id']}")).status_code == 404
