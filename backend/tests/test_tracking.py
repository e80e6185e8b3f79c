"""
Integration tests for the tracking log.
"""

import pytest

from backend.tests.helpers import auth_headers, create_user, parcel_payload


@pytest.mark.asyncio
async def test_track_parcel_appends_event(client, sender_headers):
    parcel = (await client.post("/parcels", json=parcel_payload(), headers=sender_headers)).json()

    response = await client.post(
        "/trackParcel",
        json={
            "tracking_id": parcel["tracking_id"],
            "parcel_id": parcel["id"],
            "status": "at_hub",
            "message": "Reached the sorting hub",
        },
        headers=sender_headers,
    )

    assert response.status_code == 201
    event = response.json()
    assert event["status"] == "at_hub"
    assert event["updated_by"] == "sender@test.com"


@pytest.mark.asyncio
async def test_history_is_oldest_first(client, sender_headers):
    parcel = (await client.post("/parcels", json=parcel_payload(), headers=sender_headers)).json()
    for status in ("at_hub", "out_for_delivery"):
        await client.post(
            "/trackParcel",
            json={"tracking_id": parcel["tracking_id"], "parcel_id": parcel["id"], "status": status, "updated_by": "hub-7"},
            headers=sender_headers,
        )

    response = await client.get(f"/track/{parcel['tracking_id']}", headers=sender_headers)

    events = response.json()
    assert [e["status"] for e in events] == ["submitted", "at_hub", "out_for_delivery"]
    assert events[-1]["updated_by"] == "hub-7"
    times = [e["time"] for e in events]
    assert times == sorted(times)


@pytest.mark.asyncio
async def test_track_unknown_parcel_returns_404(client, sender_headers):
    response = await client.post(
        "/trackParcel",
        json={"tracking_id": "PCL-X", "parcel_id": "d" * 32, "status": "at_hub"},
        headers=sender_headers,
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_unknown_tracking_id_has_no_events(client, sender_headers):
    response = await client.get("/track/PCL-NOPE", headers=sender_headers)

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_tracking_requires_token(client):
    response = await client.get("/track/PCL-NOPE")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_tracking_id_must_belong_to_parcel(client, db_session, sender_headers):
    await create_user(db_session, "other@test.com")
    other_headers = auth_headers("other@test.com")
    senders = (await client.post("/parcels", json=parcel_payload(), headers=sender_headers)).json()
    others = (await client.post("/parcels", json=parcel_payload(), headers=other_headers)).json()

    response = await client.post(
        "/trackParcel",
        json={"tracking_id": senders["tracking_id"], "parcel_id": others["id"], "status": "delivered"},
        headers=other_headers,
    )

    assert response.status_code == 400
    history = (await client.get(f"/track/{senders['tracking_id']}", headers=sender_headers)).json()
    assert [e["status"] for e in history] == ["submitted"]
