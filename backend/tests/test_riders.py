"""
Integration tests for rider applications, approval and the rider's own views.
"""

import pytest

from backend.app.models.enums import UserRole
from backend.tests.helpers import auth_headers, create_user, parcel_payload


async def apply(client, headers, **overrides) -> dict:
    body = {"name": "Riley", "phone": "0171", "district": "Dhaka"}
    body.update(overrides)
    return await client.post("/riders", json=body, headers=headers)


@pytest.mark.asyncio
async def test_apply_as_rider(client, sender_headers, admin_headers):
    response = await apply(client, sender_headers)

    assert response.status_code == 201
    rider = response.json()
    assert rider["email"] == "sender@test.com"
    assert rider["status"] == "pending"
    assert rider["work_status"] == "idle"
    assert rider["total_earning"] == 0.0

    pending = (await client.get("/riders/pending", headers=admin_headers)).json()
    assert [r["id"] for r in pending] == [rider["id"]]


@pytest.mark.asyncio
async def test_duplicate_application_is_rejected(client, sender_headers):
    await apply(client, sender_headers)

    response = await apply(client, sender_headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_cannot_apply_with_someone_elses_email(client, sender_headers):
    response = await apply(client, sender_headers, email="other@test.com")

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_approval_promotes_user_to_rider(client, sender_headers, admin_headers):
    rider = (await apply(client, sender_headers)).json()

    response = await client.patch(f"/riders/{rider['id']}/status", json={"status": "active"}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "active"
    role = await client.get("/users/role", params={"email": "sender@test.com"}, headers=sender_headers)
    assert role.json()["role"] == "rider"
    assert (await client.get("/riders/pending", headers=admin_headers)).json() == []


@pytest.mark.asyncio
async def test_moving_back_to_pending_demotes_rider(client, sender_headers, admin_headers):
    rider = (await apply(client, sender_headers)).json()
    await client.patch(f"/riders/{rider['id']}/status", json={"status": "active"}, headers=admin_headers)

    await client.patch(f"/riders/{rider['id']}/status", json={"status": "pending"}, headers=admin_headers)

    role = await client.get("/users/role", params={"email": "sender@test.com"}, headers=sender_headers)
    assert role.json()["role"] == "user"


@pytest.mark.asyncio
async def test_approval_does_not_demote_admin(client, admin_headers):
    rider = (await apply(client, admin_headers)).json()

    await client.patch(f"/riders/{rider['id']}/status", json={"status": "active"}, headers=admin_headers)

    role = await client.get("/users/role", params={"email": "admin@test.com"}, headers=admin_headers)
    assert role.json()["role"] == "admin"


@pytest.mark.asyncio
async def test_status_update_errors(client, admin_headers, sender_headers):
    missing = await client.patch(f"/riders/{'a' * 32}/status", json={"status": "active"}, headers=admin_headers)
    malformed = await client.patch("/riders/nope/status", json={"status": "active"}, headers=admin_headers)
    not_admin = await client.patch(f"/riders/{'a' * 32}/status", json={"status": "active"}, headers=sender_headers)

    assert missing.status_code == 404
    assert malformed.status_code == 400
    assert not_admin.status_code == 403


@pytest.mark.asyncio
async def test_active_and_available_riders(client, db_session, admin_headers):
    for email, district in (("dhaka@test.com", "Dhaka"), ("khulna@test.com", "Khulna")):
        await create_user(db_session, email)
        rider = (await apply(client, auth_headers(email), district=district)).json()
        await client.patch(f"/riders/{rider['id']}/status", json={"status": "active"}, headers=admin_headers)

    active = await client.get("/riders/active", headers=admin_headers)
    in_khulna = await client.get("/riders/active", params={"district": "Khulna"}, headers=admin_headers)
    available = await client.get("/riders/activeRiders", params={"district": "Dhaka"}, headers=admin_headers)

    assert len(active.json()) == 2
    assert [r["email"] for r in in_khulna.json()] == ["khulna@test.com"]
    assert [r["email"] for r in available.json()] == ["dhaka@test.com"]


@pytest.mark.asyncio
async def test_busy_rider_is_not_available(client, sender_headers, admin_headers, active_rider):
    rider_id, _ = active_rider
    parcel = (await client.post("/parcels", json=parcel_payload(), headers=sender_headers)).json()
    await client.post("/payments", json={"parcel_id": parcel["id"], "amount": 100.0}, headers=sender_headers)
    await client.patch(f"/parcels/{parcel['id']}/assign", json={"rider_id": rider_id}, headers=admin_headers)

    available = await client.get("/riders/activeRiders", headers=admin_headers)

    assert available.json() == []


@pytest.mark.asyncio
async def test_rider_in_delivery_cannot_be_suspended(client, sender_headers, admin_headers, active_rider):
    rider_id, rider_headers = active_rider
    parcel = (await client.post("/parcels", json=parcel_payload(), headers=sender_headers)).json()
    await client.post("/payments", json={"parcel_id": parcel["id"], "amount": 100.0}, headers=sender_headers)
    await client.patch(f"/parcels/{parcel['id']}/assign", json={"rider_id": rider_id}, headers=admin_headers)

    response = await client.patch(f"/riders/{rider_id}/status", json={"status": "pending"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_RIDER_001"

    role = await client.get("/users/role", params={"email": "rider@test.com"}, headers=rider_headers)
    assert role.json() == {"role": "rider"}

    delivered = await client.patch(f"/parcels/{parcel['id']}/delivered", headers=rider_headers)
    assert delivered.status_code == 200
    assert delivered.json()["delivery_status"] == "delivered"


@pytest.mark.asyncio
async def test_rider_views_parcels_and_earnings(client, sender_headers, admin_headers, active_rider):
    rider_id, rider_headers = active_rider
    parcel = (await client.post("/parcels", json=parcel_payload(cost=50.0), headers=sender_headers)).json()
    await client.post("/payments", json={"parcel_id": parcel["id"], "amount": 50.0}, headers=sender_headers)
    await client.patch(f"/parcels/{parcel['id']}/assign", json={"rider_id": rider_id}, headers=admin_headers)

    assigned = (await client.get("/riders/parcels", headers=rider_headers)).json()
    assert [p["id"] for p in assigned] == [parcel["id"]]

    await client.patch(f"/parcels/{parcel['id']}/delivered", headers=rider_headers)

    assert (await client.get("/riders/parcels", headers=rider_headers)).json() == []
    completed = (await client.get("/riders/completed-parcels", headers=rider_headers)).json()
    assert [p["id"] for p in completed] == [parcel["id"]]

    before = (await client.get("/riders/earnings", headers=rider_headers)).json()
    assert before == {"total_earning": 0.0, "cashed_out_parcels": 0, "pending_earning": 40.0, "pending_parcels": 1}

    await client.patch(f"/parcels/{parcel['id']}/cashout", headers=rider_headers)

    after = (await client.get("/riders/earnings", headers=rider_headers)).json()
    assert after == {"total_earning": 40.0, "cashed_out_parcels": 1, "pending_earning": 0.0, "pending_parcels": 0}


@pytest.mark.asyncio
async def test_list_riders_is_admin_only(client, sender_headers, admin_headers, db_session):
    await create_user(db_session, "x@test.com", UserRole.RIDER)

    assert (await client.get("/riders", headers=sender_headers)).status_code == 403
    assert (await client.get("/riders", headers=admin_headers)).status_code == 200
