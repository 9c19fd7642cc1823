from conftest import LAST_FRIDAY, MONDAY, SUNDAY, TODAY, TOMORROW

OPENING_HOURS = [
    "09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
    "13:30", "14:00", "14:30", "15:00", "15:30", "16:00", "16:30", "17:00", "17:30",
]


async def available(client, d) -> dict:
    resp = await client.get("/api/v1/slots/available", params={"date": d.isoformat()})
    assert resp.status_code == 200, resp.text
    return resp.json()


async def book(client, headers, service_id, d, time, **extra):
    return await client.post(
        "/api/v1/appointments",
        json={"service_id": service_id, "appointment_date": d.isoformat(), "appointment_time": time, **extra},
        headers=headers,
    )


async def test_open_day_offers_all_opening_hours(client):
    body = await available(client, TOMORROW)
    assert body["closed"] is False
    assert body["hours"] == OPENING_HOURS
    assert body["warnings"] == []


async def test_today_only_offers_future_hours(client):
    body = await available(client, TODAY)
    assert body["hours"][0] == "10:30"
    assert "10:00" not in body["hours"]


async def test_closed_and_past_days_offer_nothing(client):
    assert (await available(client, SUNDAY)) == {
        "date": SUNDAY.isoformat(), "closed": True, "hours": [], "warnings": []
    }
    assert (await available(client, MONDAY))["closed"] is True
    assert (await available(client, LAST_FRIDAY))["hours"] == []


async def test_booking_removes_the_slots_it_occupies(client, client_headers, service_factory):
    service = await service_factory("Combo", "1h30min")

    resp = await book(client, client_headers, service["id"], TOMORROW, "14:00", observations="Primeira vez")
    assert resp.status_code == 201, resp.text
    appointment = resp.json()
    assert appointment["status"] == "confirmed"
    assert appointment["service"] == "Combo"
    assert appointment["client_name"] == "Maria Silva"
    assert appointment["client_email"] == "client@salao.com.br"

    hours = (await available(client, TOMORROW))["hours"]
    for taken in ("14:00", "14:30", "15:00"):
        assert taken not in hours
    assert "13:30" in hours
    assert "15:30" in hours


async def test_overlapping_booking_is_rejected(client, client_headers, service_factory):
    service = await service_factory("Combo", "1h30min")
    first = await book(client, client_headers, service["id"], TOMORROW, "14:00")
    assert first.status_code == 201
    overlap = await book(client, client_headers, service["id"], TOMORROW, "14:30")
    assert overlap.status_code == 409
    assert "no longer available" in overlap.json()["detail"]


async def test_rejects_closed_day_past_time_and_off_catalog_time(client, client_headers, service_factory):
    service = await service_factory()
    closed = await book(client, client_headers, service["id"], SUNDAY, "10:00")
    past = await book(client, client_headers, service["id"], TODAY, "09:30")
    lunch = await book(client, client_headers, service["id"], TOMORROW, "12:30")
    assert closed.status_code == past.status_code == lunch.status_code == 409
    assert "closed" in closed.json()["detail"]
    assert "past" in past.json()["detail"]


async def test_rejects_inactive_or_unknown_service(client, client_headers, service_factory):
    inactive = await service_factory("Antigo", is_active=False)
    assert (await book(client, client_headers, inactive["id"], TOMORROW, "10:00")).status_code == 409
    assert (await book(client, client_headers, 9999, TOMORROW, "10:00")).status_code == 409


async def test_malformed_time_is_a_validation_error(client, client_headers, service_factory):
    service = await service_factory()
    resp = await book(client, client_headers, service["id"], TOMORROW, "9h")
    assert resp.status_code == 422


async def test_booking_requires_login(client, service_factory):
    service = await service_factory()
    resp = await book(client, {}, service["id"], TOMORROW, "10:00")
    assert resp.status_code == 401


async def test_cancel_frees_the_slot(client, client_headers, service_factory):
    service = await service_factory("Design", "1h")
    appointment = (await book(client, client_headers, service["id"], TOMORROW, "10:00")).json()
    assert "10:00" not in (await available(client, TOMORROW))["hours"]

    resp = await client.delete(f"/api/v1/appointments/{appointment['id']}", headers=client_headers)
    assert resp.status_code == 204
    assert "10:00" in (await available(client, TOMORROW))["hours"]

    mine = (await client.get("/api/v1/appointments", headers=client_headers)).json()
    assert [a["status"] for a in mine] == ["cancelled"]


async def test_cannot_cancel_someone_elses_appointment(client, client_headers, admin_headers, service_factory):
    service = await service_factory()
    appointment = (await book(client, client_headers, service["id"], TOMORROW, "10:00")).json()
    resp = await client.delete(f"/api/v1/appointments/{appointment['id']}", headers=admin_headers)
    assert resp.status_code == 404


async def test_my_appointments_are_ordered(client, client_headers, service_factory):
    service = await service_factory("Design", "30min")
    await book(client, client_headers, service["id"], TOMORROW, "16:00")
    await book(client, client_headers, service["id"], TOMORROW, "09:00")
    mine = (await client.get("/api/v1/appointments", headers=client_headers)).json()
    assert [a["appointment_time"] for a in mine] == ["09:00", "16:00"]


async def test_admin_lists_and_updates_status(client, client_headers, admin_headers, service_factory):
    service = await service_factory("Design", "1h")
    appointment = (await book(client, client_headers, service["id"], TOMORROW, "11:00")).json()

    forbidden = await client.get("/api/v1/appointments/admin", headers=client_headers)
    assert forbidden.status_code == 403

    listed = await client.get(
        "/api/v1/appointments/admin", params={"date": TOMORROW.isoformat()}, headers=admin_headers
    )
    assert [a["id"] for a in listed.json()] == [appointment["id"]]

    resp = await client.patch(
        f"/api/v1/appointments/{appointment['id']}/status",
        json={"status": "cancelled"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelled"
    assert "11:00" in (await available(client, TOMORROW))["hours"]

    bad = await client.patch(
        f"/api/v1/appointments/{appointment['id']}/status",
        json={"status": "done"},
        headers=admin_headers,
    )
    assert bad.status_code == 422


async def test_deleted_service_leaves_booking_unblocked_with_warning(
    client, client_headers, admin_headers, service_factory
):
    service = await service_factory("Design", "1h")
    await book(client, client_headers, service["id"], TOMORROW, "10:00")
    await client.delete(f"/api/v1/services/{service['id']}", headers=admin_headers)

    body = await available(client, TOMORROW)
    assert "10:00" in body["hours"]
    assert len(body["warnings"]) == 1


async def test_renamed_service_keeps_its_bookings_blocked(
    client, client_headers, admin_headers, service_factory
):
    service = await service_factory("Design", "1h")
    assert (await book(client, client_headers, service["id"], TOMORROW, "10:00")).status_code == 201

    resp = await client.patch(
        f"/api/v1/services/{service['id']}", json={"name": "Design Premium"}, headers=admin_headers
    )
    assert resp.status_code == 200

    body = await available(client, TOMORROW)
    assert "10:00" not in body["hours"]
    assert "10:30" not in body["hours"]
    assert body["warnings"] == []
    assert (await book(client, client_headers, service["id"], TOMORROW, "10:00")).status_code == 409

    mine = (await client.get("/api/v1/appointments", headers=client_headers)).json()
    assert [a["service"] for a in mine] == ["Design Premium"]


async def test_reconfirming_into_a_taken_slot_conflicts(
    client, client_headers, admin_headers, service_factory
):
    service = await service_factory("Design", "1h")
    first = (await book(client, client_headers, service["id"], TOMORROW, "10:00")).json()
    await client.delete(f"/api/v1/appointments/{first['id']}", headers=client_headers)
    assert (await book(client, client_headers, service["id"], TOMORROW, "10:00")).status_code == 201

    resp = await client.patch(
        f"/api/v1/appointments/{first['id']}/status",
        json={"status": "confirmed"},
        headers=admin_headers,
    )
    assert resp.status_code == 409

    confirmed = await client.get(
        "/api/v1/appointments/admin",
        params={"date": TOMORROW.isoformat(), "status": "confirmed"},
        headers=admin_headers,
    )
    assert len(confirmed.json()) == 1


async def test_reconfirming_a_free_slot_blocks_it_again(
    client, client_headers, admin_headers, service_factory
):
    service = await service_factory("Design", "1h")
    appointment = (await book(client, client_headers, service["id"], TOMORROW, "10:00")).json()
    await client.delete(f"/api/v1/appointments/{appointment['id']}", headers=client_headers)

    resp = await client.patch(
        f"/api/v1/appointments/{appointment['id']}/status",
        json={"status": "confirmed"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert "10:00" not in (await available(client, TOMORROW))["hours"]
