def book(client, headers, doctor_id, day="2030-06-10", at="09:30:00", notes=None):
    return client.post(
        "/api/v1/appointments",
        json={"doctor_id": doctor_id, "appointment_date": day, "appointment_time": at, "notes": notes},
        headers=headers,
    )


def set_status(client, headers, appointment_id, status):
    return client.patch(
        f"/api/v1/appointments/{appointment_id}/status",
        json={"status": status},
        headers=headers,
    )


def test_time_slots(client):
    slots = client.get("/api/v1/appointments/time-slots").json()["time_slots"]

    assert slots[0] == "09:00"
    assert slots[-1] == "17:00"
    assert "12:00" not in slots


def test_create_and_list_in_date_order(client, auth_headers, make_doctor):
    doctor = make_doctor(specialty="Cardiologist")

    later = book(client, auth_headers, doctor.id, day="2030-07-02", notes="follow-up")
    earlier = book(client, auth_headers, doctor.id, day="2030-07-01")

    assert later.status_code == 201
    body = later.json()
    assert body["status"] == "scheduled"
    assert body["notes"] == "follow-up"
    assert body["doctor"]["specialty"] == "Cardiologist"

    listed = client.get("/api/v1/appointments", headers=auth_headers).json()
    assert [a["id"] for a in listed] == [earlier.json()["id"], body["id"]]


def test_unknown_doctor_is_not_found(client, auth_headers):
    response = book(client, auth_headers, 999999)

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "not_found"


def test_status_lifecycle(client, auth_headers, make_doctor):
    appointment_id = book(client, auth_headers, make_doctor().id).json()["id"]

    skipped = set_status(client, auth_headers, appointment_id, "completed")
    assert skipped.status_code == 409
    assert skipped.json()["detail"]["code"] == "conflict"

    assert set_status(client, auth_headers, appointment_id, "confirmed").json()["status"] == "confirmed"
    assert set_status(client, auth_headers, appointment_id, "completed").json()["status"] == "completed"

    # completed is terminal
    assert set_status(client, auth_headers, appointment_id, "cancelled").status_code == 409

    update = client.put(
        f"/api/v1/appointments/{appointment_id}",
        json={"notes": "too late"},
        headers=auth_headers,
    )
    assert update.status_code == 409


def test_unknown_status_is_rejected(client, auth_headers, make_doctor):
    appointment_id = book(client, auth_headers, make_doctor().id).json()["id"]

    assert set_status(client, auth_headers, appointment_id, "postponed").status_code == 422


def test_reschedule_and_cancel(client, auth_headers, make_doctor):
    appointment_id = book(client, auth_headers, make_doctor().id).json()["id"]

    moved = client.put(
        f"/api/v1/appointments/{appointment_id}",
        json={"appointment_date": "2030-08-01", "appointment_time": "15:00:00"},
        headers=auth_headers,
    ).json()
    assert moved["appointment_date"] == "2030-08-01"
    assert moved["appointment_time"] == "15:00:00"

    cancelled = client.post(f"/api/v1/appointments/{appointment_id}/cancel", headers=auth_headers)
    assert cancelled.json()["status"] == "cancelled"

    again = client.post(f"/api/v1/appointments/{appointment_id}/cancel", headers=auth_headers)
    assert again.status_code == 409


def test_delete(client, auth_headers, make_doctor):
    appointment_id = book(client, auth_headers, make_doctor().id).json()["id"]

    assert client.delete(f"/api/v1/appointments/{appointment_id}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/v1/appointments/{appointment_id}", headers=auth_headers).status_code == 404


def test_appointments_are_private(client, auth_headers, other_auth_headers, make_doctor):
    appointment_id = book(client, auth_headers, make_doctor().id).json()["id"]

    assert client.get(f"/api/v1/appointments/{appointment_id}", headers=other_auth_headers).status_code == 404
    assert client.get("/api/v1/appointments", headers=other_auth_headers).json() == []
