def add_contact(client, headers, **overrides):
    payload = {
        "contact_type": "family_member",
        "name": "Asha Verma",
        "phone_number": "+91-98000-11111",
        "relationship": "Sister",
    }
    payload.update(overrides)
    return client.post("/api/v1/emergency-contacts", json=payload, headers=headers)


def test_public_emergency_numbers(client):
    numbers = client.get("/api/v1/emergency-contacts/services").json()

    assert numbers["ambulance"] == "108"
    assert numbers["police"] == "100"
    assert numbers["fire"] == "101"
    assert numbers["women_helpline"] == "1091"


def test_create_list_update_delete(client, auth_headers):
    doctor = add_contact(client, auth_headers, contact_type="personal_doctor", name="Dr. Menon", relationship=None)
    sister = add_contact(client, auth_headers)

    assert doctor.status_code == 201
    listed = client.get("/api/v1/emergency-contacts", headers=auth_headers).json()
    assert [c["name"] for c in listed] == ["Asha Verma", "Dr. Menon"]

    contact_id = sister.json()["id"]
    updated = client.put(
        f"/api/v1/emergency-contacts/{contact_id}",
        json={"contact_type": "family_member", "name": " Asha V. ", "phone_number": "+91-98000-22222"},
        headers=auth_headers,
    ).json()
    assert updated["name"] == "Asha V."
    assert updated["relationship"] is None

    assert client.delete(f"/api/v1/emergency-contacts/{contact_id}", headers=auth_headers).status_code == 204
    assert len(client.get("/api/v1/emergency-contacts", headers=auth_headers).json()) == 1


def test_blank_name_is_rejected(client, auth_headers):
    response = add_contact(client, auth_headers, name="   ")

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "validation_error"


def test_book_appointment_with_contact(client, auth_headers):
    contact_id = add_contact(client, auth_headers).json()["id"]

    response = client.post(
        f"/api/v1/emergency-contacts/{contact_id}/appointments",
        json={"appointment_date": "2030-09-01", "appointment_time": "10:30:00", "notes": "Bring reports"},
        headers=auth_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["doctor_id"] is None
    assert body["status"] == "scheduled"
    assert body["notes"] == (
        "Appointment with emergency contact: Asha Verma (+91-98000-11111)\n\nAdditional notes: Bring reports"
    )


def test_booking_outside_slots_is_rejected(client, auth_headers):
    contact_id = add_contact(client, auth_headers).json()["id"]

    response = client.post(
        f"/api/v1/emergency-contacts/{contact_id}/appointments",
        json={"appointment_date": "2030-09-01", "appointment_time": "12:00:00"},
        headers=auth_headers,
    )

    assert response.status_code == 422


def test_contacts_are_private(client, auth_headers, other_auth_headers):
    contact_id = add_contact(client, auth_headers).json()["id"]

    response = client.delete(f"/api/v1/emergency-contacts/{contact_id}", headers=other_auth_headers)

    assert response.status_code == 404
