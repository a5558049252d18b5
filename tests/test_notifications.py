from tests.conftest import EVENT_DAY, client, headers_for


def request_booking(planner, hall):
    return client.post(
        "/bookings/",
        json={"hall_id": hall.id, "start_date": EVENT_DAY.isoformat()},
        headers=headers_for(planner),
    ).json()


def test_inbox_and_read_state(planner, owner, hall):
    booking = request_booking(planner, hall)

    inbox = client.get("/notifications/", headers=headers_for(owner)).json()
    assert len(inbox) == 1
    assert inbox[0]["type"] == "booking_request"
    assert inbox[0]["booking_id"] == booking["id"]
    assert inbox[0]["read"] is False

    assert client.get("/notifications/unread-count", headers=headers_for(owner)).json() == {"unread": 1}

    response = client.post(f"/notifications/{inbox[0]['id']}/read", headers=headers_for(owner))
    assert response.status_code == 200
    assert response.json()["read"] is True
    assert client.get("/notifications/unread-count", headers=headers_for(owner)).json() == {"unread": 0}


def test_cannot_read_someone_elses_notification(planner, owner, hall):
    request_booking(planner, hall)
    note_id = client.get("/notifications/", headers=headers_for(owner)).json()[0]["id"]

    response = client.post(f"/notifications/{note_id}/read", headers=headers_for(planner))
    assert response.status_code == 404


def test_read_all(planner, owner, hall):
    booking = request_booking(planner, hall)
    client.post(
        f"/bookings/{booking['id']}/messages", json={"body": "Hello?"}, headers=headers_for(planner)
    )
    assert client.get("/notifications/unread-count", headers=headers_for(owner)).json() == {"unread": 2}

    response = client.post("/notifications/read-all", headers=headers_for(owner))
    assert response.status_code == 200
    assert client.get("/notifications/unread-count", headers=headers_for(owner)).json() == {"unread": 0}


def test_planner_hears_about_acceptance(planner, owner, hall):
    booking = request_booking(planner, hall)
    client.post(f"/bookings/{booking['id']}/transitions", json={"event": "accept"}, headers=headers_for(owner))

    inbox = client.get("/notifications/", headers=headers_for(planner)).json()
    assert [n["type"] for n in inbox] == ["booking_accepted"]
