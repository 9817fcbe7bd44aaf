from app.models.affiliation import Affiliation
from conftest import auth


def send_request(client, owner, walker, **fields):
    payload = {
        "walker_id": walker,
        "requested_date": "2025-06-01",
        "requested_time": "10:00",
        "duration_minutes": 60,
        "number_of_dogs": 1,
        **fields,
    }
    res = client.post("/api/v1/requests", json=payload, headers=auth(owner))
    assert res.status_code == 201, res.text
    return res.json()["request"]


class TestCreateRequest:

    def test_create_pending_request(self, client, owner, walker):
        req = send_request(client, owner, walker, special_notes="  Perro nervioso  ")

        assert req["status"] == "pending"
        assert req["requested_date"] == "2025-06-01"
        assert req["requested_time"] == "10:00:00"
        assert req["special_notes"] == "Perro nervioso"

    def test_duration_out_of_range(self, client, owner, walker):
        res = client.post(
            "/api/v1/requests",
            json={
                "walker_id": walker,
                "requested_date": "2025-06-01",
                "requested_time": "10:00",
                "duration_minutes": 20,
            },
            headers=auth(owner),
        )

        assert res.status_code == 400
        assert res.json()["code"] == "VALIDATION_400_1"
        assert res.json()["reason"] == "La duración debe estar entre 30 y 480 minutos"

    def test_too_many_dogs(self, client, owner, walker):
        res = client.post(
            "/api/v1/requests",
            json={
                "walker_id": walker,
                "requested_date": "2025-06-01",
                "requested_time": "10:00",
                "number_of_dogs": 11,
            },
            headers=auth(owner),
        )

        assert res.status_code == 400

    def test_target_must_be_a_walker(self, client, make_user, owner):
        other_client = make_user("client-2")

        res = client.post(
            "/api/v1/requests",
            json={"walker_id": other_client, "requested_date": "2025-06-01", "requested_time": "10:00"},
            headers=auth(owner),
        )

        assert res.status_code == 404
        assert res.json()["code"] == "REQ_CREATE_404_1"


class TestRespond:

    def test_accept_affiliates_and_moves_to_accepted(self, client, db, owner, walker):
        req = send_request(client, owner, walker)

        res = client.post(
            f"/api/v1/requests/{req['id']}/respond",
            json={"accept": True, "response_notes": "Nos vemos en el parque"},
            headers=auth(walker),
        )

        assert res.status_code == 200
        assert res.json()["request"]["status"] == "accepted"
        assert res.json()["request"]["response_notes"] == "Nos vemos en el parque"

        link = db.query(Affiliation).filter(Affiliation.user_id == owner, Affiliation.admin_id == walker).one()
        assert link.is_active is True

        buckets = client.get("/api/v1/requests/mine", headers=auth(owner)).json()["requests"]
        assert [r["id"] for r in buckets["accepted"]] == [req["id"]]
        assert buckets["pending"] == []
        assert buckets["accepted"][0]["counterpart"]["name"] == "Ana Paseadora"

    def test_accept_reactivates_removed_affiliation(self, client, db, owner, walker, affiliate):
        affiliate(owner, walker)
        client.delete(f"/api/v1/affiliations/{walker}", headers=auth(owner))
        req = send_request(client, owner, walker)

        client.post(f"/api/v1/requests/{req['id']}/respond", json={"accept": True}, headers=auth(walker))

        db.expire_all()
        links = db.query(Affiliation).filter(Affiliation.user_id == owner).all()
        assert len(links) == 1
        assert links[0].is_active is True

    def test_reject_goes_to_history(self, client, db, owner, walker):
        req = send_request(client, owner, walker)

        res = client.post(f"/api/v1/requests/{req['id']}/respond", json={"accept": False}, headers=auth(walker))

        assert res.json()["request"]["status"] == "rejected"
        assert db.query(Affiliation).count() == 0
        buckets = client.get("/api/v1/requests/incoming", headers=auth(walker)).json()["requests"]
        assert [r["id"] for r in buckets["history"]] == [req["id"]]
        assert buckets["history"][0]["counterpart"]["name"] == "Carlos Cliente"

    def test_cannot_respond_twice(self, client, owner, walker):
        req = send_request(client, owner, walker)
        client.post(f"/api/v1/requests/{req['id']}/respond", json={"accept": False}, headers=auth(walker))

        res = client.post(f"/api/v1/requests/{req['id']}/respond", json={"accept": True}, headers=auth(walker))

        assert res.status_code == 409
        assert res.json()["code"] == "REQ_409_1"

    def test_other_walker_cannot_respond(self, client, make_user, owner, walker):
        other = make_user("walker-2", role="admin")
        req = send_request(client, owner, walker)

        res = client.post(f"/api/v1/requests/{req['id']}/respond", json={"accept": True}, headers=auth(other))

        assert res.status_code == 404


class TestLifecycle:

    def test_client_cancels_pending(self, client, owner, walker):
        req = send_request(client, owner, walker)

        res = client.post(f"/api/v1/requests/{req['id']}/cancel", headers=auth(owner))

        assert res.status_code == 200
        assert res.json()["request"]["status"] == "cancelled"

    def test_cancel_after_answer(self, client, owner, walker):
        req = send_request(client, owner, walker)
        client.post(f"/api/v1/requests/{req['id']}/respond", json={"accept": True}, headers=auth(walker))

        res = client.post(f"/api/v1/requests/{req['id']}/cancel", headers=auth(owner))

        assert res.status_code == 409

    def test_complete_accepted_request(self, client, owner, walker):
        req = send_request(client, owner, walker)
        client.post(f"/api/v1/requests/{req['id']}/respond", json={"accept": True}, headers=auth(walker))

        res = client.post(f"/api/v1/requests/{req['id']}/complete", headers=auth(walker))

        assert res.status_code == 200
        assert res.json()["request"]["status"] == "completed"
        buckets = client.get("/api/v1/requests/mine", headers=auth(owner)).json()["requests"]
        assert [r["id"] for r in buckets["history"]] == [req["id"]]

    def test_complete_requires_accepted(self, client, owner, walker):
        req = send_request(client, owner, walker)

        res = client.post(f"/api/v1/requests/{req['id']}/complete", headers=auth(walker))

        assert res.status_code == 409
        assert res.json()["code"] == "REQ_409_2"
