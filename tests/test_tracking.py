from app.models.admin_location import AdminLocation
from conftest import auth

POINT = {"latitude": 21.8818, "longitude": -102.2916}


def share(client, walker, lat=21.8818, lng=-102.2916):
    res = client.post("/api/v1/tracking/location", json={"latitude": lat, "longitude": lng}, headers=auth(walker))
    assert res.status_code == 200, res.text
    return res.json()


class TestWalkerLocation:

    def test_updates_keep_one_row_per_walker(self, client, db, walker):
        share(client, walker)
        body = share(client, walker, lat=21.9, lng=-102.3)

        assert body["active"] is True
        assert body["location"]["latitude"] == 21.9
        rows = db.query(AdminLocation).filter(AdminLocation.admin_id == walker).all()
        assert len(rows) == 1

    def test_stop_deactivates(self, client, db, walker):
        share(client, walker)

        res = client.post("/api/v1/tracking/stop", headers=auth(walker))

        assert res.status_code == 200
        assert res.json()["active"] is False
        db.expire_all()
        active = db.query(AdminLocation).filter(AdminLocation.is_active.is_(True)).count()
        assert active == 0

    def test_status_follows_sharing(self, client, walker):
        assert client.get("/api/v1/tracking/status", headers=auth(walker)).json()["active"] is False

        share(client, walker)
        assert client.get("/api/v1/tracking/status", headers=auth(walker)).json()["active"] is True

    def test_clients_cannot_share(self, client, owner):
        res = client.post("/api/v1/tracking/location", json=POINT, headers=auth(owner))
        assert res.status_code == 403

    def test_out_of_range_latitude(self, client, walker):
        res = client.post("/api/v1/tracking/location", json={"latitude": 120, "longitude": 0}, headers=auth(walker))
        assert res.status_code == 400
        assert res.json()["code"] == "VALIDATION_400_1"


class TestClientRead:

    def test_affiliated_client_sees_location(self, client, owner, walker, affiliate):
        affiliate(owner, walker)
        share(client, walker)

        res = client.get(f"/api/v1/tracking/walkers/{walker}/location", headers=auth(owner))

        assert res.status_code == 200
        assert res.json()["active"] is True
        assert res.json()["location"]["admin_id"] == walker

    def test_no_active_location(self, client, owner, walker, affiliate):
        affiliate(owner, walker)

        res = client.get(f"/api/v1/tracking/walkers/{walker}/location", headers=auth(owner))

        assert res.status_code == 200
        assert res.json()["active"] is False
        assert res.json()["location"] is None

    def test_stopped_location_is_hidden(self, client, owner, walker, affiliate):
        affiliate(owner, walker)
        share(client, walker)
        client.post("/api/v1/tracking/stop", headers=auth(walker))

        res = client.get(f"/api/v1/tracking/walkers/{walker}/location", headers=auth(owner))

        assert res.json()["active"] is False

    def test_unaffiliated_client_is_rejected(self, client, owner, walker):
        share(client, walker)

        res = client.get(f"/api/v1/tracking/walkers/{walker}/location", headers=auth(owner))

        assert res.status_code == 403
        assert res.json()["code"] == "TRACK_READ_403_1"


class TestStartWalk:

    def test_all_mode_targets_every_affiliated_client(self, client, make_user, owner, walker, affiliate):
        second = make_user("client-2")
        make_user("client-3")
        affiliate(owner, walker)
        affiliate(second, walker)

        res = client.post("/api/v1/tracking/start", json={"mode": "all", **POINT}, headers=auth(walker))

        assert res.status_code == 200
        body = res.json()
        assert set(body["target_client_ids"]) == {owner, second}
        assert body["notified"] == 2
        assert body["location"]["is_active"] is True

    def test_group_mode(self, client, make_user, owner, walker, affiliate):
        second = make_user("client-2")
        affiliate(owner, walker)
        affiliate(second, walker)
        group_id = client.post("/api/v1/groups", json={"name": "Mañanas"}, headers=auth(walker)).json()["group"]["id"]
        client.put(f"/api/v1/groups/{group_id}/members", json={"client_ids": [second]}, headers=auth(walker))

        res = client.post(
            "/api/v1/tracking/start",
            json={"mode": "group", "group_id": group_id},
            headers=auth(walker),
        )

        assert res.status_code == 200
        assert res.json()["target_client_ids"] == [second]
        assert res.json()["location"] is None

    def test_group_mode_requires_group(self, client, walker):
        res = client.post("/api/v1/tracking/start", json={"mode": "group"}, headers=auth(walker))

        assert res.status_code == 400
        assert res.json()["reason"] == "Selecciona un grupo"

    def test_unknown_group(self, client, owner, walker, affiliate):
        affiliate(owner, walker)

        res = client.post(
            "/api/v1/tracking/start",
            json={"mode": "group", "group_id": "missing"},
            headers=auth(walker),
        )

        assert res.status_code == 404

    def test_manual_mode(self, client, make_user, owner, walker, affiliate):
        second = make_user("client-2")
        affiliate(owner, walker)
        affiliate(second, walker)

        res = client.post(
            "/api/v1/tracking/start",
            json={"mode": "manual", "client_ids": [owner]},
            headers=auth(walker),
        )

        assert res.status_code == 200
        assert res.json()["target_client_ids"] == [owner]

    def test_manual_mode_rejects_unaffiliated(self, client, make_user, owner, walker, affiliate):
        stranger = make_user("client-9")
        affiliate(owner, walker)

        res = client.post(
            "/api/v1/tracking/start",
            json={"mode": "manual", "client_ids": [owner, stranger]},
            headers=auth(walker),
        )

        assert res.status_code == 400
        assert res.json()["code"] == "TRACK_START_400_2"

    def test_empty_target_list(self, client, walker):
        res = client.post("/api/v1/tracking/start", json={"mode": "manual", "client_ids": []}, headers=auth(walker))

        assert res.status_code == 400
        assert res.json()["code"] == "TRACK_START_400_1"
        assert res.json()["reason"] == "Selecciona al menos un cliente."

    def test_no_clients_for_all_mode(self, client, walker):
        res = client.post("/api/v1/tracking/start", json={"mode": "all"}, headers=auth(walker))
        assert res.status_code == 400

    def test_latitude_without_longitude(self, client, walker):
        res = client.post("/api/v1/tracking/start", json={"mode": "all", "latitude": 21.8}, headers=auth(walker))
        assert res.status_code == 400
