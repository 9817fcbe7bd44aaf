from datetime import datetime, timedelta

from app.models.qr_code import QrCode
from app.models.walk import Walk
from conftest import auth


def create_walk(client, owner, dog_name="Firulais"):
    res = client.post("/api/v1/walks", json={"dog_name": dog_name}, headers=auth(owner))
    assert res.status_code == 201, res.text
    return res.json()


def start_walk(client, owner, walker):
    created = create_walk(client, owner)
    res = client.post("/api/v1/walks/scan", json={"code": created["qr"]["code"]}, headers=auth(walker))
    assert res.status_code == 200, res.text
    return created["walk"]["id"]


class TestCreateWalk:

    def test_creates_pending_walk_with_qr(self, client, owner):
        body = create_walk(client, owner)

        assert body["walk"]["status"] == "pending"
        assert body["walk"]["client_id"] == owner
        assert len(body["qr"]["code"]) == 13
        assert body["qr"]["code"] == body["qr"]["code"].upper()
        assert body["qr"]["is_active"] is True

    def test_dog_name_is_required(self, client, owner):
        res = client.post("/api/v1/walks", json={"dog_name": "  "}, headers=auth(owner))

        assert res.status_code == 400
        assert res.json()["reason"] == "El nombre del perro es requerido"


class TestScanWalk:

    def test_scan_activates_walk_and_consumes_code(self, client, db, owner, walker):
        created = create_walk(client, owner)

        res = client.post("/api/v1/walks/scan", json={"code": created["qr"]["code"]}, headers=auth(walker))

        assert res.status_code == 200
        walk = res.json()["walk"]
        assert walk["status"] == "active"
        assert walk["walker_id"] == walker
        assert walk["start_time"] is not None

        db.expire_all()
        qr = db.query(QrCode).filter(QrCode.code == created["qr"]["code"]).one()
        assert qr.is_active is False

    def test_code_cannot_be_scanned_twice(self, client, make_user, owner, walker):
        other = make_user("walker-2", role="admin")
        created = create_walk(client, owner)
        client.post("/api/v1/walks/scan", json={"code": created["qr"]["code"]}, headers=auth(walker))

        res = client.post("/api/v1/walks/scan", json={"code": created["qr"]["code"]}, headers=auth(other))

        assert res.status_code == 404
        assert res.json()["code"] == "WALK_SCAN_404_1"

    def test_expired_code(self, client, db, owner, walker):
        created = create_walk(client, owner)
        qr = db.query(QrCode).filter(QrCode.code == created["qr"]["code"]).one()
        qr.expires_at = datetime.utcnow() - timedelta(minutes=1)
        db.commit()

        res = client.post("/api/v1/walks/scan", json={"code": created["qr"]["code"]}, headers=auth(walker))

        assert res.status_code == 404


class TestWalkStatus:

    def test_walker_completes_walk(self, client, owner, walker):
        walk_id = start_walk(client, owner, walker)

        res = client.patch(f"/api/v1/walks/{walk_id}/status", json={"status": "completed"}, headers=auth(walker))

        assert res.status_code == 200
        assert res.json()["walk"]["status"] == "completed"
        assert res.json()["walk"]["end_time"] is not None
        me = client.get("/api/v1/auth/me", headers=auth(walker)).json()
        assert me["user"]["completed_walks_count"] == 1

    def test_completed_walk_cannot_restart(self, client, owner, walker):
        walk_id = start_walk(client, owner, walker)
        client.patch(f"/api/v1/walks/{walk_id}/status", json={"status": "completed"}, headers=auth(walker))

        res = client.patch(f"/api/v1/walks/{walk_id}/status", json={"status": "active"}, headers=auth(walker))

        assert res.status_code == 409
        assert res.json()["code"] == "WALK_STATUS_409_2"

    def test_status_patch_cannot_start_a_walk(self, client, db, owner):
        walk_id = create_walk(client, owner)["walk"]["id"]

        res = client.patch(f"/api/v1/walks/{walk_id}/status", json={"status": "active"}, headers=auth(owner))

        assert res.status_code == 409
        assert res.json()["code"] == "WALK_STATUS_409_2"
        assert db.get(Walk, walk_id).status.value == "pending"

    def test_cancel_then_complete_is_rejected(self, client, owner, walker):
        walk_id = start_walk(client, owner, walker)
        client.patch(f"/api/v1/walks/{walk_id}/status", json={"status": "cancelled"}, headers=auth(owner))

        res = client.patch(f"/api/v1/walks/{walk_id}/status", json={"status": "completed"}, headers=auth(walker))

        assert res.status_code == 409
        assert res.json()["code"] == "WALK_STATUS_409_1"

    def test_pending_walk_cannot_complete(self, client, owner):
        walk_id = create_walk(client, owner)["walk"]["id"]

        res = client.patch(f"/api/v1/walks/{walk_id}/status", json={"status": "completed"}, headers=auth(owner))

        assert res.status_code == 409

    def test_client_cannot_complete(self, client, owner, walker):
        walk_id = start_walk(client, owner, walker)

        res = client.patch(f"/api/v1/walks/{walk_id}/status", json={"status": "completed"}, headers=auth(owner))

        assert res.status_code == 403
        assert res.json()["code"] == "WALK_STATUS_403_1"

    def test_client_cancels_pending_walk(self, client, db, owner):
        created = create_walk(client, owner)

        res = client.patch(
            f"/api/v1/walks/{created['walk']['id']}/status",
            json={"status": "cancelled"},
            headers=auth(owner),
        )

        assert res.status_code == 200
        assert res.json()["walk"]["status"] == "cancelled"
        db.expire_all()
        assert db.query(QrCode).filter(QrCode.code == created["qr"]["code"]).one().is_active is False

    def test_unknown_status_value(self, client, owner):
        walk_id = create_walk(client, owner)["walk"]["id"]

        res = client.patch(f"/api/v1/walks/{walk_id}/status", json={"status": "paused"}, headers=auth(owner))

        assert res.status_code == 400


class TestWalkReads:

    def test_lists_walks_for_both_sides(self, client, owner, walker):
        walk_id = start_walk(client, owner, walker)
        create_walk(client, owner, dog_name="Luna")

        mine = client.get("/api/v1/walks", headers=auth(owner)).json()["walks"]
        theirs = client.get("/api/v1/walks", headers=auth(walker)).json()["walks"]

        assert len(mine) == 2
        assert [w["id"] for w in theirs] == [walk_id]

    def test_outsider_cannot_read_walk(self, client, make_user, owner):
        outsider = make_user("client-2")
        walk_id = create_walk(client, owner)["walk"]["id"]

        res = client.get(f"/api/v1/walks/{walk_id}", headers=auth(outsider))

        assert res.status_code == 403

    def test_unknown_walk(self, client, owner):
        res = client.get("/api/v1/walks/does-not-exist", headers=auth(owner))
        assert res.status_code == 404


class TestWalkLocations:

    def test_track_is_listed_newest_first(self, client, owner, walker):
        walk_id = start_walk(client, owner, walker)
        base = datetime(2025, 6, 1, 10, 0, 0)
        for minute in (0, 5, 10):
            res = client.post(
                f"/api/v1/walks/{walk_id}/locations",
                json={
                    "latitude": 21.88 + minute / 1000,
                    "longitude": -102.29,
                    "timestamp": (base + timedelta(minutes=minute)).isoformat(),
                },
                headers=auth(walker),
            )
            assert res.status_code == 201

        res = client.get(f"/api/v1/walks/{walk_id}/locations", headers=auth(owner))

        assert res.status_code == 200
        stamps = [p["timestamp"] for p in res.json()["locations"]]
        assert stamps == sorted(stamps, reverse=True)
        assert len(stamps) == 3

    def test_points_only_for_active_walks(self, client, owner, walker):
        walk_id = start_walk(client, owner, walker)
        client.patch(f"/api/v1/walks/{walk_id}/status", json={"status": "completed"}, headers=auth(walker))

        res = client.post(
            f"/api/v1/walks/{walk_id}/locations",
            json={"latitude": 21.88, "longitude": -102.29},
            headers=auth(walker),
        )

        assert res.status_code == 409

    def test_walk_rows_are_unchanged_by_reads(self, client, db, owner, walker):
        walk_id = start_walk(client, owner, walker)
        client.get(f"/api/v1/walks/{walk_id}/locations", headers=auth(owner))

        assert db.get(Walk, walk_id).status.value == "active"
