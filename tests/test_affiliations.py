from app.models.affiliation import Affiliation
from app.models.qr_code import QrCode
from conftest import auth


def affiliation_rows(db, client_uid, walker_uid):
    db.expire_all()
    return (
        db.query(Affiliation)
        .filter(Affiliation.user_id == client_uid, Affiliation.admin_id == walker_uid)
        .all()
    )


class TestWalkerQr:

    def test_walker_code_is_generated_once(self, client, walker):
        first = client.get("/api/v1/affiliations/qr", headers=auth(walker)).json()["qr"]
        second = client.get("/api/v1/affiliations/qr", headers=auth(walker)).json()["qr"]

        assert first["code"].startswith(f"WALKER_{walker[:8]}_")
        assert first["code"] == second["code"]
        assert first["expires_at"] is None

    def test_regenerate_replaces_code(self, client, walker, owner):
        old = client.get("/api/v1/affiliations/qr", headers=auth(walker)).json()["qr"]["code"]
        new = client.post("/api/v1/affiliations/qr", headers=auth(walker)).json()["qr"]["code"]

        assert new != old
        res = client.post("/api/v1/affiliations/scan", json={"code": old}, headers=auth(owner))
        assert res.status_code == 404

    def test_one_time_code_expires_in_a_day(self, client, walker):
        res = client.post("/api/v1/affiliations/codes", headers=auth(walker))

        assert res.status_code == 201
        qr = res.json()["qr"]
        assert len(qr["code"]) == 13
        assert qr["code"] == qr["code"].upper()
        assert qr["expires_at"] is not None


class TestScan:

    def test_scan_one_time_code_links_and_consumes_code(self, client, db, walker, owner):
        code = client.post("/api/v1/affiliations/codes", headers=auth(walker)).json()["qr"]["code"]

        res = client.post("/api/v1/affiliations/scan", json={"code": code}, headers=auth(owner))

        assert res.status_code == 201
        body = res.json()
        assert body["walker_id"] == walker
        assert body["already_affiliated"] is False

        rows = affiliation_rows(db, owner, walker)
        assert len(rows) == 1
        assert rows[0].is_active is True
        qr = db.query(QrCode).filter(QrCode.code == code).one()
        assert qr.is_active is False

    def test_scanning_same_one_time_code_twice_creates_one_row(self, client, db, walker, owner):
        code = client.post("/api/v1/affiliations/codes", headers=auth(walker)).json()["qr"]["code"]

        client.post("/api/v1/affiliations/scan", json={"code": code}, headers=auth(owner))
        second = client.post("/api/v1/affiliations/scan", json={"code": code}, headers=auth(owner))

        assert second.status_code == 404
        assert second.json()["code"] == "AFF_SCAN_404_1"
        assert len(affiliation_rows(db, owner, walker)) == 1

    def test_scanning_walker_code_twice_creates_one_row(self, client, db, walker, owner):
        code = client.get("/api/v1/affiliations/qr", headers=auth(walker)).json()["qr"]["code"]

        first = client.post("/api/v1/affiliations/scan", json={"code": code}, headers=auth(owner))
        second = client.post("/api/v1/affiliations/scan", json={"code": code}, headers=auth(owner))

        assert first.status_code == 201
        assert second.status_code == 200
        assert second.json()["already_affiliated"] is True
        assert len(affiliation_rows(db, owner, walker)) == 1

    def test_unknown_code(self, client, owner):
        res = client.post("/api/v1/affiliations/scan", json={"code": "NOPE"}, headers=auth(owner))

        assert res.status_code == 404
        assert res.json()["reason"] == "Código QR inválido o expirado."

    def test_blank_code_fails_validation(self, client, owner):
        res = client.post("/api/v1/affiliations/scan", json={"code": "   "}, headers=auth(owner))

        assert res.status_code == 400
        assert res.json()["code"] == "VALIDATION_400_1"

    def test_scan_reactivates_removed_link(self, client, db, walker, owner, affiliate):
        affiliate(owner, walker)
        client.delete(f"/api/v1/affiliations/{walker}", headers=auth(owner))
        assert affiliation_rows(db, owner, walker)[0].is_active is False

        affiliate(owner, walker)

        rows = affiliation_rows(db, owner, walker)
        assert len(rows) == 1
        assert rows[0].is_active is True


class TestMyWalkers:

    def test_walkers_sharing_location_come_first(self, client, make_user, owner, affiliate):
        quiet = make_user("walker-quiet", role="admin", name="Quieto")
        live = make_user("walker-live", role="admin", name="En vivo")
        affiliate(owner, live)
        affiliate(owner, quiet)
        client.post(
            "/api/v1/tracking/location",
            json={"latitude": 21.88, "longitude": -102.29},
            headers=auth(live),
        )

        res = client.get("/api/v1/affiliations/walkers", headers=auth(owner))

        assert res.status_code == 200
        walkers = res.json()["walkers"]
        assert [w["walker"]["id"] for w in walkers] == [live, quiet]
        assert walkers[0]["has_active_location"] is True
        assert walkers[1]["has_active_location"] is False

    def test_remove_unknown_affiliation(self, client, walker, owner):
        res = client.delete(f"/api/v1/affiliations/{walker}", headers=auth(owner))

        assert res.status_code == 404
        assert res.json()["code"] == "AFF_DELETE_404_1"
