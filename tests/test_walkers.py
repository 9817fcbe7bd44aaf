from datetime import datetime

import pytz

from app.domains.walkers.service.walker_service import plan_usage, today_bounds_utc
from app.models.profile import Profile
from app.models.subscription import SubscriptionPlan, WalkerSubscription
from conftest import auth

PROFILE = {
    "is_available": True,
    "service_radius": 5,
    "hourly_rate": 120.0,
    "specialties": [" Perros grandes ", "Cachorros", "Perros grandes", ""],
    "bio": "Paseos por el centro",
    "city": "Aguascalientes",
    "state": "Ags",
}


class TestWalkerProfile:

    def test_new_walker_is_not_listed(self, client, walker):
        res = client.get("/api/v1/walkers/me/profile", headers=auth(walker))

        assert res.status_code == 200
        assert res.json()["profile"]["is_available"] is False

    def test_save_profile(self, client, walker):
        res = client.put("/api/v1/walkers/me/profile", json=PROFILE, headers=auth(walker))

        assert res.status_code == 200
        profile = res.json()["profile"]
        assert profile["specialties"] == ["Perros grandes", "Cachorros"]
        assert profile["service_radius"] == 5

    def test_radius_out_of_range(self, client, walker):
        res = client.put("/api/v1/walkers/me/profile", json={**PROFILE, "service_radius": 80}, headers=auth(walker))

        assert res.status_code == 400
        assert res.json()["reason"] == "El radio de servicio debe estar entre 1 y 50 km"

    def test_negative_rate(self, client, walker):
        res = client.put("/api/v1/walkers/me/profile", json={**PROFILE, "hourly_rate": -1}, headers=auth(walker))
        assert res.status_code == 400

    def test_clients_have_no_service_profile(self, client, owner):
        assert client.get("/api/v1/walkers/me/profile", headers=auth(owner)).status_code == 403


class TestDiscovery:

    def test_only_available_walkers_are_listed(self, client, make_user, owner, walker):
        make_user("walker-2", role="admin")
        client.put("/api/v1/walkers/me/profile", json=PROFILE, headers=auth(walker))

        res = client.get("/api/v1/walkers", headers=auth(owner))

        assert res.status_code == 200
        walkers = res.json()["walkers"]
        assert [w["user_id"] for w in walkers] == [walker]
        assert walkers[0]["name"] == "Ana Paseadora"

    def test_query_matches_city_and_specialty(self, client, owner, walker):
        client.put("/api/v1/walkers/me/profile", json=PROFILE, headers=auth(walker))

        by_city = client.get("/api/v1/walkers", params={"q": "aguas"}, headers=auth(owner)).json()["walkers"]
        by_specialty = client.get("/api/v1/walkers", params={"q": "cachorro"}, headers=auth(owner)).json()["walkers"]
        nothing = client.get("/api/v1/walkers", params={"q": "monterrey"}, headers=auth(owner)).json()["walkers"]

        assert len(by_city) == 1
        assert len(by_specialty) == 1
        assert nothing == []

    def test_blank_name_uses_fallback(self, client, db, owner, walker):
        client.put("/api/v1/walkers/me/profile", json=PROFILE, headers=auth(walker))
        db.get(Profile, walker).name = ""
        db.commit()

        walkers = client.get("/api/v1/walkers", headers=auth(owner)).json()["walkers"]

        assert walkers[0]["name"] == "Paseador"


class TestDashboard:

    def test_clients_list(self, client, owner, walker, affiliate):
        affiliate(owner, walker)

        res = client.get("/api/v1/walkers/me/clients", headers=auth(walker))

        assert res.status_code == 200
        clients = res.json()["clients"]
        assert len(clients) == 1
        assert clients[0]["client"]["name"] == "Carlos Cliente"

    def test_metrics(self, client, owner, walker, affiliate):
        affiliate(owner, walker)
        code = client.post("/api/v1/walks", json={"dog_name": "Luna"}, headers=auth(owner)).json()["qr"]["code"]
        client.post("/api/v1/walks/scan", json={"code": code}, headers=auth(walker))

        res = client.get("/api/v1/walkers/me/metrics", headers=auth(walker))

        assert res.status_code == 200
        metrics = res.json()["metrics"]
        assert metrics["active_clients"] == 1
        assert metrics["active_walks"] == 1
        assert metrics["walks_today"] == 1
        assert metrics["total_walks"] == 0
        assert metrics["is_walk_active"] is True

    def test_metrics_when_idle(self, client, walker):
        metrics = client.get("/api/v1/walkers/me/metrics", headers=auth(walker)).json()["metrics"]

        assert metrics["active_clients"] == 0
        assert metrics["is_walk_active"] is False

    def test_sharing_location_counts_as_active_walk(self, client, walker):
        client.post("/api/v1/tracking/location", json={"latitude": 21.88, "longitude": -102.29}, headers=auth(walker))

        metrics = client.get("/api/v1/walkers/me/metrics", headers=auth(walker)).json()["metrics"]

        assert metrics["active_walks"] == 0
        assert metrics["is_walk_active"] is True


class TestPlan:

    def test_default_plan_near_limit(self, client, make_user, walker, affiliate):
        for i in range(5):
            affiliate(make_user(f"client-{i}"), walker)

        res = client.get("/api/v1/walkers/me/plan", headers=auth(walker))

        assert res.status_code == 200
        body = res.json()
        assert body["plan"]["name"] == "free"
        assert body["client_limit"] == 6
        assert body["client_count"] == 5
        assert body["is_near_limit"] is True
        assert body["is_at_limit"] is False
        assert body["remaining_slots"] == 1

    def test_subscribed_plan(self, client, db, walker):
        plan = SubscriptionPlan(name="pro", display_name="Pro", max_clients=30, features=["Clientes ilimitados"])
        db.add(plan)
        db.flush()
        db.add(WalkerSubscription(walker_id=walker, plan_id=plan.id))
        db.commit()

        body = client.get("/api/v1/walkers/me/plan", headers=auth(walker)).json()

        assert body["plan"]["name"] == "pro"
        assert body["client_limit"] == 30
        assert body["is_near_limit"] is False

    def test_plan_usage_over_limit(self):
        usage = plan_usage(8, 6)

        assert usage["is_at_limit"] is True
        assert usage["remaining_slots"] == 0


def test_today_bounds_follow_local_day():
    now = pytz.UTC.localize(datetime(2025, 6, 1, 3, 0))

    start, end = today_bounds_utc(now)

    # 03:00 UTC is still May 31st in Mexico City (UTC-6)
    assert start == datetime(2025, 5, 31, 6, 0)
    assert end == datetime(2025, 6, 1, 6, 0)
