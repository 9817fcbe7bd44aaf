from conftest import auth


def create_group(client, walker, **fields):
    payload = {"name": "Grupo Norte", **fields}
    res = client.post("/api/v1/groups", json=payload, headers=auth(walker))
    assert res.status_code == 201, res.text
    return res.json()["group"]


class TestGroups:

    def test_create_with_default_color(self, client, walker):
        group = create_group(client, walker, name="  Tardes  ")

        assert group["name"] == "Tardes"
        assert group["color"] == "#3B82F6"
        assert group["member_count"] == 0

    def test_invalid_color(self, client, walker):
        res = client.post("/api/v1/groups", json={"name": "Norte", "color": "blue"}, headers=auth(walker))

        assert res.status_code == 400
        assert res.json()["code"] == "VALIDATION_400_1"

    def test_name_too_long(self, client, walker):
        res = client.post("/api/v1/groups", json={"name": "x" * 51}, headers=auth(walker))
        assert res.status_code == 400

    def test_update(self, client, walker):
        group = create_group(client, walker)

        res = client.patch(f"/api/v1/groups/{group['id']}", json={"color": "#10B981"}, headers=auth(walker))

        assert res.status_code == 200
        assert res.json()["group"]["color"] == "#10B981"
        assert res.json()["group"]["name"] == "Grupo Norte"

    def test_update_can_clear_description(self, client, walker):
        group = create_group(client, walker, description="Perros chicos")

        res = client.patch(f"/api/v1/groups/{group['id']}", json={"description": "  "}, headers=auth(walker))

        assert res.status_code == 200
        assert res.json()["group"]["description"] is None
        assert res.json()["group"]["name"] == "Grupo Norte"

    def test_update_keeps_fields_not_sent(self, client, walker):
        group = create_group(client, walker, description="Perros chicos")

        res = client.patch(f"/api/v1/groups/{group['id']}", json={"name": "Grupo Sur"}, headers=auth(walker))

        assert res.json()["group"]["description"] == "Perros chicos"
        assert res.json()["group"]["color"] == "#3B82F6"

    def test_update_rejects_null_name(self, client, walker):
        group = create_group(client, walker)

        res = client.patch(f"/api/v1/groups/{group['id']}", json={"name": None}, headers=auth(walker))

        assert res.status_code == 400
        assert res.json()["reason"] == "El nombre es requerido"

    def test_soft_delete_hides_group(self, client, walker):
        group = create_group(client, walker)

        res = client.delete(f"/api/v1/groups/{group['id']}", headers=auth(walker))

        assert res.status_code == 200
        listed = client.get("/api/v1/groups", headers=auth(walker)).json()["groups"]
        assert listed == []
        assert client.get(f"/api/v1/groups/{group['id']}/members", headers=auth(walker)).status_code == 404

    def test_other_walker_cannot_touch_group(self, client, make_user, walker):
        other = make_user("walker-2", role="admin")
        group = create_group(client, walker)

        res = client.patch(f"/api/v1/groups/{group['id']}", json={"name": "Mío"}, headers=auth(other))

        assert res.status_code == 404

    def test_clients_cannot_manage_groups(self, client, owner):
        assert client.get("/api/v1/groups", headers=auth(owner)).status_code == 403


class TestGroupMembers:

    def test_replace_members_with_exact_set(self, client, make_user, walker, affiliate):
        a = make_user("client-a")
        b = make_user("client-b")
        c = make_user("client-c")
        for uid in (a, b, c):
            affiliate(uid, walker)
        group = create_group(client, walker)
        members_url = f"/api/v1/groups/{group['id']}/members"

        client.put(members_url, json={"client_ids": [a, b]}, headers=auth(walker))
        res = client.put(members_url, json={"client_ids": [b, c]}, headers=auth(walker))

        assert res.status_code == 200
        assert set(res.json()["client_ids"]) == {b, c}
        listed = client.get(members_url, headers=auth(walker)).json()
        assert set(listed["client_ids"]) == {b, c}
        groups = client.get("/api/v1/groups", headers=auth(walker)).json()["groups"]
        assert groups[0]["member_count"] == 2

    def test_empty_list_clears_group(self, client, owner, walker, affiliate):
        affiliate(owner, walker)
        group = create_group(client, walker)
        members_url = f"/api/v1/groups/{group['id']}/members"
        client.put(members_url, json={"client_ids": [owner]}, headers=auth(walker))

        res = client.put(members_url, json={"client_ids": []}, headers=auth(walker))

        assert res.json()["client_ids"] == []

    def test_members_must_be_affiliated(self, client, make_user, owner, walker, affiliate):
        stranger = make_user("client-9")
        affiliate(owner, walker)
        group = create_group(client, walker)

        res = client.put(
            f"/api/v1/groups/{group['id']}/members",
            json={"client_ids": [owner, stranger]},
            headers=auth(walker),
        )

        assert res.status_code == 400
        assert res.json()["code"] == "GROUP_MEMBERS_400_1"
