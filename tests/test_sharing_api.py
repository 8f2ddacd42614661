"""
Sharing settings and the anonymous public view.
"""

from helpers import API, create_record


def _share(client, headers, material_id, is_public):
    return client.post(f"{API}/sharing", json={"materialId": material_id, "isPublic": is_public}, headers=headers)


def _material(client, headers, name):
    resp = client.post(f"{API}/materials", json={"name": name}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


class TestSharingSettings:

    def test_upsert_creates_then_updates(self, client, owner):
        first = _share(client, owner.headers, None, True)
        assert first.status_code == 201
        second = _share(client, owner.headers, None, False)
        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]
        rules = client.get(f"{API}/sharing", headers=owner.headers).json()
        assert [r["isPublic"] for r in rules] == [False]

    def test_one_rule_per_material(self, client, owner):
        material_id = _material(client, owner.headers, "PLA")
        _share(client, owner.headers, material_id, True)
        _share(client, owner.headers, material_id, False)
        _share(client, owner.headers, None, False)
        rules = client.get(f"{API}/sharing", headers=owner.headers).json()
        assert [(r["materialId"], r["isPublic"]) for r in rules] == [(None, False), (material_id, False)]

    def test_unknown_material_is_400(self, client, owner):
        assert _share(client, owner.headers, 987654, True).status_code == 400

    def test_rules_are_per_owner(self, client, owner, other_owner):
        _share(client, owner.headers, None, True)
        assert client.get(f"{API}/sharing", headers=other_owner.headers).json() == []


class TestPublicView:

    def test_global_rule_shows_everything(self, client, owner):
        create_record(client, owner.headers, name="One", material="1")
        create_record(client, owner.headers, name="Two", material="PLA")
        _share(client, owner.headers, None, True)

        resp = client.get(f"{API}/public/records/{owner.id}")
        assert resp.status_code == 200
        body = resp.json()
        assert body["owner"] == {"id": owner.id, "name": "Filament Fan"}
        assert sorted(r["name"] for r in body["records"]) == ["One", "Two"]

    def test_material_rules(self, client, owner):
        pla = _material(client, owner.headers, "PLA")
        petg = _material(client, owner.headers, "PETG")
        create_record(client, owner.headers, name="PLA spool", material=str(pla))
        create_record(client, owner.headers, name="PETG spool", material=str(petg))
        _share(client, owner.headers, pla, True)
        _share(client, owner.headers, petg, False)

        body = client.get(f"{API}/public/records/{owner.id}").json()
        assert [r["name"] for r in body["records"]] == ["PLA spool"]

    def test_no_rules_is_404(self, client, owner):
        create_record(client, owner.headers)
        assert client.get(f"{API}/public/records/{owner.id}").status_code == 404

    def test_rules_without_public_ones_give_empty_list(self, client, owner):
        create_record(client, owner.headers)
        _share(client, owner.headers, None, False)
        resp = client.get(f"{API}/public/records/{owner.id}")
        assert resp.status_code == 200
        assert resp.json()["records"] == []

    def test_unknown_owner_is_404(self, client):
        assert client.get(f"{API}/public/records/555555").status_code == 404

    def test_no_auth_needed_and_other_owners_hidden(self, client, owner, other_owner):
        create_record(client, other_owner.headers, name="Not mine")
        _share(client, owner.headers, None, True)
        body = client.get(f"/api/public/records/{owner.id}").json()
        assert body["records"] == []
