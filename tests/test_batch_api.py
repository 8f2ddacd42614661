"""
Batch endpoints — PATCH/DELETE /records/batch.
"""

from helpers import API, create_record


def _batch_delete(client, headers, body):
    return client.request("DELETE", f"{API}/records/batch", json=body, headers=headers)


def test_batch_update_broadcasts_patch(client, owner):
    ids = [create_record(client, owner.headers, name=n)["id"] for n in ("A", "B", "C")]
    resp = client.patch(f"{API}/records/batch",
                        json={"ids": [str(ids[0]), ids[1]], "updates": {"status": "sealed", "storageLocation": "Dry box"}},
                        headers=owner.headers)
    assert resp.status_code == 200
    assert resp.json() == {"updatedCount": 2}

    records = {r["id"]: r for r in client.get(f"{API}/records", headers=owner.headers).json()}
    assert records[ids[0]]["status"] == "sealed"
    assert records[ids[1]]["storageLocation"] == "Dry box"
    assert records[ids[2]]["status"] == "opened"
    assert records[ids[0]]["remainingPercentage"] == 80


def test_batch_update_empty_ids_is_400(client, owner):
    resp = client.patch(f"{API}/records/batch", json={"ids": [], "updates": {"dryerCount": 1}},
                        headers=owner.headers)
    assert resp.status_code == 400


def test_batch_update_only_junk_ids_is_400(client, owner):
    resp = client.patch(f"{API}/records/batch", json={"ids": ["x", None], "updates": {"dryerCount": 1}},
                        headers=owner.headers)
    assert resp.status_code == 400


def test_batch_update_invalid_patch_is_400(client, owner):
    record = create_record(client, owner.headers)
    resp = client.patch(f"{API}/records/batch",
                        json={"ids": [record["id"]], "updates": {"remainingPercentage": 150}},
                        headers=owner.headers)
    assert resp.status_code == 400


def test_batch_update_skips_foreign_records(client, owner, other_owner):
    mine = create_record(client, owner.headers)
    theirs = create_record(client, other_owner.headers)
    resp = client.patch(f"{API}/records/batch",
                        json={"ids": [mine["id"], theirs["id"]], "updates": {"dryerCount": 4}},
                        headers=owner.headers)
    assert resp.json() == {"updatedCount": 1}
    assert client.get(f"{API}/records/{theirs['id']}", headers=other_owner.headers).json()["dryerCount"] == 0


def test_batch_delete_own_and_foreign(client, owner, other_owner):
    mine = create_record(client, owner.headers)
    theirs = create_record(client, other_owner.headers)
    resp = _batch_delete(client, owner.headers, {"ids": [mine["id"], theirs["id"]]})
    assert resp.status_code == 200
    assert resp.json() == {"deletedCount": 1}
    assert client.get(f"{API}/records/{theirs['id']}", headers=other_owner.headers).status_code == 200


def test_batch_delete_validation(client, owner):
    assert _batch_delete(client, owner.headers, {"ids": []}).status_code == 400
    assert _batch_delete(client, owner.headers, {}).status_code == 400
    assert _batch_delete(client, owner.headers, {"ids": [99999]}).json() == {"deletedCount": 0}


def test_batch_routes_document_their_count_bodies(client):
    paths = client.get("/openapi.json").json()["paths"]
    batch_path = paths[f"{API}/records/batch"]
    for method, model in (("patch", "BatchUpdateResponse"), ("delete", "BatchDeleteResponse")):
        schema = batch_path[method]["responses"]["200"]["content"]["application/json"]["schema"]
        assert schema["$ref"].endswith(f"/{model}")
