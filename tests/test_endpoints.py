"""
HTTP-level tests for the sync and space routes.

Verifies:
- Health checks
- Ingestion, change collection and acknowledgement round trip
- Space management endpoints
- Error envelope for 400/404/422/503
"""

from unittest.mock import patch

from test_fixtures import db_session, store, client, make_category, make_recipe, make_user
from app.exceptions import PersistenceError
from services.sync_service import SyncService


# =============================================================================
# HEALTH
# =============================================================================


def test_health_check(client):
    response = client.get("/health-check")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_store_health_check(client):
    response = client.get("/health-check/store")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "store": "reachable"}


def test_request_id_is_echoed(client):
    response = client.get("/health-check", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"
    assert "X-Process-Time" in response.headers


# =============================================================================
# SYNC
# =============================================================================


def test_ingest_returns_report(client):
    response = client.post(
        "/sync/ingest",
        json={
            "users": [{"uid": "u1"}],
            "recipes": [{"uid": "r1", "title": "Soup", "details": "", "ownerId": "u1"}],
            "meals": [{"uid": "m1", "scalingFactor": 1, "mealType": "dinner", "recipeId": "r9"}],
            "gadgets": [],
        },
    )

    body = response.json()
    assert response.status_code == 200
    assert body["ok"] is False
    assert body["issue_count"] == 2
    assert body["reports"]["recipes"]["created"] == 1
    assert body["issues"][0]["code"] == "unknown_kind"
    assert body["reports"]["meals"]["issues"][0]["field"] == "recipeId"


def test_ingest_rejects_non_object_body(client):
    response = client.post("/sync/ingest", json=[{"uid": "u1"}])

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_ingest_store_failure_is_503(client):
    with patch.object(
        SyncService, "ingest", side_effect=PersistenceError("Local store operation failed")
    ):
        response = client.post("/sync/ingest", json={"users": [{"uid": "u1"}]})

    body = response.json()
    assert response.status_code == 503
    assert body["success"] is False
    assert body["error"]["code"] == "PERSISTENCE_ERROR"


def test_changes_and_acknowledge_round_trip(client, store):
    """
    Verifies:
    - Dirty entities are listed in batches
    - Acknowledging them empties the next listing
    """
    owner = make_user(store, "u1", clean=False)
    make_recipe(store, owner, uid="r1", clean=False)
    make_recipe(store, owner, uid="r2", clean=False)

    changes = client.get("/sync/changes", params={"kind": "recipes", "batch_size": 1}).json()
    assert [[dto["uid"] for dto in batch] for batch in changes["recipes"]] in (
        [["r1"], ["r2"]],
        [["r2"], ["r1"]],
    )
    assert "users" not in changes

    ack = client.post("/sync/ack", json={"kind": "recipes", "uids": ["r1", "r2", "zz"]})
    assert ack.status_code == 200
    assert ack.json() == {"kind": "recipes", "acknowledged": 2, "missing": ["zz"]}

    after = client.get("/sync/changes").json()
    assert list(after) == ["users"]


def test_changes_with_unknown_kind_is_400(client):
    response = client.get("/sync/changes", params={"kind": "gadgets"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "UNKNOWN_KIND"


# =============================================================================
# SPACES
# =============================================================================


def test_space_lifecycle(client, store):
    make_user(store, "u1")
    make_user(store, "u2")
    make_recipe(store, store.fetch_unique("users", "u2"))
    make_category(store, "Groceries")

    created = client.post(
        "/spaces", json={"name": "Household", "owner_uid": "u1", "member_uids": ["u2"]}
    )
    assert created.status_code == 201
    space = created.json()
    assert space["member_uids"] == ["u1", "u2"]
    assert space["dirty"] is True

    uid = space["uid"]
    shared = client.post(f"/spaces/{uid}/categories", json={"name": "Groceries"}).json()
    assert shared["shared_category_names"] == ["Groceries"]

    policy = client.patch(f"/spaces/{uid}/policy", json={"share_all_meals": False}).json()
    assert policy["share_all_meals"] is False
    assert policy["share_all_recipes"] is True

    removed = client.delete(f"/spaces/{uid}/members/u2").json()
    assert removed["member_uids"] == ["u1"]

    unshared = client.delete(f"/spaces/{uid}/categories/Groceries").json()
    assert unshared["shared_category_names"] == []

    assert client.get(f"/spaces/{uid}").json()["uid"] == uid


def test_add_member_endpoint(client, store):
    owner = make_user(store, "u1")
    make_user(store, "u2")
    space_uid = client.post("/spaces", json={"name": "Flat", "owner_uid": owner.uid}).json()["uid"]

    response = client.post(f"/spaces/{space_uid}/members", json={"user_uid": "u2"})

    assert response.status_code == 200
    assert response.json()["member_uids"] == ["u1", "u2"]


def test_unknown_space_is_404_envelope(client):
    response = client.get("/spaces/missing")

    body = response.json()
    assert response.status_code == 404
    assert body["success"] is False
    assert body["error"]["code"] == "SPACE_NOT_FOUND"
    assert "timestamp" in body


def test_blank_category_share_is_400(client, store):
    make_user(store, "u1")
    space_uid = client.post("/spaces", json={"name": "Flat", "owner_uid": "u1"}).json()["uid"]

    response = client.post(f"/spaces/{space_uid}/categories", json={"name": "  "})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_CATEGORY_NAME"


def test_recompute_spaces_endpoint(client, store):
    owner = make_user(store, "u1")
    make_recipe(store, owner)
    client.post("/spaces", json={"name": "Flat", "owner_uid": "u1"})

    response = client.post("/users/u1/recompute-spaces")

    assert response.status_code == 200
    assert response.json() == {"user_uid": "u1", "changed": 0}
    assert client.post("/users/ghost/recompute-spaces").status_code == 404
