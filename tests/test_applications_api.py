from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from sitedesk.config import PLACEHOLDER_BLURHASH
from sitedesk.db.models import Application, Campaign, Post
from sitedesk.db.repositories.applications import ApplicationsRepository


def _load_app(db_session, app_id):
    db_session.expire_all()
    return db_session.scalars(select(Application).where(Application.id == app_id)).first()


def test_create_application_sanitizes_subdomain_and_applies_defaults(api_client, db_session):
    resp = api_client.post(
        "/api/application",
        json={"name": "My Site", "description": "Hello", "subdomain": "My Site!", "userId": "user_owner"},
    )

    assert resp.status_code == 201
    site_id = resp.json()["siteId"]
    created = _load_app(db_session, site_id)
    assert created.subdomain == "MySite"
    assert created.user_id == "user_owner"
    assert created.logo == "/logo.png"
    assert created.image == "/placeholder.png"
    assert created.image_blurhash == PLACEHOLDER_BLURHASH


def test_create_application_generates_subdomain_when_sanitized_empty(api_client, db_session):
    first = api_client.post("/api/application", json={"name": "A", "subdomain": "", "userId": "user_owner"})
    second = api_client.post("/api/application", json={"name": "B", "subdomain": "!!!", "userId": "user_owner"})

    assert first.status_code == 201
    assert second.status_code == 201
    first_sub = _load_app(db_session, first.json()["siteId"]).subdomain
    second_sub = _load_app(db_session, second.json()["siteId"]).subdomain
    assert first_sub and second_sub
    assert first_sub != second_sub


def test_create_application_defaults_owner_to_caller(api_client, db_session):
    resp = api_client.post("/api/application", json={"name": "Mine", "subdomain": "mine"})

    assert resp.status_code == 201
    assert _load_app(db_session, resp.json()["siteId"]).user_id == "user_owner"


def test_create_application_duplicate_subdomain_is_server_error(api_client, seed_data):
    resp = api_client.post("/api/application", json={"name": "Dup", "subdomain": "owned"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to create application"}


def test_get_application_by_id_and_list(api_client, seed_data):
    owned_id = seed_data["owned_app"].id

    single = api_client.get("/api/application", params={"appId": owned_id})
    assert single.status_code == 200
    assert single.json()["id"] == owned_id
    assert single.json()["customDomain"] == "owned.example.com"

    listing = api_client.get("/api/application")
    assert listing.status_code == 200
    assert [item["subdomain"] for item in listing.json()] == ["owned", "bare"]


def test_get_application_not_owned_returns_null(api_client, seed_data):
    resp = api_client.get("/api/application", params={"appId": seed_data["foreign_app"].id})

    assert resp.status_code == 200
    assert resp.json() is None


def test_get_application_rejects_array_app_id(api_client, seed_data):
    resp = api_client.get("/api/application", params=[("appId", "a"), ("appId", "b")])

    assert resp.status_code == 400
    assert resp.json() == {"error": "Bad request. siteId parameter cannot be an array."}


def test_get_application_without_session_user_is_server_error(api_client, auth_context):
    auth_context.user_id = None

    resp = api_client.get("/api/application")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Server failed to get session user ID"}


def test_update_application_writes_fields_and_sanitizes_subdomain(api_client, db_session, seed_data):
    owned_id = seed_data["owned_app"].id

    resp = api_client.put(
        "/api/application",
        json={
            "id": owned_id,
            "currentSubdomain": "owned",
            "name": "Renamed",
            "description": "New description",
            "image": "/new.png",
            "imageBlurhash": "blur",
            "subdomain": "new sub!",
        },
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Renamed"
    assert body["subdomain"] == "newsub"
    assert body["imageBlurhash"] == "blur"
    stored = _load_app(db_session, owned_id)
    assert stored.subdomain == "newsub"
    assert stored.image == "/new.png"
    # Fields absent from the body are left alone.
    assert stored.custom_domain == "owned.example.com"


def test_update_application_falls_back_to_caller_supplied_subdomain(api_client, db_session, seed_data):
    owned_id = seed_data["owned_app"].id

    resp = api_client.put(
        "/api/application",
        json={"id": owned_id, "currentSubdomain": "from-client", "subdomain": "***"},
    )

    assert resp.status_code == 200
    assert _load_app(db_session, owned_id).subdomain == "from-client"


def test_clearing_custom_domain_on_several_applications(api_client, db_session, seed_data):
    owned_id = seed_data["owned_app"].id
    bare_id = seed_data["bare_app"].id

    first = api_client.put("/api/application", json={"id": owned_id, "customDomain": ""})
    second = api_client.put("/api/application", json={"id": bare_id, "customDomain": "   "})

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["customDomain"] is None
    assert _load_app(db_session, owned_id).custom_domain is None
    assert _load_app(db_session, bare_id).custom_domain is None


def test_update_application_failure_modes(api_client, auth_context, seed_data):
    missing_id = api_client.put("/api/application", json={"name": "x"})
    assert missing_id.status_code == 400
    assert missing_id.json() == {"error": "Missing or misconfigured site ID"}

    array_id = api_client.put("/api/application", json={"id": ["a", "b"], "name": "x"})
    assert array_id.status_code == 400

    not_owned = api_client.put("/api/application", json={"id": seed_data["foreign_app"].id, "name": "x"})
    assert not_owned.status_code == 404

    auth_context.user_id = None
    no_user = api_client.put("/api/application", json={"id": seed_data["owned_app"].id, "name": "x"})
    assert no_user.status_code == 401


def test_delete_application_cascades_posts_and_campaigns(api_client, db_session, seed_data):
    owned_id = seed_data["owned_app"].id
    foreign_post_id = seed_data["foreign_post"].id

    resp = api_client.delete("/api/application", params={"appId": owned_id})

    assert resp.status_code == 200
    assert resp.content == b""
    assert _load_app(db_session, owned_id) is None
    assert db_session.scalars(select(Post).where(Post.app_id == owned_id)).all() == []
    assert db_session.scalars(select(Campaign).where(Campaign.app_id == owned_id)).all() == []
    assert db_session.scalars(select(Post).where(Post.id == foreign_post_id)).first() is not None


def test_delete_application_rolls_back_when_cascade_fails(api_client, db_session, seed_data, monkeypatch):
    owned_id = seed_data["owned_app"].id

    def failing_delete_campaigns(self, app_id):
        raise OperationalError("DELETE FROM campaigns", {}, Exception("disk I/O error"))

    monkeypatch.setattr(ApplicationsRepository, "_delete_campaigns", failing_delete_campaigns)

    resp = api_client.delete("/api/application", params={"appId": owned_id})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to delete application"}
    assert _load_app(db_session, owned_id) is not None
    titles = sorted(db_session.scalars(select(Post.title).where(Post.app_id == owned_id)).all())
    assert titles == ["Draft", "Published"]


def test_delete_application_failure_modes(api_client, auth_context, db_session, seed_data):
    foreign_id = seed_data["foreign_app"].id

    missing = api_client.delete("/api/application")
    assert missing.status_code == 400

    array = api_client.delete("/api/application", params=[("appId", "a"), ("appId", "b")])
    assert array.status_code == 400

    not_owned = api_client.delete("/api/application", params={"appId": foreign_id})
    assert not_owned.status_code == 404
    assert _load_app(db_session, foreign_id) is not None

    auth_context.user_id = None
    no_user = api_client.delete("/api/application", params={"appId": foreign_id})
    assert no_user.status_code == 401
