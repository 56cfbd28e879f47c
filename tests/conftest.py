import os
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "sitedesk_test.db"

os.environ.setdefault("DATABASE_URL", f"sqlite:///{TEST_DB_PATH}")
os.environ.setdefault("CLERK_JWT_ISSUER", "https://clerk.example.test")
os.environ.setdefault("CLERK_JWKS_URL", "https://clerk.example.test/.well-known/jwks.json")

from alembic import command  # noqa: E402
from alembic.config import Config  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import delete  # noqa: E402

from sitedesk.auth.dependencies import AuthContext, get_current_user  # noqa: E402
from sitedesk.db.base import SessionLocal, engine  # noqa: E402
from sitedesk.db.deps import get_session  # noqa: E402
from sitedesk.db.enums import CampaignTypeEnum  # noqa: E402
from sitedesk.db.models import Application, Campaign, Post, User  # noqa: E402
from sitedesk.main import app  # noqa: E402
from sitedesk.services import revalidate as revalidate_module  # noqa: E402

OWNER_ID = "user_owner"
OTHER_ID = "user_other"


@pytest.fixture(scope="session", autouse=True)
def apply_migrations() -> None:
    engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()
    alembic_cfg = Config(str(ROOT_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(ROOT_DIR / "alembic"))
    alembic_cfg.attributes["configure_logger"] = False
    command.upgrade(alembic_cfg, "head")


def _wipe(session) -> None:
    session.rollback()
    for model in (Campaign, Post, Application, User):
        session.execute(delete(model))
    session.commit()


@pytest.fixture()
def db_session():
    session = SessionLocal()
    _wipe(session)
    session.add_all([User(id=OWNER_ID, name="Owner"), User(id=OTHER_ID, name="Other")])
    session.commit()
    try:
        yield session
    finally:
        _wipe(session)
        session.close()


@pytest.fixture()
def auth_context() -> AuthContext:
    return AuthContext(user_id=OWNER_ID)


@pytest.fixture()
def override_dependencies(db_session, auth_context):
    def get_session_override():
        try:
            yield db_session
        finally:
            pass

    def get_user_override():
        return auth_context

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_current_user] = get_user_override
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def api_client(override_dependencies):
    with TestClient(app) as client:
        yield client


class FakeRevalidator:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str | None]] = []

    async def __call__(self, hostname: str, resource_id: str, slug: str | None, **_kwargs) -> None:
        self.calls.append((hostname, resource_id, slug))


@pytest.fixture()
def fake_revalidate(monkeypatch) -> FakeRevalidator:
    fake = FakeRevalidator()
    monkeypatch.setattr(revalidate_module, "revalidate", fake)
    return fake


@pytest.fixture()
def seed_data(db_session):
    owned_app = Application(
        name="Owned Site",
        description="Belongs to the caller",
        subdomain="owned",
        custom_domain="owned.example.com",
        user_id=OWNER_ID,
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )
    bare_app = Application(
        name="Bare Site",
        subdomain="bare",
        user_id=OWNER_ID,
        created_at=datetime(2026, 1, 2, tzinfo=timezone.utc),
    )
    foreign_app = Application(
        name="Foreign Site",
        subdomain="foreign",
        user_id=OTHER_ID,
        created_at=datetime(2026, 1, 3, tzinfo=timezone.utc),
    )
    db_session.add_all([owned_app, bare_app, foreign_app])
    db_session.commit()

    published_post = Post(title="Published", slug="published", published=True, app_id=owned_app.id)
    draft_post = Post(title="Draft", slug="draft", published=False, app_id=owned_app.id)
    foreign_post = Post(title="Foreign", slug="foreign", published=True, app_id=foreign_app.id)
    db_session.add_all([published_post, draft_post, foreign_post])

    campaign = Campaign(name="Spring Sale", campaign_type=CampaignTypeEnum.MAX_TOTAL, app_id=owned_app.id)
    bare_campaign = Campaign(name="Quiet", app_id=bare_app.id)
    foreign_campaign = Campaign(name="Not Yours", app_id=foreign_app.id)
    db_session.add_all([campaign, bare_campaign, foreign_campaign])
    db_session.commit()

    return {
        "owned_app": owned_app,
        "bare_app": bare_app,
        "foreign_app": foreign_app,
        "published_post": published_post,
        "draft_post": draft_post,
        "foreign_post": foreign_post,
        "campaign": campaign,
        "bare_campaign": bare_campaign,
        "foreign_campaign": foreign_campaign,
    }
