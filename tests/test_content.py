from __future__ import annotations

from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlmodel import Session, SQLModel, create_engine

from memberhub import main as app_main
from memberhub.console.client import ConsoleClient
from memberhub.console.content import ContentModerationView
from memberhub.domain.models import ContentEntry, ContentStatus, Profile, Taxonomy, TaxonomyType
from memberhub.infra import db


@pytest.fixture()
def content_client(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> Generator[TestClient, None, None]:
    db_path = tmp_path / "content_test.db"
    test_engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(test_engine, "connect")
    def _enable_foreign_keys(dbapi_connection: object, _connection_record: object) -> None:
        cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    SQLModel.metadata.create_all(test_engine)
    monkeypatch.setattr(db, "engine", test_engine)
    client = TestClient(app_main.app)
    yield client
    client.close()


def _auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _login_admin(client: TestClient) -> str:
    response = client.post(
        "/api/auth/sign-up",
        json={"email": "admin@example.com", "password": "password-123", "first_name": "Ann", "last_name": "Admin"},
    )
    assert response.status_code == 201
    admin_id = response.json()["id"]
    with Session(db.get_engine()) as session:
        profile = session.get(Profile, admin_id)
        assert profile is not None
        profile.is_creator = True
        session.add(profile)
        session.commit()
    response = client.post("/api/auth/sign-in", json={"email": "admin@example.com", "password": "password-123"})
    return response.json()["access_token"]


def _seed_content(admin_token: str, client: TestClient) -> dict[str, str]:
    admin_id = client.get("/api/auth/me", headers=_auth_header(admin_token)).json()["id"]
    base = datetime(2026, 1, 1, tzinfo=UTC)
    with Session(db.get_engine()) as session:
        category = Taxonomy(type=TaxonomyType.CATEGORY, name="Marketing", slug="marketing")
        session.add(category)
        session.commit()
        session.refresh(category)
        entries = [
            ContentEntry(
                slug="growth-guide",
                title="Growth Guide",
                content_type="Article",
                category=category.id,
                status=ContentStatus.PUBLISHED,
                published_at=base,
                owner_id=admin_id,
                article_body="Grow.",
                created_at=base,
            ),
            ContentEntry(
                slug="launch-video",
                title="Launch Video",
                content_type="video",
                category="00000000-0000-0000-0000-000000000000",
                status=ContentStatus.DRAFT,
                owner_id=admin_id,
                video_url="https://cdn.example.test/launch.mp4",
                created_at=base + timedelta(days=1),
            ),
            ContentEntry(
                slug="orphan-notes",
                title="Orphan Notes",
                content_type="article",
                category="Free Text",
                status=ContentStatus.DRAFT,
                created_at=base + timedelta(days=2),
            ),
        ]
        for entry in entries:
            session.add(entry)
        session.commit()
        return {entry.slug or "": entry.id for entry in entries}


def test_toggle_published_item_then_refetch_shows_draft(content_client: TestClient) -> None:
    token = _login_admin(content_client)
    ids = _seed_content(token, content_client)
    headers = _auth_header(token)

    response = content_client.post(
        f"/api/admin/content/{ids['growth-guide']}/status",
        json={"next_status": "draft"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["success"] is True

    items = content_client.get("/api/admin/content", headers=headers).json()
    toggled = next(item for item in items if item["id"] == ids["growth-guide"])
    assert toggled["status"] == "draft"
    assert toggled["published_at"] is None


def test_admin_list_is_newest_first_with_category_names(content_client: TestClient) -> None:
    token = _login_admin(content_client)
    _seed_content(token, content_client)

    items = content_client.get("/api/admin/content", headers=_auth_header(token)).json()

    assert [item["slug"] for item in items] == ["orphan-notes", "launch-video", "growth-guide"]
    by_slug = {item["slug"]: item for item in items}
    assert by_slug["growth-guide"]["category"] == "Marketing"
    assert by_slug["launch-video"]["category"] is None
    assert by_slug["orphan-notes"]["category"] == "Free Text"
    assert by_slug["growth-guide"]["owner"] == {"full_name": "Ann Admin", "avatar_url": None}
    assert by_slug["orphan-notes"]["owner"] is None


def test_content_detail_by_slug(content_client: TestClient) -> None:
    token = _login_admin(content_client)
    _seed_content(token, content_client)
    headers = _auth_header(token)

    detail = content_client.get("/api/admin/content/by-slug/launch-video", headers=headers)
    assert detail.status_code == 200
    body = detail.json()
    assert body["author"] == "Ann Admin"
    assert body["full_content"]["video_url"] == "https://cdn.example.test/launch.mp4"

    missing = content_client.get("/api/admin/content/by-slug/nope", headers=headers)
    assert missing.status_code == 404


def test_moderation_view_filters_and_refetches(content_client: TestClient) -> None:
    token = _login_admin(content_client)
    ids = _seed_content(token, content_client)
    content_client.headers.update(_auth_header(token))
    view = ContentModerationView(ConsoleClient(content_client))
    view.refresh()

    assert view.submitters == ["Ann Admin"]

    view.filters.content_type = "ARTICLE"
    assert {item["slug"] for item in view.filtered_items} == {"growth-guide", "orphan-notes"}

    view.filters.submitted_by = "Ann Admin"
    assert [item["slug"] for item in view.filtered_items] == ["growth-guide"]

    view.filters.submitted_by = ""
    view.filters.content_type = ""
    view.filters.search = "launch"
    assert [item["slug"] for item in view.filtered_items] == ["launch-video"]

    result = view.publish(ids["launch-video"])
    assert result.success is True
    assert view.filtered_items[0]["status"] == "published"

    view.filters.search = ""
    view.filters.status = "draft"
    assert [item["slug"] for item in view.filtered_items] == ["orphan-notes"]

    result = view.toggle(ids["launch-video"])
    assert result.success is True
    assert {item["slug"] for item in view.filtered_items} == {"orphan-notes", "launch-video"}


def test_failed_delete_reports_error_and_refetches(content_client: TestClient) -> None:
    token = _login_admin(content_client)
    ids = _seed_content(token, content_client)
    content_client.headers.update(_auth_header(token))
    view = ContentModerationView(ConsoleClient(content_client))
    view.refresh()

    failed = view.delete("missing-id")
    assert failed.success is False
    assert failed.error == "Content not found or unauthorized"
    assert len(view.items) == 3

    deleted = view.delete(ids["orphan-notes"])
    assert deleted.success is True
    assert [item["slug"] for item in view.items] == ["launch-video", "growth-guide"]
