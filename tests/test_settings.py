from __future__ import annotations

from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlmodel import Session, SQLModel, create_engine

from memberhub import main as app_main
from memberhub.domain.models import ContentEntry, ContentStatus, Group, Profile, SiteSettings, Tool
from memberhub.infra import db


@pytest.fixture()
def settings_client(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> Generator[TestClient, None, None]:
    db_path = tmp_path / "settings_test.db"
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


def _admin_headers(client: TestClient) -> dict[str, str]:
    response = client.post(
        "/api/auth/sign-up",
        json={"email": "admin@example.com", "password": "password-123", "first_name": "Set", "last_name": "Admin"},
    )
    with Session(db.get_engine()) as session:
        profile = session.get(Profile, response.json()["id"])
        assert profile is not None
        profile.is_creator = True
        session.add(profile)
        session.commit()
    token = client.post(
        "/api/auth/sign-in",
        json={"email": "admin@example.com", "password": "password-123"},
    ).json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


def test_settings_partial_update_merges_dashboard_settings(settings_client: TestClient) -> None:
    headers = _admin_headers(settings_client)
    with Session(db.get_engine()) as session:
        session.add(
            SiteSettings(
                id=1,
                site_title="Old title",
                brand_primary_color="#111111",
                dashboard_settings={"header_image_url": "https://cdn.example.test/h.png", "featured_tools": ["t1"]},
            )
        )
        session.commit()

    response = settings_client.patch(
        "/api/admin/settings",
        json={
            "site_title": "New title",
            "dashboard_settings": {"featured_groups": ["g1"]},
            "not_a_column": "ignored",
        },
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["site_title"] == "New title"
    assert body["brand_primary_color"] == "#111111"
    assert body["dashboard_settings"] == {
        "header_image_url": "https://cdn.example.test/h.png",
        "featured_tools": ["t1"],
        "featured_groups": ["g1"],
    }


def test_settings_update_creates_singleton(settings_client: TestClient) -> None:
    headers = _admin_headers(settings_client)
    response = settings_client.patch(
        "/api/admin/settings",
        json={"member_navigation": [{"id": "tools", "label": "Apps", "order": 1, "visible": True}]},
        headers=headers,
    )
    assert response.status_code == 200
    stored = settings_client.get("/api/admin/settings", headers=headers).json()
    assert stored["member_navigation"][0]["label"] == "Apps"
    assert stored["dashboard_settings"] == {}


def test_dashboard_dropdown_data(settings_client: TestClient) -> None:
    headers = _admin_headers(settings_client)
    with Session(db.get_engine()) as session:
        session.add(Tool(id="t-on", name="Planner", slug="planner"))
        session.add(Tool(id="t-off", name="Old", slug="old", is_active=False))
        session.add(Group(id="g-on", name="Builders"))
        session.add(Group(id="g-gone", name="Gone", deleted_at=datetime(2026, 1, 1, tzinfo=UTC)))
        session.add(ContentEntry(id="c-pub", title="Guide", content_type="article", status=ContentStatus.PUBLISHED))
        session.add(ContentEntry(id="c-draft", title="Draft", content_type="article"))
        session.add(SiteSettings(id=1, dashboard_settings={"featured_tools": ["t-on"]}))
        session.commit()

    body = settings_client.get("/api/admin/settings/dashboard-options", headers=headers).json()

    assert body["tools"] == [{"id": "t-on", "name": "Planner"}]
    assert body["groups"] == [{"id": "g-on", "name": "Builders"}]
    assert [item["id"] for item in body["content_items"]] == ["c-pub"]
    assert body["dashboard_settings"]["featured_tools"] == ["t-on"]
    assert body["dashboard_settings"]["featured_groups"] is None
