from __future__ import annotations

import json
from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlmodel import Session, SQLModel, create_engine

from memberhub import main as app_main
from memberhub.domain.models import (
    DirectoryMember,
    Group,
    Plan,
    PlanPermission,
    Profile,
    SiteSettings,
    Tool,
    ToolPlanAccess,
)
from memberhub.infra import db


@pytest.fixture()
def member_client(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> Generator[TestClient, None, None]:
    db_path = tmp_path / "member_test.db"
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


def _register(
    client: TestClient,
    email: str,
    *,
    creator: bool = False,
    plan_id: str | None = None,
    first_name: str = "Mia",
) -> tuple[str, str]:
    password = "password-123"
    response = client.post(
        "/api/auth/sign-up",
        json={"email": email, "password": password, "first_name": first_name, "last_name": "Member"},
    )
    assert response.status_code == 201
    user_id = response.json()["id"]
    with Session(db.get_engine()) as session:
        profile = session.get(Profile, user_id)
        assert profile is not None
        profile.is_creator = creator
        profile.plan_id = plan_id
        session.add(profile)
        session.commit()
    token = client.post("/api/auth/sign-in", json={"email": email, "password": password}).json()["access_token"]
    return user_id, token


def _seed_plans() -> None:
    with Session(db.get_engine()) as session:
        session.add(Plan(id="listed", name="Listed", slug="listed"))
        session.add(Plan(id="hidden", name="Hidden", slug="hidden"))
        session.commit()
        session.add(PlanPermission(plan_id="listed", permission_key="directory_listing", enabled=True))
        session.commit()


def _make_public(user_id: str) -> None:
    with Session(db.get_engine()) as session:
        profile = session.get(Profile, user_id)
        assert profile is not None
        profile.is_public = True
        session.add(profile)
        session.add(DirectoryMember(user_id=user_id))
        session.commit()


def _load_profile(user_id: str) -> tuple[Profile, DirectoryMember | None]:
    with Session(db.get_engine()) as session:
        profile = session.get(Profile, user_id)
        assert profile is not None
        return profile, session.get(DirectoryMember, user_id)


def test_plan_without_directory_listing_removes_member_from_directory(member_client: TestClient) -> None:
    _seed_plans()
    _, admin_token = _register(member_client, "admin@example.com", creator=True)
    member_id, _ = _register(member_client, "member@example.com", plan_id="listed")
    _make_public(member_id)

    kept = member_client.post(
        f"/api/admin/members/{member_id}/plan",
        json={"plan_id": "listed"},
        headers=_auth_header(admin_token),
    )
    assert kept.status_code == 200
    profile, entry = _load_profile(member_id)
    assert profile.is_public is True
    assert entry is not None

    moved = member_client.post(
        f"/api/admin/members/{member_id}/plan",
        json={"plan_id": "hidden"},
        headers=_auth_header(admin_token),
    )
    assert moved.status_code == 200
    profile, entry = _load_profile(member_id)
    assert profile.plan_id == "hidden"
    assert profile.is_public is False
    assert entry is None


def test_suspend_and_unsuspend_member(member_client: TestClient) -> None:
    _, admin_token = _register(member_client, "admin@example.com", creator=True)
    member_id, _ = _register(member_client, "member@example.com")
    _make_public(member_id)
    url = f"/api/admin/members/{member_id}/status"

    assert member_client.post(url, json={"is_active": False}, headers=_auth_header(admin_token)).status_code == 200
    profile, entry = _load_profile(member_id)
    assert profile.is_active is False
    assert profile.is_public is False
    assert entry is None

    assert member_client.post(url, json={"is_active": True}, headers=_auth_header(admin_token)).status_code == 200
    profile, entry = _load_profile(member_id)
    assert profile.is_active is True
    assert profile.is_public is False
    assert entry is None

    missing = member_client.post(
        "/api/admin/members/nobody/status",
        json={"is_active": False},
        headers=_auth_header(admin_token),
    )
    assert missing.status_code == 404


def test_member_tools_flag_availability_by_plan(member_client: TestClient) -> None:
    _seed_plans()
    base = datetime(2026, 3, 1, tzinfo=UTC)
    with Session(db.get_engine()) as session:
        session.add(Tool(id="tool-b", name="Beta", slug="beta", created_at=base + timedelta(days=1)))
        session.add(Tool(id="tool-a", name="Alpha", slug="alpha", created_at=base))
        session.add(Tool(id="tool-off", name="Retired", slug="retired", is_active=False, created_at=base))
        session.commit()
        session.add(ToolPlanAccess(tool_id="tool-b", plan_id="listed"))
        session.commit()
    _, token = _register(member_client, "member@example.com", plan_id="listed")

    tools = member_client.get("/api/members/tools", headers=_auth_header(token)).json()

    assert [(tool["id"], tool["is_available"]) for tool in tools] == [("tool-a", False), ("tool-b", True)]

    _, planless_token = _register(member_client, "planless@example.com")
    tools = member_client.get("/api/members/tools", headers=_auth_header(planless_token)).json()
    assert [tool["is_available"] for tool in tools] == [False, False]


def test_member_shell_uses_stored_navigation(member_client: TestClient) -> None:
    with Session(db.get_engine()) as session:
        session.add(
            SiteSettings(
                id=1,
                site_title="Makers Guild",
                brand_accent_color="#ff6600",
                member_navigation=json.dumps(
                    [
                        {"id": "community", "label": "Circle", "order": 2, "visible": True},
                        {"id": "tools", "order": 1, "visible": True},
                        {"id": "support", "order": 3, "visible": False},
                    ]
                ),
            )
        )
        session.commit()
    _, member_token = _register(member_client, "member@example.com")
    _, admin_token = _register(member_client, "admin@example.com", creator=True)

    shell = member_client.get("/api/members/shell", headers=_auth_header(member_token)).json()
    assert shell["site_title"] == "Makers Guild"
    assert shell["member_navigation"] == [
        {"key": "tools", "label": "Tools"},
        {"key": "community", "label": "Circle"},
    ]
    assert shell["sidebar_labels"]["community"] == "Circle"
    assert [item["key"] for item in shell["menu"]] == ["tools", "community"]
    assert shell["user"]["full_name"] == "Mia Member"

    admin_shell = member_client.get("/api/members/shell", headers=_auth_header(admin_token)).json()
    assert admin_shell["menu"][-1] == {
        "key": "admin",
        "label": "Admin",
        "href": "/admin/dashboard",
        "icon": "fa-shield-halved",
    }


def test_member_shell_defaults_without_settings(member_client: TestClient) -> None:
    _, token = _register(member_client, "member@example.com")
    shell = member_client.get("/api/members/shell", headers=_auth_header(token)).json()
    assert [item["key"] for item in shell["member_navigation"]] == [
        "dashboard",
        "tools",
        "community",
        "education",
        "support",
    ]
    assert shell["site_title"] is None


def test_site_updates_read_state(member_client: TestClient) -> None:
    _, admin_token = _register(member_client, "admin@example.com", creator=True, first_name="Ada")
    _, member_token = _register(member_client, "member@example.com")
    for title in ("First", "Second"):
        created = member_client.post(
            "/api/admin/site-updates",
            json={"title": title, "body": f"{title} body"},
            headers=_auth_header(admin_token),
        )
        assert created.status_code == 201

    headers = _auth_header(member_token)
    updates = member_client.get("/api/members/site-updates", headers=headers).json()
    assert {item["title"] for item in updates} == {"First", "Second"}
    assert all(item["is_read"] is False for item in updates)
    assert all(item["admin_name"] == "Ada Member" for item in updates)

    first_id = next(item["id"] for item in updates if item["title"] == "First")
    assert member_client.post(f"/api/members/site-updates/{first_id}/read", headers=headers).status_code == 200
    assert member_client.post(f"/api/members/site-updates/{first_id}/read", headers=headers).status_code == 200
    updates = member_client.get("/api/members/site-updates", headers=headers).json()
    assert {item["title"]: item["is_read"] for item in updates} == {"First": True, "Second": False}

    assert member_client.post("/api/members/site-updates/read-all", headers=headers).status_code == 200
    updates = member_client.get("/api/members/site-updates", headers=headers).json()
    assert all(item["is_read"] is True for item in updates)

    assert member_client.post("/api/members/site-updates/missing/read", headers=headers).status_code == 404


def test_member_routes_require_session(member_client: TestClient) -> None:
    member_client.cookies.clear()
    assert member_client.get("/api/members/tools").status_code == 401


def test_group_update_stamps_editor(member_client: TestClient) -> None:
    admin_id, admin_token = _register(member_client, "admin@example.com", creator=True)
    with Session(db.get_engine()) as session:
        session.add(Group(id="group-1", name="Builders"))
        session.commit()

    response = member_client.put(
        "/api/admin/groups/group-1",
        json={
            "name": "Builders Club",
            "description": "Ship weekly",
            "visibility": "request",
            "allow_member_posts": False,
            "require_post_approval": True,
            "allow_member_events": True,
            "allow_member_invites": False,
        },
        headers=_auth_header(admin_token),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Builders Club"
    assert body["visibility"] == "request"
    assert body["updated_by"] == admin_id
