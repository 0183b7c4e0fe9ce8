from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlmodel import Session, SQLModel, create_engine, select

from memberhub import main as app_main
from memberhub.domain.models import Plan, Profile, Tool, ToolPlanAccess
from memberhub.infra import db


@pytest.fixture()
def tool_client(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> Generator[TestClient, None, None]:
    db_path = tmp_path / "tool_test.db"
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


def _register(client: TestClient, email: str, *, creator: bool = False, plan_id: str | None = None) -> str:
    response = client.post(
        "/api/auth/sign-up",
        json={"email": email, "password": "password-123", "first_name": "Tia", "last_name": "Tools"},
    )
    user_id = response.json()["id"]
    with Session(db.get_engine()) as session:
        profile = session.get(Profile, user_id)
        assert profile is not None
        profile.is_creator = creator
        profile.plan_id = plan_id
        session.add(profile)
        session.commit()
    return client.post(
        "/api/auth/sign-in",
        json={"email": email, "password": "password-123"},
    ).json()["access_token"]


def _seed_plans() -> None:
    with Session(db.get_engine()) as session:
        session.add(Plan(id="basic", name="Basic", slug="basic"))
        session.add(Plan(id="premium", name="Premium", slug="premium"))
        session.commit()


def test_admin_tool_crud_with_plan_access(tool_client: TestClient) -> None:
    _seed_plans()
    headers = _auth_header(_register(tool_client, "admin@example.com", creator=True))

    created = tool_client.post(
        "/api/admin/tools",
        json={
            "name": "Content Planner",
            "short_description": "Plan posts",
            "launch_url": "https://tools.example.test/planner",
            "plan_ids": ["premium", "basic", "premium"],
        },
        headers=headers,
    )
    assert created.status_code == 201
    tool = created.json()
    assert tool["slug"] == "content-planner"
    assert tool["is_active"] is True
    assert tool["plan_ids"] == ["basic", "premium"]

    updated = tool_client.put(
        f"/api/admin/tools/{tool['id']}",
        json={"name": "Post Planner", "is_active": False, "plan_ids": ["premium"]},
        headers=headers,
    )
    assert updated.status_code == 200
    assert updated.json()["slug"] == "post-planner"
    assert updated.json()["short_description"] is None

    listed = tool_client.get("/api/admin/tools", headers=headers).json()
    assert [(item["name"], item["is_active"], item["plan_ids"]) for item in listed] == [
        ("Post Planner", False, ["premium"])
    ]

    deleted = tool_client.delete(f"/api/admin/tools/{tool['id']}", headers=headers)
    assert deleted.json() == {"success": True, "error": None}
    with Session(db.get_engine()) as session:
        assert session.exec(select(Tool)).all() == []
        assert session.exec(select(ToolPlanAccess)).all() == []


def test_unknown_plan_and_missing_tool_are_rejected(tool_client: TestClient) -> None:
    _seed_plans()
    headers = _auth_header(_register(tool_client, "admin@example.com", creator=True))

    unknown = tool_client.post(
        "/api/admin/tools",
        json={"name": "Orphan", "plan_ids": ["basic", "ghost"]},
        headers=headers,
    )
    assert unknown.status_code == 400
    assert unknown.json() == {"success": False, "error": "Unknown plan ids: ghost"}
    with Session(db.get_engine()) as session:
        assert session.exec(select(Tool)).all() == []

    missing = tool_client.put("/api/admin/tools/nope", json={"name": "X"}, headers=headers)
    assert missing.status_code == 404
    assert tool_client.delete("/api/admin/tools/nope", headers=headers).status_code == 404


def test_plan_access_written_by_admin_gates_member_tools(tool_client: TestClient) -> None:
    _seed_plans()
    admin_headers = _auth_header(_register(tool_client, "admin@example.com", creator=True))
    member_headers = _auth_header(_register(tool_client, "member@example.com", plan_id="basic"))

    tool_id = tool_client.post(
        "/api/admin/tools",
        json={"name": "Analytics", "plan_ids": ["premium"]},
        headers=admin_headers,
    ).json()["id"]
    before = tool_client.get("/api/members/tools", headers=member_headers).json()
    assert [(item["id"], item["is_available"]) for item in before] == [(tool_id, False)]

    tool_client.put(
        f"/api/admin/tools/{tool_id}",
        json={"name": "Analytics", "plan_ids": ["basic", "premium"]},
        headers=admin_headers,
    )
    after = tool_client.get("/api/members/tools", headers=member_headers).json()
    assert [(item["id"], item["is_available"]) for item in after] == [(tool_id, True)]


def test_tool_admin_requires_creator(tool_client: TestClient) -> None:
    headers = _auth_header(_register(tool_client, "member@example.com"))
    response = tool_client.post("/api/admin/tools", json={"name": "Nope"}, headers=headers)
    assert response.status_code == 403
    assert tool_client.get("/api/admin/tools", headers=headers).status_code == 403
