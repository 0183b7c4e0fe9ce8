from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlmodel import Session, SQLModel, create_engine

from memberhub import main as app_main
from memberhub.console.client import ConsoleClient
from memberhub.console.taxonomy import NAME_REQUIRED, SLUG_INVALID, SLUG_REQUIRED, TaxonomyForm
from memberhub.domain.models import Profile
from memberhub.infra import db


@pytest.fixture()
def taxonomy_client(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> Generator[TestClient, None, None]:
    db_path = tmp_path / "taxonomy_test.db"
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


def _login_user(client: TestClient, email: str, *, creator: bool) -> str:
    password = "password-123"
    response = client.post(
        "/api/auth/sign-up",
        json={"email": email, "password": password, "first_name": "Tess", "last_name": "Admin"},
    )
    assert response.status_code == 201
    if creator:
        with Session(db.get_engine()) as session:
            profile = session.get(Profile, response.json()["id"])
            assert profile is not None
            profile.is_creator = True
            session.add(profile)
            session.commit()
    response = client.post("/api/auth/sign-in", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()["access_token"]


def _console(client: TestClient) -> ConsoleClient:
    token = _login_user(client, "admin@example.com", creator=True)
    client.headers.update(_auth_header(token))
    return ConsoleClient(client)


def test_taxonomy_form_business_gets_business_slug(taxonomy_client: TestClient) -> None:
    console = _console(taxonomy_client)
    form = TaxonomyForm(taxonomy_type="category")
    form.set_name("Business")
    assert form.slug == "business"

    created = form.submit(console)

    assert created is not None
    assert created["slug"] == "business"
    assert created["name"] == "Business"
    listed = console.list_taxonomies("category")
    assert [item["slug"] for item in listed] == ["business"]


def test_taxonomy_slug_stops_following_name_after_manual_edit() -> None:
    form = TaxonomyForm(taxonomy_type="content_tag")
    form.set_name("Growth Hacks")
    assert form.slug == "growth-hacks"
    form.set_slug("growth")
    form.set_name("Growth Hacks 2024")
    assert form.slug == "growth"


def test_invalid_form_never_calls_api() -> None:
    def _unexpected(request: httpx.Request) -> httpx.Response:
        pytest.fail(f"unexpected request {request.method} {request.url}")

    console = ConsoleClient(httpx.Client(transport=httpx.MockTransport(_unexpected), base_url="http://test"))

    form = TaxonomyForm(taxonomy_type="category")
    form.set_name("   ")
    assert form.submit(console) is None
    assert form.errors == {"name": NAME_REQUIRED, "slug": SLUG_REQUIRED}

    form.set_name("My Group")
    form.set_slug("My Group")
    assert form.submit(console) is None
    assert form.errors == {"slug": SLUG_INVALID}


def test_duplicate_slug_within_type_is_accepted(taxonomy_client: TestClient) -> None:
    console = _console(taxonomy_client)
    for _ in range(2):
        form = TaxonomyForm(taxonomy_type="expert_tag")
        form.set_name("Coaching")
        assert form.submit(console) is not None

    listed = console.list_taxonomies("expert_tag")
    assert [item["slug"] for item in listed] == ["coaching", "coaching"]
    assert console.list_taxonomies("category") == []


def test_taxonomy_update_and_delete(taxonomy_client: TestClient) -> None:
    console = _console(taxonomy_client)
    created = console.create_taxonomy("category", "  Finance ", " finance ")
    assert created["name"] == "Finance"
    assert created["slug"] == "finance"

    form = TaxonomyForm.for_existing("category", created)
    assert form.is_edit
    form.set_name("Personal Finance")
    assert form.slug == "finance"
    updated = form.submit(console)
    assert updated is not None
    assert updated["name"] == "Personal Finance"

    console.delete_taxonomy(created["id"])
    assert console.list_taxonomies("category") == []

    missing = taxonomy_client.delete(f"/api/admin/taxonomies/{created['id']}")
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "error": "taxonomy not found"}


def test_taxonomies_sorted_by_name(taxonomy_client: TestClient) -> None:
    console = _console(taxonomy_client)
    for name in ("Zeta", "alpha", "Mid"):
        console.create_taxonomy("category", name, name.lower())
    names = [item["name"] for item in console.list_taxonomies("category")]
    assert names == sorted(names)


def test_taxonomy_admin_routes_require_creator(taxonomy_client: TestClient) -> None:
    token = _login_user(taxonomy_client, "member@example.com", creator=False)
    response = taxonomy_client.get(
        "/api/admin/taxonomies",
        params={"type": "category"},
        headers=_auth_header(token),
    )
    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Not authorized"}
