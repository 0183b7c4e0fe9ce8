from __future__ import annotations

import asyncio
import os
import time
from uuid import uuid4

import httpx


def _assert_status(response: httpx.Response, expected: int | tuple[int, ...]) -> None:
    expected_codes = (expected,) if isinstance(expected, int) else expected
    if response.status_code not in expected_codes:
        raise RuntimeError(
            f"{response.request.method} {response.request.url} expected {expected_codes}, "
            f"got {response.status_code}: {response.text}"
        )


def _auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def _wait_ok(client: httpx.AsyncClient, path: str, timeout_seconds: float = 60.0) -> None:
    deadline = time.monotonic() + timeout_seconds
    last_status = "n/a"
    last_body = ""
    while time.monotonic() < deadline:
        try:
            response = await client.get(path)
            if response.status_code == 200:
                return
            last_status = str(response.status_code)
            last_body = response.text
        except httpx.HTTPError as exc:
            last_status = "http_error"
            last_body = str(exc)
        await asyncio.sleep(1.0)
    raise RuntimeError(f"timeout waiting for {path}, last_status={last_status}, detail={last_body}")


async def _run() -> None:
    base_url = os.getenv("APP_BASE_URL", "http://app:8000").rstrip("/")
    run_id = uuid4().hex[:8]
    email = f"smoke-{run_id}@example.com"
    password = f"pass-{run_id}-smoke"

    timeout = httpx.Timeout(20.0)
    async with httpx.AsyncClient(base_url=base_url, timeout=timeout) as client:
        await _wait_ok(client, "/healthz")
        await _wait_ok(client, "/readyz")

        sign_up_resp = await client.post(
            "/api/auth/sign-up",
            json={"email": email, "password": password, "first_name": "Smoke", "last_name": run_id},
        )
        _assert_status(sign_up_resp, 201)
        user_id = sign_up_resp.json()["id"]

        sign_in_resp = await client.post("/api/auth/sign-in", json={"email": email, "password": password})
        _assert_status(sign_in_resp, 200)
        access_token = sign_in_resp.json()["access_token"]

        me_resp = await client.get("/api/auth/me", headers=_auth_headers(access_token))
        _assert_status(me_resp, 200)
        if me_resp.json().get("id") != user_id:
            raise RuntimeError("session user does not match the signed-up account")

        shell_resp = await client.get("/api/members/shell", headers=_auth_headers(access_token))
        _assert_status(shell_resp, 200)
        if not shell_resp.json().get("member_navigation"):
            raise RuntimeError("member shell returned no navigation")

        permissions_resp = await client.get("/api/members/permissions", headers=_auth_headers(access_token))
        _assert_status(permissions_resp, 200)

        admin_resp = await client.get("/api/admin/taxonomies?type=category", headers=_auth_headers(access_token))
        _assert_status(admin_resp, 403)

        public_resp = await client.get("/api/public/sales-page")
        _assert_status(public_resp, 200)

        sign_out_resp = await client.post("/api/auth/sign-out")
        _assert_status(sign_out_resp, 200)

    print("verify_smoke: healthz/readyz + sign-up/sign-in + member shell + admin guard + public page ok")


def main() -> None:
    asyncio.run(_run())


if __name__ == "__main__":
    main()
