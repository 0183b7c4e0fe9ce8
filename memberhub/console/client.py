from __future__ import annotations

from typing import Any

import httpx
import structlog

logger = structlog.get_logger(__name__)

TAXONOMIES_PATH = "/api/admin/taxonomies"
CONTENT_PATH = "/api/admin/content"


class ConsoleError(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        detail = body.get("error", body.get("detail"))
        if detail is not None:
            return str(detail)
    return response.text


class ConsoleClient:
    """Admin console calls against the memberhub API.

    The ``httpx.Client`` is supplied by the caller and must already carry the
    base URL and the admin's session cookies or bearer header.
    """

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._client.request(method, path, **kwargs)
        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning("console_request_failed", method=method, path=path, status=response.status_code)
            raise ConsoleError(response.status_code, message)
        if not response.content:
            return None
        return response.json()

    def list_taxonomies(self, taxonomy_type: str) -> list[dict[str, Any]]:
        return self._request("GET", TAXONOMIES_PATH, params={"type": taxonomy_type})

    def create_taxonomy(self, taxonomy_type: str, name: str, slug: str) -> dict[str, Any]:
        return self._request("POST", TAXONOMIES_PATH, json={"type": taxonomy_type, "name": name, "slug": slug})

    def update_taxonomy(self, taxonomy_id: str, name: str, slug: str) -> dict[str, Any]:
        return self._request("PUT", f"{TAXONOMIES_PATH}/{taxonomy_id}", json={"name": name, "slug": slug})

    def delete_taxonomy(self, taxonomy_id: str) -> None:
        self._request("DELETE", f"{TAXONOMIES_PATH}/{taxonomy_id}")

    def list_content(self) -> list[dict[str, Any]]:
        return self._request("GET", CONTENT_PATH)

    def set_content_status(self, content_id: str, next_status: str) -> None:
        self._request("POST", f"{CONTENT_PATH}/{content_id}/status", json={"next_status": next_status})

    def delete_content(self, content_id: str) -> None:
        self._request("DELETE", f"{CONTENT_PATH}/{content_id}")
