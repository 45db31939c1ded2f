"""
HTTP client for the hosted store (Supabase).

Rows go through the PostgREST API (``/rest/v1/<table>``) and files through the
Storage API (``/storage/v1/object/<bucket>/<path>``). Every failure is turned
into an ``UpstreamError`` carrying the upstream message, the same way the
service wrappers convert httpx errors.
"""
from __future__ import annotations

import typing as t
from urllib.parse import quote

import httpx

from . import config
from .errors import UpstreamError


CATALOG_SELECT = "*,lectures(*),sections(*)"


def _error_message(response: httpx.Response) -> str:
    """Pull the human-readable message out of a PostgREST or Storage error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body.get("msg") or body)
    return str(body)


class SupabaseClient:
    """Thin async client over the row and blob endpoints the catalog needs."""

    def __init__(
        self,
        url: str = config.SUPABASE_URL,
        key: str = config.SUPABASE_ANON_KEY,
        bucket: str = config.CATALOG_BUCKET,
        timeout: float = config.CATALOG_HTTP_TIMEOUT,
        transport: t.Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url.rstrip("/")
        self.bucket = bucket
        self.timeout = timeout
        self._http = httpx.AsyncClient(
            base_url=self.url,
            headers={"apikey": key, "Authorization": f"Bearer {key}"},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "SupabaseClient":
        return self

    async def __aexit__(self, *exc_info: t.Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, operation: str, method: str, url: str, **kwargs: t.Any) -> httpx.Response:
        try:
            response = await self._http.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.TimeoutException:
            msg = f"{operation} timed out after {self.timeout} seconds"
            raise UpstreamError(msg, operation=operation, upstream_message=msg)
        except httpx.HTTPStatusError as e:
            msg = _error_message(e.response)
            raise UpstreamError(msg, operation=operation, upstream_message=msg, status_code=e.response.status_code)
        except httpx.HTTPError as e:
            msg = f"Error calling {self.url}: {e}"
            raise UpstreamError(msg, operation=operation, upstream_message=msg)

    @staticmethod
    def _json(operation: str, response: httpx.Response) -> t.Any:
        try:
            return response.json()
        except ValueError as e:
            msg = f"{operation} returned an unreadable response body: {e}"
            raise UpstreamError(msg, operation=operation, upstream_message=msg, status_code=response.status_code)

    # -----------------------------
    # Rows (PostgREST)
    # -----------------------------

    async def select_catalog(self) -> list[dict[str, t.Any]]:
        """All courses, each embedding its ``lectures`` and ``sections`` rows."""
        response = await self._request(
            "select catalog", "GET", "/rest/v1/courses", params={"select": CATALOG_SELECT}
        )
        return self._json("select catalog", response)

    async def delete_all(self, table: str) -> None:
        """Unconditionally deletes every row of ``table`` (``id`` never equals the nil uuid)."""
        await self._request(
            f"delete {table}", "DELETE", f"/rest/v1/{table}", params={"id": f"neq.{config.NIL_UUID}"}
        )

    async def insert(self, table: str, rows: list[dict[str, t.Any]]) -> list[dict[str, t.Any]]:
        """Inserts rows and returns them as stored, generated ids included."""
        if not rows:
            return []
        response = await self._request(
            f"insert {table}",
            "POST",
            f"/rest/v1/{table}",
            json=rows,
            headers={"Prefer": "return=representation"},
        )
        return self._json(f"insert {table}", response)

    async def update(self, table: str, row_id: str, values: dict[str, t.Any]) -> None:
        await self._request(
            f"update {table}",
            "PATCH",
            f"/rest/v1/{table}",
            params={"id": f"eq.{row_id}"},
            json=values,
            headers={"Prefer": "return=minimal"},
        )

    # -----------------------------
    # Blobs (Storage)
    # -----------------------------

    def _object_url(self, path: str) -> str:
        return f"/storage/v1/object/{self.bucket}/{quote(path, safe='/')}"

    async def upload(self, path: str, content: bytes, content_type: str, upsert: bool = True) -> None:
        """Stores ``content`` at ``path``; with ``upsert`` an existing blob is overwritten."""
        await self._request(
            "upload file",
            "POST",
            self._object_url(path),
            content=content,
            headers={
                "Content-Type": content_type or "application/octet-stream",
                "cache-control": f"max-age={config.UPLOAD_CACHE_CONTROL}",
                "x-upsert": "true" if upsert else "false",
            },
        )

    def public_url(self, path: str) -> str:
        return f"{self.url}/storage/v1/object/public/{self.bucket}/{quote(path, safe='/')}"

    async def remove(self, paths: list[str]) -> None:
        await self._request(
            "remove file", "DELETE", f"/storage/v1/object/{self.bucket}", json={"prefixes": paths}
        )
