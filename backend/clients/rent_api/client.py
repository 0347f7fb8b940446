from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from backend.core.config import settings
from backend.core.logging import get_logger

from .dto import ApiResponse, SendDocumentRequest

TRANSPORT_FAILURE = 0


class RentApiError(RuntimeError):
    """Raised when a request cannot even be built (bad arguments)."""


class RentApiClient:
    """Async HTTP client for the rent management REST backend.

    Every call answers an :class:`ApiResponse`; non-2xx statuses and network
    failures are reported through ``status_code`` rather than raised, so the
    calling handler decides which message to show.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        organization_id: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        documents_path: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.RENT_API_BASE_URL).rstrip("/")
        self.organization_id = organization_id
        self.timeout = float(timeout if timeout is not None else settings.RENT_API_TIMEOUT_S)
        self.documents_path = "/" + (documents_path or settings.RENT_API_DOCUMENTS_PATH).strip("/")
        self.logger = get_logger(__name__)

        headers = {"Accept": "application/json"}
        bearer = token if token is not None else settings.RENT_API_TOKEN
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        if organization_id:
            headers["organizationId"] = organization_id

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> RentApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # Rents

    async def fetch_rents(self, year: int, month: int) -> ApiResponse:
        if not 1 <= int(month) <= 12:
            raise RentApiError("month must be between 1 and 12")
        return await self._request("GET", f"/rents/{int(year)}/{int(month)}")

    async def send_document(self, request: SendDocumentRequest) -> ApiResponse:
        return await self._request("POST", "/emails", json=request.to_json())

    # Leases

    async def fetch_leases(self) -> ApiResponse:
        return await self._request("GET", "/leases")

    async def fetch_lease(self, lease_id: str) -> ApiResponse:
        return await self._request("GET", f"/leases/{self._path_id(lease_id)}")

    async def create_lease(self, lease: Mapping[str, Any]) -> ApiResponse:
        return await self._request("POST", "/leases", json=dict(lease))

    async def update_lease(self, lease: Mapping[str, Any]) -> ApiResponse:
        lease_id = lease.get("_id")
        if not lease_id:
            raise RentApiError("cannot update a lease without _id")
        return await self._request("PATCH", f"/leases/{self._path_id(lease_id)}", json=dict(lease))

    async def delete_lease(self, ids: Iterable[str]) -> ApiResponse:
        id_list = [self._path_id(lease_id) for lease_id in ids]
        if not id_list:
            raise RentApiError("at least one lease id is required")
        return await self._request("DELETE", f"/leases/{','.join(id_list)}")

    # Tenants

    async def fetch_tenants(self) -> ApiResponse:
        return await self._request("GET", "/tenants")

    async def create_tenant(self, tenant: Mapping[str, Any]) -> ApiResponse:
        return await self._request("POST", "/tenants", json=dict(tenant))

    # Dashboard & documents

    async def fetch_dashboard(self) -> ApiResponse:
        return await self._request("GET", "/dashboard")

    async def download_document(self, url: str) -> ApiResponse:
        path = f"{self.documents_path}/{url.lstrip('/')}"
        return await self._request("GET", path, raw=True)

    def _path_id(self, value: Any) -> str:
        text = str(value).strip()
        if not text or "/" in text or "," in text:
            raise RentApiError(f"invalid id: {value!r}")
        return text

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        raw: bool = False,
    ) -> ApiResponse:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.RequestError as exc:
            self.logger.warning(
                "Rent API request failed",
                extra={"method": method, "path": path, "error": str(exc)},
            )
            return ApiResponse(status_code=TRANSPORT_FAILURE, error=str(exc) or type(exc).__name__)

        status_code = response.status_code
        if status_code >= 400:
            self.logger.info(
                "Rent API answered with an error status",
                extra={"method": method, "path": path, "status_code": status_code},
            )
            return ApiResponse(status_code=status_code, data=self._safe_json(response), error=response.text or None)

        if raw:
            return ApiResponse(status_code=status_code, data=response.content)

        if not response.content:
            return ApiResponse(status_code=status_code, data=None)

        try:
            return ApiResponse(status_code=status_code, data=response.json())
        except ValueError:
            self.logger.warning(
                "Rent API returned an invalid JSON body",
                extra={"method": method, "path": path, "status_code": status_code},
            )
            return ApiResponse(status_code=TRANSPORT_FAILURE, error="invalid JSON response")

    def _safe_json(self, response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None
