from __future__ import annotations

from typing import Any

import httpx

from .models import ObjectInfo, PicklistValues, RecordData


class HttpSource:
    def __init__(
        self,
        project_dir: object,
        *,
        base_url: str,
        api_version: str = "v59.0",
        token: str | None = None,
        headers: dict[str, str] | None = None,
        timeout_s: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        **_: Any,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.headers = dict(headers or {})
        if token:
            self.headers["Authorization"] = f"Bearer {token}"
        self.timeout = timeout_s
        self.transport = transport

    async def get_record(self, record_id: str) -> RecordData:
        data = await self._request(
            "GET",
            f"/ui-api/records/{record_id}",
            params={"layoutTypes": "Full", "modes": "View"},
        )
        return RecordData.model_validate(data)

    async def get_object_info(self, object_api_name: str) -> ObjectInfo:
        data = await self._request("GET", f"/ui-api/object-info/{object_api_name}")
        return ObjectInfo.model_validate(data)

    async def get_picklist_values(self, object_api_name: str, record_type_id: str) -> PicklistValues:
        data = await self._request(
            "GET", f"/ui-api/object-info/{object_api_name}/picklist-values/{record_type_id}"
        )
        return PicklistValues.model_validate(data)

    async def update_record(self, record_id: str, fields: dict[str, Any]) -> None:
        await self._request("PATCH", f"/ui-api/records/{record_id}", json={"fields": fields})

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}/services/data/{self.api_version}{path}"
        async with httpx.AsyncClient(
            headers=self.headers, timeout=self.timeout, transport=self.transport
        ) as client:
            response = await client.request(method, url, **kwargs)
        if response.is_error:
            raise RuntimeError(_error_message(response))
        if not response.content:
            return None
        return response.json()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, list) and body and isinstance(body[0], dict):
        body = body[0]
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return f"HTTP {response.status_code} for {response.request.method} {response.request.url.path}"
