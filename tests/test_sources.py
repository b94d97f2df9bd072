from __future__ import annotations

import asyncio
import json
from pathlib import Path

import httpx
import pytest

from pathassist.plugins.registry import load_source
from pathassist.sources.file import FileSource
from pathassist.sources.http import HttpSource


def test_file_source_reads_record_object_and_picklists(sample_project: Path) -> None:
    source = FileSource(sample_project, path="fixtures/org.json")

    record = asyncio.run(source.get_record("a01-progress"))
    info = asyncio.run(source.get_object_info("Plan__c"))
    picklists = asyncio.run(source.get_picklist_values("Plan__c", "012A"))

    assert record.record_type_id == "012A"
    assert record.field_value("Status__c") == "In Progress"
    assert info.default_record_type_id == "012A"
    assert info.field_label("Status__c") == "Status"
    values = picklists.picklist_field_values["Status__c"].values
    assert [value.value for value in values][:2] == ["New", "In Progress"]


def test_file_source_update_writes_back(sample_project: Path, stored_status) -> None:
    source = FileSource(sample_project, path="fixtures/org.json")

    asyncio.run(source.update_record("a01-progress", {"Status__c": "In Review"}))

    assert stored_status("a01-progress") == "In Review"


def test_file_source_unknown_record_raises(sample_project: Path) -> None:
    source = FileSource(sample_project, path="fixtures/org.json")

    with pytest.raises(LookupError, match="Record not found"):
        asyncio.run(source.get_record("missing"))


def test_file_source_serves_concurrent_loads(sample_project: Path) -> None:
    source = FileSource(sample_project, path="fixtures/org.json")

    async def load():
        return await asyncio.gather(
            source.get_record("a01-review"),
            source.get_object_info("Plan__c"),
        )

    record, info = asyncio.run(load())

    assert record.field_value("Status__c") == "In Review"
    assert info.api_name == "Plan__c"


def test_file_source_update_of_unknown_record_raises(sample_project: Path, stored_status) -> None:
    source = FileSource(sample_project, path="fixtures/org.json")

    with pytest.raises(LookupError, match="Record not found: missing"):
        asyncio.run(source.update_record("missing", {"Status__c": "New"}))

    assert stored_status("a01-progress") == "In Progress"


def test_registry_resolves_builtin_sources() -> None:
    assert load_source("file") is FileSource
    assert load_source("http") is HttpSource
    with pytest.raises(ValueError, match="Unknown source type"):
        load_source("ftp")


def _http_source(handler) -> HttpSource:
    return HttpSource(
        None,
        base_url="https://example.my.salesforce.com/",
        token="abc123",
        transport=httpx.MockTransport(handler),
    )


def test_http_source_calls_ui_api_endpoints() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/ui-api/records/a01"):
            return httpx.Response(
                200,
                json={
                    "id": "a01",
                    "recordTypeId": "012A",
                    "fields": {"Status__c": {"value": "New", "displayValue": "New"}},
                },
            )
        if request.url.path.endswith("/picklist-values/012A"):
            return httpx.Response(
                200,
                json={"picklistFieldValues": {"Status__c": {"values": [{"value": "New", "label": "New"}]}}},
            )
        return httpx.Response(200, json={"apiName": "Plan__c", "fields": {"Status__c": {"label": "Status"}}})

    source = _http_source(handler)

    record = asyncio.run(source.get_record("a01"))
    info = asyncio.run(source.get_object_info("Plan__c"))
    picklists = asyncio.run(source.get_picklist_values("Plan__c", "012A"))

    assert record.field_value("Status__c") == "New"
    assert info.field_label("Status__c") == "Status"
    assert "Status__c" in picklists.picklist_field_values
    assert [request.url.path for request in seen] == [
        "/services/data/v59.0/ui-api/records/a01",
        "/services/data/v59.0/ui-api/object-info/Plan__c",
        "/services/data/v59.0/ui-api/object-info/Plan__c/picklist-values/012A",
    ]
    assert seen[0].url.params["layoutTypes"] == "Full"
    assert seen[0].headers["Authorization"] == "Bearer abc123"


def test_http_source_patches_fields() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    asyncio.run(_http_source(handler).update_record("a01", {"Status__c": "Done"}))

    assert seen[0].method == "PATCH"
    assert json.loads(seen[0].content) == {"fields": {"Status__c": "Done"}}


def test_http_source_surfaces_platform_error_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json=[{"errorCode": "INVALID_FIELD", "message": "Bad value for Status"}])

    with pytest.raises(RuntimeError, match="Bad value for Status"):
        asyncio.run(_http_source(handler).update_record("a01", {"Status__c": "Nope"}))


def test_http_source_falls_back_to_status_when_body_is_not_json() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(RuntimeError, match="HTTP 503"):
        asyncio.run(_http_source(handler).get_object_info("Plan__c"))
