from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from .models import ObjectInfo, PicklistValues, RecordData


class FileSource:
    """Backend over a JSON document with ``records``, ``objects`` and ``picklists``.

    ``picklists`` is keyed by object name, then record type id. Updates are
    written back to the same file. File I/O runs in a worker thread.
    """

    def __init__(self, project_dir: Path, *, path: str, **_: Any):
        self.path = Path(project_dir) / path

    async def get_record(self, record_id: str) -> RecordData:
        records = await self._section("records")
        if record_id not in records:
            raise LookupError(f"Record not found: {record_id}")
        return RecordData.model_validate({"id": record_id, **records[record_id]})

    async def get_object_info(self, object_api_name: str) -> ObjectInfo:
        objects = await self._section("objects")
        if object_api_name not in objects:
            raise LookupError(f"Object not found: {object_api_name}")
        return ObjectInfo.model_validate({"apiName": object_api_name, **objects[object_api_name]})

    async def get_picklist_values(self, object_api_name: str, record_type_id: str) -> PicklistValues:
        picklists = await self._section("picklists")
        by_record_type = picklists.get(object_api_name, {})
        if record_type_id not in by_record_type:
            raise LookupError(
                f"No picklist values for {object_api_name} and record type {record_type_id}"
            )
        return PicklistValues.model_validate(by_record_type[record_type_id])

    async def update_record(self, record_id: str, fields: dict[str, Any]) -> None:
        await asyncio.to_thread(self._write_fields, record_id, fields)

    async def _section(self, name: str) -> dict[str, Any]:
        section = (await asyncio.to_thread(self._read)).get(name, {})
        if not isinstance(section, dict):
            raise ValueError(f"{self.path}: '{name}' must be a mapping")
        return section

    def _write_fields(self, record_id: str, fields: dict[str, Any]) -> None:
        document = self._read()
        record = document.get("records", {}).get(record_id)
        if record is None:
            raise LookupError(f"Record not found: {record_id}")
        stored = record.setdefault("fields", {})
        for name, value in fields.items():
            stored[name] = {"value": value}
        self.path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")

    def _read(self) -> dict[str, Any]:
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} must contain a JSON object")
        return data
