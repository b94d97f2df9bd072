"""Payloads returned by backends, shaped like the platform's UI API."""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class FieldValue(_Payload):
    value: Any = None
    display_value: str | None = Field(default=None, alias="displayValue")


class RecordData(_Payload):
    id: str | None = None
    record_type_id: str | None = Field(default=None, alias="recordTypeId")
    fields: dict[str, FieldValue] = Field(default_factory=dict)

    def field_value(self, name: str | None) -> Any:
        if not name:
            return None
        field = self.fields.get(name)
        return field.value if field is not None else None


class FieldInfo(_Payload):
    label: str | None = None


class ObjectInfo(_Payload):
    api_name: str | None = Field(default=None, alias="apiName")
    default_record_type_id: str | None = Field(default=None, alias="defaultRecordTypeId")
    fields: dict[str, FieldInfo] = Field(default_factory=dict)

    def field_label(self, name: str | None) -> str | None:
        if not name:
            return None
        info = self.fields.get(name)
        return info.label if info is not None else None


class PicklistValue(_Payload):
    value: str
    label: str


class PicklistField(_Payload):
    values: list[PicklistValue] = Field(default_factory=list)


class PicklistValues(_Payload):
    picklist_field_values: dict[str, PicklistField] = Field(
        default_factory=dict, alias="picklistFieldValues"
    )


class Backend(Protocol):
    async def get_record(self, record_id: str) -> RecordData: ...

    async def get_object_info(self, object_api_name: str) -> ObjectInfo: ...

    async def get_picklist_values(
        self, object_api_name: str, record_type_id: str
    ) -> PicklistValues: ...

    async def update_record(self, record_id: str, fields: dict[str, Any]) -> None: ...
