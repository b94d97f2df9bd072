from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

GENERIC_ERROR_MESSAGE = (
    "An unexpected error occurred. Please contact your System Administrator."
)


def normalize_field_name(name: str | None) -> str | None:
    """'Plan__c.Status__c' -> 'Status__c'."""
    if not name:
        return None
    return name.split(".")[-1]


class Source(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    type: str = "file"
    with_: dict[str, Any] = Field(default_factory=dict, alias="with")


class Labels(BaseModel):
    model_config = ConfigDict(extra="forbid")

    select_closed: str = "Select Closed {0}"
    mark_as_complete: str = "Mark {0} as Complete"
    mark_as_current: str = "Mark as Current {0}"
    change_closed: str = "Change Active {0}"
    generic_error_message: str = GENERIC_ERROR_MESSAGE


class PathConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    record_id: str | None = Field(default=None, alias="recordId")
    object_api_name: str = Field(default="Plan__c", alias="objectApiName")
    picklist_field: str = Field(default="Status__c", alias="picklistField")
    closed_ok: str = Field(default="Workplan Active", alias="closedOk")
    closed_ko: str | None = Field(default=None, alias="closedKo")
    last_step_label: str = Field(default="Active Workplan", alias="lastStepLabel")
    hide_update_button: bool = Field(default=False, alias="hideUpdateButton")

    @property
    def field_api_name(self) -> str | None:
        return normalize_field_name(self.picklist_field)

    @model_validator(mode="after")
    def _validate_path(self) -> "PathConfig":
        if not self.picklist_field.strip():
            raise ValueError("picklist_field must not be empty.")
        if self.closed_ko is not None and self.closed_ko == self.closed_ok:
            raise ValueError("closed_ko must differ from closed_ok.")
        return self


class Config(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str = "v1"
    path: PathConfig = Field(default_factory=PathConfig)
    labels: Labels = Field(default_factory=Labels)
    source: Source = Field(default_factory=Source)

    @model_validator(mode="after")
    def _validate_config(self) -> "Config":
        if self.version != "v1":
            raise ValueError("Only version v1 is supported.")
        return self
