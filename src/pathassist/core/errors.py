from __future__ import annotations


class PathAssistantError(RuntimeError):
    """Base for every error the path surfaces to the user."""

    code = "path_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingClosedOkValue(PathAssistantError):
    code = "missing_closed_ok"

    def __init__(self, closed_ok: str, record_type_id: str | None):
        super().__init__(f"{closed_ok} value is not available for record type {record_type_id}")
        self.closed_ok = closed_ok
        self.record_type_id = record_type_id


class InsufficientStages(PathAssistantError):
    code = "insufficient_stages"

    def __init__(self, count: int, record_type_id: str | None):
        super().__init__(
            f"Not enough picklist values are available for record type {record_type_id}."
        )
        self.count = count
        self.record_type_id = record_type_id


class UnavailablePicklistField(PathAssistantError):
    code = "picklist_unavailable"

    def __init__(self, field_api_name: str, record_type_id: str | None):
        super().__init__(
            f'Picklist "{field_api_name}" isn’t available for record type {record_type_id}.'
        )
        self.field_api_name = field_api_name
        self.record_type_id = record_type_id


class DataLoadFailure(PathAssistantError):
    code = "load_error"

    def __init__(self, source: str, message: str):
        super().__init__(message)
        self.source = source


class UpdateFailure(PathAssistantError):
    code = "update_error"
