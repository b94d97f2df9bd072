from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


STATUS_VALUES = [
    {"value": "New", "label": "New"},
    {"value": "In Progress", "label": "In Progress"},
    {"value": "In Review", "label": "In Review"},
    {"value": "Workplan Active", "label": "Active Workplan"},
    {"value": "Cancelled", "label": "Cancelled"},
]


def org_document() -> dict:
    def record(status: str | None, record_type_id: str | None = "012A") -> dict:
        data: dict = {"fields": {"Name": {"value": "Plan"}, "Status__c": {"value": status}}}
        if record_type_id:
            data["recordTypeId"] = record_type_id
        return data

    return {
        "records": {
            "a01-progress": record("In Progress"),
            "a01-review": record("In Review"),
            "a01-active": record("Workplan Active"),
            "a01-cancelled": record("Cancelled"),
            "a01-archived": record("Archived"),
            "a01-default-rt": record("New", record_type_id=None),
            "a01-other-rt": record("New", record_type_id="012B"),
        },
        "objects": {
            "Plan__c": {
                "defaultRecordTypeId": "012A",
                "fields": {"Name": {"label": "Plan Name"}, "Status__c": {"label": "Status"}},
            }
        },
        "picklists": {
            "Plan__c": {
                "012A": {"picklistFieldValues": {"Status__c": {"values": STATUS_VALUES}}},
                "012B": {"picklistFieldValues": {"Type__c": {"values": STATUS_VALUES}}},
            }
        },
    }


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    project_dir = tmp_path / "project"
    project_dir.mkdir(parents=True)
    (project_dir / "fixtures").mkdir()

    (project_dir / "pathassist.yaml").write_text(
        """
version: v1

path:
  record_id: a01-progress
  object_api_name: Plan__c
  picklist_field: Plan__c.Status__c
  closed_ok: Workplan Active
  closed_ko: Cancelled
  last_step_label: Active Workplan

source:
  type: file
  with:
    path: fixtures/org.json
""".strip()
        + "\n",
        encoding="utf-8",
    )

    (project_dir / "fixtures" / "org.json").write_text(
        json.dumps(org_document(), indent=2) + "\n",
        encoding="utf-8",
    )

    return project_dir


@pytest.fixture
def stored_status(sample_project: Path):
    def read(record_id: str) -> str | None:
        path = sample_project / "fixtures" / "org.json"
        document = json.loads(path.read_text(encoding="utf-8"))
        return document["records"][record_id]["fields"]["Status__c"]["value"]

    return read
