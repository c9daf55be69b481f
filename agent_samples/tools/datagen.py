"""Test-data tools: generate_record and validate_data."""

from __future__ import annotations

import json

from pydantic import BaseModel, Field

from agent_samples.session.models import ToolResult
from agent_samples.tools.registry import ToolDef


class RecordFieldInput(BaseModel):
    field_name: str = Field(description="Field name")
    data_type: str = Field(description="Data type (string, int, email, phone, date, etc.)")
    index: int = Field(description="Record index, used for variety")


def _generate_record(inp: RecordFieldInput) -> ToolResult:
    # Only echoes the request back; the model generates the actual value
    return ToolResult.ok(
        f"{inp.field_name}:{inp.data_type} #{inp.index}",
        field=inp.field_name,
        type=inp.data_type,
        index=inp.index,
    )


class ValidateDataInput(BaseModel):
    json_data: str = Field(description="JSON array of generated records to validate")


def validate_data(json_data: str) -> ToolResult:
    try:
        parsed = json.loads(json_data)
    except json.JSONDecodeError as exc:
        return ToolResult.fail(f"Invalid JSON: {exc.msg} (line {exc.lineno})", valid=False)
    if not isinstance(parsed, list):
        return ToolResult.fail("Expected a JSON array of records", valid=False)
    return ToolResult.ok(f"{len(parsed)} record(s)", valid=True, record_count=len(parsed))


GENERATE_RECORD_TOOL = ToolDef(
    name="generate_record",
    description="Describe a single data record field to generate",
    input_model=RecordFieldInput,
    handler=_generate_record,
)

VALIDATE_DATA_TOOL = ToolDef(
    name="validate_data",
    description="Validate generated test data",
    input_model=ValidateDataInput,
    handler=lambda inp: validate_data(inp.json_data),
)

DATAGEN_TOOLS = [GENERATE_RECORD_TOOL, VALIDATE_DATA_TOOL]
