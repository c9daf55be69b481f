"""OpenAPI analysis tools: parse_endpoints, analyze_auth, generate_test_cases."""

from __future__ import annotations

import json

from pydantic import BaseModel, Field

from agent_samples.session.models import ToolResult
from agent_samples.tools.registry import ToolDef

MAX_ENDPOINTS = 50
HTTP_METHODS = {"get", "put", "post", "delete", "options", "head", "patch", "trace"}
BODY_METHODS = {"POST", "PUT", "PATCH"}


def parse_endpoints(spec: str) -> ToolResult:
    """List ``METHOD path`` pairs from a JSON OpenAPI/Swagger document."""
    try:
        document = json.loads(spec)
    except json.JSONDecodeError as exc:
        return ToolResult.fail(f"Spec is not valid JSON: {exc.msg} (line {exc.lineno})")
    if not isinstance(document, dict):
        return ToolResult.fail("Spec root must be a JSON object")

    endpoints: list[dict[str, str]] = []
    paths = document.get("paths")
    if not isinstance(paths, dict):
        return ToolResult.fail("Spec has no 'paths' object")
    for path, operations in paths.items():
        if not isinstance(operations, dict):
            continue
        for method, operation in operations.items():
            if method.lower() not in HTTP_METHODS:
                continue
            operation = operation if isinstance(operation, dict) else {}
            endpoints.append({
                "method": method.upper(),
                "path": path,
                "summary": operation.get("summary") or "",
                "operation_id": operation.get("operationId") or "",
            })
            if len(endpoints) >= MAX_ENDPOINTS:
                break
        if len(endpoints) >= MAX_ENDPOINTS:
            break

    lines = []
    for ep in endpoints:
        line = f"- {ep['method']} {ep['path']}"
        if ep["summary"]:
            line += f": {ep['summary']}"
        if ep["operation_id"]:
            line += f" (operationId: {ep['operation_id']})"
        lines.append(line)
    return ToolResult.ok("\n".join(lines) or "(no endpoints)", count=len(endpoints), endpoints=endpoints)


def analyze_auth(spec: str) -> ToolResult:
    auth_types: list[str] = []
    if '"security"' in spec or "securitySchemes" in spec:
        lowered = spec.lower()
        for marker, label in (
            ("bearer", "Bearer Token"),
            ("apikey", "API Key"),
            ("oauth", "OAuth2"),
            ("basic", "Basic Auth"),
        ):
            if marker in lowered:
                auth_types.append(label)
    return ToolResult.ok(
        ", ".join(auth_types) if auth_types else "(none detected)",
        authentication_types=auth_types,
    )


def generate_test_cases(method: str, path: str, test_format: str) -> ToolResult:
    method = method.upper().strip()
    if not method or not path.strip():
        return ToolResult.fail("method and path are required")
    cases = [
        f"Test {method} {path} - Success (200)",
        f"Test {method} {path} - Not Found (404)",
        f"Test {method} {path} - Unauthorized (401)",
        f"Test {method} {path} - Invalid Input (400)",
    ]
    if method in BODY_METHODS:
        cases.append(f"Test {method} {path} - Missing Required Fields")
        cases.append(f"Test {method} {path} - Invalid Data Types")
    return ToolResult.ok(
        f"{len(cases)} scenario(s) for {method} {path}",
        endpoint=f"{method} {path}",
        format=test_format,
        test_cases=cases,
    )


class _NoInput(BaseModel):
    pass


class ScenarioInput(BaseModel):
    method: str = Field(description="HTTP method (GET, POST, etc.)")
    path: str = Field(description="API endpoint path")
    test_format: str = Field(description="Test format (pytest, postman, curl)")


def make_openapi_tools(spec: str) -> list[ToolDef]:
    """Factory — binds the loaded spec text into the analysis tools."""

    def _parse(_: _NoInput) -> ToolResult:
        return parse_endpoints(spec)

    def _auth(_: _NoInput) -> ToolResult:
        return analyze_auth(spec)

    def _cases(inp: ScenarioInput) -> ToolResult:
        return generate_test_cases(inp.method, inp.path, inp.test_format)

    return [
        ToolDef(
            name="parse_endpoints",
            description="Parse endpoints from the loaded OpenAPI/Swagger specification",
            input_model=_NoInput,
            handler=_parse,
        ),
        ToolDef(
            name="analyze_auth",
            description="Analyze authentication requirements of the loaded specification",
            input_model=_NoInput,
            handler=_auth,
        ),
        ToolDef(
            name="generate_test_cases",
            description="Generate test case scenarios for an endpoint",
            input_model=ScenarioInput,
            handler=_cases,
        ),
    ]
