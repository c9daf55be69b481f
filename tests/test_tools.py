"""Tests for the built-in tool sets: demo, logs, openapi, datagen, browser."""

from __future__ import annotations

import json

import pytest

from agent_samples.tools.browser import BrowserToolContext
from agent_samples.tools.datagen import DATAGEN_TOOLS, validate_data
from agent_samples.tools.demo import DEMO_TOOLS, evaluate_expression
from agent_samples.tools.logs import (
    count_pattern,
    extract_errors,
    find_slow_operations,
    get_time_range,
    make_log_tools,
    sample_log,
)
from agent_samples.tools.openapi import (
    analyze_auth,
    generate_test_cases,
    make_openapi_tools,
    parse_endpoints,
)
from agent_samples.tools.registry import ToolRegistry

SAMPLE_LOG = """\
2024-05-01 10:00:00 INFO service started
2024-05-01 10:00:05 ERROR database connection refused
2024-05-01 10:00:06 WARN slow query took 2500ms
2024-05-01 10:00:07 INFO request handled in 12ms
2024-05-01 10:00:09 FATAL Exception in worker thread
2024-05-01 10:01:00 INFO request timeout after 30 seconds
"""

PETSTORE = json.dumps({
    "openapi": "3.0.0",
    "paths": {
        "/pets": {
            "get": {"summary": "List pets", "operationId": "listPets"},
            "post": {"summary": "Create a pet"},
            "parameters": [],
        },
        "/pets/{id}": {"delete": {}},
    },
    "components": {"securitySchemes": {"bearerAuth": {"type": "http", "scheme": "bearer"}}},
    "security": [{"bearerAuth": []}],
})


@pytest.fixture
def demo_registry():
    return ToolRegistry(DEMO_TOOLS)


class TestDemoTools:
    async def test_known_city(self, demo_registry):
        result = await demo_registry.invoke("get_weather", {"city": "Seattle"})
        assert result.success
        assert result.message == "Weather in Seattle: 52°F, Rainy"

    async def test_unknown_city_uses_default(self, demo_registry):
        result = await demo_registry.invoke("get_weather", {"city": "Tokyo"})
        assert result.data["temperature_f"] == 70
        assert result.message.endswith("(default data)")

    async def test_blank_city(self, demo_registry):
        result = await demo_registry.invoke("get_weather", {"city": "  "})
        assert result.success is False

    async def test_calculate(self, demo_registry):
        result = await demo_registry.invoke("calculate", {"expression": "42 * 17"})
        assert result.data["value"] == 714
        assert result.message == "42 * 17 = 714"

    @pytest.mark.parametrize("expression", ["1/0", "__import__('os')", "2 +", "'a' * 3"])
    async def test_calculate_bad_input_fails_softly(self, demo_registry, expression):
        result = await demo_registry.invoke("calculate", {"expression": expression})
        assert result.success is False

    def test_evaluator_rejects_names(self):
        with pytest.raises(ValueError):
            evaluate_expression("x + 1")
        assert evaluate_expression("-(2 ** 3) + 10 // 3") == -5

    async def test_sdk_facts(self, demo_registry):
        result = await demo_registry.invoke("get_sdk_facts", {"count": 3})
        assert result.message.splitlines()[0].startswith("1. ")
        assert len(result.data["facts"]) == 3

        assert (await demo_registry.invoke("get_sdk_facts", {"count": 0})).success is False
        assert (await demo_registry.invoke("get_sdk_facts", {"count": "many"})).success is False


class TestLogTools:
    def test_extract_errors(self):
        result = extract_errors(SAMPLE_LOG)
        assert result.data["error_count"] == 2
        assert "database connection refused" in result.data["errors"][0]

    def test_count_pattern_is_case_insensitive(self):
        result = count_pattern(SAMPLE_LOG, "info")
        assert result.data["count"] == 3
        assert len(result.data["examples"]) == 3
        assert count_pattern(SAMPLE_LOG, "").success is False

    def test_time_range(self):
        result = get_time_range(SAMPLE_LOG)
        assert result.data["total_lines"] == 6
        assert result.data["first_entry"].startswith("2024-05-01 10:00:00")
        assert result.data["last_entry"].startswith("2024-05-01 10:01:00")

    def test_time_range_empty_log(self):
        result = get_time_range("")
        assert result.success and result.data["total_lines"] == 0

    def test_slow_operations(self):
        slow = find_slow_operations(SAMPLE_LOG).data["slow_operations"]
        assert len(slow) == 2
        assert "2500ms" in slow[0]
        assert "timeout" in slow[1]

    def test_sample_log_keeps_small_logs(self):
        assert sample_log(SAMPLE_LOG) == SAMPLE_LOG

    def test_sample_log_trims_large_logs(self):
        big = "\n".join(f"line {i} " + "x" * 100 for i in range(2000))
        sampled = sample_log(big)
        assert len(sampled) < len(big)
        assert "middle section omitted" in sampled
        assert sampled.startswith("line 0 ")
        assert sampled.rstrip().endswith("x")

    async def test_bound_tools(self):
        registry = ToolRegistry(make_log_tools(SAMPLE_LOG))
        assert registry.names == ["extract_errors", "count_pattern", "get_time_range", "find_slow_operations"]
        result = await registry.invoke("count_pattern", {"pattern": "ERROR"})
        assert result.data["count"] == 1


class TestOpenAPITools:
    def test_parse_endpoints(self):
        result = parse_endpoints(PETSTORE)
        assert result.data["count"] == 3
        assert "- GET /pets: List pets (operationId: listPets)" in result.message
        assert "- DELETE /pets/{id}" in result.message

    @pytest.mark.parametrize("spec", ["not json", "[1, 2]", '{"openapi": "3.0.0"}', '{"paths": []}'])
    def test_parse_endpoints_bad_spec(self, spec):
        assert parse_endpoints(spec).success is False

    def test_parse_endpoints_is_capped(self):
        spec = json.dumps({"paths": {f"/r{i}": {"get": {}} for i in range(80)}})
        assert parse_endpoints(spec).data["count"] == 50

    def test_analyze_auth(self):
        assert analyze_auth(PETSTORE).data["authentication_types"] == ["Bearer Token"]
        assert analyze_auth('{"paths": {}}').data["authentication_types"] == []

    def test_generate_test_cases(self):
        get_cases = generate_test_cases("get", "/pets", "pytest").data["test_cases"]
        post_cases = generate_test_cases("POST", "/pets", "pytest").data["test_cases"]
        assert len(get_cases) == 4
        assert len(post_cases) == 6
        assert get_cases[0] == "Test GET /pets - Success (200)"
        assert generate_test_cases("", "/pets", "curl").success is False

    async def test_bound_tools(self):
        registry = ToolRegistry(make_openapi_tools(PETSTORE))
        result = await registry.invoke("parse_endpoints", {})
        assert result.data["count"] == 3
        result = await registry.invoke("generate_test_cases", {"method": "PUT", "path": "/pets/1"})
        assert result.success is False  # test_format missing


class TestDatagenTools:
    def test_validate_data(self):
        assert validate_data('[{"id": 1}, {"id": 2}]').data == {"valid": True, "record_count": 2}
        assert validate_data('{"id": 1}').success is False
        assert validate_data("[{").data["valid"] is False

    async def test_generate_record(self):
        registry = ToolRegistry(DATAGEN_TOOLS)
        result = await registry.invoke("generate_record", {"field_name": "email", "data_type": "email", "index": 4})
        assert result.success
        assert result.data["field"] == "email"

        result = await registry.invoke("validate_data", {"json_data": "[]"})
        assert result.data["record_count"] == 0


class TestBrowserTools:
    @pytest.fixture
    def browser(self, fake_page, tmp_path):
        context = BrowserToolContext(fake_page, content_limit=20, screenshot_dir=tmp_path)
        return ToolRegistry(context.tools())

    async def test_navigate_and_read(self, browser, fake_page):
        result = await browser.invoke("navigate", {"url": "https://example.com"})
        assert result.success
        assert result.data["title"] == "Example Domain"
        assert ("wait", "networkidle") in fake_page.actions

        content = await browser.invoke("get_page_content", {})
        assert content.data["truncated"] is True
        assert content.message == "Example Domain\nMore ... (truncated)"

    async def test_navigate_failure(self, browser):
        result = await browser.invoke("navigate", {"url": "not-a-url"})
        assert result.success is False
        assert "invalid URL" in result.message

    async def test_click_css_and_text(self, browser, fake_page):
        assert (await browser.invoke("click_element", {"selector": "#search"})).success
        assert (await browser.invoke("click_element", {"selector": "More information"})).success
        assert ("click", "#search") in fake_page.actions
        assert ("click_text", "More information") in fake_page.actions

    @pytest.mark.parametrize("selector", ["", "   ", "#missing", "Nonexistent text"])
    async def test_click_failures_are_results(self, browser, selector):
        result = await browser.invoke("click_element", {"selector": selector})
        assert result.success is False
        assert result.message

    async def test_fill_form(self, browser, fake_page):
        result = await browser.invoke("fill_form", {"selector": "form > input", "value": "pydantic"})
        assert result.success
        assert ("fill", "form > input", "pydantic") in fake_page.actions
        assert (await browser.invoke("fill_form", {"selector": "#nope", "value": "x"})).success is False

    async def test_screenshot_stays_in_directory(self, browser, tmp_path):
        result = await browser.invoke("screenshot", {"filename": "../../etc/shot.png"})
        assert result.success
        assert (tmp_path / "shot.png").exists()
