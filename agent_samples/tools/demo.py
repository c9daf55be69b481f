"""Demo tools: get_weather, calculate, get_sdk_facts."""

from __future__ import annotations

import ast
import operator

from pydantic import BaseModel, Field

from agent_samples.session.models import ToolResult
from agent_samples.tools.registry import ToolDef


# ---------------------------------------------------------------------------
# get_weather — canned weather table
# ---------------------------------------------------------------------------

class WeatherInput(BaseModel):
    city: str = Field(description="The city name to get weather for")


_WEATHER: dict[str, tuple[int, str]] = {
    "seattle": (52, "Rainy"),
    "san francisco": (65, "Foggy"),
    "new york": (45, "Cloudy"),
    "austin": (78, "Sunny"),
    "london": (48, "Overcast"),
}


def _get_weather(inp: WeatherInput) -> ToolResult:
    city = inp.city.strip()
    if not city:
        return ToolResult.fail("city must not be empty")
    temp, condition = _WEATHER.get(city.lower(), (70, "Clear"))
    known = city.lower() in _WEATHER
    message = f"Weather in {city}: {temp}°F, {condition}"
    if not known:
        message += " (default data)"
    return ToolResult.ok(message, city=city, temperature_f=temp, condition=condition, known=known)


GET_WEATHER_TOOL = ToolDef(
    name="get_weather",
    description="Get current weather for a city",
    input_model=WeatherInput,
    handler=_get_weather,
)


# ---------------------------------------------------------------------------
# calculate — arithmetic only, evaluated over the AST
# ---------------------------------------------------------------------------

class CalculateInput(BaseModel):
    expression: str = Field(description="Mathematical expression to evaluate, e.g. '42 * 17'")


_BIN_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}
_UNARY_OPS = {ast.UAdd: operator.pos, ast.USub: operator.neg}


def evaluate_expression(expression: str) -> float | int:
    """Evaluate ``+ - * / // % **`` over numeric literals. Raises ValueError otherwise."""

    def _eval(node: ast.AST) -> float | int:
        if isinstance(node, ast.Expression):
            return _eval(node.body)
        if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)) \
                and not isinstance(node.value, bool):
            return node.value
        if isinstance(node, ast.BinOp) and type(node.op) in _BIN_OPS:
            left, right = _eval(node.left), _eval(node.right)
            if isinstance(node.op, ast.Pow) and abs(right) > 100:
                raise ValueError("exponent too large")
            return _BIN_OPS[type(node.op)](left, right)
        if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
            return _UNARY_OPS[type(node.op)](_eval(node.operand))
        raise ValueError(f"unsupported element: {type(node).__name__}")

    try:
        tree = ast.parse(expression.strip(), mode="eval")
    except SyntaxError as exc:
        raise ValueError(f"cannot parse '{expression}'") from exc
    return _eval(tree)


def _calculate(inp: CalculateInput) -> ToolResult:
    try:
        value = evaluate_expression(inp.expression)
    except ZeroDivisionError:
        return ToolResult.fail(f"Division by zero in '{inp.expression}'")
    except ValueError as exc:
        return ToolResult.fail(f"Cannot evaluate '{inp.expression}': {exc}")
    return ToolResult.ok(f"{inp.expression} = {value}", value=value)


CALCULATE_TOOL = ToolDef(
    name="calculate",
    description="Evaluate a simple mathematical expression",
    input_model=CalculateInput,
    handler=_calculate,
)


# ---------------------------------------------------------------------------
# get_sdk_facts — numbered trivia list
# ---------------------------------------------------------------------------

class FactsInput(BaseModel):
    count: int = Field(description="Number of facts to list")


SDK_FACTS = [
    "Python 3.11 added asyncio.TaskGroup for structured concurrency.",
    "Every sample in this project is built on one shared session driver.",
    "Tools receive arguments validated by a Pydantic model.",
    "Streaming sessions deliver text as ordered delta events.",
    "A session accepts one prompt at a time; a second send is rejected.",
    "Playwright drives Chromium, Firefox and WebKit from the same API.",
    "Pydantic v2 generates JSON Schema straight from type hints.",
    "asyncio.wait_for turns any awaitable into one with a deadline.",
]


def _get_sdk_facts(inp: FactsInput) -> ToolResult:
    if inp.count < 1:
        return ToolResult.fail("count must be at least 1")
    selected = SDK_FACTS[: min(inp.count, len(SDK_FACTS))]
    return ToolResult.ok(
        "\n".join(f"{i}. {fact}" for i, fact in enumerate(selected, start=1)),
        facts=selected,
    )


GET_SDK_FACTS_TOOL = ToolDef(
    name="get_sdk_facts",
    description="Get interesting facts about Python, asyncio and this SDK",
    input_model=FactsInput,
    handler=_get_sdk_facts,
)


DEMO_TOOLS = [GET_WEATHER_TOOL, CALCULATE_TOOL, GET_SDK_FACTS_TOOL]
