"""Browser automation tools over one shared Playwright page."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from pathlib import Path
from typing import Any, AsyncIterator

from pydantic import BaseModel, Field

from agent_samples.session.models import ToolResult
from agent_samples.tools.registry import ToolDef

logger = logging.getLogger(__name__)

CONTENT_LIMIT = 2000
NETWORK_IDLE = "networkidle"


@contextlib.asynccontextmanager
async def open_page(headless: bool = True) -> AsyncIterator[Any]:
    """Launch Chromium once and yield a fresh page; always closes the browser."""
    # Late import so the rest of the package works without playwright installed
    from playwright.async_api import async_playwright

    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=headless)
        try:
            page = await browser.new_page()
            yield page
        finally:
            await browser.close()


def _looks_like_css(selector: str) -> bool:
    return selector.startswith(("#", ".", "[")) or ">" in selector


class NavigateInput(BaseModel):
    url: str = Field(description="URL to navigate to")


class ClickInput(BaseModel):
    selector: str = Field(description="CSS selector or visible text to click")


class FillInput(BaseModel):
    selector: str = Field(description="CSS selector of the input field")
    value: str = Field(description="Value to type")


class ScreenshotInput(BaseModel):
    filename: str = Field(description="Filename for the screenshot (PNG)")


class _NoInput(BaseModel):
    pass


class BrowserToolContext:
    """Owns the page handle the browser tools share.

    Every tool holds ``_lock`` around its page operations.
    """

    def __init__(
        self,
        page: Any,
        *,
        content_limit: int = CONTENT_LIMIT,
        screenshot_dir: str | Path | None = None,
    ) -> None:
        self.page = page
        self.content_limit = content_limit
        self.screenshot_dir = Path(screenshot_dir) if screenshot_dir else Path.cwd()
        self._lock = asyncio.Lock()

    async def navigate(self, inp: NavigateInput) -> ToolResult:
        async with self._lock:
            try:
                await self.page.goto(inp.url)
                await self.page.wait_for_load_state(NETWORK_IDLE)
                title = await self.page.title()
            except Exception as exc:
                return ToolResult.fail(str(exc), url=inp.url)
            return ToolResult.ok(f"Opened {self.page.url}", url=self.page.url, title=title)

    async def get_page_content(self, _: _NoInput) -> ToolResult:
        async with self._lock:
            try:
                title = await self.page.title()
                text = await self.page.evaluate("() => document.body.innerText") or ""
            except Exception as exc:
                return ToolResult.fail(str(exc))
        truncated = len(text) > self.content_limit
        if truncated:
            text = text[: self.content_limit] + "... (truncated)"
        return ToolResult.ok(text, title=title, url=self.page.url, truncated=truncated)

    async def click_element(self, inp: ClickInput) -> ToolResult:
        async with self._lock:
            try:
                selector = inp.selector.strip()
                if not selector:
                    raise ValueError("selector must not be empty")
                if _looks_like_css(selector):
                    await self.page.click(selector)
                else:
                    await self.page.get_by_text(selector).first.click()
                await self.page.wait_for_load_state(NETWORK_IDLE)
            except Exception as exc:
                logger.info("click_element(%r) failed: %s", inp.selector, exc)
                return ToolResult.fail(str(exc) or type(exc).__name__, selector=inp.selector)
        return ToolResult.ok("Clicked successfully", selector=selector)

    async def fill_form(self, inp: FillInput) -> ToolResult:
        async with self._lock:
            try:
                if not inp.selector.strip():
                    raise ValueError("selector must not be empty")
                await self.page.fill(inp.selector, inp.value)
            except Exception as exc:
                return ToolResult.fail(str(exc) or type(exc).__name__, selector=inp.selector)
        return ToolResult.ok(f"Filled '{inp.selector}' with '{inp.value}'", selector=inp.selector)

    async def screenshot(self, inp: ScreenshotInput) -> ToolResult:
        # Only the final path component is honoured; screenshots stay in screenshot_dir
        name = Path(inp.filename).name or "screenshot.png"
        path = self.screenshot_dir / name
        async with self._lock:
            try:
                await self.page.screenshot(path=str(path))
            except Exception as exc:
                return ToolResult.fail(str(exc), path=str(path))
        return ToolResult.ok(f"Saved {path}", path=str(path))

    def tools(self) -> list[ToolDef]:
        return [
            ToolDef("navigate", "Navigate to a URL", NavigateInput, self.navigate, timeout=60.0),
            ToolDef("get_page_content", "Get the text content of the current page",
                    _NoInput, self.get_page_content),
            ToolDef("click_element", "Click an element on the page", ClickInput,
                    self.click_element, timeout=60.0),
            ToolDef("fill_form", "Fill a form field with a value", FillInput, self.fill_form),
            ToolDef("screenshot", "Take a screenshot of the current page", ScreenshotInput,
                    self.screenshot),
        ]
