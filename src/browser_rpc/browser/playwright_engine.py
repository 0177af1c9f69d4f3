"""Playwright-powered browser engine implementation."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    ElementHandle,
    Error,
    Page,
    Playwright,
    async_playwright,
)

from ..config import BrowserConfig
from ..models import BrowserKind
from .base import BrowserEngine, BrowserEngineError

LOGGER = logging.getLogger(__name__)

_SELECT_ENTRIES_SCRIPT = (
    "elements => elements.map(element => [element.label, element.value, element.selected])"
)


@contextmanager
def _engine_errors() -> Iterator[None]:
    try:
        yield
    except Error as exc:
        raise BrowserEngineError(exc.message) from exc


class PlaywrightEngine(BrowserEngine):
    """Browser engine backed by Playwright's asyncio API."""

    def __init__(self, config: Optional[BrowserConfig] = None) -> None:
        self._config = config or BrowserConfig()
        self._playwright: Optional[Playwright] = None

    async def _driver(self) -> Playwright:
        if self._playwright is None:
            LOGGER.debug("Starting Playwright driver")
            self._playwright = await async_playwright().start()
        return self._playwright

    async def stop(self) -> None:
        if self._playwright is not None:
            LOGGER.debug("Stopping Playwright driver")
            await self._playwright.stop()
            self._playwright = None

    async def launch(self, kind: BrowserKind) -> Browser:
        playwright = await self._driver()
        browser_type = {
            BrowserKind.CHROME: playwright.chromium,
            BrowserKind.FIREFOX: playwright.firefox,
            BrowserKind.WEBKIT: playwright.webkit,
        }[kind]
        launch_kwargs: dict[str, Any] = {"headless": self._config.headless}
        if self._config.launch_args:
            launch_kwargs["args"] = list(self._config.launch_args)
        LOGGER.debug("Launching %s with %s", browser_type.name, launch_kwargs)
        with _engine_errors():
            return await browser_type.launch(**launch_kwargs)

    async def new_context(self, browser: Browser) -> BrowserContext:
        context_kwargs: dict[str, Any] = {}
        if self._config.viewport_width and self._config.viewport_height:
            context_kwargs["viewport"] = {
                "width": self._config.viewport_width,
                "height": self._config.viewport_height,
            }
        with _engine_errors():
            return await browser.new_context(**context_kwargs)

    async def new_page(self, context: BrowserContext) -> Page:
        with _engine_errors():
            page = await context.new_page()
        timeout = _to_timeout(self._config.default_timeout)
        if timeout is not None:
            page.set_default_timeout(timeout)
        return page

    async def close_context(self, context: BrowserContext) -> None:
        with _engine_errors():
            await context.close()

    async def close_browser(self, browser: Browser) -> None:
        with _engine_errors():
            await browser.close()

    async def goto(self, page: Page, url: str) -> None:
        with _engine_errors():
            await page.goto(url)

    async def title(self, page: Page) -> str:
        with _engine_errors():
            return await page.title()

    async def url(self, page: Page) -> str:
        return page.url

    async def text_content(self, page: Page, selector: str) -> Optional[str]:
        # page.text_content waits for the selector; an absent element reads as None.
        with _engine_errors():
            element = await page.query_selector(selector)
            if element is None:
                return None
            return await element.text_content()

    async def query_selector(self, page: Page, selector: str) -> Optional[ElementHandle]:
        with _engine_errors():
            return await page.query_selector(selector)

    async def get_property(self, element: ElementHandle, name: str) -> Any:
        with _engine_errors():
            handle = await element.get_property(name)
            return await handle.json_value()

    async def select_entries(self, page: Page, selector: str) -> list[tuple[str, str, bool]]:
        with _engine_errors():
            rows = await page.eval_on_selector_all(f"{selector} option", _SELECT_ENTRIES_SCRIPT)
        return [(str(label), str(value), bool(selected)) for label, value, selected in rows]

    async def fill(self, page: Page, selector: str, text: str) -> None:
        with _engine_errors():
            await page.fill(selector, text)

    async def click(self, page: Page, selector: str) -> None:
        with _engine_errors():
            await page.click(selector)

    async def set_checked(self, page: Page, selector: str, checked: bool) -> None:
        with _engine_errors():
            if checked:
                await page.check(selector)
            else:
                await page.uncheck(selector)

    async def select_option(self, page: Page, selector: str, values: list[str]) -> list[str]:
        # page.select_option retries until timeout when no option matches, so
        # only matchers equal to an existing value or label are passed on.
        options = await self.select_entries(page, selector)
        known = {label for label, _, _ in options} | {value for _, value, _ in options}
        matching = [value for value in values if value in known]
        if not matching:
            return []
        with _engine_errors():
            return await page.select_option(selector, matching)

    async def screenshot(self, page: Page, path: str) -> None:
        with _engine_errors():
            await page.screenshot(path=path)


def _to_timeout(timeout: Optional[float]) -> Optional[float]:
    if timeout is None:
        return None
    return timeout * 1000
