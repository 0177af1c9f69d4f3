from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import pytest

from browser_rpc.browser.base import BrowserEngine, BrowserEngineError
from browser_rpc.models import BrowserKind
from browser_rpc.session import SessionManager


class FakeElement:
    def __init__(self, text: Optional[str] = None, **properties: Any) -> None:
        self.text = text
        self.properties = properties


class FakeBrowser:
    def __init__(self, kind: BrowserKind) -> None:
        self.kind = kind
        self.closed = False


class FakeContext:
    def __init__(self, browser: FakeBrowser) -> None:
        self.browser = browser
        self.closed = False


class FakePage:
    def __init__(self, context: FakeContext) -> None:
        self.context = context
        self.url = "about:blank"


class FakeEngine(BrowserEngine):
    """In-memory engine recording every call made against it."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.browsers: list[FakeBrowser] = []
        self.contexts: list[FakeContext] = []
        self.elements: dict[str, FakeElement] = {}
        self.selects: dict[str, list[list[Any]]] = {}
        self.titles: dict[str, str] = {}
        self.failures: dict[str, str] = {}
        self.stopped = False

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failures:
            raise BrowserEngineError(self.failures[name])

    async def stop(self) -> None:
        self.stopped = True

    async def launch(self, kind: BrowserKind) -> FakeBrowser:
        self._record("launch")
        browser = FakeBrowser(kind)
        self.browsers.append(browser)
        return browser

    async def new_context(self, browser: FakeBrowser) -> FakeContext:
        self._record("new_context")
        context = FakeContext(browser)
        self.contexts.append(context)
        return context

    async def new_page(self, context: FakeContext) -> FakePage:
        self._record("new_page")
        return FakePage(context)

    async def close_context(self, context: FakeContext) -> None:
        self._record("close_context")
        context.closed = True

    async def close_browser(self, browser: FakeBrowser) -> None:
        self._record("close_browser")
        browser.closed = True

    async def goto(self, page: FakePage, url: str) -> None:
        self._record("goto")
        page.url = url

    async def title(self, page: FakePage) -> str:
        self._record("title")
        return self.titles.get(page.url, "")

    async def url(self, page: FakePage) -> str:
        self._record("url")
        return page.url

    async def text_content(self, page: FakePage, selector: str) -> Optional[str]:
        self._record("text_content")
        element = self.elements.get(selector)
        return element.text if element else None

    async def query_selector(self, page: FakePage, selector: str) -> Optional[FakeElement]:
        self._record("query_selector")
        return self.elements.get(selector)

    async def get_property(self, element: FakeElement, name: str) -> Any:
        self._record("get_property")
        return element.properties.get(name)

    async def select_entries(self, page: FakePage, selector: str) -> list[tuple[str, str, bool]]:
        self._record("select_entries")
        return [tuple(option) for option in self.selects.get(selector, [])]

    async def fill(self, page: FakePage, selector: str, text: str) -> None:
        self._record("fill")
        self.elements.setdefault(selector, FakeElement()).properties["value"] = text

    async def click(self, page: FakePage, selector: str) -> None:
        self._record("click")

    async def set_checked(self, page: FakePage, selector: str, checked: bool) -> None:
        self._record("check" if checked else "uncheck")
        self.elements.setdefault(selector, FakeElement()).properties["checked"] = checked

    async def select_option(self, page: FakePage, selector: str, values: list[str]) -> list[str]:
        self._record("select_option")
        selected = []
        for option in self.selects.get(selector, []):
            label, value = option[0], option[1]
            option[2] = label in values or value in values
            if option[2]:
                selected.append(value)
        return selected

    async def screenshot(self, page: FakePage, path: str) -> None:
        self._record("screenshot")
        Path(path).write_bytes(b"\x89PNG")


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def sessions(engine: FakeEngine) -> SessionManager:
    return SessionManager(engine)
