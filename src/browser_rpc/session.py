"""Ownership of the single browser session served by the RPC server."""

from __future__ import annotations

import logging
from typing import Optional, Union

from .browser.base import BrowserEngine, BrowserHandle, ContextHandle, PageHandle
from .errors import RpcFailure
from .models import BrowserKind

LOGGER = logging.getLogger(__name__)


class Session:
    """An open browser together with its context and active page."""

    def __init__(
        self,
        kind: BrowserKind,
        browser: BrowserHandle,
        context: ContextHandle,
        page: PageHandle,
    ) -> None:
        self._kind = kind
        self._browser = browser
        self._context = context
        self._page = page

    @property
    def kind(self) -> BrowserKind:
        return self._kind

    @property
    def page(self) -> PageHandle:
        return self._page

    async def close(self, engine: BrowserEngine) -> None:
        """Release the context (and its page) first, then the browser."""

        try:
            await engine.close_context(self._context)
        finally:
            await engine.close_browser(self._browser)


class SessionManager:
    """Registry holding at most one open session."""

    def __init__(self, engine: BrowserEngine) -> None:
        self._engine = engine
        self._session: Optional[Session] = None

    @property
    def engine(self) -> BrowserEngine:
        return self._engine

    def current(self) -> Optional[Session]:
        return self._session

    def require(self, message: str) -> Union[Session, RpcFailure]:
        """Return the open session or a precondition failure carrying ``message``."""

        if self._session is None:
            return RpcFailure.failed_precondition(message)
        return self._session

    async def open(self, kind: str, url: Optional[str] = None) -> Union[Session, RpcFailure]:
        """Launch a new session, replacing (and releasing) any open one.

        Navigation to ``url`` happens after the session is registered, so a
        failed navigation leaves the new session open.
        """

        try:
            browser_kind = BrowserKind(kind)
        except ValueError:
            return RpcFailure.invalid_argument(f"Unsupported browser: {kind}")

        if self._session is not None:
            LOGGER.warning("Browser already open, closing it before opening %s", browser_kind.value)
            await self.close()

        browser = await self._engine.launch(browser_kind)
        try:
            context = await self._engine.new_context(browser)
            page = await self._engine.new_page(context)
        except BaseException:
            await self._engine.close_browser(browser)
            raise
        session = Session(browser_kind, browser, context, page)
        self._session = session

        if url:
            LOGGER.info("Go to URL: %s", url)
            await self._engine.goto(session.page, url)
        return session

    async def close(self) -> Optional[RpcFailure]:
        """Release the open session; the reference is cleared even if release fails."""

        session = self.require("Tried to close browser but none was open")
        if isinstance(session, RpcFailure):
            return session
        try:
            await session.close(self._engine)
        finally:
            if self._session is session:
                self._session = None
        return None

    async def shutdown(self) -> None:
        if self._session is None:
            return
        LOGGER.info("Closing browser left open at shutdown")
        await self.close()
