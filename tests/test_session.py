from __future__ import annotations

import asyncio

import pytest
from conftest import FakeEngine

from browser_rpc.browser.base import BrowserEngineError
from browser_rpc.errors import RpcFailure, StatusCode
from browser_rpc.models import BrowserKind
from browser_rpc.session import Session, SessionManager


def test_open_creates_browser_context_and_page(sessions: SessionManager, engine: FakeEngine) -> None:
    session = asyncio.run(sessions.open("chrome"))

    assert isinstance(session, Session)
    assert session.kind is BrowserKind.CHROME
    assert sessions.current() is session
    assert session.page.url == "about:blank"
    assert session.page.context is engine.contexts[0]
    assert engine.calls == ["launch", "new_context", "new_page"]


def test_require_reports_operation_specific_message(sessions: SessionManager) -> None:
    failure = sessions.require("Tried to click button, no open browser")

    assert failure == RpcFailure(StatusCode.FAILED_PRECONDITION, "Tried to click button, no open browser")


def test_navigation_failure_keeps_session_open(sessions: SessionManager, engine: FakeEngine) -> None:
    engine.failures["goto"] = "net::ERR_NAME_NOT_RESOLVED"

    with pytest.raises(BrowserEngineError, match="ERR_NAME_NOT_RESOLVED"):
        asyncio.run(sessions.open("chrome", "https://invalid.test"))

    assert sessions.current() is not None
    assert not engine.browsers[0].closed


def test_open_while_open_releases_previous_session(sessions: SessionManager, engine: FakeEngine) -> None:
    first = asyncio.run(sessions.open("chrome"))
    second = asyncio.run(sessions.open("firefox"))

    assert isinstance(second, Session)
    assert sessions.current() is second
    assert first is not second
    assert engine.browsers[0].closed
    assert engine.contexts[0].closed
    assert not engine.browsers[1].closed


def test_unsupported_kind_leaves_open_session_untouched(
    sessions: SessionManager, engine: FakeEngine
) -> None:
    current = asyncio.run(sessions.open("webkit"))
    engine.calls.clear()

    failure = asyncio.run(sessions.open("netscape"))

    assert failure == RpcFailure(StatusCode.INVALID_ARGUMENT, "Unsupported browser: netscape")
    assert sessions.current() is current
    assert engine.calls == []


def test_close_releases_context_before_browser(sessions: SessionManager, engine: FakeEngine) -> None:
    asyncio.run(sessions.open("chrome"))
    engine.calls.clear()

    assert asyncio.run(sessions.close()) is None

    assert engine.calls == ["close_context", "close_browser"]
    assert sessions.current() is None


def test_close_clears_session_when_release_fails(sessions: SessionManager, engine: FakeEngine) -> None:
    asyncio.run(sessions.open("chrome"))
    engine.failures["close_context"] = "Target closed"

    with pytest.raises(BrowserEngineError):
        asyncio.run(sessions.close())

    assert sessions.current() is None
    assert engine.browsers[0].closed


def test_failed_page_creation_closes_launched_browser(
    sessions: SessionManager, engine: FakeEngine
) -> None:
    engine.failures["new_page"] = "Browser has been closed"

    with pytest.raises(BrowserEngineError):
        asyncio.run(sessions.open("firefox"))

    assert sessions.current() is None
    assert engine.browsers[0].closed


def test_shutdown_closes_open_session(sessions: SessionManager, engine: FakeEngine) -> None:
    asyncio.run(sessions.shutdown())
    assert engine.calls == []

    asyncio.run(sessions.open("chrome"))
    asyncio.run(sessions.shutdown())

    assert sessions.current() is None
    assert engine.browsers[0].closed
