"""Command handlers, one per RPC operation.

Every handler receives the session registry explicitly, checks that a session
is open before touching the engine, performs a single engine interaction and
returns either a response message or an :class:`RpcFailure`.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Union

from .errors import RpcFailure
from .models import (
    BoolResponse,
    DomPropertyRequest,
    EmptyRequest,
    EmptyResponse,
    GoToRequest,
    InputTextRequest,
    OpenBrowserRequest,
    ScreenshotRequest,
    SelectEntry,
    SelectOptionRequest,
    SelectorRequest,
    SelectResponse,
    StringResponse,
)
from .session import Session, SessionManager

LOGGER = logging.getLogger(__name__)

SCREENSHOT_EXTENSION = ".png"


def _empty(log: str) -> EmptyResponse:
    return EmptyResponse(log=log)


async def open_browser(
    sessions: SessionManager, request: OpenBrowserRequest
) -> Union[EmptyResponse, RpcFailure]:
    LOGGER.info("Open browser: %s", request.browser)
    session = await sessions.open(request.browser, request.url)
    if isinstance(session, RpcFailure):
        return session
    log = f"Opened browser {session.kind.value}"
    if request.url:
        log = f"{log}. Successfully opened URL {request.url}"
    LOGGER.info("Browser opened")
    return _empty(log)


async def close_browser(
    sessions: SessionManager, request: EmptyRequest
) -> Union[EmptyResponse, RpcFailure]:
    failure = await sessions.close()
    if failure is not None:
        return failure
    LOGGER.info("Closed browser")
    return _empty("Closed browser")


async def go_to(
    sessions: SessionManager, request: GoToRequest
) -> Union[EmptyResponse, RpcFailure]:
    session = sessions.require("Tried to open URL but had no browser open")
    if isinstance(session, RpcFailure):
        return session
    LOGGER.info("Go to URL: %s", request.url)
    await sessions.engine.goto(session.page, request.url)
    return _empty(f"Successfully opened URL {request.url}")


async def get_title(
    sessions: SessionManager, request: EmptyRequest
) -> Union[StringResponse, RpcFailure]:
    session = sessions.require("Tried to get title, no open browser")
    if isinstance(session, RpcFailure):
        return session
    LOGGER.info("Getting title")
    return StringResponse(body=await sessions.engine.title(session.page))


async def get_url(
    sessions: SessionManager, request: EmptyRequest
) -> Union[StringResponse, RpcFailure]:
    session = sessions.require("Tried to get page URL, no open browser")
    if isinstance(session, RpcFailure):
        return session
    LOGGER.info("Getting URL")
    return StringResponse(body=await sessions.engine.url(session.page))


async def get_text_content(
    sessions: SessionManager, request: SelectorRequest
) -> Union[StringResponse, RpcFailure]:
    session = sessions.require("Tried to find text on page, no open browser")
    if isinstance(session, RpcFailure):
        return session
    content = await sessions.engine.text_content(session.page, request.selector)
    return StringResponse(body=content or "")


async def _read_property(
    sessions: SessionManager, session: Session, request: DomPropertyRequest
) -> Union[Any, RpcFailure]:
    engine = sessions.engine
    element = await engine.query_selector(session.page, request.selector)
    if element is None:
        return RpcFailure.failed_precondition(f"Couldn't find element: {request.selector}")
    content = await engine.get_property(element, request.property)
    LOGGER.info(
        "Retrieved dom property for element %s containing %s", request.selector, content
    )
    return content


def _is_truthy(value: Any) -> bool:
    """Truthiness of a DOM property value as JavaScript defines it."""

    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0 and not math.isnan(value)
    return True


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


async def get_dom_property(
    sessions: SessionManager, request: DomPropertyRequest
) -> Union[StringResponse, RpcFailure]:
    session = sessions.require("Tried to get DOM property, no open browser")
    if isinstance(session, RpcFailure):
        return session
    content = await _read_property(sessions, session, request)
    if isinstance(content, RpcFailure):
        return content
    return StringResponse(body=_stringify(content))


async def get_bool_property(
    sessions: SessionManager, request: DomPropertyRequest
) -> Union[BoolResponse, RpcFailure]:
    session = sessions.require("Tried to get DOM property, no open browser")
    if isinstance(session, RpcFailure):
        return session
    content = await _read_property(sessions, session, request)
    if isinstance(content, RpcFailure):
        return content
    return BoolResponse(body=_is_truthy(content))


async def get_select_content(
    sessions: SessionManager, request: SelectorRequest
) -> Union[SelectResponse, RpcFailure]:
    session = sessions.require("Tried to get Select element contents, no open browser")
    if isinstance(session, RpcFailure):
        return session
    rows = await sessions.engine.select_entries(session.page, request.selector)
    entries = [
        SelectEntry(label=label, value=value, selected=selected)
        for label, value, selected in rows
    ]
    return SelectResponse(entries=entries)


async def input_text(
    sessions: SessionManager, request: InputTextRequest
) -> Union[EmptyResponse, RpcFailure]:
    session = sessions.require("Tried to input text, no open browser")
    if isinstance(session, RpcFailure):
        return session
    await sessions.engine.fill(session.page, request.selector, request.input)
    return _empty(f"Input text: {request.input}")


async def click_button(
    sessions: SessionManager, request: SelectorRequest
) -> Union[EmptyResponse, RpcFailure]:
    session = sessions.require("Tried to click button, no open browser")
    if isinstance(session, RpcFailure):
        return session
    await sessions.engine.click(session.page, request.selector)
    return _empty(f"Clicked button: {request.selector}")


async def check_checkbox(
    sessions: SessionManager, request: SelectorRequest
) -> Union[EmptyResponse, RpcFailure]:
    session = sessions.require("Tried to check checkbox, no open browser")
    if isinstance(session, RpcFailure):
        return session
    await sessions.engine.set_checked(session.page, request.selector, True)
    return _empty(f"Checked checkbox: {request.selector}")


async def uncheck_checkbox(
    sessions: SessionManager, request: SelectorRequest
) -> Union[EmptyResponse, RpcFailure]:
    session = sessions.require("Tried to uncheck checkbox, no open browser")
    if isinstance(session, RpcFailure):
        return session
    await sessions.engine.set_checked(session.page, request.selector, False)
    return _empty(f"Unchecked checkbox: {request.selector}")


async def select_option(
    sessions: SessionManager, request: SelectOptionRequest
) -> Union[EmptyResponse, RpcFailure]:
    session = sessions.require("Tried to select ``select`` element option, no open browser")
    if isinstance(session, RpcFailure):
        return session
    LOGGER.info("Selecting from element %s options %s", request.selector, request.matcher)
    selected = await sessions.engine.select_option(
        session.page, request.selector, list(request.matcher)
    )
    if not selected:
        LOGGER.info("Couldn't select any options")
        return RpcFailure.not_found(f"No options matched {', '.join(request.matcher)}")
    return _empty(f"Selected options {', '.join(selected)} in element {request.selector}")


async def health(
    sessions: SessionManager, request: EmptyRequest
) -> StringResponse:
    return StringResponse(body="OK")


async def screenshot(
    sessions: SessionManager, request: ScreenshotRequest
) -> Union[EmptyResponse, RpcFailure]:
    session = sessions.require("Tried to take screenshot, no open browser")
    if isinstance(session, RpcFailure):
        return session
    path = request.path + SCREENSHOT_EXTENSION
    LOGGER.info("Taking a screenshot of current page to %s", path)
    await sessions.engine.screenshot(session.page, path)
    return _empty("Successfully took screenshot")
