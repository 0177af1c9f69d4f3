"""FastAPI application exposing the browser RPC surface."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Optional, TypeVar, Union

from fastapi import APIRouter, Depends, FastAPI, Request
from pydantic import BaseModel

from . import handlers
from .browser.base import BrowserEngine
from .config import RpcConfig
from .errors import RpcFailure, install_error_handlers, to_http_exception
from .models import (
    BoolResponse,
    DomPropertyRequest,
    EmptyRequest,
    EmptyResponse,
    GoToRequest,
    InputTextRequest,
    OpenBrowserRequest,
    ScreenshotRequest,
    SelectOptionRequest,
    SelectorRequest,
    SelectResponse,
    StringResponse,
)
from .session import SessionManager

LOGGER = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)
ResponseT = TypeVar("ResponseT", bound=BaseModel)


class RpcDispatcher:
    """Route calls to handlers and relay their outcome to the transport."""

    def __init__(self, sessions: SessionManager) -> None:
        self.sessions = sessions

    async def dispatch(
        self,
        handler: Callable[[SessionManager, RequestT], Awaitable[Union[ResponseT, RpcFailure]]],
        request: RequestT,
    ) -> ResponseT:
        result = await handler(self.sessions, request)
        if isinstance(result, RpcFailure):
            LOGGER.info("%s failed with %s: %s", handler.__name__, result.code.value, result.message)
            raise to_http_exception(result)
        return result


def get_dispatcher(request: Request) -> RpcDispatcher:
    return request.app.state.dispatcher


router = APIRouter(prefix="/rpc")


# Session lifecycle -----------------------------------------------------------


@router.post("/OpenBrowser", response_model=EmptyResponse)
async def open_browser(
    payload: OpenBrowserRequest, dispatcher: RpcDispatcher = Depends(get_dispatcher)
) -> EmptyResponse:
    return await dispatcher.dispatch(handlers.open_browser, payload)


@router.post("/CloseBrowser", response_model=EmptyResponse)
async def close_browser(dispatcher: RpcDispatcher = Depends(get_dispatcher)) -> EmptyResponse:
    return await dispatcher.dispatch(handlers.close_browser, EmptyRequest())


@router.post("/GoTo", response_model=EmptyResponse)
async def go_to(
    payload: GoToRequest, dispatcher: RpcDispatcher = Depends(get_dispatcher)
) -> EmptyResponse:
    return await dispatcher.dispatch(handlers.go_to, payload)


# Page state ------------------------------------------------------------------


@router.post("/GetTitle", response_model=StringResponse)
async def get_title(dispatcher: RpcDispatcher = Depends(get_dispatcher)) -> StringResponse:
    return await dispatcher.dispatch(handlers.get_title, EmptyRequest())


@router.post("/GetUrl", response_model=StringResponse)
async def get_url(dispatcher: RpcDispatcher = Depends(get_dispatcher)) -> StringResponse:
    return await dispatcher.dispatch(handlers.get_url, EmptyRequest())


@router.post("/GetTextContent", response_model=StringResponse)
async def get_text_content(
    payload: SelectorRequest, dispatcher: RpcDispatcher = Depends(get_dispatcher)
) -> StringResponse:
    return await dispatcher.dispatch(handlers.get_text_content, payload)


@router.post("/GetDomProperty", response_model=StringResponse)
async def get_dom_property(
    payload: DomPropertyRequest, dispatcher: RpcDispatcher = Depends(get_dispatcher)
) -> StringResponse:
    return await dispatcher.dispatch(handlers.get_dom_property, payload)


@router.post("/GetBoolProperty", response_model=BoolResponse)
async def get_bool_property(
    payload: DomPropertyRequest, dispatcher: RpcDispatcher = Depends(get_dispatcher)
) -> BoolResponse:
    return await dispatcher.dispatch(handlers.get_bool_property, payload)


@router.post("/GetSelectContent", response_model=SelectResponse)
async def get_select_content(
    payload: SelectorRequest, dispatcher: RpcDispatcher = Depends(get_dispatcher)
) -> SelectResponse:
    return await dispatcher.dispatch(handlers.get_select_content, payload)


# Form controls ---------------------------------------------------------------


@router.post("/InputText", response_model=EmptyResponse)
async def input_text(
    payload: InputTextRequest, dispatcher: RpcDispatcher = Depends(get_dispatcher)
) -> EmptyResponse:
    return await dispatcher.dispatch(handlers.input_text, payload)


@router.post("/ClickButton", response_model=EmptyResponse)
async def click_button(
    payload: SelectorRequest, dispatcher: RpcDispatcher = Depends(get_dispatcher)
) -> EmptyResponse:
    return await dispatcher.dispatch(handlers.click_button, payload)


@router.post("/CheckCheckbox", response_model=EmptyResponse)
async def check_checkbox(
    payload: SelectorRequest, dispatcher: RpcDispatcher = Depends(get_dispatcher)
) -> EmptyResponse:
    return await dispatcher.dispatch(handlers.check_checkbox, payload)


@router.post("/UncheckCheckbox", response_model=EmptyResponse)
async def uncheck_checkbox(
    payload: SelectorRequest, dispatcher: RpcDispatcher = Depends(get_dispatcher)
) -> EmptyResponse:
    return await dispatcher.dispatch(handlers.uncheck_checkbox, payload)


@router.post("/SelectOption", response_model=EmptyResponse)
async def select_option(
    payload: SelectOptionRequest, dispatcher: RpcDispatcher = Depends(get_dispatcher)
) -> EmptyResponse:
    return await dispatcher.dispatch(handlers.select_option, payload)


# Diagnostics -----------------------------------------------------------------


@router.post("/Health", response_model=StringResponse)
async def health(dispatcher: RpcDispatcher = Depends(get_dispatcher)) -> StringResponse:
    return await dispatcher.dispatch(handlers.health, EmptyRequest())


@router.post("/Screenshot", response_model=EmptyResponse)
async def screenshot(
    payload: ScreenshotRequest, dispatcher: RpcDispatcher = Depends(get_dispatcher)
) -> EmptyResponse:
    return await dispatcher.dispatch(handlers.screenshot, payload)


# Application -----------------------------------------------------------------


def create_app(
    config: Optional[RpcConfig] = None,
    *,
    engine: Optional[BrowserEngine] = None,
) -> FastAPI:
    """Build the RPC application around ``engine`` (Playwright by default)."""

    config = config or RpcConfig()
    if engine is None:
        from .browser.playwright_engine import PlaywrightEngine

        engine = PlaywrightEngine(config.browser)
    dispatcher = RpcDispatcher(SessionManager(engine))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        try:
            await dispatcher.sessions.shutdown()
        finally:
            await engine.stop()

    app = FastAPI(title="Browser RPC", lifespan=lifespan)
    app.state.dispatcher = dispatcher
    app.include_router(router)
    install_error_handlers(app)
    return app
