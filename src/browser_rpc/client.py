"""HTTP client used by test runners to drive the browser RPC server."""

from __future__ import annotations

from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel

from .models import (
    BoolResponse,
    EmptyResponse,
    SelectEntry,
    SelectResponse,
    StringResponse,
)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class RpcError(RuntimeError):
    """Failure reported by the server for a single call."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


class BrowserRpcClient:
    """Wrapper around the browser RPC HTTP API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def _call(
        self,
        operation: str,
        response_model: type[ResponseT],
        payload: Optional[dict[str, Any]] = None,
    ) -> ResponseT:
        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            response = await client.post(f"/rpc/{operation}", json=payload or {})
        if response.is_error:
            raise _to_rpc_error(response)
        return response_model.model_validate(response.json())

    async def open_browser(self, browser: str, url: Optional[str] = None) -> str:
        payload: dict[str, Any] = {"browser": browser}
        if url is not None:
            payload["url"] = url
        return (await self._call("OpenBrowser", EmptyResponse, payload)).log

    async def close_browser(self) -> str:
        return (await self._call("CloseBrowser", EmptyResponse)).log

    async def go_to(self, url: str) -> str:
        return (await self._call("GoTo", EmptyResponse, {"url": url})).log

    async def get_title(self) -> str:
        return (await self._call("GetTitle", StringResponse)).body

    async def get_url(self) -> str:
        return (await self._call("GetUrl", StringResponse)).body

    async def get_text_content(self, selector: str) -> str:
        return (await self._call("GetTextContent", StringResponse, {"selector": selector})).body

    async def get_dom_property(self, selector: str, property: str) -> str:
        payload = {"selector": selector, "property": property}
        return (await self._call("GetDomProperty", StringResponse, payload)).body

    async def get_bool_property(self, selector: str, property: str) -> bool:
        payload = {"selector": selector, "property": property}
        return (await self._call("GetBoolProperty", BoolResponse, payload)).body

    async def get_select_content(self, selector: str) -> list[SelectEntry]:
        payload = {"selector": selector}
        return (await self._call("GetSelectContent", SelectResponse, payload)).entries

    async def input_text(self, selector: str, text: str) -> str:
        payload = {"selector": selector, "input": text}
        return (await self._call("InputText", EmptyResponse, payload)).log

    async def click_button(self, selector: str) -> str:
        return (await self._call("ClickButton", EmptyResponse, {"selector": selector})).log

    async def check_checkbox(self, selector: str) -> str:
        return (await self._call("CheckCheckbox", EmptyResponse, {"selector": selector})).log

    async def uncheck_checkbox(self, selector: str) -> str:
        return (await self._call("UncheckCheckbox", EmptyResponse, {"selector": selector})).log

    async def select_option(self, selector: str, matchers: list[str]) -> str:
        payload = {"selector": selector, "matcher": list(matchers)}
        return (await self._call("SelectOption", EmptyResponse, payload)).log

    async def health(self) -> str:
        return (await self._call("Health", StringResponse)).body

    async def screenshot(self, path: str) -> str:
        return (await self._call("Screenshot", EmptyResponse, {"path": path})).log


def _to_rpc_error(response: httpx.Response) -> RpcError:
    try:
        body = response.json()
    except ValueError:
        body = None
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, dict) and "code" in detail:
        return RpcError(str(detail["code"]), str(detail.get("message", "")))
    return RpcError("Unknown", response.text or f"HTTP {response.status_code}")
