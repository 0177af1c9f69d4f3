"""Request and response messages exchanged over the RPC surface."""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, Field


class BrowserKind(str, enum.Enum):
    """Browser engines that can back a session."""

    CHROME = "chrome"
    FIREFOX = "firefox"
    WEBKIT = "webkit"


# Requests --------------------------------------------------------------------


class EmptyRequest(BaseModel):
    """Request without arguments."""


class OpenBrowserRequest(BaseModel):
    # Kept as a plain string so unsupported kinds are reported by the session
    # manager as InvalidArgument rather than rejected by request validation.
    browser: str
    url: Optional[str] = None


class GoToRequest(BaseModel):
    url: str


class SelectorRequest(BaseModel):
    selector: str


class InputTextRequest(BaseModel):
    selector: str
    input: str


class DomPropertyRequest(BaseModel):
    selector: str
    property: str


class SelectOptionRequest(BaseModel):
    selector: str
    matcher: list[str] = Field(
        default_factory=list,
        description="Option values or labels to select.",
    )


class ScreenshotRequest(BaseModel):
    path: str = Field(description="Output path without extension; '.png' is appended.")


# Responses -------------------------------------------------------------------


class EmptyResponse(BaseModel):
    """Acknowledgement carrying a human-readable log line."""

    log: str = ""


class StringResponse(BaseModel):
    body: str


class BoolResponse(BaseModel):
    body: bool


class SelectEntry(BaseModel):
    label: str
    value: str
    selected: bool


class SelectResponse(BaseModel):
    entries: list[SelectEntry] = Field(default_factory=list)
