"""Browser engine abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..models import BrowserKind

# Handles returned by the engine are opaque to the rest of the server.
BrowserHandle = Any
ContextHandle = Any
PageHandle = Any
ElementHandle = Any


class BrowserEngineError(RuntimeError):
    """Raised when the underlying automation engine reports a failure."""


class BrowserEngine(ABC):
    """Interface for the automation engine driving real browsers."""

    async def stop(self) -> None:
        """Release engine-wide resources such as driver processes."""

    @abstractmethod
    async def launch(self, kind: BrowserKind) -> BrowserHandle:
        """Launch a browser of the given kind."""

    @abstractmethod
    async def new_context(self, browser: BrowserHandle) -> ContextHandle:
        """Create an isolated browsing context in ``browser``."""

    @abstractmethod
    async def new_page(self, context: ContextHandle) -> PageHandle:
        """Open a page in ``context``."""

    @abstractmethod
    async def close_context(self, context: ContextHandle) -> None:
        """Close a context together with its pages."""

    @abstractmethod
    async def close_browser(self, browser: BrowserHandle) -> None:
        """Close a browser and its process or connection."""

    @abstractmethod
    async def goto(self, page: PageHandle, url: str) -> None:
        """Navigate ``page`` to ``url``."""

    @abstractmethod
    async def title(self, page: PageHandle) -> str:
        """Return the document title."""

    @abstractmethod
    async def url(self, page: PageHandle) -> str:
        """Return the current page URL."""

    @abstractmethod
    async def text_content(self, page: PageHandle, selector: str) -> Optional[str]:
        """Return the text content of the first element matching ``selector``."""

    @abstractmethod
    async def query_selector(self, page: PageHandle, selector: str) -> Optional[ElementHandle]:
        """Return the first element matching ``selector`` or ``None``."""

    @abstractmethod
    async def get_property(self, element: ElementHandle, name: str) -> Any:
        """Read the JSON value of the named DOM property of ``element``."""

    @abstractmethod
    async def select_entries(
        self, page: PageHandle, selector: str
    ) -> list[tuple[str, str, bool]]:
        """Return ``(label, value, selected)`` for each option of a select element."""

    @abstractmethod
    async def fill(self, page: PageHandle, selector: str, text: str) -> None:
        """Fill the matched input with ``text``."""

    @abstractmethod
    async def click(self, page: PageHandle, selector: str) -> None:
        """Click the matched element."""

    @abstractmethod
    async def set_checked(self, page: PageHandle, selector: str, checked: bool) -> None:
        """Check or uncheck the matched checkbox."""

    @abstractmethod
    async def select_option(
        self, page: PageHandle, selector: str, values: list[str]
    ) -> list[str]:
        """Select matching options and return the values that got selected."""

    @abstractmethod
    async def screenshot(self, page: PageHandle, path: str) -> None:
        """Capture the page to an image file at ``path``."""
