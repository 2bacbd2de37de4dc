import asyncio
from typing import Any

from playwright.async_api import BrowserContext, Error as PlaywrightError, Page, Route

from .constants import BLOCKED_RESOURCE_TYPES, EMBEDDED_DATA_EXPRESSION
from .errors import NavigationError, TraversalCancelled
from .logger import Logger
from .models import SessionCredential


async def _filter_resources(route: Route) -> None:
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        await route.abort()
    else:
        await route.continue_()


async def open_controlled_page(context: BrowserContext, credential: SessionCredential) -> Page:
    """
    Open a page that carries the session cookie, never times out on navigation
    and skips stylesheets, fonts and images.
    """
    await context.add_cookies([credential.as_cookie()])

    page = await context.new_page()
    page.set_default_navigation_timeout(0)
    await page.route("**/*", _filter_resources)
    return page


async def navigate(page: Page, url: str) -> str:
    """
    Load ``url`` and return the document once page scripts have settled.

    :raises NavigationError: on any load failure or an HTTP error status
    """
    try:
        response = await page.goto(url, wait_until="networkidle")
    except PlaywrightError as e:
        raise NavigationError(url, e.message)

    if response is not None and response.status >= 400:
        raise NavigationError(url, f"HTTP {response.status}")

    try:
        return await page.content()
    except PlaywrightError as e:
        raise NavigationError(url, e.message)


async def read_embedded_data(page: Page) -> Any:
    """The page-script data object of the current page, or None when unavailable."""
    try:
        return await page.evaluate(EMBEDDED_DATA_EXPRESSION)
    except PlaywrightError as e:
        Logger.debug(f"Could not read embedded data on {page.url}: {e.message}")
        return None


class ControlledPage:
    """A controlled page bound to the run's cancellation token."""

    def __init__(self, page: Page, cancelled: asyncio.Event | None = None):
        self._page = page
        self._cancelled = cancelled or asyncio.Event()

    async def navigate(self, url: str) -> str:
        if self._cancelled.is_set():
            raise TraversalCancelled(f"Cancelled before loading {url}")
        Logger.debug(f"Loading {url}")
        return await navigate(self._page, url)

    async def embedded_data(self) -> Any:
        return await read_embedded_data(self._page)
