import asyncio
import functools
import signal
from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import Browser, async_playwright
from rich import print

from .browser import ControlledPage, open_controlled_page
from .config import Config
from .downloader import Downloader
from .logger import Logger
from .models import CourseBundle, CourseRef, SessionCredential
from .progress_tracker import DebugLog, ProgressTracker
from .session import load_session
from .traversal import Orchestrator

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)


def browser_required(func):
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        self = args[0]
        if not isinstance(self, AsyncDomestika):
            raise TypeError(f"{browser_required.__name__} can only decorate AsyncDomestika.")
        if self._browser is None:
            raise RuntimeError("Use AsyncDomestika as an async context manager first")
        return await func(*args, **kwargs)

    return wrapper


class AsyncDomestika:
    def __init__(self, config: Config):
        self.config = config.validate()
        self.credential: SessionCredential | None = None
        self.progress = ProgressTracker()
        self.debug_log = DebugLog(config.debug_log_path, enabled=config.debug)
        self.downloader = Downloader(config, self.progress, self.debug_log)
        self.orchestrator = Orchestrator(
            config,
            self.open_page,
            on_bundle=None if config.dry_run else self.downloader.download_bundle,
            progress=self.progress,
        )
        self._playwright = None
        self._browser: Browser | None = None

    async def __aenter__(self):
        Logger.set_debug_mode(self.config.debug)

        # fail on a bad cookies file before starting the browser
        self.credential = load_session(self.config.cookies_path, strict=self.config.strict_session)

        self._playwright = await async_playwright().start()
        mode_text = "headless mode" if self.config.headless else "visible mode"
        Logger.info(f"🌐 Using Chromium browser ({mode_text})")
        self._browser = await self._playwright.chromium.launch(
            headless=self.config.headless,
            args=["--disable-blink-features=AutomationControlled"],
        )
        return self

    async def __aexit__(self, exc_type, exc, tb):
        print("\n")
        print(self.progress.generate_report())

        if self._browser is not None:
            await self._browser.close()
        if self._playwright is not None:
            await self._playwright.stop()
        self._browser = None

    @asynccontextmanager
    async def open_page(self) -> AsyncIterator[ControlledPage]:
        """A controlled page in its own browser context, closed on exit."""
        if self._browser is None:
            raise RuntimeError("Use AsyncDomestika as an async context manager first")

        context = await self._browser.new_context(user_agent=USER_AGENT)
        try:
            page = await open_controlled_page(context, self.credential)
            yield ControlledPage(page, self.orchestrator.cancelled)
        finally:
            await context.close()

    @browser_required
    async def list_courses(self) -> list[CourseRef]:
        async with self.open_page() as page:
            return await self.orchestrator.collect_catalogue(page)

    @asynccontextmanager
    async def interrupt_cancels(self) -> AsyncIterator[None]:
        """While active, Ctrl-C stops the run at the next page load instead of killing it."""
        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, self.cancel)
        except (NotImplementedError, RuntimeError):
            # no loop signal handlers on Windows, KeyboardInterrupt still applies
            yield
            return

        try:
            yield
        finally:
            loop.remove_signal_handler(signal.SIGINT)

    @browser_required
    async def download(self) -> list[CourseBundle]:
        """Scrape the whole catalogue and download each course as soon as it is scraped."""
        async with self.interrupt_cancels():
            bundles = await self.orchestrator.run()
        if self.config.dry_run:
            Logger.info("Dry run: nothing was downloaded")
        else:
            Logger.info("All Courses Downloaded")
        return bundles

    def cancel(self):
        Logger.warning("Cancelling, the run stops before the next page load")
        self.orchestrator.cancel()
