"""Camoufox browser launch configuration and session handle."""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import timedelta
from functools import partial
from typing import Any, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from ..constants import BROWSER_EVENTS, VIEWPORT
from ..errors import ConfigBuildError, DriverError
from ..models.session import SessionConfiguration

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


def _camoufox_launch_options(**kwargs) -> dict[str, Any]:
    from camoufox.utils import launch_options

    return launch_options(**kwargs)


def build_session_config(
    headless: bool = True,
    request_timeout: Optional[timedelta] = None,
    launch_timeout: Optional[timedelta] = None,
) -> SessionConfiguration:
    """Build the browser launch configuration for one login attempt.

    Args:
        headless: If False, opens a visible browser window.
        request_timeout: Default timeout for page actions and navigation.
        launch_timeout: Maximum time to wait for the browser to start.

    Unset timeouts are left to the driver's defaults.

    Raises:
        ConfigBuildError: If Camoufox rejects the options (e.g. the browser
            executable cannot be found). The driver message is kept verbatim.
    """
    extra: dict[str, Any] = {}
    if launch_timeout is not None:
        extra["timeout"] = launch_timeout.total_seconds() * 1000

    try:
        options = _camoufox_launch_options(
            headless=headless,
            humanize=True,
            i_know_what_im_doing=True,
            **extra,
        )
    except Exception as e:
        raise ConfigBuildError(str(e)) from e

    return SessionConfiguration(
        headless=headless,
        request_timeout=request_timeout,
        launch_timeout=launch_timeout,
        launch_options=options,
    )


class BrowserSession:
    """A running Camoufox browser plus the event channel of its context.

    Context events are pushed onto an unbounded queue that the caller must
    keep draining with :meth:`next_event` for as long as the session lives.
    """

    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        context: BrowserContext,
        config: SessionConfiguration,
    ):
        self._playwright = playwright
        self._browser = browser
        self._context = context
        self._config = config
        self._events: asyncio.Queue[tuple[str, Any]] = asyncio.Queue()
        self._closed = False

        for name in BROWSER_EVENTS:
            context.on(name, partial(self._push_event, name))

    @classmethod
    async def launch(cls, config: SessionConfiguration) -> "BrowserSession":
        """Start Playwright, launch Camoufox and open a fresh browser context."""
        logger.info(f"Launching Camoufox (headless={config.headless})...")
        playwright = await async_playwright().start()
        try:
            browser = await playwright.firefox.launch(**config.launch_options)
            context = await browser.new_context(viewport=VIEWPORT)
        except PlaywrightError as e:
            logger.error(f"Failed to launch browser: {e}")
            await playwright.stop()
            raise DriverError(str(e)) from e

        timeout_ms = config.request_timeout_ms
        if timeout_ms is not None:
            context.set_default_timeout(timeout_ms)
            context.set_default_navigation_timeout(timeout_ms)

        return cls(playwright, browser, context, config)

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _push_event(self, name: str, payload: Any = None):
        self._events.put_nowait((name, payload))

    async def next_event(self) -> tuple[str, Any]:
        """Wait for the next context event as ``(event_name, payload)``."""
        return await self._events.get()

    async def new_page(self, url: str) -> Page:
        """Open a page and navigate it to ``url``."""
        page = await self._context.new_page()
        await page.goto(url, wait_until="domcontentloaded")
        logger.info(f"Opened page at {page.url}")
        return page

    async def cookies(self, urls: Optional[list[str]] = None) -> list[dict]:
        """Return the context cookies that apply to ``urls`` (all cookies if None)."""
        return await self._context.cookies(urls)

    async def close(self):
        """Close the context, the browser and Playwright."""
        if self._closed:
            return
        self._closed = True
        logger.info("Closing browser session...")

        try:
            await self._context.close()
        except PlaywrightError as e:
            logger.warning(f"Error closing context: {e}")

        try:
            await self._browser.close()
        except PlaywrightError as e:
            logger.warning(f"Error closing browser: {e}")
        finally:
            await self._playwright.stop()

        logger.info("Browser session closed.")
