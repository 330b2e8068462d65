"""Login orchestration: drive a login bot in a fresh browser and harvest its cookies."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Awaitable, Callable, Optional

from playwright.async_api import Error as PlaywrightError

from ..errors import DriverError
from ..models.session import SessionConfiguration
from .browser import BrowserSession
from .login_bot import LoginBot

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

Launcher = Callable[[SessionConfiguration], Awaitable[BrowserSession]]


async def _drain_events(session: BrowserSession):
    """Consume and discard session events until cancelled."""
    while True:
        await session.next_event()


async def login(
    bot: LoginBot,
    config: SessionConfiguration,
    *,
    launcher: Optional[Launcher] = None,
) -> dict[str, str]:
    """Log in with ``bot`` in a new browser session and return its cookies.

    Steps:
    1. Launch the browser session and start draining its events
    2. Open the bot's login page
    3. Fill, submit and check the login form
    4. Read the cookies for the page URL, then cancel the drainer and close the browser

    The drainer is cancelled and the browser closed on every exit path.
    Nothing is retried.

    Args:
        bot: Strategy that knows the login form of the target site.
        config: Browser launch configuration.
        launcher: Coroutine that starts a session; defaults to BrowserSession.launch.

    Returns:
        Mapping of cookie name to cookie value.

    Raises:
        DriverError: Launch, navigation or protocol failure.
        AuthenticationError: The site rejected the credentials.
    """
    launch = launcher or BrowserSession.launch
    session = await launch(config)
    drainer = asyncio.create_task(_drain_events(session))

    try:
        page = await session.new_page(bot.login_url)

        logger.info("[LOGIN] Step 1: Filling login form...")
        await bot.fill_login_form(page)
        logger.info("[LOGIN] Step 2: Submitting login form...")
        await bot.submit_login_form(page)
        logger.info("[LOGIN] Step 3: Checking login result...")
        await bot.check_login(page)

        # Third-party frames share the context; keep only cookies sent to the page.
        raw_cookies = await session.cookies([page.url])
    except PlaywrightError as e:
        logger.error(f"[LOGIN] Browser driver failed: {e}")
        raise DriverError(str(e)) from e
    finally:
        drainer.cancel()
        results = await asyncio.gather(drainer, return_exceptions=True)
        if not isinstance(results[0], asyncio.CancelledError):
            logger.warning(f"[LOGIN] Event drainer stopped early: {results[0]!r}")
        await session.close()

    cookies = {c["name"]: c["value"] for c in raw_cookies if "name" in c and "value" in c}
    logger.info(f"[LOGIN] Extracted {len(cookies)} cookies: {sorted(cookies)}")
    return cookies
