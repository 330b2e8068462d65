"""Login bots: site-specific strategies to fill, submit and verify a login form."""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from urllib.parse import urlsplit

from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..constants import PINTEREST_BASE_URL, PINTEREST_LOGIN_URL, SELECTORS
from ..errors import AuthenticationError, ElementNotFound, NavigationError
from ..models.session import Credentials

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


def _host(url: str) -> str:
    return urlsplit(url).netloc.lower().removeprefix("www.")


def same_page(url: str, other: str) -> bool:
    """Compare two URLs by host (ignoring ``www.``) and path (ignoring a trailing slash)."""
    return _host(url) == _host(other) and (
        urlsplit(url).path.rstrip("/") == urlsplit(other).path.rstrip("/")
    )


class LoginBot(ABC):
    """Fills and submits a login form in the browser, then checks the outcome.

    The orchestrator opens a page at ``login_url`` and awaits the three
    steps in order; any exception aborts the attempt.
    """

    login_url: str = PINTEREST_LOGIN_URL

    @abstractmethod
    async def fill_login_form(self, page: Page) -> None:
        """Fill the login form fields with the account data."""

    @abstractmethod
    async def submit_login_form(self, page: Page) -> None:
        """Submit the login form."""

    @abstractmethod
    async def check_login(self, page: Page) -> None:
        """Raise AuthenticationError unless the login succeeded."""

    async def _settle(self, page: Page, state: str = "load") -> None:
        try:
            await page.wait_for_load_state(state)
        except PlaywrightTimeoutError as e:
            raise NavigationError(str(e)) from e

    async def _find(self, page: Page, selector: str) -> Locator:
        locator = page.locator(selector).first
        try:
            await locator.wait_for(state="visible")
        except PlaywrightTimeoutError as e:
            raise ElementNotFound(selector, str(e)) from e
        return locator


class DefaultLoginBot(LoginBot):
    """Logs in to Pinterest with an email and password.

    Success is judged by the page leaving the login URL after submission.
    That heuristic also accepts a verification or challenge page, so a
    "successful" login can still be missing its session cookies.
    """

    def __init__(self, email: str, password: str):
        self._credentials = Credentials(identifier=email, secret=password)

    async def fill_login_form(self, page: Page) -> None:
        await self._settle(page)

        email = await self._find(page, SELECTORS["login_email"])
        await email.click()
        await email.fill(self._credentials.identifier)

        password = await self._find(page, SELECTORS["login_password"])
        await password.click()
        await password.fill(self._credentials.secret.get_secret_value())

    async def submit_login_form(self, page: Page) -> None:
        button = await self._find(page, SELECTORS["login_submit"])
        await button.click()

    async def check_login(self, page: Page) -> None:
        # Rejected credentials keep the page on the login URL until the wait expires.
        try:
            await page.wait_for_url(lambda url: not same_page(url, self.login_url))
        except PlaywrightTimeoutError:
            logger.info("Page did not leave the login URL after submitting the form")

        await self._settle(page)

        url = page.url
        if not url or url == "about:blank":
            raise AuthenticationError("no page URL after submitting the login form")
        if same_page(url, self.login_url):
            raise AuthenticationError()

        if _host(url) != _host(PINTEREST_BASE_URL):
            logger.warning(f"Login landed outside the site at {url}; treating as success")
        logger.info(f"Logged in, landed on {url}")
