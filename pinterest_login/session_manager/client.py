"""Authenticated HTTP client state built from harvested browser cookies."""

from __future__ import annotations

import json
import logging
import sys
from datetime import timedelta
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlsplit

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ..config import (
    BROWSER_HEADLESS,
    BROWSER_LAUNCH_TIMEOUT,
    BROWSER_REQUEST_TIMEOUT,
)
from ..constants import (
    CSRF_COOKIE_NAME,
    CSRF_HEADER,
    DEFAULT_USER_AGENT,
    PINTEREST_BASE_URL,
    STATIC_HEADERS,
)
from ..errors import (
    CredentialsFileNotFound,
    InvalidCredentialsFile,
    MissingRequiredToken,
    PersistenceError,
)
from ..models.session import SessionConfiguration
from .browser import build_session_config
from .login import login
from .login_bot import DefaultLoginBot, LoginBot

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

PathLike = Union[str, Path]


def build_request_headers(
    user_agent: Optional[str] = None, csrf_token: Optional[str] = None
) -> dict[str, str]:
    """Default headers for Pinterest API requests.

    The CSRF header is only included when a token is given.
    """
    headers = {"User-Agent": user_agent or DEFAULT_USER_AGENT}
    if csrf_token is not None:
        headers[CSRF_HEADER] = csrf_token
    headers.update(STATIC_HEADERS)
    return headers


def cookie_string(cookies: dict[str, str]) -> str:
    """Serialize cookies as ``name=value;`` pairs."""
    return "".join(f"{name}={value};" for name, value in cookies.items())


def load_cookie_string(jar: httpx.Cookies, raw: str, url: str = PINTEREST_BASE_URL):
    """Add the ``name=value;`` pairs of ``raw`` to ``jar``, scoped to the host of ``url``."""
    domain = urlsplit(url).hostname or ""
    for pair in raw.split(";"):
        name, sep, value = pair.strip().partition("=")
        if not sep or not name:
            continue
        jar.set(name, value, domain=domain, path="/")


class ClientState(BaseModel):
    """Headers for anonymous requests."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    user_agent: str = DEFAULT_USER_AGENT
    headers: dict[str, str] = Field(default_factory=build_request_headers)

    @property
    def is_authenticated(self) -> bool:
        return False

    @property
    def cookie_count(self) -> int:
        return 0

    def async_client(self, **kwargs) -> httpx.AsyncClient:
        """Create an httpx client preloaded with this state's headers."""
        kwargs.setdefault("follow_redirects", True)
        kwargs.setdefault("timeout", 30.0)
        return httpx.AsyncClient(headers=self.headers, **kwargs)


class AuthenticatedClientState(ClientState):
    """Headers plus the cookie jar and CSRF token of a logged-in session."""

    csrf_token: str
    cookies: httpx.Cookies = Field(default_factory=httpx.Cookies)

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def cookie_count(self) -> int:
        return len(self.cookies.jar)

    def async_client(self, **kwargs) -> httpx.AsyncClient:
        return super().async_client(cookies=self.cookies, **kwargs)


def save_cookies(cookies: dict[str, str], path: PathLike) -> Path:
    """Write the cookie set to ``path`` as a JSON object."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(cookies, indent=2), encoding="utf-8")
    except OSError as e:
        raise PersistenceError(f"There was an error writing the credentials file: {e}") from e
    logger.info(f"Saved {len(cookies)} cookies to {path}")
    return path


def load_cookies(path: PathLike) -> dict[str, str]:
    """Read a cookie set written by :func:`save_cookies`."""
    path = Path(path)
    if not path.exists():
        raise CredentialsFileNotFound(f"The credentials file path does not exist: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise PersistenceError(f"There was an error reading the credentials file: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidCredentialsFile(
            f"There was an error deserializing the credentials file: {e}"
        ) from e

    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        raise InvalidCredentialsFile(
            "There was an error deserializing the credentials file: "
            "expected an object of cookie names to string values"
        )
    return data


def apply(
    cookies: dict[str, str],
    user_agent: Optional[str] = None,
    cred_path: Optional[PathLike] = None,
) -> AuthenticatedClientState:
    """Turn a harvested cookie set into authenticated client state.

    Args:
        cookies: Cookie name to value mapping from a successful login.
        user_agent: User-Agent header; falls back to DEFAULT_USER_AGENT.
        cred_path: If given, the cookie set is also saved there as JSON.

    Raises:
        MissingRequiredToken: The CSRF cookie is absent or empty.
        PersistenceError: Saving to ``cred_path`` failed. The built state is
            available as ``error.state``.
    """
    csrf_token = cookies.get(CSRF_COOKIE_NAME)
    if not csrf_token:
        raise MissingRequiredToken(CSRF_COOKIE_NAME)

    jar = httpx.Cookies()
    load_cookie_string(jar, cookie_string(cookies), PINTEREST_BASE_URL)

    agent = user_agent or DEFAULT_USER_AGENT
    state = AuthenticatedClientState(
        user_agent=agent,
        headers=build_request_headers(agent, csrf_token),
        csrf_token=csrf_token,
        cookies=jar,
    )

    if cred_path is not None:
        try:
            save_cookies(cookies, cred_path)
        except PersistenceError as e:
            e.state = state
            raise

    return state


def session_config(
    headless: bool = BROWSER_HEADLESS,
    request_timeout: Optional[timedelta] = BROWSER_REQUEST_TIMEOUT,
    launch_timeout: Optional[timedelta] = BROWSER_LAUNCH_TIMEOUT,
) -> SessionConfiguration:
    """Browser configuration with the environment defaults."""
    return build_session_config(headless, request_timeout, launch_timeout)


class PinterestClient:
    """Pinterest account handle holding the current HTTP client state.

    Created anonymous (no CSRF token) or authenticated from a known token;
    :meth:`login` replaces the state with a freshly logged-in one.
    """

    def __init__(
        self,
        username: str,
        csrf_token: Optional[str] = None,
        cookies: Optional[dict[str, str]] = None,
        user_agent: Optional[str] = None,
    ):
        self.username = username
        self.user_agent = user_agent
        self.state: ClientState
        if csrf_token is not None:
            cookie_set = dict(cookies or {})
            cookie_set[CSRF_COOKIE_NAME] = csrf_token
            self.state = apply(cookie_set, user_agent)
        else:
            agent = user_agent or DEFAULT_USER_AGENT
            self.state = ClientState(user_agent=agent, headers=build_request_headers(agent))

    @classmethod
    def from_credentials_file(
        cls, username: str, path: PathLike, user_agent: Optional[str] = None
    ) -> "PinterestClient":
        """Restore an authenticated client from a saved credentials file."""
        cookies = load_cookies(path)
        csrf_token = cookies.get(CSRF_COOKIE_NAME)
        if not csrf_token:
            raise MissingRequiredToken(CSRF_COOKIE_NAME)
        return cls(username, csrf_token=csrf_token, cookies=cookies, user_agent=user_agent)

    @property
    def is_authenticated(self) -> bool:
        return self.state.is_authenticated

    @property
    def cookie_count(self) -> int:
        return self.state.cookie_count

    async def login(
        self,
        password: str,
        cred_path: Optional[PathLike] = None,
        config: Optional[SessionConfiguration] = None,
        bot: Optional[LoginBot] = None,
        **login_kwargs,
    ) -> AuthenticatedClientState:
        """Log in through the browser and switch to the authenticated state.

        Args:
            password: Account password, used for this attempt only.
            cred_path: Where to save the cookies, if anywhere.
            config: Browser configuration; built from the environment by default.
            bot: Login strategy; DefaultLoginBot for this account by default.
        """
        if config is None:
            config = session_config()
        bot = bot or DefaultLoginBot(self.username, password)

        cookies = await login(bot, config, **login_kwargs)
        try:
            self.state = apply(cookies, self.user_agent, cred_path)
        except PersistenceError as e:
            self.state = e.state
            raise
        return self.state

    def http_client(self, **kwargs) -> httpx.AsyncClient:
        """Create an httpx client for the current state."""
        return self.state.async_client(**kwargs)

