"""Session Manager HTTP service.

Runs as a lightweight local web server that keeps the authenticated
Pinterest client between MCP calls. Handles browser logins, the saved
credentials file and the session state.

Endpoints:
    POST /login             - Log in through the browser
    POST /load-credentials  - Restore the session from the credentials file
    GET  /status            - Return session state
    POST /logout            - Forget the authenticated session
"""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from aiohttp import web

from ..config import (
    BROWSER_HEADLESS,
    CREDENTIALS_PATH,
    PINTEREST_EMAIL,
    PINTEREST_PASSWORD,
    PINTEREST_USER_AGENT,
    SESSION_MANAGER_HOST,
    SESSION_MANAGER_PORT,
    ensure_dirs,
)
from ..errors import (
    AuthenticationError,
    ConfigBuildError,
    DriverError,
    MissingRequiredToken,
    PersistenceError,
)
from ..models.session import SessionStatus
from .client import PinterestClient, session_config

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


class SessionManager:
    """Holds the authenticated client and serialises login attempts."""

    def __init__(
        self,
        email: str = PINTEREST_EMAIL,
        password: str = PINTEREST_PASSWORD,
        credentials_path: Path = CREDENTIALS_PATH,
        user_agent: Optional[str] = PINTEREST_USER_AGENT,
    ):
        self.email = email
        self._password = password
        self.credentials_path = Path(credentials_path)
        self.user_agent = user_agent
        self.client: PinterestClient | None = None
        self.last_login_time: str | None = None
        self.last_error: str | None = None
        self._lock = asyncio.Lock()

    @property
    def is_authenticated(self) -> bool:
        return self.client is not None and self.client.is_authenticated

    def status(self, message: str = "") -> SessionStatus:
        if self._lock.locked():
            state = "logging_in"
        elif self.is_authenticated:
            state = "active"
        elif self.last_error:
            state = "error"
        else:
            state = "logged_out"
        return SessionStatus(
            is_authenticated=self.is_authenticated,
            state=state,
            cookie_count=self.client.cookie_count if self.client else 0,
            last_login_time=self.last_login_time,
            message=message,
            error=self.last_error,
        )

    async def login(self, headless: bool = BROWSER_HEADLESS, save_credentials: bool = True):
        """Run one browser login and install the resulting client."""
        if not self.email or not self._password:
            raise ValueError("PINTEREST_EMAIL and PINTEREST_PASSWORD must be set.")

        async with self._lock:
            self.last_error = None
            client = PinterestClient(self.email, user_agent=self.user_agent)
            cred_path = self.credentials_path if save_credentials else None
            try:
                await client.login(
                    self._password,
                    cred_path=cred_path,
                    config=session_config(headless=headless),
                )
            except PersistenceError as e:
                # The login itself succeeded; keep the session.
                self._install(client)
                self.last_error = str(e)
                raise
            except Exception as e:
                self.last_error = str(e)
                raise
            self._install(client)

    def load_credentials(self):
        """Restore the client from the saved credentials file."""
        client = PinterestClient.from_credentials_file(
            self.email, self.credentials_path, user_agent=self.user_agent
        )
        self.last_error = None
        self._install(client)

    def logout(self):
        self.client = None
        self.last_error = None

    def _install(self, client: PinterestClient):
        self.client = client
        self.last_login_time = datetime.now(timezone.utc).isoformat()
        logger.info(f"Session active with {client.cookie_count} cookies.")


# ── HTTP Handlers ────────────────────────────────────────────────────────────


def _flag(value, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


async def handle_login(request: web.Request) -> web.Response:
    mgr: SessionManager = request.app["manager"]
    body = await request.json() if request.content_length else {}
    if not isinstance(body, dict):
        return web.json_response({"error": "Request body must be a JSON object."}, status=400)
    headless = _flag(body.get("headless"), BROWSER_HEADLESS)
    save_credentials = _flag(body.get("save_credentials"), True)

    try:
        await mgr.login(headless=headless, save_credentials=save_credentials)
    except ValueError as e:
        return web.json_response({"error": str(e)}, status=400)
    except AuthenticationError as e:
        logger.warning(f"Login rejected: {e}")
        return web.json_response({"error": str(e)}, status=401)
    except (DriverError, ConfigBuildError) as e:
        logger.error(f"Browser login failed: {e}", exc_info=True)
        return web.json_response({"error": str(e)}, status=502)
    except MissingRequiredToken as e:
        logger.error(f"Login returned no usable token: {e}")
        return web.json_response({"error": str(e)}, status=500)
    except PersistenceError as e:
        logger.warning(f"Logged in but could not save credentials: {e}")
        status = mgr.status("Logged in, but the credentials file could not be written.")
        return web.json_response(status.model_dump())

    status = mgr.status("Successfully logged in.")
    return web.json_response(status.model_dump())


async def handle_load_credentials(request: web.Request) -> web.Response:
    mgr: SessionManager = request.app["manager"]

    try:
        mgr.load_credentials()
    except (PersistenceError, MissingRequiredToken) as e:
        logger.warning(f"Could not restore session: {e}")
        return web.json_response({"error": str(e)}, status=400)

    status = mgr.status(f"Session restored from {mgr.credentials_path}.")
    return web.json_response(status.model_dump())


async def handle_status(request: web.Request) -> web.Response:
    mgr: SessionManager = request.app["manager"]
    return web.json_response(mgr.status().model_dump())


async def handle_logout(request: web.Request) -> web.Response:
    mgr: SessionManager = request.app["manager"]
    mgr.logout()
    return web.json_response(
        {"message": "Session cleared. The credentials file was left in place."}
    )


# ── App Factory ──────────────────────────────────────────────────────────────


async def on_startup(app: web.Application):
    ensure_dirs()
    app.setdefault("manager", SessionManager())
    logger.info(f"Session Manager started on {SESSION_MANAGER_HOST}:{SESSION_MANAGER_PORT}")


async def on_cleanup(app: web.Application):
    app["manager"].logout()
    logger.info("Session Manager stopped.")


def create_app(manager: Optional[SessionManager] = None) -> web.Application:
    app = web.Application()
    if manager is not None:
        app["manager"] = manager
    app.on_startup.append(on_startup)
    app.on_cleanup.append(on_cleanup)

    app.router.add_post("/login", handle_login)
    app.router.add_post("/load-credentials", handle_load_credentials)
    app.router.add_get("/status", handle_status)
    app.router.add_post("/logout", handle_logout)

    return app


def main():
    """Run the session manager as a standalone HTTP service."""
    app = create_app()
    web.run_app(app, host=SESSION_MANAGER_HOST, port=SESSION_MANAGER_PORT)


if __name__ == "__main__":
    main()
