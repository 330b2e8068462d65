"""MCP Server entry point for the Pinterest login plugin.

Exposes 4 tools via the Model Context Protocol:
- tool_login: log in through a real browser and keep the session
- tool_session_status: report whether the session is authenticated
- tool_load_credentials: restore the session from the credentials file
- tool_logout: forget the session

The Session Manager HTTP service (aiohttp on localhost:8025) is auto-started
as part of the MCP server lifecycle; no separate process needed.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

from aiohttp.web import AppRunner, TCPSite
from mcp.server.fastmcp import FastMCP

from .config import SESSION_MANAGER_HOST, SESSION_MANAGER_PORT, ensure_dirs
from .tools.session_tools import load_credentials, login, logout, session_status

# Configure logging to stderr (stdout is reserved for MCP JSON-RPC)
logging.basicConfig(
    stream=sys.stderr,
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger("pinterest-login")

ensure_dirs()


# ── Lifespan: auto-start Session Manager ─────────────────────────────────────


@asynccontextmanager
async def lifespan(server: FastMCP):
    """Start the Session Manager HTTP service alongside the MCP server."""
    from .session_manager.manager import create_app

    app = create_app()
    runner = AppRunner(app)
    await runner.setup()
    site = TCPSite(runner, SESSION_MANAGER_HOST, SESSION_MANAGER_PORT)
    managed = False
    try:
        await site.start()
        logger.info(
            "Session Manager auto-started on %s:%s", SESSION_MANAGER_HOST, SESSION_MANAGER_PORT
        )
        managed = True
    except OSError:
        # Port already in use, assume Session Manager was started manually
        logger.info(
            "Session Manager already running on %s:%s", SESSION_MANAGER_HOST, SESSION_MANAGER_PORT
        )
        await runner.cleanup()

    try:
        yield {}
    finally:
        if managed:
            await runner.cleanup()
            logger.info("Session Manager stopped.")


# ── MCP Server ───────────────────────────────────────────────────────────────

mcp = FastMCP(
    "pinterest-login",
    lifespan=lifespan,
    instructions=(
        "Pinterest Login - Tools to obtain an authenticated Pinterest session. "
        "The Session Manager starts automatically with this server. "
        "Call tool_session_status to check if a session is active. "
        "If not, call tool_load_credentials to reuse saved cookies, or tool_login "
        "to log in through a real browser with the configured account. "
        "Login failures are not retried; call tool_login again if appropriate."
    ),
)


@mcp.tool()
async def tool_login(headless: bool = True, save_credentials: bool = True) -> str:
    """Log in to Pinterest with the configured account.

    Launches the Camoufox browser, fills and submits the login form, and
    keeps the resulting cookies for authenticated API requests.

    Args:
        headless: If False, opens a visible browser window.
        save_credentials: Save the cookies to the credentials file.
    """
    return await login(headless, save_credentials)


@mcp.tool()
async def tool_session_status() -> str:
    """Check if the Pinterest session is authenticated.

    Returns: session state, cookie count, last login time, last error.
    """
    return await session_status()


@mcp.tool()
async def tool_load_credentials() -> str:
    """Restore the Pinterest session from the saved credentials file."""
    return await load_credentials()


@mcp.tool()
async def tool_logout() -> str:
    """Forget the Pinterest session. The credentials file is kept."""
    return await logout()


# ── Entry Point ──────────────────────────────────────────────────────────────


def main():
    """Run the MCP server on STDIO transport."""
    logger.info("Starting Pinterest Login MCP server...")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
