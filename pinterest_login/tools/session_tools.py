"""MCP tools for managing the Pinterest login session."""

from __future__ import annotations

import json

import httpx

from ..config import SESSION_MANAGER_URL


async def _call_session_manager(method: str, path: str, json_body: dict | None = None) -> dict:
    """Make a request to the session manager HTTP service."""
    url = f"{SESSION_MANAGER_URL}{path}"
    try:
        async with httpx.AsyncClient(timeout=300.0) as client:
            if method == "GET":
                resp = await client.get(url)
            else:
                resp = await client.post(url, json=json_body or {})

            if resp.status_code >= 400:
                data = resp.json()
                return {"error": data.get("error", f"HTTP {resp.status_code}")}
            return resp.json()

    except httpx.ConnectError:
        return {
            "error": "Session Manager is not reachable at "
            f"{SESSION_MANAGER_URL}. It should auto-start with the MCP server. "
            "If running standalone: python -m pinterest_login.session_manager"
        }
    except httpx.TimeoutException:
        return {"error": "Session Manager timed out. The browser login may still be running."}
    except Exception as e:
        return {"error": f"Failed to connect to Session Manager: {e}"}


async def login(headless: bool = True, save_credentials: bool = True) -> str:
    """Log in to Pinterest through the browser.

    Uses PINTEREST_EMAIL and PINTEREST_PASSWORD from the session manager's
    environment. Nothing is retried: a rejected password or a browser
    failure ends the attempt.

    Args:
        headless: If False, opens a visible browser window.
        save_credentials: Save the session cookies to the credentials file.

    Returns:
        Login result message.
    """
    result = await _call_session_manager(
        "POST", "/login", {"headless": headless, "save_credentials": save_credentials}
    )

    if "state" not in result:
        return f"Error: {result['error']}"

    message = result.get("message", "")
    if result.get("error"):
        return f"{message} Warning: {result['error']}"
    return f"{message} {result.get('cookie_count', 0)} cookies in session."


async def session_status() -> str:
    """Check whether the Pinterest session is authenticated.

    Returns:
        JSON-formatted session status.
    """
    result = await _call_session_manager("GET", "/status")

    if "state" not in result:
        return f"Error: {result['error']}"

    return json.dumps(result, indent=2)


async def load_credentials() -> str:
    """Restore the session from the saved credentials file.

    Returns:
        Status message.
    """
    result = await _call_session_manager("POST", "/load-credentials")

    if "state" not in result:
        return f"Error: {result['error']}"

    return result.get("message", "Session restored.")


async def logout() -> str:
    """Forget the authenticated session. The credentials file is kept.

    Returns:
        Confirmation message.
    """
    result = await _call_session_manager("POST", "/logout")

    if "error" in result:
        return f"Error: {result['error']}"

    return result.get("message", "Session cleared.")
