"""Command line login: print the Pinterest session cookies as JSON."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import timedelta
from typing import Optional

from .config import (
    BROWSER_HEADLESS,
    BROWSER_LAUNCH_TIMEOUT,
    BROWSER_REQUEST_TIMEOUT,
    PINTEREST_EMAIL,
    PINTEREST_PASSWORD,
)
from .errors import PersistenceError, PinterestLoginError
from .session_manager.browser import build_session_config
from .session_manager.client import apply
from .session_manager.login import login
from .session_manager.login_bot import DefaultLoginBot

logging.basicConfig(
    stream=sys.stderr,
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger("pinterest-login")


def _seconds(value: str) -> timedelta:
    return timedelta(seconds=float(value))


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pinterest-login",
        description="Log in to Pinterest with PINTEREST_EMAIL / PINTEREST_PASSWORD "
        "and print the session cookies as JSON.",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        default=not BROWSER_HEADLESS,
        help="Show the browser window",
    )
    parser.add_argument(
        "--request-timeout",
        type=_seconds,
        default=BROWSER_REQUEST_TIMEOUT,
        metavar="SECONDS",
        help="Page action and navigation timeout (default: driver default)",
    )
    parser.add_argument(
        "--launch-timeout",
        type=_seconds,
        default=BROWSER_LAUNCH_TIMEOUT,
        metavar="SECONDS",
        help="Browser launch timeout (default: driver default)",
    )
    parser.add_argument("--save", metavar="PATH", help="Also save the cookies to PATH")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> dict[str, str]:
    config = build_session_config(
        headless=not args.headed,
        request_timeout=args.request_timeout,
        launch_timeout=args.launch_timeout,
    )
    bot = DefaultLoginBot(PINTEREST_EMAIL, PINTEREST_PASSWORD)
    return await login(bot, config)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    if not PINTEREST_EMAIL or not PINTEREST_PASSWORD:
        logger.error("PINTEREST_EMAIL and PINTEREST_PASSWORD must be set.")
        return 2

    exit_code = 0
    try:
        cookies = asyncio.run(run(args))
        apply(cookies, cred_path=args.save)
    except PersistenceError as e:
        # Login succeeded; only saving the cookies failed.
        logger.warning(f"Logged in, but the cookies were not saved: {e}")
        exit_code = 3
    except PinterestLoginError as e:
        logger.error(f"The login was unsuccessful: {e}")
        return 1

    print(json.dumps(cookies, indent=2))
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
