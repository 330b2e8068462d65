"""Log in to Pinterest through a real browser and reuse the cookies over HTTP."""

from .errors import (
    AuthenticationError,
    ConfigBuildError,
    DriverError,
    MissingRequiredToken,
    PersistenceError,
    PinterestLoginError,
)
from .session_manager.browser import build_session_config
from .session_manager.client import PinterestClient, apply, load_cookies, save_cookies
from .session_manager.login import login
from .session_manager.login_bot import DefaultLoginBot, LoginBot

__all__ = [
    "AuthenticationError",
    "ConfigBuildError",
    "DefaultLoginBot",
    "DriverError",
    "LoginBot",
    "MissingRequiredToken",
    "PersistenceError",
    "PinterestClient",
    "PinterestLoginError",
    "apply",
    "build_session_config",
    "load_cookies",
    "login",
    "save_cookies",
]
