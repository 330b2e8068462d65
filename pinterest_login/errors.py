"""Exception hierarchy for the login flow and the authenticated client."""

from __future__ import annotations

from typing import Any, Optional


class PinterestLoginError(Exception):
    """Base class for every error raised by this package."""


class DriverError(PinterestLoginError):
    """Browser launch, navigation or protocol failure reported by the driver."""


class NavigationError(DriverError):
    """A page load did not settle within the navigation timeout."""


class ElementNotFound(DriverError):
    """A login form element could not be located."""

    def __init__(self, selector: str, message: str = ""):
        self.selector = selector
        super().__init__(message or f"Element not found: {selector}")


class ConfigBuildError(PinterestLoginError):
    """The browser driver rejected the session configuration."""


class AuthenticationError(PinterestLoginError):
    """The site rejected the submitted credentials."""

    def __init__(self, message: str = "The email or password you entered is incorrect."):
        super().__init__(f"Authentication error: {message}")


class MissingRequiredToken(PinterestLoginError):
    """Login returned cookies but the CSRF token cookie is absent."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"The {name} token was not found in the cookies")


class PersistenceError(PinterestLoginError):
    """Reading or writing the credentials file failed.

    When raised after a successful login, ``state`` holds the client state
    that was built before the write failed.
    """

    def __init__(self, message: str, state: Optional[Any] = None):
        self.state = state
        super().__init__(message)


class CredentialsFileNotFound(PersistenceError):
    """The credentials file path does not exist."""


class InvalidCredentialsFile(PersistenceError):
    """The credentials file is not a JSON object of string cookie values."""
