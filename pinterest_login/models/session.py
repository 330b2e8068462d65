"""Pydantic models for browser sessions, credentials and session state."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class Credentials(BaseModel):
    """Login identifier and secret, held only for one login attempt."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    secret: SecretStr


class SessionConfiguration(BaseModel):
    """How a browser instance is launched. Built once per login attempt.

    A ``None`` timeout means the driver's own default applies.
    """

    model_config = ConfigDict(frozen=True)

    headless: bool = True
    request_timeout: Optional[timedelta] = None
    launch_timeout: Optional[timedelta] = None
    launch_options: dict[str, Any] = Field(default_factory=dict)

    @property
    def request_timeout_ms(self) -> Optional[float]:
        if self.request_timeout is None:
            return None
        return self.request_timeout.total_seconds() * 1000


class SessionStatus(BaseModel):
    """Current state of the authenticated session."""

    is_authenticated: bool = False
    state: str = "logged_out"  # logged_out, logging_in, active, error
    cookie_count: int = 0
    last_login_time: Optional[str] = None
    message: str = ""
    error: Optional[str] = None
