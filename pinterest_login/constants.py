"""Pinterest URLs, login form selectors, and request header values."""

# ── URLs ─────────────────────────────────────────────────────────────────────

PINTEREST_BASE_URL = "https://www.pinterest.com"
PINTEREST_LOGIN_URL = f"{PINTEREST_BASE_URL}/login/"

# ── Login Form Selectors ─────────────────────────────────────────────────────

SELECTORS = {
    "login_email": "input#email",
    "login_password": "input#password",
    "login_submit": "button[type='submit']",
}

# ── Cookies ──────────────────────────────────────────────────────────────────

CSRF_COOKIE_NAME = "csrftoken"

# ── Request Headers ──────────────────────────────────────────────────────────

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/91.0.4472.114 Safari/537.36"
)

CSRF_HEADER = "X-CSRFToken"

STATIC_HEADERS = {
    "Referer": PINTEREST_BASE_URL,
    "X-Requested-With": "XMLHttpRequest",
    "Accept": "application/json",
    "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
}

# ── Browser Context ──────────────────────────────────────────────────────────

VIEWPORT = {"width": 1366, "height": 768}

# Context events forwarded to the session's event queue.
BROWSER_EVENTS = ("page", "request", "response", "requestfailed", "console", "close")
