"""Tests for the authenticated client adapter and cookie persistence."""

import json
import tempfile
import unittest
from pathlib import Path

from pinterest_login.constants import DEFAULT_USER_AGENT, PINTEREST_BASE_URL
from pinterest_login.errors import (
    CredentialsFileNotFound,
    InvalidCredentialsFile,
    MissingRequiredToken,
    PersistenceError,
)
from pinterest_login.models.session import SessionConfiguration
from pinterest_login.session_manager.client import (
    AuthenticatedClientState,
    PinterestClient,
    apply,
    build_request_headers,
    cookie_string,
    load_cookies,
    save_cookies,
)

from .fakes import FakePage, FakeSession

COOKIES = {"csrftoken": "abc123", "sessionid": "xyz"}
SITE_HOST = "www.pinterest.com"


class TestRequestHeaders(unittest.TestCase):
    def test_anonymous_headers(self):
        headers = build_request_headers()

        self.assertEqual(len(headers), 5)
        self.assertEqual(headers["User-Agent"], DEFAULT_USER_AGENT)
        self.assertNotIn("X-CSRFToken", headers)

    def test_authenticated_headers(self):
        headers = build_request_headers("agent/1.0", "tok")

        self.assertEqual(
            headers,
            {
                "User-Agent": "agent/1.0",
                "X-CSRFToken": "tok",
                "Referer": PINTEREST_BASE_URL,
                "X-Requested-With": "XMLHttpRequest",
                "Accept": "application/json",
                "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
            },
        )

    def test_cookie_string(self):
        self.assertEqual(cookie_string(COOKIES), "csrftoken=abc123;sessionid=xyz;")


class TestApply(unittest.TestCase):
    def test_default_user_agent_scenario(self):
        state = apply(COOKIES, user_agent=None)

        self.assertIsInstance(state, AuthenticatedClientState)
        self.assertEqual(state.headers["User-Agent"], DEFAULT_USER_AGENT)
        self.assertEqual(state.headers["X-CSRFToken"], "abc123")
        self.assertEqual(state.csrf_token, "abc123")
        self.assertEqual(state.cookies.get("csrftoken", domain=SITE_HOST), "abc123")
        self.assertEqual(state.cookies.get("sessionid", domain=SITE_HOST), "xyz")
        self.assertEqual({c.domain for c in state.cookies.jar}, {SITE_HOST})
        self.assertEqual(state.cookie_count, 2)

    def test_custom_user_agent(self):
        state = apply(COOKIES, user_agent="agent/2.0")
        self.assertEqual(state.headers["User-Agent"], "agent/2.0")

    def test_missing_token(self):
        with self.assertRaises(MissingRequiredToken):
            apply({"sessionid": "xyz"})

    def test_empty_token(self):
        with self.assertRaises(MissingRequiredToken):
            apply({"csrftoken": "", "sessionid": "xyz"})

    def test_saves_credentials(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "credentials.json"
            apply(COOKIES, cred_path=path)

            self.assertEqual(json.loads(path.read_text()), COOKIES)

    def test_save_failure_keeps_state(self):
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "not-a-dir"
            blocker.write_text("")

            with self.assertRaises(PersistenceError) as ctx:
                apply(COOKIES, cred_path=blocker / "credentials.json")

        self.assertIsInstance(ctx.exception.state, AuthenticatedClientState)
        self.assertEqual(ctx.exception.state.csrf_token, "abc123")


class TestCookiePersistence(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "credentials.json"

    def test_round_trip(self):
        save_cookies(COOKIES, self.path)
        self.assertEqual(load_cookies(self.path), COOKIES)

    def test_missing_file(self):
        with self.assertRaises(CredentialsFileNotFound):
            load_cookies(self.path)

    def test_invalid_json(self):
        self.path.write_text("{not json")
        with self.assertRaises(InvalidCredentialsFile):
            load_cookies(self.path)

    def test_wrong_shape(self):
        for content in ("[1, 2]", '{"csrftoken": 5}'):
            with self.subTest(content=content):
                self.path.write_text(content)
                with self.assertRaises(InvalidCredentialsFile):
                    load_cookies(self.path)


class TestPinterestClient(unittest.IsolatedAsyncioTestCase):
    def test_anonymous_client(self):
        client = PinterestClient("someone")

        self.assertFalse(client.is_authenticated)
        self.assertEqual(client.cookie_count, 0)
        self.assertNotIn("X-CSRFToken", client.state.headers)

    def test_client_from_token(self):
        client = PinterestClient("someone", csrf_token="tok", user_agent="agent/3.0")

        self.assertTrue(client.is_authenticated)
        self.assertEqual(client.state.headers["X-CSRFToken"], "tok")
        self.assertEqual(client.state.headers["User-Agent"], "agent/3.0")

    def test_explicit_token_overrides_cookie(self):
        client = PinterestClient(
            "someone", csrf_token="explicit", cookies={"csrftoken": "stale", "sessionid": "xyz"}
        )

        self.assertEqual(client.state.csrf_token, "explicit")
        self.assertEqual(client.state.headers["X-CSRFToken"], "explicit")
        self.assertEqual(client.state.cookies.get("csrftoken", domain=SITE_HOST), "explicit")
        self.assertEqual(client.cookie_count, 2)

    def test_from_credentials_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = save_cookies(COOKIES, Path(tmp) / "credentials.json")
            client = PinterestClient.from_credentials_file("someone", path)

        self.assertTrue(client.is_authenticated)
        self.assertEqual(client.cookie_count, 2)

    def test_from_credentials_file_without_token(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = save_cookies({"sessionid": "xyz"}, Path(tmp) / "credentials.json")
            with self.assertRaises(MissingRequiredToken):
                PinterestClient.from_credentials_file("someone", path)

    async def test_login_replaces_state(self):
        client = PinterestClient("someone")
        session = FakeSession()

        state = await client.login(
            "pw", config=SessionConfiguration(), launcher=session.launch
        )

        self.assertIs(client.state, state)
        self.assertTrue(client.is_authenticated)
        self.assertEqual(state.csrf_token, "abc123")
        self.assertEqual(session.page.values["input#password"], "pw")

    async def test_login_without_token_keeps_old_state(self):
        client = PinterestClient("someone")
        previous = client.state
        session = FakeSession(cookies=[{"name": "sessionid", "value": "xyz"}])

        with self.assertRaises(MissingRequiredToken):
            await client.login("pw", config=SessionConfiguration(), launcher=session.launch)
        self.assertIs(client.state, previous)

    async def test_login_save_failure_installs_state(self):
        client = PinterestClient("someone")
        session = FakeSession(page=FakePage())

        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file"
            blocker.write_text("")
            with self.assertRaises(PersistenceError):
                await client.login(
                    "pw",
                    cred_path=blocker / "credentials.json",
                    config=SessionConfiguration(),
                    launcher=session.launch,
                )

        self.assertTrue(client.is_authenticated)

    async def test_http_client_carries_headers_and_cookies(self):
        client = PinterestClient("someone", csrf_token="abc123", cookies=COOKIES)

        async with client.http_client() as http:
            self.assertEqual(http.headers["X-CSRFToken"], "abc123")
            self.assertEqual(http.cookies.get("sessionid", domain=SITE_HOST), "xyz")


if __name__ == "__main__":
    unittest.main()
