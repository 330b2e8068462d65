"""Tests for the default Pinterest login bot against a fake page."""

import unittest

from pinterest_login.constants import PINTEREST_LOGIN_URL, SELECTORS
from pinterest_login.errors import (
    AuthenticationError,
    DriverError,
    ElementNotFound,
    NavigationError,
)
from pinterest_login.session_manager.login_bot import DefaultLoginBot, LoginBot, same_page

from .fakes import LOGIN_FORM, FakePage


class TestSamePage(unittest.TestCase):
    def test_ignores_www_and_trailing_slash(self):
        self.assertTrue(same_page("https://pinterest.com/login", PINTEREST_LOGIN_URL))
        self.assertTrue(same_page("https://www.pinterest.com/login/", PINTEREST_LOGIN_URL))

    def test_ignores_query_string(self):
        self.assertTrue(
            same_page("https://www.pinterest.com/login/?referrer=home_page", PINTEREST_LOGIN_URL)
        )

    def test_different_path_or_host(self):
        self.assertFalse(same_page("https://www.pinterest.com/", PINTEREST_LOGIN_URL))
        self.assertFalse(same_page("https://example.com/login/", PINTEREST_LOGIN_URL))


class TestDefaultLoginBot(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.bot = DefaultLoginBot("user@example.com", "hunter2")

    async def test_fill_login_form_sets_both_inputs(self):
        page = FakePage()
        await self.bot.fill_login_form(page)

        self.assertEqual(page.values[SELECTORS["login_email"]], "user@example.com")
        self.assertEqual(page.values[SELECTORS["login_password"]], "hunter2")
        self.assertEqual(page.clicks, [SELECTORS["login_email"], SELECTORS["login_password"]])

    async def test_fill_login_form_missing_input(self):
        page = FakePage(elements=LOGIN_FORM - {SELECTORS["login_password"]})

        with self.assertRaises(ElementNotFound) as ctx:
            await self.bot.fill_login_form(page)
        self.assertEqual(ctx.exception.selector, SELECTORS["login_password"])
        self.assertIsInstance(ctx.exception, DriverError)

    async def test_fill_login_form_waits_for_load(self):
        page = FakePage(load_fails=True)

        with self.assertRaises(NavigationError):
            await self.bot.fill_login_form(page)
        self.assertEqual(page.values, {})

    async def test_submit_clicks_button(self):
        page = FakePage()
        await self.bot.submit_login_form(page)

        self.assertEqual(page.clicks, [SELECTORS["login_submit"]])
        self.assertEqual(page.url, "https://www.pinterest.com/")

    async def test_submit_missing_button(self):
        page = FakePage(elements={SELECTORS["login_email"], SELECTORS["login_password"]})

        with self.assertRaises(ElementNotFound):
            await self.bot.submit_login_form(page)

    async def test_check_login_success_when_url_changes(self):
        page = FakePage()
        page.url = "https://www.pinterest.com/homefeed/"

        await self.bot.check_login(page)

    async def test_check_login_rejected_when_still_on_login_page(self):
        page = FakePage()
        page.url = "https://www.pinterest.com/login/?referrer=home_page"

        with self.assertRaises(AuthenticationError):
            await self.bot.check_login(page)

    async def test_check_login_without_url(self):
        for url in ("", "about:blank"):
            with self.subTest(url=url):
                page = FakePage()
                page.url = url
                with self.assertRaises(AuthenticationError):
                    await self.bot.check_login(page)

    async def test_check_login_accepts_challenge_page(self):
        # Any URL other than the login page counts as success.
        page = FakePage()
        page.url = "https://www.pinterest.com/verify/"

        await self.bot.check_login(page)

    def test_password_not_in_repr(self):
        self.assertNotIn("hunter2", repr(self.bot._credentials))

    def test_login_bot_is_abstract(self):
        with self.assertRaises(TypeError):
            LoginBot()


if __name__ == "__main__":
    unittest.main()
