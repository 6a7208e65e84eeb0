"""Playwright-backed render session for the chat web app.

One Chromium instance per session: jobs never share a browser.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from urllib.parse import quote, urlsplit

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from chatforge.config import Settings
from chatforge.generate.completion import (
    LOADING_INDICATOR_SELECTOR,
    RESULT_FRAME_SELECTOR,
    completion_predicate,
)
from chatforge.generate.errors import (
    AcquisitionFailure,
    AuthInjectionFailure,
    InputNotFound,
    NavigationTimeout,
)
from chatforge.session.base import ControlDescriptor

logger = logging.getLogger(__name__)

INPUT_SELECTOR = 'textarea#chat-input, textarea[placeholder*="Message"], textarea'

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]

_INJECT_TOKEN_JS = """([token, domain]) => {
    localStorage.setItem('token', token);
    localStorage.setItem('access_token', token);
    document.cookie = `token=${token}; path=/; domain=${domain}; secure; samesite=strict`;
    document.cookie = `access_token=${token}; path=/; domain=${domain}; secure; samesite=strict`;
}"""

_SET_INPUT_JS = """([selector, text]) => {
    const el = document.querySelector(selector);
    if (el) el.value = text;
}"""

_COMPLETION_STATE_JS = """([loadingSel, resultSel]) => {
    const dots = document.querySelector(loadingSel);
    return {
        loadingDisplay: dots ? window.getComputedStyle(dots).display : null,
        hasResult: !!document.querySelector(resultSel),
    };
}"""

_ACTIVATE_JS = """([containerSel, controlSel]) => {
    const container = document.querySelector(containerSel);
    const control = container ? container.querySelector(controlSel) : null;
    if (!control) return false;
    control.click();
    return true;
}"""

_READ_SRCDOC_JS = """(resultSel) => {
    const frame = document.querySelector(resultSel);
    return frame ? frame.getAttribute('srcdoc') : null;
}"""


def _origin(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


def chat_url(target_url: str, prompt: str) -> str:
    """Chat URL with the prompt pre-seeded as a query parameter."""
    base = target_url.rstrip("/") + "/"
    return f"{base}?prompt={quote(prompt, safe='')}"


class PlaywrightSession:
    """RenderSession over a single Playwright page."""

    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
        settings: Settings,
    ):
        self._playwright = playwright
        self._browser = browser
        self._context = context
        self.page = page
        self._settings = settings
        self._released = False

    async def authenticate(self, credential: str) -> None:
        s = self._settings
        try:
            await self.page.goto(
                s.chatforge_login_url,
                wait_until="domcontentloaded",
                timeout=s.chatforge_login_timeout_ms,
            )
            await self.page.evaluate(_INJECT_TOKEN_JS, [credential, s.chatforge_cookie_domain])
        except PlaywrightError as e:
            raise AuthInjectionFailure(str(e)) from e

    async def submit_prompt(self, text: str) -> None:
        s = self._settings
        url = chat_url(s.chatforge_target_url, text)
        try:
            await self.page.goto(url, wait_until="domcontentloaded", timeout=s.chatforge_navigation_timeout_ms)
        except PlaywrightTimeoutError as e:
            raise NavigationTimeout(f"Navigation to {s.chatforge_target_url} timed out") from e
        except PlaywrightError as e:
            raise NavigationTimeout(f"Navigation failed: {e}") from e

        try:
            await self.page.wait_for_selector(INPUT_SELECTOR, timeout=s.chatforge_input_timeout_ms)
        except PlaywrightTimeoutError as e:
            raise InputNotFound(
                f"Input field not found within {s.chatforge_input_timeout_ms} ms"
            ) from e

        await self.page.click(INPUT_SELECTOR)
        await self.page.evaluate(_SET_INPUT_JS, [INPUT_SELECTOR, text])
        # One real keystroke so the app's change detection sees the value
        await self.page.type(INPUT_SELECTOR, " ", delay=1)
        await asyncio.sleep(s.chatforge_input_settle_ms / 1000)
        await self.page.keyboard.press("Enter")

    async def is_complete(self) -> bool:
        state = await self.page.evaluate(
            _COMPLETION_STATE_JS, [LOADING_INDICATOR_SELECTOR, RESULT_FRAME_SELECTOR]
        )
        return completion_predicate(state.get("loadingDisplay"), bool(state.get("hasResult")))

    async def find_and_activate(self, descriptor: ControlDescriptor) -> bool:
        return bool(await self.page.evaluate(_ACTIVATE_JS, [descriptor.container, descriptor.control]))

    async def read_artifact_attribute(self) -> str | None:
        return await self.page.evaluate(_READ_SRCDOC_JS, RESULT_FRAME_SELECTOR)

    async def dump_debug(self, directory: Path) -> list[Path]:
        directory.mkdir(parents=True, exist_ok=True)
        html_path = directory / "debug_page.html"
        html_path.write_text(await self.page.content(), encoding="utf-8")
        shot_path = directory / "extraction_failed.png"
        await self.page.screenshot(path=str(shot_path), full_page=True)
        return [html_path, shot_path]

    async def release(self) -> None:
        if self._released:
            return
        self._released = True
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()


class PlaywrightSessionFactory:
    """Launch a fresh Chromium per acquired session."""

    def __init__(self, settings: Settings):
        self._settings = settings

    async def acquire(self) -> PlaywrightSession:
        s = self._settings
        playwright = await async_playwright().start()
        try:
            browser = await playwright.chromium.launch(
                headless=s.chatforge_headless,
                executable_path=s.chatforge_browser_executable or None,
                args=BROWSER_ARGS,
            )
        except PlaywrightError as e:
            await playwright.stop()
            raise AcquisitionFailure(f"Browser launch failed: {e}") from e

        try:
            context = await browser.new_context(user_agent=s.chatforge_user_agent, no_viewport=True)
            await context.grant_permissions(
                ["clipboard-read", "clipboard-write"],
                origin=_origin(s.chatforge_target_url),
            )
            page = await context.new_page()
        except PlaywrightError as e:
            await browser.close()
            await playwright.stop()
            raise AcquisitionFailure(f"Browser page setup failed: {e}") from e

        logger.debug("Launched Chromium (headless=%s)", s.chatforge_headless)
        return PlaywrightSession(playwright, browser, context, page, s)
