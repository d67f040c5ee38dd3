"""Playwright launcher for the WhatsApp Web page."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import httpx
from playwright.async_api import async_playwright

logger = logging.getLogger(__name__)

PAGE_HELPERS = "js/injected.js"

WAIT_STORE = "async () => { await Promise.all(Object.values(window.Store.promises)); return true; }"


@dataclass
class BrowserSession:
    playwright: Any
    browser: Any
    context: Any
    page: Any

    async def close(self) -> None:
        try:
            if self.context is not None:
                await self.context.close()
            if self.browser is not None:
                await self.browser.close()
        finally:
            await self.playwright.stop()


async def _open_page(playwright: Any, options: dict[str, Any]) -> BrowserSession:
    browser_type = getattr(playwright, options.get("browser") or "chromium")
    launch_options = {
        "headless": options.get("headless", True),
        **(options.get("launch_options") or {}),
        "args": list(options.get("args") or []),
    }
    user_agent = options.get("user_agent")

    if options.get("browser_ws"):
        browser = await browser_type.connect(options["browser_ws"])
        context = await browser.new_context(user_agent=user_agent, bypass_csp=True)
        return BrowserSession(playwright, browser, context, await context.new_page())

    session_name = options.get("session_name")
    if session_name:
        user_data_dir = os.path.join(os.path.abspath(options.get("session_path") or "./.wajs_auth"), session_name)
        os.makedirs(user_data_dir, exist_ok=True)
        context = await browser_type.launch_persistent_context(
            user_data_dir, user_agent=user_agent, bypass_csp=True, **launch_options
        )
        page = context.pages[0] if context.pages else await context.new_page()
        return BrowserSession(playwright, None, context, page)

    browser = await browser_type.launch(**launch_options)
    context = await browser.new_context(user_agent=user_agent, bypass_csp=True)
    return BrowserSession(playwright, browser, context, await context.new_page())


async def fetch_wa_js(options: dict[str, Any], http: httpx.AsyncClient | None = None) -> str:
    """Returns the wa-js bundle source, from ``wa_js_path`` when set, otherwise downloaded from ``wa_js_url``."""
    path = options.get("wa_js_path")
    if path:
        return await asyncio.to_thread(Path(path).read_text, encoding="utf-8")

    owned = http is None
    http = http or httpx.AsyncClient(follow_redirects=True)
    try:
        response = await http.get(options["wa_js_url"])
        response.raise_for_status()
        return response.text
    finally:
        if owned:
            await http.aclose()


def load_page_helpers() -> str:
    return resources.files("wajs.infra").joinpath(PAGE_HELPERS).read_text(encoding="utf-8")


async def prepare_page(page: Any, options: dict[str, Any], wa_js_source: str) -> None:
    """Loads WhatsApp Web into ``page`` and installs ``window.WPP``, ``window.Store`` and ``window.WAJS``.

    ``init_scripts`` are extra file paths added as script tags after wa-js and
    before the page helpers run.
    """
    page.set_default_timeout(0)
    await page.goto(options["web_url"], wait_until="load", timeout=0, referer="https://whatsapp.com/")

    await page.wait_for_function("() => window.Debug && window.Debug.VERSION", timeout=0)
    version = await page.evaluate("() => window.Debug.VERSION")
    logger.info("whatsapp web loaded version=%s", version, extra={"event": "page_loaded"})

    await page.add_script_tag(content=wa_js_source)
    for script_path in options.get("init_scripts") or []:
        await page.add_script_tag(path=script_path)

    await page.wait_for_function("() => window.WPP && window.WPP.isReady", timeout=0)
    await page.add_script_tag(content=load_page_helpers())
    await page.evaluate(WAIT_STORE)
    logger.debug("page helpers installed", extra={"event": "helpers_ready"})


async def launch_page(options: dict[str, Any]) -> BrowserSession:
    """Starts Playwright and returns a session whose page is ready for the bridge."""
    wa_js_source = await fetch_wa_js(options)
    playwright = await async_playwright().start()
    try:
        session = await _open_page(playwright, options)
    except Exception:
        await playwright.stop()
        raise

    try:
        await prepare_page(session.page, options, wa_js_source)
    except Exception:
        await session.close()
        raise
    return session
