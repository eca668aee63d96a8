"""Playwright-backed rendering agent (headless Chromium).

A local browser is installed once per factory and launched per session;
with a remote endpoint configured, sessions connect to it instead and the
local installation is skipped.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from playwright.async_api import (
    Browser,
    BrowserContext,
    ConsoleMessage,
    Page,
    Playwright,
    Route,
    async_playwright,
)
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from c4render.core.config.models import BrowserConfig
from c4render.core.errors import AgentError, AgentTimeoutError
from c4render.core.rendering.agent.origin import VirtualOrigin
from c4render.core.rendering.agent.protocols import (
    AgentCommand,
    AgentResponse,
    BecameVisible,
    ChangeView,
    DiscoverViews,
    ExportSvg,
    Navigate,
    Navigated,
    SvgExported,
    ViewChanged,
    ViewsDiscovered,
    WaitVisible,
)
from c4render.core.utils.logging import get_renderer_logger
from c4render.core.utils.process import run_process

logger = logging.getLogger(__name__)

INSTALL_ARGS = ["install", "chromium", "--with-deps", "--only-shell"]
INSTALL_TIMEOUT_S = 900.0


class PlaywrightAgent:
    """Rendering agent driving one Playwright page."""

    def __init__(self, context: BrowserContext, page: Page) -> None:
        self.context = context
        self.page = page
        self._origin: VirtualOrigin | None = None

    async def mount(self, origin: VirtualOrigin) -> None:
        """Route every request through the virtual origin resolver."""
        self._origin = origin
        await self.context.route("**/*", self._handle_route)

    async def _handle_route(self, route: Route) -> None:
        url = route.request.url
        if self._origin is None or not self._origin.handles(url):
            await route.continue_()
            return

        response = self._origin.resolve(url)
        await route.fulfill(
            status=response.status,
            body=response.body,
            content_type=response.content_type,
            headers=response.headers or None,
        )

    async def execute(self, command: AgentCommand) -> AgentResponse:
        """Execute one command against the page."""
        try:
            if isinstance(command, Navigate):
                result = await self.page.goto(command.url)
                return Navigated(url=command.url, status=result.status if result else None)

            if isinstance(command, DiscoverViews):
                views = await self.page.evaluate("() => resolveViews()")
                if views is not None and not isinstance(views, dict):
                    raise AgentError(f"resolveViews() returned {type(views).__name__}, not a mapping")
                return ViewsDiscovered(views={str(k): str(v) for k, v in (views or {}).items()})

            if isinstance(command, ChangeView):
                await self.page.evaluate("(k) => changeView(k)", command.view_key)
                return ViewChanged(view_key=command.view_key)

            if isinstance(command, WaitVisible):
                await self.page.locator(command.selector).wait_for(
                    state="visible", timeout=command.timeout_ms
                )
                return BecameVisible(selector=command.selector)

            if isinstance(command, ExportSvg):
                svg = await self.page.evaluate("() => exportSvg()")
                return SvgExported(svg=svg if isinstance(svg, str) else None)

        except PlaywrightTimeoutError as e:
            raise AgentTimeoutError(f"Timed out executing {type(command).__name__}", cause=e) from e
        except PlaywrightError as e:
            raise AgentError(f"Agent failed executing {type(command).__name__}", cause=e) from e

        raise AgentError(f"Unsupported agent command: {command!r}")


class PlaywrightAgentFactory:
    """
    Opens Playwright agent sessions.

    Holds the one-time browser installation state, so one factory should be
    reused for the lifetime of its renderer.
    """

    def __init__(self, config: BrowserConfig | None = None) -> None:
        self.config = config or BrowserConfig()
        self._installed = False

    @property
    def is_remote(self) -> bool:
        """True when sessions connect to a pre-existing remote browser."""
        return bool(self.config.ws_endpoint and self.config.ws_endpoint.strip())

    async def ensure_installed(self) -> None:
        """Install Chromium once (skipped for remote browsers or when disabled)."""
        if self._installed or self.is_remote or not self.config.install_browser:
            return

        logger.info("Installing Chromium via Playwright")
        result = await asyncio.to_thread(
            run_process,
            [sys.executable, "-m", "playwright", *INSTALL_ARGS],
            timeout_s=INSTALL_TIMEOUT_S,
        )
        if result.returncode != 0:
            logger.warning(
                f"Chromium installation exited with code {result.returncode}: {result.stderr.strip()}"
            )
        self._installed = True

    async def _obtain_browser(self, pw: Playwright) -> Browser:
        if self.is_remote:
            logger.info("Connecting to Playwright Browser")
            return await pw.chromium.connect(
                self.config.ws_endpoint, timeout=self.config.connect_timeout_ms
            )
        logger.info("Launching local Chromium")
        return await pw.chromium.launch(headless=self.config.headless)

    @asynccontextmanager
    async def open(self) -> AsyncIterator[PlaywrightAgent]:
        """Open a browser session with one page.

        Raises:
            AgentError: If the browser cannot be launched or reached
        """
        await self.ensure_installed()

        try:
            async with async_playwright() as pw:
                browser = await self._obtain_browser(pw)
                try:
                    context = await browser.new_context(
                        viewport={
                            "width": self.config.viewport_width,
                            "height": self.config.viewport_height,
                        }
                    )
                    page = await context.new_page()
                    page.on("console", _log_console_message)
                    page.on("pageerror", _log_page_error)
                    yield PlaywrightAgent(context, page)
                finally:
                    await browser.close()
        except PlaywrightError as e:
            raise AgentError("Browser session failed", cause=e) from e


def _log_console_message(message: ConsoleMessage) -> None:
    get_renderer_logger().debug(f"[console.{message.type}] {message.text}")


def _log_page_error(error: object) -> None:
    get_renderer_logger().warning(f"[pageerror] {error}")
