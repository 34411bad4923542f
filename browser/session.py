import asyncio
import logging
from typing import Optional, Tuple

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright
from stagehand import Stagehand, StagehandConfig

from browser.errors import PreconditionFailure
from config import config


logger = logging.getLogger(__name__)


class BrowserSession:
    """
    One isolated browser page per test case.

    Used as ``async with BrowserSession() as page``; everything acquired on
    enter is closed on exit, whether the case passed or raised.
    """

    def __init__(self, backend: Optional[str] = None, headless: Optional[bool] = None):
        self.backend = backend or config.BROWSER_BACKEND
        self.headless = config.HEADLESS if headless is None else headless
        if self.backend not in ("playwright", "stagehand"):
            raise ValueError(f"Unknown browser backend: {self.backend}")

        self._playwright = None
        self._browser = None
        self._context = None
        self._stagehand = None
        self.page = None

    async def __aenter__(self):
        try:
            if self.backend == "stagehand":
                await self._start_stagehand()
            else:
                await self._start_playwright()
            await self.page.set_viewport_size(config.VIEWPORT)
        except BaseException:
            await self.close()
            raise
        return self.page

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
        return False

    async def _start_playwright(self):
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self.headless)
        self._context = await self._browser.new_context()
        self.page = await self._context.new_page()

    async def _start_stagehand(self):
        if not config.api_key:
            raise RuntimeError("GEMINI_API_KEY environment variable not set (needed by the stagehand backend)")
        stagehand_config = StagehandConfig(
            env="LOCAL",
            model_name=config.MODEL_NAME,
            model_api_key=config.api_key,
            ignore_https_errors=True,
            local_browser_launch_options={"headless": self.headless},
            verbose=1,
        )
        self._stagehand = Stagehand(stagehand_config)
        await self._stagehand.init()
        self.page = self._stagehand.page

    async def close(self):
        # Close in reverse order of acquisition; keep going if one step fails
        if self._stagehand is not None:
            try:
                await self._stagehand.close()
            except Exception as e:
                logger.warning(f"Stagehand close failed: {e}")
            self._stagehand = None

        for name in ("_context", "_browser"):
            resource = getattr(self, name)
            if resource is not None:
                try:
                    await resource.close()
                except PlaywrightError as e:
                    logger.warning(f"Closing {name.strip('_')} failed: {e}")
                setattr(self, name, None)

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except PlaywrightError as e:
                logger.warning(f"Stopping playwright failed: {e}")
            self._playwright = None
        self.page = None


async def open_target(page, url: Optional[str] = None):
    url = url or config.TARGET_URL
    logger.info(f"🚀 Opening {url}")
    try:
        await page.goto(url, wait_until="domcontentloaded", timeout=config.NAVIGATION_TIMEOUT_MS)
    except PlaywrightError as e:
        raise PreconditionFailure(f"Could not load {url}: {e}", locator=url) from e


async def locate_input(page, timeout_ms: Optional[int] = None):
    placeholder = config.INPUT_PLACEHOLDER
    input_field = page.get_by_placeholder(placeholder)
    try:
        await input_field.wait_for(state="visible", timeout=timeout_ms or config.VISIBILITY_TIMEOUT_MS)
    except PlaywrightError as e:
        raise PreconditionFailure(
            f"Input with placeholder {placeholder!r} not visible: {e}",
            locator=f"placeholder={placeholder}",
        ) from e
    return input_field


def locate_output(page):
    return page.locator(config.OUTPUT_SELECTOR).first


async def prepare_page(page, sleep=asyncio.sleep) -> Tuple[object, object]:
    """Navigate to the translator and return its (input, output) handles."""
    await open_target(page)
    input_field = await locate_input(page)
    await sleep(config.PAGE_READY_DELAY_MS / 1000)
    return input_field, locate_output(page)
