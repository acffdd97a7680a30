"""
Portal submitter.

Drives a real browser to fill the logo upload form with a CompanyProfile.
The browser sits behind BrowserSession so the form logic does not depend on
Playwright directly; tests swap in a fake session.

Every exit path closes the browser: Submitter is an async context manager and
launch() cleans up after itself when startup fails.
"""

import abc
import logging
from contextlib import contextmanager
from typing import Callable, Optional

from playwright.async_api import Browser, Error as PlaywrightError, Page, Playwright, Response
from playwright.async_api import TimeoutError as PlaywrightTimeout
from playwright.async_api import async_playwright

from . import config
from .errors import SubmissionError
from .models import CompanyProfile, SubmitResult, SubmitStatus

logger = logging.getLogger(__name__)

FILE_INPUT = 'input[type="file"]'
SUBMIT_BUTTON = "button[type='submit']"

# profile attribute -> form selector, typed in this order
FORM_FIELDS = (
    ("company_name", 'input[name="name"]'),
    ("sector", 'input[name="sector"]'),
    ("industry", 'input[name="industry"]'),
    ("employees", 'input[name="emp_number"]'),
    ("location", 'textarea[name="address"]'),
    ("description", 'textarea[name="info"]'),
    ("website", 'input[name="web_link"]'),
)

# social platform -> form selector, typed only when the link was discovered
SOCIAL_FIELDS = {
    "linkedin": 'input[name="linkedin_link"]',
    "twitter": 'input[name="twitter_link"]',
    "facebook": 'input[name="face_link"]',
    "instagram": 'input[name="insta_link"]',
    "youtube": 'input[name="youtube_link"]',
}


# ============================================================================
# AUTOMATION ABSTRACTION
# ============================================================================

class BrowserSession(abc.ABC):
    """Operations the submitter needs from a browser automation backend."""

    @abc.abstractmethod
    async def start(self) -> None: ...

    @abc.abstractmethod
    async def goto_idle(self, url: str) -> None:
        """Navigate and wait until the network is idle."""

    @abc.abstractmethod
    async def type_text(self, selector: str, value: str) -> None: ...

    @abc.abstractmethod
    async def set_file(self, selector: str, path: str) -> None:
        """Push a local file into a file input. SubmissionError if the input is absent."""

    @abc.abstractmethod
    async def simulate_event(self, selector: str, event_type: str) -> None:
        """Dispatch a synthetic, bubbling DOM event on the element."""

    @abc.abstractmethod
    async def submit_and_confirm(self, selector: str, url_fragment: str) -> SubmitResult:
        """Click and wait for a 2xx response whose URL contains url_fragment, as one step."""

    @abc.abstractmethod
    async def close(self) -> None: ...


@contextmanager
def _as_submission_error(step: str):
    try:
        yield
    except PlaywrightTimeout as e:
        raise SubmissionError(f"Timed out during {step}: {e}") from e
    except PlaywrightError as e:
        raise SubmissionError(f"{step} failed: {e}") from e


class PlaywrightSession(BrowserSession):
    """Chromium via playwright.async_api; headed unless PORTAL_SYNC_HEADLESS is set."""

    def __init__(self, headless: bool = config.HEADLESS,
                 navigation_timeout: int = config.NAVIGATION_TIMEOUT,
                 action_timeout: int = config.ACTION_TIMEOUT,
                 submit_timeout: int = config.SUBMIT_TIMEOUT):
        self.headless = headless
        self.navigation_timeout = navigation_timeout
        self.action_timeout = action_timeout
        self.submit_timeout = submit_timeout
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self.page: Optional[Page] = None

    async def start(self) -> None:
        with _as_submission_error("browser launch"):
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self.headless)
            context = await self._browser.new_context(no_viewport=True)
            self.page = await context.new_page()
        self.page.set_default_timeout(self.action_timeout)
        self.page.set_default_navigation_timeout(self.navigation_timeout)

    async def goto_idle(self, url: str) -> None:
        with _as_submission_error(f"navigation to {url}"):
            await self.page.goto(url, wait_until="networkidle", timeout=self.navigation_timeout)

    async def type_text(self, selector: str, value: str) -> None:
        with _as_submission_error(f"typing into {selector}"):
            await self.page.locator(selector).fill(value)

    async def set_file(self, selector: str, path: str) -> None:
        with _as_submission_error("file upload"):
            file_input = await self.page.query_selector(selector)
            if file_input is None:
                raise SubmissionError(f"File input not found ({selector})")
            await file_input.set_input_files(path)

    async def simulate_event(self, selector: str, event_type: str) -> None:
        with _as_submission_error(f"{event_type} event on {selector}"):
            await self.page.dispatch_event(selector, event_type, {"bubbles": True})

    async def submit_and_confirm(self, selector: str, url_fragment: str) -> SubmitResult:
        try:
            button = await self.page.wait_for_selector(selector, state="visible")
        except PlaywrightError as e:
            return SubmitResult(status=SubmitStatus.FAILURE, detail=f"Submit control {selector} not found: {e}")

        def matches(response: Response) -> bool:
            return url_fragment in response.url and response.ok

        try:
            async with self.page.expect_response(matches, timeout=self.submit_timeout) as response_info:
                await button.click()
            response = await response_info.value
        except PlaywrightTimeout as e:
            return SubmitResult(status=SubmitStatus.TIMEOUT,
                                detail=f"No 2xx response matching {url_fragment!r} within {self.submit_timeout}ms: {e}")
        except PlaywrightError as e:
            return SubmitResult(status=SubmitStatus.FAILURE, detail=str(e))

        return SubmitResult(status=SubmitStatus.SUCCESS, detail=response.url, status_code=response.status)

    async def close(self) -> None:
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as e:
                logger.warning(f"⚠️  Browser close failed: {e}")
            self._browser = None
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except PlaywrightError as e:
                logger.warning(f"⚠️  Playwright stop failed: {e}")
            self._playwright = None
        self.page = None


# ============================================================================
# SUBMITTER
# ============================================================================

class Submitter:
    """Fills and submits the upload form for one profile."""

    def __init__(self, session_factory: Callable[[], BrowserSession] = PlaywrightSession,
                 upload_url: str = config.UPLOAD_URL,
                 response_fragment: str = config.UPLOAD_RESPONSE_FRAGMENT):
        self.session_factory = session_factory
        self.upload_url = upload_url
        self.response_fragment = response_fragment
        self.session: Optional[BrowserSession] = None

    async def __aenter__(self) -> "Submitter":
        await self.launch()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _require_session(self) -> BrowserSession:
        if self.session is None:
            raise SubmissionError("Browser session not launched")
        return self.session

    async def launch(self) -> None:
        """Start the browser and open the upload page."""
        self.session = self.session_factory()
        try:
            await self.session.start()
            logger.info(f"🧭 Opening {self.upload_url}")
            await self.session.goto_idle(self.upload_url)
        except BaseException:
            await self.close()
            raise

    async def fill_form(self, profile: CompanyProfile) -> None:
        session = self._require_session()
        for attr, selector in FORM_FIELDS:
            await session.type_text(selector, getattr(profile, attr) or "")
        for platform, selector in SOCIAL_FIELDS.items():
            link = profile.social_links.get(platform)
            if link:
                await session.type_text(selector, link)
        logger.info(f"  ✍️  Filled form for {profile.company_name}")

    async def upload_file(self, path: str) -> None:
        """Attach the logo, then fire `change` for handlers that only listen to that event."""
        session = self._require_session()
        await session.set_file(FILE_INPUT, path)
        await session.simulate_event(FILE_INPUT, "change")
        logger.info(f"  📎 Attached {path}")

    async def submit(self) -> SubmitResult:
        session = self._require_session()
        result = await session.submit_and_confirm(SUBMIT_BUTTON, self.response_fragment)
        if not result.ok:
            raise SubmissionError(f"Upload not confirmed ({result.status.value}): {result.detail}", result)
        logger.info(f"🚀 Uploaded to portal (HTTP {result.status_code})")
        return result

    async def close(self) -> None:
        if self.session is None:
            return
        session, self.session = self.session, None
        await session.close()

    async def submit_profile(self, profile: CompanyProfile) -> SubmitResult:
        """launch -> fill -> upload -> submit; the browser is closed on every path."""
        if not profile.has_logo:
            raise SubmissionError(f"No logo artifact for {profile.company_name}, nothing to upload")
        async with self:
            await self.fill_form(profile)
            await self.upload_file(profile.logo_image_path)
            return await self.submit()
