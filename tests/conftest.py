"""Shared fixtures: sample company markup, fake HTTP responses, fake browser session."""

from typing import Dict, List, Optional, Set, Tuple
from unittest.mock import MagicMock

import pytest
import requests

from portal_sync.errors import SubmissionError
from portal_sync.models import SubmitResult, SubmitStatus
from portal_sync.submitter import BrowserSession

ACME_URL = "https://example.com/Company/acme-corp"
ACME_LOGO_URL = "https://example.com/img/CompanyLogos/acme.png"
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-logo"

ACME_HTML = """
<html>
<body>
  <div class="vendor_name"><h1> Acme Corp </h1></div>
  <span class="ticker_name">ACME</span>
  <ul class="vendor_info">
    <li><span class="blue_txt">Exchange:</span> NASDAQ <!-- listed 1999 --></li>
    <li><span class="blue_txt">Industry:</span> Widgets</li>
    <li><span class="blue_txt">Sector:</span><strong>*</strong> Industrials</li>
    <li class="employees">1,200 employees</li>
    <li class="location">Springfield, USA</li>
  </ul>
  <div class="logo"><img src="/img/logo-site.png"><img src="/img/CompanyLogos/acme.png"></div>
  <div class="btn_visit_website"><a href=" https://acme.example ">Visit website</a></div>
  <div class="company_description">
    Acme builds widgets for everyone.
  </div>
  <div class="social">
    <a href="https://www.linkedin.com/company/acme">in</a>
    <a href="https://twitter.com/acme">tw</a>
    <a href="https://www.linkedin.com/company/acme-secondary">in2</a>
    <a href="">empty</a>
    <a>no href</a>
  </div>
</body>
</html>
"""

NO_LOGO_HTML = """
<html><body>
  <div class="vendor_name"><h1>Globex, Inc.</h1></div>
  <span class="ticker_name">GBX</span>
  <p><span class="blue_txt">Exchange:</span> NYSE</p>
  <div class="company_description">Globex does things.</div>
</body></html>
"""


def make_response(url: str, status: int = 200, text: str = "", content: bytes = b"") -> requests.Response:
    """A real requests.Response so raise_for_status() behaves as in production."""
    response = requests.Response()
    response.status_code = status
    response.url = url
    response._content = content or text.encode("utf-8")
    response.encoding = "utf-8"
    return response


def fake_get(routes: Dict[str, requests.Response]) -> MagicMock:
    """Mock for requests.get serving canned responses by URL."""
    def _get(url, headers=None, timeout=None):
        if url not in routes:
            raise requests.ConnectionError(f"no route to {url}")
        return routes[url]
    return MagicMock(side_effect=_get)


class FakeSession(BrowserSession):
    """In-memory BrowserSession recording every call."""

    def __init__(self, submit_result: Optional[SubmitResult] = None,
                 missing: Optional[Set[str]] = None, fail_start: bool = False):
        self.calls: List[Tuple] = []
        self.submit_result = submit_result or SubmitResult(status=SubmitStatus.SUCCESS, status_code=200)
        self.missing = missing or set()
        self.fail_start = fail_start
        self.closed = False

    async def start(self) -> None:
        self.calls.append(("start",))
        if self.fail_start:
            raise SubmissionError("Timed out during browser launch")

    async def goto_idle(self, url: str) -> None:
        self.calls.append(("goto_idle", url))

    async def type_text(self, selector: str, value: str) -> None:
        if selector in self.missing:
            raise SubmissionError(f"Timed out during typing into {selector}")
        self.calls.append(("type_text", selector, value))

    async def set_file(self, selector: str, path: str) -> None:
        if selector in self.missing:
            raise SubmissionError(f"File input not found ({selector})")
        self.calls.append(("set_file", selector, path))

    async def simulate_event(self, selector: str, event_type: str) -> None:
        self.calls.append(("simulate_event", selector, event_type))

    async def submit_and_confirm(self, selector: str, url_fragment: str) -> SubmitResult:
        self.calls.append(("submit_and_confirm", selector, url_fragment))
        return self.submit_result

    async def close(self) -> None:
        self.calls.append(("close",))
        self.closed = True

    def typed(self) -> Dict[str, str]:
        return {call[1]: call[2] for call in self.calls if call[0] == "type_text"}


@pytest.fixture
def acme_routes() -> Dict[str, requests.Response]:
    return {
        ACME_URL: make_response(ACME_URL, text=ACME_HTML),
        ACME_LOGO_URL: make_response(ACME_LOGO_URL, content=PNG_BYTES),
    }


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"
