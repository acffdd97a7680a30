"""
Company profile extractor.

Fetches one company page, parses it into a CompanyProfile, resolves the logo
image and writes the artifact bundle:

    <data_dir>/<Sanitized_Name>/info.txt
    <data_dir>/<Sanitized_Name>/<EXCHANGE>_<TICKER>.png   (only when a logo was found)

scrape() never raises for network, parse or storage failures. It returns an
ExtractionResult carrying the failure kind instead.
"""

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, Optional, Union
from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup, Comment, NavigableString

from .. import config
from ..errors import NetworkError, ParseError, StorageError
from ..models import NO_LOGO, CompanyProfile, ExtractionResult, FailureKind

logger = logging.getLogger(__name__)

# Marker that appears in the src of company logo images
LOGO_PATH_MARKER = "CompanyLogos"

# platform -> domain substring; order is the order of info.txt lines
SOCIAL_DOMAINS = {
    "linkedin": "linkedin.com",
    "twitter": "twitter.com",
    "facebook": "facebook.com",
    "instagram": "instagram.com",
    "youtube": "youtube.com",
}

SOCIAL_LABELS = {
    "linkedin": "LinkedIn",
    "twitter": "Twitter",
    "facebook": "Facebook",
    "instagram": "Instagram",
    "youtube": "YouTube",
}


# ============================================================================
# PURE HELPERS
# ============================================================================

def sanitize_folder_name(name: str) -> str:
    """Folder name for a company: word characters joined by single underscores.

    'Acme Corp, Inc.' -> 'Acme_Corp_Inc'
    """
    cleaned = re.sub(r"[^A-Za-z0-9_\s]", "", name)
    return re.sub(r"[\s_]+", "_", cleaned).strip("_")


def classify_social_links(hrefs: Iterable[str]) -> Dict[str, str]:
    """Map each known platform to the first href containing its domain."""
    links: Dict[str, str] = {}
    for href in hrefs:
        for platform, domain in SOCIAL_DOMAINS.items():
            if platform not in links and domain in href:
                links[platform] = href
    return links


def site_origin(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def resolve_logo_url(src: str, source_url: str) -> str:
    """Absolute logo URL. Root-relative paths resolve against the source site's origin."""
    src = src.strip()
    if src.startswith("/"):
        return urljoin(site_origin(source_url) + "/", src)
    return urljoin(source_url, src)


def extract_by_label(soup: BeautifulSoup, label: str) -> str:
    """Text that sits next to a `span.blue_txt` label inside the same parent.

    <li><span class="blue_txt">Exchange:</span> NASDAQ</li>  ->  'NASDAQ'

    Only the parent's own text nodes are read, so the label text itself and
    any sibling elements are left out.
    """
    for span in soup.select("span.blue_txt"):
        if label not in span.get_text():
            continue
        parent = span.parent
        if parent is None:
            continue
        text = "".join(
            str(node) for node in parent.children
            if isinstance(node, NavigableString) and not isinstance(node, Comment)
        )
        return text.strip()
    return ""


def _select_text(soup: BeautifulSoup, selector: str) -> str:
    elem = soup.select_one(selector)
    return elem.get_text().strip() if elem else ""


def render_info(profile: CompanyProfile) -> str:
    """The info.txt record. Downstream readers depend on this exact layout."""
    lines = [
        f"Company Name : {profile.company_name}",
        f"Ticker       : {profile.ticker}",
        f"Exchange     : {profile.exchange}",
        f"Industry     : {profile.industry}",
        f"Sector       : {profile.sector}",
        f"Employees    : {profile.employees}",
        f"Location     : {profile.location}",
        f"Website      : {profile.website}",
        "",
        "Social Links:",
    ]
    for platform, label in SOCIAL_LABELS.items():
        lines.append(f"{label:<13}: {profile.social_links.get(platform, '')}")
    lines += [
        "",
        "Description:",
        profile.description,
        "",
        "Logo File:",
        profile.logo_file_name,
        "",
        "Source URL:",
        profile.source_url,
    ]
    return "\n".join(lines).strip()


# ============================================================================
# EXTRACTOR
# ============================================================================

class Extractor:
    """Fetch -> parse -> persist for a single company page"""

    def __init__(self, data_dir: Union[str, Path] = config.DATA_DIR,
                 timeout: float = config.HTTP_TIMEOUT,
                 user_agent: str = config.USER_AGENT):
        self.data_dir = Path(data_dir)
        self.timeout = timeout
        self.headers = {"User-Agent": user_agent}

    # region: Network
    def _get(self, url: str) -> requests.Response:
        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise NetworkError(f"GET {url} failed: {e}") from e
        return response

    def fetch(self, url: str) -> str:
        """Raw markup of the source page."""
        logger.info(f"🌐 Fetching {url}")
        return self._get(url).text

    def download_logo(self, url: str) -> bytes:
        logger.info(f"🖼️  Downloading logo {url}")
        return self._get(url).content
    # endregion

    # region: Parsing
    def parse(self, markup: str, source_url: str) -> CompanyProfile:
        """Build a CompanyProfile from the page markup.

        Raises ParseError when the company name is missing, since without it
        there is nowhere to put the artifacts.
        """
        soup = BeautifulSoup(markup, "lxml")

        company_name = _select_text(soup, ".vendor_name h1")
        if not company_name:
            raise ParseError(f"No company name (.vendor_name h1) found on {source_url}")

        website = ""
        website_link = soup.select_one(".btn_visit_website a")
        if website_link is not None:
            website = (website_link.get("href") or "").strip()

        hrefs = [a["href"].strip() for a in soup.find_all("a", href=True) if a["href"].strip()]

        logo_url: Optional[str] = None
        logo_img = soup.find("img", src=lambda src: bool(src) and LOGO_PATH_MARKER in src)
        if logo_img is not None:
            logo_url = resolve_logo_url(logo_img["src"], source_url)
        else:
            logger.warning(f"⚠️  No logo found for {company_name}")

        return CompanyProfile(
            company_name=company_name,
            ticker=_select_text(soup, ".ticker_name"),
            exchange=extract_by_label(soup, "Exchange"),
            industry=extract_by_label(soup, "Industry"),
            sector=extract_by_label(soup, "Sector"),
            employees=_select_text(soup, "li.employees"),
            location=_select_text(soup, "li.location"),
            description=_select_text(soup, ".company_description"),
            website=website,
            social_links=classify_social_links(hrefs),
            logo_url=logo_url,
            logo_image_path=NO_LOGO,
            source_url=source_url,
        )
    # endregion

    # region: Persistence
    def company_dir(self, profile: CompanyProfile) -> Path:
        folder = sanitize_folder_name(profile.company_name)
        if not folder:
            raise ParseError(f"Company name {profile.company_name!r} has no usable folder characters")
        return self.data_dir / folder

    def persist(self, profile: CompanyProfile) -> CompanyProfile:
        """Write the logo (when resolved) and info.txt; returns the updated profile.

        A failed logo download aborts here and no info.txt is written.
        """
        folder = self.company_dir(profile)
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create {folder}: {e}") from e

        if profile.logo_url:
            image_bytes = self.download_logo(profile.logo_url)
            image_path = folder / f"{profile.exchange}_{profile.ticker}.png"
            try:
                image_path.write_bytes(image_bytes)
            except OSError as e:
                raise StorageError(f"Cannot write {image_path}: {e}") from e
            profile = profile.model_copy(update={"logo_image_path": str(image_path)})

        info_path = folder / "info.txt"
        try:
            info_path.write_text(render_info(profile), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot write {info_path}: {e}") from e

        logger.info(f"  💾 Saved {info_path}" + (f" + {profile.logo_file_name}" if profile.logo_url else ""))
        return profile
    # endregion

    def scrape(self, url: str) -> ExtractionResult:
        """Fetch, parse and persist one company page."""
        try:
            markup = self.fetch(url)
            profile = self.parse(markup, url)
            profile = self.persist(profile)
        except NetworkError as e:
            logger.error(f"❌ Network error scraping {url}: {e}")
            return ExtractionResult.failure(FailureKind.NETWORK, str(e))
        except ParseError as e:
            logger.error(f"❌ Parse error scraping {url}: {e}")
            return ExtractionResult.failure(FailureKind.PARSE, str(e))
        except StorageError as e:
            logger.error(f"❌ Storage error scraping {url}: {e}")
            return ExtractionResult.failure(FailureKind.STORAGE, str(e))

        logger.info(f"✅ Scraped {profile.company_name} ({profile.exchange}:{profile.ticker}), "
                    f"{len(profile.social_links)} social links")
        return ExtractionResult.success(profile)
