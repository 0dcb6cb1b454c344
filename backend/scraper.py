"""Homepage fetcher and signal extractor.

fetch_page() retrieves one page; extract_signals() turns its markup into the
flat signal record consumed by the grader. Does NOT crawl subpages.
"""

import logging
import time

import requests
import urllib3
from bs4 import BeautifulSoup
from requests.compat import chardet

from config import FETCH_CHUNK_BYTES, FETCH_HEADERS, FETCH_MAX_REDIRECTS, FETCH_TIMEOUT_SECONDS
from errors import FetchTimeoutError, NetworkError
from models import ExtractedSignals, FetchResult
from signals import detect_signals

logger = logging.getLogger(__name__)

# Small-business sites often run self-signed or misconfigured certificates.
# Certificate verification is disabled for page fetches so those sites can
# still be audited. The InsecureRequestWarning urllib3 emits for each such
# request is muted process-wide, since warning filters are global state.
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

SAFE_DEFAULT: ExtractedSignals = {
    "title": "",
    "description": "",
    "h1_count": 0,
    "has_canonical": False,
    "has_og_tags": False,
    "has_viewport": False,
    "has_favicon": False,
    "has_structured_data": False,
    "has_menu": False,
    "has_pdf_menu": False,
    "has_hours": False,
    "has_address": False,
    "has_phone": False,
    "has_phone_text": False,
    "has_tel_link": False,
    "has_ordering": False,
    "has_reservation": False,
    "has_social": False,
    "has_maps": False,
    "image_count": 0,
    "images_with_alt": 0,
}


def _decode(body: bytes) -> str:
    encoding = chardet.detect(body)["encoding"] if body else None
    try:
        return body.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


def fetch_page(url: str) -> FetchResult:
    """
    GET `url` once and return its markup with the wall-clock load time.
    The whole call, body included, is bounded by FETCH_TIMEOUT_SECONDS.
    Raises FetchTimeoutError or NetworkError; never retries.
    """
    with requests.Session() as session:
        session.max_redirects = FETCH_MAX_REDIRECTS
        started = time.perf_counter()
        deadline = started + FETCH_TIMEOUT_SECONDS
        response = None
        try:
            response = session.get(
                url,
                headers=FETCH_HEADERS,
                timeout=FETCH_TIMEOUT_SECONDS,
                verify=False,
                allow_redirects=True,
                stream=True,
            )
            response.raise_for_status()
            chunks: list[bytes] = []
            for chunk in response.iter_content(chunk_size=FETCH_CHUNK_BYTES):
                if time.perf_counter() > deadline:
                    raise FetchTimeoutError(
                        f"Timed out after {FETCH_TIMEOUT_SECONDS:.0f}s reading {url}"
                    )
                chunks.append(chunk)
        except requests.Timeout as e:
            raise FetchTimeoutError(
                f"Timed out after {FETCH_TIMEOUT_SECONDS:.0f}s waiting for {url}"
            ) from e
        except requests.ConnectionError as e:
            # iter_content wraps a socket read timeout in ConnectionError
            if e.args and isinstance(e.args[0], urllib3.exceptions.ReadTimeoutError):
                raise FetchTimeoutError(
                    f"Timed out after {FETCH_TIMEOUT_SECONDS:.0f}s reading {url}"
                ) from e
            raise NetworkError(str(e) or e.__class__.__name__) from e
        except requests.TooManyRedirects as e:
            raise NetworkError(f"More than {FETCH_MAX_REDIRECTS} redirects") from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else 0
            raise NetworkError(f"Request failed with status code {status}") from e
        except requests.RequestException as e:
            raise NetworkError(str(e) or e.__class__.__name__) from e
        finally:
            if response is not None:
                response.close()

        load_time_ms = max(0, int((time.perf_counter() - started) * 1000))
        return {
            "html": _decode(b"".join(chunks)),
            "load_time_ms": load_time_ms,
            "final_url": response.url,
            "status_code": response.status_code,
        }


def extract_signals(html: str) -> ExtractedSignals:
    """
    Parse `html` and return structural and business signals.
    Never raises: unusable markup yields the safe defaults.
    """
    if not isinstance(html, str) or not html.strip():
        return dict(SAFE_DEFAULT)

    try:
        soup = BeautifulSoup(html, "html.parser")
        return _signals_from_soup(soup)
    except Exception:
        logger.warning("Markup could not be parsed; using empty signals", exc_info=True)
        return dict(SAFE_DEFAULT)


def _signals_from_soup(soup: BeautifulSoup) -> ExtractedSignals:
    # --- Structured data (before scripts are removed) ---
    has_structured_data = soup.find("script", attrs={"type": "application/ld+json"}) is not None

    for tag in soup.find_all(["script", "style"]):
        tag.decompose()

    # --- Title ---
    title = ""
    title_tag = soup.find("title")
    if title_tag:
        title = title_tag.get_text().strip()

    # --- Meta description ---
    description = ""
    meta_desc_tag = soup.find("meta", attrs={"name": "description"})
    if meta_desc_tag and meta_desc_tag.get("content"):
        description = (meta_desc_tag["content"] or "").strip()

    # --- Head links and meta ---
    has_canonical = soup.find("link", rel="canonical") is not None
    has_favicon = soup.find("link", rel="icon") is not None
    has_og_tags = soup.find("meta", attrs={"property": "og:title"}) is not None
    has_viewport = soup.find("meta", attrs={"name": "viewport"}) is not None

    # --- Images ---
    all_images = soup.find_all("img")
    images_with_alt = 0
    for img in all_images:
        alt = img.get("alt")
        if isinstance(alt, str) and alt.strip():
            images_with_alt += 1

    # --- Visible body text ---
    body = soup.body or soup
    body_text = body.get_text(separator=" ").lower()

    result: ExtractedSignals = {
        **SAFE_DEFAULT,
        "title": title,
        "description": description,
        "h1_count": len(soup.find_all("h1")),
        "has_canonical": has_canonical,
        "has_og_tags": has_og_tags,
        "has_viewport": has_viewport,
        "has_favicon": has_favicon,
        "has_structured_data": has_structured_data,
        "image_count": len(all_images),
        "images_with_alt": images_with_alt,
    }
    result.update(detect_signals(soup, body_text))  # type: ignore[typeddict-item]
    return result
