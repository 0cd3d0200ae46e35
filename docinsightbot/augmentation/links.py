"""Official-page checks for opportunity candidates.

Only used when link verification is switched on: a candidate whose
``source_url`` does not answer with a non-error status is dropped, and a
missing deadline is looked up on the official page itself.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from datetime import date
from typing import List, Optional

import httpx
from bs4 import BeautifulSoup

from ..fields import SENTINEL
from .schemas import OpportunityCandidate

logger = logging.getLogger(__name__)

_VERIFY_TIMEOUT_S = float(os.getenv("DOCINSIGHTBOT_VERIFY_TIMEOUT_S", "10"))
_FETCH_TEXT_TIMEOUT_S = float(os.getenv("DOCINSIGHTBOT_FETCH_TIMEOUT_S", "12"))
_USER_AGENT = "docinsightbot/1.0"

_MONTHS = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

_MONTH_NAME = (
    r"(Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|Jul(?:y)?|Aug(?:ust)?"
    r"|Sep(?:t|tember)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
_MONTH_FIRST = rf"\b{_MONTH_NAME}\b\s+(\d{{1,2}})(?:st|nd|rd|th)?\s*,\s*(\d{{4}})"
_DAY_FIRST = rf"\b(\d{{1,2}})(?:st|nd|rd|th)?\s+{_MONTH_NAME}\b,?\s+(\d{{4}})"
_ISO = r"\b\d{4}-\d{2}-\d{2}\b"


def parse_date_str(s: str) -> Optional[str]:
    """Parse common date strings into ISO YYYY-MM-DD when possible."""

    s = (s or "").strip()
    if not s:
        return None

    if re.fullmatch(r"\d{4}-\d{2}-\d{2}", s):
        return s

    m = re.search(_MONTH_FIRST, s, flags=re.IGNORECASE)
    if m:
        month, day, year = _MONTHS.get(m.group(1).lower()), int(m.group(2)), int(m.group(3))
    else:
        m = re.search(_DAY_FIRST, s, flags=re.IGNORECASE)
        if not m:
            return None
        day, month, year = int(m.group(1)), _MONTHS.get(m.group(2).lower()), int(m.group(3))

    try:
        return date(year, month, day).isoformat()
    except (TypeError, ValueError):
        return None


def find_deadline(text: str) -> Optional[str]:
    """Find the first parseable date near the word 'deadline' (or at the top)."""

    low = text.lower()
    windows: List[str] = []
    idx = low.find("deadline")
    if idx != -1:
        windows.append(text[max(0, idx - 250) : idx + 350])
    windows.append(text[:1500])

    for w in windows:
        for pat in (_MONTH_FIRST, _DAY_FIRST, _ISO):
            m = re.search(pat, w, flags=re.IGNORECASE)
            if m:
                iso = parse_date_str(m.group(0))
                if iso:
                    return iso
    return None


def page_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return " ".join(soup.get_text(" ").split())


def _is_http_url(url: str) -> bool:
    return url.startswith("http://") or url.startswith("https://")


async def _check(client: httpx.AsyncClient, candidate: OpportunityCandidate) -> Optional[OpportunityCandidate]:
    url = candidate.source_url
    if not _is_http_url(url):
        return None

    try:
        r = await client.get(url, timeout=httpx.Timeout(_VERIFY_TIMEOUT_S))
    except httpx.HTTPError as e:
        logger.debug("Link check failed for %s: %s", url, e)
        return None
    if r.status_code >= 400:
        return None

    if candidate.application_deadline != SENTINEL:
        return candidate

    iso = find_deadline(page_text(r.text))
    if iso is None:
        return candidate
    return candidate.model_copy(update={"application_deadline": iso})


async def verify_candidates(
    candidates: List[OpportunityCandidate],
    client: Optional[httpx.AsyncClient] = None,
) -> List[OpportunityCandidate]:
    """Keep candidates whose official page answers; fill missing deadlines.

    A caller-supplied ``client`` is used as is and left open.
    """

    if not candidates:
        return []

    if client is None:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(_FETCH_TEXT_TIMEOUT_S),
            follow_redirects=True,
            headers={"User-Agent": _USER_AGENT},
        ) as own_client:
            return await verify_candidates(candidates, own_client)

    checked = await asyncio.gather(*(_check(client, c) for c in candidates))

    kept = [c for c in checked if c is not None]
    if len(kept) < len(candidates):
        logger.info("Dropped %d opportunities with unreachable official pages", len(candidates) - len(kept))
    return kept
