from __future__ import annotations

import asyncio

import httpx
from conftest import candidate

from docinsightbot.augmentation.links import _check, find_deadline, page_text, parse_date_str, verify_candidates
from docinsightbot.fields import SENTINEL


def test_parse_date_str_formats() -> None:
    assert parse_date_str("March 15, 2026") == "2026-03-15"
    assert parse_date_str("15th March 2026") == "2026-03-15"
    assert parse_date_str("Sept 1, 2026") == "2026-09-01"
    assert parse_date_str("2026-01-31") == "2026-01-31"
    assert parse_date_str("February 30, 2026") is None
    assert parse_date_str("rolling admissions") is None
    assert parse_date_str("") is None


def test_find_deadline_prefers_text_near_deadline() -> None:
    text = "Published 2 January 2025. " + "x" * 2000 + " Application deadline: 1 June 2026."

    assert find_deadline(text) == "2026-06-01"
    assert find_deadline("No dates here.") is None


def test_page_text_drops_scripts_and_styles() -> None:
    html = "<html><style>p{}</style><script>var x;</script><p>Closes   May 5, 2026</p></html>"

    assert page_text(html) == "Closes May 5, 2026"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_check_fills_missing_deadline_from_official_page() -> None:
    c = candidate("Open Award").model_copy(update={"application_deadline": SENTINEL})

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<p>Deadline: March 31, 2026</p>")

    async def run():
        async with _client(handler) as client:
            return await _check(client, c)

    checked = asyncio.run(run())

    assert checked is not None
    assert checked.application_deadline == "2026-03-31"


def test_check_drops_unreachable_and_non_http_candidates() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    async def run():
        async with _client(handler) as client:
            missing = await _check(client, candidate("Gone Award"))
            no_url = await _check(client, candidate("Nowhere").model_copy(update={"source_url": SENTINEL}))
        return missing, no_url

    assert asyncio.run(run()) == (None, None)


def test_verify_candidates_with_nothing_to_check() -> None:
    assert asyncio.run(verify_candidates([])) == []
