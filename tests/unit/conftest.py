"""Unit test fixtures (fake GlotPress server on localhost, temp directories)."""

from __future__ import annotations

import pytest
from aiohttp.test_utils import TestServer

from gp_fakes import FakeGlotPress, GlotPressState, make_app
from wc_lang_packs.downloader import GlotPressClient, RateLimitedClient
from wc_lang_packs.index import TranslationIndex
from wc_lang_packs.packager import PackageBuilder


@pytest.fixture()
async def gp_server():
    """Running fake GlotPress server and the state it serves."""
    state = GlotPressState()
    server = TestServer(make_app(state))
    await server.start_server()
    yield FakeGlotPress(server, state)
    await server.close()


@pytest.fixture()
async def http_client():
    """Rate-limited client tuned for tests (no meaningful rate limit)."""
    async with RateLimitedClient(requests_per_minute=600_000, timeout=2) as client:
        yield client


@pytest.fixture()
def gp_client(gp_server, http_client) -> GlotPressClient:
    return GlotPressClient(http_client, gp_server.url("/api/projects/"))


@pytest.fixture()
def downloads_dir(tmp_path):
    return tmp_path / "downloads"


@pytest.fixture()
def work_dir(tmp_path):
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture()
def builder(gp_server, http_client, downloads_dir, work_dir) -> PackageBuilder:
    return PackageBuilder(
        http_client,
        gp_url=gp_server.url("/projects/"),
        downloads_dir=downloads_dir,
        temp_dir=work_dir,
    )


@pytest.fixture()
def index() -> TranslationIndex:
    return TranslationIndex()
