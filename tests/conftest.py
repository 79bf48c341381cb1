"""Pytest configuration for thumby tests."""

from __future__ import annotations

import io
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from thumby.cache.storage import LocalStorage
from thumby.config.loader import ImageLocation, ThumbyConfig, clear_config_cache
from thumby.host.markdown import LoggingNotifier, MarkdownCardRenderer
from thumby.providers.registry import clear_cache


def pytest_addoption(parser):
    parser.addoption(
        "--run-network",
        action="store_true",
        default=False,
        help="Run tests against the real provider endpoints (requires network)",
    )


def pytest_collection_modifyitems(config, items):
    if not config.getoption("--run-network"):
        skip = pytest.mark.skip(reason="needs --run-network flag")
        for item in items:
            if "network" in item.keywords:
                item.add_marker(skip)


class FakeHttp:
    """Routes requests by URL prefix and records every request.

    A route value is an httpx.Response, an exception instance (raised, to
    simulate a dead connection), or a callable taking the request.
    """

    def __init__(self):
        self.routes: list[tuple[str, object]] = []
        self.requests: list[httpx.Request] = []

    def add(self, prefix: str, response) -> None:
        self.routes.append((prefix, response))

    def calls_to(self, prefix: str) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url).startswith(prefix)]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        for prefix, response in self.routes:
            if not url.startswith(prefix):
                continue
            if isinstance(response, Exception):
                raise response
            if callable(response):
                return response(request)
            # Fresh copy so one route can answer several requests
            return httpx.Response(
                response.status_code,
                headers=response.headers,
                content=response.content,
            )
        return httpx.Response(404, text="no route")


@pytest.fixture(autouse=True)
def _reset_caches():
    clear_cache()
    clear_config_cache()
    yield
    clear_cache()
    clear_config_cache()


@pytest.fixture
def fake_http() -> FakeHttp:
    return FakeHttp()


@pytest.fixture
def client(fake_http) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_http))


@pytest.fixture
def make_config(tmp_path) -> Callable[..., ThumbyConfig]:
    def _make(**overrides) -> ThumbyConfig:
        values = {"root_dir": tmp_path / ".thumby"}
        values.update(overrides)
        return ThumbyConfig(**values)

    return _make


@pytest.fixture
def vault(tmp_path) -> Path:
    path = tmp_path / "vault"
    path.mkdir()
    return path


@pytest.fixture
def storage(vault) -> LocalStorage:
    return LocalStorage(vault)


@pytest.fixture
def renderer() -> MarkdownCardRenderer:
    return MarkdownCardRenderer()


@pytest.fixture
def notifier() -> LoggingNotifier:
    return LoggingNotifier(io.StringIO())


@pytest.fixture
def folder_config(make_config):
    return make_config(
        save_images=True,
        image_location=ImageLocation.SPECIFIED_FOLDER,
        image_folder="thumbs",
    )
