import json
from pathlib import Path

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from uuid2asset.models.config import FetchConfig
from uuid2asset.models.manifest import Manifest


class FakeAssetServer:
    """
    A local HTTP server serving a fixed set of files.

    `files` maps request paths (e.g. '/assets/game/import/AA/x.bin') to bodies.
    `failures` maps paths to how many 500 responses precede the real answer.
    Everything else is a 404.
    """

    def __init__(self, files=None, failures=None):
        self.files = dict(files or {})
        self.failures = dict(failures or {})
        self.requests: list[str] = []
        self.server: TestServer | None = None
        self.url = ""

    async def _handle(self, request: web.Request) -> web.Response:
        path = request.path
        self.requests.append(path)
        if self.failures.get(path, 0) > 0:
            self.failures[path] -= 1
            return web.Response(status=500, text="try again")
        if path in self.files:
            return web.Response(body=self.files[path])
        return web.Response(status=404)

    async def __aenter__(self) -> "FakeAssetServer":
        app = web.Application()
        app.router.add_route("GET", "/{tail:.*}", self._handle)
        self.server = TestServer(app)
        await self.server.start_server()
        self.url = str(self.server.make_url("/")).rstrip("/")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.server.close()


class FakeDownloader:
    """Stands in for AssetDownloader; answers from a dict, 404 (None) otherwise."""

    def __init__(self, files=None):
        self.files = dict(files or {})
        self.calls: list[str] = []
        self.closed = False

    async def fetch(self, url):
        self.calls.append(url)
        return self.files.get(url)

    async def close(self):
        self.closed = True


@pytest.fixture
def asset_server():
    return FakeAssetServer


@pytest.fixture
def fake_downloader():
    return FakeDownloader


@pytest.fixture
def make_config(tmp_path):
    def _make(server_url="http://assets.test", **overrides):
        options = {
            "server_url": server_url,
            "timeout": 5,
            "retry_delay": 0.01,
            "extensions": [".bin"],
            "output_dir": str(tmp_path / "out"),
        }
        options.update(overrides)
        return FetchConfig(**options)

    return _make


@pytest.fixture
def single_file_manifest():
    return Manifest.model_validate(
        {
            "name": "game",
            "importBase": "import",
            "nativeBase": "native",
            "uuids": ["A" * 22],
            "versions": {"import": [0, "deadbeef"], "native": []},
        }
    )


@pytest.fixture
def write_manifest(tmp_path):
    def _write(data, filename="config.json") -> Path:
        path = tmp_path / filename
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
