"""
Tests for the CurseForge API client (HTTP layer mocked).
"""

import io
import json
import urllib.error
import urllib.parse
from unittest.mock import patch

import pytest

from conftest import make_settings
from serverpack_updater.curseforge import CURSEFORGE_API_URL, CurseForgeClient
from serverpack_updater.exceptions import CatalogRequestError, UpstreamResponseError


class _FakeResponse:
    def __init__(self, payload):
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
        self._stream = io.BytesIO(body)
        self.status = 200
        self.headers = {}

    def read(self, size=-1):
        return self._stream.read(size)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class _Recorder:
    """Replays queued payloads and remembers each request."""

    def __init__(self, *payloads):
        self.payloads = list(payloads)
        self.requests = []

    def __call__(self, req, timeout=None):
        self.requests.append(req)
        item = self.payloads.pop(0)
        if isinstance(item, Exception):
            raise item
        return _FakeResponse(item)


def _query(req):
    return dict(urllib.parse.parse_qsl(urllib.parse.urlparse(req.full_url).query))


@pytest.fixture
def client():
    return CurseForgeClient("secret-key", "https://api.example.test/v1/", page_size=2)


class TestGetModFiles:

    def test_sends_api_key_and_paginates(self, client):
        rec = _Recorder(
            {"data": [{"id": 1}, {"id": 2}], "pagination": {"index": 0, "pageSize": 2, "resultCount": 2, "totalCount": 3}},
            {"data": [{"id": 3}], "pagination": {"index": 2, "pageSize": 2, "resultCount": 1, "totalCount": 3}},
        )
        with patch("urllib.request.urlopen", rec):
            files = client.get_mod_files(925200)

        assert [f["id"] for f in files] == [1, 2, 3]
        assert len(rec.requests) == 2
        first = rec.requests[0]
        assert first.full_url.startswith("https://api.example.test/v1/mods/925200/files?")
        assert first.get_header("X-api-key") == "secret-key"
        assert _query(first) == {"index": "0", "pageSize": "2"}
        assert _query(rec.requests[1])["index"] == "2"

    def test_advances_by_records_received(self, client):
        rec = _Recorder(
            {"data": [{"id": 1}, {"id": 2}], "pagination": {"resultCount": 0, "totalCount": 3}},
            {"data": [{"id": 3}], "pagination": {"resultCount": None, "totalCount": 3}},
        )
        with patch("urllib.request.urlopen", rec):
            files = client.get_mod_files(1)

        assert [f["id"] for f in files] == [1, 2, 3]
        assert [_query(r)["index"] for r in rec.requests] == ["0", "2"]

    def test_single_page_without_pagination_block(self, client):
        rec = _Recorder({"data": [{"id": 1}]})
        with patch("urllib.request.urlopen", rec):
            assert client.get_mod_files(1) == [{"id": 1}]
        assert len(rec.requests) == 1

    @pytest.mark.parametrize("data", [None, {"id": 1}, "files"])
    def test_data_must_be_a_list(self, client, data):
        with patch("urllib.request.urlopen", _Recorder({"data": data})):
            with pytest.raises(UpstreamResponseError):
                client.get_mod_files(1)

    def test_http_error(self, client):
        err = urllib.error.HTTPError("https://api.example.test", 403, "Forbidden", {}, None)
        with patch("urllib.request.urlopen", _Recorder(err)):
            with pytest.raises(CatalogRequestError, match="403"):
                client.get_mod_files(1)

    def test_network_error(self, client):
        with patch("urllib.request.urlopen", _Recorder(urllib.error.URLError("no route"))):
            with pytest.raises(CatalogRequestError):
                client.get_mod_files(1)

    def test_invalid_json(self, client):
        with patch("urllib.request.urlopen", _Recorder(b"<html>maintenance</html>")):
            with pytest.raises(UpstreamResponseError):
                client.get_mod_files(1)


class TestGetFile:

    def test_returns_detail(self, client):
        rec = _Recorder({"data": {"id": 77, "fileName": "Server.zip", "downloadUrl": "https://cdn.test/Server.zip"}})
        with patch("urllib.request.urlopen", rec):
            detail = client.get_file(925200, 77)

        assert detail.id == 77
        assert detail.download_url == "https://cdn.test/Server.zip"
        assert rec.requests[0].full_url == "https://api.example.test/v1/mods/925200/files/77"

    def test_missing_record(self, client):
        with patch("urllib.request.urlopen", _Recorder({"data": None})):
            with pytest.raises(UpstreamResponseError):
                client.get_file(925200, 77)


def test_settings_default_base_url(tmp_path, monkeypatch):
    monkeypatch.delenv("CURSEFORGE_BASE_URL", raising=False)
    assert make_settings(tmp_path).curseforge_base_url == CURSEFORGE_API_URL
