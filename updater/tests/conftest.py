"""
Shared fixtures: settings pointing into tmp_path, a fake CurseForge client and
a helper that builds real zip archives.
"""

import io
import zipfile
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from serverpack_updater.models import FileDetail
from serverpack_updater.settings import Settings


def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = {
        "CURSEFORGE_API_KEY": "test-key",
        "MODPACK_ID": 925200,
        "MINECRAFT_VERSION": "1.21",
        "TEMP_DIR": tmp_path / "temp_server_files",
        "LAUNCH_SH_PATH": tmp_path / "launch.sh",
        "DOCKERFILE_PATH": tmp_path / "Dockerfile",
        "LOG_FILE": None,
    }
    values.update(overrides)
    return Settings(**values)


def build_zip(entries: Dict[str, bytes], *, mode: Optional[Dict[str, int]] = None) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            info = zipfile.ZipInfo(name)
            info.compress_type = zipfile.ZIP_DEFLATED
            if mode and name in mode:
                info.external_attr = mode[name] << 16
            zf.writestr(info, data)
    return buf.getvalue()


class FakeCurseForge:
    """Stands in for CurseForgeClient; records the calls it receives."""

    def __init__(self, files: List[dict], details: Optional[Dict[int, dict]] = None):
        self.files = files
        self.details = details or {}
        self.calls: List[tuple] = []

    def get_mod_files(self, mod_id):
        self.calls.append(("files", mod_id))
        return list(self.files)

    def get_file(self, mod_id, file_id):
        self.calls.append(("file", mod_id, file_id))
        return FileDetail.model_validate(self.details[file_id])


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def listing():
    """(a) 1.20 server pack, (b) 1.21 without server pack, (c) newer 1.21 server pack."""
    return [
        {
            "id": 101,
            "displayName": "Pack 1.0 (1.20)",
            "fileName": "Pack-1.0.zip",
            "fileDate": "2024-05-01T10:00:00Z",
            "gameVersions": ["1.20", "NeoForge"],
            "serverPackFileId": 1101,
        },
        {
            "id": 102,
            "displayName": "Pack 1.5 (1.21, client only)",
            "fileName": "Pack-1.5.zip",
            "fileDate": "2024-07-01T10:00:00Z",
            "gameVersions": ["1.21"],
            "serverPackFileId": None,
        },
        {
            "id": 103,
            "displayName": "Pack 2.0",
            "fileName": "Pack-2.0.zip",
            "fileDate": "2024-06-01T10:00:00Z",
            "gameVersions": ["1.21", "NeoForge"],
            "serverPackFileId": 1103,
        },
    ]


@pytest.fixture
def fake_client(listing):
    return FakeCurseForge(
        listing,
        details={
            1101: {"id": 1101, "fileName": "ServerFiles-1.0.zip", "downloadUrl": "https://edge.forgecdn.net/files/1101/ServerFiles-1.0.zip"},
            1103: {"id": 1103, "fileName": "ServerFiles-2.0.zip", "downloadUrl": "https://edge.forgecdn.net/files/1103/ServerFiles-2.0.zip"},
        },
    )
