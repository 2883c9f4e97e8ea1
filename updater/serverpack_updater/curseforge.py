from __future__ import annotations

import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from . import __version__
from .exceptions import CatalogRequestError, UpstreamResponseError
from .logging_setup import get_logger
from .models import FileDetail

log = get_logger("serverpack.updater.curseforge")

CURSEFORGE_API_URL = "https://api.curseforge.com/v1"

# CurseForge rejects requests where index + pageSize exceeds this
MAX_LISTING_WINDOW = 10_000


class CurseForgeClient:
    """Thin read-only client for the CurseForge REST API (v1)."""

    def __init__(self, api_key: str, base_url: str = CURSEFORGE_API_URL, *, timeout: int = 30, page_size: int = 50):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.page_size = page_size
        self.user_agent = f"serverpack-updater/{__version__}"

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        if params:
            url = f"{url}?{urllib.parse.urlencode(params)}"
        req = urllib.request.Request(url, headers={
            "x-api-key": self.api_key,
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        })
        log.debug("GET %s", url)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                body = resp.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            raise CatalogRequestError(f"CurseForge API returned HTTP {e.code} for {path}") from e
        except OSError as e:
            raise CatalogRequestError(f"CurseForge API request failed for {path}: {e}") from e

        try:
            payload = json.loads(body)
        except json.JSONDecodeError as e:
            raise UpstreamResponseError(f"CurseForge API returned invalid JSON for {path}") from e
        if not isinstance(payload, dict):
            raise UpstreamResponseError(f"CurseForge API returned a {type(payload).__name__} for {path}, expected an object")
        return payload

    def get_mod_files(self, mod_id: int) -> List[Dict[str, Any]]:
        """Return every file record of a mod, following the listing pagination."""
        files: List[Dict[str, Any]] = []
        index = 0
        while True:
            payload = self._get_json(f"/mods/{mod_id}/files", {"index": index, "pageSize": self.page_size})
            data = payload.get("data")
            if not isinstance(data, list):
                raise UpstreamResponseError(
                    f"CurseForge API response did not contain a list of files in 'data'. "
                    f"Received type: {type(data).__name__}"
                )
            files.extend(data)

            pagination = payload.get("pagination") or {}
            total = pagination.get("totalCount")
            index += len(data)
            if not data or not isinstance(total, int) or index >= total:
                break
            if index + self.page_size > MAX_LISTING_WINDOW:
                log.warning("File listing for mod %s truncated at %d of %d entries", mod_id, index, total)
                break
        log.debug("Fetched %d file records for mod %s", len(files), mod_id)
        return files

    def get_file(self, mod_id: int, file_id: int) -> FileDetail:
        payload = self._get_json(f"/mods/{mod_id}/files/{file_id}")
        data = payload.get("data")
        if not isinstance(data, dict):
            raise UpstreamResponseError(f"CurseForge API returned no file record for {mod_id}/{file_id}")
        try:
            return FileDetail.model_validate(data)
        except ValidationError as e:
            raise UpstreamResponseError(f"Malformed file record for {mod_id}/{file_id}: {e}") from e
