from __future__ import annotations

import http.client
import tempfile
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path

from . import __version__
from .exceptions import DownloadError
from .logging_setup import get_logger

log = get_logger("serverpack.updater.download")

CHUNK_SIZE = 1024 * 1024
MAX_DOWNLOAD_BYTES = 4 * 1024 * 1024 * 1024


class ArtifactFetcher:
    def __init__(self, *, timeout: int = 30, max_download_bytes: int = MAX_DOWNLOAD_BYTES):
        self.timeout = timeout
        self.max_download_bytes = max_download_bytes
        self.user_agent = f"serverpack-updater/{__version__}"

    def download(self, url: str, destination: Path) -> Path:
        """
        Stream ``url`` to ``destination``, replacing any existing file.

        The body is written to a temp file in the destination directory and
        moved into place only after it was received completely, so a failed
        download never leaves a partial archive behind.
        """
        log.info("Downloading server files from: %s", url)
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        req = urllib.request.Request(quote_url(url), headers={"User-Agent": self.user_agent})

        tmp_path: Path | None = None
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp, tempfile.NamedTemporaryFile(
                "wb", delete=False, dir=str(destination.parent), suffix=".part"
            ) as tmp:
                tmp_path = Path(tmp.name)
                status = getattr(resp, "status", 200)
                if not 200 <= status < 300:
                    raise DownloadError(f"Failed to download file: HTTP {status} {getattr(resp, 'reason', '')}".rstrip())

                declared = _content_length(resp)
                if declared is not None and declared > self.max_download_bytes:
                    raise DownloadError(f"Download of {destination.name} exceeds the size limit ({declared} bytes).")

                received = 0
                while True:
                    chunk = resp.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    received += len(chunk)
                    if received > self.max_download_bytes:
                        raise DownloadError(f"Download of {destination.name} exceeded the size limit.")
                    tmp.write(chunk)

                if declared is not None and received != declared:
                    raise DownloadError(
                        f"Download of {destination.name} was truncated: got {received} of {declared} bytes."
                    )
            tmp_path.replace(destination)
            tmp_path = None
        except urllib.error.HTTPError as e:
            raise DownloadError(f"Failed to download file: HTTP {e.code} {e.reason}") from e
        except (OSError, http.client.HTTPException) as e:
            raise DownloadError(f"Download failed for {url}: {e}") from e
        finally:
            if tmp_path is not None and tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError as e:
                    log.warning("Could not remove partial download %s: %s", tmp_path, e)

        log.info("Download complete. Saved to %s (%d bytes)", destination, received)
        return destination


def quote_url(url: str) -> str:
    """Percent-encode characters such as spaces; already-encoded URLs pass through unchanged."""
    parts = urllib.parse.urlsplit(url)
    path = urllib.parse.quote(parts.path, safe="/%:@!$&'()*+,;=")
    query = urllib.parse.quote(parts.query, safe="/%:@!$&'()*+,;=?")
    return urllib.parse.urlunsplit((parts.scheme, parts.netloc, path, query, parts.fragment))


def _content_length(resp) -> int | None:
    value = resp.headers.get("Content-Length") if resp.headers is not None else None
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None
