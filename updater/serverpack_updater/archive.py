from __future__ import annotations

import shutil
import stat
import zipfile
import zlib
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Sequence

from .exceptions import ArchiveError
from .logging_setup import get_logger

log = get_logger("serverpack.updater.archive")

_ENTRY_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError, OSError)


class ArchiveExtractor:
    """Unpack a zip archive with a small pool of worker threads."""

    def __init__(self, max_workers: int = 5):
        self.max_workers = max(1, int(max_workers))

    def extract(self, archive_path: Path, dest_dir: Path) -> List[Path]:
        archive_path = Path(archive_path)
        log.info("Extracting %s to %s...", archive_path.name, dest_dir)
        dest_dir = Path(dest_dir)
        dest_dir.mkdir(parents=True, exist_ok=True)
        root = dest_dir.resolve()

        try:
            with zipfile.ZipFile(archive_path) as zf:
                infos = zf.infolist()
        except (zipfile.BadZipFile, OSError) as e:
            raise ArchiveError(f"Cannot open archive {archive_path}: {e}") from e

        # validate every entry before writing anything
        targets = {info.filename: _target_path(root, info.filename) for info in infos}

        for info in infos:
            if info.is_dir():
                targets[info.filename].mkdir(parents=True, exist_ok=True)

        files = [info for info in infos if not info.is_dir()]
        chunks = [files[i::self.max_workers] for i in range(self.max_workers)]
        chunks = [c for c in chunks if c]
        if chunks:
            with ThreadPoolExecutor(max_workers=len(chunks)) as ex:
                futures = [ex.submit(self._extract_entries, archive_path, chunk, targets) for chunk in chunks]
                for f in futures:
                    f.result()

        log.info("Extraction complete (%d files).", len(files))
        return [targets[info.filename] for info in files]

    @staticmethod
    def _extract_entries(archive_path: Path, entries: Sequence[zipfile.ZipInfo], targets: dict) -> None:
        # one handle per worker; ZipFile objects are not shared across threads
        try:
            with zipfile.ZipFile(archive_path) as zf:
                for info in entries:
                    target: Path = targets[info.filename]
                    target.parent.mkdir(parents=True, exist_ok=True)
                    with zf.open(info) as src, open(target, "wb") as dst:
                        shutil.copyfileobj(src, dst)
                    mode = (info.external_attr >> 16) & 0o777
                    if mode & stat.S_IXUSR:
                        target.chmod(mode)
        except _ENTRY_ERRORS as e:
            raise ArchiveError(f"Failed to extract {archive_path.name}: {e}") from e


def _target_path(root: Path, name: str) -> Path:
    candidate = (root / name).resolve()
    try:
        candidate.relative_to(root)
    except ValueError as e:
        raise ArchiveError(f"Archive entry {name!r} points outside of {root}") from e
    return candidate
