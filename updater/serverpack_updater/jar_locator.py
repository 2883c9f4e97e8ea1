from __future__ import annotations
from pathlib import Path
from typing import Iterable, Optional

from .logging_setup import get_logger

log = get_logger("serverpack.updater.jar")

DEFAULT_EXCLUDES = ("installer", "client")


def is_server_program(name: str, extension: str = ".jar", excludes: Iterable[str] = DEFAULT_EXCLUDES) -> bool:
    """forge-1.21-server.jar -> True, forge-1.21-installer.jar -> False (case-sensitive)."""
    if not name.endswith(extension):
        return False
    return not any(token in name for token in excludes)


def find_server_program(
    directory: Path,
    extension: str = ".jar",
    excludes: Iterable[str] = DEFAULT_EXCLUDES,
) -> Optional[str]:
    """
    Return the first top-level file name in ``directory`` that looks like the
    server jar, or None. Read errors are logged, not raised: a missing jar only
    means the Dockerfile is left alone.
    """
    excludes = tuple(excludes)
    try:
        names = sorted(p.name for p in Path(directory).iterdir())
    except OSError as e:
        log.error("Error reading temporary directory %s: %s", directory, e)
        return None

    for name in names:
        if is_server_program(name, extension, excludes):
            log.debug("Server program candidate: %s", name)
            return name
    return None
