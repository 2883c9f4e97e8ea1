from __future__ import annotations
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .logging_setup import get_logger

log = get_logger("serverpack.updater.workspace")


@contextmanager
def scratch_workspace(path: Path) -> Iterator[Path]:
    """Create ``path`` for one run and remove it again on every exit path."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    log.debug("Scratch directory ready: %s", path)
    try:
        yield path
    finally:
        cleanup(path)


def cleanup(path: Path) -> None:
    """Best effort: a failed removal is logged and never masks the run's own error."""
    if not path.exists():
        return
    log.info("Cleaning up temporary directory: %s", path)
    try:
        shutil.rmtree(path)
    except OSError as e:
        log.warning("Failed to remove temporary directory %s: %s", path, e)
