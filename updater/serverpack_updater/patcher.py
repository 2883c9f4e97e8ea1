"""
patcher.py — in-place rewrites of launch.sh and the Dockerfile
---------------------------------------------------------------
Both patches are single-line regex substitutions (first match only). The
result object reports whether a line matched so callers can warn about files
that no longer have the expected shape.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .exceptions import ConfigWriteError
from .logging_setup import get_logger

log = get_logger("serverpack.updater.patch")

SERVER_VERSION_RE = re.compile(r"^SERVER_VERSION=.*$", re.MULTILINE)
COPY_DIRECTIVE_RE = re.compile(r"^(COPY|ADD)\s+\S+\.(jar|sh)\s+.*$", re.MULTILINE)

DEFAULT_CONTAINER_JAR = "/server/minecraft_server.jar"


@dataclass(frozen=True)
class PatchResult:
    path: Path
    matched: bool
    changed: bool
    skipped_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None

    def to_dict(self) -> dict:
        return {
            "path": str(self.path),
            "matched": self.matched,
            "changed": self.changed,
            "skipped_reason": self.skipped_reason,
        }


def _read(path: Path) -> str:
    try:
        # newline="" keeps CRLF files byte-identical outside the patched line
        with open(path, "r", encoding="utf-8", newline="") as fh:
            return fh.read()
    except OSError as e:
        raise ConfigWriteError(f"Cannot read {path}: {e}") from e


def _write(path: Path, text: str) -> None:
    try:
        with open(path, "w", encoding="utf-8", newline="") as fh:
            fh.write(text)
    except OSError as e:
        raise ConfigWriteError(f"Cannot write {path}: {e}") from e


def _substitute(pattern: re.Pattern, replacement: str, text: str) -> tuple[str, bool]:
    # a callable replacement keeps backslashes in version strings literal
    new_text, count = pattern.subn(lambda m: _keep_cr(m.group(0), replacement), text, count=1)
    return new_text, count > 0


def _keep_cr(original: str, replacement: str) -> str:
    # with newline="" a CRLF line matches as "...\r"
    return replacement + "\r" if original.endswith("\r") else replacement


def patch_launch_script(path: Path, version_label: str) -> PatchResult:
    path = Path(path)
    log.info("Updating %s with SERVER_VERSION=%s", path, version_label)
    text = _read(path)
    new_text, matched = _substitute(SERVER_VERSION_RE, f"SERVER_VERSION={version_label}", text)
    if not matched:
        log.warning("No SERVER_VERSION= line found in %s; file left unchanged.", path)
    _write(path, new_text)
    return PatchResult(path=path, matched=matched, changed=new_text != text)


def patch_build_file(
    path: Path,
    program_file_name: Optional[str],
    container_jar_path: str = DEFAULT_CONTAINER_JAR,
) -> PatchResult:
    path = Path(path)
    if not program_file_name:
        log.warning("Could not find server JAR file in extracted files. Skipping %s update.", path.name)
        return PatchResult(path=path, matched=False, changed=False, skipped_reason="no server jar located")
    if not path.exists():
        log.warning("%s not found. Skipping %s update.", path, path.name)
        return PatchResult(path=path, matched=False, changed=False, skipped_reason="build file not found")

    log.info("Updating %s with new server JAR file: %s", path, program_file_name)
    text = _read(path)
    new_text, matched = _substitute(COPY_DIRECTIVE_RE, f"COPY {program_file_name} {container_jar_path}", text)
    if not matched:
        log.warning("No COPY/ADD directive for a .jar/.sh file found in %s; file left unchanged.", path)
    _write(path, new_text)
    return PatchResult(path=path, matched=matched, changed=new_text != text)
