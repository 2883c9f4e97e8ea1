"""
resolver.py — pick the newest server pack for a modpack / game version
----------------------------------------------------------------------
CurseForge lists every file of a modpack (client packs, server packs, betas).
Client pack entries carry a ``serverPackFileId`` pointing at the matching
server pack, which is a separate file record with its own download URL.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from .curseforge import CurseForgeClient
from .exceptions import NoMatchingReleaseError, UpstreamResponseError
from .logging_setup import get_logger
from .models import ArtifactDescriptor, FileMetadata, ResolvedRelease

log = get_logger("serverpack.updater.resolver")

ARCHIVE_SUFFIX = ".zip"


def strip_zip_suffix(file_name: str) -> str:
    """'ATM10-2.1.zip' -> 'ATM10-2.1'; names without the suffix are returned as-is."""
    if file_name.endswith(ARCHIVE_SUFFIX):
        return file_name[: -len(ARCHIVE_SUFFIX)]
    return file_name


def is_eligible(entry: FileMetadata, game_version: str) -> bool:
    if not entry.game_versions:
        return False
    return bool(entry.server_pack_file_id) and game_version in entry.game_versions


def select_latest(entries: Iterable[FileMetadata]) -> Optional[FileMetadata]:
    """Newest by file date. sorted() is stable, so equal dates keep listing order."""
    ordered = sorted(entries, key=lambda e: e.file_date, reverse=True)
    return ordered[0] if ordered else None


def parse_listing(raw: List[Dict[str, Any]]) -> List[FileMetadata]:
    files: List[FileMetadata] = []
    for item in raw:
        try:
            files.append(FileMetadata.model_validate(item))
        except ValidationError as e:
            log.debug("Skipping malformed file record %r: %s", item.get("id") if isinstance(item, dict) else item, e)
    return files


class VersionResolver:
    def __init__(self, client: CurseForgeClient):
        self.client = client

    def describe(self, mod_id: int, game_version: str) -> ArtifactDescriptor:
        listing = parse_listing(self.client.get_mod_files(mod_id))
        candidates = [f for f in listing if is_eligible(f, game_version)]
        log.debug("%d of %d files are server-pack candidates for %s", len(candidates), len(listing), game_version)
        return ArtifactDescriptor(mod_id=mod_id, game_version=game_version, candidates=candidates)

    def resolve_latest_server_release(self, mod_id: int, game_version: str) -> ResolvedRelease:
        log.info("Searching for latest server file for modpack %s on Minecraft %s...", mod_id, game_version)
        descriptor = self.describe(mod_id, game_version)

        chosen = select_latest(descriptor.candidates)
        if chosen is None:
            raise NoMatchingReleaseError(
                f"Could not find a server file for modpack {mod_id} and Minecraft version {game_version}."
            )

        # the listing entry has no direct link to the server pack
        server_pack = self.client.get_file(mod_id, chosen.server_pack_file_id)
        if not server_pack.download_url:
            raise UpstreamResponseError(
                f"Server pack {chosen.server_pack_file_id} of modpack {mod_id} has no download URL "
                "(third-party downloads may be disabled for this project)."
            )

        log.info("Found latest server version: %s (server file id %s)", chosen.display_name, chosen.server_pack_file_id)
        return ResolvedRelease(
            download_url=server_pack.download_url,
            version_label=strip_zip_suffix(chosen.file_name),
            archive_file_name=chosen.file_name,
            display_name=chosen.display_name,
            file_id=chosen.id,
            server_pack_file_id=chosen.server_pack_file_id,
            file_date=chosen.file_date,
        )
