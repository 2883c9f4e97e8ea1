from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .archive import ArchiveExtractor
from .curseforge import CurseForgeClient
from .downloader import ArtifactFetcher
from .jar_locator import find_server_program
from .logging_setup import get_logger
from .models import ResolvedRelease
from .patcher import PatchResult, patch_build_file, patch_launch_script
from .planner import Plan, build_plan
from .resolver import VersionResolver
from .settings import Settings
from .workspace import scratch_workspace

log = get_logger("serverpack.updater.orch")


@dataclass(frozen=True)
class RunReport:
    release: ResolvedRelease
    server_jar: Optional[str]
    launch_script: PatchResult
    build_file: PatchResult

    def to_dict(self) -> dict:
        return {
            "version": self.release.version_label,
            "display_name": self.release.display_name,
            "server_pack_file_id": self.release.server_pack_file_id,
            "server_jar": self.server_jar,
            "launch_script": self.launch_script.to_dict(),
            "build_file": self.build_file.to_dict(),
        }


class Orchestrator:
    def __init__(
        self,
        settings: Settings,
        client: Optional[CurseForgeClient] = None,
        fetcher: Optional[ArtifactFetcher] = None,
        extractor: Optional[ArchiveExtractor] = None,
    ):
        self.settings = settings
        self.client = client or CurseForgeClient(
            settings.require_api_key(),
            settings.curseforge_base_url,
            timeout=settings.http_timeout,
            page_size=settings.page_size,
        )
        self.resolver = VersionResolver(self.client)
        self.fetcher = fetcher or ArtifactFetcher(timeout=settings.http_timeout)
        self.extractor = extractor or ArchiveExtractor(max_workers=settings.extract_workers)

    def resolve(self) -> ResolvedRelease:
        return self.resolver.resolve_latest_server_release(self.settings.modpack_id, self.settings.minecraft_version)

    def run(self) -> RunReport:
        s = self.settings
        log.info("Updating modpack %s server files (Minecraft %s)", s.modpack_id, s.minecraft_version)
        with scratch_workspace(s.temp_dir) as scratch:
            release = self.resolve()

            archive = scratch / s.server_file_name
            self.fetcher.download(release.download_url, archive)
            self.extractor.extract(archive, scratch)

            server_jar = find_server_program(scratch, s.jar_extension, s.jar_excludes)
            launch = patch_launch_script(s.launch_sh_path, release.version_label)
            build = patch_build_file(s.dockerfile_path, server_jar, s.container_jar_path)

        log.info("Update to %s complete.", release.version_label)
        return RunReport(release=release, server_jar=server_jar, launch_script=launch, build_file=build)

    def plan(self) -> Plan:
        """Resolve the release and describe a run without downloading or writing anything."""
        return build_plan(self.settings, self.resolve())
