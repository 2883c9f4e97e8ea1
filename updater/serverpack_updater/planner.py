"""
planner.py — dry-run description of an update
----------------------------------------------
Built from the resolved release and the current state of launch.sh and the
Dockerfile. Nothing is downloaded or written; the jar name stays unknown
because it is only found after extraction.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import ResolvedRelease
from .patcher import COPY_DIRECTIVE_RE, SERVER_VERSION_RE
from .settings import Settings

@dataclass
class PlanAction:
    action: str
    target: str
    detail: str
    paths: Dict[str, str]
    will_change: bool
    severity: str = "info"  # info|warn|error

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

@dataclass
class Plan:
    ok: bool
    actions: List[PlanAction]
    notes: List[str]
    release: Optional[Dict[str, Any]] = field(default=None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "release": self.release,
            "actions": [a.to_dict() for a in self.actions],
            "notes": list(self.notes),
        }


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8")
    except OSError:
        return None


def _launch_script_action(settings: Settings, version_label: str, notes: List[str]) -> PlanAction:
    path = settings.launch_sh_path
    action = PlanAction(
        action="patch_launch_script",
        target=f"SERVER_VERSION={version_label}",
        detail="replace SERVER_VERSION= line",
        paths={"file": str(path)},
        will_change=False,
    )
    text = _read_text(path)
    if text is None:
        action.severity = "error"
        action.detail = "launch script missing or unreadable"
        return action

    m = SERVER_VERSION_RE.search(text)
    if m is None:
        action.severity = "warn"
        action.detail = "no SERVER_VERSION= line; file would be left unchanged"
        return action

    current = m.group(0).split("=", 1)[1].strip()
    action.will_change = current != version_label
    if not action.will_change:
        notes.append(f"{path} already references {version_label}.")
    return action


def _build_file_action(settings: Settings) -> PlanAction:
    path = settings.dockerfile_path
    action = PlanAction(
        action="patch_build_file",
        target=f"COPY <server jar> {settings.container_jar_path}",
        detail="replace first COPY/ADD of a .jar/.sh",
        paths={"file": str(path)},
        will_change=True,
    )
    text = _read_text(path)
    if text is None:
        action.will_change = False
        action.severity = "warn"
        action.detail = "build file not found; would be skipped"
    elif COPY_DIRECTIVE_RE.search(text) is None:
        action.will_change = False
        action.severity = "warn"
        action.detail = "no COPY/ADD directive for a .jar/.sh; file would be left unchanged"
    return action


def build_plan(settings: Settings, release: ResolvedRelease) -> Plan:
    notes: List[str] = []
    actions = [
        PlanAction(
            action="download",
            target=release.display_name,
            detail=f"server pack file {release.server_pack_file_id}",
            paths={"url": release.download_url, "dest": str(settings.archive_path)},
            will_change=True,
        ),
        PlanAction(
            action="extract",
            target=settings.server_file_name,
            detail=f"unzip with up to {settings.extract_workers} workers",
            paths={"src": str(settings.archive_path), "dest": str(settings.temp_dir)},
            will_change=True,
        ),
        _launch_script_action(settings, release.version_label, notes),
        _build_file_action(settings),
        PlanAction(
            action="cleanup",
            target=str(settings.temp_dir),
            detail="remove scratch directory",
            paths={"dir": str(settings.temp_dir)},
            will_change=True,
        ),
    ]
    notes.append("Server jar name is only known after extraction.")
    return Plan(
        ok=not any(a.severity == "error" for a in actions),
        actions=actions,
        notes=notes,
        release={
            "version": release.version_label,
            "display_name": release.display_name,
            "file_id": release.file_id,
            "server_pack_file_id": release.server_pack_file_id,
            "file_date": release.file_date.isoformat(),
        },
    )
