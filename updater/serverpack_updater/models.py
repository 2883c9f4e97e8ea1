from __future__ import annotations
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class FileMetadata(BaseModel):
    """One entry of the CurseForge file listing for a mod(pack)."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    display_name: str = Field(default="", alias="displayName")
    file_name: str = Field(alias="fileName")
    file_date: datetime = Field(alias="fileDate")
    game_versions: Optional[List[str]] = Field(default=None, alias="gameVersions")
    server_pack_file_id: Optional[int] = Field(default=None, alias="serverPackFileId")


class FileDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    file_name: str = Field(default="", alias="fileName")
    download_url: Optional[str] = Field(default=None, alias="downloadUrl")


class ArtifactDescriptor(BaseModel):
    mod_id: int
    game_version: str
    candidates: List[FileMetadata] = Field(default_factory=list)


class ResolvedRelease(BaseModel):
    model_config = ConfigDict(frozen=True)

    download_url: str
    version_label: str = Field(..., description="File name without the .zip suffix")
    archive_file_name: str
    display_name: str
    file_id: int
    server_pack_file_id: int
    file_date: datetime
