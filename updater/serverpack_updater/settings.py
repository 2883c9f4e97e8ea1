from __future__ import annotations
from pathlib import Path
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .curseforge import CURSEFORGE_API_URL
from .exceptions import ConfigMissingError

class Settings(BaseSettings):
    curseforge_api_key: str = Field(default="", alias="CURSEFORGE_API_KEY")
    curseforge_base_url: str = Field(default=CURSEFORGE_API_URL, alias="CURSEFORGE_BASE_URL")

    # modpack id is in the CurseForge project URL / "About Project" sidebar
    modpack_id: int = Field(default=925200, alias="MODPACK_ID")
    minecraft_version: str = Field(default="1.21", alias="MINECRAFT_VERSION")

    temp_dir: Path = Field(default=Path("./temp_server_files"), alias="TEMP_DIR")
    server_file_name: str = Field(default="server-files.zip", alias="SERVER_FILE_NAME")
    launch_sh_path: Path = Field(default=Path("launch.sh"), alias="LAUNCH_SH_PATH")
    dockerfile_path: Path = Field(default=Path("Dockerfile"), alias="DOCKERFILE_PATH")
    container_jar_path: str = Field(default="/server/minecraft_server.jar", alias="CONTAINER_JAR_PATH")

    jar_extension: str = Field(default=".jar", alias="JAR_EXTENSION")
    jar_excludes: List[str] = Field(default_factory=lambda: ["installer", "client"], alias="JAR_EXCLUDES")

    http_timeout: int = Field(default=30, alias="HTTP_TIMEOUT")
    page_size: int = Field(default=50, alias="CURSEFORGE_PAGE_SIZE")
    extract_workers: int = Field(default=5, alias="EXTRACT_WORKERS")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    log_file: Optional[Path] = Field(default=None, alias="LOG_FILE")

    model_config = SettingsConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    @property
    def archive_path(self) -> Path:
        return self.temp_dir / self.server_file_name

    def require_api_key(self) -> str:
        key = self.curseforge_api_key.strip()
        if not key:
            raise ConfigMissingError("CURSEFORGE_API_KEY environment variable is not set.")
        return key
