class UpdaterError(Exception):
    """Base exception for serverpack_updater."""


class ConfigMissingError(UpdaterError):
    """Raised when required configuration (the API key) is absent."""


class UpstreamResponseError(UpdaterError):
    """Raised when the CurseForge API returns an unexpected payload."""


class CatalogRequestError(UpstreamResponseError):
    """Raised when a CurseForge API request fails at the HTTP level."""


class NoMatchingReleaseError(UpdaterError):
    """Raised when no server pack matches the requested game version."""


class DownloadError(UpdaterError):
    """Raised when the server pack download fails."""


class ArchiveError(UpdaterError):
    """Raised when the server pack archive cannot be extracted."""


class ConfigWriteError(UpdaterError):
    """Raised when launch.sh or the Dockerfile cannot be read or written."""
