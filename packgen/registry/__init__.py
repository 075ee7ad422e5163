from .base import ProjectInfo, RegistryClient, RegistryLookupError, VersionFileInfo
from .modrinth import ModrinthClient, parse_project, parse_version_file
from .ratelimit import RateLimitGate

__all__ = [
    "ModrinthClient",
    "ProjectInfo",
    "RateLimitGate",
    "RegistryClient",
    "RegistryLookupError",
    "VersionFileInfo",
    "parse_project",
    "parse_version_file",
]
