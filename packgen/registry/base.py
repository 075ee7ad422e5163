from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Protocol


class RegistryLookupError(Exception):
    """A registry answer that cannot be used: not found or malformed."""


@dataclass(frozen=True)
class VersionFileInfo:
    project_id: str
    downloads: int | None
    game_versions: List[str] = field(default_factory=list)
    loaders: List[str] = field(default_factory=list)
    download_url: str | None = None


@dataclass(frozen=True)
class ProjectInfo:
    title: str
    description: str | None = None
    icon_url: str | None = None
    slug: str | None = None


class RegistryResponse(Protocol):
    status_code: int
    headers: Mapping[str, str]

    def json(self) -> Any:
        ...

    def raise_for_status(self) -> None:
        ...


class RegistryClient(Protocol):
    def get_version_file(self, sha512: str) -> RegistryResponse:
        ...

    def get_project(self, project_id: str) -> RegistryResponse:
        ...
