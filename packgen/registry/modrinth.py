from __future__ import annotations

from typing import Any, Dict, List

import requests

from packgen.config import RegistrySettings
from packgen.registry.base import ProjectInfo, RegistryLookupError, VersionFileInfo

HASH_ALGORITHM = "sha512"


class ModrinthClient:
    """Read-only client for the two registry endpoints used by the resolver.

    Methods return the raw response so the caller can feed its headers to the
    rate-limit gate before looking at the body.
    """

    def __init__(self, settings: RegistrySettings, http: Any | None = None) -> None:
        self.settings = settings
        self.http = http if http is not None else requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {
            "accept": "application/json",
            "User-Agent": self.settings.user_agent,
        }

    def _get(self, path: str, params: Dict[str, str] | None = None):
        return self.http.get(
            f"{self.settings.api_base}{path}",
            params=params,
            headers=self._headers(),
            timeout=self.settings.timeout,
        )

    def get_version_file(self, sha512: str):
        return self._get(f"/version_file/{sha512}", params={"algorithm": HASH_ALGORITHM})

    def get_project(self, project_id: str):
        return self._get(f"/project/{project_id}")


def _string_list(value: Any) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise RegistryLookupError(f"expected a list, got {type(value).__name__}")
    out: List[str] = []
    for item in value:
        text = str(item)
        if text not in out:
            out.append(text)
    return out


def parse_version_file(payload: Any) -> VersionFileInfo:
    if not isinstance(payload, dict):
        raise RegistryLookupError("version_file body is not an object")

    project_id = payload.get("project_id")
    if not project_id:
        raise RegistryLookupError("version_file body has no project_id")

    files = payload.get("files")
    if not isinstance(files, list) or not files or not isinstance(files[0], dict):
        raise RegistryLookupError("version_file body lists no files")
    download_url = files[0].get("url")
    if not download_url:
        raise RegistryLookupError("first version file has no url")

    downloads = payload.get("downloads")
    try:
        downloads = int(downloads) if downloads is not None else None
    except (TypeError, ValueError):
        raise RegistryLookupError(f"invalid downloads value: {downloads!r}") from None

    return VersionFileInfo(
        project_id=str(project_id),
        downloads=downloads,
        game_versions=_string_list(payload.get("game_versions")),
        loaders=_string_list(payload.get("loaders")),
        download_url=str(download_url),
    )


def parse_project(payload: Any) -> ProjectInfo:
    if not isinstance(payload, dict):
        raise RegistryLookupError("project body is not an object")
    title = payload.get("title")
    if not title:
        raise RegistryLookupError("project body has no title")
    return ProjectInfo(
        title=str(title),
        description=payload.get("description"),
        icon_url=payload.get("icon_url"),
        slug=payload.get("slug") or None,
    )
