from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Tuple

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from packgen.config import MODRINTH_API_BASE, RegistrySettings
from packgen.entries import EntryEvents
from packgen.registry import ModrinthClient, RateLimitGate
from packgen.resolve import MetadataResolver
from packgen.session import PackSession

MALFORMED = object()


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, headers: Dict[str, str] | None = None) -> None:
        self.status_code = status_code
        self.headers = CaseInsensitiveDict(headers or {})
        self._payload = payload

    def json(self) -> Any:
        if self._payload is MALFORMED:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeHttp:
    """Stands in for requests.Session; routes are keyed by path below the API base."""

    def __init__(self) -> None:
        self.routes: Dict[str, Any] = {}
        self.calls: List[Tuple[str, Dict[str, str] | None, Dict[str, str]]] = []
        self.on_request = None

    def get(self, url: str, params=None, headers=None, timeout=None):
        assert url.startswith(MODRINTH_API_BASE)
        path = url[len(MODRINTH_API_BASE):]
        self.calls.append((path, params, dict(headers or {})))
        if self.on_request is not None:
            self.on_request(path)
        route = self.routes.get(path)
        if route is None:
            return FakeResponse(404, {"error": "not_found"})
        if isinstance(route, Exception):
            raise route
        return route

    def paths(self) -> List[str]:
        return [path for path, _, _ in self.calls]


def version_payload(project_id: str, versions=("1.20.1",), loaders=("fabric",), url: str | None = None) -> Dict[str, Any]:
    return {
        "project_id": project_id,
        "downloads": 1234,
        "game_versions": list(versions),
        "loaders": list(loaders),
        "files": [{"url": url or f"https://cdn.modrinth.com/data/{project_id}/versions/x/{project_id}.jar"}],
    }


def project_payload(title: str, slug: str | None = None) -> Dict[str, Any]:
    payload = {
        "title": title,
        "description": f"{title} description",
        "icon_url": f"https://cdn.modrinth.com/icons/{title}.png",
    }
    if slug:
        payload["slug"] = slug
    return payload


def write_jar(folder: Path, name: str, content: bytes) -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / name
    path.write_bytes(content)
    return path


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: List[float] = []

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PACKGEN_API_BASE", "PACKGEN_USER_AGENT", "PACKGEN_PREFER_REWRITE", "PACKGEN_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def http() -> FakeHttp:
    return FakeHttp()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def resolver(http: FakeHttp, clock: FakeClock) -> MetadataResolver:
    client = ModrinthClient(RegistrySettings(), http=http)
    return MetadataResolver(client, RateLimitGate(clock=clock.time, sleep=clock.sleep), EntryEvents())


@pytest.fixture
def session(resolver: MetadataResolver) -> PackSession:
    return PackSession(resolver)
