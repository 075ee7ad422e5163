from __future__ import annotations

import logging
from typing import Any, Callable

import requests

from packgen.entries import PENDING, Entry, EntryEvents
from packgen.errors import InvalidTransition
from packgen.registry.base import RegistryClient, RegistryLookupError
from packgen.registry.modrinth import parse_project, parse_version_file
from packgen.registry.ratelimit import RateLimitGate

logger = logging.getLogger("packgen")

LOOKUP_ERRORS = (requests.RequestException, RegistryLookupError, ValueError)


class StaleRun(Exception):
    """The entry belongs to a run that has been reset meanwhile."""


def _always_current(entry: Entry) -> bool:
    return True


class MetadataResolver:
    """Two-step registry lookup: file hash -> version file -> project.

    Any failure turns the entry into an override; there is no retry and no
    partially resolved state.
    """

    def __init__(
        self,
        client: RegistryClient,
        gate: RateLimitGate | None = None,
        events: EntryEvents | None = None,
    ) -> None:
        self.client = client
        self.gate = gate or RateLimitGate()
        self.events = events or EntryEvents()

    def _lookup(self, fetch: Callable[[], Any], parse: Callable[[Any], Any], entry: Entry, is_current) -> Any:
        self.gate.wait()
        response = fetch()
        self.gate.observe(response.headers)
        if not is_current(entry):
            raise StaleRun(entry.run_id)
        if response.status_code == 404:
            raise RegistryLookupError("404 Not Found!")
        response.raise_for_status()
        return parse(response.json())

    def resolve(self, entry: Entry, is_current: Callable[[Entry], bool] = _always_current) -> None:
        if entry.status != PENDING:
            raise InvalidTransition(f"{entry.filename}: already {entry.status}")
        try:
            version = self._lookup(
                lambda: self.client.get_version_file(entry.sha512), parse_version_file, entry, is_current
            )
            entry.project_id = version.project_id
            entry.downloads = version.downloads
            entry.game_versions = list(version.game_versions)
            entry.loaders = list(version.loaders)
            entry.download_url = version.download_url
            self.events.updated(entry)

            project = self._lookup(
                lambda: self.client.get_project(version.project_id), parse_project, entry, is_current
            )
        except StaleRun:
            logger.debug("Dropping registry result for %s from a superseded run", entry.filename)
            return
        except LOOKUP_ERRORS as exc:
            if not is_current(entry):
                return
            logger.info("Applying override for %s due to %s", entry.filename, exc)
            entry.mark_override(str(exc))
            self.events.updated(entry)
            return

        entry.display_name = project.title
        entry.description = project.description
        entry.icon_url = project.icon_url
        if project.slug:
            entry.slug = project.slug
        entry.mark_resolved()
        self.events.updated(entry)
