from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List

from packgen.errors import InvalidTransition

PENDING = "pending"
RESOLVED = "resolved"
OVERRIDE = "override"

UNKNOWN_NAME = "Unknown"

EntryListener = Callable[[str, "Entry"], None]


@dataclass
class Entry:
    sha1: str
    sha512: str
    filename: str
    size_bytes: int
    payload: bytes = field(repr=False)
    run_id: str = ""
    status: str = PENDING
    apply_client: bool = True
    apply_server: bool = True

    project_id: str | None = None
    display_name: str | None = None
    description: str | None = None
    icon_url: str | None = None
    slug: str | None = None
    download_url: str | None = None
    game_versions: List[str] = field(default_factory=list)
    loaders: List[str] = field(default_factory=list)
    downloads: int | None = None
    failure_reason: str | None = None

    @property
    def is_resolved(self) -> bool:
        return self.status == RESOLVED

    @property
    def is_override(self) -> bool:
        return self.status == OVERRIDE

    def project_url(self, frontend: str) -> str | None:
        ref = self.slug or self.project_id
        if not ref:
            return None
        return f"{frontend.rstrip('/')}/mod/{ref}"

    def _leave_pending(self, target: str) -> None:
        if self.status != PENDING:
            raise InvalidTransition(f"{self.filename}: cannot move from {self.status} to {target}")
        self.status = target

    def mark_resolved(self) -> None:
        self._leave_pending(RESOLVED)

    def mark_override(self, reason: str) -> None:
        self._leave_pending(OVERRIDE)
        # Identity data from a half-finished lookup is never kept.
        self.project_id = None
        self.description = None
        self.icon_url = None
        self.slug = None
        self.download_url = None
        self.game_versions = []
        self.loaders = []
        self.downloads = None
        self.display_name = UNKNOWN_NAME
        self.failure_reason = reason


class EntryEvents:
    """Fan-out of "created" / "updated" notifications to subscribers."""

    CREATED = "created"
    UPDATED = "updated"

    def __init__(self) -> None:
        self._listeners: List[EntryListener] = []

    def subscribe(self, listener: EntryListener) -> None:
        self._listeners.append(listener)

    def emit(self, kind: str, entry: Entry) -> None:
        for listener in list(self._listeners):
            listener(kind, entry)

    def created(self, entry: Entry) -> None:
        self.emit(self.CREATED, entry)

    def updated(self, entry: Entry) -> None:
        self.emit(self.UPDATED, entry)
