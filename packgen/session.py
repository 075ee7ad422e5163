from __future__ import annotations

import logging
import uuid
from collections import deque
from pathlib import Path
from typing import Deque, Dict, Iterable, List, Tuple

from packgen.entries import Entry, EntryEvents
from packgen.environment import infer_common
from packgen.ingest import discover_files, ingest_file
from packgen.resolve import MetadataResolver

logger = logging.getLogger("packgen")


class PackSession:
    """Entry table and FIFO resolution queue of one ingestion run.

    Entries are keyed by sha512. :meth:`reset` starts a new run: every entry
    is dropped and results that still arrive for the old run are ignored.
    """

    def __init__(self, resolver: MetadataResolver, extension: str = ".jar") -> None:
        self.resolver = resolver
        self.events = resolver.events
        self.extension = extension
        self.run_id = ""
        self.entries: Dict[str, Entry] = {}
        self.files_processed = 0
        self._queue: Deque[Entry] = deque()
        self.reset()

    def reset(self) -> str:
        self.run_id = uuid.uuid4().hex
        self.entries = {}
        self.files_processed = 0
        self._queue = deque()
        return self.run_id

    def is_current(self, entry: Entry) -> bool:
        return entry.run_id == self.run_id and self.entries.get(entry.sha512) is entry

    def add_file(self, path: Path) -> Entry | None:
        self.files_processed += 1
        entry = ingest_file(path, run_id=self.run_id, extension=self.extension)
        if entry is None:
            return None

        existing = self.entries.get(entry.sha512)
        if existing is not None:
            self.events.updated(existing)
            return existing

        self.entries[entry.sha512] = entry
        self._queue.append(entry)
        self.events.created(entry)
        return entry

    def resolve_pending(self) -> int:
        run_id = self.run_id
        count = 0
        while self._queue and self.run_id == run_id:
            entry = self._queue.popleft()
            self.resolver.resolve(entry, is_current=self.is_current)
            count += 1
        return count

    def run(self, paths: Iterable[str | Path]) -> Tuple[str | None, str | None]:
        """Ingest ``paths`` from scratch, resolving each file before the next."""
        run_id = self.reset()
        for path in discover_files(paths):
            if self.run_id != run_id:
                break
            if self.add_file(path) is not None:
                self.resolve_pending()
            logger.debug("%d files processed...", self.files_processed)
        return self.guess_target()

    def guess_target(self) -> Tuple[str | None, str | None]:
        game_version, loader = infer_common(self.entries.values())
        logger.info("Guessing Target: Loader -> %s Game Version -> %s", loader, game_version)
        return game_version, loader

    def ordered_entries(self) -> List[Entry]:
        return list(self.entries.values())

    def set_applies(self, filename: str, client: bool | None = None, server: bool | None = None) -> List[Entry]:
        matched = [entry for entry in self.entries.values() if entry.filename == filename]
        for entry in matched:
            if client is not None:
                entry.apply_client = client
            if server is not None:
                entry.apply_server = server
            self.events.updated(entry)
        return matched
