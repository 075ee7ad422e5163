from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from packgen.common import digest_pair
from packgen.entries import Entry


def discover_files(paths: Iterable[str | Path]) -> Iterator[Path]:
    """Yield candidate files, walking directories recursively in sorted order."""
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            for child in sorted(path.rglob("*")):
                if child.is_file():
                    yield child
        else:
            yield path


def ingest_file(path: Path, run_id: str = "", extension: str = ".jar") -> Entry | None:
    if not path.name.endswith(extension):
        return None

    data = path.read_bytes()
    sha1, sha512 = digest_pair(data)
    return Entry(
        sha1=sha1,
        sha512=sha512,
        filename=path.name,
        size_bytes=len(data),
        payload=data,
        run_id=run_id,
    )
