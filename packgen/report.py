from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable

import pandas as pd

from packgen.common import human_file_size, utc_now, write_json
from packgen.config import MODRINTH_FRONTEND
from packgen.entries import OVERRIDE, PENDING, RESOLVED, Entry

REPORT_COLUMNS = [
    "filename",
    "status",
    "name",
    "project_id",
    "project_url",
    "downloads",
    "game_versions",
    "loaders",
    "size",
    "size_bytes",
    "client",
    "server",
    "sha512",
    "failure_reason",
]


def entries_frame(entries: Iterable[Entry], frontend: str = MODRINTH_FRONTEND) -> pd.DataFrame:
    rows = [
        {
            "filename": entry.filename,
            "status": entry.status,
            "name": entry.display_name,
            "project_id": entry.project_id,
            "project_url": entry.project_url(frontend),
            "downloads": entry.downloads,
            "game_versions": ",".join(entry.game_versions),
            "loaders": ",".join(entry.loaders),
            "size": human_file_size(entry.size_bytes),
            "size_bytes": entry.size_bytes,
            "client": entry.apply_client,
            "server": entry.apply_server,
            "sha512": entry.sha512,
            "failure_reason": entry.failure_reason,
        }
        for entry in entries
    ]
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def status_counts(df: pd.DataFrame) -> Dict[str, int]:
    counts = {PENDING: 0, RESOLVED: 0, OVERRIDE: 0}
    if not df.empty:
        for status, count in df["status"].value_counts().items():
            counts[str(status)] = int(count)
    return counts


def build_summary(df: pd.DataFrame, archive_path: Path | None, game_version: str | None, loader: str | None) -> Dict[str, Any]:
    return {
        "generated_at": utc_now(),
        "archive": str(archive_path) if archive_path else None,
        "game_version": game_version,
        "loader": loader,
        "files": int(len(df)),
        "bytes_total": int(df["size_bytes"].sum()) if not df.empty else 0,
        "status": status_counts(df),
    }


def write_report(df: pd.DataFrame, path: Path, summary: Dict[str, Any] | None = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    if summary is not None:
        write_json(summary, path.with_suffix(".json"))
    return path
