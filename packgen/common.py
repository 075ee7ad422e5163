from __future__ import annotations

import hashlib
import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Tuple


def digest_pair(data: bytes) -> Tuple[str, str]:
    """Return the (sha1, sha512) hex digests of ``data``."""
    return hashlib.sha1(data).hexdigest(), hashlib.sha512(data).hexdigest()


def human_file_size(size: int, si: bool = False, dp: int = 1) -> str:
    thresh = 1000 if si else 1024
    if abs(size) < thresh:
        return f"{size} B"

    units = (
        ["kB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB"]
        if si
        else ["KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB", "YiB"]
    )
    value = float(size)
    u = -1
    r = 10**dp
    while True:
        value /= thresh
        u += 1
        if not (round(abs(value) * r) / r >= thresh and u < len(units) - 1):
            break
    return f"{value:.{dp}f} {units[u]}"


def write_json(payload: Dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def write_bytes_atomic(data: bytes, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".part")
    try:
        tmp.write_bytes(data)
        tmp.replace(path)
    finally:
        if tmp.exists():
            tmp.unlink()
    return path


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def getenv(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)
