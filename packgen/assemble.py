from __future__ import annotations

import io
import json
import logging
import zipfile
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from packgen.config import PackSettings
from packgen.entries import Entry
from packgen.errors import AssemblyError

logger = logging.getLogger("packgen")

MANIFEST_NAME = "modrinth.index.json"
PACK_EXTENSION = ".mrpack"

SHARED_OVERRIDES = "overrides/"
CLIENT_OVERRIDES = "client-overrides/"
SERVER_OVERRIDES = "server-overrides/"

LOADER_DEPENDENCY_KEYS = {
    "fabric": "fabric-loader",
    "quilt": "quilt-loader",
    "forge": "forge",
    "neoforge": "neoforge",
}


@dataclass(frozen=True)
class PackFields:
    name: str
    version_id: str = "1.0.0"
    summary: str = ""
    game_version: str | None = None
    loader: str | None = None
    loader_version: str | None = None


@dataclass(frozen=True)
class PackArchive:
    filename: str
    data: bytes
    manifest: Dict[str, Any]


def env_requirement(applies: bool) -> str:
    return "required" if applies else "unsupported"


def file_descriptor(entry: Entry, files_prefix: str = "mods/") -> Dict[str, Any]:
    return {
        "hashes": {
            "sha1": entry.sha1,
            "sha512": entry.sha512,
        },
        "env": {
            "client": env_requirement(entry.apply_client),
            "server": env_requirement(entry.apply_server),
        },
        "fileSize": entry.size_bytes,
        "path": files_prefix + entry.filename,
        "downloads": [entry.download_url],
    }


def dependencies(fields: PackFields, game: str = "minecraft") -> Dict[str, str]:
    if not fields.game_version:
        raise AssemblyError(f"{fields.name}: a target {game} version is required")
    deps = {game: fields.game_version}
    if fields.loader and fields.loader_version:
        key = LOADER_DEPENDENCY_KEYS.get(fields.loader.lower(), fields.loader.lower())
        deps[key] = fields.loader_version
    return deps


def check_install_paths(entries: Iterable[Entry], files_prefix: str = "mods/") -> None:
    """Reject two different files that would install to the same path.

    Overrides are extracted over the instance root, so ``overrides/mods/x.jar``
    and a manifest file at ``mods/x.jar`` collide as well.
    """
    seen: Dict[str, Entry] = {}
    for entry in entries:
        if not (entry.is_resolved or entry.is_override):
            continue
        path = files_prefix + entry.filename
        first = seen.setdefault(path, entry)
        if first is not entry:
            raise AssemblyError(
                f"{path} would be written twice: {first.filename} (sha1 {first.sha1[:12]}, {first.status}) "
                f"and {entry.filename} (sha1 {entry.sha1[:12]}, {entry.status})"
            )


def build_manifest(entries: Iterable[Entry], fields: PackFields, settings: PackSettings | None = None) -> Dict[str, Any]:
    settings = settings or PackSettings()
    entries = list(entries)
    check_install_paths(entries, settings.files_prefix)
    return {
        "formatVersion": settings.format_version,
        "name": fields.name,
        "game": settings.game,
        "versionId": fields.version_id,
        "summary": fields.summary,
        "files": [file_descriptor(entry, settings.files_prefix) for entry in entries if entry.is_resolved],
        "dependencies": dependencies(fields, settings.game),
    }


def override_dir(entry: Entry, placement: str = "shared", files_prefix: str = "mods/") -> str:
    """Directory inside the archive that receives an override's raw bytes.

    ``shared`` keeps every override in ``overrides/``. ``by_side`` sends
    client-only files to ``client-overrides/`` and server-only files to
    ``server-overrides/``.
    """
    root = SHARED_OVERRIDES
    if placement == "by_side":
        if entry.apply_client and not entry.apply_server:
            root = CLIENT_OVERRIDES
        elif entry.apply_server and not entry.apply_client:
            root = SERVER_OVERRIDES
    elif placement != "shared":
        raise ValueError(f"unknown override placement: {placement!r}")
    return root + files_prefix


def archive_filename(name: str) -> str:
    safe = name.replace("/", "_").replace("\\", "_").strip() or "pack"
    return safe + PACK_EXTENSION


def assemble_pack(entries: Iterable[Entry], fields: PackFields, settings: PackSettings | None = None) -> PackArchive:
    settings = settings or PackSettings()
    entries = list(entries)
    manifest = build_manifest(entries, fields, settings)
    overrides: List[Entry] = [entry for entry in entries if entry.is_override]

    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            zf.writestr(MANIFEST_NAME, json.dumps(manifest, indent=4))
            for entry in overrides:
                logger.info("Adding override %s", entry.filename)
                target = override_dir(entry, settings.override_placement, settings.files_prefix)
                zf.writestr(target + entry.filename, entry.payload)
    except (OSError, zipfile.LargeZipFile, MemoryError) as exc:
        raise AssemblyError(f"could not build {fields.name}{PACK_EXTENSION}: {exc}") from exc

    return PackArchive(filename=archive_filename(fields.name), data=buffer.getvalue(), manifest=manifest)
