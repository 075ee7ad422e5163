from __future__ import annotations

import json
import re
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Tuple

from packgen.assemble import CLIENT_OVERRIDES, MANIFEST_NAME, SERVER_OVERRIDES, SHARED_OVERRIDES

HEX_LENGTHS = {"sha1": 40, "sha512": 128}
ENV_VALUES = {"required", "optional", "unsupported"}
REQUIRED_FIELDS = ["formatVersion", "game", "versionId", "name", "files", "dependencies"]
OVERRIDE_ROOTS = (SHARED_OVERRIDES, CLIENT_OVERRIDES, SERVER_OVERRIDES)

_HEX = re.compile(r"^[0-9a-f]+$")


def _validate_file(index: int, item: Any, errors: List[str], warnings: List[str]) -> None:
    label = f"files[{index}]"
    if not isinstance(item, dict):
        errors.append(f"{label} is not an object")
        return

    path = str(item.get("path", ""))
    if not path:
        errors.append(f"{label} missing path")
    elif path.startswith("/") or ".." in Path(path).parts:
        errors.append(f"{label} path escapes the instance folder: {path}")
    elif not path.startswith("mods/"):
        warnings.append(f"{label} path outside mods/: {path}")

    hashes = item.get("hashes") or {}
    for algo, length in HEX_LENGTHS.items():
        value = str(hashes.get(algo, ""))
        if len(value) != length or not _HEX.match(value):
            errors.append(f"{label} invalid {algo} hash")

    env = item.get("env") or {}
    for side in ("client", "server"):
        if env.get(side) not in ENV_VALUES:
            errors.append(f"{label} env.{side} must be one of {sorted(ENV_VALUES)}")

    if not isinstance(item.get("fileSize"), int) or item["fileSize"] < 0:
        errors.append(f"{label} invalid fileSize")

    downloads = item.get("downloads")
    if not isinstance(downloads, list) or not downloads:
        errors.append(f"{label} has no downloads")
    else:
        for url in downloads:
            if not isinstance(url, str) or not url.startswith("https://"):
                errors.append(f"{label} download is not an https url: {url}")


def validate_manifest(manifest: Dict[str, Any]) -> Tuple[List[str], List[str]]:
    errors: List[str] = []
    warnings: List[str] = []

    for field in REQUIRED_FIELDS:
        if field not in manifest:
            errors.append(f"manifest missing required field: {field}")

    if "formatVersion" in manifest and not isinstance(manifest["formatVersion"], int):
        errors.append("formatVersion must be an integer")

    deps = manifest.get("dependencies") or {}
    game = manifest.get("game") or "minecraft"
    if not deps.get(game):
        errors.append(f"dependencies.{game} is missing or empty")

    if not manifest.get("summary"):
        warnings.append("manifest has no summary")

    files = manifest.get("files")
    if isinstance(files, list):
        for index, item in enumerate(files):
            _validate_file(index, item, errors, warnings)
    elif files is not None:
        errors.append("files must be a list")

    return errors, warnings


def validate_archive(path: str | Path) -> Tuple[List[str], List[str]]:
    path = Path(path)
    if not zipfile.is_zipfile(path):
        return [f"{path} is not a zip archive"], []

    with zipfile.ZipFile(path) as zf:
        names = zf.namelist()
        if MANIFEST_NAME not in names:
            return [f"archive has no {MANIFEST_NAME}"], []
        try:
            manifest = json.loads(zf.read(MANIFEST_NAME).decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            return [f"{MANIFEST_NAME} is not valid JSON: {exc}"], []

    if not isinstance(manifest, dict):
        return [f"{MANIFEST_NAME} is not an object"], []

    errors, warnings = validate_manifest(manifest)
    for name in names:
        if name == MANIFEST_NAME or name.endswith("/"):
            continue
        if not name.startswith(OVERRIDE_ROOTS):
            errors.append(f"unexpected archive member outside overrides: {name}")
    return errors, warnings
