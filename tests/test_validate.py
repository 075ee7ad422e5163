from __future__ import annotations

import json
import zipfile
from pathlib import Path

from packgen.assemble import MANIFEST_NAME, PackFields, assemble_pack
from packgen.common import digest_pair
from packgen.entries import OVERRIDE, RESOLVED, Entry
from packgen.validate import validate_archive, validate_manifest


def _pack(tmp_path: Path) -> Path:
    sha1, sha512 = digest_pair(b"mod")
    resolved = Entry(
        sha1=sha1,
        sha512=sha512,
        filename="mod.jar",
        size_bytes=3,
        payload=b"mod",
        status=RESOLVED,
        download_url="https://cdn.modrinth.com/data/x/mod.jar",
    )
    sha1, sha512 = digest_pair(b"own")
    own = Entry(sha1=sha1, sha512=sha512, filename="own.jar", size_bytes=3, payload=b"own", status=OVERRIDE)
    archive = assemble_pack([resolved, own], PackFields(name="ok", summary="s", game_version="1.20.1"))
    path = tmp_path / archive.filename
    path.write_bytes(archive.data)
    return path


def test_assembled_pack_is_valid(tmp_path: Path) -> None:
    errors, warnings = validate_archive(_pack(tmp_path))
    assert errors == []
    assert warnings == []


def test_not_a_zip(tmp_path: Path) -> None:
    path = tmp_path / "broken.mrpack"
    path.write_bytes(b"nope")
    errors, _ = validate_archive(path)
    assert errors and "not a zip" in errors[0]


def test_missing_manifest_and_stray_members(tmp_path: Path) -> None:
    path = tmp_path / "stray.mrpack"
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("mods/loose.jar", b"x")
    errors, _ = validate_archive(path)
    assert errors == [f"archive has no {MANIFEST_NAME}"]

    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr(MANIFEST_NAME, json.dumps({"formatVersion": 1, "game": "minecraft", "versionId": "1",
                                               "name": "n", "files": [], "dependencies": {"minecraft": "1.20"}}))
        zf.writestr("mods/loose.jar", b"x")
    errors, warnings = validate_archive(path)
    assert errors == ["unexpected archive member outside overrides: mods/loose.jar"]
    assert warnings == ["manifest has no summary"]


def test_manifest_field_checks() -> None:
    manifest = {
        "formatVersion": "1",
        "game": "minecraft",
        "versionId": "1",
        "name": "n",
        "summary": "s",
        "dependencies": {"minecraft": ""},
        "files": [
            {
                "path": "../escape.jar",
                "hashes": {"sha1": "zz", "sha512": "0" * 128},
                "env": {"client": "required", "server": "maybe"},
                "fileSize": 3,
                "downloads": ["http://insecure.example/mod.jar"],
            }
        ],
    }

    errors, _ = validate_manifest(manifest)

    assert "formatVersion must be an integer" in errors
    assert "dependencies.minecraft is missing or empty" in errors
    assert "files[0] path escapes the instance folder: ../escape.jar" in errors
    assert "files[0] invalid sha1 hash" in errors
    assert any("env.server" in e for e in errors)
    assert any("not an https url" in e for e in errors)
