from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List

import yaml

from packgen.assemble import PackFields, assemble_pack
from packgen.common import write_bytes_atomic
from packgen.config import OVERRIDE_PLACEMENTS, PackgenSettings, load_settings
from packgen.errors import EXIT_OK, AssemblyError, InputError, PackgenError, UsageError
from packgen.registry import ModrinthClient, RateLimitGate
from packgen.report import build_summary, entries_frame, write_report
from packgen.resolve import MetadataResolver
from packgen.session import PackSession

logger = logging.getLogger("packgen")


def build_session(settings: PackgenSettings, http: Any | None = None) -> PackSession:
    client = ModrinthClient(settings.registry, http=http)
    resolver = MetadataResolver(client, RateLimitGate())
    return PackSession(resolver, extension=settings.pack.payload_extension)


def run_build(
    mods: List[str],
    name: str,
    version_id: str = "1.0.0",
    summary: str = "",
    game_version: str | None = None,
    loader: str | None = None,
    loader_version: str | None = None,
    client_only: List[str] | None = None,
    server_only: List[str] | None = None,
    override_placement: str | None = None,
    config_path: str | None = None,
    out_dir: Path = Path("."),
    report_path: Path | None = None,
    http: Any | None = None,
) -> Dict[str, Any]:
    try:
        settings = load_settings(config_path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise UsageError(f"invalid settings file {config_path}: {exc}") from exc
    if override_placement:
        settings = replace(settings, pack=replace(settings.pack, override_placement=override_placement))

    session = build_session(settings, http=http)
    try:
        guessed_version, guessed_loader = session.run(mods)
    except OSError as exc:
        raise InputError(f"could not read input: {exc}") from exc

    for filename in client_only or []:
        if not session.set_applies(filename, client=True, server=False):
            logger.warning("No ingested file named %s", filename)
    for filename in server_only or []:
        if not session.set_applies(filename, client=False, server=True):
            logger.warning("No ingested file named %s", filename)

    fields = PackFields(
        name=name,
        version_id=version_id,
        summary=summary,
        game_version=game_version or guessed_version,
        loader=loader or guessed_loader,
        loader_version=loader_version,
    )
    if not fields.game_version:
        raise UsageError("no target game version given and none could be guessed; pass --game-version")

    entries = session.ordered_entries()
    archive = assemble_pack(entries, fields, settings.pack)
    try:
        archive_path = write_bytes_atomic(archive.data, Path(out_dir) / archive.filename)
    except OSError as exc:
        raise AssemblyError(f"could not write {archive.filename}: {exc}") from exc

    df = entries_frame(entries, settings.registry.frontend)
    result = build_summary(df, archive_path, fields.game_version, fields.loader)
    if report_path is not None:
        write_report(df, Path(report_path), result)
        result["report"] = str(report_path)
    return result


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build a Modrinth pack (.mrpack) from local mod files")
    parser.add_argument("--mods", action="append", required=True, help="mod file or folder (repeatable)")
    parser.add_argument("--name", required=True, help="pack name")
    parser.add_argument("--version-id", default="1.0.0")
    parser.add_argument("--summary", default="")
    parser.add_argument("--game-version", help="target game version (guessed when omitted)")
    parser.add_argument("--loader", help="target mod loader (guessed when omitted)")
    parser.add_argument("--loader-version", help="loader version to record as a dependency")
    parser.add_argument("--client-only", action="append", default=[], metavar="FILE")
    parser.add_argument("--server-only", action="append", default=[], metavar="FILE")
    parser.add_argument("--override-placement", choices=OVERRIDE_PLACEMENTS)
    parser.add_argument("--config", help="settings YAML file")
    parser.add_argument("--out-dir", default=".")
    parser.add_argument("--report", help="write a CSV report of every entry")
    parser.add_argument("--verbose", action="store_true", default=False)
    parser.add_argument("--debug", action="store_true", default=False, help="re-raise errors with tracebacks")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )

    try:
        result = run_build(
            mods=args.mods,
            name=args.name,
            version_id=args.version_id,
            summary=args.summary,
            game_version=args.game_version,
            loader=args.loader,
            loader_version=args.loader_version,
            client_only=args.client_only,
            server_only=args.server_only,
            override_placement=args.override_placement,
            config_path=args.config,
            out_dir=Path(args.out_dir),
            report_path=Path(args.report) if args.report else None,
        )
    except PackgenError as exc:
        if args.debug:
            raise
        print(f"ERROR: {exc}", file=sys.stderr)
        return exc.exit_code

    print(json.dumps(result, indent=2))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
