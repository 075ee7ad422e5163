from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict

import yaml

from packgen import __version__
from packgen.common import getenv

MODRINTH_API_BASE = "https://api.modrinth.com/v2"
MODRINTH_FRONTEND = "https://modrinth.com"
MODRINTH_REWRITE_FRONTEND = "https://rewrite.modrinth.com"

OVERRIDE_PLACEMENTS = ("shared", "by_side")

DEFAULT_USER_AGENT = f"packgen/{__version__} (+https://github.com/packgen/packgen)"


@dataclass(frozen=True)
class RegistrySettings:
    api_base: str = MODRINTH_API_BASE
    frontend: str = MODRINTH_FRONTEND
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 30.0


@dataclass(frozen=True)
class PackSettings:
    payload_extension: str = ".jar"
    game: str = "minecraft"
    format_version: int = 1
    files_prefix: str = "mods/"
    override_placement: str = "shared"


@dataclass(frozen=True)
class PackgenSettings:
    registry: RegistrySettings = field(default_factory=RegistrySettings)
    pack: PackSettings = field(default_factory=PackSettings)
    source_path: str | None = None


def _section(payload: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = payload.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"settings section '{name}' must be a mapping")
    return section


def _apply_env(registry: RegistrySettings) -> RegistrySettings:
    changes: Dict[str, Any] = {}
    api_base = getenv("PACKGEN_API_BASE")
    if api_base:
        changes["api_base"] = api_base.rstrip("/")
    user_agent = getenv("PACKGEN_USER_AGENT")
    if user_agent:
        changes["user_agent"] = user_agent
    timeout = getenv("PACKGEN_TIMEOUT")
    if timeout:
        changes["timeout"] = float(timeout)
    if getenv("PACKGEN_PREFER_REWRITE"):
        changes["frontend"] = MODRINTH_REWRITE_FRONTEND
    return replace(registry, **changes) if changes else registry


def load_settings(path: str | Path | None = None) -> PackgenSettings:
    payload: Dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        with path.open("r", encoding="utf-8") as fh:
            payload = yaml.safe_load(fh) or {}

    registry_raw = _section(payload, "registry")
    pack_raw = _section(payload, "pack")

    registry = RegistrySettings(
        api_base=str(registry_raw.get("api_base", MODRINTH_API_BASE)).rstrip("/"),
        frontend=str(registry_raw.get("frontend", MODRINTH_FRONTEND)).rstrip("/"),
        user_agent=str(registry_raw.get("user_agent", DEFAULT_USER_AGENT)),
        timeout=float(registry_raw.get("timeout", 30.0)),
    )
    pack = PackSettings(
        payload_extension=str(pack_raw.get("payload_extension", ".jar")),
        game=str(pack_raw.get("game", "minecraft")),
        format_version=int(pack_raw.get("format_version", 1)),
        files_prefix=str(pack_raw.get("files_prefix", "mods/")),
        override_placement=str(pack_raw.get("override_placement", "shared")),
    )
    if pack.override_placement not in OVERRIDE_PLACEMENTS:
        raise ValueError(
            f"override_placement must be one of {', '.join(OVERRIDE_PLACEMENTS)}, got {pack.override_placement!r}"
        )

    return PackgenSettings(
        registry=_apply_env(registry),
        pack=pack,
        source_path=str(path) if path is not None else None,
    )
