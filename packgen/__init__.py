"""Build Modrinth packs (.mrpack) from a folder of local mod files."""

__version__ = "1.1.0"
