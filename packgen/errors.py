"""Typed errors and CLI exit codes for packgen.

Recoverable registry failures never surface here: they turn an entry into an
override. These errors are the ones that end a run or an export attempt.
"""

from __future__ import annotations

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_GENERIC = 10
EXIT_INPUT = 12


class PackgenError(Exception):
    """Base error for packgen."""

    exit_code: int = EXIT_GENERIC


class UsageError(PackgenError):
    exit_code = EXIT_USAGE


class InputError(PackgenError):
    exit_code = EXIT_INPUT


class AssemblyError(PackgenError):
    exit_code = EXIT_GENERIC


class InvalidTransition(PackgenError):
    pass
