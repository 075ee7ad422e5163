#!/usr/bin/env python
from __future__ import annotations

import argparse
from typing import List

from packgen.validate import validate_archive


def print_result(errors: List[str], warnings: List[str], fail_on_warning: bool = False) -> int:
    if errors:
        print("Pack validation failed with errors:")
        for item in errors:
            print(f"- ERROR: {item}")
    else:
        print("Pack validation errors: none")

    if warnings:
        print("Pack validation warnings:")
        for item in warnings:
            print(f"- WARNING: {item}")

    if errors or (fail_on_warning and warnings):
        return 1
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Validate a generated .mrpack archive")
    parser.add_argument("archive")
    parser.add_argument("--fail-on-warning", action="store_true", default=False)
    args = parser.parse_args()

    errors, warnings = validate_archive(args.archive)
    raise SystemExit(print_result(errors, warnings, args.fail_on_warning))


if __name__ == "__main__":
    main()
