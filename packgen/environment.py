from __future__ import annotations

from functools import reduce
from typing import Iterable, List, Tuple

from packgen.entries import Entry


def _intersect(common: List[str], group: List[str]) -> List[str]:
    # An empty side is "no constraint": the other side wins.
    if not common:
        return list(group)
    if not group:
        return common
    return [value for value in common if value in group]


def common_values(groups: Iterable[List[str]]) -> List[str]:
    """Pairwise order-preserving intersection of ``groups``.

    Empty or missing groups do not constrain. An empty running result does
    not either, so after two disjoint groups the next group starts over.
    """
    return reduce(_intersect, (list(group or []) for group in groups), [])


def infer_common(entries: Iterable[Entry]) -> Tuple[str | None, str | None]:
    """Suggest the game version and loader shared by every resolved entry."""
    resolved = [entry for entry in entries if entry.is_resolved]
    versions = common_values(entry.game_versions for entry in resolved)
    loaders = common_values(entry.loaders for entry in resolved)
    return (versions[0] if versions else None, loaders[0] if loaders else None)
