"""Group subpath-scoped changes by their top-level folder.

Used to display changes of a multi-project folder one project at a time.
"""

from __future__ import annotations

from collections.abc import Iterable

from syncgit.git.status import ChangeRecord, is_under_subpath, normalize_subpath

# Key for files that sit directly in the subpath (no further folder)
DIRECT_GROUP = "."


def relative_to_subpath(path: str, subpath: str) -> str:
    """Path relative to subpath ("" when path is the subpath itself)."""
    prefix = normalize_subpath(subpath)
    candidate = path.rstrip("/")
    if not prefix:
        return candidate
    if candidate == prefix:
        return ""
    return candidate[len(prefix) + 1 :]


def group_key(path: str, subpath: str) -> str:
    """Top-level folder of path below subpath, or DIRECT_GROUP."""
    relative = relative_to_subpath(path, subpath)
    head, sep, _ = relative.partition("/")
    if sep:
        return head
    # Collapsed untracked directory entry, e.g. "?? newdir/"
    if relative and path.endswith("/"):
        return relative
    return DIRECT_GROUP


def group_by_folder(
    records: Iterable[ChangeRecord], subpath: str
) -> dict[str, list[ChangeRecord]]:
    """Group records by first path segment below subpath.

    Groups appear in the order their first member appears in records, and
    members keep their original order. Records outside subpath are ignored.

    With subpath "" the lines ``M  src/a.go``, ``?? docs/readme.md`` and
    ``M  src/b.go`` give "src" (two records) then "docs" (one record). With
    subpath "src" both src records land in DIRECT_GROUP.

    """
    groups: dict[str, list[ChangeRecord]] = {}
    for record in records:
        if not is_under_subpath(record.path, subpath):
            continue
        groups.setdefault(group_key(record.path, subpath), []).append(record)
    return groups
