"""Porcelain status parsing and subpath filtering.

Parses ``git status --porcelain=v1`` output into ChangeRecord objects.
Each line has the form::

    XY <path>
    XY <old> -> <new>      (renames and copies)

where X is the index (staged) status and Y the worktree status. Paths are
always relative to the repository root. Paths containing special characters
are C-style quoted by git and are unquoted here.

Malformed lines are skipped so one bad line never hides the rest.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from syncgit.git.runner import run_git

logger = logging.getLogger(__name__)

# Characters git uses in either status column
STATUS_CHARS = frozenset(" MTADRCU?!")

# Unmerged combinations (both sides touched the path)
CONFLICT_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})

RENAME_SEPARATOR = " -> "

_C_ESCAPES = {
    "a": b"\a",
    "b": b"\b",
    "f": b"\f",
    "n": b"\n",
    "r": b"\r",
    "t": b"\t",
    "v": b"\v",
    "\\": b"\\",
    '"': b'"',
}


@dataclass(frozen=True)
class ChangeRecord:
    """One parsed status line.

    Attributes:
        code: Two-character porcelain status (e.g. "M ", "??", "R ").
        path: Repository-relative path; the new path for renames/copies.
        orig_path: Previous path for renames/copies, else None.

    """

    code: str
    path: str
    orig_path: str | None = None

    @property
    def index_status(self) -> str:
        return self.code[0]

    @property
    def worktree_status(self) -> str:
        return self.code[1]

    @property
    def is_untracked(self) -> bool:
        return self.code == "??"

    @property
    def is_ignored(self) -> bool:
        return self.code == "!!"

    @property
    def is_conflicted(self) -> bool:
        return self.code in CONFLICT_CODES

    @property
    def is_rename(self) -> bool:
        return self.orig_path is not None

    @property
    def is_staged(self) -> bool:
        """Index holds a change for this path."""
        if self.is_conflicted:
            return False
        return self.index_status not in (" ", "?", "!")

    @property
    def is_unstaged(self) -> bool:
        """Worktree differs from the index (untracked files included)."""
        if self.is_ignored:
            return False
        return self.worktree_status != " "

    def __str__(self) -> str:
        if self.orig_path is not None:
            return f"{self.code} {self.orig_path}{RENAME_SEPARATOR}{self.path}"
        return f"{self.code} {self.path}"


def _read_quoted(text: str) -> tuple[str, str] | None:
    """Decode a C-style quoted path at the start of text.

    Returns:
        (decoded path, remaining text), or None if the quoting is broken.

    """
    out = bytearray()
    i = 1
    while i < len(text):
        ch = text[i]
        if ch == '"':
            return out.decode("utf-8", errors="surrogateescape"), text[i + 1 :]
        if ch == "\\":
            i += 1
            if i >= len(text):
                return None
            esc = text[i]
            if esc in _C_ESCAPES:
                out += _C_ESCAPES[esc]
                i += 1
            elif esc in "01234567":
                digits = text[i : i + 3]
                if len(digits) != 3 or any(d not in "01234567" for d in digits):
                    return None
                out.append(int(digits, 8) & 0xFF)
                i += 3
            else:
                return None
            continue
        out += ch.encode("utf-8", errors="surrogateescape")
        i += 1
    return None


def unquote_path(path: str) -> str | None:
    """Undo git's C-style quoting; plain paths are returned unchanged."""
    if not path.startswith('"'):
        return path
    decoded = _read_quoted(path)
    if decoded is None or decoded[1]:
        return None
    return decoded[0]


def _split_rename(rest: str) -> tuple[str, str] | None:
    """Split ``old -> new`` into its two (unquoted) paths."""
    if rest.startswith('"'):
        decoded = _read_quoted(rest)
        if decoded is None or not decoded[1].startswith(RENAME_SEPARATOR):
            return None
        old, remainder = decoded[0], decoded[1][len(RENAME_SEPARATOR) :]
    else:
        if RENAME_SEPARATOR not in rest:
            return None
        old, remainder = rest.split(RENAME_SEPARATOR, 1)

    new = unquote_path(remainder)
    if not old or not new:
        return None
    return old, new


def parse_status_line(line: str) -> ChangeRecord | None:
    """Parse a single porcelain v1 line.

    Args:
        line: Raw line without trailing newline.

    Returns:
        ChangeRecord, or None if the line is malformed.

    """
    if len(line) < 4 or line[2] != " ":
        return None

    code = line[:2]
    if any(ch not in STATUS_CHARS for ch in code) or code == "  ":
        return None

    rest = line[3:]
    if "R" in code or "C" in code:
        pair = _split_rename(rest)
        if pair is None:
            return None
        return ChangeRecord(code=code, path=pair[1], orig_path=pair[0])

    path = unquote_path(rest)
    if not path:
        return None
    return ChangeRecord(code=code, path=path)


def parse_status_lines(lines: Iterable[str]) -> list[ChangeRecord]:
    """Parse porcelain v1 lines, skipping malformed ones.

    Branch header lines (``## main...origin/main``) are ignored.
    """
    records: list[ChangeRecord] = []
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line or line.startswith("##"):
            continue
        record = parse_status_line(line)
        if record is None:
            logger.debug("Skipping malformed status line: %r", line)
            continue
        records.append(record)
    return records


def parse_status(root: Path, untracked_files: str = "all") -> list[ChangeRecord]:
    """Run ``git status --porcelain=v1`` at root and parse it.

    Args:
        root: Repository root.
        untracked_files: Mode for ``--untracked-files`` ("all" lists files
            inside untracked directories individually).

    Returns:
        Records in the order git reported them.

    Raises:
        GitCommandError: If git status itself fails.

    """
    result = run_git(
        root, ["status", "--porcelain=v1", f"--untracked-files={untracked_files}"]
    )
    return parse_status_lines(result.stdout.splitlines())


def normalize_subpath(subpath: str) -> str:
    """Strip surrounding slashes and a lone "." so the root becomes ""."""
    cleaned = subpath.replace("\\", "/").strip("/")
    return "" if cleaned == "." else cleaned


def untracked_mode_for(subpath: str, configured: str) -> str:
    """Pick the ``--untracked-files`` mode for a status scoped to subpath.

    "normal" collapses a new directory to ``?? dir/``; below the root that
    entry can be broader than the subpath, so files are listed one by one.
    """
    if configured == "normal" and normalize_subpath(subpath):
        return "all"
    return configured


def is_under_subpath(path: str, subpath: str) -> bool:
    """True when path equals subpath or lies below it as whole segments."""
    prefix = normalize_subpath(subpath)
    if not prefix:
        return True
    candidate = path.rstrip("/")
    return candidate == prefix or candidate.startswith(prefix + "/")


def filter_by_subpath(records: Iterable[ChangeRecord], subpath: str) -> list[ChangeRecord]:
    """Keep records whose path falls under subpath (segment-wise prefix).

    ``"foo"`` matches ``"foo/x"`` and ``"foo"`` but never ``"foobar/x"``.
    """
    return [record for record in records if is_under_subpath(record.path, subpath)]


def split_by_subpath(
    records: Iterable[ChangeRecord], subpath: str
) -> tuple[list[ChangeRecord], list[ChangeRecord]]:
    """Partition records into (inside subpath, outside subpath)."""
    inside: list[ChangeRecord] = []
    outside: list[ChangeRecord] = []
    for record in records:
        (inside if is_under_subpath(record.path, subpath) else outside).append(record)
    return inside, outside


def has_staged(records: Iterable[ChangeRecord]) -> bool:
    """True if any record has a staged (index) change."""
    return any(record.is_staged for record in records)


def has_unstaged(records: Iterable[ChangeRecord]) -> bool:
    """True if any record has a worktree change or is untracked."""
    return any(record.is_unstaged for record in records)
