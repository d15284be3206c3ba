"""Operations on parsed hunks: patch building, lookup, and summaries."""

from __future__ import annotations

from collections.abc import Sequence

from gitsigns.models import Hunk, HunkSummary

__all__ = ["create_patch", "find_hunk", "find_nearest_hunk", "get_summary"]

_SWAP_MARKER = {"+": "-", "-": "+"}


def _invert_line(line: str) -> str:
    marker = _SWAP_MARKER.get(line[:1])
    return marker + line[1:] if marker else line


def create_patch(
    relpath: str,
    hunk: Hunk,
    mode_bits: str,
    invert: bool = False,
) -> list[str]:
    """Build a one-hunk patch for ``git apply --cached --unidiff-zero``.

    The old side of the hunk locates the change in the index; the new-side
    start is recomputed relative to it, so each hunk can be applied on its
    own regardless of other unstaged hunks above it.

    Args:
        relpath: Path of the file relative to the working tree root.
        hunk: The hunk to stage.
        mode_bits: Index file mode, e.g. ``"100644"``.
        invert: Swap old and new sides to reverse the hunk (unstage/undo).

    Returns:
        Patch lines, without trailing newlines.
    """
    old, new = hunk.removed, hunk.added
    lines = list(hunk.lines)
    if invert:
        old, new = new, old
        lines = [_invert_line(line) for line in lines]

    if old.count == 0:
        new_start = old.start + 1
    elif new.count == 0:
        new_start = old.start - 1
    else:
        new_start = old.start

    return [
        f"diff --git a/{relpath} b/{relpath}",
        f"index 000000..000000 {mode_bits}",
        f"--- a/{relpath}",
        f"+++ b/{relpath}",
        f"@@ -{old.start},{old.count} +{new_start},{new.count} @@",
        *lines,
    ]


def get_summary(hunks: Sequence[Hunk]) -> HunkSummary:
    """Count added, changed, and removed lines.

    A change hunk counts its overlapping lines as changed and the surplus
    on either side as added or removed.
    """
    added = changed = removed = 0
    for hunk in hunks:
        if hunk.type == "add":
            added += hunk.added.count
        elif hunk.type == "delete":
            removed += hunk.removed.count
        else:
            overlap = min(hunk.added.count, hunk.removed.count)
            changed += overlap
            added += hunk.added.count - overlap
            removed += hunk.removed.count - overlap
    return HunkSummary(added=added, changed=changed, removed=removed)


def find_hunk(lnum: int, hunks: Sequence[Hunk]) -> tuple[int, Hunk] | None:
    """Return the index and hunk covering working-copy line ``lnum``."""
    for index, hunk in enumerate(hunks):
        # Deletions above the first line are anchored at line 0
        if lnum == 1 and hunk.start == 0 and hunk.vend == 0:
            return index, hunk
        if hunk.start <= lnum <= hunk.vend:
            return index, hunk
    return None


def find_nearest_hunk(
    lnum: int,
    hunks: Sequence[Hunk],
    forwards: bool = True,
    wrap: bool = False,
) -> int | None:
    """Return the index of the next (or previous) hunk relative to ``lnum``."""
    if forwards:
        found = next((i for i, h in enumerate(hunks) if h.start > lnum), None)
    else:
        found = next(
            (i for i in range(len(hunks) - 1, -1, -1) if hunks[i].vend < lnum),
            None,
        )
    if found is None and wrap and hunks:
        found = 0 if forwards else len(hunks) - 1
    return found
