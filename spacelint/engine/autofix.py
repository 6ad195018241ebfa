"""
Applying autofix edits to source text.

Edits carry UTF-8 byte offsets into the text they were computed from. A
batch is applied in one pass: edits are taken in source order, an edit
that overlaps one already accepted is dropped (it is picked up on the next
analysis pass), and the accepted edits are spliced from the end of the
buffer backwards so earlier offsets stay valid.
"""

import difflib
from typing import Iterable, List, Tuple

from .types import Edit, Finding


def collect_edits(findings: Iterable[Finding]) -> List[Edit]:
    """Gather the autofix edits of all findings."""
    edits = []
    for finding in findings:
        if finding.autofix:
            edits.extend(finding.autofix)
    return edits


def select_edits(edits: Iterable[Edit]) -> Tuple[List[Edit], List[Edit]]:
    """Split edits into a non-overlapping accepted list and the skipped rest."""
    accepted: List[Edit] = []
    skipped: List[Edit] = []
    last_end = -1

    for edit in sorted(edits, key=lambda e: (e.start_byte, e.end_byte)):
        if edit.start_byte > edit.end_byte or edit.start_byte < last_end:
            skipped.append(edit)
            continue
        if accepted and edit == accepted[-1]:
            # duplicate edit from two findings
            continue
        accepted.append(edit)
        last_end = edit.end_byte

    return accepted, skipped


def apply_edits(text: str, edits: Iterable[Edit]) -> str:
    """Apply edits to text and return the new text."""
    accepted, _ = select_edits(edits)
    if not accepted:
        return text

    data = text.encode('utf-8')
    for edit in reversed(accepted):
        if edit.end_byte > len(data):
            continue
        data = data[:edit.start_byte] + edit.replacement.encode('utf-8') + data[edit.end_byte:]

    return data.decode('utf-8')


def unified_diff(original: str, fixed: str, path: str) -> str:
    """Render the change between two versions of a file as a unified diff."""
    return ''.join(difflib.unified_diff(
        original.splitlines(keepends=True),
        fixed.splitlines(keepends=True),
        fromfile=f"a/{path}",
        tofile=f"b/{path}",
    ))
