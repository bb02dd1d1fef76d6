"""Script block extraction and placeholder slots.

The document is treated as text with exactly one structural feature: the
``<script>`` element.  Every match is swapped for an HTML comment slot that
embeds the record index, so reinsertion is a lookup by index and never a
positional guess.

Matching is case-insensitive on the tag name and non-greedy on the body:
the first ``</script>`` closes the element.  A body that contains a literal
``</script>`` string is therefore split; that is an accepted limitation of
a pattern-based extractor.
"""

from __future__ import annotations

import re

from models.script import ScriptRecord

SLOT_PREFIX = "SCRIPT_SLOT_"

SCRIPT_RE = re.compile(
    r"<script\b([^>]*)>([\s\S]*?)</script\s*>",
    re.IGNORECASE,
)

SLOT_RE = re.compile(rf"<!--{SLOT_PREFIX}(\d+)-->")


def slot_token(index: int) -> str:
    """Return the placeholder comment for record *index*."""
    return f"<!--{SLOT_PREFIX}{index}-->"


def extract_scripts(html: str) -> tuple[str, list[ScriptRecord]]:
    """Replace every script element in *html* with a placeholder slot.

    Returns:
        ``(html_with_slots, records)`` where ``records[i].index == i`` and
        the i-th slot in the returned text is ``slot_token(i)``.  Text
        outside the replaced spans is returned byte-for-byte.
    """
    records: list[ScriptRecord] = []

    def _to_slot(match: re.Match[str]) -> str:
        record = ScriptRecord(
            index=len(records),
            attributes=match.group(1).strip(),
            body=match.group(2),
        )
        records.append(record)
        return slot_token(record.index)

    html_with_slots = SCRIPT_RE.sub(_to_slot, html)
    return html_with_slots, records
