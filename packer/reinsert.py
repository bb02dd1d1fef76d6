"""Slot reinsertion: swap placeholder comments for rebuilt scripts."""

from __future__ import annotations

import logging
import re

from models.script import ScriptRecord
from parsing.extractor import SLOT_RE

logger = logging.getLogger("packer")


def reinsert_scripts(html_with_slots: str, records: list[ScriptRecord]) -> str:
    """Replace each record's slot with its ``rebuilt_text``.

    The text is scanned once, so inserted script text is never rescanned
    for slots.  Each index is substituted at most once (its first slot);
    slot-shaped text for an unknown or already-used index is left as is.
    The result depends only on the indices, not on the order of *records*.

    Raises:
        ValueError: If a record has not been dispatched yet.
    """
    rebuilt: dict[int, str] = {}
    for record in records:
        if record.rebuilt_text is None:
            raise ValueError(f"script #{record.index} has no rebuilt text")
        rebuilt[record.index] = record.rebuilt_text

    used: set[int] = set()

    def _fill(match: re.Match[str]) -> str:
        idx = int(match.group(1))
        if idx in used or idx not in rebuilt:
            return match.group(0)
        used.add(idx)
        return rebuilt[idx]

    html = SLOT_RE.sub(_fill, html_with_slots)

    for idx in sorted(set(rebuilt) - used):
        logger.warning(
            "No slot found for script #%d; it was not reinserted",
            idx,
            extra={"script_index": idx, "stage": "reinsert"},
        )
    return html
