"""ScriptRecord model: one extracted ``<script>`` element."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ScriptKind(str, Enum):
    """How a script body is processed by the dispatcher."""

    SHADER = "shader"
    PROGRAM = "program"


class ScriptRecord(BaseModel):
    """A script element pulled out of the document.

    ``index`` is dense and zero-based in document order and is the only key
    used to correlate a record with its placeholder slot.  ``attributes`` is
    the opening-tag attribute text with surrounding whitespace trimmed; it is
    never parsed into a mapping so vendor attributes survive untouched.

    ``kind`` and ``rebuilt_text`` stay ``None`` until the dispatcher fills
    them in.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    index: int = Field(ge=0)
    attributes: str = ""
    body: str = ""
    kind: Optional[ScriptKind] = None
    rebuilt_text: Optional[str] = None
