"""Per-stage result types.

A stage either succeeds (``Ok``) or falls back to earlier text
(``Degraded``).  Both carry the text the next stage should use, so callers
never need to catch exceptions to keep the pipeline moving.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Ok(BaseModel):
    """Stage completed normally."""

    model_config = ConfigDict(extra="forbid")

    status: Literal["ok"] = "ok"
    text: str

    @property
    def degraded(self) -> bool:
        return False


class Degraded(BaseModel):
    """Stage failed; ``text`` is the fallback from the previous stage."""

    model_config = ConfigDict(extra="forbid")

    status: Literal["degraded"] = "degraded"
    text: str
    reason: str

    @property
    def degraded(self) -> bool:
        return True


StageResult = Annotated[
    Union[Ok, Degraded],
    Field(discriminator="status"),
]
