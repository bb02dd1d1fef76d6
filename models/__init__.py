"""Public re-exports of all model types."""

from models.options import HtmlMinifyOptions, PackerOptions, TerserOptions
from models.result import Degraded, Ok, StageResult
from models.script import ScriptKind, ScriptRecord

__all__ = [
    # Scripts
    "ScriptKind",
    "ScriptRecord",
    # Stage results
    "Ok",
    "Degraded",
    "StageResult",
    # Configuration
    "PackerOptions",
    "TerserOptions",
    "HtmlMinifyOptions",
]
