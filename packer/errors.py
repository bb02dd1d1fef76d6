"""Error taxonomy for a packer run.

Only ``InputReadError`` and ``OutputWriteError`` abort a run.  The other
two are raised by the minifier adapters and converted into ``Degraded``
stage results by the dispatcher and the driver.
"""

from __future__ import annotations

from typing import Optional


class PackerError(Exception):
    """Base class for all packer errors."""


class InputReadError(PackerError):
    """The input document could not be read (fatal)."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f'Could not read input file "{path}": {reason}')
        self.path = path
        self.reason = reason


class OutputWriteError(PackerError):
    """The packed document could not be written (fatal)."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f'Failed to write output file "{path}": {reason}')
        self.path = path
        self.reason = reason


class ScriptMinifyError(PackerError):
    """The JS minifier rejected a script body (recoverable per record)."""

    def __init__(self, reason: str, index: Optional[int] = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.index = index


class DocumentMinifyError(PackerError):
    """The final HTML/CSS minify failed (recoverable for the document)."""
