"""Pipeline driver: read, extract, dispatch, reinsert, minify, write.

State machine::

    READING -> EXTRACTING -> DISPATCHING -> REINSERTING
            -> FINAL_MINIFYING -> WRITING -> DONE

``FAILED`` is reachable only from READING and WRITING (I/O errors).  A
failed final minify degrades to the reassembled, non-minified document and
the run continues to WRITING.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Union

from minifiers.html import minify_document
from minifiers.js import minify_js
from models.options import PackerOptions
from models.result import Degraded, Ok, StageResult
from models.script import ScriptRecord
from packer.dispatch import JsMinifier, dispatch_scripts
from packer.errors import DocumentMinifyError, InputReadError, OutputWriteError
from packer.reinsert import reinsert_scripts
from parsing.extractor import extract_scripts

logger = logging.getLogger("packer")

HtmlMinifier = Callable[[str, PackerOptions], str]
PathLike = Union[str, Path]

EXIT_OK = 0
EXIT_FAILED = 1


class PipelineState(str, Enum):
    """Stages of one packer run."""

    READING = "reading"
    EXTRACTING = "extracting"
    DISPATCHING = "dispatching"
    REINSERTING = "reinserting"
    FINAL_MINIFYING = "final_minifying"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PackResult:
    """Outcome of packing one document in memory."""

    text: str
    records: list[ScriptRecord] = field(default_factory=list)
    script_results: dict[int, StageResult] = field(default_factory=dict)
    document_result: StageResult | None = None

    @property
    def degraded_scripts(self) -> list[int]:
        """Indices of records that fell back to unminified text."""
        return sorted(i for i, r in self.script_results.items() if r.degraded)


def _enter(state: PipelineState) -> PipelineState:
    logger.debug("pipeline state -> %s", state.value, extra={"stage": state.value})
    return state


def final_minify(
    html: str,
    options: PackerOptions,
    html_minifier: HtmlMinifier = minify_document,
) -> StageResult:
    """Run the HTML/CSS minifier, falling back to *html* on failure."""
    try:
        return Ok(text=html_minifier(html, options))
    except DocumentMinifyError as exc:
        reason = str(exc)
    except Exception as exc:  # noqa: BLE001
        reason = f"{type(exc).__name__}: {exc}"
    logger.warning(
        "HTML minification failed, writing non-minified rebuilt version. "
        "Reason: %s",
        reason,
        extra={"stage": PipelineState.FINAL_MINIFYING.value},
    )
    return Degraded(text=html, reason=reason)


async def pack_document(
    html: str,
    options: PackerOptions | None = None,
    js_minifier: JsMinifier = minify_js,
    html_minifier: HtmlMinifier = minify_document,
) -> PackResult:
    """Pack *html* in memory (everything except file I/O).

    Never raises for minifier failures: each is recorded as a ``Degraded``
    result on the returned ``PackResult``.
    """
    options = options or PackerOptions()

    _enter(PipelineState.EXTRACTING)
    html_with_slots, records = extract_scripts(html)

    _enter(PipelineState.DISPATCHING)
    script_results = await dispatch_scripts(records, options, js_minifier)

    _enter(PipelineState.REINSERTING)
    rebuilt = reinsert_scripts(html_with_slots, records)

    _enter(PipelineState.FINAL_MINIFYING)
    document_result = final_minify(rebuilt, options, html_minifier)

    return PackResult(
        text=document_result.text,
        records=records,
        script_results=script_results,
        document_result=document_result,
    )


def pack(html: str, options: PackerOptions | None = None) -> str:
    """Synchronous wrapper around ``pack_document``; returns the final text."""
    return asyncio.run(pack_document(html, options)).text


def read_document(path: PathLike) -> str:
    """Read the input document.

    Raises:
        InputReadError: On any OS or decoding error.
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InputReadError(str(path), str(exc)) from exc


def write_document(path: PathLike, text: str) -> None:
    """Write the packed document.

    Raises:
        OutputWriteError: On any OS error.
    """
    try:
        Path(path).write_text(text, encoding="utf-8")
    except OSError as exc:
        raise OutputWriteError(str(path), str(exc)) from exc


async def run(
    input_path: PathLike,
    output_path: PathLike,
    options: PackerOptions | None = None,
    js_minifier: JsMinifier = minify_js,
    html_minifier: HtmlMinifier = minify_document,
) -> int:
    """Pack *input_path* into *output_path* and return the process exit code.

    Returns ``EXIT_FAILED`` only for input-read and output-write failures;
    every other failure degrades and still returns ``EXIT_OK``.
    """
    state = _enter(PipelineState.READING)
    try:
        html = read_document(input_path)
    except InputReadError as exc:
        _enter(PipelineState.FAILED)
        logger.error(str(exc), extra={"path": exc.path, "stage": state.value})
        return EXIT_FAILED

    result = await pack_document(html, options, js_minifier, html_minifier)

    state = _enter(PipelineState.WRITING)
    try:
        write_document(output_path, result.text)
    except OutputWriteError as exc:
        _enter(PipelineState.FAILED)
        logger.error(str(exc), extra={"path": exc.path, "stage": state.value})
        return EXIT_FAILED

    _enter(PipelineState.DONE)
    logger.info(
        "Packed -> %s",
        output_path,
        extra={
            "path": str(output_path),
            "bytes_in": len(html.encode("utf-8")),
            "bytes_out": len(result.text.encode("utf-8")),
        },
    )
    return EXIT_OK
