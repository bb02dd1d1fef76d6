"""Per-record processing: classify, minify, rebuild the ``<script>`` tag.

Shader markup is reduced directly.  Program code goes through the
embedded-shader pass and then the JS minifier; if the minifier fails the
record keeps its post-shader-pass text and the failure is reported as a
``Degraded`` result.  A record is never dropped.

Records are independent of each other, so ``dispatch_scripts`` may run
them concurrently.  It returns only after every record is done, and the
output is keyed by ``index`` so completion order does not matter.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from minifiers.js import minify_js
from models.options import PackerOptions
from models.result import Degraded, Ok, StageResult
from models.script import ScriptKind, ScriptRecord
from packer.classifier import classify_script
from packer.errors import ScriptMinifyError
from parsing.embedded import reduce_embedded_shaders
from parsing.shader import reduce_shader

logger = logging.getLogger("packer")

JsMinifier = Callable[[str, PackerOptions], str]


def build_script_tag(attributes: str, body: str) -> str:
    """Rebuild a script element; a space precedes non-empty attributes only."""
    sep = " " if attributes else ""
    return f"<script{sep}{attributes}>{body}</script>"


async def _call_minifier(
    source: str, options: PackerOptions, js_minifier: JsMinifier
) -> str:
    """Run *js_minifier* off the event loop.

    ``script_timeout`` is enforced by the minifier itself (the terser
    backend kills its subprocess); a worker thread cannot be interrupted
    from here.
    """
    return await asyncio.to_thread(js_minifier, source, options)


async def minify_program(
    record: ScriptRecord,
    options: PackerOptions,
    js_minifier: JsMinifier = minify_js,
) -> StageResult:
    """Embedded-shader pass plus JS minification for one program record."""
    source = record.body
    if options.reduce_embedded_shaders:
        source = reduce_embedded_shaders(source)

    try:
        minified = await _call_minifier(source, options, js_minifier)
    except ScriptMinifyError as exc:
        return Degraded(text=source, reason=exc.reason)
    except Exception as exc:  # noqa: BLE001
        return Degraded(text=source, reason=f"{type(exc).__name__}: {exc}")

    if options.second_pass:
        try:
            minified = await _call_minifier(minified, options, js_minifier)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Second pass failed for script #%d, keeping first pass: %s",
                record.index,
                exc,
                extra={"script_index": record.index, "stage": "second_pass"},
            )

    return Ok(text=minified)


async def dispatch_record(
    record: ScriptRecord,
    options: PackerOptions,
    js_minifier: JsMinifier = minify_js,
) -> StageResult:
    """Classify *record*, process its body and set ``rebuilt_text``.

    Returns:
        ``Ok`` with the processed body, or ``Degraded`` carrying the
        pre-minification body and the failure reason.
    """
    record.kind = classify_script(record.attributes)

    if record.kind is ScriptKind.SHADER:
        result: StageResult = Ok(text=reduce_shader(record.body))
    else:
        result = await minify_program(record, options, js_minifier)

    if result.degraded:
        logger.warning(
            "Skipped minifying script #%d (likely non-JS or syntax error). "
            "Reason: %s",
            record.index,
            result.reason,
            extra={"script_index": record.index, "stage": "dispatch"},
        )

    record.rebuilt_text = build_script_tag(record.attributes, result.text)
    logger.debug(
        "Dispatched script #%d as %s",
        record.index,
        record.kind.value,
        extra={
            "script_index": record.index,
            "bytes_in": len(record.body),
            "bytes_out": len(result.text),
        },
    )
    return result


async def dispatch_scripts(
    records: list[ScriptRecord],
    options: PackerOptions,
    js_minifier: JsMinifier = minify_js,
) -> dict[int, StageResult]:
    """Dispatch every record and wait for all of them.

    Returns:
        Stage results keyed by record index.
    """
    if options.concurrent:
        results = await asyncio.gather(
            *(dispatch_record(r, options, js_minifier) for r in records)
        )
    else:
        results = [await dispatch_record(r, options, js_minifier) for r in records]
    return {r.index: res for r, res in zip(records, results)}
