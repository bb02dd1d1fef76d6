"""JS minifier adapters.

Two backends sit behind ``minify_js``:

``rjsmin``
    Pure-Python whitespace/comment minifier.  Never mangles names.  The
    body is parsed with ``esprima`` first so invalid syntax is rejected
    instead of being minified into something else.
``terser``
    The ``terser`` executable, fed through stdin/stdout.  Compresses and
    mangles aggressively; rejects invalid syntax with a non-zero exit.

Both raise ``ScriptMinifyError`` on failure so the dispatcher can fall back
to the unminified text.
"""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING, Any

import esprima
import rjsmin

from packer.errors import ScriptMinifyError

if TYPE_CHECKING:
    from models.options import PackerOptions, TerserOptions


def _format_terser_value(val: Any) -> str:
    if isinstance(val, bool):
        return "true" if val else "false"
    return str(val)


def _format_terser_group(opts: dict[str, Any]) -> str:
    """Render ``{"passes": 3, "unsafe": True}`` as ``passes=3,unsafe=true``."""
    return ",".join(f"{k}={_format_terser_value(v)}" for k, v in opts.items())


def build_terser_args(command: str, opts: TerserOptions) -> list[str]:
    """Build the terser command line for *opts* (reads stdin, writes stdout)."""
    args = [command, "--ecma", str(opts.ecma)]
    if opts.toplevel:
        args.append("--toplevel")
    if opts.keep_fnames:
        args.append("--keep-fnames")
    if opts.compress:
        args += ["--compress", _format_terser_group(opts.compress)]
    if opts.mangle:
        args += ["--mangle", _format_terser_group(opts.mangle)]
    if opts.ascii_only:
        args += ["--format", "ascii_only=true"]
    return args


def _run_terser(source: str, options: PackerOptions) -> str:
    args = build_terser_args(options.terser_command, options.terser)
    try:
        proc = subprocess.run(
            args,
            input=source,
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=options.script_timeout,
            check=False,
        )
    except FileNotFoundError as exc:
        raise ScriptMinifyError(
            f"terser executable not found: {options.terser_command}"
        ) from exc
    except subprocess.TimeoutExpired as exc:
        raise ScriptMinifyError(
            f"terser timed out after {options.script_timeout}s"
        ) from exc

    if proc.returncode != 0:
        detail = (proc.stderr or "").strip().splitlines()
        raise ScriptMinifyError(
            detail[0] if detail else f"terser exited with code {proc.returncode}"
        )
    return proc.stdout.rstrip("\n")


def check_syntax(source: str) -> None:
    """Parse *source* as a classic script, then as a module.

    rjsmin never rejects its input, so bodies that are not valid JavaScript
    (template markup, plain text, typos) are caught here instead.

    Raises:
        ScriptMinifyError: If *source* parses as neither.
    """
    try:
        esprima.parseScript(source)
        return
    except Exception as exc:  # noqa: BLE001
        script_error = exc
    try:
        esprima.parseModule(source)
    except Exception:  # noqa: BLE001
        raise ScriptMinifyError(
            f"invalid JavaScript: {script_error}"
        ) from script_error


def _run_rjsmin(source: str) -> str:
    check_syntax(source)
    return rjsmin.jsmin(source, keep_bang_comments=False)


def minify_js(source: str, options: PackerOptions) -> str:
    """Minify *source* with the backend selected in *options*.

    Raises:
        ScriptMinifyError: When the backend rejects the source, is missing,
            or exceeds ``options.script_timeout``.
    """
    if options.js_backend == "terser":
        return _run_terser(source, options)
    return _run_rjsmin(source)
