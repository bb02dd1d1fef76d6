"""Packer configuration passed explicitly through the pipeline.

Every recognised toggle lives on ``PackerOptions``; nothing is read from
module-level state once the options object is built.
"""

from __future__ import annotations

import os
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# Environment variable -> PackerOptions field.
ENV_FIELDS: dict[str, str] = {
    "PACKER_JS_BACKEND": "js_backend",
    "PACKER_SECOND_PASS": "second_pass",
    "PACKER_REDUCE_EMBEDDED_SHADERS": "reduce_embedded_shaders",
    "PACKER_CONCURRENT": "concurrent",
    "PACKER_SCRIPT_TIMEOUT": "script_timeout",
    "PACKER_TERSER_COMMAND": "terser_command",
}


def _default_compress() -> dict[str, Any]:
    return {
        "passes": 3,
        "toplevel": True,
        "inline": 3,
        "pure_getters": True,
        "booleans_as_integers": True,
        "unsafe": True,
        "unsafe_math": True,
        "unsafe_arrows": True,
        "drop_debugger": True,
        "hoist_funs": True,
        "keep_fnames": True,
    }


class TerserOptions(BaseModel):
    """Options forwarded to the ``terser`` executable.

    Defaults favour size over safety, which is acceptable for small
    self-contained builds (game jam entries and the like).
    """

    model_config = ConfigDict(extra="forbid")

    ecma: int = 2020
    toplevel: bool = True
    keep_fnames: bool = True
    ascii_only: bool = True
    mangle: dict[str, Any] = Field(
        default_factory=lambda: {"toplevel": True, "safari10": True}
    )
    compress: dict[str, Any] = Field(default_factory=_default_compress)


class HtmlMinifyOptions(BaseModel):
    """Keyword arguments for ``minify_html.minify``.

    JS minification is always off at this stage (scripts are already
    minified) so it is not configurable here.
    """

    model_config = ConfigDict(extra="forbid")

    keep_comments: bool = False
    keep_closing_tags: bool = False
    keep_html_and_head_opening_tags: bool = False
    minify_doctype: bool = True
    minify_css: bool = True


class PackerOptions(BaseModel):
    """Configuration for one packer run.

    js_backend: ``rjsmin`` (pure Python) or ``terser`` (external executable).
    second_pass: run the JS minifier again over its own output.
    reduce_embedded_shaders: reduce shader-looking template literals in
        program code before JS minification.
    concurrent: dispatch script records concurrently.
    script_timeout: seconds allowed per terser call (``None`` = no limit).
        rjsmin runs in-process and is not bounded.
    """

    model_config = ConfigDict(extra="forbid")

    js_backend: Literal["rjsmin", "terser"] = "rjsmin"
    second_pass: bool = False
    reduce_embedded_shaders: bool = True
    concurrent: bool = True
    script_timeout: Optional[float] = Field(default=None, gt=0)
    terser_command: str = "terser"
    terser: TerserOptions = Field(default_factory=TerserOptions)
    html: HtmlMinifyOptions = Field(default_factory=HtmlMinifyOptions)

    @classmethod
    def from_env(
        cls, environ: Optional[dict[str, str]] = None, **overrides: Any
    ) -> PackerOptions:
        """Build options from ``PACKER_*`` variables plus explicit overrides.

        Overrides whose value is ``None`` are ignored so CLI flags that were
        not given fall through to the environment.

        Raises:
            pydantic.ValidationError: On an unknown backend or a value that
                cannot be coerced (e.g. ``PACKER_SCRIPT_TIMEOUT=soon``).
        """
        env = os.environ if environ is None else environ
        data: dict[str, Any] = {}
        for var, field_name in ENV_FIELDS.items():
            raw = env.get(var)
            if raw is not None and raw.strip() != "":
                data[field_name] = raw.strip()
        for key, val in overrides.items():
            if val is not None:
                data[key] = val
        return cls.model_validate(data)
