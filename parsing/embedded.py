"""Detection of shader source embedded in JS template literals.

WebGL programs commonly keep their shaders inline::

    const fs = `#version 300 es
    precision highp float;
    // tint
    void main() { ... }`;

Every backtick-delimited span is inspected.  A span is shader-like when it
holds a ``#version`` declaration or a ``precision <qualifier> <type>;``
statement and has no ``${...}`` substitution (those are only known at run
time and must not be rewritten).  Shader-like bodies are replaced with
``reduce_shader`` output inside the same backticks.

This is a heuristic, not a lexer.  Backslash escapes (including an escaped
backtick) are skipped when pairing delimiters, but a nested template
expression holding further backticks is not supported.  Missing a shader
is harmless; a non-shader literal that happens to contain ``#version``
would be reduced.
"""

from __future__ import annotations

import re

from parsing.shader import reduce_shader

_TEMPLATE_RE = re.compile(r"`((?:\\.|[^`\\])*)`")
_VERSION_RE = re.compile(r"#version\b")
_PRECISION_RE = re.compile(r"\bprecision\s+(?:lowp|mediump|highp)\s+\w+\s*;")
_SUBSTITUTION = "${"


def is_shader_like(body: str) -> bool:
    """Return True when a template literal body looks like shader code."""
    if _SUBSTITUTION in body:
        return False
    return bool(_VERSION_RE.search(body) or _PRECISION_RE.search(body))


def reduce_embedded_shaders(js: str) -> str:
    """Return *js* with shader-like template literal bodies reduced."""

    def _reduce(match: re.Match[str]) -> str:
        body = match.group(1)
        if not is_shader_like(body):
            return match.group(0)
        return f"`{reduce_shader(body)}`"

    return _TEMPLATE_RE.sub(_reduce, js)
