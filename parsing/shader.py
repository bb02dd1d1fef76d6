"""Lexical reduction of shader (GLSL) source text.

Rules, applied in order:

1. Remove ``/* ... */`` comments anywhere, including across lines.
2. Per line: drop blank lines; keep preprocessor lines (``#...``) trimmed
   but otherwise verbatim; for every other line strip a trailing ``//``
   comment, collapse whitespace runs to one space, and drop it if nothing
   is left.
3. Join the surviving lines with ``\\n``.  Newlines are kept because
   directives are line-sensitive.

Step 1 repeats until no comment is left, so halves joined by a removal
are removed as well: ``a //*x*/* b */ c`` reduces to ``a c``, where a
real lexer would read a line comment and give ``a``.  Repeating keeps the
reduction idempotent.

String literals are not tracked, so ``//`` inside one is treated as a
comment.  Shader sources practically never contain such literals.
"""

from __future__ import annotations

import re

_BLOCK_COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/")
_LINE_COMMENT_RE = re.compile(r"(?<!\\)//.*$")
_WS_RE = re.compile(r"\s+")

DIRECTIVE_MARKER = "#"


def _strip_block_comments(src: str) -> str:
    # Removing one comment can join two halves into a new opener
    # ("//*a*/* b */" -> "/* b */"), so repeat until nothing changes.
    while True:
        stripped = _BLOCK_COMMENT_RE.sub("", src)
        if stripped == src:
            return stripped
        src = stripped


def _reduce_line(line: str) -> str:
    """Reduce one non-directive line; returns ``""`` when nothing survives."""
    line = _LINE_COMMENT_RE.sub("", line)
    return _WS_RE.sub(" ", line).strip()


def reduce_shader(src: str) -> str:
    """Return the comment-free, whitespace-reduced form of *src*.

    Idempotent: ``reduce_shader(reduce_shader(s)) == reduce_shader(s)``.
    """
    kept: list[str] = []
    for raw in _strip_block_comments(src).splitlines():
        line = raw.strip()
        if not line:
            continue
        if line.startswith(DIRECTIVE_MARKER):
            kept.append(line)
            continue
        line = _reduce_line(line)
        if line:
            kept.append(line)
    return "\n".join(kept)
