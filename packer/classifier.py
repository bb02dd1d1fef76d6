"""Script classification from raw opening-tag attribute text."""

from __future__ import annotations

import re

from models.script import ScriptKind

_TYPE_RE = re.compile(
    r"""(?:^|\s)type\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""",
    re.IGNORECASE,
)

SHADER_MIME_PREFIX = "x-shader/"
SHADER_LANGUAGE = "glsl"


def script_type(attributes: str) -> str:
    """Return the lower-cased ``type`` attribute value, or ``""`` if absent."""
    match = _TYPE_RE.search(attributes)
    if not match:
        return ""
    value = next(g for g in match.groups() if g is not None)
    return value.strip().lower()


def classify_script(attributes: str) -> ScriptKind:
    """Classify a script by its ``type`` attribute.

    ``x-shader/*`` types (e.g. ``x-shader/x-fragment``) and any type that
    mentions ``glsl`` are shader markup; everything else is program code.
    """
    value = script_type(attributes)
    if value.startswith(SHADER_MIME_PREFIX) or SHADER_LANGUAGE in value:
        return ScriptKind.SHADER
    return ScriptKind.PROGRAM
