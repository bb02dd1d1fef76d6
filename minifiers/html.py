"""HTML/CSS minifier adapter over ``minify_html``."""

from __future__ import annotations

from typing import TYPE_CHECKING

import minify_html

from packer.errors import DocumentMinifyError

if TYPE_CHECKING:
    from models.options import PackerOptions


def minify_document(html: str, options: PackerOptions) -> str:
    """Minify the reassembled document and its inline CSS.

    Whitespace collapsing and redundant attribute-quote removal are
    ``minify_html`` defaults.  JS minification is forced off because every
    script has already been through the JS stage.

    Raises:
        DocumentMinifyError: If ``minify_html`` raises for any reason.
    """
    kwargs = options.html.model_dump()
    try:
        return minify_html.minify(html, minify_js=False, **kwargs)
    except Exception as exc:  # noqa: BLE001
        raise DocumentMinifyError(f"{type(exc).__name__}: {exc}") from exc
