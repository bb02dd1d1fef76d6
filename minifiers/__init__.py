"""Adapters over the external JS and HTML/CSS minifiers."""

from minifiers.html import minify_document
from minifiers.js import build_terser_args, check_syntax, minify_js

__all__ = ["build_terser_args", "check_syntax", "minify_document", "minify_js"]
