"""Shared fixtures for the packer test suite."""

from __future__ import annotations

import sys

import pytest

from models.options import PackerOptions


@pytest.fixture
def options() -> PackerOptions:
    return PackerOptions(concurrent=False)


@pytest.fixture
def echo_minifier():
    """JS minifier stand-in that tags its input so calls are visible."""

    def _minify(source: str, options: PackerOptions) -> str:
        return f"/*min*/{source.strip()}"

    return _minify


@pytest.fixture
def failing_minifier():
    from packer.errors import ScriptMinifyError

    def _minify(source: str, options: PackerOptions) -> str:
        raise ScriptMinifyError("Unexpected token")

    return _minify


@pytest.fixture(autouse=True)
def _packer_logger_propagates():
    """Keep the ``packer`` logger visible to caplog even after ``main()`` ran."""
    import logging

    pkg_logger = logging.getLogger("packer")
    handlers = list(pkg_logger.handlers)
    yield
    pkg_logger.handlers = handlers
    pkg_logger.propagate = True
    pkg_logger.setLevel(logging.NOTSET)


@pytest.fixture
def fake_terser(tmp_path):
    """Write a shell script that stands in for the ``terser`` executable.

    Returns a factory taking the script body and returning its path.
    """
    if sys.platform == "win32":
        pytest.skip("needs a POSIX shell")

    def _make(body: str) -> str:
        path = tmp_path / "terser"
        path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
        path.chmod(0o755)
        return str(path)

    return _make
