"""Command-line entry point for the single-file HTML packer.

Usage::

    python main.py                      # index.html -> index.min.html
    python main.py in.html out.html --js-backend terser --second-pass

Options not given on the command line fall back to ``PACKER_*``
environment variables, loaded from a ``.env`` file next to the input when
one exists.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from models.options import PackerOptions
from packer.pipeline import run

DEFAULT_INPUT = "index.html"
DEFAULT_OUTPUT = "index.min.html"
EXIT_USAGE = 2


# ---------------------------------------------------------------------------
# Structured JSON logging
# ---------------------------------------------------------------------------

class StructuredFormatter(logging.Formatter):
    """JSON-lines formatter for structured log output."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Include optional extra fields when present
        for key in ("script_index", "stage", "path", "bytes_in", "bytes_out"):
            val = getattr(record, key, None)
            if val is not None:
                log_data[key] = val
        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


logger = logging.getLogger("packer")


def configure_logging(verbose: bool = False) -> None:
    """Attach the JSON handler to the ``packer`` logger (idempotent)."""
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    # Prevent propagation to root logger to avoid duplicate output
    logger.propagate = False


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jampack",
        description="Pack one HTML file and its inline scripts into a minimized build.",
    )
    parser.add_argument("input", nargs="?", default=DEFAULT_INPUT)
    parser.add_argument("output", nargs="?", default=DEFAULT_OUTPUT)
    parser.add_argument(
        "--js-backend",
        choices=("rjsmin", "terser"),
        default=None,
        help="JS minifier (default: rjsmin, or PACKER_JS_BACKEND)",
    )
    parser.add_argument(
        "--second-pass",
        action="store_true",
        default=None,
        help="run the JS minifier a second time over its own output",
    )
    parser.add_argument(
        "--no-embedded-shaders",
        dest="reduce_embedded_shaders",
        action="store_false",
        default=None,
        help="leave shader code inside JS template literals untouched",
    )
    parser.add_argument(
        "--sequential",
        dest="concurrent",
        action="store_false",
        default=None,
        help="minify scripts one at a time",
    )
    parser.add_argument(
        "--timeout",
        dest="script_timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="per-script JS minifier time limit",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Parse *argv*, run the packer and return the exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    # Load .env from the input's directory so PACKER_* settings apply
    load_dotenv(Path(args.input).resolve().parent / ".env")

    try:
        options = PackerOptions.from_env(
            js_backend=args.js_backend,
            second_pass=args.second_pass,
            reduce_embedded_shaders=args.reduce_embedded_shaders,
            concurrent=args.concurrent,
            script_timeout=args.script_timeout,
        )
    except ValidationError as exc:
        logger.error("Invalid packer options: %s", exc, extra={"stage": "config"})
        return EXIT_USAGE

    return asyncio.run(run(args.input, args.output, options))


if __name__ == "__main__":
    sys.exit(main())
