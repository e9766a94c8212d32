"""Logging setup shared by all CLI commands."""

from __future__ import annotations

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich; DEBUG with --verbose, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def root_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
):
    """Graph editor file tools and interaction replay."""
    configure_logging(verbose)
