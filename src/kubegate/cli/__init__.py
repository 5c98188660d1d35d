"""
kubegate CLI Package

This package exposes the top-level Typer `app` so tests and the console
entrypoint can import `kubegate.cli.app`.
"""

import logging

from .main import app

logger = logging.getLogger(__name__)

__all__ = ["app"]
