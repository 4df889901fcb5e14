"""Command-line interface for inspecting client configuration files."""

from .main import main

__all__ = ["main"]
