"""Command-line interface for etcdtls."""

from .main import app, main

__all__ = ["app", "main"]
