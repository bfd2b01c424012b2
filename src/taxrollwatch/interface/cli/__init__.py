"""
CLI package for TaxRollWatch.

Contains command-line interface components.
"""

from .orchestrator import app


def main() -> None:
    """Console script entry point."""
    app()


__all__ = ["app", "main"]
