"""
Interface layer package.

Contains the typer command-line interface.
"""
