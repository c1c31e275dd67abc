"""Nexus CLI — Typer-based command-line interface.

Provides the ``nexus`` command with ``status``, ``graph``, ``dev``, ``sync``
and ``observers`` subcommands. Human output uses Rich; ``--json`` prints the
raw report.
"""
