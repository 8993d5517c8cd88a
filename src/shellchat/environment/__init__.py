"""Process surface for the assistant client.

This package contains the user-facing scaffolding:
- Config bootstrap and first-run prompts
- The interactive read-line loop
- The command-line entry point and exit codes

Structure:
- session.py: Bootstrap and chat session
- cli/__main__.py: Typer application
"""
