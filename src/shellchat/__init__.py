"""Terminal client for a remote conversational assistant.

Structure:
- shellchat/lib/: Parametric building blocks (no domain knowledge)
  - transport.py: JSON-over-HTTP adapter (httpx)
  - json_value.py: JSON value type and fallible field projections
  - polling.py: Poll-until-terminal helper (tenacity)
  - console.py: Colour formatting, terminal output, line input
  - store.py: JSON-file persistence for pydantic models
  - errors.py: Error taxonomy

- shellchat/assistant/: Assistants API domain code
  - client.py: Resource operations (assistants, threads, messages, runs)
  - lifecycle.py: Run lifecycle (send, run, poll)
  - replies.py: Reply extraction from message lists
  - config.py: Configuration via pydantic-settings
  - models.py: Domain models
  - prompts.py: Shell assistant persona

- shellchat/environment/: Process surface
  - session.py: Bootstrap and interactive session loop
  - cli/__main__.py: Typer entry point
"""
