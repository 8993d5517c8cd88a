"""Assistants API domain code.

- client.py: Resource operations, one HTTP call each
- lifecycle.py: Message -> run -> poll state machine
- replies.py: Reply text extraction
- config.py: Configuration via pydantic-settings
- models.py: Domain models
- prompts.py: Shell assistant persona
"""
