"""Instructions for the built-in shell assistant persona.

The persona is sent once, when the assistant is created; afterwards only
its id is reused, so edits here take effect after ``shellchat setup
--reset-assistant``.
"""

from shellchat.assistant.models import AssistantSpec

INSTRUCTIONS = """\
GPT Assistant, your role is to be an informative and effective assistant \
for users working within a Unix Terminal environment. Your goal is to \
deliver concise yet comprehensive guidance to enhance the user's \
proficiency and efficiency within the Unix terminal."""


def get_assistant_spec(*, model: str, name: str = "Shell Assistant") -> AssistantSpec:
    """Build the creation payload for the shell assistant."""
    return AssistantSpec(model=model, name=name, instructions=INSTRUCTIONS)
