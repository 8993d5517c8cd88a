"""Domain models for the assistant client.

Pydantic models for what goes over the wire (assistant spec), what is
stored locally (config file) and what a conversation turn produces
(outcome, reply).
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from shellchat.lib.errors import FormatError, ShellchatError
from shellchat.lib.json_value import JsonObject


class AssistantTool(BaseModel):
    type: str = Field(description="Tool kind, e.g. code_interpreter")


class AssistantSpec(BaseModel):
    """Payload for ``POST /assistants``."""

    model: str
    name: str
    instructions: str
    tools: list[AssistantTool] = Field(
        default_factory=lambda: [AssistantTool(type="code_interpreter")]
    )

    def to_payload(self) -> JsonObject:
        return self.model_dump(mode="json")


class StoredConfig(BaseModel):
    """Contents of the local config file."""

    api_key: str = ""
    assistant_id: str = ""


# =============================================================================
# RUN LIFECYCLE
# =============================================================================


class RunStatus(StrEnum):
    """Run statuses reported by the API.

    Only COMPLETED and FAILED end polling; every other value, including
    ones not listed here, keeps it going.
    """

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES: frozenset[str] = frozenset({RunStatus.COMPLETED, RunStatus.FAILED})


class RunOutcome(StrEnum):
    COMPLETED = "completed"
    FAILED = "failed"
    ERRORED = "errored"


class TurnPhase(StrEnum):
    """Step of a turn that produced an error, worded for display."""

    CREATING_THREAD = "creating thread"
    SENDING_MESSAGE = "sending message"
    CREATING_RUN = "creating run"
    GETTING_RUN_STATUS = "getting run status"
    RETRIEVING_MESSAGES = "retrieving messages"


class Reply(BaseModel):
    """Text pulled out of the newest assistant message."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    found: bool = Field(default=False, description="An assistant message was seen")
    lines: list[str] = Field(default_factory=list)
    errors: list[FormatError] = Field(default_factory=list, exclude=True)

    @property
    def text(self) -> str | None:
        return "\n\n".join(self.lines) if self.lines else None


class TurnResult(BaseModel):
    """How one user turn ended.

    ``phase`` and ``error`` describe an ERRORED turn; for a FAILED turn
    ``error`` holds the :class:`RunFailed`. ``reply`` is filled in once the
    messages of a completed turn have been fetched.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    outcome: RunOutcome
    thread_id: str
    run_id: str | None = None
    statuses: list[str] = Field(default_factory=list)
    phase: TurnPhase | None = None
    error: ShellchatError | None = Field(default=None, exclude=True)
    reply: Reply | None = None

    @property
    def polls(self) -> int:
        return len(self.statuses)
