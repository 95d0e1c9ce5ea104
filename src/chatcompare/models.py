"""
Defines the core Pydantic data models for the application.

These models serve as the formal, validated data contract between the backend
client, the dispatcher and the conversation store, aligning with conventions
from the OpenAI SDK where a wire format is involved.
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

# --- Constants ---
USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"
SYSTEM_ROLE = "system"
Role = Literal["user", "assistant", "system"]


# --- Models ---
class ChatMessage(BaseModel):
    """A role-tagged entry of the request envelope sent upstream."""

    role: Role
    content: str


class Usage(BaseModel):
    """Token counts reported by a backend for one completion."""

    model_config = ConfigDict(frozen=True)

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class Turn(BaseModel):
    """One entry of a target's displayed conversation."""

    model_config = ConfigDict(frozen=True)

    content: str
    is_user: bool
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ConversationState(BaseModel):
    """Snapshot of a single target's conversation.

    Snapshots are immutable. The store replaces a target's snapshot on every
    mutation, so an unchanged target keeps the very same object.
    """

    model_config = ConfigDict(frozen=True)

    target: str
    messages: Tuple[Turn, ...] = ()
    loading: bool = False
    error: Optional[str] = None
    usage: Optional[Usage] = None
    # Id of the user turn whose request is (or was last) in flight.
    request_id: Optional[str] = None


class Outcome(BaseModel):
    """Normalized result of one backend call: content or error, never both."""

    model_config = ConfigDict(frozen=True)

    target: str
    content: str = ""
    usage: Optional[Usage] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _content_xor_error(self) -> "Outcome":
        if self.error is not None and self.content:
            raise ValueError("an Outcome cannot carry both content and an error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, target: str, error: str) -> "Outcome":
        return cls(target=target, error=error)


class DispatchReport(BaseModel):
    """Aggregate result handed back to the caller once a batch has settled."""

    targets: List[str] = Field(default_factory=list)
    outcomes: Dict[str, Outcome] = Field(default_factory=dict)

    @property
    def responded(self) -> List[str]:
        return [t for t in self.targets if t in self.outcomes and self.outcomes[t].ok]

    @property
    def errors(self) -> Dict[str, str]:
        return {
            t: self.outcomes[t].error
            for t in self.targets
            if t in self.outcomes and not self.outcomes[t].ok
        }

    @property
    def received(self) -> int:
        """Number of targets that produced an assistant turn."""
        return len(self.responded)
